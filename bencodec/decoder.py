import io
import logging
import re
from contextlib import contextmanager

from .errors import (
    DuplicateKeyError,
    IntegerOverflowError,
    LengthOverflowError,
    MalformedIntegerError,
    MalformedLengthError,
    MalformedTopLevelError,
    NegativeLengthError,
    NestingTooDeepError,
    TruncatedError,
    UnexpectedTokenError,
    UnsortedKeysError,
)
from .value import (
    DEFAULT_MAX_DEPTH,
    INT64_MAX,
    INT64_MIN,
    UINT64_MAX,
    Dictionary,
    Value,
)

logger = logging.getLogger(__name__)

DUPLICATE_KEY_POLICIES = ("reject", "last")

# Upper bound on a single read() from the source while filling a byte string
READ_CHUNK_SIZE = 64 * 1024

DECIMAL = re.compile(rb"-?[0-9]+")
CANONICAL_INTEGER = re.compile(rb"0|-?[1-9][0-9]*")
CANONICAL_LENGTH = re.compile(rb"0|[1-9][0-9]*")


def split_decimal(digits: bytes) -> tuple[bool, bytes]:
    """Sign and magnitude of a decimal, leading zeros dropped."""
    return digits.startswith(b"-"), digits.lstrip(b"-").lstrip(b"0") or b"0"


class Decoder:
    """Reads one bencoded document from `source`.

    `source` is a bytes-like object or a binary file-like object. Bytes are
    pulled from it one lookahead byte at a time, so a stream is left
    positioned right after the value that was decoded.

    Options:
        max_depth: how many lists/dictionaries may be nested
        duplicate_keys: "reject" raises DuplicateKeyError, "last" keeps the
            last value (the key keeps its first position in key_order)
        strict: also reject non canonical input (leading zeros, "-0",
            unsorted dictionary keys)
    """

    def __init__(
        self,
        source,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        duplicate_keys: str = "reject",
        strict: bool = False,
    ):
        if duplicate_keys not in DUPLICATE_KEY_POLICIES:
            raise ValueError(
                f"Unknown duplicate key policy {duplicate_keys!r}, "
                f"expected one of {DUPLICATE_KEY_POLICIES}"
            )

        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(source)
        elif not hasattr(source, "read"):
            raise TypeError(
                f"Bencode data should be bytes or a binary stream, not {type(source).__name__}"
            )

        self.source = source
        self.max_depth = max_depth
        self.duplicate_keys = duplicate_keys
        self.strict = strict

        self.offset = 0
        self.depth = 0
        self.lookahead = b""

    def decode(self) -> Dictionary:
        """Decode the top-level dictionary. Empty input gives an empty one."""
        c = self.peek()

        if not c:
            logger.debug("Empty bencode source, returning an empty dictionary")
            return Dictionary()

        if c != b"d":
            raise MalformedTopLevelError(
                f"Bencode data must begin with a dictionary, got {c!r}", self.offset
            )

        d = self.read_dict()
        logger.debug(f"Decoded dictionary with {len(d)} keys from {self.offset} bytes")
        return d

    def decode_value(self) -> Value:
        c = self.peek()
        match c:
            case b"":
                raise TruncatedError("Expected a value, got end of data", self.offset)

            case b"i":
                return self.read_integer()

            case b"l":
                return self.read_list()

            case b"d":
                return self.read_dict()

            case _ if c.isdigit() or c == b"-":
                return self.read_string()

            case _:
                raise UnexpectedTokenError(
                    f"Expected a value, got {c!r} instead", self.offset
                )

    def read_string(self) -> bytes:
        start = self.offset
        length = self.parse_length(self.read_until(b":"), start)
        return self.read_exactly(length)

    def read_integer(self) -> int:
        start = self.offset
        self.expect(b"i")
        return self.parse_integer(self.read_until(b"e"), start)

    def read_list(self) -> list:
        start = self.offset
        self.expect(b"l")

        lst = []
        with self.nested(start):
            while self.peek() != b"e":
                lst.append(self.decode_value())

        self.expect(b"e")

        return lst

    def read_dict(self) -> Dictionary:
        start = self.offset
        self.expect(b"d")

        d = Dictionary()
        with self.nested(start):
            while (c := self.peek()) != b"e":
                key_offset = self.offset

                if not c:
                    raise TruncatedError("Unterminated dictionary", key_offset)
                if not (c.isdigit() or c == b"-"):
                    raise UnexpectedTokenError(
                        f"Dictionary keys must be byte strings, got {c!r}", key_offset
                    )

                k = self.read_string()

                if k in d and self.duplicate_keys == "reject":
                    raise DuplicateKeyError(f"Duplicate dictionary key {k!r}", key_offset)

                if self.strict and d.key_order and k <= d.key_order[-1]:
                    raise UnsortedKeysError(
                        f"Dictionary keys are not sorted. {k!r} after {d.key_order[-1]!r}",
                        key_offset,
                    )

                d[k] = self.decode_value()

        self.expect(b"e")

        return d

    def parse_length(self, digits: bytes, start: int) -> int:
        if not DECIMAL.fullmatch(digits):
            raise MalformedLengthError(f"Invalid string length {digits!r}", start)

        negative, magnitude = split_decimal(digits)

        if negative and magnitude != b"0":
            raise NegativeLengthError(
                "String length can not be a negative number", start
            )
        if len(magnitude) > len(str(INT64_MAX)) or int(magnitude) > INT64_MAX:
            raise LengthOverflowError(
                "String length may not exceed the size of int64", start
            )
        if self.strict and not CANONICAL_LENGTH.fullmatch(digits):
            raise MalformedLengthError(
                f"String length {digits!r} is not in canonical form", start
            )

        return int(magnitude)

    def parse_integer(self, digits: bytes, start: int) -> int:
        if not DECIMAL.fullmatch(digits):
            raise MalformedIntegerError(f"Invalid integer {digits!r}", start)

        negative, magnitude = split_decimal(digits)
        if len(magnitude) > len(str(UINT64_MAX)):
            raise IntegerOverflowError(f"Integer {digits!r} does not fit in 64 bits", start)

        n = -int(magnitude) if negative else int(magnitude)
        if not INT64_MIN <= n <= UINT64_MAX:
            raise IntegerOverflowError(f"Integer {n} does not fit in 64 bits", start)

        if self.strict and not CANONICAL_INTEGER.fullmatch(digits):
            raise MalformedIntegerError(
                f"Integer {digits!r} is not in canonical form", start
            )

        return n

    @contextmanager
    def nested(self, start: int):
        if self.depth >= self.max_depth:
            raise NestingTooDeepError(
                f"Values nested deeper than {self.max_depth} levels", start
            )

        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def read_until(self, sentinel: bytes) -> bytes:
        payload = bytearray()
        while (c := self.advance()) != sentinel:
            payload += c
        return bytes(payload)

    def read_exactly(self, n: int) -> bytes:
        data = bytearray()
        if n and self.lookahead:
            data += self.advance()

        while len(data) < n:
            chunk = self.source.read(min(n - len(data), READ_CHUNK_SIZE))
            if not chunk:
                raise TruncatedError(
                    f"Expected {n} bytes of string data, got {len(data)}", self.offset
                )
            data += chunk
            self.offset += len(chunk)

        return bytes(data)

    def peek(self) -> bytes:
        if not self.lookahead:
            self.lookahead = self.source.read(1)
        return self.lookahead

    def advance(self) -> bytes:
        c = self.peek()
        if not c:
            raise TruncatedError("Unexpected end of data", self.offset)

        self.lookahead = b""
        self.offset += 1
        return c

    def expect(self, char: bytes) -> bytes:
        c = self.peek()
        if not c:
            raise TruncatedError(f"Expected {char!r}, got end of data", self.offset)
        if c != char:
            raise UnexpectedTokenError(f"Expected {char!r}, got {c!r} instead", self.offset)

        return self.advance()


def decode(source, **options) -> Dictionary:
    """Decode a bencoded document, whose top level must be a dictionary."""
    return Decoder(source, **options).decode()

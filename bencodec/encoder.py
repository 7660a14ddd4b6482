import logging
from collections.abc import Mapping
from contextlib import contextmanager
from typing import BinaryIO

from .errors import InvalidValueError
from .value import DEFAULT_MAX_DEPTH, Value, check_integer, check_key

logger = logging.getLogger(__name__)


class Encoder:
    def __init__(self, *, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth
        self.depth = 0

    def encode(self, obj: Value) -> bytes:
        bstr = self.encode_one(obj)
        logger.debug(f"Encoded {type(obj).__name__} into {len(bstr)} bytes")
        return bstr

    def encode_to(self, obj: Value, stream: BinaryIO) -> int:
        return stream.write(self.encode(obj))

    def encode_one(self, obj: Value) -> bytes:
        match obj:
            case bool():
                raise InvalidValueError(f"{obj!r} is a bool, use the integers 0 or 1")

            case Mapping():
                return self.encode_dict(obj)

            case list():
                return self.encode_list(obj)

            case int():
                return self.encode_int(obj)

            case bytes():
                return self.encode_string(obj)

            case _:
                raise InvalidValueError(
                    f"{type(obj).__name__} is not a bencode value: {obj!r}"
                )

    def encode_string(self, s: bytes) -> bytes:
        return str(len(s)).encode() + b":" + s

    def encode_int(self, i: int) -> bytes:
        # Unsigned values above INT64_MAX print the same way as signed ones
        return f"i{check_integer(i)}e".encode()

    def encode_list(self, lst: list) -> bytes:
        bstr = bytearray(b"l")
        with self.nested():
            for i in lst:
                bstr += self.encode_one(i)
        bstr += b"e"
        return bytes(bstr)

    def encode_dict(self, d: Mapping) -> bytes:
        bstr = bytearray(b"d")
        with self.nested():
            for k in sorted(check_key(k) for k in d):
                bstr.extend(self.encode_string(k))
                bstr.extend(self.encode_one(d[k]))
        bstr += b"e"
        return bytes(bstr)

    @contextmanager
    def nested(self):
        # Also stops on lists or dictionaries that contain themselves
        if self.depth >= self.max_depth:
            raise InvalidValueError(f"Values nested deeper than {self.max_depth} levels")

        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1


def encode(obj: Value) -> bytes:
    """Encode a value, with dictionary keys in canonical byte order."""
    return Encoder().encode(obj)

"""Bencode encoder and decoder.

    >>> from bencodec import decode, encode
    >>> d = decode(b"d8:announce4:abcd3:fooi1ee")
    >>> d[b"foo"]
    1
    >>> encode(d)
    b'd8:announce4:abcd3:fooi1ee'
"""

import logging
from pathlib import Path

from .decoder import Decoder, decode
from .encoder import Encoder, encode
from .errors import (
    BencodeError,
    DecodeError,
    DuplicateKeyError,
    IntegerOverflowError,
    InvalidValueError,
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
    check_value,
    is_unsigned,
)

logger = logging.getLogger(__name__)


def load(file: str | Path, **options) -> Dictionary:
    """Decode the bencoded file at `file`, e.g. a .torrent metainfo file."""
    with open(file, mode="rb") as f:
        d = Decoder(f, **options).decode()
    logger.debug(f"Loaded {file}")
    return d


def dump(obj: Value, file: str | Path) -> None:
    # Encode before opening so a bad value leaves the file untouched
    data = encode(obj)
    with open(file, mode="wb") as f:
        f.write(data)
    logger.debug(f"Wrote {len(data)} bytes to {file}")


__all__ = [
    "BencodeError",
    "DEFAULT_MAX_DEPTH",
    "DecodeError",
    "Decoder",
    "Dictionary",
    "DuplicateKeyError",
    "Encoder",
    "INT64_MAX",
    "INT64_MIN",
    "IntegerOverflowError",
    "InvalidValueError",
    "LengthOverflowError",
    "MalformedIntegerError",
    "MalformedLengthError",
    "MalformedTopLevelError",
    "NegativeLengthError",
    "NestingTooDeepError",
    "TruncatedError",
    "UINT64_MAX",
    "UnexpectedTokenError",
    "UnsortedKeysError",
    "Value",
    "check_value",
    "decode",
    "dump",
    "encode",
    "is_unsigned",
    "load",
]

"""The values exchanged between the decoder and the encoder.

A bencode value is one of four kinds:

    bytes        a byte string
    int          an integer between INT64_MIN and UINT64_MAX
    list         an ordered list of values
    Dictionary   a mapping of byte string keys to values

Integers above INT64_MAX are the unsigned variant, everything else in range
is the signed one. Text (`str`), `bool`, floats and `None` are not values.
"""

from collections.abc import Iterable, Iterator, Mapping, MutableMapping

from .errors import InvalidValueError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

# How many lists/dictionaries may be nested, both when decoding and encoding
DEFAULT_MAX_DEPTH = 256


def is_unsigned(n: int) -> bool:
    """True when `n` only fits the unsigned 64-bit variant."""
    return INT64_MAX < n <= UINT64_MAX


def check_key(key) -> bytes:
    if not isinstance(key, bytes):
        raise InvalidValueError(
            f"Dictionary keys must be bytes, got {type(key).__name__}: {key!r}"
        )
    return key


def check_integer(n: int) -> int:
    if not INT64_MIN <= n <= UINT64_MAX:
        raise InvalidValueError(f"Integer {n} does not fit in 64 bits")
    return n


def check_kind(value) -> None:
    """Check that `value` is one of the four kinds, without looking inside it."""
    match value:
        case bool():
            raise InvalidValueError(f"{value!r} is a bool, use the integers 0 or 1")

        case int():
            check_integer(value)

        case bytes() | list() | Mapping():
            pass

        case _:
            raise InvalidValueError(
                f"{type(value).__name__} is not a bencode value: {value!r}"
            )


def check_value(value) -> None:
    """Recursively check a whole value tree, raising InvalidValueError."""
    check_kind(value)

    match value:
        case list():
            for item in value:
                check_value(item)

        case Mapping():
            for key, item in value.items():
                check_key(key)
                check_value(item)


class Dictionary(MutableMapping):
    """A bencode dictionary.

    Lookups go through `entries`. `key_order` lists the keys in the order they
    were inserted, which for a decoded dictionary is the order they appeared
    in the source bytes. Neither order matters to the encoder, which always
    writes keys sorted byte-wise (see `canonical_keys`).

    Keys and values are checked when they are set, so a Dictionary never
    holds something the encoder cannot write. Lists nested inside are plain
    lists and are only checked when encoded.
    """

    def __init__(self, items: Mapping | Iterable[tuple[bytes, object]] = ()):
        self.entries: dict[bytes, "Value"] = {}
        self.key_order: list[bytes] = []
        self.update(items)

    def __getitem__(self, key: bytes) -> "Value":
        return self.entries[key]

    def __setitem__(self, key: bytes, value: "Value"):
        check_key(key)
        check_kind(value)

        if key not in self.entries:
            self.key_order.append(key)
        self.entries[key] = value

    def __delitem__(self, key: bytes):
        del self.entries[key]
        self.key_order.remove(key)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.key_order)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key) -> bool:
        return key in self.entries

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"

    def canonical_keys(self) -> list[bytes]:
        return sorted(self.entries)

    def copy(self) -> "Dictionary":
        return Dictionary(self)


Value = bytes | int | list | Dictionary

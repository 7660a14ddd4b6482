class BencodeError(Exception):
    pass


class DecodeError(BencodeError, ValueError):
    def __init__(self, message: str, offset: int | None = None):
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)
        self.offset = offset


class MalformedTopLevelError(DecodeError):
    pass


class UnexpectedTokenError(DecodeError):
    pass


class TruncatedError(DecodeError):
    pass


class MalformedLengthError(DecodeError):
    pass


class NegativeLengthError(MalformedLengthError):
    pass


class LengthOverflowError(MalformedLengthError):
    pass


class MalformedIntegerError(DecodeError):
    pass


class IntegerOverflowError(MalformedIntegerError):
    pass


class DuplicateKeyError(DecodeError):
    pass


class UnsortedKeysError(DecodeError):
    pass


class NestingTooDeepError(DecodeError):
    pass


class InvalidValueError(BencodeError, TypeError):
    pass

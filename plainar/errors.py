class ArError(Exception):
    """Base class for plainar-specific errors."""


# Malformed input (reading)
class FormatError(ArError, ValueError):
    pass


class BadMagicError(FormatError):
    pass


class BadEndMarkerError(FormatError):
    pass


class BadNumericFieldError(FormatError):
    pass


class BadNameError(FormatError):
    pass


class TruncatedArchiveError(FormatError):
    pass


# Values that do not fit their header field (writing)
class FieldRangeError(ArError, ValueError):
    pass


class NameTooLongError(FieldRangeError):
    pass


class NumberTooLargeError(FieldRangeError):
    pass

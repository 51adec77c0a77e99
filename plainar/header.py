from __future__ import annotations

from typing import Tuple

from .constants import (
    HEADER_END,
    HEADER_SIZE,
    NAME_FIELD,
    MTIME_FIELD,
    UID_FIELD,
    GID_FIELD,
    MODE_FIELD,
    SIZE_FIELD,
    END_FIELD,
    DEFAULT_MTIME,
    DEFAULT_UID,
    DEFAULT_GID,
    DEFAULT_MODE,
)
from .errors import (
    BadEndMarkerError,
    BadNameError,
    BadNumericFieldError,
    NameTooLongError,
    NumberTooLargeError,
)


# Member header (fixed 60 bytes, all ASCII text)
#  - name[16]   space padded, GNU writers append '/'
#  - mtime[12]  decimal
#  - uid[6]     decimal
#  - gid[6]     decimal
#  - mode[8]    octal
#  - size[10]   decimal, body length in bytes
#  - end[2]     "`\n"


def encode_name(name: str, width: int = NAME_FIELD[1]) -> bytes:
    raw = name.encode("utf-8")
    if len(raw) > width:
        raise NameTooLongError(f"member name {name!r} is {len(raw)} bytes; limit is {width}")
    return raw.ljust(width, b" ")


def decode_name(field: bytes) -> str:
    """Strip space padding, then a single trailing '/'.

    A name that genuinely ends in '/' therefore loses it on the way back.
    """
    raw = field.rstrip(b" ")
    if raw.endswith(b"/"):
        raw = raw[:-1]
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BadNameError(f"member name is not valid UTF-8: {field!r}") from exc


def encode_number(value: int, width: int, base: int = 10) -> bytes:
    if value < 0:
        raise NumberTooLargeError(f"negative value {value} cannot be stored in a header field")
    digits = format(value, "o" if base == 8 else "d").encode("ascii")
    if len(digits) > width:
        raise NumberTooLargeError(f"value {value} needs {len(digits)} digits; field holds {width}")
    return digits.ljust(width, b" ")


def decode_number(field: bytes, base: int = 10) -> int:
    """Accumulate digits left to right until the first space after them.

    Leading spaces are tolerated and an all-space field reads as 0.
    """
    value = 0
    seen_digit = False
    for ch in field:
        if ch == 0x20:
            if seen_digit:
                break
            continue
        d = ch - 0x30
        if not 0 <= d < base:
            raise BadNumericFieldError(f"invalid base-{base} digit {chr(ch)!r} in header field {field!r}")
        value = value * base + d
        seen_digit = True
    return value


def _field(header: bytes, layout) -> bytes:
    off, width = layout
    return header[off : off + width]


def pack_header(
    name: str,
    size: int,
    *,
    mtime: int = DEFAULT_MTIME,
    uid: int = DEFAULT_UID,
    gid: int = DEFAULT_GID,
    mode: int = DEFAULT_MODE,
) -> bytes:
    # Raises before the caller has written anything for this member
    return (
        encode_name(name, NAME_FIELD[1])
        + encode_number(mtime, MTIME_FIELD[1])
        + encode_number(uid, UID_FIELD[1])
        + encode_number(gid, GID_FIELD[1])
        + encode_number(mode, MODE_FIELD[1], base=8)
        + encode_number(size, SIZE_FIELD[1])
        + HEADER_END
    )


def unpack_header(header: bytes) -> Tuple[str, int]:
    """
    Returns: (name, size). mtime/uid/gid/mode are skipped without validation.
    """
    if len(header) != HEADER_SIZE:
        raise ValueError(f"member header must be {HEADER_SIZE} bytes, got {len(header)}")
    name = decode_name(_field(header, NAME_FIELD))
    size = decode_number(_field(header, SIZE_FIELD))
    end = _field(header, END_FIELD)
    if end != HEADER_END:
        raise BadEndMarkerError(f"bad member header terminator {end!r} (expected {HEADER_END!r})")
    return name, size

"""
plainar — reproducible Unix `ar` archives without an external archiver.

Features:

- Fixed-width 60-byte member headers with deterministic metadata
  (mtime 0, uid 0, gid 0, mode 0644), matching `ar D` output.
- Append-only writer; archive order is call order.
- Forward-only reader over a buffer or a stream, either copying member
  bodies or returning zero-copy [start, end) ranges into the buffer.
- Single-pass `find` that never rewinds.

Only the plain format is handled: no GNU long-name table, no symbol index,
no in-place modification of existing archives.
"""

__version__ = "0.1"

from .entry import Entry, EntryRange
from .errors import ArError, FormatError, FieldRangeError
from .reader import ArchiveReader, has_valid_header
from .writer import ArchiveWriter, write_archive

__all__ = [
    "ArchiveReader",
    "ArchiveWriter",
    "Entry",
    "EntryRange",
    "ArError",
    "FormatError",
    "FieldRangeError",
    "has_valid_header",
    "write_archive",
]

from __future__ import annotations

import io
from typing import BinaryIO, Callable, Iterator, Optional, Tuple, Union

from .constants import ARCHIVE_MAGIC, HEADER_SIZE, SKIP_CHUNK_SIZE
from .entry import Entry, EntryRange
from .errors import BadMagicError, TruncatedArchiveError
from .header import unpack_header


Buffer = Union[bytes, bytearray, memoryview]
Source = Union[Buffer, BinaryIO]


def has_valid_header(data) -> bool:
    """True iff `data` starts with the archive magic. Never raises."""
    try:
        return len(data) >= len(ARCHIVE_MAGIC) and bytes(data[: len(ARCHIVE_MAGIC)]) == ARCHIVE_MAGIC
    except (TypeError, ValueError):
        return False


class ArchiveReader:
    """Forward-only scanner over an `ar` archive.

    `source` is either a bytes-like buffer or a binary stream with `read()`.
    The reader keeps a single cursor (`offset`) that only moves forward:
    every `next_entry`, `find` and `each` call continues from where the
    previous one stopped. A member that has been passed, including one
    returned by an earlier `find`, cannot be reached again through the
    same reader; build a new reader (or index the archive once with
    `each(..., offsets=True)`) for repeated lookups.

    With `offsets=True` bodies are not copied and an `EntryRange` is
    returned instead. Its offsets are absolute positions in the source,
    which is only directly sliceable when the source is a buffer.

    `offset` is likewise absolute: it counts the 8 magic bytes, so it is 8
    right after construction and `buffer[start:end]` slices a body
    directly. Subtract 8 for the number of bytes consumed past the magic.
    """

    def __init__(self, source: Source):
        self._view: Optional[memoryview] = None
        self._stream: Optional[BinaryIO] = None
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._view = memoryview(source).cast("B")
        else:
            self._stream = source
        self._pos = 0
        magic = self._read_upto(len(ARCHIVE_MAGIC))
        if magic != ARCHIVE_MAGIC:
            raise BadMagicError(f"not an ar archive (leading bytes {magic!r})")

    @property
    def offset(self) -> int:
        return self._pos

    @property
    def zero_copy(self) -> bool:
        return self._view is not None

    def __iter__(self) -> Iterator[Entry]:
        while True:
            e = self.next_entry()
            if e is None:
                return
            yield e

    # Raw byte access

    def _read_upto(self, n: int) -> bytes:
        if self._view is not None:
            chunk = bytes(self._view[self._pos : self._pos + n])
        else:
            chunk = b""
            while len(chunk) < n:
                part = self._stream.read(n - len(chunk))
                if not part:
                    break
                chunk += part
        self._pos += len(chunk)
        return chunk

    def _read_exact(self, n: int, what: str) -> bytes:
        chunk = self._read_upto(n)
        if len(chunk) != n:
            raise TruncatedArchiveError(f"archive truncated in {what}: wanted {n} bytes, got {len(chunk)}")
        return chunk

    def _skip(self, n: int, what: str) -> None:
        if self._view is not None:
            avail = len(self._view) - self._pos
            if avail < n:
                raise TruncatedArchiveError(f"archive truncated in {what}: wanted {n} bytes, got {avail}")
            self._pos += n
            return
        if getattr(self._stream, "seekable", None) is not None and self._stream.seekable():
            here = self._stream.tell()
            avail = self._stream.seek(0, io.SEEK_END) - here
            if avail < n:
                raise TruncatedArchiveError(f"archive truncated in {what}: wanted {n} bytes, got {avail}")
            self._stream.seek(here + n)
            self._pos += n
            return
        remaining = n
        while remaining:
            chunk = self._stream.read(min(SKIP_CHUNK_SIZE, remaining))
            if not chunk:
                raise TruncatedArchiveError(f"archive truncated in {what}: {remaining} bytes missing")
            self._pos += len(chunk)
            remaining -= len(chunk)

    def _skip_pad(self, size: int) -> None:
        # Pad byte is consumed but not checked; a missing final pad is tolerated
        if size % 2:
            self._read_upto(1)

    # Member parsing

    def _next_header(self) -> Optional[Tuple[str, int]]:
        hdr = self._read_upto(HEADER_SIZE)
        if not hdr:
            return None
        if len(hdr) != HEADER_SIZE:
            raise TruncatedArchiveError(f"archive truncated in member header: got {len(hdr)} of {HEADER_SIZE} bytes")
        return unpack_header(hdr)

    def _take_body(self, name: str, size: int, offsets: bool) -> Union[Entry, EntryRange]:
        if offsets:
            start = self._pos
            self._skip(size, f"member {name!r}")
            end = self._pos
            self._skip_pad(size)
            return EntryRange(name=name, start=start, end=end)
        content = self._read_exact(size, f"member {name!r}")
        self._skip_pad(size)
        return Entry(name=name, content=content)

    def next_entry(self, offsets: bool = False) -> Optional[Union[Entry, EntryRange]]:
        """Read the member at the cursor.

        Returns:
            An `Entry` (or `EntryRange` when `offsets` is set), or None at
            the clean end of the archive.
        """
        parsed = self._next_header()
        if parsed is None:
            return None
        name, size = parsed
        return self._take_body(name, size, offsets)

    def each(self, visit: Callable[[Union[Entry, EntryRange]], None], offsets: bool = False) -> int:
        """Call `visit` for every remaining member in archive order; returns the count."""
        count = 0
        while True:
            e = self.next_entry(offsets=offsets)
            if e is None:
                return count
            visit(e)
            count += 1

    def find(self, name: str, offsets: bool = False) -> Optional[Union[Entry, EntryRange]]:
        """Scan forward from the cursor for the first member called `name`.

        Non-matching members are skipped without copying. On a match the
        cursor is left just past that member. Returns None if the end of
        the archive is reached first.
        """
        while True:
            parsed = self._next_header()
            if parsed is None:
                return None
            member, size = parsed
            if member == name:
                return self._take_body(member, size, offsets)
            self._skip(size, f"member {member!r}")
            self._skip_pad(size)

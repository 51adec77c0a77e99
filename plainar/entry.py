from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Entry:
    name: str
    content: bytes


@dataclass
class EntryRange:
    """Member body location as a half-open [start, end) range.

    Offsets are absolute positions in the buffer (or stream) the reader
    was built over; the magic occupies [0, 8). The range does not own any
    bytes and is only useful while that buffer is alive.
    """

    name: str
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start

    def slice(self, buffer) -> bytes:
        return bytes(buffer[self.start : self.end])

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Iterable, Mapping, Optional, Tuple, Union

from .constants import ARCHIVE_MAGIC, PAD_BYTE
from .entry import Entry
from .header import pack_header


class ArchiveWriter:
    """Append-only writer producing deterministic `ar` archives.

    The magic is written as soon as the writer is constructed. Each `add`
    emits exactly one member (header, body, optional pad byte) in call
    order. The writer keeps no buffer of its own and never closes the
    sink; that stays with the caller.
    """

    def __init__(self, sink: BinaryIO):
        self.sink = sink
        self.sink.write(ARCHIVE_MAGIC)

    def add(self, name: str, content: bytes) -> None:
        content = bytes(content)
        hdr = pack_header(name, len(content))
        self.sink.write(hdr)
        self.sink.write(content)
        if len(content) % 2:
            self.sink.write(PAD_BYTE)

    def add_entry(self, entry: Entry) -> None:
        self.add(entry.name, entry.content)

    def add_file(self, path: Union[str, os.PathLike], name: Optional[str] = None) -> str:
        """Add a filesystem file as a member.

        Args:
            path: File to read.
            name: Member name; defaults to the file's basename.

        Returns:
            The member name that was written.
        """
        p = Path(path)
        member = name if name is not None else p.name
        self.add(member, p.read_bytes())
        return member


Members = Union[Mapping[str, bytes], Iterable[Union[Entry, Tuple[str, bytes]]]]


def write_archive(path: Union[str, os.PathLike], members: Members) -> int:
    """Write a complete archive to `path`, replacing any existing file.

    `members` is a name->bytes mapping (insertion order is kept) or an
    iterable of `Entry` objects / (name, content) pairs.

    Returns the number of members written.
    """
    items = members.items() if isinstance(members, Mapping) else members
    count = 0
    with open(path, "wb") as f:
        w = ArchiveWriter(f)
        for item in items:
            if isinstance(item, Entry):
                w.add_entry(item)
            else:
                name, content = item
                w.add(name, content)
            count += 1
    return count

# Global archive magic and per-member header terminator
ARCHIVE_MAGIC = b"!<arch>\n"  # 8 bytes
HEADER_END = b"`\n"           # 0x60 0x0A
PAD_BYTE = b"\n"              # follows odd-length member bodies

HEADER_SIZE = 60

# Header field layout: (offset, width)
# name[16] mtime[12] uid[6] gid[6] mode[8] size[10] end[2]
NAME_FIELD = (0, 16)
MTIME_FIELD = (16, 12)
UID_FIELD = (28, 6)
GID_FIELD = (34, 6)
MODE_FIELD = (40, 8)
SIZE_FIELD = (48, 10)
END_FIELD = (58, 2)

# Deterministic metadata written for every member (same as `ar D`)
DEFAULT_MTIME = 0
DEFAULT_UID = 0
DEFAULT_GID = 0
DEFAULT_MODE = 0o644

# Stream reads larger than this are split when skipping bodies
SKIP_CHUNK_SIZE = 64 * 1024

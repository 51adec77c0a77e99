from __future__ import annotations

import os
import sys
import argparse

from pathlib import Path
from typing import List, Optional

from plainar.reader import ArchiveReader, has_valid_header
from plainar.writer import ArchiveWriter
from plainar.constants import ARCHIVE_MAGIC
from plainar.errors import ArError, FormatError
from plainar.header import encode_name


def _safe_member_filename(name: str) -> Optional[str]:
    """Return `name` if it can be used as a plain filename, else None."""
    if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        return None
    return name


def _next_nonconflicting_path(path: str) -> str:
    if not os.path.lexists(path):
        return path
    base_dir = os.path.dirname(path)
    root, ext = os.path.splitext(os.path.basename(path))
    i = 1
    while True:
        candidate = os.path.join(base_dir, f"{root} ({i}){ext}")
        if not os.path.lexists(candidate):
            return candidate
        i += 1


def cmd_create(output: str, inputs: List[str], *, quiet: bool = False) -> bool:
    """Write a deterministic archive from files.

    Args:
        output: Archive path to create (replaced if it exists).
        inputs: Files to add; each member is named after the file's basename.
        quiet: Suppress per-member progress lines.
    """
    for p in inputs:
        if not os.path.isfile(p):
            raise FileNotFoundError(f"not a regular file: {p}")
        encode_name(os.path.basename(p))
    count = 0
    with open(output, "wb") as f:
        w = ArchiveWriter(f)
        for p in inputs:
            name = w.add_file(p)
            count += 1
            if not quiet:
                print(f"a - {name}")
    if not quiet:
        print(f"Wrote {count} member(s) to {output}")
    return True


def cmd_list(archive: str, *, sizes: bool = False) -> bool:
    """List member names in archive order; with `sizes`, also size and body range."""
    with open(archive, "rb") as f:
        r = ArchiveReader(f)
        while True:
            e = r.next_entry(offsets=True)
            if e is None:
                break
            if sizes:
                print(f"{e.size}\t{e.start}-{e.end}\t{e.name}")
            else:
                print(e.name)
    return True


def cmd_print(archive: str, names: Optional[List[str]] = None) -> bool:
    """Write member contents to stdout in archive order (all members if no names).

    Returns False if a requested name is not in the archive.
    """
    wanted = set(names or [])
    found = set()
    out = sys.stdout.buffer
    with open(archive, "rb") as f:
        r = ArchiveReader(f)
        for e in r:
            if wanted and e.name not in wanted:
                continue
            found.add(e.name)
            out.write(e.content)
    out.flush()
    missing = [n for n in (names or []) if n not in found]
    for n in missing:
        print(f"no entry {n} in archive", file=sys.stderr)
    return not missing


def cmd_extract(
    archive: str,
    *,
    outdir: str = ".",
    names: Optional[List[str]] = None,
    exists: str = "rename",
    quiet: bool = False,
) -> bool:
    """Extract members into `outdir` in a single pass over the archive.

    Args:
        archive: Path to the archive.
        outdir: Destination directory (created if missing).
        names: Only extract these members; all members if empty.
        exists: Policy when a destination file exists: overwrite, skip,
            rename (append ' (n)' before the extension) or fail.
        quiet: Suppress per-member progress lines.
    """
    wanted = set(names or [])
    os.makedirs(outdir or ".", exist_ok=True)
    extracted = 0
    skipped = 0
    with open(archive, "rb") as f:
        r = ArchiveReader(f)
        for e in r:
            if wanted and e.name not in wanted:
                continue
            fname = _safe_member_filename(e.name)
            if fname is None:
                print(f"Warning: skipping member with unsafe name {e.name!r}", file=sys.stderr)
                skipped += 1
                continue
            dst = os.path.join(outdir or ".", fname)
            if os.path.lexists(dst):
                if exists == "skip":
                    if not quiet:
                        print(f"    skipping: {e.name} (exists)")
                    skipped += 1
                    continue
                elif exists == "rename":
                    dst = _next_nonconflicting_path(dst)
                elif exists == "fail":
                    raise RuntimeError(f"Destination exists: {dst}")
            Path(dst).write_bytes(e.content)
            extracted += 1
            if not quiet:
                print(f"x - {e.name}" + ("" if os.path.basename(dst) == fname else f" -> {os.path.basename(dst)}"))
    if not quiet:
        print(f"Extracted {extracted} member(s), skipped {skipped}")
    return True


def cmd_check(paths: List[str]) -> bool:
    """Report whether each file starts with the archive magic; True if all do."""
    ok = True
    for p in paths:
        with open(p, "rb") as f:
            head = f.read(len(ARCHIVE_MAGIC))
        if has_valid_header(head):
            print(f"{p}: ar archive")
        else:
            print(f"{p}: not an ar archive")
            ok = False
    return ok


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="plainar",
        description="Deterministic Unix ar archive tool",
        epilog="Members are always written with mtime 0, uid 0, gid 0 and mode 644.",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_create = sub.add_parser("create", help="Create archive")
    ap_create.add_argument("output", help="Output archive path")
    ap_create.add_argument("inputs", nargs="+", help="Input files (member names are basenames, max 16 bytes)")
    ap_create.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_list = sub.add_parser("list", help="List archive members")
    ap_list.add_argument("archive", help="Archive path")
    ap_list.add_argument("--sizes", action="store_true", help="Also show body size and byte range")

    ap_print = sub.add_parser("print", help="Write member contents to stdout")
    ap_print.add_argument("archive", help="Archive path")
    ap_print.add_argument("names", nargs="*", help="Members to print (default: all)")

    ap_extract = sub.add_parser("extract", help="Extract members")
    ap_extract.add_argument("archive", help="Archive path")
    ap_extract.add_argument("names", nargs="*", help="Members to extract (default: all)")
    ap_extract.add_argument("--outdir", default=".", help="Output directory")
    ap_extract.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")
    ap_extract.add_argument(
        "--exists",
        choices=["overwrite", "skip", "rename", "fail"],
        default="rename",
        help="What to do if a destination file exists (default: rename)",
    )

    ap_check = sub.add_parser("check", help="Check whether files are ar archives")
    ap_check.add_argument("paths", nargs="+", help="Files to check")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "create":
            cmd_create(args.output, args.inputs, quiet=args.quiet)
        elif args.cmd == "list":
            cmd_list(args.archive, sizes=args.sizes)
        elif args.cmd == "print":
            if not cmd_print(args.archive, args.names):
                sys.exit(1)
        elif args.cmd == "extract":
            cmd_extract(args.archive, outdir=args.outdir, names=args.names, exists=args.exists, quiet=args.quiet)
        elif args.cmd == "check":
            sys.exit(0 if cmd_check(args.paths) else 1)
        else:
            raise RuntimeError("Unknown command")
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except FormatError as e:
        print(f"Error: malformed archive: {e}", file=sys.stderr)
        sys.exit(2)
    except (ArError, OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()

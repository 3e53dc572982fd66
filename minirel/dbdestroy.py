"""Delete a database directory after the user confirms."""

from __future__ import annotations

import shutil
import sys
from typing import Sequence, TextIO


def destroy_database(name: str, answer: str, out: TextIO | None = None) -> int:
    """Remove the database directory if the answer starts with y or Y.

    Returns 0 on success or when nothing was removed, 1 if removal failed.
    """
    out = sys.stdout if out is None else out
    words = answer.split()
    if words and words[0][0] in "yY":
        out.write(f"Deleting {name}\n")
        try:
            shutil.rmtree(name)
        except OSError as exc:
            print(f"{name}: {exc.strerror or exc}", file=sys.stderr)
            return 1
        return 0
    out.write("Database not destroyed.\n")
    return 0


def _read_answer(stream: TextIO) -> str:
    for line in stream:
        if line.strip():
            return line
    return ""


def main(argv: Sequence[str] | None = None) -> int:
    """Ask for confirmation and delete the named database."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("Usage: dbdestroy dbname", file=sys.stderr)
        return 1
    name = args[0]
    print(f"Enter y if you want to delete {name}/*")
    return destroy_database(name, _read_answer(sys.stdin))


if __name__ == "__main__":
    sys.exit(main())
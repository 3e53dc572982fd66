"""Generators and readers for the sample data files loaded into test databases."""

from __future__ import annotations

import argparse
import random
import struct
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence

_ENCODING = "latin-1"
_SOAP = struct.Struct("<i28s4sf")
_STAR = struct.Struct("<i20s12si")
_REL = struct.Struct("<4i84s")
_INT = struct.Struct("<i")
_DUMMY_LEN = 84
RANDOMIZE_PASSES = 10


def _fixed(text: str, size: int, field: str) -> bytes:
    raw = text.encode(_ENCODING)
    if len(raw) > size:
        raise ValueError(f"{field} {text!r} does not fit in {size} bytes")
    return raw


@dataclass(frozen=True)
class Soap:
    """One tuple of the soaps relation."""

    soap_id: int
    name: str
    network: str
    rating: float

    def to_bytes(self) -> bytes:
        """Encode as a fixed-size record."""
        return _SOAP.pack(
            self.soap_id,
            _fixed(self.name, 28, "soap name"),
            _fixed(self.network, 4, "network"),
            self.rating,
        )


@dataclass(frozen=True)
class Star:
    """One tuple of the stars relation."""

    star_id: int
    name: str
    plays: str
    soap_id: int

    def to_bytes(self) -> bytes:
        """Encode as a fixed-size record."""
        return _STAR.pack(
            self.star_id,
            _fixed(self.name, 20, "star name"),
            _fixed(self.plays, 12, "role"),
            self.soap_id,
        )


@dataclass(frozen=True)
class Rel:
    """One tuple of the rel500 / rel1000 benchmark relations."""

    unique1: int
    unique2: int
    hundred1: int
    hundred2: int
    dummy: str

    SIZE = _REL.size

    def to_bytes(self) -> bytes:
        """Encode as a fixed-size record; the text is terminated and space padded."""
        raw = _fixed(self.dummy, _DUMMY_LEN, "dummy")
        if len(raw) < _DUMMY_LEN:
            raw += b"\0"
        raw = raw.ljust(_DUMMY_LEN, b" ")
        return _REL.pack(self.unique1, self.unique2, self.hundred1, self.hundred2, raw)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Rel":
        """Decode a fixed-size record."""
        if len(data) != _REL.size:
            raise ValueError(f"record must be {_REL.size} bytes, got {len(data)}")
        u1, u2, h1, h2, raw = _REL.unpack(bytes(data))
        return cls(u1, u2, h1, h2, raw.split(b"\0", 1)[0].decode(_ENCODING))


SOAPS: tuple[Soap, ...] = (
    Soap(0, "Days of Our Lives", "NBC", 7.02),
    Soap(1, "General Hospital", "ABC", 9.81),
    Soap(2, "Guiding Light", "CBS", 4.02),
    Soap(3, "One Life to Live", "ABC", 2.31),
    Soap(4, "Santa Barbara", "NBC", 6.44),
    Soap(5, "The Young and the Restless", "CBS", 5.50),
    Soap(6, "As the World Turns", "CBS", 7.00),
    Soap(7, "Another World", "NBC", 1.97),
    Soap(8, "All My Children", "ABC", 8.82),
)

STARS: tuple[Star, ...] = (
    Star(0, "Hayes, Kathryn", "Kim", 6),
    Star(1, "DeFreitas, Scott", "Andy", 6),
    Star(2, "Grahn, Nancy", "Julia", 4),
    Star(3, "Linder, Kate", "Esther", 5),
    Star(4, "Cooper, Jeanne", "Katherine", 5),
    Star(5, "Ehlers, Beth", "Harley", 2),
    Star(6, "Novak, John", "Keith", 4),
    Star(7, "Elliot, Patricia", "Renee", 3),
    Star(8, "Hutchinson, Fiona", "Gabrielle", 5),
    Star(9, "Carey, Phil", "Asa", 5),
    Star(10, "Walker, Nicholas", "Max", 3),
    Star(11, "Ross, Charlotte", "Eve", 0),
    Star(12, "Anthony, Eugene", "Stan", 8),
    Star(13, "Douglas, Jerry", "John", 5),
    Star(14, "Holbrook, Anna", "Sharlene", 7),
    Star(15, "Hammer, Jay", "Fletcher", 2),
    Star(16, "Sloan, Tina", "Lillian", 2),
    Star(17, "DuClos, Danielle", "Lisa", 3),
    Star(18, "Tuck, Jessica", "Megan", 3),
    Star(19, "Ashford, Matthew", "Jack", 0),
    Star(20, "Novak, John", "Keith", 4),
    Star(21, "Larson, Jill", "Opal", 8),
    Star(22, "McKinnon, Mary", "Denise", 7),
    Star(23, "Barr, Julia", "Brooke", 8),
    Star(24, "Borlenghi, Matt", "Brian", 8),
    Star(25, "Hughes, Finola", "Anna", 1),
    Star(26, "Rogers, Tristan", "Robert", 1),
    Star(27, "Richardson, Cheryl", "Jenny", 1),
    Star(28, "Evans, Mary Beth", "Kayla", 0),
)


def create_soap_data(directory: str | Path = ".") -> tuple[Path, Path]:
    """Write soaps.data and stars.data into a directory; return their paths."""
    base = Path(directory)
    soaps_path = base / "soaps.data"
    stars_path = base / "stars.data"
    stars_path.write_bytes(b"".join(star.to_bytes() for star in STARS))
    soaps_path.write_bytes(b"".join(soap.to_bytes() for soap in SOAPS))
    return soaps_path, stars_path


def write_rels(
    path: str | Path, count: int, prefix: str, rng: random.Random | None = None
) -> list[Rel]:
    """Write count random benchmark tuples to a file and return them."""
    if count < 0:
        raise ValueError("count must not be negative")
    rng = rng if rng is not None else random.Random()
    rels = [
        Rel(
            rng.randrange(count) + 1,
            rng.randrange(count) + 1,
            rng.randrange(100) + 1,
            rng.randrange(100) + 1,
            f"{prefix}.{i:3d}",
        )
        for i in range(count)
    ]
    Path(path).write_bytes(b"".join(rel.to_bytes() for rel in rels))
    return rels


def create_rel_data(directory: str | Path = ".", seed: int | None = None) -> list[Path]:
    """Write rel500.data and rel1000.data into a directory; return their paths."""
    base = Path(directory)
    rng = random.Random(seed)
    paths = []
    for count in (500, 1000):
        path = base / f"rel{count}.data"
        write_rels(path, count, f"rel{count}", rng)
        paths.append(path)
    return paths


def read_rels(path: str | Path) -> Iterator[Rel]:
    """Yield the benchmark tuples stored in a file."""
    with open(path, "rb") as handle:
        while chunk := handle.read(_REL.size):
            if len(chunk) != _REL.size:
                raise ValueError(f"{path}: truncated record at end of file")
            yield Rel.from_bytes(chunk)


def format_rel(rel: Rel) -> str:
    """Return a tab-separated line describing a tuple."""
    return f"{rel.unique1}\t{rel.unique2}\t{rel.hundred1}\t{rel.hundred2}\t{rel.dummy}"


def generate_wi_tuples(
    count: int, path: str | Path, seed: int | None = None
) -> list[int]:
    """Write a shuffled permutation of 0..count-1 as 4-byte integers; return it."""
    if count < 0:
        raise ValueError("count must not be negative")
    nums = list(range(count))
    rng = random.Random(seed)
    for _ in range(RANDOMIZE_PASSES):
        for i in range(count):
            new_pos = rng.randrange(count)
            nums[new_pos], nums[i] = nums[i], nums[new_pos]
    Path(path).write_bytes(b"".join(_INT.pack(n) for n in nums))
    return nums


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="minirel-datagen", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    soaps = sub.add_parser("soaps", help="write soaps.data and stars.data")
    soaps.add_argument("directory", nargs="?", default=".")

    rels = sub.add_parser("rels", help="write rel500.data and rel1000.data")
    rels.add_argument("directory", nargs="?", default=".")
    rels.add_argument("--seed", type=int, default=None)

    wi = sub.add_parser("wi", help="write shuffled unique integers")
    wi.add_argument("count", type=int)
    wi.add_argument("output")
    wi.add_argument("--seed", type=int, default=None)

    show = sub.add_parser("show", help="print benchmark tuples")
    show.add_argument("paths", nargs="*", default=["rel500.data", "rel1000.data"])
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the data generator command line."""
    args = _parser().parse_args(argv)
    try:
        if args.command == "soaps":
            create_soap_data(args.directory)
        elif args.command == "rels":
            create_rel_data(args.directory, args.seed)
        elif args.command == "wi":
            generate_wi_tuples(args.count, args.output, args.seed)
            print("Done.")
        else:
            for path in args.paths:
                for rel in read_rels(path):
                    print(format_rel(rel))
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
"""Catalog record layouts and the data types and operators used in queries."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from .errors import MinirelError, Status

RELCATNAME = "relcat"
ATTRCATNAME = "attrcat"
MAXNAME = 32
MAXSTRINGLEN = 255
MAXNAMESIZE = 50

_ENCODING = "latin-1"
_REL_DESC = struct.Struct(f"<{MAXNAME}si")
_ATTR_DESC = struct.Struct(f"<{MAXNAME}s{MAXNAME}siii")


class Datatype(IntEnum):
    """Attribute data types."""

    STRING = 0
    INTEGER = 1
    FLOAT = 2


class Operator(IntEnum):
    """Comparison operators for scans and joins."""

    LT = 0
    LTE = 1
    EQ = 2
    GTE = 3
    GT = 4
    NE = 5


def _encode_name(name: str) -> bytes:
    raw = name.encode(_ENCODING)
    if len(raw) >= MAXNAME:
        raise MinirelError(Status.NAMETOOLONG)
    return raw


def _decode_name(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode(_ENCODING)


def _as_type(value: int) -> Datatype | int:
    try:
        return Datatype(value)
    except ValueError:
        return value


@dataclass
class RelDesc:
    """One tuple of the relation catalog."""

    rel_name: str
    attr_cnt: int

    SIZE = _REL_DESC.size

    def to_bytes(self) -> bytes:
        """Encode as a fixed-size catalog record with a zero-padded name."""
        return _REL_DESC.pack(_encode_name(self.rel_name), self.attr_cnt)

    @classmethod
    def from_bytes(cls, data: bytes) -> "RelDesc":
        """Decode a relation catalog record."""
        if len(data) != _REL_DESC.size:
            raise ValueError(
                f"relation descriptor must be {_REL_DESC.size} bytes, got {len(data)}"
            )
        name, attr_cnt = _REL_DESC.unpack(bytes(data))
        return cls(_decode_name(name), attr_cnt)


@dataclass
class AttrDesc:
    """One tuple of the attribute catalog."""

    rel_name: str
    attr_name: str
    attr_offset: int
    attr_type: int
    attr_len: int

    SIZE = _ATTR_DESC.size

    def to_bytes(self) -> bytes:
        """Encode as a fixed-size catalog record with zero-padded names."""
        return _ATTR_DESC.pack(
            _encode_name(self.rel_name),
            _encode_name(self.attr_name),
            self.attr_offset,
            int(self.attr_type),
            self.attr_len,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "AttrDesc":
        """Decode an attribute catalog record."""
        if len(data) != _ATTR_DESC.size:
            raise ValueError(
                f"attribute descriptor must be {_ATTR_DESC.size} bytes, got {len(data)}"
            )
        rel, attr, offset, attr_type, length = _ATTR_DESC.unpack(bytes(data))
        return cls(_decode_name(rel), _decode_name(attr), offset, _as_type(attr_type), length)


@dataclass
class AttrInfo:
    """An attribute named in a command, with an optional value as given."""

    rel_name: str
    attr_name: str
    attr_type: int = Datatype.STRING
    attr_len: int = 0
    attr_value: Any = None
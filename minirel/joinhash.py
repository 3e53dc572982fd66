"""Hash table over the join attribute of outer tuples, used by block joins."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from typing import Any, Hashable

from .schema import AttrDesc, Datatype

_INT = struct.Struct("<i")
_FLOAT = struct.Struct("<f")


def _c_int(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= (1 << 31) else value


def _c_mod(a: int, b: int) -> int:
    r = abs(a) % b
    return -r if a < 0 else r


def _f32(value: float) -> float:
    return _FLOAT.unpack(_FLOAT.pack(value))[0]


def _c_string(raw: bytes) -> bytes:
    return raw.split(b"\0", 1)[0]


@dataclass
class _Entry:
    value: Any
    rid: Hashable


class JoinHashTable:
    """Maps join attribute values of outer tuples to their record ids."""

    def __init__(self, size: int, attr: AttrDesc) -> None:
        if size < 1:
            raise ValueError("hash table size must be positive")
        try:
            self._type = Datatype(attr.attr_type)
        except ValueError:
            raise ValueError(f"illegal join attribute type {attr.attr_type}") from None
        self.size = size
        self.attr = attr
        self._chains: list[list[_Entry]] = [[] for _ in range(size)]

    def __len__(self) -> int:
        return sum(len(chain) for chain in self._chains)

    def _decode(self, raw: bytes) -> Any:
        if self._type is Datatype.INTEGER:
            return _INT.unpack_from(raw)[0]
        if self._type is Datatype.FLOAT:
            return _FLOAT.unpack_from(raw)[0]
        return bytes(raw[: self.attr.attr_len])

    def _coerce(self, value: Any) -> Any:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return self._decode(bytes(value))
        if self._type is Datatype.INTEGER:
            return _c_int(int(value))
        if self._type is Datatype.FLOAT:
            return _f32(float(value))
        raw = str(value).encode("latin-1")
        return raw[: self.attr.attr_len]

    def _hash(self, value: Any) -> int:
        if self._type is Datatype.INTEGER:
            h = _c_int(value * self.size * 31)
        elif self._type is Datatype.FLOAT:
            product = _f32(value * _f32(self.size * 31))
            h = 0 if math.isnan(product) or math.isinf(product) else _c_int(int(product))
        else:
            text = _c_string(value)
            h = 0
            # Each step mixes in the character after the current one.
            for following in (*text[1:], 0):
                signed = following - 256 if following >= 128 else following
                h = _c_int(31 * h + signed)
        return abs(_c_mod(h, self.size))

    def _matches(self, stored: Any, probe: Any) -> bool:
        if self._type is Datatype.STRING:
            length = self.attr.attr_len
            return _c_string(stored[:length]) == _c_string(probe[:length])
        return stored == probe

    def insert(self, rid: Hashable, tuple_data: bytes) -> None:
        """Add an outer tuple's join value, taken from its record bytes."""
        start = self.attr.attr_offset
        raw = bytes(tuple_data[start : start + self.attr.attr_len])
        value = self._decode(raw)
        self._chains[self._hash(value)].insert(0, _Entry(value, rid))

    def lookup(self, value: Any) -> list[Hashable]:
        """Return the record ids whose join value equals the given one.

        The value may be the raw attribute bytes of an inner tuple or a
        Python value of the attribute's type.
        """
        probe = self._coerce(value)
        chain = self._chains[self._hash(probe)]
        return [entry.rid for entry in chain if self._matches(entry.value, probe)]
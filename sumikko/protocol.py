"""Positions and their wire encoding between pets."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

_POINT = struct.Struct(">ii")


@dataclass(frozen=True)
class Point:
    """A screen position in pixels."""

    x: int
    y: int

    def distance_to(self, other: Point) -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def offset(self, dx: int, dy: int) -> Point:
        """This point moved by (dx, dy)."""
        return Point(self.x + dx, self.y + dy)

    @property
    def is_absent(self) -> bool:
        """True for the marker meaning no position is known."""
        return self == ABSENT


ABSENT = Point(-1, -1)
POINT_SIZE = _POINT.size


def encode_point(point: Point) -> bytes:
    """Encode a point as two big-endian signed 32-bit integers."""
    try:
        return _POINT.pack(point.x, point.y)
    except struct.error as exc:
        raise ValueError(f"point out of range: {point}") from exc


def decode_point(data: bytes) -> Point:
    """Decode exactly one encoded point."""
    if len(data) != POINT_SIZE:
        raise ValueError(f"expected {POINT_SIZE} bytes, got {len(data)}")
    return Point(*_POINT.unpack(data))


class PointReader:
    """Collects stream bytes and yields whole points as they arrive."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet forming a point."""
        return len(self._buffer)

    def feed(self, data: bytes) -> list[Point]:
        """Add bytes and return every point now complete."""
        self._buffer += data
        whole = len(self._buffer) - len(self._buffer) % POINT_SIZE
        chunk = bytes(self._buffer[:whole])
        del self._buffer[:whole]
        return [Point(x, y) for x, y in _POINT.iter_unpack(chunk)]
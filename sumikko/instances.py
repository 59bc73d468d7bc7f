"""Shared slot table limiting how many pets may run at once."""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock


class NoFreeSlot(RuntimeError):
    """Raised when every slot is already taken."""


class SlotRegistry:
    """A file-backed table of taken slots, guarded by a lock file."""

    def __init__(self, path: str | os.PathLike[str], max_instances: int) -> None:
        if max_instances < 1:
            raise ValueError("max_instances must be at least 1")
        self.path = Path(path)
        self.max_instances = max_instances
        self._lock = FileLock(str(self.path) + ".lock")

    def _read(self) -> bytearray:
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            data = b""
        if len(data) != self.max_instances:
            data = bytes(self.max_instances)
        return bytearray(data)

    def _write(self, slots: bytearray) -> None:
        self.path.write_bytes(bytes(slots))

    def acquire(self) -> int:
        """Take the lowest free slot and return its id."""
        with self._lock:
            slots = self._read()
            try:
                slot_id = slots.index(0)
            except ValueError:
                raise NoFreeSlot(
                    f"all {self.max_instances} slots are taken"
                ) from None
            slots[slot_id] = 1
            self._write(slots)
            return slot_id

    def release(self, slot_id: int) -> None:
        """Mark a slot as free again."""
        if not 0 <= slot_id < self.max_instances:
            raise ValueError(f"slot {slot_id} out of range")
        with self._lock:
            slots = self._read()
            slots[slot_id] = 0
            self._write(slots)

    @contextmanager
    def claim(self) -> Iterator[int]:
        """Hold a slot for the duration of the block."""
        slot_id = self.acquire()
        try:
            yield slot_id
        finally:
            self.release(slot_id)
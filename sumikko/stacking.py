"""Rules deciding when a pet climbs on top of another pet."""

from __future__ import annotations

from sumikko.motion import Pet
from sumikko.protocol import ABSENT, Point

NEAR = 65
PAIR_LIFT = 40
STACK_LIFT = 45
HEAD_OFFSET = 5
APART_TICKS = 5


def _head(pet: Pet) -> Point:
    """The spot just above the pet, offered to others to climb on."""
    return pet.position.offset(0, -HEAD_OFFSET)


class PairStacker:
    """Stacking against a single other pet."""

    def check(self, pet: Pet, other: Point) -> bool:
        """Perch the pet on ``other`` if close and above it; True if it did."""
        if other.is_absent:
            return False
        if (
            pet.position.distance_to(other) <= NEAR
            and pet.enabled
            and pet.position.y < other.y
        ):
            pet.perch_on(other, PAIR_LIFT)
            return True
        return False


class MiddleStacker:
    """Stacking for the pet that talks to both others.

    After each check, ``to_a`` and ``to_c`` hold the positions to send to
    the first and the third pet so they can decide what to climb on.
    """

    def __init__(self) -> None:
        self.to_a: Point = ABSENT
        self.to_c: Point = ABSENT
        self.bc_together = False
        self.ac_together = False
        self._bc_apart = 0
        self._ac_apart = 0

    def check(self, pet: Pet, from_a: Point, from_c: Point) -> None:
        """Update the pet and the outgoing positions from the latest ones."""
        a, c = from_a, from_c
        if a.is_absent and c.is_absent:
            return
        me = pet.position
        d_ab = me.distance_to(a)
        d_ac = a.distance_to(c)
        d_bc = me.distance_to(c)

        if a.is_absent:
            self.to_c = _head(pet)
            if d_bc <= NEAR and pet.enabled and me.y < c.y:
                pet.perch_on(c, STACK_LIFT)
            return

        if c.is_absent:
            self.to_a = _head(pet)
            if d_ab <= NEAR and pet.enabled and me.y < a.y:
                pet.perch_on(a, STACK_LIFT)
            return

        if not self.bc_together and not self.ac_together and d_ab <= NEAR:
            self._near_a(pet, a, c, d_bc)
            return

        if not self.ac_together and d_bc <= NEAR:
            self.bc_together = True
            self._bc_apart = 0
            self._near_c(pet, a, c, d_ab)
            return
        if d_bc > NEAR:
            self._bc_apart += 1
            if self._bc_apart >= APART_TICKS:
                self.bc_together = False
                self._bc_apart = 0

        if d_ac <= NEAR:
            self.ac_together = True
            self._ac_apart = 0
            self._a_near_c(pet, a, c, d_ab, d_bc)
            return
        if d_ac > NEAR:
            self._ac_apart += 1
            if self._ac_apart >= APART_TICKS:
                self.ac_together = False
                self._ac_apart = 0

    def _near_a(self, pet: Pet, a: Point, c: Point, d_bc: float) -> None:
        me = pet.position
        if me.y < a.y and pet.enabled:
            pet.perch_on(a, STACK_LIFT)
            self.to_a = c
            self.to_c = _head(pet)
        elif me.y >= a.y:
            # A sits on this pet; this pet may still climb on C.
            self.to_a = _head(pet)
            if d_bc <= NEAR:
                if me.y < c.y and pet.enabled:
                    pet.perch_on(c, STACK_LIFT)
                    self.to_c = ABSENT
                elif me.y >= c.y:
                    self.to_c = a
            else:
                self.to_c = a

    def _near_c(self, pet: Pet, a: Point, c: Point, d_ab: float) -> None:
        me = pet.position
        if me.y < c.y and pet.enabled:
            pet.perch_on(c, STACK_LIFT)
            self.to_a = _head(pet)
            self.to_c = a
        elif me.y >= c.y:
            # C sits on this pet; this pet may still climb on A.
            self.to_c = _head(pet)
            if d_ab <= NEAR:
                if me.y < a.y and pet.enabled:
                    pet.perch_on(a, STACK_LIFT)
                    self.to_a = ABSENT
                elif me.y >= a.y:
                    self.to_a = c
            else:
                self.to_a = c

    def _a_near_c(
        self, pet: Pet, a: Point, c: Point, d_ab: float, d_bc: float
    ) -> None:
        me = pet.position
        if a.y < c.y:
            # A is on C.
            self.to_a = c
            if d_bc <= NEAR and c.y < me.y:
                self.to_c = _head(pet)
                return
            self.to_c = ABSENT
            if d_ab <= NEAR and me.y < a.y and pet.enabled:
                pet.perch_on(a, STACK_LIFT)
        else:
            # C is on A.
            self.to_c = a
            if d_ab <= NEAR:
                if a.y < me.y:
                    self.to_a = _head(pet)
                    return
                self.to_a = ABSENT
            if d_bc <= NEAR and me.y < c.y and pet.enabled:
                pet.perch_on(c, STACK_LIFT)
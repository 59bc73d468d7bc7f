"""The walking, blinking and crouching behaviour of one pet."""

from __future__ import annotations

import random
from dataclasses import dataclass

from sumikko.frames import sprite_set
from sumikko.protocol import Point

SIZE = 70
CROUCH_DROP = 5

# Vertical bob per walk frame index, for the pets that bob.
_BOB = {0: {2: 1, 3: -1}, 1: {2: -1, 3: 1}}


@dataclass(frozen=True)
class ScreenBounds:
    """The usable screen area, edges inclusive."""

    left: int
    top: int
    right: int
    bottom: int


class Pet:
    """State machine driving one pet's animation and movement."""

    def __init__(self, instance_id, position, screen, rng=None):
        self.instance_id = instance_id
        self.sprites = sprite_set(instance_id)
        self.position: Point = position
        self.screen: ScreenBounds = screen
        self._rng = rng if rng is not None else random.Random()

        self.enabled = True
        self.first_time = True
        self.on_other = False
        self.can_move = True

        self._eye_index = 0
        self._blink_pause = 0
        self._blink_step = 0
        self._blink_wait = 60
        self._eyes_open = True
        self.eye_frame = self.sprites.eyes[0]

        self._walk_index = 0
        self._step = 0
        self._walk_count = {True: 0, False: 0}
        self._walk_wait = {True: 70, False: 70}
        self._pause_count = 0
        self._pause_wait = 50
        self._crouch_roll = 70
        self._pause_rolled = False
        self.facing_right = True
        self.stopped = True
        self.low = False
        self.body_frame = self.sprites.walk[1]

    def blink_tick(self) -> str:
        """Advance the eye animation one step and return the eye frame."""
        eyes = self.sprites.eyes
        if self._eyes_open:
            self._blink_pause += 1
            self.eye_frame = eyes[0]
            if self._blink_pause <= self._blink_wait:
                return self.eye_frame
            self._blink_pause = 0
            self._eyes_open = False
            self._blink_wait = self._rng.randrange(55, 100)
        self._blink_step += 1
        if self._blink_step <= len(eyes):
            self._eye_index = (self._eye_index + 1) % len(eyes)
            self.eye_frame = eyes[self._eye_index]
        else:
            self._blink_step = 0
            self._eyes_open = True
        return self.eye_frame

    def move_tick(self) -> str:
        """Advance the walk one step and return the body frame."""
        walk = self.sprites.walk
        if not self.can_move:
            self.body_frame = self.sprites.still
            return self.body_frame
        if self.on_other:
            self.body_frame = self.sprites.crouch
            return self.body_frame
        if not self.enabled:
            self.body_frame = self.sprites.crouch if self.low else walk[1]
            return self.body_frame
        if self.stopped and not self._pause_tick():
            return self.body_frame

        if self.low:
            self.position = self.position.offset(0, -CROUCH_DROP)
            self.low = False

        self._step = (self._step + 1) % 3
        if self._step == 0:
            self._walk_index = (self._walk_index + 1) % len(walk)
            self.body_frame = walk[self._walk_index]

        right = self.facing_right
        x = self.position.x
        if right:
            at_edge = x + 1 + SIZE >= self.screen.right
        else:
            at_edge = x - 1 < self.screen.left
        if at_edge:
            self._turn()
            return self.body_frame

        bob = _BOB.get(self.instance_id, {}).get(self._walk_index, 0)
        self.position = self.position.offset(1 if right else -1, bob)
        self._walk_count[right] += 1
        if self._walk_count[right] >= self._walk_wait[right] and self._walk_index == 3:
            self._pause_rolled = False
            self.stopped = True
            self._turn()
        return self.body_frame

    def _pause_tick(self) -> bool:
        """Run one paused step; True once the pause has just ended."""
        if not self._pause_rolled:
            self._crouch_roll = self._rng.randrange(1, 100)
            self._pause_rolled = True
        if self._crouch_roll % 2 == 0:
            self._crouch()
        else:
            self.body_frame = self.sprites.walk[1]
        self._pause_count += 1
        if self._pause_count <= self._pause_wait:
            return False
        self._pause_count = 0
        self.stopped = False
        self.body_frame = self.sprites.walk[1]
        self._pause_wait = self._rng.randrange(60, 200)
        return True

    def _crouch(self) -> None:
        if self.first_time:
            self.position = self.position.offset(0, CROUCH_DROP)
            self.first_time = False
            self.low = True
        self.body_frame = self.sprites.crouch

    def _turn(self) -> None:
        right = self.facing_right
        self.first_time = True
        self._walk_wait[right] = self._rng.randrange(50, 80)
        self._walk_count[right] = 0
        self.facing_right = not right

    def press(self) -> None:
        """The pet was grabbed with the mouse."""
        self.first_time = False
        self.enabled = False

    def drag(self, dx: int, dy: int) -> None:
        """Move the pet by a drag delta."""
        self.position = self.position.offset(dx, dy)

    def release(self) -> None:
        """The pet was let go."""
        self.on_other = False
        self.enabled = True

    def toggle_move(self) -> bool:
        """Switch walking on or off and return whether it may now move."""
        self.can_move = not self.can_move
        return self.can_move

    def perch_on(self, position: Point, lift: int) -> None:
        """Sit on top of another pet at the given position."""
        self.position = Point(position.x, position.y - lift)
        self.on_other = True
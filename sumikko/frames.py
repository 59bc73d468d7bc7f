"""Image frames used to animate each of the three pets."""

from __future__ import annotations

from dataclasses import dataclass

# (eye prefix, body prefix) for each pet, in instance order.
_PREFIXES = (("e", "w"), ("ke", "k"), ("ge", "g"))

# The blink plays the eye frames forwards and back again.
_EYE_SEQUENCE = (0, 1, 2, 3, 3, 2, 1)
# The walk cycle swings between three body frames.
_WALK_SEQUENCE = (0, 1, 2, 1)
_CROUCH_FRAME = 3
_STILL_FRAME = 4


@dataclass(frozen=True)
class SpriteSet:
    """File names of the frames for one pet."""

    eyes: tuple[str, ...]
    walk: tuple[str, ...]
    crouch: str
    still: str

    @property
    def all_files(self) -> frozenset[str]:
        """Every distinct image file the set refers to."""
        return frozenset((*self.eyes, *self.walk, self.crouch, self.still))


def sprite_set(instance_id: int) -> SpriteSet:
    """Return the frames for the pet with the given instance id."""
    if not 0 <= instance_id < len(_PREFIXES):
        raise ValueError(f"no sprites for instance {instance_id}")
    eye, body = _PREFIXES[instance_id]
    return SpriteSet(
        eyes=tuple(f"{eye}{n}.png" for n in _EYE_SEQUENCE),
        walk=tuple(f"{body}{n}.png" for n in _WALK_SEQUENCE),
        crouch=f"{body}{_CROUCH_FRAME}.png",
        still=f"{body}{_STILL_FRAME}.png",
    )
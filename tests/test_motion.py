import random

import pytest

from sumikko.motion import SIZE, Pet, ScreenBounds
from sumikko.protocol import Point

BIG_SCREEN = ScreenBounds(0, 0, 1919, 1079)


class FixedRng:
    """Always picks the same value, clamped into the requested range."""

    def __init__(self, value):
        self.value = value

    def randrange(self, start, stop):
        return min(max(self.value, start), stop - 1)


def make_pet(instance=0, position=Point(100, 100), screen=BIG_SCREEN, value=1):
    return Pet(instance, position, screen, FixedRng(value))


def test_initial_frames():
    pet = make_pet(1)
    assert pet.body_frame == pet.sprites.walk[1]
    assert pet.eye_frame == pet.sprites.eyes[0]


def test_eyes_stay_open_until_wait_passes():
    pet = make_pet()
    frames = [pet.blink_tick() for _ in range(60)]
    assert set(frames) == {pet.sprites.eyes[0]}
    assert pet.blink_tick() == pet.sprites.eyes[1]


def test_blink_frames_come_from_eye_set():
    pet = Pet(2, Point(0, 0), BIG_SCREEN, random.Random(7))
    frames = {pet.blink_tick() for _ in range(1000)}
    assert frames <= set(pet.sprites.eyes)
    assert len(frames) > 1


def test_stopped_pet_shows_still_frame_and_stays():
    pet = make_pet()
    assert pet.toggle_move() is False
    assert pet.move_tick() == pet.sprites.still
    assert pet.position == Point(100, 100)
    assert pet.toggle_move() is True


def test_pressed_pet_does_not_walk():
    pet = make_pet()
    pet.stopped = False
    pet.press()
    for _ in range(10):
        assert pet.move_tick() == pet.sprites.walk[1]
    assert pet.position == Point(100, 100)


def test_drag_moves_by_delta():
    pet = make_pet()
    pet.press()
    pet.drag(15, -20)
    assert pet.position == Point(115, 80)
    pet.release()
    assert pet.enabled


def test_even_roll_crouches_then_rises():
    pet = make_pet(value=2)
    assert pet.move_tick() == pet.sprites.crouch
    assert pet.position == Point(100, 100 + 5)
    assert pet.low
    for _ in range(60):
        pet.move_tick()
    assert pet.position.y == 100
    assert pet.position.x > 100
    assert not pet.low


def test_odd_roll_stands_during_pause():
    pet = make_pet(value=1)
    for _ in range(10):
        assert pet.move_tick() == pet.sprites.walk[1]
    assert pet.position == Point(100, 100)


def test_turns_at_right_edge():
    screen = ScreenBounds(0, 0, 199, 399)
    pet = make_pet(2, Point(129, 50), screen)
    pet.stopped = False
    pet.move_tick()
    assert not pet.facing_right
    assert pet.position == Point(129, 50)
    pet.move_tick()
    assert pet.position == Point(128, 50)


def test_turns_at_left_edge():
    pet = make_pet(2, Point(0, 50))
    pet.stopped = False
    pet.facing_right = False
    pet.move_tick()
    assert pet.facing_right
    assert pet.position == Point(0, 50)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_walk_stays_on_screen(seed):
    screen = ScreenBounds(0, 0, 300, 400)
    pet = Pet(1, Point(150, 200), screen, random.Random(seed))
    for _ in range(3000):
        pet.move_tick()
        assert pet.position.x >= screen.left
        assert pet.position.x + SIZE <= screen.right


def test_first_pet_bobs_within_small_range():
    pet = make_pet(0, Point(500, 300), value=1)
    for _ in range(300):
        pet.move_tick()
        assert 0 <= pet.position.y - 300 <= 3


def test_third_pet_walks_flat():
    pet = make_pet(2, Point(500, 300), value=1)
    for _ in range(300):
        pet.move_tick()
        assert pet.position.y == 300


def test_perch_on_holds_crouch():
    pet = make_pet()
    pet.perch_on(Point(400, 500), 45)
    assert pet.position == Point(400, 455)
    assert pet.move_tick() == pet.sprites.crouch
    assert pet.position == Point(400, 455)
    pet.release()
    assert not pet.on_other


def test_unknown_instance_rejected():
    with pytest.raises(ValueError):
        Pet(5, Point(0, 0), BIG_SCREEN, FixedRng(1))
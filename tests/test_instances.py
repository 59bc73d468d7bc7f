import pytest

from sumikko.instances import NoFreeSlot, SlotRegistry


@pytest.fixture
def registry(tmp_path):
    return SlotRegistry(tmp_path / "slots", 3)


def test_slots_handed_out_lowest_first(registry):
    ids = [registry.acquire() for _ in range(3)]
    assert ids == list(range(3))


def test_full_table_raises(registry):
    for _ in range(3):
        registry.acquire()
    with pytest.raises(NoFreeSlot):
        registry.acquire()


def test_released_slot_is_reused(registry):
    ids = [registry.acquire() for _ in range(3)]
    registry.release(ids[1])
    assert registry.acquire() == ids[1]


def test_claim_releases_on_exit(registry):
    with registry.claim() as slot:
        inner = registry.acquire()
        assert inner != slot
    assert registry.acquire() == slot


def test_claim_releases_on_error(registry):
    with pytest.raises(KeyError):
        with registry.claim() as slot:
            raise KeyError(slot)
    assert registry.acquire() == slot


def test_registries_share_state(tmp_path):
    first = SlotRegistry(tmp_path / "slots", 2)
    second = SlotRegistry(tmp_path / "slots", 2)
    a = first.acquire()
    b = second.acquire()
    assert {a, b} == set(range(2))
    with pytest.raises(NoFreeSlot):
        first.acquire()


@pytest.mark.parametrize("slot", [-1, 3])
def test_release_out_of_range(registry, slot):
    with pytest.raises(ValueError):
        registry.release(slot)


def test_zero_instances_rejected(tmp_path):
    with pytest.raises(ValueError):
        SlotRegistry(tmp_path / "slots", 0)
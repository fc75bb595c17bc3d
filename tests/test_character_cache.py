from __future__ import annotations

from conftest import MemoryStore, make_character
from core.domain.models import CharacterStatus
from core.interfaces.storage import StorageKey
from core.services.character_cache import CharacterCache, id_in, status_equals


def test_read_snapshot_is_empty_before_first_write(memory_store: MemoryStore) -> None:
    assert CharacterCache(memory_store).read_snapshot() == []


def test_replace_snapshot_overwrites_wholesale(memory_store: MemoryStore) -> None:
    cache = CharacterCache(memory_store)
    cache.replace_snapshot([make_character(1), make_character(2)])
    cache.replace_snapshot([make_character(3)])

    assert [c.id for c in cache.read_snapshot()] == [3]


def test_snapshot_round_trips_character_fields(memory_store: MemoryStore) -> None:
    original = make_character(1, status="unknown", name="Rick Sanchez")
    cache = CharacterCache(memory_store)
    cache.replace_snapshot([original])

    assert cache.read_snapshot() == [original]


def test_filter_by_status_keeps_snapshot_order(memory_store: MemoryStore) -> None:
    cache = CharacterCache(memory_store)
    cache.replace_snapshot(
        [
            make_character(4, status="Alive"),
            make_character(2, status="Dead"),
            make_character(9, status="Alive"),
        ]
    )

    alive = cache.filter_by_snapshot(status_equals(CharacterStatus.ALIVE))

    assert [c.id for c in alive] == [4, 9]


def test_status_predicate_is_case_insensitive() -> None:
    assert status_equals("alive")(make_character(1, status="Alive"))
    assert status_equals("UNKNOWN")(make_character(1, status="unknown"))


def test_filter_by_ids(memory_store: MemoryStore) -> None:
    cache = CharacterCache(memory_store)
    cache.replace_snapshot([make_character(1), make_character(2), make_character(3)])

    assert [c.id for c in cache.filter_by_snapshot(id_in([3, 1, 99]))] == [1, 3]


def test_corrupt_snapshot_reads_as_empty(memory_store: MemoryStore) -> None:
    memory_store.data[StorageKey.CHARACTERS_CACHE.value] = b'[{"id": "nope"}]'

    assert CharacterCache(memory_store).read_snapshot() == []


def test_read_error_reads_as_empty(memory_store: MemoryStore) -> None:
    cache = CharacterCache(memory_store)
    cache.replace_snapshot([make_character(1)])
    memory_store.fail_reads = True

    assert cache.read_snapshot() == []


def test_failed_write_keeps_previous_snapshot(memory_store: MemoryStore) -> None:
    cache = CharacterCache(memory_store)
    cache.replace_snapshot([make_character(1)])
    memory_store.fail_writes = True

    cache.replace_snapshot([make_character(2)])
    memory_store.fail_writes = False

    assert [c.id for c in cache.read_snapshot()] == [1]

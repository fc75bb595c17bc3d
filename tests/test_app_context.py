"""Application context: favorites resolution, clear-all and theme preference."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from conftest import MemoryStore, make_character
from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.feed import FeedFilters, FeedStatus
from core.domain.models import Character, CharacterStatus, Episode, Page
from core.domain.theme import Theme
from core.interfaces.storage import StorageKey
from core.services.app_context import build_app_context
from core.services.theme_store import ThemePreference


class _FakeSource:
    def __init__(self, characters: Sequence[Character], *, fail: bool = False) -> None:
        self.characters = list(characters)
        self.fail = fail
        self.requested: list[list[int]] = []
        self.episode_requests: list[list[str]] = []
        self.totals = {None: 826, CharacterStatus.ALIVE: 439, CharacterStatus.DEAD: 287}

    async def fetch_by_ids(self, ids: Sequence[int]) -> list[Character]:
        self.requested.append(list(ids))
        if self.fail:
            raise TransportError("down", endpoint="/character")
        return [c for c in self.characters if c.id in ids]

    async def fetch_character(self, character_id: int) -> Character:
        if self.fail:
            raise TransportError("down", endpoint=f"/character/{character_id}")
        return next(c for c in self.characters if c.id == character_id)

    async def fetch_episodes(self, urls: Sequence[str]) -> list[Episode]:
        self.episode_requests.append(list(urls))
        return [Episode(id=i + 1, name=f"Episode {i + 1}") for i, _ in enumerate(urls)]

    async def fetch_page(self, page: int, filters: FeedFilters) -> Page:
        if self.fail:
            raise TransportError("down", endpoint="/character")
        return Page(items=[], has_next=True, count=self.totals[filters.status])


def _context(tmp_path: Path, store: MemoryStore, *, online: bool = True):
    settings = AppSettings(storage_dir=tmp_path)
    return build_app_context(settings, online=online, store=store)


@pytest.mark.asyncio
async def test_no_favorites_resolve_to_nothing(tmp_path: Path, memory_store: MemoryStore) -> None:
    ctx = _context(tmp_path, memory_store)
    ctx.source = _FakeSource([make_character(1)])  # type: ignore[assignment]

    assert await ctx.favorite_characters() == []
    assert ctx.source.requested == []


@pytest.mark.asyncio
async def test_online_favorites_come_from_the_remote(tmp_path: Path, memory_store: MemoryStore) -> None:
    ctx = _context(tmp_path, memory_store)
    ctx.source = _FakeSource([make_character(1), make_character(2)])  # type: ignore[assignment]
    ctx.favorites.add(2)

    characters = await ctx.favorite_characters()

    assert [c.id for c in characters] == [2]
    assert ctx.source.requested == [[2]]


@pytest.mark.asyncio
async def test_offline_favorites_come_from_the_snapshot(tmp_path: Path, memory_store: MemoryStore) -> None:
    ctx = _context(tmp_path, memory_store, online=False)
    ctx.cache.replace_snapshot([make_character(1), make_character(2), make_character(3)])
    ctx.favorites.add(3)
    ctx.favorites.add(1)
    ctx.favorites.add(99)

    characters = await ctx.favorite_characters()

    assert [c.id for c in characters] == [1, 3]


@pytest.mark.asyncio
async def test_remote_failure_falls_back_to_the_snapshot(tmp_path: Path, memory_store: MemoryStore) -> None:
    ctx = _context(tmp_path, memory_store)
    ctx.source = _FakeSource([], fail=True)  # type: ignore[assignment]
    ctx.cache.replace_snapshot([make_character(4)])
    ctx.favorites.add(4)

    assert [c.id for c in await ctx.favorite_characters()] == [4]


def test_build_loads_persisted_favorites(tmp_path: Path, memory_store: MemoryStore) -> None:
    memory_store.data[StorageKey.FAVORITES.value] = b"[5,6]"

    assert _context(tmp_path, memory_store).favorites.ids == (5, 6)


def test_new_feed_follows_context_connectivity(tmp_path: Path, memory_store: MemoryStore) -> None:
    ctx = _context(tmp_path, memory_store)
    feed = ctx.new_feed(FeedFilters.build(status="Dead"))
    feed.reset()

    ctx.connectivity.set_online(False)

    assert feed.online is False
    assert feed.status is FeedStatus.LOADING
    assert feed.filters == FeedFilters.build(status="Dead")


def test_clear_all_removes_every_record(tmp_path: Path, memory_store: MemoryStore) -> None:
    ctx = _context(tmp_path, memory_store)
    ctx.favorites.add(1)
    ctx.cache.replace_snapshot([make_character(1)])
    ctx.theme.save(Theme.DARK)

    assert ctx.clear_all() is True

    assert memory_store.data == {}
    assert ctx.favorites.ids == ()
    assert ctx.cache.read_snapshot() == []
    assert ctx.theme.load() is Theme.LIGHT


def test_clear_all_reports_storage_failure(tmp_path: Path, memory_store: MemoryStore) -> None:
    ctx = _context(tmp_path, memory_store)
    ctx.favorites.add(1)
    memory_store.fail_writes = True

    assert ctx.clear_all() is False
    assert ctx.favorites.ids == ()


def test_theme_defaults_to_light_and_toggles(memory_store: MemoryStore) -> None:
    theme = ThemePreference(memory_store)

    assert theme.load() is Theme.LIGHT
    assert theme.toggle() is Theme.DARK
    assert ThemePreference(memory_store).load() is Theme.DARK
    assert memory_store.data[StorageKey.THEME.value] == b'"dark"'


def test_theme_falls_back_on_unusable_values(memory_store: MemoryStore) -> None:
    memory_store.data[StorageKey.THEME.value] = b'"sepia"'

    assert ThemePreference(memory_store).load() is Theme.LIGHT

    memory_store.fail_reads = True
    assert ThemePreference(memory_store).load() is Theme.LIGHT


@pytest.mark.asyncio
async def test_online_detail_fetches_only_the_first_ten_episodes(tmp_path: Path, memory_store: MemoryStore) -> None:
    rick = make_character(1).model_copy(update={"episode": [f"https://api.test/episode/{n}" for n in range(1, 26)]})
    ctx = _context(tmp_path, memory_store)
    ctx.source = _FakeSource([rick])  # type: ignore[assignment]
    ctx.favorites.add(1)

    detail = await ctx.character_detail(1, with_episodes=True)

    assert detail is not None
    assert detail.character.id == 1
    assert detail.favorite is True
    assert detail.from_snapshot is False
    assert len(detail.episodes) == 10
    assert ctx.source.episode_requests == [rick.episode[:10]]


@pytest.mark.asyncio
async def test_offline_detail_reads_the_snapshot(tmp_path: Path, memory_store: MemoryStore) -> None:
    ctx = _context(tmp_path, memory_store, online=False)
    ctx.source = _FakeSource([])  # type: ignore[assignment]
    ctx.cache.replace_snapshot([make_character(2, name="Morty Smith"), make_character(3)])

    detail = await ctx.character_detail(2, with_episodes=True)

    assert detail is not None
    assert detail.character.name == "Morty Smith"
    assert detail.from_snapshot is True
    assert detail.episodes == ()
    assert ctx.source.episode_requests == []
    assert await ctx.character_detail(42) is None


@pytest.mark.asyncio
async def test_detail_falls_back_to_the_snapshot_when_the_remote_fails(
    tmp_path: Path, memory_store: MemoryStore
) -> None:
    ctx = _context(tmp_path, memory_store)
    ctx.source = _FakeSource([], fail=True)  # type: ignore[assignment]
    ctx.cache.replace_snapshot([make_character(5)])

    detail = await ctx.character_detail(5)

    assert detail is not None and detail.from_snapshot is True


@pytest.mark.asyncio
async def test_online_stats_use_the_listing_totals(tmp_path: Path, memory_store: MemoryStore) -> None:
    ctx = _context(tmp_path, memory_store)
    ctx.source = _FakeSource([])  # type: ignore[assignment]

    stats = await ctx.catalog_stats()

    assert (stats.total, stats.alive, stats.dead) == (826, 439, 287)
    assert stats.from_snapshot is False


@pytest.mark.asyncio
async def test_offline_stats_count_the_snapshot(
    tmp_path: Path, memory_store: MemoryStore, three_pages: list[list[Character]]
) -> None:
    ctx = _context(tmp_path, memory_store, online=False)
    ctx.cache.replace_snapshot([c for page in three_pages for c in page])

    stats = await ctx.catalog_stats()

    assert (stats.total, stats.alive, stats.dead) == (6, 3, 2)
    assert stats.from_snapshot is True


@pytest.mark.asyncio
async def test_stats_fall_back_to_the_snapshot_when_the_remote_fails(
    tmp_path: Path, memory_store: MemoryStore
) -> None:
    ctx = _context(tmp_path, memory_store)
    ctx.source = _FakeSource([], fail=True)  # type: ignore[assignment]
    ctx.cache.replace_snapshot([make_character(1, status="Dead")])

    stats = await ctx.catalog_stats()

    assert (stats.total, stats.alive, stats.dead, stats.from_snapshot) == (1, 0, 1, True)

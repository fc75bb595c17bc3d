"""Application context.

Process-scoped components are built once by ``build_app_context`` and handed
to whoever needs them (CLI commands, tests). Nothing in the core reaches for
a module-level singleton.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from adapters.connectivity import ConnectivityMonitor
from adapters.json_store import JsonFileStore
from adapters.rick_and_morty import RickAndMortyClient
from core.config import AppSettings
from core.domain.catalog import EPISODE_PREVIEW_LIMIT, CatalogStats, CharacterDetail
from core.domain.errors import StorageError, TransportError
from core.domain.feed import FeedFilters
from core.domain.models import Character, CharacterStatus, Episode, Page
from core.interfaces.storage import KeyValueStore, StorageKey
from core.services.character_cache import CharacterCache, id_in, status_equals
from core.services.favorites_store import FavoritesStore
from core.services.feed_controller import PaginatedFeedController
from core.services.theme_store import ThemePreference

logger = logging.getLogger(__name__)


def _total(page: Page) -> int:
    return page.count if page.count is not None else len(page.items)


@dataclass
class AppContext:
    settings: AppSettings
    store: KeyValueStore
    source: RickAndMortyClient
    connectivity: ConnectivityMonitor
    favorites: FavoritesStore
    cache: CharacterCache
    theme: ThemePreference

    def new_feed(self, filters: FeedFilters | None = None) -> PaginatedFeedController:
        """Create a feed that follows the context's connectivity."""

        feed = PaginatedFeedController(
            self.source,
            self.cache,
            online=self.connectivity.is_online,
            filters=filters,
        )
        feed.attach(self.connectivity)
        return feed

    async def favorite_characters(self) -> list[Character]:
        """Resolve the favorite ids to characters.

        Online the remote resource is asked for exactly those ids; offline, or
        when that request fails, the snapshot is used and favorites that were
        never cached are left out.
        """

        ids = self.favorites.ids
        if not ids:
            return []

        if self.connectivity.is_online:
            try:
                return await self.source.fetch_by_ids(ids)
            except TransportError as exc:
                logger.warning("Falling back to cached favorites: %s", exc)

        return self.cache.filter_by_snapshot(id_in(ids))

    async def character_detail(self, character_id: int, *, with_episodes: bool = False) -> CharacterDetail | None:
        """Resolve one character for the detail view.

        Online the remote resource answers (plus the first episodes when
        asked); offline, or when that request fails, the snapshot is used and
        no episodes are shown. ``None`` means neither side knows the id.
        """

        favorite = self.favorites.contains(character_id)
        if self.connectivity.is_online:
            try:
                character = await self.source.fetch_character(character_id)
            except TransportError as exc:
                logger.warning("Falling back to the cached character %s: %s", character_id, exc)
            else:
                episodes: list[Episode] = []
                if with_episodes:
                    try:
                        episodes = await self.source.fetch_episodes(character.episode[:EPISODE_PREVIEW_LIMIT])
                    except TransportError as exc:
                        logger.warning("Episodes for character %s unavailable: %s", character_id, exc)
                return CharacterDetail(character=character, favorite=favorite, episodes=tuple(episodes))

        cached = self.cache.filter_by_snapshot(id_in([character_id]))
        if not cached:
            return None
        return CharacterDetail(character=cached[0], favorite=favorite, from_snapshot=True)

    async def catalog_stats(self) -> CatalogStats:
        """Total, alive and dead counts.

        Online they are the listing totals for page 1 of each filter; offline,
        or when any of those requests fails, the snapshot is counted.
        """

        if self.connectivity.is_online:
            try:
                everyone, alive, dead = await asyncio.gather(
                    self.source.fetch_page(1, FeedFilters()),
                    self.source.fetch_page(1, FeedFilters.build(status=CharacterStatus.ALIVE)),
                    self.source.fetch_page(1, FeedFilters.build(status=CharacterStatus.DEAD)),
                )
            except TransportError as exc:
                logger.warning("Falling back to snapshot stats: %s", exc)
            else:
                return CatalogStats(total=_total(everyone), alive=_total(alive), dead=_total(dead))

        snapshot = self.cache.read_snapshot()
        is_alive = status_equals(CharacterStatus.ALIVE)
        is_dead = status_equals(CharacterStatus.DEAD)
        return CatalogStats(
            total=len(snapshot),
            alive=sum(1 for c in snapshot if is_alive(c)),
            dead=sum(1 for c in snapshot if is_dead(c)),
            from_snapshot=True,
        )

    def clear_all(self) -> bool:
        """Delete every persisted record and forget the in-memory favorites."""

        self.favorites.reset_memory()
        try:
            self.store.delete_many(key.value for key in StorageKey)
        except StorageError as exc:
            logger.warning("Could not clear local data: %s", exc)
            return False
        logger.info("Local data cleared")
        return True


def build_app_context(
    settings: AppSettings | None = None,
    *,
    online: bool = True,
    store: KeyValueStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppContext:
    settings = settings or AppSettings()
    store = store or JsonFileStore(settings.storage_dir)

    favorites = FavoritesStore(store)
    favorites.load()

    return AppContext(
        settings=settings,
        store=store,
        source=RickAndMortyClient(settings, transport=transport),
        connectivity=ConnectivityMonitor(online=online),
        favorites=favorites,
        cache=CharacterCache(store),
        theme=ThemePreference(store),
    )

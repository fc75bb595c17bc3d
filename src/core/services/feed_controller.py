"""Paginated feed controller.

This module is the single place that decides which data source backs the
character feed:

- online, the feed pages through the remote resource and, after every page,
  replaces the offline snapshot with everything accumulated so far;
- offline, the feed ignores pagination and filters the snapshot once.

Remote cursors mean nothing against the snapshot (and the other way round), so
a connectivity change resets the feed from its current filters instead of
resuming. Every remote request is tagged with the reset generation and page it
was issued for; a response whose tag is no longer current is dropped.

Offline filtering honours the status filter only. The free-text name query is
a remote feature and is not applied to the snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.domain.errors import TransportError
from core.domain.feed import FeedFilters, FeedState, FeedStatus
from core.domain.models import Character
from core.interfaces.connectivity import ConnectivityObserver, Unsubscribe
from core.interfaces.remote import CharacterSource
from core.services.character_cache import CharacterCache, CharacterPredicate, status_equals

logger = logging.getLogger(__name__)

FIRST_PAGE = 1


@dataclass(frozen=True)
class _RequestTag:
    generation: int
    page: int


def _match_all(_: Character) -> bool:
    return True


class PaginatedFeedController:
    """State machine: idle -> loading -> loaded/exhausted/error."""

    def __init__(
        self,
        source: CharacterSource,
        cache: CharacterCache,
        *,
        online: bool = True,
        filters: FeedFilters | None = None,
    ) -> None:
        self._source = source
        self._cache = cache
        self._online = online
        self._filters = filters or FeedFilters()

        self._status = FeedStatus.IDLE
        self._items: list[Character] = []
        self._next_page = FIRST_PAGE
        self._has_more = True
        self._error: str | None = None

        self._generation = 0
        self._in_flight: _RequestTag | None = None
        self._unsubscribe: Unsubscribe | None = None

    @property
    def state(self) -> FeedState:
        return FeedState(
            status=self._status,
            filters=self._filters,
            items=tuple(self._items),
            next_page=self._next_page,
            has_more=self._has_more,
            online=self._online,
            error=self._error,
        )

    @property
    def status(self) -> FeedStatus:
        return self._status

    @property
    def items(self) -> tuple[Character, ...]:
        return tuple(self._items)

    @property
    def has_more(self) -> bool:
        return self._has_more

    @property
    def is_loading(self) -> bool:
        return self._status is FeedStatus.LOADING

    @property
    def online(self) -> bool:
        return self._online

    @property
    def filters(self) -> FeedFilters:
        return self._filters

    def reset(self, filters: FeedFilters | None = None) -> None:
        """Start over from the first page, keeping the filters unless new ones are given."""

        if filters is not None:
            self._filters = filters
        self._generation += 1
        self._in_flight = None
        self._items = []
        self._next_page = FIRST_PAGE
        self._has_more = True
        self._error = None
        self._status = FeedStatus.LOADING
        logger.debug(
            "Feed reset (generation=%s, online=%s, filters=%s)",
            self._generation,
            self._online,
            self._filters,
        )

    async def load_next(self) -> FeedState:
        if self._status is FeedStatus.EXHAUSTED:
            return self.state
        if self._in_flight is not None:
            return self.state

        if not self._online:
            self._load_from_snapshot()
            return self.state

        tag = _RequestTag(generation=self._generation, page=self._next_page)
        self._in_flight = tag
        self._status = FeedStatus.LOADING
        self._error = None

        try:
            page = await self._source.fetch_page(tag.page, self._filters)
        except TransportError as exc:
            if self._settle(tag):
                self._status = FeedStatus.ERROR
                self._error = str(exc)
                logger.warning("Loading page %s failed: %s", tag.page, exc)
            return self.state
        except Exception:
            if self._settle(tag):
                self._status = FeedStatus.ERROR
                self._error = "Unexpected failure while loading characters"
            raise

        if not self._settle(tag):
            logger.debug("Dropping stale response for page %s (generation %s)", tag.page, tag.generation)
            return self.state

        self._items.extend(page.items)
        self._next_page = tag.page + 1
        self._has_more = page.has_next
        self._status = FeedStatus.LOADED if self._has_more else FeedStatus.EXHAUSTED
        self._cache.replace_snapshot(self._items)
        logger.debug("Loaded page %s (%d items, has_more=%s)", tag.page, len(page.items), self._has_more)
        return self.state

    async def refresh(self) -> FeedState:
        """Reset from the current filters and load the first page."""

        self.reset()
        return await self.load_next()

    def set_online(self, online: bool) -> None:
        if online == self._online:
            return
        self._online = online
        if self._status is not FeedStatus.IDLE:
            self.reset()

    def attach(self, observer: ConnectivityObserver) -> None:
        """Follow ``observer``; the current value is applied immediately."""

        self.detach()
        self._unsubscribe = observer.subscribe(self.set_online)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _settle(self, tag: _RequestTag) -> bool:
        """Clear the in-flight marker if ``tag`` is still the current request."""

        if self._in_flight is not tag:
            return False
        self._in_flight = None
        return True

    def _snapshot_predicate(self) -> CharacterPredicate:
        if self._filters.name:
            logger.debug("Name query %r is not applied to the offline snapshot", self._filters.name)
        if self._filters.status is None:
            return _match_all
        return status_equals(self._filters.status)

    def _load_from_snapshot(self) -> None:
        self._items = self._cache.filter_by_snapshot(self._snapshot_predicate())
        self._next_page = FIRST_PAGE
        self._has_more = False
        self._error = None
        self._status = FeedStatus.EXHAUSTED

"""Favorites store.

Single owner of the favorite-id set. Every mutation goes through
``reduce_favorites`` and is followed by a full-set write to the key-value
store. Persistence is best-effort: storage failures are logged and the
in-memory state stays authoritative for the rest of the session.
"""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from core.domain.errors import StorageError
from core.domain.favorites import (
    AddFavorite,
    ClearFavorites,
    FavoritesAction,
    FavoritesState,
    RemoveFavorite,
    SetFavorites,
    reduce_favorites,
)
from core.interfaces.storage import KeyValueStore, StorageKey

logger = logging.getLogger(__name__)

_IDS_ADAPTER = TypeAdapter(list[int])


class FavoritesStore:
    def __init__(self, store: KeyValueStore, *, key: str = StorageKey.FAVORITES.value) -> None:
        self._store = store
        self._key = key
        self._state = FavoritesState()

    @property
    def state(self) -> FavoritesState:
        return self._state

    @property
    def ids(self) -> tuple[int, ...]:
        return self._state.ids

    @property
    def count(self) -> int:
        return len(self._state)

    def contains(self, character_id: int) -> bool:
        return character_id in self._state

    def load(self) -> FavoritesState:
        """Replace the in-memory set with the persisted one.

        Missing, unreadable or corrupt data yields an empty set. Loading does
        not write back.
        """

        ids: list[int] = []
        try:
            raw = self._store.get(self._key)
            if raw is not None:
                ids = _IDS_ADAPTER.validate_json(raw)
        except StorageError as exc:
            logger.warning("Could not read favorites, starting empty: %s", exc)
        except ValidationError as exc:
            logger.warning("Stored favorites are corrupt, starting empty: %s", exc)

        self._state = reduce_favorites(FavoritesState(), SetFavorites(tuple(ids)))
        return self._state

    def dispatch(self, action: FavoritesAction) -> FavoritesState:
        """Apply ``action`` and persist the full resulting set."""

        self._state = reduce_favorites(self._state, action)
        self._persist()
        return self._state

    def add(self, character_id: int, name: str | None = None) -> None:
        self.dispatch(AddFavorite(character_id))
        logger.info("Favorite added: id=%s name=%s", character_id, name)

    def remove(self, character_id: int, name: str | None = None) -> None:
        self.dispatch(RemoveFavorite(character_id))
        logger.info("Favorite removed: id=%s name=%s", character_id, name)

    def toggle(self, character_id: int, name: str | None = None) -> bool:
        """Flip membership of ``character_id`` and return the new membership."""

        if self.contains(character_id):
            self.remove(character_id, name)
            return False
        self.add(character_id, name)
        return True

    def clear(self) -> None:
        count = self.count
        self.dispatch(ClearFavorites())
        logger.info("Favorites cleared: count=%s", count)

    def reset_memory(self) -> None:
        """Drop the in-memory set without writing (the record was deleted elsewhere)."""

        self._state = FavoritesState()

    def _persist(self) -> None:
        payload = _IDS_ADAPTER.dump_json(list(self._state.ids))
        try:
            self._store.set(self._key, payload)
        except StorageError as exc:
            logger.warning("Could not persist favorites: %s", exc)

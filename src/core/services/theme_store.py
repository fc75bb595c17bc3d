"""Persisted light/dark preference."""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from core.domain.errors import StorageError
from core.domain.theme import Theme
from core.interfaces.storage import KeyValueStore, StorageKey

logger = logging.getLogger(__name__)

_THEME_ADAPTER = TypeAdapter(Theme)


class ThemePreference:
    def __init__(self, store: KeyValueStore, *, key: str = StorageKey.THEME.value) -> None:
        self._store = store
        self._key = key

    def load(self) -> Theme:
        try:
            raw = self._store.get(self._key)
        except StorageError as exc:
            logger.warning("Could not read theme preference: %s", exc)
            return Theme.default()
        if raw is None:
            return Theme.default()
        try:
            return _THEME_ADAPTER.validate_json(raw)
        except ValidationError:
            logger.warning("Stored theme preference is unusable, using %s", Theme.default().value)
            return Theme.default()

    def save(self, theme: Theme) -> None:
        try:
            self._store.set(self._key, _THEME_ADAPTER.dump_json(theme))
        except StorageError as exc:
            logger.warning("Could not persist theme preference: %s", exc)

    def toggle(self) -> Theme:
        theme = self.load().toggled()
        self.save(theme)
        logger.info("Theme changed to %s", theme.value)
        return theme

"""Character cache: the offline snapshot.

Holds the last fully observed online list of characters. The snapshot is only
ever replaced as a whole; there is no merge or patch operation.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Sequence

from pydantic import TypeAdapter, ValidationError

from core.domain.errors import StorageError
from core.domain.models import Character, CharacterStatus
from core.interfaces.storage import KeyValueStore, StorageKey

logger = logging.getLogger(__name__)

CharacterPredicate = Callable[[Character], bool]

_SNAPSHOT_ADAPTER = TypeAdapter(list[Character])


def status_equals(status: CharacterStatus | str) -> CharacterPredicate:
    """Case-insensitive status equality."""

    wanted = (status.value if isinstance(status, CharacterStatus) else status).strip().lower()

    def predicate(character: Character) -> bool:
        return character.status.value.lower() == wanted

    return predicate


def id_in(ids: Iterable[int]) -> CharacterPredicate:
    wanted = frozenset(ids)

    def predicate(character: Character) -> bool:
        return character.id in wanted

    return predicate


class CharacterCache:
    def __init__(self, store: KeyValueStore, *, key: str = StorageKey.CHARACTERS_CACHE.value) -> None:
        self._store = store
        self._key = key

    def replace_snapshot(self, characters: Sequence[Character]) -> None:
        """Overwrite the whole snapshot. Write failures are logged, never raised."""

        payload = _SNAPSHOT_ADAPTER.dump_json(list(characters))
        try:
            self._store.set(self._key, payload)
        except StorageError as exc:
            logger.warning("Could not write character snapshot: %s", exc)
            return
        logger.debug("Character snapshot replaced (%d items)", len(characters))

    def read_snapshot(self) -> list[Character]:
        try:
            raw = self._store.get(self._key)
        except StorageError as exc:
            logger.warning("Could not read character snapshot: %s", exc)
            return []
        if raw is None:
            return []
        try:
            return _SNAPSHOT_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Character snapshot is corrupt, ignoring it: %s", exc)
            return []

    def filter_by_snapshot(self, predicate: CharacterPredicate) -> list[Character]:
        return [character for character in self.read_snapshot() if predicate(character)]

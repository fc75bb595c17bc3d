"""Contrato del almacén clave-valor persistente."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Protocol, runtime_checkable


class StorageKey(str, Enum):
    """Los tres registros independientes que persiste la aplicación."""

    FAVORITES = "multiverso_hub_favorites"
    CHARACTERS_CACHE = "multiverso_hub_characters_cache"
    THEME = "multiverso_hub_theme"


@runtime_checkable
class KeyValueStore(Protocol):
    """Almacén durable de bytes por clave.

    Reglas de diseño:
    - `get` devuelve `None` si la clave no existe (no es un error).
    - Los fallos se señalan con `StorageReadError`/`StorageWriteError`; quien
      consume el almacén decide si los absorbe.
    """

    def get(self, key: str) -> bytes | None:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...

    def delete_many(self, keys: Iterable[str]) -> None:
        ...

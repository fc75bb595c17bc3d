"""Contrato del recurso remoto de personajes.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- El controlador del feed y el contexto de aplicación dependen de esta
  abstracción; los tests usan fuentes en memoria.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from core.domain.feed import FeedFilters
from core.domain.models import Character, Page


@runtime_checkable
class CharacterSource(Protocol):
    """Recurso paginado de personajes.

    Reglas de diseño:
    - Todos los métodos son asíncronos porque hacen I/O (HTTP).
    - Un fallo de transporte se señala con `TransportError`, nunca con un
      resultado vacío.
    """

    async def fetch_page(self, page: int, filters: FeedFilters) -> Page:
        """Devuelve la página `page` (1-based) del listado filtrado."""

        ...

    async def fetch_by_ids(self, ids: Sequence[int]) -> list[Character]:
        """Devuelve los personajes pedidos; lista vacía sin llamada de red si `ids` está vacío."""

        ...

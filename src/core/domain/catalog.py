"""Vistas de lectura del catálogo: detalle de personaje y estadísticas.

Ambas se resuelven igual que el listado: contra el recurso remoto cuando hay
conexión y contra la instantánea local cuando no (o cuando el remoto falla).
`from_snapshot` indica cuál de los dos respondió.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.domain.models import Character, Episode

# La vista de detalle solo pide los primeros episodios del personaje.
EPISODE_PREVIEW_LIMIT = 10


@dataclass(frozen=True)
class CharacterDetail:
    character: Character
    favorite: bool
    episodes: tuple[Episode, ...] = ()
    from_snapshot: bool = False


@dataclass(frozen=True)
class CatalogStats:
    """Totales del catálogo (todos, vivos, muertos)."""

    total: int
    alive: int
    dead: int
    from_snapshot: bool = False

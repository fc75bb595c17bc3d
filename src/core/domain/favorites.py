"""Favorites reducer.

The favorites set is changed only through ``reduce_favorites``, a pure
``(state, action) -> state`` function over a closed set of actions. The
``FavoritesStore`` service is the single owner that dispatches actions and
persists the resulting state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union


@dataclass(frozen=True)
class FavoritesState:
    """Ordered, duplicate-free favorite ids."""

    ids: tuple[int, ...] = ()

    def __contains__(self, character_id: object) -> bool:
        return character_id in self.ids

    def __len__(self) -> int:
        return len(self.ids)


@dataclass(frozen=True)
class AddFavorite:
    character_id: int


@dataclass(frozen=True)
class RemoveFavorite:
    character_id: int


@dataclass(frozen=True)
class ClearFavorites:
    pass


@dataclass(frozen=True)
class SetFavorites:
    character_ids: tuple[int, ...]


FavoritesAction = Union[AddFavorite, RemoveFavorite, ClearFavorites, SetFavorites]


def _unique(ids: Iterable[int]) -> tuple[int, ...]:
    seen: set[int] = set()
    out: list[int] = []
    for character_id in ids:
        if character_id in seen:
            continue
        seen.add(character_id)
        out.append(character_id)
    return tuple(out)


def reduce_favorites(state: FavoritesState, action: FavoritesAction) -> FavoritesState:
    """Apply ``action`` and return the next state.

    Returns ``state`` itself (same object) when the action changes nothing.
    ``FavoritesStore`` still writes the full set after every dispatch.
    """

    if isinstance(action, AddFavorite):
        if action.character_id in state.ids:
            return state
        return FavoritesState(ids=(*state.ids, action.character_id))

    if isinstance(action, RemoveFavorite):
        if action.character_id not in state.ids:
            return state
        return FavoritesState(ids=tuple(i for i in state.ids if i != action.character_id))

    if isinstance(action, ClearFavorites):
        if not state.ids:
            return state
        return FavoritesState()

    if isinstance(action, SetFavorites):
        ids = _unique(action.character_ids)
        if ids == state.ids:
            return state
        return FavoritesState(ids=ids)

    raise TypeError(f"Unsupported favorites action: {action!r}")

"""Shared fixtures: in-memory fakes for the storage and remote Protocols."""

from __future__ import annotations

import asyncio
from typing import Iterable, Sequence

import pytest

from core.domain.errors import StorageReadError, StorageWriteError, TransportError
from core.domain.feed import FeedFilters
from core.domain.models import Character, Page


class MemoryStore:
    """Dict-backed ``KeyValueStore`` that can be told to fail."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.writes: list[str] = []

    def get(self, key: str) -> bytes | None:
        if self.fail_reads:
            raise StorageReadError("read refused", key=key)
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        if self.fail_writes:
            raise StorageWriteError("write refused", key=key)
        self.data[key] = value
        self.writes.append(key)

    def delete_many(self, keys: Iterable[str]) -> None:
        if self.fail_writes:
            raise StorageWriteError("delete refused", key=",".join(keys))
        for key in keys:
            self.data.pop(key, None)


class PagedSource:
    """``CharacterSource`` serving fixed pages; failures and gates are scripted per call."""

    def __init__(self, pages: Sequence[Sequence[Character]]) -> None:
        self.pages = [list(p) for p in pages]
        self.calls: list[tuple[int, FeedFilters]] = []
        self.fail_next = 0
        self.gate: asyncio.Event | None = None

    async def fetch_page(self, page: int, filters: FeedFilters) -> Page:
        self.calls.append((page, filters))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_next:
            self.fail_next -= 1
            raise TransportError("boom", endpoint="/character", status_code=500)
        items = self.pages[page - 1] if page <= len(self.pages) else []
        return Page(items=items, has_next=page < len(self.pages))

    async def fetch_by_ids(self, ids: Sequence[int]) -> list[Character]:
        everything = [c for page in self.pages for c in page]
        return [c for c in everything if c.id in set(ids)]


def make_character(character_id: int, *, status: str = "Alive", name: str | None = None) -> Character:
    return Character.model_validate(
        {
            "id": character_id,
            "name": name or f"Character {character_id}",
            "status": status,
            "species": "Human",
            "type": "",
            "gender": "Male",
            "origin": {"name": "Earth (C-137)", "url": "https://rickandmortyapi.com/api/location/1"},
            "location": {"name": "Citadel of Ricks", "url": "https://rickandmortyapi.com/api/location/3"},
            "image": f"https://rickandmortyapi.com/api/character/avatar/{character_id}.jpeg",
            "episode": ["https://rickandmortyapi.com/api/episode/1"],
            "url": f"https://rickandmortyapi.com/api/character/{character_id}",
            "created": "2017-11-04T18:48:46.250Z",
        }
    )


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def three_pages() -> list[list[Character]]:
    return [
        [make_character(1, status="Alive"), make_character(2, status="Dead")],
        [make_character(3, status="Alive"), make_character(4, status="unknown")],
        [make_character(5, status="Dead"), make_character(6, status="Alive")],
    ]

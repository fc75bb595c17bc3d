"""Cliente del recurso remoto de personajes (Rick and Morty API).

Este cliente está en adapters porque es I/O puro (HTTP). Traduce:
- respuestas no exitosas, fallos de red y cuerpos que no encajan con el
  modelo a `TransportError`;
- el `404` del listado (la forma en que el API dice "sin coincidencias") a una
  página vacía y final.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Sequence, TypeVar

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.feed import FeedFilters
from core.domain.models import Character, Episode, Page

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RickAndMortyClient:
    """Implementa `CharacterSource` sobre el API público.

    Además expone el detalle de un personaje y sus episodios, que solo usa la
    vista de detalle.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport
        self._base_url = self._settings.api_base_url.rstrip("/")

    def _client(self) -> httpx.AsyncClient:
        return build_async_client(self._settings, transport=self._transport)

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            resp = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Remote request to %s failed: %s", url, exc)
            raise TransportError(f"Request failed: {exc}", endpoint=url) from exc

        if resp.status_code != 200:
            logger.warning("Remote request to %s answered HTTP %s", url, resp.status_code)
            raise TransportError("HTTP error", endpoint=url, status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError("Invalid JSON body", endpoint=url, status_code=resp.status_code) from exc

    @staticmethod
    def _parse(url: str, build: Callable[[Any], T], payload: Any) -> T:
        """Valida el cuerpo con el modelo; un esquema inesperado es un fallo de transporte."""

        try:
            return build(payload)
        except ValidationError as exc:
            logger.warning("Remote body from %s does not match the schema: %s", url, exc.error_count())
            raise TransportError("Unexpected response body", endpoint=url) from exc

    async def fetch_page(self, page: int, filters: FeedFilters) -> Page:
        url = f"{self._base_url}/character"
        params: dict[str, Any] = {"page": page}
        if filters.status is not None:
            params["status"] = filters.status.value.lower()
        if filters.name:
            params["name"] = filters.name

        try:
            async with self._client() as client:
                payload = await self._get_json(client, url, params=params)
        except TransportError as exc:
            if exc.status_code == 404:
                logger.debug("No characters for page=%s filters=%s", page, filters)
                return Page.empty()
            raise

        if not isinstance(payload, dict):
            raise TransportError("Unexpected listing body", endpoint=url)
        return self._parse(url, Page.from_api, payload)

    async def fetch_character(self, character_id: int) -> Character:
        url = f"{self._base_url}/character/{character_id}"
        async with self._client() as client:
            payload = await self._get_json(client, url)
        return self._parse(url, Character.model_validate, payload)

    async def fetch_by_ids(self, ids: Sequence[int]) -> list[Character]:
        if not ids:
            return []

        joined = ",".join(str(i) for i in ids)
        url = f"{self._base_url}/character/{joined}"
        async with self._client() as client:
            payload = await self._get_json(client, url)

        # Con un solo id el API devuelve un objeto, no una lista.
        items = payload if isinstance(payload, list) else [payload]
        return [self._parse(url, Character.model_validate, item) for item in items]

    async def fetch_episode(self, url: str) -> Episode:
        async with self._client() as client:
            payload = await self._get_json(client, url)
        return self._parse(url, Episode.model_validate, payload)

    async def fetch_episodes(self, urls: Sequence[str]) -> list[Episode]:
        if not urls:
            return []

        async with self._client() as client:
            payloads = await asyncio.gather(*(self._get_json(client, url) for url in urls))
        return [self._parse(url, Episode.model_validate, payload) for url, payload in zip(urls, payloads)]

"""Observador de conectividad.

La app móvil recibía el estado de red del sistema operativo. Aquí el estado se
fija explícitamente (`set_online`, p.ej. desde `--offline` en la CLI) o se
obtiene sondeando el recurso remoto (`probe`).
"""

from __future__ import annotations

import logging

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.interfaces.connectivity import ConnectivityListener, Unsubscribe

logger = logging.getLogger(__name__)


class ConnectivityMonitor:
    """Implementa `ConnectivityObserver`: notifica solo en transiciones."""

    def __init__(self, online: bool = True) -> None:
        self._online = online
        self._listeners: list[ConnectivityListener] = []

    @property
    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: ConnectivityListener) -> Unsubscribe:
        self._listeners.append(listener)
        listener(self._online)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_online(self, online: bool) -> None:
        if online == self._online:
            return
        self._online = online
        logger.info("Connectivity changed: %s", "online" if online else "offline")
        for listener in list(self._listeners):
            listener(online)

    async def probe(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> bool:
        """Sondea el recurso remoto y actualiza el estado.

        Cualquier respuesta HTTP cuenta como "online": el servidor es alcanzable
        aunque responda con error.
        """

        settings = settings or AppSettings()
        try:
            async with build_async_client(settings, transport=transport) as client:
                await client.get(settings.api_base_url)
            online = True
        except httpx.HTTPError as exc:
            logger.info("Connectivity probe failed: %s", exc)
            online = False
        self.set_online(online)
        return online

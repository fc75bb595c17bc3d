"""Contrato del observador de conectividad."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

ConnectivityListener = Callable[[bool], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class ConnectivityObserver(Protocol):
    """Fuente del booleano online/offline.

    `subscribe` emite el valor actual de inmediato y después una vez por cada
    transición; devuelve la función para cancelar la suscripción.
    """

    @property
    def is_online(self) -> bool:
        ...

    def subscribe(self, listener: ConnectivityListener) -> Unsubscribe:
        ...

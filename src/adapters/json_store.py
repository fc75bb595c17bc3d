"""Almacén clave-valor en disco.

Un fichero por clave dentro de `AppSettings.storage_dir`. Cada escritura va a
un fichero temporal que luego reemplaza al definitivo (`os.replace`), así un
lector nunca ve un registro a medio escribir.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from core.domain.errors import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """Implementa `KeyValueStore` con ficheros `<key>.json`."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._root / f"{key}.json"

    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageReadError(f"Could not read {path}: {exc}", key=key) from exc

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        tmp = path.with_name(f".{path.name}.tmp")
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(value)
            os.replace(tmp, path)
        except OSError as exc:
            raise StorageWriteError(f"Could not write {path}: {exc}", key=key) from exc
        logger.debug("Stored %s (%d bytes)", key, len(value))

    def delete_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            path = self._path(key)
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise StorageWriteError(f"Could not delete {path}: {exc}", key=key) from exc

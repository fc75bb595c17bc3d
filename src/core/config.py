"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/almacenamiento) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping

from dotenv import set_key
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "MULTIVERSO_HUB_"
APP_DIR_NAME = "multiverso-hub"


def get_user_config_dir() -> Path:
    """Directorio por usuario: `.env` global y, por defecto, el almacén."""

    if sys.platform.startswith("win"):
        root = Path(os.environ.get("APPDATA", str(Path.home())))
    elif sys.platform == "darwin":
        root = Path.home() / "Library" / "Application Support"
    else:
        root = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return root / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def save_user_settings(values: Mapping[str, str], *, env_path: Path | None = None) -> Path:
    """Guarda campos de `AppSettings` en el .env del usuario.

    Las claves son nombres de campo (`api_base_url`); se escriben con el
    prefijo de entorno y se conservan las demás líneas del fichero.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(exist_ok=True)
    for field, value in values.items():
        set_key(str(env_path), f"{ENV_PREFIX}{field.upper()}", value)
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="https://rickandmortyapi.com/api",
        min_length=8,
        description="Base URL del recurso remoto de personajes.",
    )
    http_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="multiverso-hub/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para peticiones al recurso remoto.",
    )
    storage_dir: Path = Field(
        default_factory=lambda: get_user_config_dir() / "storage",
        description="Directorio del almacén clave-valor (favoritos, caché, tema).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging para la CLI (DEBUG, INFO, WARNING...).",
    )

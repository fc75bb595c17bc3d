"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- El mismo modelo sirve para leer la respuesta remota y para persistir la
  instantánea de caché (`model_dump(mode="json")`).

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class CharacterStatus(str, Enum):
    """Estado vital de un personaje, tal y como lo publica el recurso remoto."""

    ALIVE = "Alive"
    DEAD = "Dead"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "CharacterStatus | None":
        # El recurso remoto mezcla "unknown" y "Unknown".
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None


class CharacterGender(str, Enum):
    FEMALE = "Female"
    MALE = "Male"
    GENDERLESS = "Genderless"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "CharacterGender | None":
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None


class LocationRef(BaseModel):
    """Nombre visible + localizador de un origen/ubicación."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(default="", description="Nombre visible del lugar.")
    url: str = Field(default="", description="Localizador del recurso remoto (puede ser vacío).")


class Character(BaseModel):
    """Personaje del catálogo.

    Por qué frozen:
    - Un personaje es inmutable una vez obtenido; una nueva lectura del mismo
      `id` produce un objeto nuevo que reemplaza al anterior donde esté guardado.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(..., gt=0, description="Identidad estable asignada por el recurso remoto.")
    name: str = Field(..., min_length=1, description="Nombre del personaje.")
    status: CharacterStatus = Field(
        default=CharacterStatus.UNKNOWN,
        description="Alive, Dead o unknown.",
    )
    species: str = Field(default="", description="Especie.")
    type: str = Field(default="", description="Subespecie/variante (a menudo vacío).")
    gender: CharacterGender = Field(default=CharacterGender.UNKNOWN, description="Género.")
    origin: LocationRef = Field(default_factory=LocationRef, description="Lugar de origen.")
    location: LocationRef = Field(
        default_factory=LocationRef,
        description="Última ubicación conocida.",
    )
    image: str = Field(default="", description="Localizador del avatar.")
    episode: list[str] = Field(
        default_factory=list,
        description="Localizadores de episodios, en orden narrativo.",
    )
    url: str = Field(default="", description="Localizador canónico del personaje.")
    created: datetime | None = Field(default=None, description="Alta del registro en el recurso remoto.")

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return CharacterStatus(value)
        return value

    @field_validator("gender", mode="before")
    @classmethod
    def _normalize_gender(cls, value: Any) -> Any:
        if isinstance(value, str):
            return CharacterGender(value)
        return value


class Page(BaseModel):
    """Una página del listado remoto de personajes."""

    items: list[Character] = Field(default_factory=list, description="Personajes de la página.")
    has_next: bool = Field(default=False, description="Existe una página siguiente.")
    count: int | None = Field(default=None, ge=0, description="Total de personajes del listado.")

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Page":
        """Construye la página a partir del cuerpo `{info, results}` del recurso remoto."""

        info = payload.get("info") if isinstance(payload.get("info"), dict) else {}
        results = payload.get("results") or []
        return cls(
            items=[Character.model_validate(item) for item in results],
            has_next=info.get("next") is not None,
            count=info.get("count"),
        )

    @classmethod
    def empty(cls) -> "Page":
        return cls(items=[], has_next=False, count=0)


class Episode(BaseModel):
    """Episodio referenciado por un personaje (vista de detalle)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1)
    air_date: str = Field(default="", description="Fecha de emisión tal y como la publica el remoto.")
    episode: str = Field(default="", description="Código del episodio (p.ej. 'S01E01').")
    characters: list[str] = Field(default_factory=list)
    url: str = Field(default="")
    created: datetime | None = Field(default=None)

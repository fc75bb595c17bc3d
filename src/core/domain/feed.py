"""Feed state types.

The feed is the live, filtered, paginated view of characters. These types are
transient: a feed is created per screen (or CLI command), rebuilt whenever the
filters or the connectivity change, and discarded afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from core.domain.models import Character, CharacterStatus


class FeedStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    EXHAUSTED = "exhausted"
    ERROR = "error"


@dataclass(frozen=True)
class FeedFilters:
    """Filter criteria of a feed.

    ``name`` is a free-text query honoured only by the remote resource; the
    offline snapshot is filtered by ``status`` alone.
    """

    status: CharacterStatus | None = None
    name: str | None = None

    @classmethod
    def build(cls, *, status: str | CharacterStatus | None = None, name: str | None = None) -> "FeedFilters":
        """Normalize raw user input (empty strings mean "no filter")."""

        parsed_status: CharacterStatus | None = None
        if isinstance(status, CharacterStatus):
            parsed_status = status
        elif status and status.strip():
            parsed_status = CharacterStatus(status.strip())
        cleaned_name = name.strip() if name else None
        return cls(status=parsed_status, name=cleaned_name or None)


@dataclass(frozen=True)
class FeedState:
    """Read-only view of a feed handed to the UI layer."""

    status: FeedStatus
    filters: FeedFilters
    items: tuple[Character, ...] = field(default_factory=tuple)
    next_page: int = 1
    has_more: bool = True
    online: bool = True
    error: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.status is FeedStatus.LOADING

"""Theme preference values for Multiverso Hub.

The preference is the third record of the key-value store, next to the
favorites set and the character snapshot. Keeping it in the domain layer lets
both the CLI and the services share one source of truth.
"""

from __future__ import annotations

from enum import Enum


class Theme(str, Enum):
    """Supported color schemes."""

    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def default(cls) -> "Theme":
        """Return the theme used on first run and whenever the stored value is unusable."""

        return cls.LIGHT

    def toggled(self) -> "Theme":
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT

    def label(self) -> str:
        """Human readable label for the CLI and logging."""

        return "Dark" if self is Theme.DARK else "Light"

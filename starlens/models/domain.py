"""Domain values decoded from the GitHub API and the enums the controller works with."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Repository:
    """A starred repository. Identity is `id`."""

    id: int
    name: str
    url: str
    stars: int
    updated_at: str
    description: Optional[str] = None
    language: Optional[str] = None
    topics: tuple[str, ...] = ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Repository):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True, slots=True)
class User:
    login: str
    avatar_url: str
    name: Optional[str] = None
    bio: Optional[str] = None


class SortMode(str, Enum):
    BY_STARS = "stars"
    BY_UPDATED = "updated"
    BY_NAME = "name"

    @classmethod
    def parse(cls, raw: str) -> "SortMode":
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown sort mode: {raw!r}") from None


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Theme":
        """Anything other than the two known values falls back to light."""
        if raw == cls.DARK.value:
            return cls.DARK
        return cls.LIGHT

    def toggled(self) -> "Theme":
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK

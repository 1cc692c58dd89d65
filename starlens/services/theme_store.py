"""Persistence of the theme preference."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

from starlens.config.settings import settings

logger = logging.getLogger(__name__)


class ThemeStore(Protocol):
    def load(self) -> str: ...

    def save(self, value: str) -> None: ...


class FileThemeStore:
    """Keeps the preference as a single line in a text file."""

    def __init__(self, path: Optional[Path] = None, *, default: Optional[str] = None) -> None:
        self.path = Path(path or settings.THEME_STORE_PATH)
        self.default = default or settings.DEFAULT_THEME

    def load(self) -> str:
        try:
            stored = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return self.default
        except OSError as e:
            logger.warning(f"Failed to read theme preference from {self.path}: {e}")
            return self.default
        return stored or self.default

    def save(self, value: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(value, encoding="utf-8")


class MemoryThemeStore:
    """In-process store for tests and the one-shot handler."""

    def __init__(self, value: Optional[str] = None, *, default: Optional[str] = None) -> None:
        self.value = value
        self.default = default or settings.DEFAULT_THEME
        self.saved: list[str] = []

    def load(self) -> str:
        return self.value or self.default

    def save(self, value: str) -> None:
        self.value = value
        self.saved.append(value)

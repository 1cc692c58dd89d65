"""Screens the router can target."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from starlens.config.settings import settings

USERS_SEGMENT = "users"
SETTINGS_SEGMENT = "settings"


@dataclass(frozen=True, slots=True)
class Home:
    pass


@dataclass(frozen=True, slots=True)
class Repositories:
    username: str

    def __post_init__(self) -> None:
        if not self.username.strip():
            raise ValueError("Repositories route requires a username")


@dataclass(frozen=True, slots=True)
class Settings:
    pass


Route = Union[Home, Repositories, Settings]


def parse_route(path: str, base_path: Optional[str] = None) -> Route:
    """Map a URL path to a screen; unknown paths land on Home."""
    prefix = (base_path if base_path is not None else settings.BASE_PATH).rstrip("/")
    if prefix and (path == prefix or path.startswith(prefix + "/")):
        path = path[len(prefix):]

    segments = [segment for segment in path.split("?", 1)[0].split("/") if segment]
    if segments == [SETTINGS_SEGMENT]:
        return Settings()
    if len(segments) == 2 and segments[0] == USERS_SEGMENT:
        return Repositories(segments[1])
    return Home()


def route_path(route: Route, base_path: Optional[str] = None) -> str:
    prefix = (base_path if base_path is not None else settings.BASE_PATH).rstrip("/")
    if isinstance(route, Repositories):
        return f"{prefix}/{USERS_SEGMENT}/{route.username}"
    if isinstance(route, Settings):
        return f"{prefix}/{SETTINGS_SEGMENT}"
    return f"{prefix}/"

"""Typed contracts for GitHub client responses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar


T = TypeVar("T")


class FetchState(str, Enum):
    """Normalized response state handed to the controller."""

    OK = "ok"
    FAILED = "failed"


class FetchErrorKind(str, Enum):
    BAD_URL = "bad_url"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    BAD_STATUS = "bad_status"
    BAD_BODY = "bad_body"


@dataclass(frozen=True, slots=True)
class FetchError:
    """Why a fetch failed. `status_code` is set for BAD_STATUS, `detail` for BAD_URL/BAD_BODY."""

    kind: FetchErrorKind
    status_code: Optional[int] = None
    detail: Optional[str] = None

    @classmethod
    def bad_url(cls, url: str) -> "FetchError":
        return cls(FetchErrorKind.BAD_URL, detail=url)

    @classmethod
    def timeout(cls) -> "FetchError":
        return cls(FetchErrorKind.TIMEOUT)

    @classmethod
    def network_error(cls) -> "FetchError":
        return cls(FetchErrorKind.NETWORK_ERROR)

    @classmethod
    def bad_status(cls, status_code: int) -> "FetchError":
        return cls(FetchErrorKind.BAD_STATUS, status_code=status_code)

    @classmethod
    def bad_body(cls, detail: str) -> "FetchError":
        return cls(FetchErrorKind.BAD_BODY, detail=detail)

    def describe(self) -> str:
        """Human-readable rendering used in notifications."""
        if self.kind == FetchErrorKind.BAD_URL:
            return f"Bad URL: {self.detail}"
        if self.kind == FetchErrorKind.TIMEOUT:
            return "Request timed out"
        if self.kind == FetchErrorKind.NETWORK_ERROR:
            return "Network error"
        if self.kind == FetchErrorKind.BAD_STATUS:
            return f"Bad status: {self.status_code}"
        return f"Bad body: {self.detail}"


@dataclass(slots=True)
class FetchResult(Generic[T]):
    """Container that separates payload from fetch semantics."""

    state: FetchState
    data: Optional[T] = None
    error: Optional[FetchError] = None
    status_code: Optional[int] = None

    @classmethod
    def ok(cls, data: T, *, status_code: Optional[int] = 200) -> "FetchResult[T]":
        return cls(state=FetchState.OK, data=data, status_code=status_code)

    @classmethod
    def failed(cls, error: FetchError, *, status_code: Optional[int] = None) -> "FetchResult[T]":
        return cls(state=FetchState.FAILED, error=error, status_code=status_code)

    @property
    def is_ok(self) -> bool:
        return self.state == FetchState.OK

    @property
    def is_failed(self) -> bool:
        return self.state == FetchState.FAILED

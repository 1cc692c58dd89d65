"""Lifecycle of one remotely fetched value.

A resource is exactly one of ``NotRequested``, ``Pending``, ``Ready`` or
``Failed``. ``ResourceTracker`` owns the current state and only accepts a
completion carrying the tag of the request it is waiting on, so a response
for a superseded request can never overwrite a newer one.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from starlens.clients.contracts import FetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RequestTag:
    """Identifies one issued fetch: the username it targets and its generation."""

    username: str
    generation: int


@dataclass(frozen=True, slots=True)
class NotRequested:
    pass


@dataclass(frozen=True, slots=True)
class Pending:
    tag: RequestTag


@dataclass(frozen=True, slots=True)
class Ready(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Failed:
    error: FetchError


AsyncResource = Union[NotRequested, Pending, Ready[T], Failed]

NOT_REQUESTED = NotRequested()


class ResourceTracker(Generic[T]):
    """State machine for a single resource.

    Transitions: any state -> Pending (``start``), Pending -> Ready
    (``resolve``), Pending -> Failed (``reject``).
    """

    _generations = itertools.count(1)

    def __init__(self, name: str) -> None:
        self.name = name
        self._state: AsyncResource = NOT_REQUESTED
        self._active_tag: Optional[RequestTag] = None

    @property
    def state(self) -> AsyncResource:
        return self._state

    @property
    def value(self) -> Optional[T]:
        return self._state.value if isinstance(self._state, Ready) else None

    @property
    def is_pending(self) -> bool:
        return isinstance(self._state, Pending)

    @property
    def active_tag(self) -> Optional[RequestTag]:
        return self._active_tag

    def start(self, username: str) -> RequestTag:
        """Move to Pending for a new request, discarding any previous payload."""
        tag = RequestTag(username=username, generation=next(self._generations))
        self._state = Pending(tag)
        self._active_tag = tag
        return tag

    def reset(self) -> None:
        self._state = NOT_REQUESTED
        self._active_tag = None

    def accepts(self, tag: RequestTag) -> bool:
        return isinstance(self._state, Pending) and self._state.tag == tag

    def resolve(self, tag: RequestTag, value: T) -> bool:
        if not self._guard(tag, "resolve"):
            return False
        self._state = Ready(value)
        return True

    def reject(self, tag: RequestTag, error: FetchError) -> bool:
        if not self._guard(tag, "reject"):
            return False
        self._state = Failed(error)
        return True

    def _guard(self, tag: RequestTag, action: str) -> bool:
        if self.accepts(tag):
            return True
        if tag != self._active_tag:
            logger.debug(
                "Discarding stale %s for %s resource",
                action,
                self.name,
                extra={
                    "stale_user": tag.username,
                    "active_user": self._active_tag.username if self._active_tag else None,
                },
            )
        else:
            logger.warning(
                "Ignoring %s on %s resource that is not pending",
                action,
                self.name,
                extra={"state": type(self._state).__name__, "user": tag.username},
            )
        return False

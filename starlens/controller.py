"""Application controller: owns the state and reacts to navigation and user input."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Optional, Protocol, Sequence, Union

from starlens.clients.contracts import FetchError, FetchErrorKind, FetchResult
from starlens.clients.github import sanitize_log_extra
from starlens.models.domain import Repository, Severity, SortMode, Theme, User
from starlens.models.resource import (
    AsyncResource,
    Failed,
    Pending,
    Ready,
    RequestTag,
    ResourceTracker,
)
from starlens.routes import Home, Repositories, Route, route_path
from starlens.services.notifications import Notification, NotificationQueue
from starlens.services.pipeline import FilterCriteria, apply_criteria
from starlens.services.theme_store import FileThemeStore, ThemeStore
from starlens.services.topics import TopicCount, aggregate_topics, narrow_topics, ranked_topics

logger = logging.getLogger(__name__)

USER_FAILURE_TEMPLATE = "Failed to load user: {reason}"
REPOSITORIES_FAILURE_TEMPLATE = "Failed to load repositories: {reason}"
REPOSITORIES_PARSE_FAILURE_MESSAGE = "Failed to parse repositories"


class StarsClient(Protocol):
    async def fetch_user(self, username: str) -> FetchResult[User]: ...

    async def fetch_starred_repositories(self, username: str) -> FetchResult[list[Repository]]: ...


@dataclass
class AppState:
    """Single source of truth. Only AppController mutates it."""

    notifications: NotificationQueue
    theme: Theme = Theme.LIGHT
    route: Route = field(default_factory=Home)
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    user: ResourceTracker[User] = field(default_factory=lambda: ResourceTracker("user"))
    repositories: ResourceTracker[tuple[Repository, ...]] = field(
        default_factory=lambda: ResourceTracker("repositories")
    )

    @property
    def active_username(self) -> Optional[str]:
        return self.route.username if isinstance(self.route, Repositories) else None


@dataclass(frozen=True, slots=True)
class RepositoriesView:
    """Everything the repositories screen renders, derived from the current state."""

    route: Route
    theme: Theme
    criteria: FilterCriteria
    user: AsyncResource
    repositories: AsyncResource
    visible: tuple[Repository, ...]
    topics: tuple[TopicCount, ...]
    notifications: tuple[Notification, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "route": route_path(self.route),
            "theme": self.theme.value,
            "criteria": {
                "selected_topics": sorted(self.criteria.selected_topics),
                "search": self.criteria.search,
                "topic_search": self.criteria.topic_search,
                "sort": self.criteria.sort_mode.value,
            },
            "user": _resource_to_dict(self.user),
            "repositories": _resource_to_dict(self.repositories, include_value=False),
            "visible": [asdict(repo) for repo in self.visible],
            "topics": [{"topic": topic, "count": count} for topic, count in self.topics],
            "notifications": [
                {"id": item.id, "message": item.message, "severity": item.severity.value}
                for item in self.notifications
            ],
        }


def _resource_to_dict(resource: AsyncResource, *, include_value: bool = True) -> dict[str, Any]:
    if isinstance(resource, Ready):
        payload: dict[str, Any] = {"status": "ready"}
        if include_value:
            payload["value"] = asdict(resource.value)
        return payload
    if isinstance(resource, Failed):
        return {"status": "failed", "error": resource.error.describe()}
    if isinstance(resource, Pending):
        return {"status": "pending", "username": resource.tag.username}
    return {"status": "not_requested"}


class AppController:
    """Coordinates the two fetches, the filter inputs, notifications and the theme."""

    def __init__(
        self,
        client: StarsClient,
        *,
        theme_store: Optional[ThemeStore] = None,
        notifications: Optional[NotificationQueue] = None,
    ) -> None:
        self._client = client
        self._theme_store = theme_store if theme_store is not None else FileThemeStore()
        self._state = AppState(
            notifications=notifications if notifications is not None else NotificationQueue(),
            theme=Theme.parse(self._theme_store.load()),
        )
        self._tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> AppState:
        return self._state

    def navigate(self, route: Route) -> None:
        """Switch screens; a Repositories route resets the filters and issues both fetches.

        Must be called from a running event loop.
        """
        if isinstance(route, Repositories):
            route = Repositories(route.username.strip())
        self._state.route = route
        if not isinstance(route, Repositories):
            return

        self._state.criteria = FilterCriteria()
        user_tag = self._state.user.start(route.username)
        repos_tag = self._state.repositories.start(route.username)
        logger.info("Loading stars", extra=sanitize_log_extra(username=route.username))

        self._spawn(self._load_user(user_tag))
        self._spawn(self._load_repositories(repos_tag))

    def set_search(self, text: str) -> None:
        self._state.criteria = replace(self._state.criteria, search=text)

    def set_topic_search(self, text: str) -> None:
        self._state.criteria = replace(self._state.criteria, topic_search=text)

    def set_sort(self, mode: Union[SortMode, str]) -> None:
        sort_mode = mode if isinstance(mode, SortMode) else SortMode.parse(mode)
        self._state.criteria = replace(self._state.criteria, sort_mode=sort_mode)

    def toggle_topic(self, topic: str) -> None:
        self._state.criteria = self._state.criteria.toggle_topic(topic)

    def clear_topics(self) -> None:
        self._state.criteria = self._state.criteria.clear_topics()

    def dismiss_notification(self, notification_id: int) -> bool:
        return self._state.notifications.dismiss(notification_id)

    def toggle_theme(self) -> Theme:
        self._state.theme = self._state.theme.toggled()
        try:
            self._theme_store.save(self._state.theme.value)
        except Exception as e:
            logger.warning(f"Failed to persist theme preference: {e}")
        return self._state.theme

    def view(self) -> RepositoriesView:
        state = self._state
        repositories: Sequence[Repository] = state.repositories.value or ()
        topics = ranked_topics(aggregate_topics(repositories))
        return RepositoriesView(
            route=state.route,
            theme=state.theme,
            criteria=state.criteria,
            user=state.user.state,
            repositories=state.repositories.state,
            visible=tuple(apply_criteria(state.criteria, repositories)),
            topics=tuple(
                narrow_topics(topics, state.criteria.topic_search, always_include=state.criteria.selected_topics)
            ),
            notifications=state.notifications.items,
        )

    async def settle(self) -> None:
        """Wait for every in-flight fetch, including superseded ones."""
        while self._tasks:
            results = await asyncio.gather(*list(self._tasks), return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error("Load task failed", exc_info=result)

    async def aclose(self) -> None:
        self._state.notifications.close()
        await self.settle()

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _load_user(self, tag: RequestTag) -> None:
        result = await self._fetch(tag, "user", self._client.fetch_user)
        tracker = self._state.user
        if not self._is_current(tracker, tag):
            logger.debug(
                "Discarding stale user response",
                extra={"stale_user": tag.username, "active_user": self._state.active_username},
            )
            return

        if result.is_ok:
            tracker.resolve(tag, result.data)
            return

        tracker.reject(tag, result.error)
        self._state.notifications.enqueue(
            USER_FAILURE_TEMPLATE.format(reason=result.error.describe()),
            Severity.ERROR,
        )

    async def _load_repositories(self, tag: RequestTag) -> None:
        result = await self._fetch(tag, "repositories", self._client.fetch_starred_repositories)
        tracker = self._state.repositories
        if not self._is_current(tracker, tag):
            logger.debug(
                "Discarding stale repositories response",
                extra={"stale_user": tag.username, "active_user": self._state.active_username},
            )
            return

        if result.is_ok:
            tracker.resolve(tag, tuple(result.data or ()))
            return

        tracker.reject(tag, result.error)
        if result.error.kind == FetchErrorKind.BAD_BODY:
            message = REPOSITORIES_PARSE_FAILURE_MESSAGE
        else:
            message = REPOSITORIES_FAILURE_TEMPLATE.format(reason=result.error.describe())
        self._state.notifications.enqueue(message, Severity.ERROR)

    def _is_current(self, tracker: ResourceTracker, tag: RequestTag) -> bool:
        # leaving the Repositories screen also orphans its in-flight fetches
        return tracker.accepts(tag) and tag.username == self._state.active_username

    @staticmethod
    async def _fetch(tag: RequestTag, resource: str, fetcher) -> FetchResult[Any]:
        try:
            return await fetcher(tag.username)
        except Exception as exc:
            logger.exception(
                "Fetch raised instead of returning a failure",
                extra=sanitize_log_extra(resource=resource, username=tag.username, error=str(exc)),
            )
            return FetchResult.failed(FetchError.network_error())

"""Async GitHub client for user profiles and starred repositories."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Optional, TypeVar

import httpx

from starlens.clients.contracts import FetchError, FetchResult
from starlens.config.settings import settings
from starlens.models.domain import Repository, User
from starlens.services.mapper import DecodeError, map_repositories, map_user

logger = logging.getLogger(__name__)

T = TypeVar("T")

_REDACTED_VALUE = "***REDACTED***"
_SENSITIVE_KEYS = ("authorization", "token", "cookie", "secret")
_PAYLOAD_KEYS = ("body", "payload", "response")
_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")


def sanitize_for_log(value: Any, *, key: Optional[str] = None) -> Any:
    """Return a recursively sanitized copy of log payloads."""

    if isinstance(value, dict):
        sanitized: dict[str, Any] = {}
        for raw_key, raw_value in value.items():
            field = str(raw_key)
            if _contains_keyword(field, _SENSITIVE_KEYS):
                sanitized[field] = _REDACTED_VALUE
                continue
            sanitized[field] = sanitize_for_log(raw_value, key=field)
        return sanitized

    if isinstance(value, (list, tuple, set)):
        return [sanitize_for_log(item, key=key) for item in value]

    if isinstance(value, str) and key and _contains_keyword(key, _PAYLOAD_KEYS):
        return _redact_payload(value)

    return value


def sanitize_log_extra(**kwargs: Any) -> dict[str, Any]:
    """Helper for `extra=` payloads in structured logging."""

    return {key: sanitize_for_log(value, key=key) for key, value in kwargs.items()}


def _contains_keyword(field_name: str, keywords: tuple[str, ...]) -> bool:
    lowered = field_name.lower()
    return any(keyword in lowered for keyword in keywords)


def _redact_payload(raw: str) -> str:
    if not raw.strip():
        return ""
    return f"<redacted payload ({len(raw)} chars)>"


class GitHubClient:
    """Fetches the two resources the browser needs, folding every failure into a FetchError."""

    ACCEPT_JSON = "application/vnd.github+json"

    def __init__(
        self,
        *,
        timeout_seconds: Optional[float] = None,
        per_page: Optional[int] = None,
        max_pages: Optional[int] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds or settings.GITHUB_TIMEOUT_SECONDS
        self._per_page = per_page or settings.STARRED_PER_PAGE
        self._max_pages = max(max_pages or settings.STARRED_MAX_PAGES, 1)
        self._base_url = base_url or settings.GITHUB_API_BASE_URL
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GitHubClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_user(self, username: str) -> FetchResult[User]:
        if not _USERNAME_PATTERN.match(username):
            return FetchResult.failed(FetchError.bad_url(f"{self._base_url}/users/{username}"))

        response, failure = await self._get(f"/users/{username}")
        if failure is not None:
            return failure
        return self._decode(response, map_user)

    async def fetch_starred_repositories(self, username: str) -> FetchResult[list[Repository]]:
        """Fetch starred repositories, following `rel="next"` links up to the page cap."""
        if not _USERNAME_PATTERN.match(username):
            return FetchResult.failed(FetchError.bad_url(f"{self._base_url}/users/{username}/starred"))

        repositories: list[Repository] = []
        url: Optional[str] = f"/users/{username}/starred"
        params: Optional[dict[str, Any]] = {"per_page": self._per_page}
        pages = 0

        while url and pages < self._max_pages:
            response, failure = await self._get(url, params=params)
            if failure is not None:
                return failure

            page = self._decode(response, map_repositories)
            if page.is_failed:
                return page
            repositories.extend(page.data or [])
            pages += 1

            # the next link already carries per_page and page
            url = response.links.get("next", {}).get("url")
            params = None

        logger.info(
            "Fetched starred repositories",
            extra=sanitize_log_extra(username=username, pages=pages, count=len(repositories)),
        )
        return FetchResult.ok(repositories)

    async def _get(
        self,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
    ) -> tuple[Optional[httpx.Response], Optional[FetchResult[Any]]]:
        try:
            client = await self._ensure_client()
            response = await client.get(url, params=params)
        except httpx.TimeoutException as exc:
            self._log_failure(url, params, exc)
            return None, FetchResult.failed(FetchError.timeout())
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            self._log_failure(url, params, exc)
            return None, FetchResult.failed(FetchError.bad_url(url))
        except httpx.DecodingError as exc:
            self._log_failure(url, params, exc)
            return None, FetchResult.failed(FetchError.bad_body(str(exc)))
        except httpx.HTTPError as exc:
            self._log_failure(url, params, exc)
            return None, FetchResult.failed(FetchError.network_error())

        if not response.is_success:
            logger.warning(
                "GitHub request returned non-success status",
                extra=sanitize_log_extra(path=url, params=params, status_code=response.status_code, body=response.text),
            )
            return None, FetchResult.failed(FetchError.bad_status(response.status_code), status_code=response.status_code)

        return response, None

    def _decode(self, response: httpx.Response, mapper: Callable[[Any], T]) -> FetchResult[T]:
        try:
            return FetchResult.ok(mapper(response.json()), status_code=response.status_code)
        except DecodeError as exc:
            detail = str(exc)
        except ValueError as exc:
            detail = f"invalid JSON: {exc}"

        logger.warning(
            "GitHub response failed to decode",
            extra=sanitize_log_extra(path=str(response.url), error=detail, body=response.text),
        )
        return FetchResult.failed(FetchError.bad_body(detail), status_code=response.status_code)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client:
            return self._client

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Accept": self.ACCEPT_JSON,
                "User-Agent": settings.USER_AGENT,
                "X-GitHub-Api-Version": settings.GITHUB_API_VERSION,
            },
            timeout=self._timeout_seconds,
            transport=self._transport,
            follow_redirects=True,
        )
        return self._client

    @staticmethod
    def _log_failure(url: str, params: Optional[dict[str, Any]], exc: Exception) -> None:
        logger.warning(
            "GitHub request failed",
            extra=sanitize_log_extra(path=url, params=params, error=str(exc), error_type=type(exc).__name__),
        )

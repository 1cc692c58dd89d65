"""Contract-safe decoding of GitHub payloads into domain values.

Every helper raises ``DecodeError`` with a JSON-path style diagnostic
(``$[3].stargazers_count: expected int, got str``) so the client can report
the failure as a bad body.
"""

from __future__ import annotations

from typing import Any, Optional

from starlens.models.domain import Repository, User


class DecodeError(ValueError):
    """Payload did not match the expected shape."""

    def __init__(self, path: str, problem: str) -> None:
        super().__init__(f"{path}: {problem}")
        self.path = path
        self.problem = problem


def map_user(payload: Any) -> User:
    """Decode the `/users/{username}` response."""
    obj = _require_object(payload, "$")
    return User(
        login=_require_text(obj, "login", "$"),
        avatar_url=_require_text(obj, "avatar_url", "$"),
        name=_optional_text(obj, "name", "$"),
        bio=_optional_text(obj, "bio", "$"),
    )


def map_repositories(payload: Any) -> list[Repository]:
    """Decode the `/users/{username}/starred` response (a JSON array)."""
    if not isinstance(payload, list):
        raise DecodeError("$", f"expected array, got {_type_name(payload)}")
    return [map_repository(item, path=f"$[{index}]") for index, item in enumerate(payload)]


def map_repository(payload: Any, *, path: str = "$") -> Repository:
    obj = _require_object(payload, path)
    repo_id = _require_int(obj, "id", path)
    name = _require_text(obj, "name", path)
    url = _require_text(obj, "html_url", path)
    stars = _require_int(obj, "stargazers_count", path)
    if stars < 0:
        raise DecodeError(f"{path}.stargazers_count", f"expected non-negative int, got {stars}")

    return Repository(
        id=repo_id,
        name=name,
        url=url,
        stars=stars,
        updated_at=_require_text(obj, "updated_at", path),
        description=_optional_text(obj, "description", path),
        language=_optional_text(obj, "language", path),
        topics=_topics(obj, path),
    )


def _require_object(payload: Any, path: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise DecodeError(path, f"expected object, got {_type_name(payload)}")
    return payload


def _require_text(obj: dict[str, Any], field: str, path: str) -> str:
    if field not in obj:
        raise DecodeError(f"{path}.{field}", "missing field")
    value = obj[field]
    if not isinstance(value, str):
        raise DecodeError(f"{path}.{field}", f"expected string, got {_type_name(value)}")
    return value


def _optional_text(obj: dict[str, Any], field: str, path: str) -> Optional[str]:
    value = obj.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"{path}.{field}", f"expected string or null, got {_type_name(value)}")
    return value


def _require_int(obj: dict[str, Any], field: str, path: str) -> int:
    if field not in obj:
        raise DecodeError(f"{path}.{field}", "missing field")
    value = obj[field]
    # bool is an int subclass; JSON true/false is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"{path}.{field}", f"expected int, got {_type_name(value)}")
    return value


def _topics(obj: dict[str, Any], path: str) -> tuple[str, ...]:
    raw = obj.get("topics")
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise DecodeError(f"{path}.topics", f"expected array, got {_type_name(raw)}")
    topics: list[str] = []
    for index, topic in enumerate(raw):
        if not isinstance(topic, str):
            raise DecodeError(f"{path}.topics[{index}]", f"expected string, got {_type_name(topic)}")
        topics.append(topic)
    return tuple(topics)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    return type(value).__name__

from __future__ import annotations

import httpx
import pytest

from starlens.clients.github import GitHubClient
from starlens.handler import handle
from starlens.routes import Home, Repositories, Settings, parse_route, route_path
from starlens.services.theme_store import FileThemeStore, MemoryThemeStore


def test_parse_route_maps_paths_to_screens() -> None:
    assert parse_route("/", base_path="/") == Home()
    assert parse_route("/settings", base_path="/") == Settings()
    assert parse_route("/users/torvalds", base_path="/") == Repositories("torvalds")
    assert parse_route("/users/torvalds/extra", base_path="/") == Home()
    assert parse_route("/nowhere", base_path="/") == Home()


def test_parse_route_strips_base_path() -> None:
    assert parse_route("/stars/users/octocat?tab=1", base_path="/stars/") == Repositories("octocat")
    assert route_path(Repositories("octocat"), base_path="/stars/") == "/stars/users/octocat"
    assert route_path(Home(), base_path="/") == "/"


def test_repositories_route_requires_username() -> None:
    with pytest.raises(ValueError):
        Repositories("  ")


def test_file_theme_store_round_trips_and_defaults(tmp_path) -> None:
    store = FileThemeStore(tmp_path / "nested" / "theme", default="dark")
    assert store.load() == "dark"

    store.save("light")

    assert store.load() == "light"
    assert (tmp_path / "nested" / "theme").read_text(encoding="utf-8") == "light"


def _transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/users/octocat":
            return httpx.Response(200, json={"login": "octocat", "avatar_url": "https://a/octo"})
        return httpx.Response(
            200,
            json=[
                {
                    "id": 1,
                    "name": "hello-world",
                    "html_url": "https://github.com/octocat/hello-world",
                    "description": "My first repository",
                    "stargazers_count": 3,
                    "topics": ["demo"],
                    "updated_at": "2024-01-01T00:00:00Z",
                },
                {
                    "id": 2,
                    "name": "spoon-knife",
                    "html_url": "https://github.com/octocat/spoon-knife",
                    "description": None,
                    "stargazers_count": 12,
                    "topics": ["demo", "forking"],
                    "updated_at": "2024-02-01T00:00:00Z",
                },
            ],
        )

    return httpx.MockTransport(handler)


def test_handle_runs_navigation_and_serializes_view() -> None:
    client = GitHubClient(transport=_transport(), base_url="https://api.github.test")

    result = handle(
        {"username": "octocat", "sort": "name", "topics": ["forking"]},
        client=client,
        theme_store=MemoryThemeStore("light"),
    )

    assert result["statusCode"] == 200
    view = result["view"]
    assert view["theme"] == "light"
    assert view["user"]["status"] == "ready"
    assert view["user"]["value"]["login"] == "octocat"
    assert view["repositories"] == {"status": "ready"}
    assert [repo["name"] for repo in view["visible"]] == ["spoon-knife"]
    assert view["topics"] == [{"topic": "demo", "count": 2}, {"topic": "forking", "count": 1}]
    assert view["criteria"]["sort"] == "name"
    assert view["notifications"] == []


def test_handle_reports_invalid_input_as_error() -> None:
    result = handle({"username": "octocat", "sort": "forks"}, client=GitHubClient(transport=_transport()),
                    theme_store=MemoryThemeStore())

    assert result["statusCode"] == 500
    assert "Unknown sort mode" in result["error"]

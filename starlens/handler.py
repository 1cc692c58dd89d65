"""
One-shot entrypoint for StarLens

Runs a single navigation to completion and returns the serialized view.
Useful for scripting and for trying the engine without a UI.
"""

import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional

from starlens.clients.github import GitHubClient
from starlens.config.settings import settings
from starlens.controller import AppController
from starlens.routes import Repositories, parse_route
from starlens.services.theme_store import FileThemeStore

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def run_navigation(event: Dict[str, Any], *, client: Optional[Any] = None, theme_store: Optional[Any] = None) -> Dict[str, Any]:
    """
    Navigate, apply the requested filters and wait for both fetches.

    Expected event payload:
    - {"path": "/users/torvalds"} or {"username": "torvalds"}
    - optional "search", "topic_search", "topics" (list), "sort" ("stars" | "updated" | "name")

    Args:
        event: navigation and filter inputs
        client: GitHub client override (defaults to a fresh GitHubClient)
        theme_store: theme persistence override

    Returns:
        Serialized RepositoriesView
    """
    if event.get("username"):
        route = Repositories(str(event["username"]))
    else:
        route = parse_route(str(event.get("path", "/")))

    owns_client = client is None
    github = client or GitHubClient()
    controller = AppController(github, theme_store=theme_store if theme_store is not None else FileThemeStore())
    try:
        controller.navigate(route)
        if event.get("search"):
            controller.set_search(str(event["search"]))
        if event.get("topic_search"):
            controller.set_topic_search(str(event["topic_search"]))
        for topic in event.get("topics") or []:
            controller.toggle_topic(str(topic))
        if event.get("sort"):
            controller.set_sort(str(event["sort"]))

        await controller.settle()
        return controller.view().to_dict()
    finally:
        await controller.aclose()
        if owns_client:
            await github.aclose()


def handle(event: Optional[Dict[str, Any]], **overrides: Any) -> Dict[str, Any]:
    """
    Synchronous wrapper around run_navigation.

    Returns:
        Dictionary with statusCode and either view or error
    """
    try:
        view = asyncio.run(run_navigation(event or {}, **overrides))
        return {"statusCode": 200, "view": view}
    except Exception as e:
        logger.error(f"Navigation failed: {e}", exc_info=True)
        return {"statusCode": 500, "error": str(e)}


# Allow local runs via `python -m starlens.handler <username> [search]`
if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python -m starlens.handler <username> [search]")
        sys.exit(2)

    test_event = {"username": sys.argv[1]}
    if len(sys.argv) > 2:
        test_event["search"] = sys.argv[2]

    result = handle(test_event)
    print(json.dumps(result, indent=2))

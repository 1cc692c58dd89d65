"""Filter and sort pipeline that turns the fetched repositories into the visible list."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence

from starlens.models.domain import Repository, SortMode


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """User-controlled inputs to the pipeline.

    `topic_search` only narrows the topic picker; it never filters repositories.
    """

    selected_topics: frozenset[str] = field(default_factory=frozenset)
    search: str = ""
    topic_search: str = ""
    sort_mode: SortMode = SortMode.BY_STARS

    def toggle_topic(self, topic: str) -> "FilterCriteria":
        return replace(self, selected_topics=self.selected_topics ^ {topic})

    def clear_topics(self) -> "FilterCriteria":
        return replace(self, selected_topics=frozenset())


def filter_by_topics(repositories: Iterable[Repository], selected: frozenset[str]) -> list[Repository]:
    """Keep repositories carrying at least one selected topic (union, not intersection)."""
    if not selected:
        return list(repositories)
    return [repo for repo in repositories if not selected.isdisjoint(repo.topics)]


def filter_by_text(repositories: Iterable[Repository], search: str) -> list[Repository]:
    """Case-insensitive substring match on name or description."""
    query = search.strip().lower()
    if not query:
        return list(repositories)
    return [
        repo
        for repo in repositories
        if query in repo.name.lower() or (repo.description is not None and query in repo.description.lower())
    ]


def sort_repositories(repositories: Iterable[Repository], mode: SortMode) -> list[Repository]:
    """Stable sort by the selected mode."""
    if mode == SortMode.BY_STARS:
        return sorted(repositories, key=lambda repo: repo.stars, reverse=True)
    if mode == SortMode.BY_UPDATED:
        # raw ISO-8601 strings, compared lexicographically
        return sorted(repositories, key=lambda repo: repo.updated_at)
    if mode == SortMode.BY_NAME:
        return sorted(repositories, key=lambda repo: repo.name.lower())
    raise ValueError(f"Unknown sort mode: {mode!r}")


def apply_criteria(criteria: FilterCriteria, repositories: Sequence[Repository]) -> list[Repository]:
    """Topic filter, then text filter, then sort."""
    by_topic = filter_by_topics(repositories, criteria.selected_topics)
    by_text = filter_by_text(by_topic, criteria.search)
    return sort_repositories(by_text, criteria.sort_mode)

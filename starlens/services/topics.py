"""Topic aggregation over a repository collection."""

from __future__ import annotations

from typing import Iterable, Sequence

from starlens.models.domain import Repository
from starlens.services.fuzzy import fuzzy_matches

TopicCount = tuple[str, int]


def distinct_topics(repositories: Iterable[Repository]) -> list[str]:
    """Distinct topics in first-seen order, scanning repositories then their topics."""
    seen: set[str] = set()
    ordered: list[str] = []
    for repo in repositories:
        for topic in repo.topics:
            if topic in seen:
                continue
            seen.add(topic)
            ordered.append(topic)
    return ordered


def aggregate_topics(repositories: Sequence[Repository]) -> list[TopicCount]:
    """Pair each distinct topic with the number of repositories that carry it."""
    counts: dict[str, int] = {}
    for repo in repositories:
        # a repository counts once per topic even if the source repeats it
        for topic in set(repo.topics):
            counts[topic] = counts.get(topic, 0) + 1
    return [(topic, counts[topic]) for topic in distinct_topics(repositories)]


def ranked_topics(pairs: Iterable[TopicCount]) -> list[TopicCount]:
    """Most common topics first; ties keep first-seen order."""
    return sorted(pairs, key=lambda item: item[1], reverse=True)


def narrow_topics(
    pairs: Iterable[TopicCount],
    query: str,
    *,
    always_include: Iterable[str] = (),
) -> list[TopicCount]:
    """Keep topics that fuzzy-match the topic search, plus any selected ones."""
    pinned = set(always_include)
    return [(topic, count) for topic, count in pairs if topic in pinned or fuzzy_matches(query, topic)]

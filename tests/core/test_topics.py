from __future__ import annotations

from starlens.models.domain import Repository
from starlens.services.topics import aggregate_topics, distinct_topics, narrow_topics, ranked_topics


def _repo(repo_id: int, *topics: str) -> Repository:
    return Repository(
        id=repo_id,
        name=f"repo-{repo_id}",
        url=f"https://github.com/owner/repo-{repo_id}",
        stars=0,
        updated_at="2024-01-01T00:00:00Z",
        topics=topics,
    )


def test_aggregate_counts_repositories_per_topic_in_first_seen_order() -> None:
    pairs = aggregate_topics([_repo(1, "a", "b"), _repo(2, "b", "c")])

    assert pairs == [("a", 1), ("b", 2), ("c", 1)]


def test_distinct_topics_scans_repositories_then_their_topics() -> None:
    repos = [_repo(1, "zig", "c"), _repo(2, "c", "asm", "zig"), _repo(3, "asm", "rust")]

    assert distinct_topics(repos) == ["zig", "c", "asm", "rust"]


def test_repeated_topic_within_one_repository_counts_once() -> None:
    assert aggregate_topics([_repo(1, "cli", "cli"), _repo(2, "cli")]) == [("cli", 2)]


def test_aggregate_of_empty_collection_is_empty() -> None:
    assert aggregate_topics([]) == []
    assert aggregate_topics([_repo(1)]) == []


def test_ranked_topics_sorts_by_count_and_keeps_ties_stable() -> None:
    pairs = [("a", 1), ("b", 3), ("c", 1), ("d", 3)]

    assert ranked_topics(pairs) == [("b", 3), ("d", 3), ("a", 1), ("c", 1)]


def test_narrow_topics_uses_fuzzy_match_and_keeps_selected_topics() -> None:
    pairs = [("rust", 4), ("python", 3), ("react", 2), ("go", 1)]

    assert narrow_topics(pairs, "rst") == [("rust", 4)]
    assert narrow_topics(pairs, "rst", always_include={"go"}) == [("rust", 4), ("go", 1)]
    assert narrow_topics(pairs, "") == pairs

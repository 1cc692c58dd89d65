"""Derived-data services: topic aggregation, filtering, fuzzy matching and notifications."""

from starlens.services.fuzzy import fuzzy_matches
from starlens.services.notifications import Notification, NotificationQueue
from starlens.services.pipeline import FilterCriteria, apply_criteria
from starlens.services.topics import aggregate_topics, narrow_topics, ranked_topics

__all__ = [
    "fuzzy_matches",
    "Notification",
    "NotificationQueue",
    "FilterCriteria",
    "apply_criteria",
    "aggregate_topics",
    "narrow_topics",
    "ranked_topics",
]

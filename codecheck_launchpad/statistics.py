"""Dashboard statistics over a register's issues.

Aggregation never raises on oddly shaped input: issues may be models or raw
API dictionaries, and missing or malformed fields count as absent.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEVELOPMENT_LABEL = "development"


class CheckCategory(str, Enum):
    """Categories of completed checks shown on the dashboard."""

    INSTITUTION = "institution"
    JOURNAL = "journal"
    COMMUNITY = "community"
    CONFERENCE_WORKSHOP = "conferenceWorkshop"
    NEEDS_CODECHECKER = "needsCodechecker"


CATEGORY_LABELS: dict[CheckCategory, tuple[str, ...]] = {
    CheckCategory.INSTITUTION: ("institution",),
    CheckCategory.JOURNAL: ("journal",),
    CheckCategory.COMMUNITY: ("community",),
    CheckCategory.CONFERENCE_WORKSHOP: ("conference", "workshop"),
    CheckCategory.NEEDS_CODECHECKER: ("needs codechecker",),
}


def category_labels(category: str | CheckCategory) -> tuple[str, ...]:
    """Label synonyms that place a check in ``category``.

    Raises:
        ConfigurationError: If the category is unknown
    """
    try:
        return CATEGORY_LABELS[CheckCategory(category)]
    except ValueError:
        raise ConfigurationError(f"Unknown check category: {category}") from None


class RegisterStatistics(BaseModel):
    """Issue counts for one register."""

    number_of_checks: int = Field(0, description="Non-development issues")
    ongoing_checks: int = Field(0, description="Open non-development issues")
    completed_by_category: dict[CheckCategory, int] = Field(
        default_factory=lambda: {category: 0 for category in CheckCategory},
        description="Closed non-development issues per category",
    )
    last_analyzed: datetime = Field(default_factory=datetime.now)


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _label_names(issue: Any) -> list[str]:
    labels = _field(issue, "labels")
    if not isinstance(labels, (list, tuple)):
        return []
    names = []
    for label in labels:
        name = _field(label, "name")
        if isinstance(name, str) and name:
            names.append(name.lower())
    return names


def _count_with_labels(issues: list[Any], wanted: tuple[str, ...]) -> int:
    """Count issues with a label containing any of ``wanted`` (case-insensitive)."""
    wanted = tuple(w.lower() for w in wanted)
    return sum(
        1
        for issue in issues
        if any(w in name for name in _label_names(issue) for w in wanted)
    )


def aggregate_statistics(issues: Any) -> RegisterStatistics:
    """Count checks by state and category, excluding development issues.

    Args:
        issues: Issues as models or API dictionaries

    Returns:
        Statistics; all zero when ``issues`` is not a list
    """
    if not isinstance(issues, (list, tuple)):
        logger.warning(f"Issues is not a list: {type(issues).__name__}")
        return RegisterStatistics()

    checks = [
        issue for issue in issues if DEVELOPMENT_LABEL not in _label_names(issue)
    ]
    completed = [issue for issue in checks if _field(issue, "state") == "closed"]

    stats = RegisterStatistics(
        number_of_checks=len(checks),
        ongoing_checks=sum(1 for issue in checks if _field(issue, "state") == "open"),
        completed_by_category={
            category: _count_with_labels(completed, labels)
            for category, labels in CATEGORY_LABELS.items()
        },
    )
    logger.debug(f"Statistics calculated: {stats}")
    return stats

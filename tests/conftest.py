"""Test configuration and fixtures."""

from collections.abc import Callable
from typing import Any

import pytest

from codecheck_launchpad.github_client.models import GitHubIssue


def issue_payload(
    number: int,
    title: str,
    labels: list[str] | None = None,
    state: str = "closed",
) -> dict[str, Any]:
    """Build an issue dictionary shaped like the GitHub REST API response."""
    return {
        "number": number,
        "title": title,
        "state": state,
        "labels": [{"name": name, "color": "ededed"} for name in labels or []],
        "html_url": f"https://github.com/codecheckers/register/issues/{number}",
        "updated_at": "2025-06-01T12:00:00Z",
    }


@pytest.fixture
def make_issue() -> Callable[..., GitHubIssue]:
    """Factory for GitHubIssue models; labelled "id assigned" by default."""

    def _make(
        number: int,
        title: str,
        labels: list[str] | None = None,
        state: str = "closed",
    ) -> GitHubIssue:
        if labels is None:
            labels = ["id assigned"]
        return GitHubIssue.model_validate(issue_payload(number, title, labels, state))

    return _make


@pytest.fixture
def api_issue() -> Callable[..., dict[str, Any]]:
    """Factory for raw issue dictionaries as returned by the GitHub API."""
    return issue_payload

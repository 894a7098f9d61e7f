"""Builders for GitHub web URLs: the new-issue form and issue searches.

Nothing here calls GitHub. The new-issue URL is opened by the operator, whose
browser performs the actual write.
"""

from urllib.parse import quote, urlencode

GITHUB_WEB_URL = "https://github.com"


def build_new_issue_url(
    owner: str,
    repo: str,
    title: str,
    body: str,
    labels: list[str] | None = None,
    assignees: list[str] | None = None,
) -> str:
    """Build a pre-filled "new issue" form URL.

    Args:
        owner: Repository owner
        repo: Repository name
        title: Issue title
        body: Issue body in markdown
        labels: Label names, sent comma-joined
        assignees: GitHub handles, sent comma-joined

    Returns:
        URL of the GitHub new-issue page with query parameters set

    Example:
        >>> build_new_issue_url("o", "r", "A | 2025-001", "", ["certificate"])
        'https://github.com/o/r/issues/new?title=A+%7C+2025-001&body=&labels=certificate'
    """
    params = {"title": title, "body": body}
    if labels:
        params["labels"] = ",".join(labels)
    if assignees:
        params["assignees"] = ",".join(assignees)

    return f"{GITHUB_WEB_URL}/{owner}/{repo}/issues/new?{urlencode(params)}"


def build_issue_search_url(query: str) -> str:
    """Build a GitHub issue search URL for a raw search query."""
    return f"{GITHUB_WEB_URL}/search?q={quote(query, safe='')}&type=issues"


def all_checks_search_url(owner: str, repo: str) -> str:
    """Search URL for every non-development issue."""
    return build_issue_search_url(f"repo:{owner}/{repo} -label:development")


def ongoing_checks_search_url(owner: str, repo: str) -> str:
    """Search URL for open non-development issues."""
    return build_issue_search_url(f"repo:{owner}/{repo} is:open -label:development")


def completed_category_search_url(
    owner: str, repo: str, category_labels: tuple[str, ...]
) -> str:
    """Search URL for closed non-development issues carrying a category label.

    A category with several label synonyms is searched as an OR of them.
    """
    base = f"repo:{owner}/{repo} is:closed -label:development"
    if len(category_labels) > 1:
        alternatives = " OR ".join(f"label:{label}" for label in category_labels)
        return build_issue_search_url(f"{base} ({alternatives})")
    return build_issue_search_url(f'{base} label:"{category_labels[0]}"')

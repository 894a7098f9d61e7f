"""Tests for GitHub web URL builders."""

from urllib.parse import parse_qs, urlsplit

from codecheck_launchpad.github_client import urls


class TestNewIssueUrl:
    """Test the pre-filled new-issue URL."""

    def test_all_fields(self) -> None:
        """Test that every field survives encoding."""
        url = urls.build_new_issue_url(
            "codecheckers",
            "register",
            "Doe & Roe | 2025-029",
            "**Work**: x\n\nline",
            ["certificate", "id assigned"],
            ["alice", "bob"],
        )

        parts = urlsplit(url)
        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
            "https://github.com/codecheckers/register/issues/new"
        )
        query = parse_qs(parts.query)
        assert query["title"] == ["Doe & Roe | 2025-029"]
        assert query["body"] == ["**Work**: x\n\nline"]
        assert query["labels"] == ["certificate,id assigned"]
        assert query["assignees"] == ["alice,bob"]

    def test_no_labels_or_assignees(self) -> None:
        """Test that empty lists are left out of the query."""
        url = urls.build_new_issue_url("o", "r", "T", "B", [], None)
        assert "labels=" not in url
        assert "assignees=" not in url


class TestSearchUrls:
    """Test issue search URLs."""

    def test_all_checks(self) -> None:
        """Test the all-checks search."""
        url = urls.all_checks_search_url("codecheckers", "register")
        query = parse_qs(urlsplit(url).query)
        assert query["q"] == ["repo:codecheckers/register -label:development"]
        assert query["type"] == ["issues"]

    def test_ongoing_checks(self) -> None:
        """Test the open-checks search."""
        url = urls.ongoing_checks_search_url("o", "r")
        assert parse_qs(urlsplit(url).query)["q"] == [
            "repo:o/r is:open -label:development"
        ]

    def test_single_label_category(self) -> None:
        """Test a category searched by one quoted label."""
        url = urls.completed_category_search_url("o", "r", ("needs codechecker",))
        assert parse_qs(urlsplit(url).query)["q"] == [
            'repo:o/r is:closed -label:development label:"needs codechecker"'
        ]

    def test_multi_label_category(self) -> None:
        """Test a category searched as an OR of labels."""
        url = urls.completed_category_search_url("o", "r", ("conference", "workshop"))
        assert parse_qs(urlsplit(url).query)["q"] == [
            "repo:o/r is:closed -label:development "
            "(label:conference OR label:workshop)"
        ]

"""Extraction of certificate identifiers from register issue titles.

Identifiers have the exact shape ``YYYY-NNN``. A title may also carry a range
token ``YYYY-NNN/YYYY-NNN`` that stands for every number between the two ends,
inclusive. Ranges spanning two years are rejected outright. A range running
backwards is not expanded, but its two ends still count as identifiers.
"""

import logging
import re
from collections.abc import Iterable

from ..github_client.models import GitHubIssue
from .models import Identifier, IdentifierWarning, SkippedRange

logger = logging.getLogger(__name__)

ID_ASSIGNED_LABEL = "id assigned"

# Exact widths: no digit may touch either end of a token
IDENTIFIER_PATTERN = re.compile(r"(?<!\d)(\d{4})-(\d{3})(?!\d)")
RANGE_PATTERN = re.compile(r"(?<!\d)(\d{4}-\d{3})/(\d{4}-\d{3})(?!\d)")


def _split_token(token: str) -> tuple[int, str]:
    year, number = token.split("-")
    return int(year), number


class IdentifierExtractor:
    """Turns issue titles into a sorted, de-duplicated list of identifiers."""

    def __init__(self, required_label: str | None = ID_ASSIGNED_LABEL):
        """Initialize the extractor.

        Args:
            required_label: Only issues carrying this label (case-insensitive)
                are scanned. None scans every issue.
        """
        self.required_label = required_label
        self.skipped_ranges: list[SkippedRange] = []

    def extract(self, issues: Iterable[GitHubIssue]) -> list[Identifier]:
        """Extract identifiers from issue titles.

        Range tokens are expanded first; standalone tokens that fall inside a
        range of the same title are not counted again. When two issues yield
        the same identifier, the first issue processed wins.

        Args:
            issues: Issues in processing order

        Returns:
            Unique identifiers sorted by year, then number
        """
        self.skipped_ranges = []
        issues = list(issues)
        if self.required_label is None:
            candidates = issues
        else:
            candidates = [i for i in issues if i.has_label(self.required_label)]
            logger.info(
                f"Processing {len(candidates)} issues with "
                f'"{self.required_label}" label out of {len(issues)} total issues'
            )

        unique: dict[str, Identifier] = {}
        for issue in candidates:
            for identifier in self._scan_title(issue):
                unique.setdefault(identifier.full, identifier)

        identifiers = sorted(unique.values(), key=lambda i: (i.year, i.number))
        logger.info(
            f"Found {len(identifiers)} certificate identifiers (including ranges)"
        )
        return identifiers

    def _scan_title(self, issue: GitHubIssue) -> list[Identifier]:
        title = issue.title
        found: list[Identifier] = []
        range_spans: list[tuple[int, int]] = []
        expanded: list[tuple[int, int, int]] = []

        for match in RANGE_PATTERN.finditer(title):
            start_id, end_id = match.group(1), match.group(2)
            start_year, start_str = _split_token(start_id)
            end_year, end_str = _split_token(end_id)
            start_number, end_number = int(start_str), int(end_str)

            if start_year != end_year:
                # Neither end of a cross-year range counts as a singleton
                range_spans.append(match.span())
                self._skip(issue, start_id, end_id, "cross-year range")
                continue
            if start_number > end_number:
                self._skip(issue, start_id, end_id, "range end precedes start")
                continue

            logger.debug(
                f'Found range in "{title}": {start_id} to {end_id} '
                f"({end_number - start_number + 1} identifiers)"
            )
            expanded.append((start_year, start_number, end_number))
            for number in range(start_number, end_number + 1):
                found.append(
                    Identifier(
                        full=f"{start_year}-{str(number).zfill(len(start_str))}",
                        year=start_year,
                        number=number,
                        issue_title=title,
                        issue_number=issue.number,
                        issue_url=issue.html_url,
                        is_from_range=True,
                        range_start=start_id,
                        range_end=end_id,
                    )
                )

        for match in IDENTIFIER_PATTERN.finditer(title):
            if any(start <= match.start() < end for start, end in range_spans):
                continue
            year, number = int(match.group(1)), int(match.group(2))
            if any(
                year == range_year and low <= number <= high
                for range_year, low, high in expanded
            ):
                continue
            found.append(
                Identifier(
                    full=match.group(0),
                    year=year,
                    number=number,
                    issue_title=title,
                    issue_number=issue.number,
                    issue_url=issue.html_url,
                )
            )

        return found

    def _skip(self, issue: GitHubIssue, start: str, end: str, reason: str) -> None:
        logger.warning(
            f"Skipping {reason} in issue #{issue.number}: {start} to {end}"
        )
        self.skipped_ranges.append(
            SkippedRange(issue_number=issue.number, start=start, end=end, reason=reason)
        )


def extract_identifiers(
    issues: Iterable[GitHubIssue], required_label: str | None = ID_ASSIGNED_LABEL
) -> list[Identifier]:
    """Extract identifiers with a throwaway extractor."""
    return IdentifierExtractor(required_label).extract(issues)


def find_identifier_warnings(
    recent_issues: Iterable[GitHubIssue], marker_label: str = ID_ASSIGNED_LABEL
) -> list[IdentifierWarning]:
    """Find recent issues that mention identifiers but lack the marker label.

    The extractor never sees these identifiers, so the next computed number
    may collide with one of them.
    """
    warnings = []
    for issue in recent_issues:
        if issue.has_label(marker_label):
            continue
        tokens = list(
            dict.fromkeys(m.group(0) for m in IDENTIFIER_PATTERN.finditer(issue.title))
        )
        if tokens:
            warnings.append(
                IdentifierWarning(
                    number=issue.number,
                    title=issue.title,
                    url=issue.html_url,
                    identifiers=tokens,
                )
            )

    if warnings:
        logger.info(f"Found {len(warnings)} identifier warnings in recent issues")
    return warnings

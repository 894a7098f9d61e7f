"""The launch pad coordinator.

``LaunchPad`` owns the response cache, the GitHub client and the roster. Front
ends (the CLI) hold a reference to it and call its operations; nothing in the
core reaches back into a front end.
"""

import asyncio
import logging
from collections.abc import Callable

import httpx
from pydantic import BaseModel, Field

from .codecheckers.debounce import DebouncedSearch
from .codecheckers.roster import Codechecker, CodecheckerRoster
from .config import (
    LaunchPadConfig,
    RepositoryKey,
    RepositoryPolicy,
    get_repository_policy,
)
from .errors import UpstreamError
from .github_client.cache import HttpCache
from .github_client.client import GitHubClient
from .github_client.models import GitHubIssue, GitHubLabel
from .identifiers.calculator import compute_next_identifier
from .identifiers.extractor import IdentifierExtractor, find_identifier_warnings
from .identifiers.models import IdentifierWarning, NextIdentifierResult, SkippedRange
from .issues.draft import IssueDraft
from .issues.labels import DEFAULT_LABELS
from .statistics import RegisterStatistics, aggregate_statistics

logger = logging.getLogger(__name__)


class LoadResult(BaseModel):
    """Everything computed by one "get next identifier" action."""

    repository: RepositoryPolicy
    next_identifier: NextIdentifierResult
    statistics: RegisterStatistics
    warnings: list[IdentifierWarning] = Field(default_factory=list)
    skipped_ranges: list[SkippedRange] = Field(default_factory=list)
    identifier_count: int = 0
    issue_count: int = 0


class LaunchPad:
    """Coordinates fetching, extraction, numbering and statistics."""

    def __init__(
        self,
        config: LaunchPadConfig | None = None,
        client: GitHubClient | None = None,
        roster: CodecheckerRoster | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the launch pad.

        Args:
            config: Runtime settings; read from the environment if None
            client: GitHub client; built from ``config`` if None
            roster: Codechecker roster; built from ``config`` if None
            http_client: Shared HTTP client for the default client and roster
        """
        self.config = config or LaunchPadConfig()
        self.config.validate()
        self.client = client or GitHubClient(
            cache=HttpCache(
                timeout=self.config.cache_timeout,
                rate_limit_warning=self.config.rate_limit_warning,
            ),
            http_client=http_client,
            base_url=self.config.api_base_url,
            per_page=self.config.issues_per_page,
            max_pages=self.config.max_pages,
        )
        self.roster = roster or CodecheckerRoster(
            self.config.roster_url, http_client=http_client
        )
        self.repository = get_repository_policy(RepositoryKey.TESTING)
        self.is_loading = False
        self.last_result: LoadResult | None = None

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "LaunchPad":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def select_repository(self, key: str | RepositoryKey) -> RepositoryPolicy:
        """Switch registers, discarding the previous result.

        Raises:
            ConfigurationError: If the key is unknown
        """
        self.repository = get_repository_policy(key)
        self.last_result = None
        return self.repository

    async def load_next_identifier(self) -> LoadResult | None:
        """Compute the next identifier for the selected register.

        A call made while another is in flight is dropped and returns None.

        Raises:
            UpstreamError: If any GitHub request fails; no partial result is kept
        """
        if self.is_loading:
            logger.info("Already loading, skipping...")
            return None

        self.is_loading = True
        repository = self.repository
        try:
            logger.info(f"Loading identifier for repository: {repository.full_name}")
            all_issues, recent_issues = await self._fetch_issues(repository)

            extractor = IdentifierExtractor()
            identifiers = extractor.extract(all_issues)
            result = LoadResult(
                repository=repository,
                next_identifier=compute_next_identifier(
                    identifiers,
                    self.config.current_year,
                    repository,
                    self.config.identifier_padding,
                ),
                statistics=aggregate_statistics(all_issues),
                warnings=find_identifier_warnings(recent_issues),
                skipped_ranges=extractor.skipped_ranges,
                identifier_count=len(identifiers),
                issue_count=len(all_issues),
            )
        except UpstreamError as e:
            self.last_result = None
            logger.error(f"Failed to analyze {repository.name}: {e}")
            raise
        finally:
            self.is_loading = False

        self.last_result = result
        return result

    async def _fetch_issues(
        self, repository: RepositoryPolicy
    ) -> tuple[list[GitHubIssue], list[GitHubIssue]]:
        """Fetch all issues and recent issues concurrently.

        If either fetch fails the other is cancelled and awaited before the
        error propagates.
        """
        tasks = (
            asyncio.create_task(
                self.client.fetch_all_issues(repository.owner, repository.repo)
            ),
            asyncio.create_task(
                self.client.fetch_recent_issues(
                    repository.owner,
                    repository.repo,
                    self.config.recent_issues_limit,
                )
            ),
        )
        try:
            all_issues, recent_issues = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return all_issues, recent_issues

    def new_search(
        self, on_results: Callable[[str, list[Codechecker]], None]
    ) -> DebouncedSearch:
        """Search-as-you-type over the roster using the configured quiet period."""
        return DebouncedSearch(self.roster, on_results, delay=self.config.search_delay)

    async def refresh(self) -> LoadResult | None:
        """Clear the cache and load again."""
        self.client.cache.clear()
        return await self.load_next_identifier()

    async def load_labels(self) -> list[GitHubLabel]:
        """Labels of the selected register, or the built-in set if unavailable."""
        try:
            return await self.client.fetch_labels(
                self.repository.owner, self.repository.repo
            )
        except UpstreamError as e:
            logger.warning(f"Failed to load repository labels, using defaults: {e}")
            return list(DEFAULT_LABELS)

    def new_draft(self, author_names: str = "") -> IssueDraft:
        """Start an issue draft for the last computed identifier.

        Raises:
            ValueError: If no identifier has been loaded yet
        """
        if self.last_result is None:
            raise ValueError(
                "No identifier available. Please get the next identifier first."
            )
        return IssueDraft(
            self.last_result.next_identifier.identifier, author_names=author_names
        )

    def build_issue_url(self, draft: IssueDraft) -> str:
        return draft.url(self.repository)

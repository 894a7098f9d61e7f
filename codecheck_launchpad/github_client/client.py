"""GitHub REST client for reading register issues and labels."""

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..errors import UpstreamError
from .cache import HttpCache
from .models import GitHubIssue, GitHubLabel

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/vnd.github.v3+json",
    "User-Agent": "codecheck-launchpad/0.1.0",
}


class GitHubClient:
    """Unauthenticated, cached reader for public GitHub issue trackers."""

    def __init__(
        self,
        cache: HttpCache | None = None,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = "https://api.github.com",
        per_page: int = 100,
        max_pages: int = 50,
    ):
        """Initialize the client.

        Args:
            cache: Response cache shared by every request
            http_client: HTTP client to use; one is created (and owned) if None
            base_url: GitHub API root
            per_page: Page size for the full issue listing
            max_pages: Hard bound on pages fetched by ``fetch_all_issues``
        """
        self.cache = cache if cache is not None else HttpCache()
        self.base_url = base_url.rstrip("/")
        self.per_page = per_page
        self.max_pages = max_pages
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=30.0)

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """GET an endpoint through the cache.

        Raises:
            UpstreamError: On non-2xx status, transport failure or invalid JSON
        """
        url = f"{self.base_url}{endpoint}"
        signature = HttpCache.make_signature(
            url, {"params": params or {}, "headers": DEFAULT_HEADERS}
        )

        async def fetch() -> httpx.Response:
            logger.debug(f"Making request to: {endpoint} {params or ''}")
            try:
                response = await self._http.get(
                    url, params=params, headers=DEFAULT_HEADERS
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise UpstreamError(
                    f"GitHub API error: {e.response.status_code} "
                    f"{e.response.reason_phrase}",
                    status_code=e.response.status_code,
                    endpoint=endpoint,
                ) from e
            except httpx.RequestError as e:
                raise UpstreamError(
                    f"GitHub API request failed for {endpoint}: {e}",
                    endpoint=endpoint,
                ) from e
            return response

        try:
            return await self.cache.get_or_fetch(signature, fetch)
        except json.JSONDecodeError as e:
            raise UpstreamError(
                f"GitHub API returned invalid JSON for {endpoint}", endpoint=endpoint
            ) from e

    def _parse_issues(self, payload: Any, endpoint: str) -> list[GitHubIssue]:
        if not isinstance(payload, list):
            raise UpstreamError(
                f"Expected a list of issues from {endpoint}", endpoint=endpoint
            )
        try:
            return [GitHubIssue.model_validate(item) for item in payload]
        except ValidationError as e:
            raise UpstreamError(
                f"Unexpected issue data from {endpoint}: {e}", endpoint=endpoint
            ) from e

    async def fetch_all_issues(self, owner: str, repo: str) -> list[GitHubIssue]:
        """Fetch every open and closed issue of a repository.

        Pages are requested one after another starting at page 1 until a page
        comes back empty. After ``max_pages`` pages the issues collected so far
        are returned, whether or not the last page was full.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            Issues in the order GitHub listed them
        """
        endpoint = f"/repos/{owner}/{repo}/issues"
        issues: list[GitHubIssue] = []

        for page in range(1, self.max_pages + 1):
            params = {"state": "all", "per_page": self.per_page, "page": page}
            page_issues = self._parse_issues(
                await self._request(endpoint, params), endpoint
            )
            if not page_issues:
                break
            issues.extend(page_issues)
        else:
            logger.warning(
                f"Reached maximum page limit ({self.max_pages}), stopping pagination"
            )

        logger.info(f"Fetched {len(issues)} total issues from {owner}/{repo}")
        return issues

    async def fetch_recent_issues(
        self, owner: str, repo: str, limit: int = 10
    ) -> list[GitHubIssue]:
        """Fetch the most recently updated issues (single page).

        Args:
            owner: Repository owner
            repo: Repository name
            limit: Number of issues to return

        Returns:
            Up to ``limit`` issues, most recently updated first
        """
        endpoint = f"/repos/{owner}/{repo}/issues"
        params = {
            "state": "all",
            "sort": "updated",
            "direction": "desc",
            "per_page": limit,
        }
        issues = self._parse_issues(await self._request(endpoint, params), endpoint)
        return issues[:limit]

    async def fetch_labels(self, owner: str, repo: str) -> list[GitHubLabel]:
        """Fetch the labels defined in a repository (first 100)."""
        endpoint = f"/repos/{owner}/{repo}/labels"
        payload = await self._request(endpoint, {"per_page": 100})
        if not isinstance(payload, list):
            raise UpstreamError(
                f"Expected a list of labels from {endpoint}", endpoint=endpoint
            )
        try:
            labels = [GitHubLabel.model_validate(item) for item in payload]
        except ValidationError as e:
            raise UpstreamError(
                f"Unexpected label data from {endpoint}: {e}", endpoint=endpoint
            ) from e

        logger.info(f"Fetched {len(labels)} labels from {owner}/{repo}")
        return labels

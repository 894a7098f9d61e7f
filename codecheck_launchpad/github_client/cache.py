"""Time-boxed in-memory cache in front of the GitHub REST API."""

import json
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    key: str
    data: Any
    fetched_at: float


@dataclass
class RateLimitInfo:
    """Quota reported by the last response that carried rate-limit headers."""

    remaining: int
    limit: int | None = None


@dataclass
class CacheStats:
    hit: int = 0
    miss: int = 0


class HttpCache:
    """Memoizes decoded JSON responses by request signature.

    An entry is served only while it is younger than ``timeout`` seconds;
    expired entries are re-fetched. Failed fetches are never stored.
    """

    def __init__(
        self,
        timeout: float = 300.0,
        rate_limit_warning: int = 50,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            timeout: Seconds an entry stays valid
            rate_limit_warning: Warn when remaining quota drops below this
            clock: Monotonic time source, injectable for tests
        """
        self.timeout = timeout
        self.rate_limit_warning = rate_limit_warning
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self.stats = CacheStats()
        self.rate_limit: RateLimitInfo | None = None

    @staticmethod
    def make_signature(endpoint: str, options: dict[str, Any] | None = None) -> str:
        """Build a deterministic key from an endpoint and its request options.

        Example:
            >>> HttpCache.make_signature("/repos/o/r/issues", {"params": {"page": 1}})
            '/repos/o/r/issues:{"params": {"page": 1}}'
        """
        return f"{endpoint}:{json.dumps(options or {}, sort_keys=True, default=str)}"

    def get(self, signature: str) -> Any | None:
        """Return the cached value for a signature if it has not expired."""
        entry = self._entries.get(signature)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at >= self.timeout:
            del self._entries[signature]
            return None
        return entry.data

    async def get_or_fetch(
        self,
        signature: str,
        fetch_fn: Callable[[], Awaitable[httpx.Response]],
    ) -> Any:
        """Return cached JSON for ``signature`` or fetch, decode and store it.

        Args:
            signature: Key from ``make_signature``
            fetch_fn: Coroutine factory performing the request; it must raise
                for failed requests

        Returns:
            Decoded JSON payload
        """
        cached = self.get(signature)
        if cached is not None:
            self.stats.hit += 1
            logger.debug(f"Cache hit for {signature}")
            return cached

        self.stats.miss += 1
        logger.debug(f"Cache miss for {signature}")
        response = await fetch_fn()
        data = response.json()
        self._entries[signature] = CacheEntry(
            key=signature, data=data, fetched_at=self._clock()
        )
        self._check_rate_limit(response.headers)
        return data

    def _check_rate_limit(self, headers: httpx.Headers) -> None:
        """Record quota headers and warn when the quota is running low.

        Advisory only: requests are never delayed or refused here.
        """
        remaining = headers.get("X-RateLimit-Remaining")
        limit = headers.get("X-RateLimit-Limit")
        if remaining is None or not remaining.isdigit():
            return

        self.rate_limit = RateLimitInfo(
            remaining=int(remaining),
            limit=int(limit) if limit and limit.isdigit() else None,
        )
        logger.debug(f"Rate limit: {remaining}/{limit} remaining")

        if self.rate_limit.remaining < self.rate_limit_warning:
            logger.warning(
                f"GitHub API rate limit warning: {remaining} requests remaining"
            )

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()
        logger.info("GitHub API cache cleared")

    def __len__(self) -> int:
        return len(self._entries)

"""Search-as-you-type over the roster with a quiet period."""

import asyncio
import logging
from collections.abc import Callable

from .roster import Codechecker, CodecheckerRoster

logger = logging.getLogger(__name__)


class DebouncedSearch:
    """Runs a roster search only after input has been quiet for ``delay``.

    Every ``submit`` cancels the search still waiting from the previous one,
    so a burst of keystrokes produces a single search for the last query.
    """

    def __init__(
        self,
        roster: CodecheckerRoster,
        on_results: Callable[[str, list[Codechecker]], None],
        delay: float = 0.3,
    ):
        self.roster = roster
        self.on_results = on_results
        self.delay = delay
        self._pending: asyncio.Task[None] | None = None

    def submit(self, query: str) -> asyncio.Task[None]:
        """Schedule a search for ``query``, replacing any pending one.

        Must be called from a running event loop.
        """
        self.cancel()
        self._pending = asyncio.create_task(self._run(query))
        return self._pending

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def wait(self) -> None:
        """Wait for the pending search, if any, to finish or be cancelled."""
        if self._pending is not None:
            await asyncio.wait({self._pending})

    async def _run(self, query: str) -> None:
        await asyncio.sleep(self.delay)
        results = self.roster.search(query)
        logger.debug(f"Search for '{query}' matched {len(results)} codecheckers")
        self.on_results(query, results)

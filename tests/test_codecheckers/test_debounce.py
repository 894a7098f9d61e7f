"""Tests for debounced roster search."""

import asyncio

import pytest

from codecheck_launchpad.codecheckers.debounce import DebouncedSearch
from codecheck_launchpad.codecheckers.roster import CodecheckerRoster, parse_roster


@pytest.fixture
def roster() -> CodecheckerRoster:
    roster = CodecheckerRoster("unused")
    roster.codecheckers = parse_roster(
        "name,github,skills\nAda Lovelace,ada,python\nAlan Turing,alan,R\n"
    )
    roster.is_loaded = True
    return roster


class TestDebouncedSearch:
    """Test the quiet-period search."""

    @pytest.mark.asyncio
    async def test_burst_runs_last_query_only(self, roster) -> None:
        """Test that rapid submissions collapse into one search."""
        calls = []
        search = DebouncedSearch(
            roster, lambda query, results: calls.append((query, results)), delay=0.01
        )

        first = search.submit("al")
        search.submit("ala")
        await search.wait()

        assert first.cancelled()
        assert len(calls) == 1
        query, results = calls[0]
        assert query == "ala"
        assert [c.handle for c in results] == ["alan"]

    @pytest.mark.asyncio
    async def test_cancel(self, roster) -> None:
        """Test that a cancelled search never reports."""
        calls = []
        search = DebouncedSearch(roster, lambda *args: calls.append(args), delay=0.01)

        task = search.submit("ada")
        search.cancel()
        await asyncio.sleep(0.03)

        assert task.cancelled()
        assert calls == []

    @pytest.mark.asyncio
    async def test_wait_without_pending(self, roster) -> None:
        """Test that waiting with nothing scheduled returns immediately."""
        search = DebouncedSearch(roster, lambda *args: None)
        await search.wait()

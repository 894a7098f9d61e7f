"""Tests for the launch pad coordinator."""

import asyncio
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from codecheck_launchpad.app import LaunchPad
from codecheck_launchpad.config import LaunchPadConfig, RepositoryKey
from codecheck_launchpad.errors import ConfigurationError, UpstreamError
from codecheck_launchpad.issues.labels import DEFAULT_LABELS
from codecheck_launchpad.statistics import CheckCategory


@pytest.fixture
def register_handler(api_issue):
    """Mock GitHub serving a small register: one page plus a recent listing."""
    issues = [
        api_issue(40, "Doe | 2025-029", ["id assigned", "journal"]),
        api_issue(41, "Roe | 2025-030/2025-032", ["id assigned"], state="open"),
        api_issue(42, "Poe | 2024-099", ["id assigned", "institution"]),
        api_issue(43, "Draft | 2025-077", []),
        api_issue(44, "Dev | 2025-090", ["development"], state="open"),
    ]
    recent = [
        api_issue(43, "Draft | 2025-077", [], state="open"),
        api_issue(40, "Doe | 2025-029", ["id assigned", "journal"]),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        if "sort" in request.url.params:
            return httpx.Response(200, json=recent)
        if request.url.params.get("page") == "1":
            return httpx.Response(200, json=issues)
        return httpx.Response(200, json=[])

    return handler


def make_config(year: int = 2025) -> LaunchPadConfig:
    config = LaunchPadConfig()
    config.current_year = year
    return config


def make_launchpad(handler, year: int = 2025) -> tuple[LaunchPad, list]:
    requests = []

    def recording(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
    return LaunchPad(make_config(year), http_client=http_client), requests


class TestLoadNextIdentifier:
    """Test the get-next-identifier action."""

    @pytest.mark.asyncio
    async def test_full_analysis(self, register_handler) -> None:
        """Test identifier, statistics and warnings from one load."""
        launchpad, _ = make_launchpad(register_handler)

        result = await launchpad.load_next_identifier()

        assert result.repository.key == RepositoryKey.TESTING
        assert result.next_identifier.identifier == "2025-033"
        assert not result.next_identifier.is_first_of_year
        assert result.next_identifier.highest_identifier.issue_number == 41
        assert result.identifier_count == 5
        assert result.issue_count == 5
        assert result.statistics.number_of_checks == 4
        assert result.statistics.ongoing_checks == 1
        assert result.statistics.completed_by_category[CheckCategory.JOURNAL] == 1
        assert [w.number for w in result.warnings] == [43]
        assert result.warnings[0].identifiers == ["2025-077"]
        assert launchpad.last_result is result
        assert not launchpad.is_loading

    @pytest.mark.asyncio
    async def test_production_floor(self) -> None:
        """Test that the production register never goes below its seed."""
        launchpad, requests = make_launchpad(
            lambda request: httpx.Response(200, json=[])
        )
        launchpad.select_repository("production")

        result = await launchpad.load_next_identifier()

        assert result.next_identifier.identifier == "2025-028"
        assert result.next_identifier.is_first_of_year
        assert requests[0].url.path == "/repos/codecheckers/register/issues"

    @pytest.mark.asyncio
    async def test_first_of_new_year(self, register_handler) -> None:
        """Test a year with no identifiers yet."""
        launchpad, _ = make_launchpad(register_handler, year=2026)

        result = await launchpad.load_next_identifier()

        assert result.next_identifier.identifier == "2026-001"
        assert result.next_identifier.is_first_of_year
        assert result.next_identifier.highest_identifier is None

    @pytest.mark.asyncio
    async def test_concurrent_call_is_dropped(self) -> None:
        """Test that a second call during a load returns None."""
        release = asyncio.Event()

        async def slow_fetch(owner, repo):
            await release.wait()
            return []

        client = Mock()
        client.fetch_all_issues = AsyncMock(side_effect=slow_fetch)
        client.fetch_recent_issues = AsyncMock(return_value=[])
        launchpad = LaunchPad(make_config(), client=client, roster=Mock())

        first = asyncio.create_task(launchpad.load_next_identifier())
        await asyncio.sleep(0)
        assert launchpad.is_loading
        assert await launchpad.load_next_identifier() is None

        release.set()
        result = await first

        assert result.next_identifier.identifier == "2025-001"
        assert client.fetch_all_issues.await_count == 1

    @pytest.mark.asyncio
    async def test_failed_fetch_cancels_sibling(self) -> None:
        """Test that the recent fetch is cancelled when the full fetch fails."""
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def hang(owner, repo, limit):
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.set()
                raise

        async def fail(owner, repo):
            await started.wait()
            raise UpstreamError("GitHub API error: 500 Internal Server Error")

        client = Mock()
        client.fetch_all_issues = AsyncMock(side_effect=fail)
        client.fetch_recent_issues = AsyncMock(side_effect=hang)
        launchpad = LaunchPad(make_config(), client=client, roster=Mock())

        with pytest.raises(UpstreamError):
            await launchpad.load_next_identifier()

        assert cancelled.is_set()
        assert not launchpad.is_loading

    @pytest.mark.asyncio
    async def test_upstream_failure_resets_state(self, register_handler) -> None:
        """Test that a failed load keeps no result and can be retried."""
        outage = [False]

        def handler(request: httpx.Request) -> httpx.Response:
            if outage[0]:
                return httpx.Response(500)
            return register_handler(request)

        launchpad, _ = make_launchpad(handler)
        await launchpad.load_next_identifier()
        outage[0] = True

        with pytest.raises(UpstreamError):
            await launchpad.refresh()

        assert launchpad.last_result is None
        assert not launchpad.is_loading

        outage[0] = False
        result = await launchpad.load_next_identifier()
        assert result.next_identifier.identifier == "2025-033"

    @pytest.mark.asyncio
    async def test_repeat_load_uses_cache(self, register_handler) -> None:
        """Test that a second load inside the cache window makes no requests."""
        launchpad, requests = make_launchpad(register_handler)

        await launchpad.load_next_identifier()
        count = len(requests)
        await launchpad.load_next_identifier()

        assert count == 3
        assert len(requests) == count

    @pytest.mark.asyncio
    async def test_refresh_clears_cache(self, register_handler) -> None:
        """Test that refresh goes back to the network."""
        launchpad, requests = make_launchpad(register_handler)

        await launchpad.load_next_identifier()
        result = await launchpad.refresh()

        assert len(requests) == 6
        assert result.next_identifier.identifier == "2025-033"


class TestRepositorySelection:
    """Test switching registers."""

    def test_select_clears_result(self) -> None:
        """Test that switching discards the previous result."""
        launchpad = LaunchPad(make_config(), client=Mock(), roster=Mock())
        launchpad.last_result = Mock()

        policy = launchpad.select_repository(RepositoryKey.PRODUCTION)

        assert policy.full_name == "codecheckers/register"
        assert launchpad.last_result is None

    def test_unknown_repository(self) -> None:
        """Test that an unknown key is a configuration error."""
        launchpad = LaunchPad(make_config(), client=Mock(), roster=Mock())
        with pytest.raises(ConfigurationError, match="Unknown repository"):
            launchpad.select_repository("staging")

    def test_invalid_config(self) -> None:
        """Test that invalid settings are rejected at construction."""
        config = make_config()
        config.max_pages = 0
        with pytest.raises(ConfigurationError, match="max_pages"):
            LaunchPad(config, client=Mock(), roster=Mock())


class TestConfiguredComponents:
    """Test that settings reach the components the launch pad builds."""

    def test_cache_settings_applied(self) -> None:
        """Test the cache timeout and rate limit threshold."""
        config = make_config()
        config.cache_timeout = 1
        config.rate_limit_warning = 5000

        launchpad = LaunchPad(config)

        assert launchpad.client.cache.timeout == config.cache_timeout
        assert launchpad.client.cache.rate_limit_warning == 5000

    @pytest.mark.asyncio
    async def test_search_uses_configured_delay(self) -> None:
        """Test the quiet period of roster searches."""
        config = make_config()
        config.search_delay = 0.01
        roster = Mock()
        roster.search.return_value = []
        results = []
        launchpad = LaunchPad(config, client=Mock(), roster=roster)

        search = launchpad.new_search(lambda query, found: results.append(query))
        search.submit("ada")
        await search.wait()

        assert search.delay == 0.01
        assert search.roster is roster
        assert results == ["ada"]


class TestLabelsAndDrafts:
    """Test label loading and issue drafts."""

    @pytest.mark.asyncio
    async def test_load_labels(self) -> None:
        """Test labels fetched from the register."""
        launchpad, _ = make_launchpad(
            lambda request: httpx.Response(
                200, json=[{"name": "certificate", "color": "008033"}]
            )
        )
        labels = await launchpad.load_labels()
        assert [label.name for label in labels] == ["certificate"]

    @pytest.mark.asyncio
    async def test_load_labels_falls_back(self) -> None:
        """Test the built-in labels when GitHub is unavailable."""
        launchpad, _ = make_launchpad(lambda request: httpx.Response(403))
        assert await launchpad.load_labels() == DEFAULT_LABELS

    def test_new_draft_requires_identifier(self) -> None:
        """Test that a draft needs a loaded identifier."""
        launchpad = LaunchPad(make_config(), client=Mock(), roster=Mock())
        with pytest.raises(ValueError, match="No identifier available"):
            launchpad.new_draft()

    @pytest.mark.asyncio
    async def test_new_draft_and_url(self, register_handler) -> None:
        """Test drafting an issue for the loaded identifier."""
        launchpad, _ = make_launchpad(register_handler)
        await launchpad.load_next_identifier()

        draft = launchpad.new_draft(author_names="Doe")
        url = launchpad.build_issue_url(draft)

        assert draft.title == "Doe | 2025-033"
        assert url.startswith(
            "https://github.com/codecheckers/testing-dev-register/issues/new?"
        )

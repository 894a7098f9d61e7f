"""Main CLI entry point."""

import asyncio
import logging

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ..app import LaunchPad, LoadResult
from ..codecheckers.roster import Codechecker, highlight_matches
from ..config import LaunchPadConfig, RepositoryKey
from ..errors import LaunchPadError
from ..github_client import urls
from ..github_client.models import GitHubLabel
from ..issues.labels import label_style
from ..statistics import CheckCategory, category_labels

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="launchpad",
    help="Open correctly numbered issues in the CODECHECK register",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()

REPOSITORY_OPTION = typer.Option(
    RepositoryKey.TESTING, "--repository", "-r", help="Register to use"
)
YEAR_OPTION = typer.Option(
    None, "--year", help="Certificate year (defaults to the current year)"
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Show debug logging")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
        force=True,
    )


def create_launchpad(repository: RepositoryKey, year: int | None) -> LaunchPad:
    """Build a launch pad for the chosen register."""
    config = LaunchPadConfig()
    if year is not None:
        config.current_year = year
    launchpad = LaunchPad(config)
    launchpad.select_repository(repository)
    return launchpad


async def _load(launchpad: LaunchPad) -> LoadResult:
    try:
        result = await launchpad.load_next_identifier()
    finally:
        await launchpad.aclose()
    if result is None:
        raise LaunchPadError("Another analysis is already running")
    return result


def _fail(message: str) -> typer.Exit:
    console.print(f"❌ Error: {message}")
    return typer.Exit(1)


def _print_identifier(result: LoadResult) -> None:
    next_id = result.next_identifier
    table = Table(title=f"Next Identifier: {result.repository.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Repository", result.repository.full_name)
    table.add_row("Next identifier", f"[bold]{next_id.identifier}[/bold]")
    table.add_row("First of year", "yes" if next_id.is_first_of_year else "no")
    if next_id.highest_identifier:
        highest = next_id.highest_identifier
        table.add_row(
            "Highest current",
            f"{highest.full} in issue #{highest.issue_number} ({highest.issue_url})",
        )
    table.add_row("Identifiers found", str(result.identifier_count))
    table.add_row("Issues analyzed", str(result.issue_count))
    console.print(table)

    for skipped in result.skipped_ranges:
        console.print(
            f"⚠️  Skipped {skipped.reason} {skipped.start}/{skipped.end} "
            f"in issue #{skipped.issue_number}"
        )

    if result.warnings:
        warning_table = Table(title="Recent issues with unassigned identifiers")
        warning_table.add_column("Issue #", style="cyan")
        warning_table.add_column("Title", style="white")
        warning_table.add_column("Identifiers", style="yellow")
        for warning in result.warnings:
            warning_table.add_row(
                str(warning.number), warning.title, ", ".join(warning.identifiers)
            )
        console.print(warning_table)


@app.command("next-id")
def next_id(
    repository: RepositoryKey = REPOSITORY_OPTION,
    year: int | None = YEAR_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show the next unused certificate identifier of a register."""
    _configure_logging(verbose)
    try:
        launchpad = create_launchpad(repository, year)
        console.print(f"🔍 Analyzing {launchpad.repository.name}...")
        result = asyncio.run(_load(launchpad))
    except LaunchPadError as e:
        raise _fail(str(e))

    _print_identifier(result)


@app.command()
def stats(
    repository: RepositoryKey = REPOSITORY_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Show check counts for a register, with GitHub search links."""
    _configure_logging(verbose)
    try:
        launchpad = create_launchpad(repository, None)
        result = asyncio.run(_load(launchpad))
    except LaunchPadError as e:
        raise _fail(str(e))

    policy = result.repository
    statistics = result.statistics
    table = Table(title=f"Statistics: {policy.name}")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right", style="green")
    table.add_column("Search", style="blue")

    table.add_row(
        "Number of checks",
        str(statistics.number_of_checks),
        urls.all_checks_search_url(policy.owner, policy.repo),
    )
    table.add_row(
        "Ongoing checks",
        str(statistics.ongoing_checks),
        urls.ongoing_checks_search_url(policy.owner, policy.repo),
    )
    for category in CheckCategory:
        labels = category_labels(category)
        table.add_row(
            f"Completed: {'/'.join(labels)}",
            str(statistics.completed_by_category.get(category, 0)),
            urls.completed_category_search_url(policy.owner, policy.repo, labels),
        )

    console.print(table)
    console.print(f"🕒 Last analyzed: {statistics.last_analyzed:%Y-%m-%d %H:%M:%S}")


@app.command("new-issue")
def new_issue(
    authors: str = typer.Option("", "--authors", "-a", help="Author names"),
    title: str | None = typer.Option(None, "--title", help="Override the title"),
    description: str | None = typer.Option(
        None, "--description", "-d", help="Issue body (defaults to the template)"
    ),
    labels: list[str] | None = typer.Option(
        None, "--label", "-l", help="Extra label (can be used multiple times)"
    ),
    assignees: list[str] | None = typer.Option(
        None, "--assignee", help="Codechecker handle (can be used multiple times)"
    ),
    repository: RepositoryKey = REPOSITORY_OPTION,
    year: int | None = YEAR_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Compute the next identifier and print a pre-filled new-issue URL."""
    _configure_logging(verbose)
    try:
        launchpad = create_launchpad(repository, year)
        asyncio.run(_load(launchpad))
    except LaunchPadError as e:
        raise _fail(str(e))

    draft = launchpad.new_draft(author_names=authors)
    draft.custom_title = title
    draft.description = description
    for label in labels or []:
        draft.labels.add(label)
    for handle in assignees or []:
        draft.assign(Codechecker(handle=handle))

    table = Table(title="New Issue")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Repository", launchpad.repository.full_name)
    table.add_row("Identifier", draft.identifier)
    table.add_row("Title", draft.title)
    table.add_row("Labels", ", ".join(draft.labels))
    table.add_row("Assignees", ", ".join(draft.assignees) or "None")
    console.print(table)

    console.print("🔗 Open this URL to create the issue:")
    console.print(launchpad.build_issue_url(draft), soft_wrap=True)


@app.command("labels")
def list_labels(
    repository: RepositoryKey = REPOSITORY_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """List the labels available in a register."""
    _configure_logging(verbose)
    launchpad = create_launchpad(repository, None)

    async def _fetch() -> list[GitHubLabel]:
        try:
            return await launchpad.load_labels()
        finally:
            await launchpad.aclose()

    labels = asyncio.run(_fetch())

    table = Table(title=f"Labels: {launchpad.repository.name}")
    table.add_column("Label")
    table.add_column("Description", style="white")
    for label in labels:
        style = label_style(label.color)
        name = f"[{style}]{label.name}[/]" if style else label.name
        table.add_row(name, label.description or "")
    console.print(table)


@app.command()
def codecheckers(
    query: str = typer.Argument(..., help="Name, handle or skill to search for"),
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Search the codechecker roster."""
    _configure_logging(verbose)
    launchpad = create_launchpad(RepositoryKey.TESTING, None)

    async def _search() -> list[Codechecker]:
        try:
            await launchpad.roster.load()
        finally:
            await launchpad.aclose()
        return launchpad.roster.search(query)

    try:
        results = asyncio.run(_search())
    except LaunchPadError as e:
        raise _fail(str(e))

    if not results:
        console.print("❌ No codecheckers found matching the query")
        return

    table = Table(title=f"Codecheckers matching '{query}'")
    table.add_column("Name", style="white")
    table.add_column("Handle", style="cyan")
    table.add_column("Skills", style="green")
    table.add_column("ORCID", style="blue")
    for codechecker in results:
        table.add_row(
            highlight_matches(codechecker.name, query),
            highlight_matches(f"@{codechecker.handle}", query),
            highlight_matches(", ".join(codechecker.all_skills), query),
            codechecker.orcid_url,
        )
    console.print(table)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from codecheck_launchpad import __version__

    console.print(f"CODECHECK Launch Pad v{__version__}")


if __name__ == "__main__":
    app()

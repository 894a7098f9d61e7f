"""Codechecker roster: CSV loading, parsing and search."""

import csv
import io
import logging
import re

import httpx
from pydantic import BaseModel, Field

from ..errors import UpstreamError

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 10
MAX_SKILL_LENGTH = 50

ORCID_PATTERN = re.compile(r"(\d{4}-\d{4}-\d{4}-\d{3}[\dX])")
SKILL_SEPARATORS = re.compile(r"[,;\n\r]+")
HANDLE_PREFIXES = re.compile(r"^(?:https?://github\.com/|github\.com/|@)")


class MatchInfo(BaseModel):
    """Which parts of a codechecker matched a search query."""

    name_matches: list[str] = Field(default_factory=list)
    handle_matches: list[str] = Field(default_factory=list)
    skill_matches: list[str] = Field(default_factory=list)


class Codechecker(BaseModel):
    """One person from the codecheckers roster."""

    name: str = Field("", description="Display name")
    handle: str = Field("", description="GitHub handle without '@'")
    skills: str = Field("", description="Raw skills column")
    language: str = Field("", description="Raw languages column")
    fields: str = Field("", description="Raw research fields column")
    orcid: str = Field("", description="ORCID iD, e.g. 0000-0002-1825-0097")
    all_skills: list[str] = Field(
        default_factory=list,
        description="Lower-case, de-duplicated skills, languages and fields",
    )
    match_info: MatchInfo | None = Field(
        None, description="Set on search results only"
    )

    @property
    def display_name(self) -> str:
        return self.name or self.handle

    @property
    def orcid_url(self) -> str:
        return f"https://orcid.org/{self.orcid}" if self.orcid else ""


def extract_handle(github_field: str) -> str:
    """Reduce a GitHub URL, ``@handle`` or bare handle to the handle.

    Example:
        >>> extract_handle("https://github.com/octocat/")
        'octocat'
    """
    if not github_field:
        return ""
    handle = HANDLE_PREFIXES.sub("", github_field.strip()).strip()
    return handle.split("/")[0]


def extract_orcid(orcid_field: str) -> str:
    """Pull the ORCID iD out of a bare iD or an orcid.org URL."""
    match = ORCID_PATTERN.search(orcid_field or "")
    return match.group(1) if match else ""


def parse_skills(*columns: str) -> list[str]:
    """Merge free-text skill columns into unique lower-case entries.

    Entries of 50 characters or more are treated as prose and dropped.
    """
    skills: dict[str, None] = {}
    for column in columns:
        if not column or not column.strip():
            continue
        for skill in SKILL_SEPARATORS.split(column):
            skill = skill.strip()
            if skill and len(skill) < MAX_SKILL_LENGTH:
                skills[skill.lower()] = None
    return list(skills)


def _column(row: dict[str, str], *names: str) -> str:
    for name in names:
        value = row.get(name)
        if value:
            return value.strip()
    return ""


def parse_roster(csv_text: str) -> list[Codechecker]:
    """Parse the roster CSV, tolerating the column name variants in use.

    Rows shorter than the header, and rows with neither a name nor a handle,
    are skipped. The result is sorted by name, falling back to handle.
    """
    reader = csv.DictReader(io.StringIO(csv_text.strip()))
    if reader.fieldnames:
        reader.fieldnames = [name.strip() for name in reader.fieldnames]
    logger.debug(f"CSV headers: {reader.fieldnames}")

    codecheckers = []
    for row in reader:
        if None in row.values():
            continue
        skills = _column(row, "skills", "Skills")
        language = _column(row, "language", "Language")
        fields = _column(row, "fields", "Fields")
        codechecker = Codechecker(
            name=_column(row, "name", "Name"),
            handle=extract_handle(_column(row, "github", "GitHub", "handle")),
            skills=skills,
            language=language,
            fields=fields,
            orcid=extract_orcid(_column(row, "orcid", "ORCID")),
            all_skills=parse_skills(skills, language, fields),
        )
        if codechecker.name or codechecker.handle:
            codecheckers.append(codechecker)

    return sorted(codecheckers, key=lambda c: c.display_name.casefold())


def highlight_matches(text: str, query: str, style: str = "bold yellow") -> str:
    """Wrap case-insensitive occurrences of ``query`` in rich markup."""
    if not text or not query:
        return text
    pattern = re.compile(f"({re.escape(query)})", re.IGNORECASE)
    return pattern.sub(rf"[{style}]\1[/{style}]", text)


class CodecheckerRoster:
    """Lazily loaded list of codecheckers available for assignment."""

    def __init__(self, csv_url: str, http_client: httpx.AsyncClient | None = None):
        """Initialize the roster.

        Args:
            csv_url: Location of the roster CSV
            http_client: HTTP client to use; a short-lived one is created if None
        """
        self.csv_url = csv_url
        self._http = http_client
        self.codecheckers: list[Codechecker] = []
        self.is_loaded = False

    async def load(self) -> list[Codechecker]:
        """Fetch and parse the roster once; later calls return the cached list.

        Raises:
            UpstreamError: If the CSV cannot be fetched
        """
        if self.is_loaded:
            return self.codecheckers

        logger.info(f"Fetching codecheckers from: {self.csv_url}")
        try:
            if self._http is not None:
                response = await self._http.get(self.csv_url)
            else:
                async with httpx.AsyncClient(timeout=30.0) as client:
                    response = await client.get(self.csv_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"Failed to load codecheckers: HTTP {e.response.status_code}",
                status_code=e.response.status_code,
                endpoint=self.csv_url,
            ) from e
        except httpx.RequestError as e:
            raise UpstreamError(
                f"Failed to load codecheckers: {e}", endpoint=self.csv_url
            ) from e

        self.codecheckers = parse_roster(response.text)
        self.is_loaded = True
        logger.info(f"Loaded {len(self.codecheckers)} codecheckers")
        return self.codecheckers

    def search(self, query: str) -> list[Codechecker]:
        """Find codecheckers by name, handle or skill.

        Args:
            query: Search text; fewer than two characters returns nothing

        Returns:
            Up to ten matches, each carrying ``match_info``
        """
        if not query or len(query) < MIN_QUERY_LENGTH:
            return []

        needle = query.lower()
        results = []
        for codechecker in self.codecheckers:
            info = MatchInfo(
                name_matches=[needle] if needle in codechecker.name.lower() else [],
                handle_matches=(
                    [needle] if needle in codechecker.handle.lower() else []
                ),
                skill_matches=[s for s in codechecker.all_skills if needle in s],
            )
            if info.name_matches or info.handle_matches or info.skill_matches:
                results.append(codechecker.model_copy(update={"match_info": info}))
            if len(results) == MAX_RESULTS:
                break

        return results

    def get_by_handle(self, handle: str) -> Codechecker | None:
        if not handle:
            return None
        return next((c for c in self.codecheckers if c.handle == handle), None)

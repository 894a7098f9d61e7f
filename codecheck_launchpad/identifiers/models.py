"""Models for certificate identifiers and numbering results."""

from pydantic import BaseModel, ConfigDict, Field


class Identifier(BaseModel):
    """A certificate identifier found in an issue title.

    ``full`` keeps the zero-padding of the title token it came from (for range
    members, the padding of the range's start token).
    """

    model_config = ConfigDict(frozen=True)

    full: str = Field(..., description="Identifier as written, e.g. '2025-007'")
    year: int = Field(..., description="Certificate year")
    number: int = Field(..., description="Sequential number within the year")
    issue_title: str = Field(..., description="Title of the source issue")
    issue_number: int = Field(..., description="Number of the source issue")
    issue_url: str = Field("", description="Browser URL of the source issue")
    is_from_range: bool = Field(
        False, description="Generated by expanding a range token"
    )
    range_start: str | None = Field(None, description="Start token of the range")
    range_end: str | None = Field(None, description="End token of the range")


class SkippedRange(BaseModel):
    """A range token that was rejected instead of expanded."""

    model_config = ConfigDict(frozen=True)

    issue_number: int
    start: str
    end: str
    reason: str


class NextIdentifierResult(BaseModel):
    """The identifier to assign next, recomputed on every request."""

    identifier: str = Field(..., description="Formatted identifier, e.g. '2025-029'")
    year: int = Field(..., description="Year the identifier belongs to")
    number: int = Field(..., description="Sequential number to assign")
    is_first_of_year: bool = Field(
        ..., description="No identifier exists yet for the year"
    )
    highest_identifier: Identifier | None = Field(
        None, description="Existing identifier holding the year's highest number"
    )


class IdentifierWarning(BaseModel):
    """A recent issue whose title carries identifiers the extractor ignores."""

    number: int
    title: str
    url: str
    identifiers: list[str]

"""Pydantic models for the GitHub data the launch pad reads.

These models map to the GitHub REST API v3 issue and label objects. Only the
fields the launch pad uses are declared; everything else is ignored.
API Reference: https://docs.github.com/en/rest/issues
"""

from datetime import datetime

from pydantic import BaseModel, Field


class GitHubLabel(BaseModel):
    """GitHub label model representing repository labels.

    Maps to GitHub REST API Label object.
    API Reference: https://docs.github.com/en/rest/issues/labels
    """

    name: str = Field(..., description="Name of the label (string)")
    color: str = Field(
        "", description="Hexadecimal color code without leading # (string)"
    )
    description: str | None = Field(
        None, description="Short description of the label (string, max 100 characters)"
    )


class GitHubIssue(BaseModel):
    """GitHub issue model representing register entries.

    Maps to GitHub REST API Issue object.
    API Reference: https://docs.github.com/en/rest/issues/issues
    """

    number: int = Field(..., description="Issue number within the repository (integer)")
    title: str = Field("", description="Short description/title of the issue (string)")
    state: str = Field(..., description="Current state: 'open', 'closed' (string)")
    labels: list[GitHubLabel] = Field(
        default_factory=list, description="Array of labels attached to the issue"
    )
    html_url: str = Field("", description="Browser URL of the issue")
    updated_at: datetime | None = Field(
        None, description="Timestamp of last issue update (ISO 8601)"
    )

    def has_label(self, name: str) -> bool:
        """Check for a label by case-insensitive exact name."""
        wanted = name.lower()
        return any(label.name.lower() == wanted for label in self.labels)

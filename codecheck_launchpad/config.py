"""Configuration for the CODECHECK launch pad.

Runtime settings are read from environment variables (optionally loaded from a
``.env`` file by the CLI). Repository and certificate-type tables are closed
enumerations; looking up an unknown key raises ``ConfigurationError``.
"""

import os
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_ROSTER_URL = (
    "https://raw.githubusercontent.com/codecheckers/codecheckers/"
    "refs/heads/master/codecheckers.csv"
)


class LaunchPadConfig:
    """Runtime settings for fetching and numbering."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.api_base_url: str = os.getenv("LAUNCHPAD_API_URL", DEFAULT_API_URL)
        self.roster_url: str = os.getenv("LAUNCHPAD_ROSTER_URL", DEFAULT_ROSTER_URL)
        self.cache_timeout: float = float(
            os.getenv("LAUNCHPAD_CACHE_TIMEOUT", "300")
        )
        self.rate_limit_warning: int = int(
            os.getenv("LAUNCHPAD_RATE_LIMIT_WARNING", "50")
        )
        self.current_year: int = int(
            os.getenv("LAUNCHPAD_CURRENT_YEAR") or datetime.now().year
        )
        self.issues_per_page: int = 100
        self.max_pages: int = 50
        self.recent_issues_limit: int = 10
        self.identifier_padding: int = 3
        self.search_delay: float = 0.3

    def validate(self) -> None:
        """Validate configuration and raise error if invalid."""
        invalid = [
            name
            for name in (
                "cache_timeout",
                "issues_per_page",
                "max_pages",
                "recent_issues_limit",
                "identifier_padding",
            )
            if getattr(self, name) <= 0
        ]
        if self.rate_limit_warning < 0:
            invalid.append("rate_limit_warning")

        if invalid:
            raise ConfigurationError(
                f"Configuration values must be positive: {', '.join(invalid)}"
            )


class RepositoryKey(str, Enum):
    """Logical names of the two registers."""

    TESTING = "testing"
    PRODUCTION = "production"


class RepositoryPolicy(BaseModel):
    """A register repository and its numbering policy."""

    model_config = ConfigDict(frozen=True)

    key: RepositoryKey = Field(..., description="Logical repository key")
    owner: str = Field(..., description="GitHub organization or user")
    repo: str = Field(..., description="GitHub repository name")
    name: str = Field(..., description="Human-readable register name")
    description: str = Field("", description="What the register is used for")
    minimum_number_for_year: dict[int, int] = Field(
        default_factory=dict,
        description="Lowest assignable certificate number per year",
    )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def minimum_number(self, year: int) -> int:
        """Return the floor for ``year``; years without a seed start at 1."""
        return self.minimum_number_for_year.get(year, 1)


REPOSITORIES: dict[RepositoryKey, RepositoryPolicy] = {
    RepositoryKey.TESTING: RepositoryPolicy(
        key=RepositoryKey.TESTING,
        owner="codecheckers",
        repo="testing-dev-register",
        name="Testing Register",
        description="For development and testing purposes",
    ),
    RepositoryKey.PRODUCTION: RepositoryPolicy(
        key=RepositoryKey.PRODUCTION,
        owner="codecheckers",
        repo="register",
        name="Production Register",
        description="For live CODECHECK certificates",
        # Numbers below 28 were assigned by hand before the launch pad existed
        minimum_number_for_year={2025: 28},
    ),
}


def get_repository_policy(key: str | RepositoryKey) -> RepositoryPolicy:
    """Look up a register by key.

    Raises:
        ConfigurationError: If the key does not name a known register
    """
    try:
        return REPOSITORIES[RepositoryKey(key)]
    except ValueError:
        valid = ", ".join(k.value for k in RepositoryKey)
        raise ConfigurationError(
            f"Unknown repository '{key}'. Valid repositories: {valid}"
        ) from None


class CertificateType(str, Enum):
    """Kinds of issue the launch pad can open."""

    CERTIFICATE = "certificate"


class IssueTemplate(str, Enum):
    CODECHECK_ENTRY = "codecheck-entry"


class CertificateTypeConfig(BaseModel):
    """Label and template used for one certificate type."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name")
    label: str = Field(..., description="Label applied to new issues")
    template: IssueTemplate = Field(..., description="Issue body template")


CERTIFICATE_TYPES: dict[CertificateType, CertificateTypeConfig] = {
    CertificateType.CERTIFICATE: CertificateTypeConfig(
        name="CODECHECK Certificate",
        label="certificate",
        template=IssueTemplate.CODECHECK_ENTRY,
    ),
}

ISSUE_TEMPLATES: dict[IssueTemplate, str] = {
    IssueTemplate.CODECHECK_ENTRY: """
**Work**: [Paper title, DOI, link, venue, etc.]

**Repository and workflow**: code and/or data [URL, DOI, etc.]
""",
}


def get_certificate_type(key: str | CertificateType) -> CertificateTypeConfig:
    """Look up a certificate type by key.

    Raises:
        ConfigurationError: If the key does not name a known certificate type
    """
    try:
        return CERTIFICATE_TYPES[CertificateType(key)]
    except ValueError:
        raise ConfigurationError(f"Invalid certificate type: {key}") from None


def render_template(certificate_type: str | CertificateType, identifier: str) -> str:
    """Render the issue body template for a certificate type."""
    type_config = get_certificate_type(certificate_type)
    return ISSUE_TEMPLATES[type_config.template].replace("{identifier}", identifier)

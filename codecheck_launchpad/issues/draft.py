"""Issue drafts: the title, body, labels and assignees of a new register entry."""

from ..codecheckers.roster import Codechecker
from ..config import (
    CertificateType,
    RepositoryPolicy,
    get_certificate_type,
    render_template,
)
from ..github_client.urls import build_new_issue_url
from ..identifiers.extractor import ID_ASSIGNED_LABEL
from .labels import LabelSelection

AUTHOR_PLACEHOLDER = "[Author Names]"


def generate_issue_title(
    certificate_type: str | CertificateType, identifier: str, author_names: str = ""
) -> str:
    """Build an issue title of the form ``"<authors> | <identifier>"``.

    Example:
        >>> generate_issue_title("certificate", "2025-029", "Doe, Roe")
        'Doe, Roe | 2025-029'
    """
    get_certificate_type(certificate_type)
    authors = author_names.strip() or AUTHOR_PLACEHOLDER
    return f"{authors} | {identifier}"


class IssueDraft:
    """A new register issue being prepared for an identifier.

    The draft starts with the type's label, ``id assigned`` and, while no
    codechecker is assigned, ``needs codechecker``.
    """

    def __init__(
        self,
        identifier: str,
        certificate_type: str | CertificateType = CertificateType.CERTIFICATE,
        author_names: str = "",
    ):
        self.identifier = identifier
        type_config = get_certificate_type(certificate_type)
        self.certificate_type = CertificateType(certificate_type)
        self.author_names = author_names
        self.custom_title: str | None = None
        self.description: str | None = None
        self.codecheckers: list[Codechecker] = []
        self.labels = LabelSelection([type_config.label, ID_ASSIGNED_LABEL])
        self.labels.sync_needs_codechecker(has_codecheckers=False)

    @property
    def default_body(self) -> str:
        return render_template(self.certificate_type, self.identifier)

    @property
    def title(self) -> str:
        if self.custom_title and self.custom_title.strip():
            return self.custom_title.strip()
        return generate_issue_title(
            self.certificate_type, self.identifier, self.author_names
        )

    @property
    def body(self) -> str:
        """The custom description if one was written, otherwise the template."""
        description = (self.description or "").strip()
        if description and description != self.default_body.strip():
            return description
        return self.default_body

    @property
    def assignees(self) -> list[str]:
        return [c.handle for c in self.codecheckers]

    def assign(self, codechecker: Codechecker) -> bool:
        """Assign a codechecker; returns False if already assigned."""
        if any(c.handle == codechecker.handle for c in self.codecheckers):
            return False
        self.codecheckers.append(codechecker)
        self.labels.sync_needs_codechecker(has_codecheckers=True)
        return True

    def unassign(self, handle: str) -> None:
        self.codecheckers = [c for c in self.codecheckers if c.handle != handle]
        self.labels.sync_needs_codechecker(has_codecheckers=bool(self.codecheckers))

    def url(self, policy: RepositoryPolicy) -> str:
        """GitHub new-issue URL for this draft in the given register."""
        return build_new_issue_url(
            policy.owner,
            policy.repo,
            self.title,
            self.body,
            self.labels.as_list(),
            self.assignees,
        )

"""Label selection rules for new register issues."""

from ..github_client.models import GitHubLabel
from ..identifiers.extractor import ID_ASSIGNED_LABEL

CERTIFICATE_LABEL = "certificate"
NEEDS_CODECHECKER_LABEL = "needs codechecker"
ESSENTIAL_LABELS = (CERTIFICATE_LABEL, ID_ASSIGNED_LABEL)

# Colours match the labels of the codecheckers/register repository
DEFAULT_LABELS: list[GitHubLabel] = [
    GitHubLabel(name="certificate", color="008033", description="CODECHECK certificate"),
    GitHubLabel(
        name="needs codechecker",
        color="d73a4a",
        description="Requires a codechecker assignment",
    ),
    GitHubLabel(name="institution", color="5319e7", description="Institutional check"),
    GitHubLabel(name="journal", color="f7a5ba", description="Journal-based check"),
    GitHubLabel(name="community", color="f9f89d", description="Community check"),
    GitHubLabel(
        name="conference", color="CA1C33", description="Conference-related check"
    ),
    GitHubLabel(name="workshop", color="CA1C33", description="Workshop-related check"),
    GitHubLabel(
        name="id assigned",
        color="0e8a16",
        description="Certificate identifier has been assigned",
    ),
    GitHubLabel(
        name="enhancement", color="a2eeef", description="New feature or request"
    ),
    GitHubLabel(
        name="documentation",
        color="0075ca",
        description="Improvements or additions to documentation",
    ),
    GitHubLabel(name="bug", color="d73a49", description="Something isn't working"),
]


def contrast_color(hex_color: str | None) -> str:
    """Pick black or white text for a label background.

    Uses perceived luminance; colours that are not six hex digits fall back
    to black text.
    """
    value = (hex_color or "").lstrip("#")
    if len(value) != 6:
        return "#000000"
    try:
        r, g, b = (int(value[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return "#000000"

    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#000000" if luminance > 0.5 else "#ffffff"


def label_style(hex_color: str | None) -> str | None:
    """Rich style rendering a label like a GitHub badge, None if unrenderable."""
    value = (hex_color or "").lstrip("#")
    if len(value) != 6 or any(c not in "0123456789abcdefABCDEF" for c in value):
        return None
    return f"{contrast_color(value)} on #{value}"


class LabelSelection:
    """Ordered set of labels chosen for a new issue."""

    def __init__(self, initial: list[str] | None = None):
        self._labels: list[str] = []
        for name in initial or []:
            self.add(name)

    def add(self, name: str) -> None:
        if name not in self._labels:
            self._labels.append(name)

    def remove(self, name: str) -> bool:
        """Remove a label; essential labels stay. Returns True if removed."""
        if name in ESSENTIAL_LABELS or name not in self._labels:
            return False
        self._labels.remove(name)
        return True

    def toggle(self, name: str) -> None:
        if name in self._labels:
            self.remove(name)
        else:
            self.add(name)

    def sync_needs_codechecker(self, has_codecheckers: bool) -> None:
        """Keep "needs codechecker" selected exactly while nobody is assigned."""
        if has_codecheckers:
            self.remove(NEEDS_CODECHECKER_LABEL)
        else:
            self.add(NEEDS_CODECHECKER_LABEL)

    def __contains__(self, name: object) -> bool:
        return name in self._labels

    def __iter__(self):
        return iter(self._labels)

    def as_list(self) -> list[str]:
        return list(self._labels)

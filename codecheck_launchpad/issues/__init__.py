"""Drafting new register issues."""

from .draft import IssueDraft, generate_issue_title
from .labels import DEFAULT_LABELS, LabelSelection, contrast_color

__all__ = [
    "DEFAULT_LABELS",
    "IssueDraft",
    "LabelSelection",
    "contrast_color",
    "generate_issue_title",
]

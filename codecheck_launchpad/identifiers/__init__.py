"""Certificate identifier extraction and numbering."""

from .calculator import compute_next_identifier, format_identifier
from .extractor import (
    ID_ASSIGNED_LABEL,
    IdentifierExtractor,
    extract_identifiers,
    find_identifier_warnings,
)
from .models import Identifier, IdentifierWarning, NextIdentifierResult, SkippedRange

__all__ = [
    "ID_ASSIGNED_LABEL",
    "Identifier",
    "IdentifierExtractor",
    "IdentifierWarning",
    "NextIdentifierResult",
    "SkippedRange",
    "compute_next_identifier",
    "extract_identifiers",
    "find_identifier_warnings",
    "format_identifier",
]

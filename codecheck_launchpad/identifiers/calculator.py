"""Calculation of the next certificate identifier for a register."""

import logging

from ..config import RepositoryPolicy
from .models import Identifier, NextIdentifierResult

logger = logging.getLogger(__name__)


def format_identifier(year: int, number: int, padding: int = 3) -> str:
    """Format an identifier as ``YYYY-NNN``.

    Example:
        >>> format_identifier(2025, 7)
        '2025-007'
    """
    return f"{year}-{str(number).zfill(padding)}"


def compute_next_identifier(
    identifiers: list[Identifier],
    current_year: int,
    policy: RepositoryPolicy | None = None,
    padding: int = 3,
) -> NextIdentifierResult:
    """Compute the next identifier to assign for ``current_year``.

    Numbers are always appended after the year's current maximum; gaps in the
    sequence are never reused. The repository floor applies on top, so the
    result is ``max(floor, max_number + 1)``, or the floor itself when the
    year has no identifiers yet.

    Args:
        identifiers: Output of the identifier extractor
        current_year: Year to number within
        policy: Register policy supplying the floor; None means a floor of 1
        padding: Zero-padding width of the number

    Returns:
        The next identifier and the existing identifier with the highest number
    """
    year_identifiers = [i for i in identifiers if i.year == current_year]
    min_number = policy.minimum_number(current_year) if policy else 1

    highest: Identifier | None = None
    if year_identifiers:
        highest = max(year_identifiers, key=lambda i: i.number)
        next_number = max(min_number, highest.number + 1)
        logger.debug(
            f"Max number found for {current_year}: {highest.number} "
            f"(issue #{highest.issue_number})"
        )
    else:
        next_number = min_number

    identifier = format_identifier(current_year, next_number, padding)
    logger.info(f"Next available identifier: {identifier} (min: {min_number})")

    return NextIdentifierResult(
        identifier=identifier,
        year=current_year,
        number=next_number,
        is_first_of_year=not year_identifiers,
        highest_identifier=highest,
    )

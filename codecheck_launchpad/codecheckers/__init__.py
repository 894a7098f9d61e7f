"""Codechecker roster and search."""

from .debounce import DebouncedSearch
from .roster import Codechecker, CodecheckerRoster, MatchInfo, parse_roster

__all__ = [
    "Codechecker",
    "CodecheckerRoster",
    "DebouncedSearch",
    "MatchInfo",
    "parse_roster",
]

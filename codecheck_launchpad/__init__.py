"""CODECHECK launch pad: next certificate identifiers for the register."""

__version__ = "0.1.0"

"""Typed command-line flags with environment sources, help lines and exit-code handling."""

__version__ = "0.1.0"

__all__ = ["errors", "values", "multivalue", "formatting", "flagset", "flags", "inverse", "mutex"]
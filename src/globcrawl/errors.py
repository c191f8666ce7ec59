from __future__ import annotations


class GlobError(Exception):
    """Base error for globcrawl."""


class GlobConfigError(GlobError, ValueError):
    """Raised when the options passed to a glob call contradict each other or are invalid."""

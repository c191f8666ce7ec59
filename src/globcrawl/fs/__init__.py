"""Directory walking."""

from globcrawl.fs.walker import WalkConfig, walk

__all__ = ["WalkConfig", "walk"]

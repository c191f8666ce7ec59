"""Glob compilation on top of wcmatch."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from re import Pattern
from typing import Callable, Iterable

from wcmatch import glob as wcglob

SegmentMatcher = Callable[[str], bool]


@dataclass(slots=True, frozen=True)
class MatchOptions:
    dot: bool = False
    case_sensitive: bool = True
    brace_expansion: bool = True
    extglob: bool = True
    globstar: bool = True

    @property
    def flags(self) -> int:
        flags = wcglob.FORCEUNIX | wcglob.NODOTDIR
        flags |= wcglob.CASE if self.case_sensitive else wcglob.IGNORECASE
        if self.dot:
            flags |= wcglob.DOTGLOB
        if self.brace_expansion:
            flags |= wcglob.BRACE
        if self.extglob:
            flags |= wcglob.EXTGLOB
        if self.globstar:
            flags |= wcglob.GLOBSTAR
        return flags


@functools.lru_cache(maxsize=512)
def _translate(patterns: tuple[str, ...], flags: int) -> tuple[Pattern[str], ...]:
    if not patterns:
        return ()
    # limit=0 lets large brace ranges such as `{1..5000}` expand fully.
    positive, _ = wcglob.translate(list(patterns), flags=flags, limit=0)
    return tuple(re.compile(expression) for expression in positive)


class PathMatcher:
    """Accepts a path matching any pattern and none of the ignore patterns.

    Paths are tested with a trailing `/`, so `a/**` accepts `a` itself the
    same way it accepts everything beneath it.
    """

    __slots__ = ("patterns", "ignore", "_positive", "_negative")

    def __init__(
        self,
        patterns: Iterable[str],
        options: MatchOptions,
        ignore: Iterable[str] = (),
    ) -> None:
        self.patterns = tuple(patterns)
        self.ignore = tuple(ignore)
        self._positive = _translate(self.patterns, options.flags)
        self._negative = _translate(self.ignore, options.flags)

    def __call__(self, path: str) -> bool:
        candidate = path if path.endswith("/") else f"{path}/"
        if not any(expression.match(candidate) for expression in self._positive):
            return False
        return not any(expression.match(candidate) for expression in self._negative)

    def __repr__(self) -> str:
        return f"PathMatcher(patterns={self.patterns!r}, ignore={self.ignore!r})"


def compile_many(
    patterns: Iterable[str],
    options: MatchOptions,
    *,
    ignore: Iterable[str] = (),
) -> PathMatcher:
    return PathMatcher(patterns, options, ignore)


def compile_one(pattern: str, options: MatchOptions, *, ignore: Iterable[str] = ()) -> PathMatcher:
    return PathMatcher((pattern,), options, ignore)


def compile_segment(segment: str, options: MatchOptions) -> SegmentMatcher:
    expressions = _translate((segment,), options.flags)

    def match(name: str) -> bool:
        return any(expression.match(name) for expression in expressions)

    return match

"""Prefix matching used to prune directories during a crawl."""

from __future__ import annotations

import re
from typing import Callable, Sequence

from globcrawl.matching.compiler import MatchOptions, SegmentMatcher, compile_segment
from globcrawl.matching.scan import split_pattern

PartialMatcher = Callable[[str], bool]

ONLY_PARENT_DIRECTORIES = re.compile(r"^\.\.(?:/\.\.)*/?$")


def get_partial_matcher(patterns: Sequence[str], options: MatchOptions | None = None) -> PartialMatcher:
    """Build a predicate telling whether a directory can still lead to a match.

    The returned callable takes a cwd-relative directory path such as
    `src/utils` and returns True when at least one pattern could match
    something at or below it. False positives are accepted, false negatives
    are not: a pattern segment holding a literal `/` (from a brace group) and
    a path made only of `..` segments are always accepted.
    """

    options = options or MatchOptions()
    globstar = options.globstar
    compiled: list[tuple[tuple[str, SegmentMatcher], ...]] = []
    for pattern in patterns:
        compiled.append(tuple((part, compile_segment(part, options)) for part in split_pattern(pattern)))

    def matcher(path: str) -> bool:
        input_parts = path.split("/")
        # Without this, patterns like `src/*` would never let the walker reach
        # a root that sits above cwd.
        if input_parts[0] == ".." and ONLY_PARENT_DIRECTORIES.match(path):
            return True

        input_count = len(input_parts)
        for segments in compiled:
            limit = min(input_count, len(segments))
            j = 0
            while j < limit:
                part, segment_matches = segments[j]
                if "/" in part:
                    return True
                if not segment_matches(input_parts[j]):
                    break
                if globstar and part == "**":
                    return True
                j += 1
            if j == input_count:
                return True
        return False

    return matcher

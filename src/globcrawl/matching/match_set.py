"""The matchers one crawl accepts and prunes with."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from globcrawl.matching.compiler import MatchOptions, PathMatcher, compile_many
from globcrawl.matching.partial import PartialMatcher, get_partial_matcher


@dataclass(slots=True, frozen=True)
class CompiledMatchSet:
    """Full, ignore and partial matchers built from the same pattern lists.

    Building them together keeps pruning consistent with acceptance: a
    directory `prune` rejects never leads to a path `full` accepts.
    """

    full: PathMatcher
    ignore: PathMatcher
    partial: PartialMatcher

    @classmethod
    def compile(cls, match: Sequence[str], ignore: Sequence[str], options: MatchOptions) -> CompiledMatchSet:
        return cls(
            full=compile_many(match, options, ignore=ignore),
            ignore=compile_many(ignore, options),
            partial=get_partial_matcher(match, options),
        )

    def prune(self, directory: str) -> bool:
        """True when nothing at or below the cwd-relative `directory` can match."""

        if directory != "." and not self.partial(directory):
            return True
        return self.ignore(directory)

"""Glob compilation, segment scanning and partial matching."""

from globcrawl.matching.compiler import MatchOptions, PathMatcher, compile_many, compile_one, compile_segment
from globcrawl.matching.match_set import CompiledMatchSet
from globcrawl.matching.partial import get_partial_matcher
from globcrawl.matching.scan import (
    convert_path_to_pattern,
    escape_path,
    is_dynamic_pattern,
    scan,
    split_pattern,
)

__all__ = [
    "CompiledMatchSet",
    "MatchOptions",
    "PathMatcher",
    "compile_many",
    "compile_one",
    "compile_segment",
    "convert_path_to_pattern",
    "escape_path",
    "get_partial_matcher",
    "is_dynamic_pattern",
    "scan",
    "split_pattern",
]

"""Pattern normalization and crawl root inference."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from typing import Sequence

from globcrawl.config.models import GlobOptions
from globcrawl.matching.scan import escape_path, is_dynamic_pattern, split_pattern, unescape_segment

PARENT_DIRECTORY = re.compile(r"^(?:\.\.(?:/|$))+")
ESCAPING_BACKSLASHES = re.compile(r"\\(?=[()[\]{}!*+?@|])")


@dataclass(slots=True)
class CrawlProperties:
    """Accumulator threaded through the normalization of one call's patterns."""

    root: str
    depth_offset: int = 0
    common_path: list[str] | None = None


@dataclass(slots=True)
class ProcessedPatterns:
    match: list[str] = field(default_factory=list)
    ignore: list[str] = field(default_factory=list)


def _is_absolute(pattern: str) -> bool:
    return posixpath.isabs(ESCAPING_BACKSLASHES.sub("", pattern))


def _relocate_to_parent(
    result: str,
    parent_dir: str,
    cwd: str,
    escaped_cwd: str,
    props: CrawlProperties,
) -> str:
    levels = parent_dir.count("..")
    rest = result[len(parent_dir) :]
    parts = split_pattern(result)
    cwd_parts = escaped_cwd.split("/")

    # `../foo/bar` from a cwd ending in `/foo` is just `bar`.
    collapsed = 0
    while collapsed < levels:
        index = collapsed + levels
        cwd_index = len(cwd_parts) - levels + collapsed
        if index >= len(parts) or cwd_index < 0 or parts[index] != cwd_parts[cwd_index]:
            break
        rest = rest[len(parts[index]) + 1 :]
        collapsed += 1

    remaining = levels - collapsed
    if collapsed:
        result = "/".join([".."] * remaining + ([rest] if rest else [])) or "."

    if not remaining:
        return result

    potential_root = posixpath.normpath(posixpath.join(cwd, *([".."] * remaining)))
    # A drive-relative root such as `../C:` is never a usable crawl root.
    if not potential_root.startswith(".") and len(props.root) > len(potential_root):
        props.root = potential_root
        props.depth_offset = -remaining
    return result


def _fold_common_path(parts: list[str], cwd: str, props: CrawlProperties, case_sensitive_match: bool) -> None:
    if props.common_path is None:
        props.common_path = list(parts)

    common: list[str] = []
    for i in range(min(len(props.common_path), len(parts))):
        part = parts[i]
        if part == "**" and not any(parts[i + 1 :]):
            if common:
                common.pop()
            break
        if (
            i == len(parts) - 1
            or part != props.common_path[i]
            or part == ".."
            or is_dynamic_pattern(part, case_sensitive_match=case_sensitive_match)
        ):
            break
        common.append(part)

    props.common_path = common
    props.depth_offset = len(common)
    props.root = posixpath.join(cwd, *[unescape_segment(part) for part in common]) if common else cwd


def normalize_pattern(pattern: str, options: GlobOptions, props: CrawlProperties, is_ignore: bool) -> str:
    """Rewrite `pattern` relative to `options.cwd`, narrowing `props` as a side effect.

    Absolute patterns become cwd-relative, `.`/`..` segments are folded
    lexically, and patterns reaching above cwd move the crawl root up. Match
    patterns also shrink the common literal prefix shared with the patterns
    seen before them; ignore patterns never do.
    """

    cwd = options.cwd
    result = pattern[:-1] if pattern.endswith("/") else pattern
    # A directory given as entry matches everything inside it.
    if options.expand_directories and not result.endswith("*"):
        result += "/**"

    escaped_cwd = escape_path(cwd)
    if _is_absolute(result):
        result = posixpath.relpath(result, escaped_cwd)
    else:
        result = posixpath.normpath(result)

    parent_dir = PARENT_DIRECTORY.match(result)
    if parent_dir:
        result = _relocate_to_parent(result, parent_dir.group(0), cwd, escaped_cwd, props)

    if not is_ignore and props.depth_offset >= 0:
        _fold_common_path(split_pattern(result), cwd, props, options.case_sensitive_match)

    return result


def _is_negation(pattern: str) -> bool:
    return pattern.startswith("!") and pattern[1:2] != "("


def process_patterns(options: GlobOptions, patterns: Sequence[str], props: CrawlProperties) -> ProcessedPatterns:
    """Normalize the ignore option first, then the match patterns in order.

    `!x` moves `x` to the ignore list, while `!!x` stands for the literal
    pattern `!x`. Negated entries in the ignore option are skipped.
    """

    processed = ProcessedPatterns()

    for pattern in options.ignore:
        if pattern and not _is_negation(pattern):
            processed.ignore.append(normalize_pattern(pattern, options, props, True))

    for pattern in patterns:
        if not pattern:
            continue
        if not _is_negation(pattern):
            processed.match.append(normalize_pattern(pattern, options, props, False))
        elif _is_negation(pattern[1:]):
            processed.match.append(normalize_pattern(pattern[1:], options, props, False))
        else:
            processed.ignore.append(normalize_pattern(pattern[1:], options, props, True))

    return processed

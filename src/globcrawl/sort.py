"""Per-pattern matchers and precedence sorting of glob results."""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any

from globcrawl.config.input import build_options
from globcrawl.config.models import PATTERN_SORTS
from globcrawl.crawler import CrawlerInfo, build_crawler_info
from globcrawl.formatting import output_to_match_path
from globcrawl.matching.compiler import compile_one

Matcher = Callable[[str], bool]


def _as_patterns(patterns: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(patterns, str):
        return (patterns,)
    return tuple(patterns)


def iter_compiled_matchers(info: CrawlerInfo) -> Iterator[tuple[str, Matcher]]:
    processed = info.processed
    for pattern in processed.match:
        is_match = compile_one(pattern, info.match_options, ignore=processed.ignore)

        def match(path: str, is_match=is_match) -> bool:
            return is_match(output_to_match_path(path, info.cwd, info.absolute))

        yield pattern, match


def compile_matchers(patterns: str | Sequence[str], **options: Any) -> Iterator[tuple[str, Matcher]]:
    """Yield `(glob, match)` for every match pattern, in declared order.

    Normalization and options are exactly the ones `glob` applies, so `match`
    accepts the paths a `glob` call with the same arguments returns. Negated
    patterns only feed the ignore list and yield no matcher of their own.
    """

    info = build_crawler_info(build_options(None, **options), _as_patterns(patterns))
    yield from iter_compiled_matchers(info)


def iter_by_pattern_precedence(files: Iterable[str], info: CrawlerInfo, sort: Any = None) -> Iterator[str]:
    files = list(files)
    sort = sort or "pattern"
    if sort not in PATTERN_SORTS:
        yield from files
        return

    claimed: set[str] = set()
    for _, match in iter_compiled_matchers(info):
        group: list[str] = []
        for path in files:
            if path not in claimed and match(path):
                claimed.add(path)
                group.append(path)
        if sort == "pattern-asc":
            group.sort()
        elif sort == "pattern-desc":
            group.sort(reverse=True)
        yield from group


def sort_plain(files: list[str], sort: Any) -> list[str]:
    if callable(sort):
        return sorted(files, key=functools.cmp_to_key(sort))
    if sort == "asc":
        return sorted(files)
    if sort == "desc":
        return sorted(files, reverse=True)
    return files


def sort_files(files: Sequence[str], patterns: str | Sequence[str], **options: Any) -> list[str]:
    """Order `files`, as returned by `glob`, according to the `sort` option.

    `asc`/`desc` sort lexicographically and a two-argument comparator is
    applied as-is. The `pattern` modes group files by the first pattern
    matching them and drop files no pattern matches. Any other value keeps
    the input order.
    """

    opts = build_options(None, **options)
    files = list(files)
    if isinstance(opts.sort, str) and opts.sort in PATTERN_SORTS:
        info = build_crawler_info(opts, _as_patterns(patterns))
        return list(iter_by_pattern_precedence(files, info, opts.sort))
    return sort_plain(files, opts.sort)


def sort_files_by_pattern_precedence(
    files: Sequence[str],
    patterns: str | Sequence[str],
    **options: Any,
) -> Iterator[str]:
    """Lazily yield `files` grouped by the first pattern that claims them.

    Without a pattern sort mode (`pattern` is assumed when `sort` is unset) the
    files come back unchanged.
    """

    opts = build_options(None, **options)
    info = build_crawler_info(opts, _as_patterns(patterns))
    yield from iter_by_pattern_precedence(files, info, opts.sort)

"""Asynchronous and blocking glob entry points."""

from __future__ import annotations

from typing import Any

from globcrawl.config.input import GlobInput, PatternsArgument, resolve_glob_input
from globcrawl.config.models import PATTERN_SORTS
from globcrawl.crawler import CrawlerInfo, build_crawler
from globcrawl.formatting import RelativeMapper
from globcrawl.sort import iter_by_pattern_precedence, sort_plain


def _finish(paths: list[str], relative_mapper: RelativeMapper | None, info: CrawlerInfo, sort: Any) -> list[str]:
    if relative_mapper is not None:
        paths = [relative_mapper(path) for path in paths]
    if isinstance(sort, str) and sort in PATTERN_SORTS:
        return list(iter_by_pattern_precedence(paths, info, sort))
    return sort_plain(paths, sort)


def _has_work(resolved: GlobInput) -> bool:
    return any(resolved.patterns)


def glob_sync(patterns: PatternsArgument = None, /, **options: Any) -> list[str]:
    """Return the paths under `cwd` matching `patterns`.

    `patterns` is a pattern string, a sequence of them, or (instead of
    keywords) a `GlobOptions`/mapping carrying `patterns` itself. Leaving
    patterns out entirely means `**`; an empty list matches nothing. Raises
    `GlobConfigError` for conflicting or invalid arguments.
    """

    resolved = resolve_glob_input(patterns, options)
    if not _has_work(resolved):
        return []

    crawler, relative_mapper, info = build_crawler(resolved.options, resolved.patterns)
    if not info.processed.match:
        return []
    return _finish(crawler.sync(), relative_mapper, info, resolved.options.sort)


async def glob(patterns: PatternsArgument = None, /, **options: Any) -> list[str]:
    """Awaitable counterpart of `glob_sync`; the walk runs in a worker thread."""

    resolved = resolve_glob_input(patterns, options)
    if not _has_work(resolved):
        return []

    crawler, relative_mapper, info = build_crawler(resolved.options, resolved.patterns)
    if not info.processed.match:
        return []
    return _finish(await crawler.run(), relative_mapper, info, resolved.options.sort)

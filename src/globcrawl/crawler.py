"""Wire processed patterns into a pruned directory walk."""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from typing import Sequence

from globcrawl.config.models import GlobOptions
from globcrawl.formatting import Formatter, RelativeMapper, build_format, build_relative
from globcrawl.fs.walker import WalkConfig, walk
from globcrawl.matching.compiler import MatchOptions
from globcrawl.matching.match_set import CompiledMatchSet
from globcrawl.patterns import CrawlProperties, ProcessedPatterns, process_patterns
from globcrawl.runtime_logging import RuntimeLogger, get_runtime_logger


@dataclass(slots=True)
class CrawlerInfo:
    processed: ProcessedPatterns
    match_options: MatchOptions
    cwd: str
    root: str
    absolute: bool
    props: CrawlProperties
    format: Formatter
    patterns: tuple[str, ...]
    logger: RuntimeLogger


@dataclass(slots=True)
class Crawler:
    root: str
    config: WalkConfig

    def sync(self) -> list[str]:
        return walk(self.root, self.config)

    async def run(self) -> list[str]:
        return await asyncio.to_thread(walk, self.root, self.config)


def _logger_for(options: GlobOptions) -> RuntimeLogger:
    logger = get_runtime_logger()
    return logger.with_level("debug") if options.debug else logger


def build_crawler_info(options: GlobOptions, patterns: Sequence[str]) -> CrawlerInfo:
    """Normalize `patterns` against `options` and derive everything a crawl shares."""

    logger = _logger_for(options)
    logger.debug("glob.options", **options.log_fields())

    cwd = options.cwd
    props = CrawlProperties(root=cwd)
    processed = process_patterns(options, patterns, props)
    logger.debug("glob.patterns", match=processed.match, ignore=processed.ignore)

    match_options = MatchOptions(
        dot=options.dot,
        case_sensitive=options.case_sensitive_match,
        brace_expansion=options.brace_expansion,
        extglob=options.extglob,
        globstar=options.globstar,
    )
    root = props.root

    return CrawlerInfo(
        processed=processed,
        match_options=match_options,
        cwd=cwd,
        root=root,
        absolute=options.absolute,
        props=props,
        format=build_format(cwd, root, options.absolute),
        patterns=tuple(patterns),
        logger=logger,
    )


def build_crawler(
    options: GlobOptions,
    patterns: Sequence[str],
) -> tuple[Crawler, RelativeMapper | None, CrawlerInfo]:
    """Build the walk for one glob call.

    Returns the crawler, the mapper to cwd-relative output paths (None when
    walker paths are already in output form) and the shared crawler info.
    """

    info = build_crawler_info(options, patterns)
    processed, cwd, root, fmt, logger = info.processed, info.cwd, info.root, info.format, info.logger

    match_set = CompiledMatchSet.compile(processed.match, processed.ignore, info.match_options)
    matcher = match_set.full

    # The walker hands the prune hook absolute directory paths in both modes.
    exclude_format = fmt if info.absolute else build_format(cwd, root, True)

    def should_prune(directory: str) -> bool:
        return match_set.prune(exclude_format(directory, True))

    if options.debug:

        def include(path: str, is_dir: bool) -> bool:
            formatted = fmt(path, is_dir)
            matches = matcher(formatted)
            if matches:
                logger.debug("crawl.matched", path=formatted)
            return matches

        def exclude(_name: str, directory: str) -> bool:
            skipped = should_prune(directory)
            logger.debug("crawl.skipped" if skipped else "crawl.crawling", path=directory)
            return skipped

    else:

        def include(path: str, is_dir: bool) -> bool:
            return matcher(fmt(path, is_dir))

        def exclude(_name: str, directory: str) -> bool:
            return should_prune(directory)

    max_depth = None
    if options.deep is not None:
        # Halves round up.
        max_depth = math.floor(options.deep - info.props.depth_offset + 0.5)

    config = WalkConfig(
        include=include,
        exclude=exclude,
        relative_paths=not info.absolute,
        follow_symlinks=options.follow_symbolic_links,
        exclude_files=options.only_directories,
        include_dirs=options.only_directories or not options.only_files,
        max_depth=max_depth,
        signal=options.signal,
        logger=logger,
    )

    logger.debug(
        "glob.properties",
        root=root,
        depth_offset=info.props.depth_offset,
        common_path=info.props.common_path,
        max_depth=max_depth,
    )

    relative_mapper = build_relative(cwd, root) if cwd != root and not info.absolute else None
    return Crawler(root=root, config=config), relative_mapper, info

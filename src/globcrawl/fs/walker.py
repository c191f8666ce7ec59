"""Concurrent breadth-first directory walking with include and prune hooks."""

from __future__ import annotations

import concurrent.futures
import os
import stat
import threading
from dataclasses import dataclass
from typing import Callable

from globcrawl.runtime_logging import RuntimeLogger, get_runtime_logger

# (walker path, is_dir) -> keep the entry in the results.
IncludePredicate = Callable[[str, bool], bool]
# (directory name, absolute directory path ending in `/`) -> do not descend.
ExcludePredicate = Callable[[str, str], bool]


@dataclass(slots=True)
class WalkConfig:
    include: IncludePredicate
    exclude: ExcludePredicate
    relative_paths: bool = True
    follow_symlinks: bool = True
    exclude_files: bool = False
    include_dirs: bool = False
    max_depth: int | None = None
    signal: threading.Event | None = None
    max_workers: int = 8
    logger: RuntimeLogger | None = None


@dataclass(slots=True)
class DirEntry:
    name: str
    is_dir: bool
    is_symlink: bool
    real_path: str


@dataclass(slots=True)
class _PendingDir:
    path: str
    relative: str
    real_path: str
    depth: int
    # Targets of the symlinked directories this one was reached through.
    link_targets: tuple[str, ...] = ()


def _with_sep(path: str) -> str:
    return path if path.endswith("/") else f"{path}/"


def _is_recursive_link(real_path: str, link_targets: tuple[str, ...]) -> bool:
    """True when following a link to `real_path` re-enters a tree an enclosing link already entered."""

    inner = _with_sep(real_path)
    for target in link_targets:
        outer = _with_sep(target)
        if inner.startswith(outer) or outer.startswith(inner):
            return True
    return False


def _read_dir(pending: _PendingDir, follow_symlinks: bool) -> list[DirEntry]:
    entries: list[DirEntry] = []
    with os.scandir(pending.path) as listing:
        for entry in listing:
            if entry.is_symlink():
                if not follow_symlinks:
                    continue
                try:
                    target = os.stat(entry.path)
                except OSError:
                    # Broken link.
                    continue
                is_dir = stat.S_ISDIR(target.st_mode)
                real_path = os.path.realpath(entry.path) if is_dir else ""
                entries.append(DirEntry(name=entry.name, is_dir=is_dir, is_symlink=True, real_path=real_path))
                continue
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                continue
            real_path = os.path.join(pending.real_path, entry.name) if is_dir else ""
            entries.append(DirEntry(name=entry.name, is_dir=is_dir, is_symlink=False, real_path=real_path))
    entries.sort(key=lambda item: item.name)
    return entries


def _cancelled(config: WalkConfig) -> bool:
    return config.signal is not None and config.signal.is_set()


def walk(root: str, config: WalkConfig) -> list[str]:
    """Enumerate `root` breadth first and return the included paths.

    Directory listings are read on a thread pool, `max_workers * 2` at a time,
    and consumed in submission order so results are deterministic. Relative
    paths are root-relative with `/` separators, directories end in `/`, and
    the root itself is reported as `.` (or `<root>/` in absolute mode).
    Directories that cannot be read are skipped.
    """

    logger = config.logger or get_runtime_logger()
    if config.max_depth is not None and config.max_depth < 0:
        return []
    if _cancelled(config) or not os.path.isdir(root):
        return []

    root_base = root if root.endswith("/") else f"{root}/"
    results: list[str] = []

    def output(relative: str) -> str:
        return relative if config.relative_paths else f"{root_base}{relative}"

    if config.include_dirs:
        root_path = "." if config.relative_paths else root_base
        if config.include(root_path, True):
            results.append(root_path)

    max_depth = config.max_depth
    pending = [
        _PendingDir(
            path=root_base,
            relative="",
            real_path=os.path.realpath(root),
            depth=max_depth if max_depth is not None else 0,
        )
    ]

    with concurrent.futures.ThreadPoolExecutor(max_workers=config.max_workers) as pool:
        while pending and not _cancelled(config):
            chunk = pending[: config.max_workers * 2]
            pending = pending[config.max_workers * 2 :]

            futures = [pool.submit(_read_dir, item, config.follow_symlinks) for item in chunk]
            for item, future in zip(chunk, futures):
                if _cancelled(config):
                    break
                try:
                    entries = future.result()
                except OSError as exc:
                    logger.debug("walk.unreadable", path=item.path, error=str(exc))
                    continue

                for entry in entries:
                    relative = f"{item.relative}{entry.name}"
                    if not entry.is_dir:
                        if not config.exclude_files:
                            path = output(relative)
                            if config.include(path, False):
                                results.append(path)
                        continue

                    link_targets = item.link_targets
                    if entry.is_symlink:
                        if _is_recursive_link(entry.real_path, link_targets):
                            continue
                        link_targets = (*link_targets, entry.real_path)

                    absolute = f"{root_base}{relative}/"
                    if config.exclude(entry.name, absolute):
                        continue

                    if config.include_dirs:
                        path = output(f"{relative}/")
                        if config.include(path, True):
                            results.append(path)

                    depth = item.depth - 1
                    if max_depth is None or depth >= 0:
                        pending.append(
                            _PendingDir(
                                path=absolute,
                                relative=f"{relative}/",
                                real_path=entry.real_path,
                                depth=depth,
                                link_targets=link_targets,
                            )
                        )

    return results

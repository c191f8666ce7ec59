"""Conversions between walker paths, match paths and output paths."""

from __future__ import annotations

import posixpath
from typing import Callable

# (path, is_dir) -> cwd-relative path used for matching.
Formatter = Callable[[str, bool], str]
# walker path -> cwd-relative output path.
RelativeMapper = Callable[[str], str]


def _with_slash(path: str) -> str:
    return path if path.endswith("/") else f"{path}/"


def _is_under(root: str, cwd: str) -> bool:
    return root == cwd or root.startswith(_with_slash(cwd))


def build_format(cwd: str, root: str, absolute: bool) -> Formatter:
    """Return a formatter turning walker paths into cwd-relative match paths.

    Walker paths are root-relative in relative mode and absolute otherwise;
    directories carry a trailing `/`. The match form drops that trailing `/`
    and spells cwd itself as `.`.
    """

    base = _with_slash(cwd)

    if _is_under(root, cwd):
        if absolute:
            start = len(base)

            def format_absolute(path: str, is_dir: bool) -> str:
                sliced = path[start:-1] if is_dir and path.endswith("/") else path[start:]
                return sliced or "."

            return format_absolute

        prefix = root[len(base) :] if root != cwd else ""
        if prefix:

            def format_prefixed(path: str, is_dir: bool) -> str:
                if path == ".":
                    return prefix
                result = f"{prefix}/{path}"
                return result[:-1] if is_dir and result.endswith("/") else result

            return format_prefixed

        def format_relative(path: str, is_dir: bool) -> str:
            if is_dir and path != "." and path.endswith("/"):
                return path[:-1]
            return path

        return format_relative

    # Root sits above cwd, so no fixed prefix applies.
    if absolute:
        return lambda path, is_dir: posixpath.relpath(path, cwd)
    return lambda path, is_dir: posixpath.relpath(posixpath.join(root, path), cwd)


def build_relative(cwd: str, root: str) -> RelativeMapper:
    """Return a mapper from root-relative walker paths to cwd-relative output paths.

    Directory markers survive the mapping: `sub/` under a root of `cwd/a`
    becomes `a/sub/`.
    """

    base = _with_slash(cwd)

    if _is_under(root, cwd) and root != cwd:
        prefix = root[len(base) :]
        return lambda path: f"{prefix}/" if path == "." else f"{prefix}/{path}"

    def relative(path: str) -> str:
        result = posixpath.relpath(posixpath.join(root, path), cwd)
        if (path == "." or path.endswith("/")) and result != ".":
            return f"{result}/"
        return result

    return relative


def output_to_match_path(path: str, cwd: str, absolute: bool) -> str:
    """Turn a path returned by `glob` back into the form matchers expect."""

    if absolute:
        return posixpath.relpath(path, cwd)
    if path != "." and path.endswith("/"):
        return path[:-1]
    return path

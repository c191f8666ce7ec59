"""Pattern-guided file globbing."""

from globcrawl.api import glob, glob_sync
from globcrawl.config.models import GlobOptions
from globcrawl.errors import GlobConfigError, GlobError
from globcrawl.matching.scan import (
    convert_path_to_pattern,
    convert_posix_path_to_pattern,
    convert_win32_path_to_pattern,
    escape_path,
    escape_posix_path,
    escape_win32_path,
    is_dynamic_pattern,
)
from globcrawl.sort import compile_matchers, sort_files, sort_files_by_pattern_precedence
from globcrawl.version import __version__

__all__ = [
    "GlobConfigError",
    "GlobError",
    "GlobOptions",
    "__version__",
    "compile_matchers",
    "convert_path_to_pattern",
    "convert_posix_path_to_pattern",
    "convert_win32_path_to_pattern",
    "escape_path",
    "escape_posix_path",
    "escape_win32_path",
    "glob",
    "glob_sync",
    "is_dynamic_pattern",
    "sort_files",
    "sort_files_by_pattern_precedence",
]

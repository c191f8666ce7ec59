"""Option schema for glob calls."""

from __future__ import annotations

import os
import sys
import threading
from collections.abc import Callable, Sequence
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

SortMode = Literal["asc", "desc", "pattern", "pattern-asc", "pattern-desc"]
PATTERN_SORTS: frozenset[str] = frozenset({"pattern", "pattern-asc", "pattern-desc"})


def _env_flag(name: str) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return False
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _as_string_list(value: Any) -> Any:
    if value is None:
        return value
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return list(value)
    return value


def normalize_cwd(value: str | os.PathLike[str]) -> str:
    resolved = os.path.abspath(os.fspath(value))
    if sys.platform == "win32":
        resolved = resolved.replace("\\", "/")
    return resolved


class GlobOptions(BaseModel):
    """Options accepted by `glob`, `glob_sync` and the sorting helpers.

    Field names are snake_case; the camelCase spellings
    (`caseSensitiveMatch`, `onlyFiles`, ...) are accepted as aliases.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra="forbid",
        frozen=True,
        populate_by_name=True,
    )

    cwd: str = Field(default_factory=lambda: normalize_cwd(os.getcwd()))
    patterns: list[str] | None = Field(default=None)
    ignore: list[str] = Field(default_factory=list)
    absolute: bool = Field(default=False)
    dot: bool = Field(default=False)
    deep: float | None = Field(default=None, description="Maximum directory depth below cwd")
    case_sensitive_match: bool = Field(default=True, alias="caseSensitiveMatch")
    expand_directories: bool = Field(default=True, alias="expandDirectories")
    follow_symbolic_links: bool = Field(default=True, alias="followSymbolicLinks")
    only_directories: bool = Field(default=False, alias="onlyDirectories")
    only_files: bool = Field(default=True, alias="onlyFiles")
    brace_expansion: bool = Field(default=True, alias="braceExpansion")
    extglob: bool = Field(default=True)
    globstar: bool = Field(default=True)
    sort: SortMode | str | Callable[[str, str], int] | None = Field(default=None)
    signal: threading.Event | None = Field(default=None, description="Set to cancel the crawl")
    debug: bool = Field(default_factory=lambda: _env_flag("GLOBCRAWL_DEBUG"))

    @field_validator("cwd", mode="before")
    @classmethod
    def validate_cwd(cls, value: Any) -> str:
        if value is None:
            return normalize_cwd(os.getcwd())
        return normalize_cwd(value)

    @field_validator("patterns", mode="before")
    @classmethod
    def validate_patterns(cls, value: Any) -> Any:
        return _as_string_list(value)

    @field_validator("ignore", mode="before")
    @classmethod
    def validate_ignore(cls, value: Any) -> Any:
        if value is None:
            return []
        return _as_string_list(value)

    def log_fields(self) -> dict[str, Any]:
        """Flatten the options into JSON-friendly fields for runtime logging."""

        data = self.model_dump(exclude={"signal", "sort"})
        data["sort"] = self.sort if isinstance(self.sort, str) or self.sort is None else "<callable>"
        data["cancellable"] = self.signal is not None
        return data

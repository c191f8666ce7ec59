"""Resolve the accepted call shapes into one `GlobInput` record."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from globcrawl.config.models import GlobOptions
from globcrawl.errors import GlobConfigError

DEFAULT_PATTERNS: tuple[str, ...] = ("**",)

PatternsArgument = str | Sequence[str] | GlobOptions | Mapping[str, Any] | None


@dataclass(slots=True, frozen=True)
class GlobInput:
    patterns: tuple[str, ...]
    options: GlobOptions


def build_options(options: GlobOptions | Mapping[str, Any] | None = None, **overrides: Any) -> GlobOptions:
    """Validate keyword options, raising `GlobConfigError` on invalid values."""

    try:
        if isinstance(options, GlobOptions):
            if not overrides:
                return options
            data = options.model_dump(exclude={"signal", "sort"})
            data.update(signal=options.signal, sort=options.sort)
            data.update(overrides)
            return GlobOptions.model_validate(data)
        data = dict(options or {})
        data.update(overrides)
        return GlobOptions.model_validate(data)
    except ValidationError as exc:
        raise GlobConfigError(str(exc)) from exc


def resolve_glob_input(patterns: PatternsArgument, options: Mapping[str, Any]) -> GlobInput:
    """Turn either call shape into a canonical `GlobInput`.

    Patterns may arrive positionally (`glob("src/**", cwd=...)`) or inside the
    options (`glob(patterns=[...])`, `glob({"patterns": [...]})`,
    `glob(GlobOptions(...))`). Supplying both is a configuration error.
    """

    if patterns is None or isinstance(patterns, (GlobOptions, Mapping)):
        opts = build_options(patterns, **options)
        resolved = opts.patterns
        return GlobInput(
            patterns=DEFAULT_PATTERNS if resolved is None else tuple(resolved),
            options=opts,
        )

    if options.get("patterns") is not None:
        raise GlobConfigError("Cannot pass patterns as both an argument and an option")

    opts = build_options(None, **options)
    if isinstance(patterns, str):
        return GlobInput(patterns=(patterns,), options=opts)
    return GlobInput(patterns=tuple(patterns), options=opts)

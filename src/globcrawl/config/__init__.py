from globcrawl.config.input import GlobInput, build_options, resolve_glob_input
from globcrawl.config.models import GlobOptions, SortMode

__all__ = ["GlobInput", "GlobOptions", "SortMode", "build_options", "resolve_glob_input"]

"""XDG path helpers for globcrawl state."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs

APP_NAME = "globcrawl"
APP_AUTHOR = "globcrawl"


def dirs() -> PlatformDirs:
    return PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=False)


def log_dir() -> Path:
    # Created lazily by the runtime logger on first write.
    return Path(dirs().user_state_path) / "logs"


def default_log_path() -> Path:
    return log_dir() / "globcrawl.runtime.jsonl"

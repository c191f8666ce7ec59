"""CLI entrypoint for globcrawl."""

from __future__ import annotations

import json
from pathlib import Path

import click

from globcrawl.api import glob_sync
from globcrawl.errors import GlobConfigError
from globcrawl.runtime_logging import configure_runtime_logging, get_runtime_logger
from globcrawl.version import __version__


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--log-level", default=None, help="Runtime log level (off, error, warning, info, debug)")
@click.option("--log-file", default=None, type=click.Path(dir_okay=False), help="Runtime log sink")
def main(log_level: str | None, log_file: str | None) -> None:
    """globcrawl: pattern-guided file globbing."""
    if log_level or log_file:
        configure_runtime_logging(level=log_level, log_file=log_file)


@main.command("match")
@click.argument("patterns", nargs=-1)
@click.option("--cwd", default=None, type=click.Path(file_okay=False), help="Directory to glob from")
@click.option("-i", "--ignore", multiple=True, help="Pattern to exclude; repeatable")
@click.option("--absolute", is_flag=True, help="Print absolute paths")
@click.option("--dot", is_flag=True, help="Let wildcards match dotfiles")
@click.option("--deep", type=float, default=None, help="Maximum directory depth")
@click.option("--case-sensitive/--ignore-case", default=True, show_default=True)
@click.option("--expand-directories/--no-expand-directories", default=True, show_default=True)
@click.option("--follow-symlinks/--no-follow-symlinks", default=True, show_default=True)
@click.option("--only-directories", is_flag=True, help="Only report directories")
@click.option("--only-files/--include-directories", default=True, show_default=True)
@click.option("--brace-expansion/--no-brace-expansion", default=True, show_default=True)
@click.option("--extglob/--no-extglob", default=True, show_default=True)
@click.option("--globstar/--no-globstar", default=True, show_default=True)
@click.option(
    "--sort",
    type=click.Choice(["asc", "desc", "pattern", "pattern-asc", "pattern-desc"]),
    default=None,
)
@click.option("--debug/--no-debug", default=None, help="Write debug events to the runtime log")
@click.option("--json", "as_json", is_flag=True, help="Print a JSON array")
def match_command(
    patterns: tuple[str, ...],
    cwd: str | None,
    ignore: tuple[str, ...],
    absolute: bool,
    dot: bool,
    deep: float | None,
    case_sensitive: bool,
    expand_directories: bool,
    follow_symlinks: bool,
    only_directories: bool,
    only_files: bool,
    brace_expansion: bool,
    extglob: bool,
    globstar: bool,
    sort: str | None,
    debug: bool | None,
    as_json: bool,
) -> None:
    """Print the paths matching PATTERNS (every file when none are given)."""
    options = {
        "cwd": cwd,
        "ignore": list(ignore),
        "absolute": absolute,
        "dot": dot,
        "deep": deep,
        "case_sensitive_match": case_sensitive,
        "expand_directories": expand_directories,
        "follow_symbolic_links": follow_symlinks,
        "only_directories": only_directories,
        "only_files": only_files,
        "brace_expansion": brace_expansion,
        "extglob": extglob,
        "globstar": globstar,
        "sort": sort,
    }
    if debug is not None:
        options["debug"] = debug

    try:
        paths = glob_sync(list(patterns) or None, **options)
    except GlobConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(json.dumps(paths, indent=2))
        return
    for path in paths:
        click.echo(path)


@main.command("log-path")
def log_path_command() -> None:
    """Print the runtime log file path."""
    click.echo(str(get_runtime_logger().sink_path))


@main.command()
@click.argument("path", required=False)
@click.option("--limit", type=int, default=100, show_default=True)
def replay(path: str | None, limit: int) -> None:
    """Print the last lines of a JSONL runtime log (the active one by default)."""
    file_path = Path(path).expanduser().resolve() if path else get_runtime_logger().sink_path
    if not file_path.exists():
        raise click.ClickException(f"File not found: {file_path}")

    lines = file_path.read_text(encoding="utf-8", errors="replace").splitlines()
    for line in lines[-limit:]:
        click.echo(line)


@main.command()
def about() -> None:
    """Show version and project summary."""
    payload = {
        "name": "globcrawl",
        "version": __version__,
        "description": "Pattern-guided file globbing that prunes unrelated directories",
    }
    click.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()

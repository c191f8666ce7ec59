"""Pattern scanning: segment splitting, dynamic-pattern detection and path escaping."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass

# Unescaped glob symbols: `(){}[]`, `!+@` before `(`, `!` at the beginning, plus
# `*?|` and a backslash that escapes nothing on posix.
POSIX_UNESCAPED_GLOB_SYMBOLS = re.compile(r"(?<!\\)([()[\]{}*?|]|^!|[!+@](?=\()|\\(?![()[\]{}!*+?@|]))")
WIN32_UNESCAPED_GLOB_SYMBOLS = re.compile(r"(?<!\\)([()[\]{}]|^!|[!+@](?=\())")
# A win32 backslash that does not escape one of the symbols above is a separator.
WIN32_SEPARATOR = re.compile(r"\\(?![()[\]{}!+@])")


def escape_posix_path(path: str) -> str:
    return POSIX_UNESCAPED_GLOB_SYMBOLS.sub(r"\\\g<0>", path)


def escape_win32_path(path: str) -> str:
    return WIN32_UNESCAPED_GLOB_SYMBOLS.sub(r"\\\g<0>", path)


def convert_posix_path_to_pattern(path: str) -> str:
    return escape_posix_path(path)


def convert_win32_path_to_pattern(path: str) -> str:
    return WIN32_SEPARATOR.sub("/", escape_win32_path(path))


if sys.platform == "win32":
    escape_path = escape_win32_path
    convert_path_to_pattern = convert_win32_path_to_pattern
else:
    escape_path = escape_posix_path
    convert_path_to_pattern = convert_posix_path_to_pattern


@dataclass(slots=True, frozen=True)
class ScanResult:
    parts: tuple[str, ...]
    is_glob: bool
    negated: bool


def _bracket_end(pattern: str, start: int) -> int:
    """Index of the `]` closing the bracket expression opened at `start`, or -1."""

    i = start + 1
    if i < len(pattern) and pattern[i] in "!^":
        i += 1
    # A leading `]` is a literal member of the class.
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    while i < len(pattern):
        char = pattern[i]
        if char == "\\":
            i += 2
            continue
        if char == "]":
            return i
        i += 1
    return -1


def scan(pattern: str) -> ScanResult:
    """Split `pattern` on `/` and report whether it contains glob syntax.

    Slashes inside brace groups, bracket expressions and parentheses do not
    split, so such a part keeps its literal `/`. A leading `!` (not `!(`)
    marks the pattern as negated but stays part of the first segment.

    Unfinished constructs follow a permissive reading: `(b` and `+(a` are
    dynamic, `{a,b` and `{1..2` are dynamic because they carry a separator,
    while `[a` and `{b` are literal.
    """

    negated = pattern.startswith("!") and pattern[1:2] != "("
    parts: list[str] = []
    current: list[str] = []
    is_glob = False
    braces = 0
    parens = 0
    i = 0
    length = len(pattern)

    while i < length:
        char = pattern[i]
        if char == "\\":
            current.append(pattern[i : i + 2])
            i += 2
            continue
        if char == "[":
            end = _bracket_end(pattern, i)
            if end != -1:
                is_glob = True
                current.append(pattern[i : end + 1])
                i = end + 1
                continue
        elif char == "{":
            braces += 1
        elif char == "}":
            if braces:
                braces -= 1
        elif braces and (char == "," or pattern.startswith("..", i)):
            is_glob = True
        elif char in "*?":
            is_glob = True
        elif char == "(":
            is_glob = True
            parens += 1
        elif char == ")":
            if parens:
                parens -= 1
        elif char == "/" and not braces and not parens:
            parts.append("".join(current))
            current = []
            i += 1
            continue
        current.append(char)
        i += 1

    parts.append("".join(current))
    return ScanResult(parts=tuple(parts), is_glob=is_glob, negated=negated)


def split_pattern(pattern: str) -> list[str]:
    parts = scan(pattern).parts
    return list(parts) if parts else [pattern]


def is_dynamic_pattern(pattern: str, *, case_sensitive_match: bool = True) -> bool:
    # A case-insensitive literal can still match names spelled differently on disk.
    if not case_sensitive_match:
        return True

    result = scan(pattern)
    return result.is_glob or result.negated


_ESCAPED_CHARACTER = re.compile(r"\\(.)", re.DOTALL)


def unescape_segment(segment: str) -> str:
    """Drop escaping backslashes from a literal pattern segment."""

    return _ESCAPED_CHARACTER.sub(r"\1", segment)

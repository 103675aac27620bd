"""Tab-completion API and a completer for file and folder names."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any, Sequence, Union

_WINDOWS = sys.platform.startswith("win")
_CASE_INSENSITIVE = _WINDOWS or sys.platform == "darwin"

# rl_basic_word_break_characters, rl_completer_word_break_characters
_UNIX_BREAK_CHARS = " \t\n\"\\'`@$><=;|&{(\0"
# Backslash removed so that file completion works on Windows.
_WINDOWS_BREAK_CHARS = " \t\n\"'`@$><=;|&{(\0"
# In double quotes, not all break chars need to be escaped.
_UNIX_DOUBLE_QUOTES_SPECIAL_CHARS = '"$\\`'
_WINDOWS_DOUBLE_QUOTES_SPECIAL_CHARS = '"'

if _WINDOWS:
    DEFAULT_BREAK_CHARS = _WINDOWS_BREAK_CHARS
    ESCAPE_CHAR: str | None = None
    DOUBLE_QUOTES_SPECIAL_CHARS = _WINDOWS_DOUBLE_QUOTES_SPECIAL_CHARS
else:
    DEFAULT_BREAK_CHARS = _UNIX_BREAK_CHARS
    ESCAPE_CHAR = "\\"
    DOUBLE_QUOTES_SPECIAL_CHARS = _UNIX_DOUBLE_QUOTES_SPECIAL_CHARS

DOUBLE_QUOTES_ESCAPE_CHAR = "\\"


@dataclass(frozen=True)
class Pair:
    """Completion candidate with distinct display and replacement texts."""

    display: str
    replacement: str


Candidate = Union[str, Pair]


def _display(candidate: Candidate) -> str:
    return candidate.display if isinstance(candidate, Pair) else candidate


def _replacement(candidate: Candidate) -> str:
    return candidate.replacement if isinstance(candidate, Pair) else candidate


class Quote(Enum):
    """Kind of quote."""

    DOUBLE = "double"
    SINGLE = "single"
    NONE = "none"


class Completer:
    """Provides completion candidates; the default offers none."""

    def complete(self, line: str, pos: int, ctx: Any = None) -> tuple[int, list[Candidate]]:
        """Return the start of the word to complete and its candidates."""
        return 0, []


class FilenameCompleter(Completer):
    """A completer for file and folder names."""

    def __init__(self) -> None:
        self.break_chars = DEFAULT_BREAK_CHARS
        self.double_quotes_special_chars = DOUBLE_QUOTES_SPECIAL_CHARS

    def complete_path(self, line: str, pos: int) -> tuple[int, list[Pair]]:
        """Return the start position and candidates for the partial path at ``pos``."""
        unclosed = find_unclosed_quote(line[:pos])
        if unclosed is not None:
            idx, quote = unclosed
            start = idx + 1
            if quote is Quote.DOUBLE:
                path = unescape(line[start:pos], DOUBLE_QUOTES_ESCAPE_CHAR)
                esc_char: str | None = DOUBLE_QUOTES_ESCAPE_CHAR
                break_chars = self.double_quotes_special_chars
            else:
                path = line[start:pos]
                esc_char = None
                break_chars = self.break_chars
        else:
            start, word = extract_word(line, pos, ESCAPE_CHAR, self.break_chars)
            path = unescape(word, ESCAPE_CHAR)
            esc_char = ESCAPE_CHAR
            break_chars = self.break_chars
            quote = Quote.NONE
        matches = _filename_complete(path, esc_char, break_chars, quote)
        matches.sort(key=lambda pair: pair.display)
        return start, matches

    def complete(self, line: str, pos: int, ctx: Any = None) -> tuple[int, list[Pair]]:
        return self.complete_path(line, pos)


def unescape(text: str, esc_char: str | None) -> str:
    """Remove escape characters from ``text``."""
    if esc_char is None or esc_char not in text:
        return text
    result: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch != esc_char:
            result.append(ch)
            continue
        escaped = next(chars, None)
        if escaped is not None:
            if _WINDOWS and escaped != '"':
                result.append(esc_char)
            result.append(escaped)
        elif _WINDOWS:
            result.append(ch)
    return "".join(result)


def escape(text: str, esc_char: str | None, break_chars: str, quote: Quote) -> str:
    """Escape any of ``break_chars`` in ``text`` with ``esc_char``."""
    if quote is Quote.SINGLE:
        return text  # no escape in single quotes
    if not any(c in break_chars for c in text):
        return text
    if esc_char is None:
        if _WINDOWS and quote is Quote.NONE:
            return '"' + text  # force double quote
        return text
    return "".join(esc_char + c if c in break_chars else c for c in text)


def _normalize(text: str) -> str:
    return text.lower() if _CASE_INSENSITIVE else text


def _resolve_dir(dir_name: str) -> Path:
    dir_path = Path(dir_name)
    if dir_path.parts and dir_path.parts[0] == "~":
        home = Path.home()
        return home.joinpath(*dir_path.parts[1:])
    if not dir_path.is_absolute():
        try:
            return Path.cwd() / dir_path
        except OSError:
            return dir_path
    return dir_path


def _filename_complete(
    path: str, esc_char: str | None, break_chars: str, quote: Quote
) -> list[Pair]:
    sep = os.sep
    idx = path.rfind(sep)
    if idx >= 0:
        dir_name, file_name = path[: idx + 1], path[idx + 1 :]
    else:
        dir_name, file_name = "", path

    directory = _resolve_dir(dir_name)
    if not directory.exists():
        return []

    entries: list[Pair] = []
    prefix = _normalize(file_name)
    try:
        with os.scandir(directory) as it:
            for entry in it:
                name = entry.name
                if not _normalize(name).startswith(prefix):
                    continue
                try:
                    is_dir = os.path.isdir(entry.path) if os.stat(entry.path) else False
                except OSError:
                    continue  # e.g. permission denied
                candidate = dir_name + name + (sep if is_dir else "")
                entries.append(
                    Pair(name, escape(candidate, esc_char, break_chars, quote))
                )
    except OSError:
        pass
    return entries


def extract_word(
    line: str, pos: int, esc_char: str | None, break_chars: str
) -> tuple[int, str]:
    """Find backward from ``pos`` the start of a word; return (start, word)."""
    line = line[:pos]
    if not line:
        return 0, line
    start: int | None = None
    for i in range(len(line) - 1, -1, -1):
        c = line[i]
        if esc_char is not None and start is not None:
            if c == esc_char:
                start = None  # escaped break char
                continue
            break
        if c in break_chars:
            start = i + 1
            if esc_char is None:
                break
    if start is None:
        return 0, line
    return start, line[start:]


def longest_common_prefix(candidates: Sequence[Candidate]) -> str | None:
    """Return the longest common prefix of the candidates' replacements."""
    if not candidates:
        return None
    replacements = [_replacement(c) for c in candidates]
    if len(replacements) == 1:
        return replacements[0]
    prefix = os.path.commonprefix(replacements)
    return prefix or None


class _ScanMode(Enum):
    DOUBLE_QUOTE = auto()
    ESCAPE = auto()
    ESCAPE_IN_DOUBLE_QUOTE = auto()
    NORMAL = auto()
    SINGLE_QUOTE = auto()


def find_unclosed_quote(text: str) -> tuple[int, Quote] | None:
    """Return the position and kind of an unclosed quote in ``text``, if any."""
    mode = _ScanMode.NORMAL
    quote_index = 0
    for index, char in enumerate(text):
        if mode is _ScanMode.DOUBLE_QUOTE:
            if char == '"':
                mode = _ScanMode.NORMAL
            elif char == "\\":
                mode = _ScanMode.ESCAPE_IN_DOUBLE_QUOTE
        elif mode is _ScanMode.ESCAPE:
            mode = _ScanMode.NORMAL
        elif mode is _ScanMode.ESCAPE_IN_DOUBLE_QUOTE:
            mode = _ScanMode.DOUBLE_QUOTE
        elif mode is _ScanMode.NORMAL:
            if char == '"':
                mode = _ScanMode.DOUBLE_QUOTE
                quote_index = index
            elif char == "\\" and not _WINDOWS:
                mode = _ScanMode.ESCAPE
            elif char == "'" and not _WINDOWS:
                mode = _ScanMode.SINGLE_QUOTE
                quote_index = index
        elif char == "'":  # single quote: no escape inside
            mode = _ScanMode.NORMAL
    if mode in (_ScanMode.DOUBLE_QUOTE, _ScanMode.ESCAPE_IN_DOUBLE_QUOTE):
        return quote_index, Quote.DOUBLE
    if mode is _ScanMode.SINGLE_QUOTE:
        return quote_index, Quote.SINGLE
    return None
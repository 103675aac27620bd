"""Syntax highlighting with ANSI colors."""

from __future__ import annotations

from lineedit.config import CompletionType

_OPENS = "{[("
_CLOSES = "}])"
_MATCHES = {"{": "}", "}": "{", "[": "]", "]": "[", "(": ")", ")": "("}
_RESET = "\x1b[m"


def _styled(text: str, style: str) -> str:
    """Wrap ``text`` in the ANSI ``style`` sequence, or leave it as is when no style."""
    if not style or not text:
        return text
    return f"{style}{text}{_RESET}"


class Highlighter:
    """Highlights the line, prompt, hint and candidates.

    By default nothing is styled. Subclasses may set ``prompt_style``,
    ``hint_style`` or ``candidate_style`` to an ANSI sequence, or override
    the methods. The highlighted text must have the same display width as
    the original.
    """

    prompt_style: str = ""
    hint_style: str = ""
    candidate_style: str = ""

    def highlight(self, line: str, pos: int) -> str:
        """Return the highlighted version of ``line``."""
        return line

    def highlight_prompt(self, prompt: str, default: bool) -> str:
        """Return the highlighted version of ``prompt``; only the default prompt is styled."""
        return _styled(prompt, self.prompt_style) if default else prompt

    def highlight_hint(self, hint: str) -> str:
        """Return the highlighted version of ``hint``."""
        return _styled(hint, self.hint_style)

    def highlight_candidate(self, candidate: str, completion: CompletionType) -> str:
        """Return the highlighted version of a completion ``candidate``."""
        return _styled(candidate, self.candidate_style)

    def highlight_char(self, line: str, pos: int) -> bool:
        """Tell whether ``line`` needs highlighting for the char at or before ``pos``."""
        return False


class MatchingBracketHighlighter(Highlighter):
    """Highlight the matching bracket when one is typed or under the cursor."""

    def __init__(self) -> None:
        self._bracket: tuple[str, int] | None = None

    def highlight(self, line: str, pos: int) -> str:
        if len(line) <= 1:
            return line
        if self._bracket is not None:
            bracket, bracket_pos = self._bracket
            found = find_matching_bracket(line, bracket_pos, bracket)
            if found is not None:
                matching, idx = found
                return f"{line[:idx]}\x1b[1;34m{matching}\x1b[0m{line[idx + 1:]}"
        return line

    def highlight_char(self, line: str, pos: int) -> bool:
        self._bracket = check_bracket(line, pos)
        return self._bracket is not None


def find_matching_bracket(line: str, pos: int, bracket: str) -> tuple[str, int] | None:
    """Find the bracket matching ``bracket`` found at ``pos``; return it and its index."""
    matching = matching_bracket(bracket)
    unmatched = 1
    if is_open_bracket(bracket):
        indices = range(pos + 1, len(line))
    else:
        indices = range(pos - 1, -1, -1)
    for idx in indices:
        ch = line[idx]
        if ch == matching:
            unmatched -= 1
            if unmatched == 0:
                return matching, idx
        elif ch == bracket:
            unmatched += 1
    return None


def check_bracket(line: str, pos: int) -> tuple[str, int] | None:
    """Return a bracket under or just before the cursor, with its index."""
    if not line:
        return None
    if pos >= len(line):
        pos = len(line) - 1
        ch = line[pos]
        return (ch, pos) if is_close_bracket(ch) else None
    under_cursor = True
    while True:
        ch = line[pos]
        if is_close_bracket(ch):
            return None if pos == 0 else (ch, pos)
        if is_open_bracket(ch):
            return None if pos + 1 == len(line) else (ch, pos)
        if under_cursor and pos > 0:
            under_cursor = False
            pos -= 1
        else:
            return None


def matching_bracket(bracket: str) -> str:
    """Return the counterpart of ``bracket``, or ``bracket`` itself if it is none."""
    return _MATCHES.get(bracket, bracket)


def is_open_bracket(bracket: str) -> bool:
    """Tell whether ``bracket`` is one of ``{[(``."""
    return len(bracket) == 1 and bracket in _OPENS


def is_close_bracket(bracket: str) -> bool:
    """Tell whether ``bracket`` is one of ``}])``."""
    return len(bracket) == 1 and bracket in _CLOSES
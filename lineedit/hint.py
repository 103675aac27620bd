"""Hints: suggestions shown to the right of the cursor while typing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from lineedit.history import Direction, History


class Context:
    """Gives hinters access to the history and the current browsing index."""

    def __init__(self, history: History, history_index: int | None = None) -> None:
        self.history = history
        self.history_index = len(history) if history_index is None else history_index


class Hinter:
    """Hint provider; the default offers no hint."""

    def hint(self, line: str, pos: int, ctx: Context):
        """Return the hint for ``line`` at cursor ``pos``, or ``None``."""
        return None


class HistoryHinter(Hinter):
    """Suggest the rest of a previous history entry matching the input."""

    def hint(self, line: str, pos: int, ctx: Context) -> str | None:
        if pos < len(line):
            return None
        history = ctx.history
        if ctx.history_index == len(history):
            start = max(ctx.history_index - 1, 0)
        else:
            start = ctx.history_index
        index = history.starts_with(line[:pos], start, Direction.REVERSE)
        if index is None:
            return None
        entry = history.get(index)
        if entry is None or entry == line or entry == line[:pos]:
            return None
        return entry[pos:]


@dataclass(frozen=True)
class CommandHint:
    """A hint whose first ``complete_up_to`` characters can be inserted."""

    display: str
    complete_up_to: int

    @classmethod
    def create(cls, text: str, complete_up_to: str) -> CommandHint:
        """Build a hint for ``text`` completable up to the prefix ``complete_up_to``."""
        if not text.startswith(complete_up_to):
            raise ValueError(f"{complete_up_to!r} is not a prefix of {text!r}")
        return cls(text, len(complete_up_to))

    def completion(self) -> str | None:
        """Text to insert in the line, if any."""
        if self.complete_up_to > 0:
            return self.display[: self.complete_up_to]
        return None

    def suffix(self, strip_chars: int) -> CommandHint:
        """Return the hint without its first ``strip_chars`` characters."""
        return CommandHint(
            self.display[strip_chars:], max(self.complete_up_to - strip_chars, 0)
        )


class CommandHinter(Hinter):
    """Suggest commands from a fixed set whose text starts with the input."""

    def __init__(self, hints: Iterable[CommandHint]) -> None:
        self.hints = tuple(dict.fromkeys(hints))

    def hint(self, line: str, pos: int, ctx: Context) -> CommandHint | None:
        if pos < len(line) or pos == 0:
            return None
        typed = line[:pos]
        return next(
            (h.suffix(pos) for h in self.hints if h.display.startswith(typed)), None
        )


def default_command_hints() -> tuple[CommandHint, ...]:
    """A small set of key/value store commands."""
    return (
        CommandHint.create("help", "help"),
        CommandHint.create("get key", "get "),
        CommandHint.create("set key value", "set "),
        CommandHint.create("hget key field", "hget "),
        CommandHint.create("hset key field value", "hset "),
    )
"""Errors raised while reading a line."""


class ReadlineError(Exception):
    """Base class of the line editor's errors."""

    default_message = "readline error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class Eof(ReadlineError):
    """End of input (Ctrl-D)."""

    default_message = "EOF"


class Interrupted(ReadlineError):
    """Input interrupted (Ctrl-C)."""

    default_message = "Interrupted"


class Utf8Error(ReadlineError):
    """Input could not be decoded as UTF-8."""

    default_message = "invalid utf-8: corrupt contents"


class WindowResize(ReadlineError):
    """The terminal window was resized while reading."""

    default_message = "WindowResize"
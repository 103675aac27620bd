import pytest

from lineedit.error import Eof, Interrupted, ReadlineError, Utf8Error, WindowResize


@pytest.mark.parametrize(
    ("cls", "text"),
    [
        (Eof, "EOF"),
        (Interrupted, "Interrupted"),
        (Utf8Error, "invalid utf-8: corrupt contents"),
        (WindowResize, "WindowResize"),
    ],
)
def test_messages(cls, text):
    assert str(cls()) == text


@pytest.mark.parametrize(
    ("cls", "text"),
    [
        (Eof, "EOF"),
        (Interrupted, "Interrupted"),
        (Utf8Error, "invalid utf-8: corrupt contents"),
        (WindowResize, "WindowResize"),
    ],
)
def test_caught_as_readline_error(cls, text):
    with pytest.raises(ReadlineError) as exc_info:
        raise cls()
    assert type(exc_info.value) is cls
    assert str(exc_info.value) == text


def test_eof_is_not_interrupted():
    eof = Eof()
    interrupted = Interrupted()
    assert str(eof) == "EOF"
    assert str(interrupted) == "Interrupted"
    assert isinstance(eof, ReadlineError)
    assert isinstance(interrupted, ReadlineError)
    assert not isinstance(eof, Interrupted)
    assert not isinstance(interrupted, Eof)


def test_custom_message():
    assert str(ReadlineError("disk full")) == "disk full"
    assert str(Eof("stream closed")) == "stream closed"
import os

import pytest

from lineedit import completion
from lineedit.completion import (
    Completer,
    FilenameCompleter,
    Pair,
    Quote,
    escape,
    extract_word,
    find_unclosed_quote,
    longest_common_prefix,
    unescape,
)

UNIX_BREAK_CHARS = " \t\n\"\\'`@$><=;|&{(\0"


def test_extract_word():
    line = "ls '/usr/local/b"
    assert extract_word(line, len(line), "\\", UNIX_BREAK_CHARS) == (4, "/usr/local/b")
    line = "ls /User\\ Information"
    assert extract_word(line, len(line), "\\", UNIX_BREAK_CHARS) == (
        3,
        "/User\\ Information",
    )


def test_extract_word_without_break_char():
    assert extract_word("word", 4, "\\", UNIX_BREAK_CHARS) == (0, "word")
    assert extract_word("", 0, "\\", UNIX_BREAK_CHARS) == (0, "")


def test_extract_word_no_escape_char():
    assert extract_word("ls a\\ b", 7, None, " ") == (6, "b")


def test_unescape_unix(monkeypatch):
    monkeypatch.setattr(completion, "_WINDOWS", False)
    assert unescape("/usr/local/b", "\\") == "/usr/local/b"
    assert unescape("/User\\ Information", "\\") == "/User Information"


def test_unescape_windows(monkeypatch):
    monkeypatch.setattr(completion, "_WINDOWS", True)
    text = "c:\\users\\All Users\\"
    assert unescape(text, "\\") == text


def test_unescape_without_escape_char():
    assert unescape("a\\ b", None) == "a\\ b"


def test_escape():
    assert escape("/usr/local/b", "\\", UNIX_BREAK_CHARS, Quote.NONE) == "/usr/local/b"
    assert (
        escape("/User Information", "\\", UNIX_BREAK_CHARS, Quote.NONE)
        == "/User\\ Information"
    )


def test_escape_single_quote_untouched():
    assert escape("a b", "\\", UNIX_BREAK_CHARS, Quote.SINGLE) == "a b"


def test_escape_without_escape_char(monkeypatch):
    monkeypatch.setattr(completion, "_WINDOWS", False)
    assert escape("a b", None, UNIX_BREAK_CHARS, Quote.NONE) == "a b"
    monkeypatch.setattr(completion, "_WINDOWS", True)
    assert escape("a b", None, UNIX_BREAK_CHARS, Quote.NONE) == '"a b'


def test_longest_common_prefix():
    candidates = []
    assert longest_common_prefix(candidates) is None
    candidates.append("User")
    assert longest_common_prefix(candidates) == "User"
    candidates.append("Users")
    assert longest_common_prefix(candidates) == "User"
    candidates.append("")
    assert longest_common_prefix(candidates) is None
    assert longest_common_prefix(["fée", "fête"]) == "f"


def test_longest_common_prefix_uses_replacement():
    pairs = [Pair("x", "abc"), Pair("y", "abd")]
    assert longest_common_prefix(pairs) == "ab"


def test_find_unclosed_quote():
    assert find_unclosed_quote("ls /etc") is None
    assert find_unclosed_quote('ls "User Information') == (3, Quote.DOUBLE)
    assert find_unclosed_quote('ls "/User Information" /etc') is None
    assert find_unclosed_quote('"c:\\users\\All Users\\') == (0, Quote.DOUBLE)


def test_find_unclosed_single_quote_unix(monkeypatch):
    monkeypatch.setattr(completion, "_WINDOWS", False)
    assert find_unclosed_quote("ls 'abc") == (3, Quote.SINGLE)
    assert find_unclosed_quote("ls \\'abc") is None


def test_normalize_case_insensitive(monkeypatch):
    monkeypatch.setattr(completion, "_CASE_INSENSITIVE", True)
    assert completion._normalize("Windows") == "windows"


def test_default_completer_has_no_candidates():
    assert Completer().complete("anything", 3) == (0, [])


@pytest.fixture
def populated(tmp_path, monkeypatch):
    (tmp_path / "alpha.txt").write_text("a")
    (tmp_path / "alpine").mkdir()
    (tmp_path / "beta").write_text("b")
    (tmp_path / "my file").write_text("c")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_complete_path_relative(populated):
    start, matches = FilenameCompleter().complete_path("ls al", 5)
    assert start == 3
    assert [m.display for m in matches] == ["alpha.txt", "alpine"]
    assert [m.replacement for m in matches] == ["alpha.txt", "alpine" + os.sep]


def test_complete_delegates_to_complete_path(populated):
    start, matches = FilenameCompleter().complete("ls be", 5, None)
    assert start == 3
    assert matches == [Pair("beta", "beta")]


def test_complete_path_in_double_quotes(populated):
    line = 'ls "my'
    start, matches = FilenameCompleter().complete_path(line, len(line))
    assert start == 4
    assert matches == [Pair("my file", "my file")]


def test_complete_path_missing_directory(populated):
    line = "ls nowhere" + os.sep + "x"
    assert FilenameCompleter().complete_path(line, len(line)) == (3, [])


def test_complete_path_in_subdirectory(populated):
    (populated / "alpine" / "inner.txt").write_text("x")
    line = "ls alpine" + os.sep + "in"
    start, matches = FilenameCompleter().complete_path(line, len(line))
    assert start == 3
    assert matches == [Pair("inner.txt", "alpine" + os.sep + "inner.txt")]
# lineedit

Building blocks for interactive line editors, in plain Python with no
third-party dependencies: editor preferences, a command history with a
file format that keeps multi-line entries intact, file-name completion,
bracket highlighting and hints.

## Modules

- `lineedit.config`: `Config`, an immutable dataclass of editor preferences,
  built fluently with `Config.builder()` and the `Builder` methods
  (`max_history_size`, `history_ignore_dups`, `history_ignore_space`,
  `completion_type`, `completion_prompt_limit`, `keyseq_timeout`,
  `edit_mode`, `auto_add_history`, `bell_style`, `color_mode`,
  `output_stream`, `tab_stop`, `check_cursor_position`, `indent_size`,
  `bracketed_paste`, `build`). Choosing `EditMode.VI` also sets the key
  sequence timeout to 500 ms; `EditMode.EMACS` sets it to -1 (no timeout).
  Enums: `EditMode`, `CompletionType`, `BellStyle`, `ColorMode`,
  `OutputStreamType`, `HistoryDuplicates`.
- `lineedit.error`: `ReadlineError` and its subclasses `Eof`, `Interrupted`,
  `Utf8Error` and `WindowResize`, each with a default message.
- `lineedit.history`: `History`, a bounded list of entries (default 100)
  that can skip consecutive duplicates and lines starting with a space.
  `search` and `starts_with` find the nearest matching entry from a start
  index in a `Direction` (`FORWARD` or `REVERSE`). `save`, `append` and
  `load` read and write history files.
- `lineedit.completion`: `Completer`, `FilenameCompleter` and `Pair`, with
  the helpers `extract_word`, `escape`, `unescape`, `find_unclosed_quote`
  and `longest_common_prefix`, and the `Quote` enum.
- `lineedit.highlight`: `Highlighter`, whose `prompt_style`, `hint_style`
  and `candidate_style` attributes hold optional ANSI sequences, and
  `MatchingBracketHighlighter`, which colours the bracket matching the one
  under or just before the cursor. Helpers: `find_matching_bracket`,
  `check_bracket`, `matching_bracket`, `is_open_bracket`,
  `is_close_bracket`.
- `lineedit.hint`: `Context`, `Hinter`, `HistoryHinter` (suggests the rest
  of a previous entry), and `CommandHinter` with `CommandHint` and
  `default_command_hints()` for fixed command templates.

## History file format

`save` writes a first line `#V2`, then one entry per line, with backslashes
written as `\\` and line feeds as `\n`. `load` also accepts files without
that header and reads their lines as they are. Empty lines are skipped.
Files are written with mode `0600`. `append` writes only the entries added
since the last save or load; when the file changed in between, it merges
with the file's contents under an exclusive lock (on POSIX systems) and
keeps at most `max_len` entries. A file that is not valid UTF-8 raises
`Utf8Error`; a missing file raises `OSError`.

## Installing

```
pip install .
```

## Examples

Configuration:

```python
from lineedit.config import Config, CompletionType, EditMode

config = (
    Config.builder()
    .history_ignore_space(True)
    .completion_type(CompletionType.LIST)
    .edit_mode(EditMode.VI)
    .build()
)
```

History:

```python
from lineedit.history import History, Direction

history = History(config)
history.add("git status")
history.add("git commit")
history.search("status", len(history) - 1, Direction.REVERSE)  # -> 0
history.save("history.txt")
```

Completion of file names:

```python
from lineedit.completion import FilenameCompleter

start, candidates = FilenameCompleter().complete_path("ls /usr/loc", 11)
# start == 3; candidates are Pair(display, replacement), sorted by display
```

Hints from history:

```python
from lineedit.hint import Context, HistoryHinter

ctx = Context(history)
HistoryHinter().hint("git c", 5, ctx)  # -> "ommit"
```

Hints from command templates:

```python
from lineedit.hint import CommandHinter, Context, default_command_hints

hinter = CommandHinter(default_command_hints())
hint = hinter.hint("hs", 2, Context(history))
hint.display       # -> "et key field value"
hint.completion()  # -> "et "
```

## What this package does not do

It does not read lines from a terminal. There is no editing loop, no key
bindings, no screen rendering and no command to run: the modules supply the
configuration, history, completion, highlighting and hint pieces that such
an editor would use.

## Running the tests

```
pip install .[test]
pytest
```
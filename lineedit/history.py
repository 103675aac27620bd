"""Command line history with a multiline-aware file format."""

from __future__ import annotations

import logging
import os
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator

from lineedit.config import Config, HistoryDuplicates
from lineedit.error import Utf8Error

try:
    import fcntl
except ImportError:  # pragma: no cover - non-POSIX platforms
    fcntl = None

_log = logging.getLogger(__name__)

_FILE_VERSION_V2 = "#V2"


class Direction(Enum):
    """Search direction."""

    FORWARD = "forward"
    REVERSE = "reverse"


@dataclass
class _PathInfo:
    path: Path
    modified: int
    size: int


def _modified(path: Path) -> int:
    return os.stat(path).st_mtime_ns


def _escape(entry: str) -> str:
    return entry.replace("\\", "\\\\").replace("\n", "\\n")


def _unescape(line: str) -> str:
    """Undo the escaping of line feeds and backslashes; keep bad lines as read."""
    parts: list[str] = []
    rest = line
    while (i := rest.find("\\")) != -1:
        parts.append(rest[:i])
        escaped = rest[i + 1 : i + 2]
        if escaped == "n":
            parts.append("\n")
        elif escaped == "\\":
            parts.append("\\")
        else:
            _log.warning("bad escaped line: %s", line)
            return line
        rest = rest[i + 2 :]
    parts.append(rest)
    return "".join(parts)


def _split_lines(text: str) -> Iterator[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith("\r") else line


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise Utf8Error() from exc


def _fix_perm(fd: int) -> None:
    if hasattr(os, "fchmod"):
        os.fchmod(fd, 0o600)


@contextmanager
def _locked(fh):
    if fcntl is None:
        yield fh
        return
    fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
    try:
        yield fh
    finally:
        fcntl.flock(fh.fileno(), fcntl.LOCK_UN)


class History:
    """Current state of the history."""

    def __init__(self, config: Config | None = None) -> None:
        config = config if config is not None else Config()
        self._entries: deque[str] = deque()
        self.max_len = config.max_history_size
        self.ignore_space = config.history_ignore_space
        self.ignore_dups = (
            config.history_duplicates is HistoryDuplicates.IGNORE_CONSECUTIVE
        )
        self._new_entries = 0
        self._path_info: _PathInfo | None = None

    def get(self, index: int) -> str | None:
        """Return the entry at ``index`` or ``None`` if out of range."""
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def last(self) -> str | None:
        """Return the most recent entry, if any."""
        return self._entries[-1] if self._entries else None

    def add(self, line: str) -> bool:
        """Add a new entry; return whether it was kept."""
        if self.max_len == 0:
            return False
        if not line or (self.ignore_space and line[0].isspace()):
            return False
        if self.ignore_dups and self._entries and self._entries[-1] == line:
            return False
        if len(self._entries) >= self.max_len:
            self._entries.popleft()
        self._entries.append(line)
        self._new_entries = min(self._new_entries + 1, len(self._entries))
        return True

    def __len__(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        """Return true if the history has no entry."""
        return not self._entries

    def set_max_len(self, length: int) -> None:
        """Set the maximum length, keeping only the latest entries."""
        self.max_len = length
        while len(self._entries) > length:
            self._entries.popleft()
        self._new_entries = min(self._new_entries, length)

    def _serialize(self, append: bool) -> str:
        if append:
            first_new = max(len(self._entries) - self._new_entries, 0)
            header = []
        else:
            first_new = 0
            header = [_FILE_VERSION_V2 + "\n"]
        body = (
            _escape(entry) + "\n"
            for i, entry in enumerate(self._entries)
            if i >= first_new
        )
        return "".join([*header, *body])

    def save(self, path: str | os.PathLike) -> None:
        """Save the whole history to ``path``."""
        if self.is_empty() or self._new_entries == 0:
            return
        path = Path(path)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as fh:
            _fix_perm(fh.fileno())
            fh.write(self._serialize(False).encode("utf-8"))
        self._new_entries = 0
        self._update_path(path, len(self))

    def append(self, path: str | os.PathLike) -> None:
        """Append the entries not yet saved to ``path``."""
        if self.is_empty() or self._new_entries == 0:
            return
        path = Path(path)
        if not path.exists() or self._new_entries == self.max_len:
            self.save(path)
            return
        if self._can_just_append(path):
            with open(path, "ab") as fh:
                _fix_perm(fh.fileno())
                fh.write(self._serialize(True).encode("utf-8"))
            size = self._path_info.size + self._new_entries
            self._new_entries = 0
            self._update_path(path, size)
            return
        with open(path, "r+b") as fh, _locked(fh):
            other = History()
            other.max_len = self.max_len
            other.ignore_space = self.ignore_space
            other.ignore_dups = self.ignore_dups
            other._load_from(_decode(fh.read()))
            first_new = max(len(self._entries) - self._new_entries, 0)
            for i, entry in enumerate(self._entries):
                if i >= first_new:
                    other.add(entry)
            fh.seek(0)
            _fix_perm(fh.fileno())
            fh.write(other._serialize(False).encode("utf-8"))
            fh.truncate()
        self._update_path(path, len(other))
        self._new_entries = 0

    def load(self, path: str | os.PathLike) -> None:
        """Load the history from ``path``; raises ``OSError`` if unreadable."""
        path = Path(path)
        with open(path, "rb") as fh:
            text = _decode(fh.read())
        before = len(self)
        if self._load_from(text):
            self._update_path(path, len(self) - before)
        else:
            # Discard the old format on the next save.
            self._path_info = None

    def _load_from(self, text: str) -> bool:
        lines = _split_lines(text)
        v2 = False
        first = next(lines, None)
        if first is not None:
            if first == _FILE_VERSION_V2:
                v2 = True
            else:
                self.add(first)
        for line in lines:
            if not line:
                continue
            self.add(_unescape(line) if v2 else line)
        self._new_entries = 0
        return v2

    def _update_path(self, path: Path, size: int) -> None:
        modified = _modified(path)
        self._path_info = _PathInfo(path, modified, size)
        _log.debug("PathInfo(%s, %s, %s)", path, modified, size)

    def _can_just_append(self, path: Path) -> bool:
        info = self._path_info
        if info is None:
            return False
        if info.path != path:
            _log.debug("cannot append: %s <> %s", info.path, path)
            return False
        modified = _modified(path)
        if (
            info.modified != modified
            or self.max_len <= info.size
            or self.max_len < info.size + self._new_entries
        ):
            _log.debug("cannot append to %s", path)
            return False
        return True

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()
        self._new_entries = 0

    def search(self, term: str, start: int, direction: Direction) -> int | None:
        """Index of the nearest entry containing ``term``, from ``start`` inclusive."""
        return self._search_match(term, start, direction, lambda e: term in e)

    def starts_with(self, term: str, start: int, direction: Direction) -> int | None:
        """Index of the nearest entry starting with ``term``, from ``start`` inclusive."""
        return self._search_match(term, start, direction, lambda e: e.startswith(term))

    def _search_match(
        self,
        term: str,
        start: int,
        direction: Direction,
        test: Callable[[str], bool],
    ) -> int | None:
        if not term or start >= len(self._entries) or start < 0:
            return None
        if direction is Direction.REVERSE:
            indices = range(start, -1, -1)
        else:
            indices = range(start, len(self._entries))
        return next((i for i in indices if test(self._entries[i])), None)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __reversed__(self) -> Iterator[str]:
        return reversed(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]
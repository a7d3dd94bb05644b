"""In-memory text buffer used as the editing surface."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Callable, Iterator

from .constants import DEFAULT_TAB_WIDTH, LEADING_WHITESPACE

ChangeListener = Callable[[int], None]


def leading_whitespace_columns(line: str, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    """Compute the column width of leading whitespace.

    Tabs advance to the next multiple of `tab_width` columns.

    Args:
        line: Line whose leading whitespace should be measured.
        tab_width: Width of a tab stop.

    Returns:
        int: Number of columns occupied by the leading whitespace.

    Examples:
        leading_whitespace_columns("    from t")  # 4
        leading_whitespace_columns("\\tfrom t", tab_width=8)  # 8
    """
    columns = 0
    for character in line:
        if character == " ":
            columns += 1
            continue
        if character == "\t":
            columns += tab_width - (columns % tab_width)
            continue
        break
    return columns


class Document:
    """A mutable text buffer addressed by character offsets.

    Lines are separated by ``\\n``. A position is an offset into the text;
    positions past the end are clamped. The document tracks a single cursor
    and notifies registered listeners with the index of the first line an
    edit touched, so callers holding per-line caches can drop stale entries.
    """

    def __init__(self, text: str = "", cursor: int = 0):
        self._lines = text.split("\n")
        self._length = len(text)
        # Offsets of line starts, valid for a prefix of the lines.
        self._starts = [0]
        self._listeners: list[ChangeListener] = []
        self._cursor = 0
        self.cursor = cursor

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def cursor(self) -> int:
        return self._cursor

    @cursor.setter
    def cursor(self, position: int) -> None:
        self._cursor = self._clamp(position)

    @property
    def cursor_line(self) -> int:
        return self.line_at(self._cursor)

    def add_change_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        self._listeners.remove(listener)

    def line_start(self, line: int) -> int:
        """Return the position of the first character of `line`.

        Raises:
            IndexError: If `line` is outside the document.
        """
        self._check_line(line)
        while len(self._starts) <= line:
            previous = len(self._starts) - 1
            self._starts.append(self._starts[previous] + len(self._lines[previous]) + 1)
        return self._starts[line]

    def line_end(self, line: int) -> int:
        """Return the position of the line's terminating newline (or end of text)."""
        return self.line_start(line) + len(self._lines[line])

    def line_at(self, position: int) -> int:
        """Return the zero-based index of the line containing `position`."""
        position = self._clamp(position)
        last = len(self._lines) - 1
        while self._starts[-1] <= position and len(self._starts) <= last:
            self.line_start(len(self._starts))
        return bisect_right(self._starts, position) - 1

    def line_text(self, line: int) -> str:
        self._check_line(line)
        return self._lines[line]

    def is_blank(self, line: int) -> bool:
        return not self.line_text(line).strip()

    def indentation(self, line: int) -> str:
        """Return the run of spaces and tabs that starts `line`."""
        text = self.line_text(line)
        return text[: len(text) - len(text.lstrip(LEADING_WHITESPACE))]

    def indentation_end(self, line: int) -> int:
        """Return the position just past the leading whitespace of `line`."""
        return self.line_start(line) + len(self.indentation(line))

    def indentation_columns(self, line: int, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
        return leading_whitespace_columns(self.line_text(line), tab_width)

    def replace_indentation(self, line: int, indentation: str) -> None:
        """Replace the leading whitespace run of `line` with `indentation`.

        The cursor is left where it is; callers decide where it belongs.

        Raises:
            ValueError: If `indentation` contains anything but spaces and tabs.
        """
        if indentation.strip(LEADING_WHITESPACE):
            raise ValueError(f"Indentation must only contain spaces and tabs: {indentation!r}")
        text = self.line_text(line)
        self._lines[line] = indentation + text.lstrip(LEADING_WHITESPACE)
        self._length += len(self._lines[line]) - len(text)
        self._changed(line)

    def insert(self, position: int, text: str) -> None:
        """Insert `text` at `position`, moving the cursor if it sits at or after it."""
        position = self._clamp(position)
        line = self.line_at(position)
        column = position - self.line_start(line)
        current = self._lines[line]
        inserted = (current[:column] + text + current[column:]).split("\n")
        self._lines[line : line + 1] = inserted
        self._length += len(text)
        if self._cursor >= position:
            self._cursor += len(text)
        self._changed(line)

    def _changed(self, line: int) -> None:
        del self._starts[line + 1 :]
        for listener in list(self._listeners):
            listener(line)

    def _clamp(self, position: int) -> int:
        return max(0, min(position, len(self)))

    def _check_line(self, line: int) -> None:
        if not 0 <= line < len(self._lines):
            raise IndexError(f"Line {line} is outside the document ({len(self._lines)} lines)")

"""Data models for sql-indent."""

from dataclasses import dataclass
from enum import Enum, auto


class LexicalContext(Enum):
    """Lexical contexts tracked while scanning SQL text.

    Attributes:
        CODE: Plain SQL outside any literal.
        STRING: Inside a quoted string or quoted identifier.
        LINE_COMMENT: Inside a ``--`` or ``#`` comment, up to end of line.
        BLOCK_COMMENT: Inside a ``/* ... */`` comment.
    """

    CODE = auto()
    STRING = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()


@dataclass(frozen=True)
class ScanState:
    """Lexical state at a position in a document.

    Attributes:
        context: Lexical context the position falls in.
        quote: Quote character that opened the current string, if any.
        depth: Parenthesis nesting depth counted from the document start,
            ignoring parentheses inside strings and comments. May be negative
            when the text has unmatched closing parentheses.
    """

    context: LexicalContext = LexicalContext.CODE
    quote: str | None = None
    depth: int = 0

    @property
    def in_string_or_comment(self) -> bool:
        return self.context is not LexicalContext.CODE


@dataclass
class IndentState:
    """Start and indentation of the previous non-blank line.

    Attributes:
        start: Position of the first character of the line.
        indent_column: Column width of the line's leading whitespace.
    """

    start: int
    indent_column: int


@dataclass
class LevelDelta:
    """Indentation level change computed for a line.

    Attributes:
        level_delta: Signed number of indentation levels relative to the
            previous non-blank line.
        previous_indent: Indentation column of the previous non-blank line.
    """

    level_delta: int
    previous_indent: int


@dataclass
class IndentRecord:
    """Outcome of indenting one line.

    Attributes:
        line_number: Zero-based index of the indented line.
        level_delta: Level change applied relative to the previous line.
        previous_indent: Indentation column of the previous non-blank line.
        new_indent: Indentation column written to the line.
    """

    line_number: int
    level_delta: int
    previous_indent: int
    new_indent: int

"""Lexical classification of SQL text: strings, comments and parentheses."""

from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
from typing import Protocol

from .config import IndentConfig
from .constants import (
    BLOCK_COMMENT_END,
    BLOCK_COMMENT_START,
    LINE_COMMENT_STARTERS,
    STRING_DELIMITERS,
)
from .document import Document
from .models import LexicalContext, ScanState


class LexicalClassifier(Protocol):
    """Answers string/comment and parenthesis questions about a document."""

    def is_string_or_comment(self, position: int) -> bool:
        """Return True when `position` lies inside a string or comment literal."""
        ...

    def paren_depth_delta(self, start: int, end: int) -> int:
        """Return the net parenthesis nesting change between two positions.

        Parentheses inside strings and comments do not count.
        """
        ...


def scan(text: str, state: ScanState = ScanState(), backslash_escapes: bool = True) -> ScanState:
    """Advance a lexical state over `text`.

    Total over any input: an unterminated literal simply leaves the returned
    state inside it, and unmatched closing parentheses drive the depth below
    zero.

    Args:
        text: Text to scan, starting where `state` applies.
        state: Lexical state in effect before the first character of `text`.
        backslash_escapes: Whether a backslash escapes the next character in
            quoted strings. Backquoted identifiers never take escapes.

    Returns:
        ScanState: State in effect after the last character of `text`.

    Examples:
        scan("select ('a)'")  # depth 1, back in code
        scan("where x = 'it''s")  # still inside the string
    """
    context = state.context
    quote = state.quote
    depth = state.depth
    index = 0
    length = len(text)

    while index < length:
        char = text[index]

        if context is LexicalContext.CODE:
            if char in STRING_DELIMITERS:
                context = LexicalContext.STRING
                quote = char
            elif text.startswith(BLOCK_COMMENT_START, index):
                context = LexicalContext.BLOCK_COMMENT
                index += len(BLOCK_COMMENT_START)
                continue
            elif text.startswith(LINE_COMMENT_STARTERS, index):
                context = LexicalContext.LINE_COMMENT
            elif char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
        elif context is LexicalContext.STRING:
            if char == "\\" and backslash_escapes and quote != "`":
                index += 2
                continue
            if char == quote:
                context = LexicalContext.CODE
                quote = None
        elif context is LexicalContext.LINE_COMMENT:
            if char == "\n":
                context = LexicalContext.CODE
        elif text.startswith(BLOCK_COMMENT_END, index):
            context = LexicalContext.CODE
            index += len(BLOCK_COMMENT_END)
            continue

        index += 1

    return ScanState(context=context, quote=quote, depth=depth)


class SqlLexicalClassifier:
    """Lexical classifier for SQL text held in a `Document`.

    Recognizes ``'...'``, ``"..."`` and backquoted literals, ``--`` and ``#``
    line comments and ``/* ... */`` block comments. The state at the start of
    each line is cached and the cache is flushed from the edited line onward
    whenever the document changes.
    """

    def __init__(self, document: Document, config: IndentConfig | None = None):
        config = config or IndentConfig()
        self._document = document
        self._backslash_escapes = config.backslash_escapes
        self._line_states = [ScanState()]
        document.add_change_listener(self.flush)

    @property
    def document(self) -> Document:
        return self._document

    def flush(self, line: int = 0) -> None:
        """Forget cached states for lines after `line`."""
        del self._line_states[line + 1 :]

    def close(self) -> None:
        """Stop following edits of the document."""
        self._document.remove_change_listener(self.flush)

    def __enter__(self) -> SqlLexicalClassifier:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def state_at(self, position: int) -> ScanState:
        """Return the lexical state just before the character at `position`."""
        position = max(0, min(position, len(self._document)))
        line = self._document.line_at(position)
        column = position - self._document.line_start(line)
        prefix = self._document.line_text(line)[:column]
        return scan(prefix, self._line_state(line), self._backslash_escapes)

    def is_string_or_comment(self, position: int) -> bool:
        return self.state_at(position).in_string_or_comment

    def paren_depth_delta(self, start: int, end: int) -> int:
        return self.state_at(end).depth - self.state_at(start).depth

    def _line_state(self, line: int) -> ScanState:
        while len(self._line_states) <= line:
            previous = len(self._line_states) - 1
            text = self._document.line_text(previous) + "\n"
            self._line_states.append(
                scan(text, self._line_states[previous], self._backslash_escapes)
            )
        return self._line_states[line]


def classifier_scope(
    document: Document,
    config: IndentConfig | None = None,
    classifier: LexicalClassifier | None = None,
) -> AbstractContextManager[LexicalClassifier]:
    """Use `classifier` as is, or a fresh `SqlLexicalClassifier` closed on exit."""
    if classifier is not None:
        return nullcontext(classifier)
    return SqlLexicalClassifier(document, config)

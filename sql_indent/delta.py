"""Indentation level change between consecutive non-blank lines."""

from __future__ import annotations

from .config import IndentConfig
from .constants import CONTINUATION_CHARS, CONTINUATION_WORDS
from .document import Document
from .keywords import starts_with_closer, starts_with_keyword
from .lexer import LexicalClassifier, classifier_scope
from .locator import previous_line_state
from .models import IndentState, LevelDelta


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def ends_with_continuation(
    document: Document, line: int, classifier: LexicalClassifier
) -> bool:
    """Check whether the code before `line` ends with ``THEN`` or ``(``.

    Trailing whitespace and blank lines are ignored. The word must not be the
    tail of a longer identifier, and the match must lie outside strings and
    comments.

    Examples:
        ends_with_continuation(Document("if x then\\n  y"), 1, classifier)  # True
        ends_with_continuation(Document("-- then\\n  y"), 1, classifier)  # False
    """
    previous = line - 1
    while previous >= 0 and document.is_blank(previous):
        previous -= 1
    if previous < 0:
        return False

    text = document.line_text(previous).rstrip()
    start = document.line_start(previous)

    if text[-1] in CONTINUATION_CHARS:
        return not classifier.is_string_or_comment(start + len(text) - 1)

    lowered = text.lower()
    for word in CONTINUATION_WORDS:
        if not lowered.endswith(word):
            continue
        word_start = len(text) - len(word)
        if word_start > 0 and _is_word_char(text[word_start - 1]):
            continue
        return not classifier.is_string_or_comment(start + word_start)

    return False


def level_delta(
    document: Document,
    line_start: int,
    config: IndentConfig | None = None,
    classifier: LexicalClassifier | None = None,
    previous: IndentState | None = None,
) -> LevelDelta:
    """Compute the indentation level change for the line at `line_start`.

    The change is the net parenthesis depth between the previous non-blank
    line and this one, plus one when the previous line starts with a keyword,
    minus one when this line does. Two corrections follow: a line after
    ``THEN`` or an open parenthesis gains a level when the sum is below one,
    and a line starting with ``)``, ``--`` or ``#`` loses a level when the sum
    is not negative.

    Args:
        document: Document holding the line. It is never modified.
        line_start: Position on the line to examine; normalized to the line start.
        config: Configuration providing the keyword set and tab width.
            Defaults to a new `IndentConfig` when omitted.
        classifier: Lexical classifier for the document. A temporary
            `SqlLexicalClassifier` is used when omitted.
        previous: Previous non-blank line state when the caller already knows it.

    Returns:
        LevelDelta: Signed level change and the previous line's indentation.

    Examples:
        level_delta(Document("select 1\\nfrom t"), 9)  # LevelDelta(0, 0)
        level_delta(Document("values (\\n1"), 9)  # LevelDelta(1, 0)
    """
    config = config or IndentConfig()
    line = document.line_at(line_start)
    line_start = document.line_start(line)

    with classifier_scope(document, config, classifier) as lexer:
        if previous is None:
            previous = previous_line_state(document, line_start, config)

        keywords = config.recognized_keywords
        delta = lexer.paren_depth_delta(previous.start, line_start)
        if starts_with_keyword(document, previous.start, keywords, lexer):
            delta += 1
        if starts_with_keyword(document, line_start, keywords, lexer):
            delta -= 1

        if delta < 1 and ends_with_continuation(document, line, lexer):
            delta += 1
        if delta >= 0 and starts_with_closer(document, line_start, lexer):
            delta -= 1

    return LevelDelta(level_delta=delta, previous_indent=previous.indent_column)

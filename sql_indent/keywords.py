"""Classification of lines by their leading token."""

from __future__ import annotations

from collections.abc import Collection

from .constants import CLOSER_PREFIXES, DEFAULT_KEYWORDS, LEADING_WHITESPACE
from .document import Document
from .lexer import LexicalClassifier


def _first_code_text(
    document: Document, line_start: int, classifier: LexicalClassifier
) -> str | None:
    """Return the line's text after indentation, or None when it is not code.

    None is returned for blank lines and for lines whose first non-blank
    character lies inside a string or comment literal.
    """
    line = document.line_at(line_start)
    text = document.line_text(line).lstrip(LEADING_WHITESPACE)
    if not text.strip():
        return None
    if classifier.is_string_or_comment(document.indentation_end(line)):
        return None
    return text


def match_keyword(text: str, keywords: Collection[str] = DEFAULT_KEYWORDS) -> bool:
    """Check whether `text` starts with a keyword followed by whitespace or nothing.

    Args:
        text: Line content with leading whitespace already removed.
        keywords: Lower-case keywords to match against.

    Returns:
        bool: True when the first whitespace-delimited token is a keyword.

    Examples:
        match_keyword("SELECT *")  # True
        match_keyword("selected_rows")  # False
        match_keyword("),")  # False
    """
    tokens = text.split(None, 1)
    return bool(tokens) and text[0] not in LEADING_WHITESPACE and tokens[0].lower() in keywords


def starts_with_keyword(
    document: Document,
    line_start: int,
    keywords: Collection[str],
    classifier: LexicalClassifier,
) -> bool:
    """Check whether the line at `line_start` begins with a recognized keyword.

    Args:
        document: Document holding the line.
        line_start: Position of the first character of the line.
        keywords: Lower-case keywords to match against.
        classifier: Lexical classifier deciding what is string or comment.

    Returns:
        bool: True when the line starts with a keyword in code.
    """
    text = _first_code_text(document, line_start, classifier)
    return text is not None and match_keyword(text, keywords)


def starts_with_closer(
    document: Document, line_start: int, classifier: LexicalClassifier
) -> bool:
    """Check whether the line begins with ``)``, ``--`` or ``#`` in code."""
    text = _first_code_text(document, line_start, classifier)
    return text is not None and text.startswith(CLOSER_PREFIXES)

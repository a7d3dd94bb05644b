"""Lookup of the previous non-blank line."""

from __future__ import annotations

from .config import IndentConfig
from .document import Document
from .models import IndentState


def previous_line_state(
    document: Document, position: int, config: IndentConfig | None = None
) -> IndentState:
    """Find the nearest non-blank line above the line containing `position`.

    Lines that are empty after trimming whitespace are skipped. The result is
    computed from the current document text on every call.

    Args:
        document: Document to search.
        position: Any position on the line being indented.
        config: Configuration providing the tab width used to measure
            indentation. Defaults to a new `IndentConfig` when omitted.

    Returns:
        IndentState: Start position and indentation column of the previous
            non-blank line, or ``IndentState(0, 0)`` when there is none.

    Examples:
        previous_line_state(Document("select 1\\n\\n  from t"), 12)  # IndentState(0, 0)
    """
    config = config or IndentConfig()
    line = document.line_at(position) - 1

    while line >= 0:
        if not document.is_blank(line):
            return IndentState(
                start=document.line_start(line),
                indent_column=document.indentation_columns(line, config.tab_width),
            )
        line -= 1

    return IndentState(start=0, indent_column=0)

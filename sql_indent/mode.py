"""Editing session and the toggleable SQL indentation mode."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from .config import IndentConfig
from .document import Document
from .indenter import indent_buffer, indent_line
from .log import get_logger
from .models import IndentRecord

logger = get_logger(__name__)

IndentHandler = Callable[[], object]


def _insert_tab_stop(session: EditingSession) -> None:
    """Default indent action: insert spaces up to the next tab stop."""
    document = session.document
    line_start = document.line_start(document.cursor_line)
    column = document.cursor - line_start
    width = session.config.tab_width
    document.insert(document.cursor, " " * (width - column % width))


@dataclass
class EditingSession:
    """An editing session over one document.

    Attributes:
        document: The document being edited.
        config: Configuration used by indentation commands.
        indent_line_function: Handler run by the session's indent action.
            Defaults to inserting spaces up to the next tab stop.
        indentation_mode: The session's SQL indentation mode.
    """

    document: Document
    config: IndentConfig = field(default_factory=IndentConfig)
    indent_line_function: IndentHandler | None = None
    indentation_mode: IndentationMode = field(default_factory=lambda: IndentationMode())

    def __post_init__(self):
        if self.indent_line_function is None:
            self.indent_line_function = lambda: _insert_tab_stop(self)

    def indent(self) -> object:
        """Run whatever indent handler is currently bound."""
        return self.indent_line_function()

    def indent_line(self) -> IndentRecord:
        """Indent the line holding the cursor."""
        return indent_line(self.document, self.config)

    def indent_buffer(self) -> list[IndentRecord]:
        """Indent every line of the document."""
        return indent_buffer(self.document, self.config)

    def toggle_indentation_mode(self) -> bool:
        return self.indentation_mode.toggle(self)


class IndentationMode:
    """SQL indentation mode for an `EditingSession`.

    While active, the session's indent action indents the cursor line with
    `indent_line`. Deactivating restores the handler bound before activation.

    Examples:
        session = EditingSession(Document("select 1\\n   from t"))
        session.indentation_mode.activate(session)
        session.indent()
        session.indentation_mode.deactivate(session)
    """

    def __init__(self):
        self.active = False
        self._previous_handler: IndentHandler | None = None

    def activate(self, session: EditingSession) -> None:
        if self.active:
            return
        self._previous_handler = session.indent_line_function
        session.indent_line_function = session.indent_line
        self.active = True
        logger.debug("SQL indentation mode enabled")

    def deactivate(self, session: EditingSession) -> None:
        if not self.active:
            return
        session.indent_line_function = self._previous_handler
        self._previous_handler = None
        self.active = False
        logger.debug("SQL indentation mode disabled")

    def toggle(self, session: EditingSession) -> bool:
        """Flip the mode for `session` and return whether it is now active."""
        if self.active:
            self.deactivate(session)
        else:
            self.activate(session)
        return self.active

"""Line and buffer indentation of SQL documents."""

from __future__ import annotations

from pathlib import Path

from .config import ConfigError, IndentConfig, normalize_config, validate_config
from .delta import level_delta
from .document import Document
from .filesystem import safe_read
from .lexer import LexicalClassifier, classifier_scope
from .log import get_logger
from .models import IndentRecord, IndentState

logger = get_logger(__name__)


def indentation_string(columns: int, config: IndentConfig | None = None) -> str:
    """Render `columns` of indentation as spaces, or tabs then spaces.

    Examples:
        indentation_string(4)  # "    "
        indentation_string(10, IndentConfig(indent_with_tabs=True))  # "\\t  "
    """
    config = config or IndentConfig()
    if config.indent_with_tabs:
        tabs, spaces = divmod(columns, config.tab_width)
        return "\t" * tabs + " " * spaces
    return " " * columns


def _rewrite_indentation(document: Document, line: int, indentation: str) -> None:
    """Replace the indentation of `line`, keeping the cursor anchored to text.

    A cursor inside the old indentation ends up after the new one; a cursor
    further into this line or on a later line keeps its distance from the end
    of the document; a cursor on an earlier line does not move. The cursor
    rule applies even when the indentation is already correct.
    """
    cursor = document.cursor
    distance_from_end = len(document) - cursor
    line_start = document.line_start(line)
    old_indentation_end = document.indentation_end(line)

    if document.indentation(line) != indentation:
        document.replace_indentation(line, indentation)

    if cursor < line_start:
        return
    if cursor < old_indentation_end:
        document.cursor = document.indentation_end(line)
    else:
        document.cursor = len(document) - distance_from_end


def indent_line(
    document: Document,
    config: IndentConfig | None = None,
    line: int | None = None,
    classifier: LexicalClassifier | None = None,
    previous: IndentState | None = None,
) -> IndentRecord:
    """Indent one line from the state of the previous non-blank line.

    The new indentation is the previous line's indentation plus
    ``indent_offset`` per level of change, never below zero. Only the leading
    whitespace of the line is rewritten. Malformed SQL never raises; it only
    yields a best-effort indentation.

    Args:
        document: Document to edit.
        config: Configuration controlling offsets, keywords and diagnostics.
            Defaults to a new `IndentConfig` when omitted.
        line: Zero-based line to indent. Defaults to the cursor's line.
        classifier: Lexical classifier for the document. A temporary
            `SqlLexicalClassifier` is used when omitted.
        previous: Previous non-blank line state when the caller already knows it.

    Returns:
        IndentRecord: Line number, level change, previous and new indentation.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        document = Document("select 1\\n      from t", cursor=20)
        indent_line(document)  # IndentRecord(1, 0, 0, 0)
    """
    config = normalize_config(config or IndentConfig())
    validate_config(config)
    if line is None:
        line = document.cursor_line
    return _indent_line(document, config, line, classifier, previous)


def _indent_line(
    document: Document,
    config: IndentConfig,
    line: int,
    classifier: LexicalClassifier | None,
    previous: IndentState | None,
) -> IndentRecord:
    line_start = document.line_start(line)
    result = level_delta(document, line_start, config, classifier, previous)
    new_indent = max(0, result.previous_indent + config.indent_offset * result.level_delta)

    _rewrite_indentation(document, line, indentation_string(new_indent, config))

    if config.debug_logging:
        logger.debug(
            "line %d: level delta %d, previous indent %d, new indent %d",
            line + 1,
            result.level_delta,
            result.previous_indent,
            new_indent,
        )

    return IndentRecord(
        line_number=line,
        level_delta=result.level_delta,
        previous_indent=result.previous_indent,
        new_indent=new_indent,
    )


def indent_buffer(
    document: Document,
    config: IndentConfig | None = None,
    classifier: LexicalClassifier | None = None,
) -> list[IndentRecord]:
    """Indent every line of `document`, top to bottom, in a single pass.

    Each line is indented after the line above it is final, so the pass never
    needs to revisit a line. Whitespace-only lines are indented like any other
    line, or emptied when ``indent_blank_lines`` is off; either way they never
    influence other lines.

    Args:
        document: Document to edit.
        config: Configuration controlling offsets, keywords and diagnostics.
            Defaults to a new `IndentConfig` when omitted.
        classifier: Lexical classifier for the document. A `SqlLexicalClassifier`
            following the pass's edits is used when omitted.

    Returns:
        list[IndentRecord]: One record per indented line, in document order.
            Emptied blank lines have no record.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        indent_buffer(Document("select 1\\n  from t\\n where x = 1"))
    """
    config = normalize_config(config or IndentConfig())
    validate_config(config)

    records: list[IndentRecord] = []
    previous: IndentState | None = None

    with classifier_scope(document, config, classifier) as lexer:
        for line in range(document.line_count):
            if document.is_blank(line) and not config.indent_blank_lines:
                _rewrite_indentation(document, line, "")
                continue

            record = _indent_line(document, config, line, lexer, previous)
            records.append(record)
            if not document.is_blank(line):
                previous = IndentState(
                    start=document.line_start(line), indent_column=record.new_indent
                )

    return records


def indent_text(text: str, config: IndentConfig | None = None) -> str:
    """Return `text` with every line re-indented.

    Examples:
        indent_text("select 1\\nfrom foo\\nwhere x = 1")
    """
    document = Document(text)
    indent_buffer(document, config)
    return document.text


class IndentFileError(Exception):
    """Raised when indenting a SQL file fails."""


def indent_file(
    filepath: Path, config: IndentConfig | None = None, line: int | None = None
) -> tuple[str, str]:
    """Read a SQL file and compute its re-indented content.

    Args:
        filepath: Path to the SQL file.
        config: Configuration controlling indentation; defaults to a new
            `IndentConfig` when omitted.
        line: Zero-based line to re-indent on its own. Every line is
            re-indented when omitted.

    Returns:
        tuple[str, str]: Original content and re-indented content.

    Raises:
        IndentFileError: If the configuration is invalid, the file cannot be
            read or decoded, or `line` is outside the file.

    Examples:
        original, indented = indent_file(Path("report.sql"), IndentConfig(indent_offset=2))
    """
    config = config or IndentConfig()
    try:
        config = normalize_config(config)
        validate_config(config)
    except ConfigError as error:
        raise IndentFileError(str(error)) from error

    try:
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise IndentFileError(error_message) from error
    except IOError as error:
        raise IndentFileError(str(error)) from error

    document = Document(content)
    if line is None:
        indent_buffer(document, config)
    elif 0 <= line < document.line_count:
        indent_line(document, config, line)
    else:
        error_message = f"{filepath} has no line {line + 1} ({document.line_count} lines)."
        raise IndentFileError(error_message)

    return content, document.text

"""
sql-indent: indentation for SQL text from prior-line context.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    sql-indent report.sql

Library Usage:
    from sql_indent import Document, indent_buffer, indent_line, indent_text

    indented = indent_text("select 1\\nfrom foo\\nwhere x = 1")

    document = Document("select 1\\n      from foo", cursor=20)
    record = indent_line(document)
"""

from .config import ConfigError, IndentConfig
from .delta import level_delta
from .document import Document
from .indenter import IndentFileError, indent_buffer, indent_file, indent_line, indent_text
from .keywords import starts_with_keyword
from .lexer import LexicalClassifier, SqlLexicalClassifier
from .locator import previous_line_state
from .mode import EditingSession, IndentationMode
from .models import IndentRecord, IndentState, LevelDelta

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "indent_line",
    "indent_buffer",
    "indent_text",
    "indent_file",
    "level_delta",
    "previous_line_state",
    "starts_with_keyword",
    # Editing surface
    "Document",
    "EditingSession",
    "IndentationMode",
    "LexicalClassifier",
    "SqlLexicalClassifier",
    # Data models
    "IndentConfig",
    "IndentRecord",
    "IndentState",
    "LevelDelta",
    # Exceptions
    "ConfigError",
    "IndentFileError",
    # Version
    "__version__",
]

"""Constants used across the sql-indent package."""

from __future__ import annotations

# Lines starting with one of these words (followed by whitespace or end of
# line) are statement or clause starters.
DEFAULT_KEYWORDS = frozenset(
    {
        "select",
        "update",
        "insert",
        "delete",
        "union",
        "intersect",
        "from",
        "where",
        "into",
        "group",
        "having",
        "order",
        "set",
        "use",
        "alter",
        "create",
        "drop",
        "truncate",
        "begin",
        "else",
        "end",
        ")",
        "delimiter",
        "source",
    }
)

# Line prefixes that dedent the line they start.
CLOSER_PREFIXES = (")", "--", "#")

# Words that open a continuation when they end the previous line.
CONTINUATION_WORDS = frozenset({"then"})
CONTINUATION_CHARS = frozenset({"("})

STRING_DELIMITERS = frozenset({"'", '"', "`"})
LINE_COMMENT_STARTERS = ("--", "#")
BLOCK_COMMENT_START = "/*"
BLOCK_COMMENT_END = "*/"

LEADING_WHITESPACE = " \t"

DEFAULT_INDENT_OFFSET = 4
DEFAULT_TAB_WIDTH = 8
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

SQL_EXTENSIONS = (".sql", ".ddl", ".dml", ".mysql", ".pgsql", ".psql", ".plsql")

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from sql_indent.config import ConfigError, IndentConfig
from sql_indent.document import Document
from sql_indent.indenter import (
    IndentFileError,
    indent_buffer,
    indent_file,
    indent_line,
    indent_text,
    indentation_string,
)
from sql_indent.models import IndentRecord


def _columns(text: str) -> list[int]:
    return [len(line) - len(line.lstrip(" ")) for line in text.split("\n")]


def test_statement_and_clause_keywords_share_a_column():
    result = indent_text("  select 1\n        from foo\n  where x = 1")

    assert result == "select 1\nfrom foo\nwhere x = 1"


def test_query_with_parenthesized_list():
    source = "\n".join(
        [
            "select a,",
            "b",
            "from t",
            "where x in (",
            "1,",
            "2",
            ")",
            "order by a",
        ]
    )

    assert _columns(indent_text(source)) == [0, 4, 0, 0, 8, 8, 4, 0]


def test_then_block_and_end():
    assert _columns(indent_text("if x then\n  y := 1\nend if;")) == [0, 4, 0]


def test_keyword_line_opening_parenthesis():
    assert _columns(indent_text("SELECT (\n  1\n)")) == [0, 8, 4]


def test_plain_parenthesis_tracking():
    assert _columns(indent_text("values (\n1\n)")) == [0, 4, 0]


def test_indentation_never_goes_below_zero():
    document = Document(")\n    )")

    records = indent_buffer(document)

    assert document.text == ")\n)"
    assert [record.level_delta for record in records] == [-1, -1]
    assert all(record.new_indent == 0 for record in records)


def test_indent_offset_is_configurable():
    config = IndentConfig(indent_offset=2)

    assert indent_text("select a,\nb\nfrom t", config) == "select a,\n  b\nfrom t"


def test_indent_with_tabs():
    config = IndentConfig(indent_with_tabs=True, tab_width=4)

    assert indent_text("select a,\nb", config) == "select a,\n\tb"
    assert indentation_string(10, IndentConfig(indent_with_tabs=True)) == "\t  "
    assert indentation_string(3) == "   "


def test_existing_tab_indentation_is_measured_in_columns():
    document = Document("select a,\n\tb\nc")

    indent_line(document, IndentConfig(tab_width=4), line=2)

    assert document.line_text(2) == "    c"


def test_blank_lines_are_indented_by_default():
    assert indent_text("select a,\n\nb") == "select a,\n    \n    b"


def test_blank_lines_can_be_cleared():
    config = IndentConfig(indent_blank_lines=False)

    assert indent_text("select a,\n   \nb", config) == "select a,\n\n    b"


def test_buffer_pass_matches_indenting_each_line():
    text = "select a,\n\n  b\n   \nfrom t\n"
    document = Document(text)

    for line in range(document.line_count):
        indent_line(document, line=line)

    assert indent_text(text) == document.text


def test_crlf_line_endings_are_preserved():
    assert indent_text("select a,\r\nb\r\nfrom t") == "select a,\r\n    b\r\nfrom t"


def test_malformed_sql_is_indented_without_errors():
    source = "select ((( 'unterminated\nfrom t\n/* open comment\nwhere ))"

    result = indent_text(source)

    assert [line.lstrip() for line in result.split("\n")] == source.split("\n")


def test_indent_buffer_records_every_line():
    document = Document("select a,\n\nb")

    records = indent_buffer(document)

    assert records == [
        IndentRecord(line_number=0, level_delta=0, previous_indent=0, new_indent=0),
        IndentRecord(line_number=1, level_delta=1, previous_indent=0, new_indent=4),
        IndentRecord(line_number=2, level_delta=1, previous_indent=0, new_indent=4),
    ]


def test_indent_buffer_is_idempotent_on_example():
    once = indent_text("select a,\nb\nfrom t\nwhere x in (\n1\n)\n")

    assert indent_text(once) == once


def test_indent_line_defaults_to_cursor_line():
    document = Document("select a,\nb\nfrom t", cursor=10)

    record = indent_line(document)

    assert record == IndentRecord(line_number=1, level_delta=1, previous_indent=0, new_indent=4)
    assert document.text == "select a,\n    b\nfrom t"


def test_indent_line_only_touches_target_line():
    document = Document("   select a,\n b\n      from t")

    indent_line(document, line=2)

    assert document.text == "   select a,\n b\nfrom t"


def test_cursor_in_text_keeps_distance_from_end():
    document = Document("select 1\n      from foo", cursor=20)
    distance = len(document) - document.cursor

    indent_line(document)

    assert document.text == "select 1\nfrom foo"
    assert len(document) - document.cursor == distance
    assert document.text[document.cursor :] == "foo"


def test_cursor_in_indentation_moves_after_it():
    document = Document("select a,\n  b", cursor=11)

    indent_line(document)

    assert document.text == "select a,\n    b"
    assert document.cursor == document.indentation_end(1)


def test_cursor_in_correct_indentation_moves_after_it():
    document = Document("select a,\n    b", cursor=11)

    indent_line(document)

    assert document.text == "select a,\n    b"
    assert document.cursor == 14


def test_cursor_after_correct_indentation_stays():
    document = Document("select a,\n    b", cursor=15)

    indent_line(document)

    assert document.cursor == 15


def test_cursor_on_earlier_line_does_not_move():
    document = Document("select 1\n      from foo", cursor=3)

    indent_line(document, line=1)

    assert document.cursor == 3


def test_cursor_after_buffer_pass_stays_on_same_text():
    document = Document("select a,\nb\nfrom t\n   where x", cursor=0)
    document.cursor = len(document) - 1

    indent_buffer(document)

    assert document.text[document.cursor :] == "x"


def test_debug_logging_emits_diagnostics(caplog):
    caplog.set_level(logging.DEBUG, logger="sql_indent")
    document = Document("select a,\nb", cursor=10)

    indent_line(document, IndentConfig(debug_logging=True))

    assert "line 2: level delta 1, previous indent 0, new indent 4" in caplog.text


def test_debug_logging_is_silent_by_default(caplog):
    caplog.set_level(logging.DEBUG, logger="sql_indent")

    indent_text("select a,\nb")

    assert not [record for record in caplog.records if record.name == "sql_indent.indenter"]


def test_uppercase_custom_keywords_are_normalized():
    config = IndentConfig(recognized_keywords=frozenset({"WITH"}))

    assert indent_text("with x as\nfoo", config) == "with x as\n    foo"


def test_indent_file_returns_original_and_indented(tmp_path: Path):
    target = tmp_path / "query.sql"
    target.write_text("select a,\nb\n", encoding="utf-8")

    original, indented = indent_file(target)

    assert original == "select a,\nb\n"
    assert indented == "select a,\n    b\n    "


def test_indent_file_single_line(tmp_path: Path):
    target = tmp_path / "query.sql"
    target.write_text("select a,\nb\nc\n", encoding="utf-8")

    _, indented = indent_file(target, line=2)

    assert indented == "select a,\nb\nc\n"

    _, indented = indent_file(target, line=1)

    assert indented == "select a,\n    b\nc\n"


def test_indent_file_rejects_missing_line(tmp_path: Path):
    target = tmp_path / "query.sql"
    target.write_text("select 1", encoding="utf-8")

    with pytest.raises(IndentFileError, match="has no line 5"):
        indent_file(target, line=4)


def test_indent_file_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "query.sql"
    target.write_bytes(b"select '\xff'")

    with pytest.raises(IndentFileError, match="Invalid UTF-8"):
        indent_file(target)


def test_indent_file_rejects_invalid_config(tmp_path: Path):
    target = tmp_path / "query.sql"
    target.write_text("select 1", encoding="utf-8")

    with pytest.raises(IndentFileError):
        indent_file(target, IndentConfig(indent_offset=0))


def test_indent_line_rejects_invalid_config():
    document = Document("select a,\n\tb")

    with pytest.raises(ConfigError, match="tab_width"):
        indent_line(document, IndentConfig(tab_width=0), line=1)

    assert document.text == "select a,\n\tb"

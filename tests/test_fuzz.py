from __future__ import annotations

import os

import pytest
from sql_indent.config import IndentConfig
from sql_indent.document import Document
from sql_indent.indenter import indent_buffer, indent_text

atheris = pytest.importorskip("atheris")

PIECES = ["select", "from", "then", "(", ")", "'", '"', "`", "--", "#", "/*", "*/", "\\", "\n"]


def test_indent_text_with_fuzzed_input():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    processed = 0

    for _ in range(64):
        if provider.remaining_bytes() == 0:
            break
        text = provider.ConsumeUnicodeNoSurrogates(256)
        result = indent_text(text)
        assert result.count("\n") == text.count("\n")
        assert indent_text(result) == result
        processed += 1

    assert processed  # ensure we exercised the loop


def test_indent_buffer_with_fuzzed_tokens():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    pieces: list[str] = []

    while provider.remaining_bytes() > 0 and len(pieces) < 200:
        pieces.append(PIECES[provider.ConsumeIntInRange(0, len(PIECES) - 1)])
        if provider.ConsumeBool():
            pieces.append(" " * provider.ConsumeIntInRange(0, 4))

    document = Document("".join(pieces))
    config = IndentConfig(backslash_escapes=provider.ConsumeBool())
    records = indent_buffer(document, config)

    assert all(record.new_indent % config.indent_offset == 0 for record in records)
    assert all(record.new_indent >= 0 for record in records)

"""Tests for the starship.toml document builder."""

import pytest
import toml

from zsh_migrator.core.generator.structured_document import (
    TomlDocument,
    TomlTable,
    encode_key,
    encode_value,
)
from zsh_migrator.exceptions import ValidationError


def _valid_doc() -> TomlDocument:
    doc = TomlDocument(comment="test")
    doc.set("format", "$directory$character")
    return doc


def test_duplicate_key_in_table_rendered_once() -> None:
    """A key set twice in [battery] appears exactly once."""
    doc = _valid_doc()
    table = TomlTable("battery")
    table.set("style", "a")
    table.set("style", "a")
    doc.add_table(table)

    text = doc.validate(unaffected="live starship.toml unchanged")

    battery_lines = text.split("[battery]")[1].splitlines()
    assert sum(1 for line in battery_lines if line.startswith("style")) == 1
    assert len(doc.conflicts) == 1
    assert doc.conflicts[0].key == "style"


def test_first_value_wins_across_merged_tables() -> None:
    """Two fragments targeting one table merge; the first value is kept."""
    doc = _valid_doc()
    first = TomlTable("directory")
    first.set("style", "bold blue")
    second = TomlTable("directory")
    second.set("style", "red")
    second.set("truncation_length", 3)
    doc.add_table(first)
    doc.add_table(second)

    parsed = toml.loads(doc.validate(unaffected="x"))

    assert parsed["directory"] == {"style": "bold blue", "truncation_length": 3}
    assert doc.render().count("[directory]") == 1


def test_array_tables_are_appended() -> None:
    """[[name]] entries are never merged."""
    doc = _valid_doc()
    doc.add_table(TomlTable("battery"))
    doc.get_table("battery").set("format", "[$percentage]($style) ")
    for threshold in (15, 50):
        display = TomlTable("battery.display", array=True)
        display.set("threshold", threshold)
        doc.add_table(display)

    parsed = toml.loads(doc.validate(unaffected="x"))

    assert [d["threshold"] for d in parsed["battery"]["display"]] == [15, 50]


def test_validate_rejects_empty_value() -> None:
    """Empty strings are refused with the unaffected note."""
    doc = _valid_doc()
    doc.set("right_format", "")

    with pytest.raises(ValidationError) as exc_info:
        doc.validate(unaffected="live starship.toml unchanged")

    assert "right_format" in str(exc_info.value)
    assert "live starship.toml unchanged" in str(exc_info.value)


def test_validate_requires_module_in_format() -> None:
    """The top-level format must reference a module."""
    doc = TomlDocument()
    doc.set("format", "plain")

    with pytest.raises(ValidationError, match="format"):
        doc.validate(unaffected="x")


def test_encoding_helpers() -> None:
    """Keys are quoted only when needed; values use TOML literals."""
    assert encode_key("add_newline") == "add_newline"
    assert encode_key("$schema") == '"$schema"'
    assert encode_value(True) == "true"
    assert encode_value(3) == "3"
    assert encode_value('say "hi"') == '"say \\"hi\\""'
    assert encode_value(["a", "b"]) == '["a", "b"]'

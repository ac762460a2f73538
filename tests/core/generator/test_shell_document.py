"""Tests for the .zshrc document builder."""

from zsh_migrator.constants import PROMPT_INIT_LINE
from zsh_migrator.core.generator.shell_document import (
    SectionKind,
    ShellDocument,
)


def test_sections_render_in_slot_order() -> None:
    """Sections added out of order still render by kind."""
    doc = ShellDocument()
    doc.section(SectionKind.USER, "User").add_block(["alias a=b"])
    doc.section(SectionKind.HEADER).add_block(["# header"])
    doc.section(SectionKind.PATH, "PATH").add_block(["export PATH=x"])

    text = doc.render()

    assert text.index("# header") < text.index("# PATH")
    assert text.index("# PATH") < text.index("# User")


def test_prompt_init_line_is_last() -> None:
    """Nothing renders after the prompt init line."""
    doc = ShellDocument()
    doc.section(SectionKind.USER).add_block(["echo late"])

    text = doc.render()

    assert text.endswith(PROMPT_INIT_LINE + "\n")
    assert text.rstrip("\n").splitlines()[-1] == PROMPT_INIT_LINE


def test_empty_sections_are_skipped() -> None:
    """A section without blocks leaves no stray title."""
    doc = ShellDocument()
    doc.section(SectionKind.PLUGINS, "Plugins").add_block([])

    assert "# Plugins" not in doc.render()


def test_section_is_reused_per_kind() -> None:
    """Asking for the same kind twice returns one section."""
    doc = ShellDocument()
    first = doc.section(SectionKind.PATH, "PATH")
    second = doc.section(SectionKind.PATH)
    first.add_block(["a"])
    second.add_block(["b"])

    assert first is second
    assert first.render() == "# PATH\na\n\nb"

"""Typed builder for the generated .zshrc.

Sections are collected in any order and rendered in the fixed order of
``SectionKind``. The prompt init line is appended last by ``render`` and is
never part of a section, so nothing can follow it.
"""

from dataclasses import dataclass, field
from enum import IntEnum

from zsh_migrator.constants import PROMPT_INIT_LINE


class SectionKind(IntEnum):
    """Section slots in render order."""

    HEADER = 1
    HISTORY_OPTIONS = 2
    PATH = 3
    PLUGINS = 4
    TOOL_ALIASES = 5
    PRODUCTIVITY = 6
    USER = 7


@dataclass(slots=True)
class ShellSection:
    """A titled run of lines.

    Attributes:
        kind: Slot the section renders into
        title: Comment line written above the body (omitted if empty)
        blocks: Groups of lines; blocks are separated by one blank line

    """

    kind: SectionKind
    title: str = ""
    blocks: list[list[str]] = field(default_factory=list)

    def add_block(self, lines: list[str] | tuple[str, ...]) -> None:
        """Append a block, ignoring empty ones."""
        if lines:
            self.blocks.append(list(lines))

    def is_empty(self) -> bool:
        """Whether the section has any body lines."""
        return not self.blocks

    def render(self) -> str:
        """Render the title comment and blocks."""
        parts = ["\n".join(block) for block in self.blocks]
        body = "\n\n".join(parts)
        if self.title:
            return f"# {self.title}\n{body}"
        return body


class ShellDocument:
    """Ordered collection of shell sections plus the prompt init line."""

    def __init__(self, prompt_init_line: str = PROMPT_INIT_LINE) -> None:
        """Initialize an empty document.

        Args:
            prompt_init_line: Line that always ends the document

        """
        self.prompt_init_line = prompt_init_line
        self._sections: dict[SectionKind, ShellSection] = {}

    def section(self, kind: SectionKind, title: str = "") -> ShellSection:
        """Get the section for ``kind``, creating it on first use."""
        if kind not in self._sections:
            self._sections[kind] = ShellSection(kind=kind, title=title)
        return self._sections[kind]

    def render(self) -> str:
        """Render all non-empty sections in slot order.

        Returns:
            Document text ending with the prompt init line and one newline

        """
        rendered = [
            self._sections[kind].render()
            for kind in sorted(self._sections)
            if not self._sections[kind].is_empty()
        ]
        rendered.append(self.prompt_init_line)
        return "\n\n".join(rendered) + "\n"

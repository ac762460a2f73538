"""Rendering of the generated .zshrc and starship.toml.

``ConfigGenerator.generate`` is pure apart from reading the clock for the
single ``# Generated:`` comment in each document; nothing is written to
disk here. See ``commit`` for the atomic write path.
"""

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from zsh_migrator.constants import (
    DEFAULT_ZSH_PLUGINS_DIR,
    GENERATED_TIMESTAMP_PREFIX,
    STARSHIP_SCHEMA_URL,
    USER_SECTION_TITLE,
)
from zsh_migrator.core.generator.fragments import (
    MODULE_FRAGMENTS,
    ModuleFragment,
    build_left_format,
    build_right_format,
)
from zsh_migrator.core.generator.shell_document import (
    SectionKind,
    ShellDocument,
)
from zsh_migrator.core.generator.structured_document import TomlDocument
from zsh_migrator.core.generator.templates import (
    ALIAS_GROUPS,
    AUTOCOMPLETION_LINES,
    BASE_FUNCTIONS,
    CORRECTION_LINES,
    HISTORY_BASE_LINES,
    HISTORY_ENHANCED_LINES,
    PATH_LINES,
    PLUGIN_STANZAS,
    TOOL_ALIAS_STANZAS,
    PluginStanza,
    ToolAliasStanza,
)
from zsh_migrator.domain.features import Feature
from zsh_migrator.domain.types import (
    GeneratedDocument,
    GenerationResult,
    ParseResult,
)
from zsh_migrator.logger import get_logger
from zsh_migrator.utils.datetime_utils import get_current_datetime_local_iso

logger = get_logger(__name__)

FeatureFlags = Mapping[Feature, bool]


def render_plugin_stanza(stanza: PluginStanza) -> list[str]:
    """Shell lines loading one plugin if its directory exists."""
    base = f"$ZSH_PLUGINS_DIR/{stanza.directory}"
    lines = [f'if [[ -d "{base}" ]]; then']
    if len(stanza.scripts) == 1:
        lines.append(f'  source "{base}/{stanza.scripts[0]}"')
    else:
        for index, script in enumerate(stanza.scripts):
            keyword = "if" if index == 0 else "elif"
            lines.append(f'  {keyword} [[ -f "{base}/{script}" ]]; then')
            lines.append(f'    source "{base}/{script}"')
        lines.append("  fi")
    lines.extend(f"  {line}" for line in stanza.extra_lines)
    lines.append("fi")
    return lines


def render_tool_stanza(stanza: ToolAliasStanza) -> list[str]:
    """Shell lines defining tool aliases guarded by ``command -v``."""
    return [
        f"if command -v {stanza.binary} >/dev/null 2>&1; then",
        *(f"  {line}" for line in stanza.lines),
        "fi",
    ]


class ConfigGenerator:
    """Builds the shell rc and prompt config from flags and user entries."""

    def __init__(
        self,
        shell_path: Path,
        structured_path: Path,
        plugins_dir: str = DEFAULT_ZSH_PLUGINS_DIR,
        fragments: Sequence[ModuleFragment] = MODULE_FRAGMENTS,
        clock: Callable[[], str] = get_current_datetime_local_iso,
    ) -> None:
        """Initialize generator.

        Args:
            shell_path: Live .zshrc path the shell document targets
            structured_path: Live starship.toml path
            plugins_dir: Value exported as $ZSH_PLUGINS_DIR
            fragments: Prompt config fragments in output order
            clock: Source of the generation timestamp

        """
        self.shell_path = shell_path
        self.structured_path = structured_path
        self.plugins_dir = plugins_dir
        self.fragments = tuple(fragments)
        self.clock = clock

    def generate(
        self,
        flags: FeatureFlags,
        parsed: ParseResult,
        tools: Mapping[str, bool] | None = None,
    ) -> GenerationResult:
        """Render both documents.

        Args:
            flags: Resolved feature flags
            parsed: User entries extracted from the current rc file
            tools: Presence of optional tools keyed by executable name

        Returns:
            GenerationResult; the prompt config is already validated, the
            shell document is validated on commit

        Raises:
            ValidationError: If the prompt config breaks its invariants

        """
        generated_at = self.clock()
        shell_content = self.build_shell_document(
            flags, parsed, tools or {}, generated_at
        ).render()

        structured = self.build_structured_document(flags, generated_at)
        structured_content = structured.validate(
            unaffected=f"live {self.structured_path.name} unchanged"
        )
        if structured.conflicts:
            logger.debug(
                "Suppressed %d duplicate prompt config keys",
                len(structured.conflicts),
            )

        return GenerationResult(
            shell_doc=GeneratedDocument(self.shell_path, shell_content),
            structured_doc=GeneratedDocument(
                self.structured_path, structured_content, validated=True
            ),
        )

    def build_shell_document(
        self,
        flags: FeatureFlags,
        parsed: ParseResult,
        tools: Mapping[str, bool],
        generated_at: str,
    ) -> ShellDocument:
        """Assemble the .zshrc sections."""
        doc = ShellDocument()

        doc.section(SectionKind.HEADER).add_block(
            [
                "# Zsh configuration generated by zsh-migrator",
                f"{GENERATED_TIMESTAMP_PREFIX}{generated_at}",
                "# The previous configuration is kept in a migration snapshot.",
            ]
        )

        options = doc.section(
            SectionKind.HISTORY_OPTIONS, "History and options"
        )
        history = list(HISTORY_BASE_LINES)
        if flags.get(Feature.HISTORY_ENHANCED):
            history.extend(HISTORY_ENHANCED_LINES)
        options.add_block(history)
        if flags.get(Feature.AUTOCOMPLETION_ENHANCED):
            options.add_block(AUTOCOMPLETION_LINES)
        if flags.get(Feature.CORRECTION):
            options.add_block(CORRECTION_LINES)

        doc.section(SectionKind.PATH, "PATH").add_block(PATH_LINES)

        plugins = [
            stanza for stanza in PLUGIN_STANZAS if flags.get(stanza.feature)
        ]
        if plugins:
            section = doc.section(SectionKind.PLUGINS, "Plugins")
            section.add_block([f'export ZSH_PLUGINS_DIR="{self.plugins_dir}"'])
            for stanza in plugins:
                section.add_block(render_plugin_stanza(stanza))

        tool_section = doc.section(SectionKind.TOOL_ALIASES, "Tool aliases")
        for stanza in TOOL_ALIAS_STANZAS:
            if tools.get(stanza.binary):
                tool_section.add_block(render_tool_stanza(stanza))

        productivity = doc.section(SectionKind.PRODUCTIVITY, "Productivity")
        for group in ALIAS_GROUPS:
            if group.feature is None or flags.get(group.feature):
                productivity.add_block([f"# {group.title}", *group.lines])
        for body in BASE_FUNCTIONS.values():
            productivity.add_block(body.splitlines())

        user = doc.section(SectionKind.USER, USER_SECTION_TITLE)
        user.add_block([entry.raw_line for entry in parsed.aliases])
        user.add_block([entry.raw_line for entry in parsed.exports])
        for function in parsed.functions:
            user.add_block(function.body.splitlines())

        return doc

    def build_structured_document(
        self, flags: FeatureFlags, generated_at: str
    ) -> TomlDocument:
        """Assemble the starship.toml document from enabled fragments."""
        doc = TomlDocument(
            comment=(
                "Starship prompt configuration generated by zsh-migrator\n"
                f"{GENERATED_TIMESTAMP_PREFIX[2:]}{generated_at}"
            )
        )
        doc.set("$schema", STARSHIP_SCHEMA_URL)
        doc.set("add_newline", bool(flags.get(Feature.BLANK_LINE)))
        doc.set("format", build_left_format(flags))
        right_format = build_right_format(flags)
        if right_format:
            doc.set("right_format", right_format)

        for fragment in self.fragments:
            if not fragment.is_enabled(flags):
                continue
            for table in fragment.render(flags):
                doc.add_table(table)
        return doc

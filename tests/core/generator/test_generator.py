"""Tests for ConfigGenerator."""

from pathlib import Path

import pytest
import toml

from zsh_migrator.constants import GENERATED_TIMESTAMP_PREFIX, PROMPT_INIT_LINE
from zsh_migrator.core.generator import ConfigGenerator, ModuleFragment
from zsh_migrator.core.generator.fragments import StarshipModule
from zsh_migrator.core.generator.structured_document import TomlTable
from zsh_migrator.core.parser import ShellConfigParser
from zsh_migrator.core.resolver import resolve
from zsh_migrator.domain.features import Feature, default_flags
from zsh_migrator.domain.types import ParseResult

USER_RC = """\
alias ll='ls -la'
export EDITOR=vim
greet() {
  echo "hello $1"
}
"""


@pytest.fixture
def generator(tmp_path: Path) -> ConfigGenerator:
    """Generator with a frozen clock."""
    return ConfigGenerator(
        tmp_path / ".zshrc",
        tmp_path / "starship.toml",
        clock=lambda: "2026-10-18T14:25:01+00:00",
    )


@pytest.fixture
def parsed() -> ParseResult:
    """Parsed sample rc file."""
    return ShellConfigParser().parse(USER_RC)


def _strip_timestamp(text: str) -> str:
    return "\n".join(
        line
        for line in text.splitlines()
        if GENERATED_TIMESTAMP_PREFIX.strip("# ") not in line
    )


def test_user_entries_and_prompt_line(
    generator: ConfigGenerator, parsed: ParseResult
) -> None:
    """User entries are reproduced and the init line ends the file."""
    result = generator.generate(default_flags(), parsed, {"bat": True})
    shell = result.shell_doc.content

    assert "alias ll='ls -la'" in shell
    assert "export EDITOR=vim" in shell
    assert 'echo "hello $1"' in shell
    assert "alias cat='bat --paging=never'" in shell
    assert shell.rstrip("\n").splitlines()[-1] == PROMPT_INIT_LINE
    assert shell.count(PROMPT_INIT_LINE) == 1
    assert not result.shell_doc.validated
    assert result.structured_doc.validated


def test_generation_is_idempotent_modulo_timestamp(
    tmp_path: Path, parsed: ParseResult
) -> None:
    """Two runs differ only in the timestamp comment."""
    flags = resolve(default_flags())
    first = ConfigGenerator(
        tmp_path / ".zshrc", tmp_path / "s.toml", clock=lambda: "T1"
    ).generate(flags, parsed)
    second = ConfigGenerator(
        tmp_path / ".zshrc", tmp_path / "s.toml", clock=lambda: "T2"
    ).generate(flags, parsed)

    assert first.shell_doc.content != second.shell_doc.content
    assert _strip_timestamp(first.shell_doc.content) == _strip_timestamp(
        second.shell_doc.content
    )
    assert _strip_timestamp(first.structured_doc.content) == _strip_timestamp(
        second.structured_doc.content
    )


def test_base_functions_always_present(
    generator: ConfigGenerator,
) -> None:
    """Base functions are emitted even with every feature off."""
    result = generator.generate(default_flags(auto=False), ParseResult())

    assert "function mkcd()" in result.shell_doc.content
    assert "function deploy()" in result.shell_doc.content


def test_plugins_follow_flags(generator: ConfigGenerator) -> None:
    """Only enabled plugin stanzas are emitted."""
    flags = default_flags(auto=False)
    flags[Feature.AUTOSUGGESTIONS] = True

    shell = generator.generate(flags, ParseResult()).shell_doc.content

    assert "zsh-autosuggestions" in shell
    assert "zsh-syntax-highlighting" not in shell
    assert 'export ZSH_PLUGINS_DIR="$HOME/.oh-my-zsh/custom/plugins"' in shell


def test_structured_doc_parses_and_follows_flags(
    generator: ConfigGenerator,
) -> None:
    """The prompt config is valid TOML with right_format as resolved."""
    flags = default_flags()
    flags[Feature.TIME] = False
    flags[Feature.CMD_DURATION] = False
    flags[Feature.BATTERY] = False

    result = generator.generate(resolve(flags), ParseResult())
    parsed = toml.loads(result.structured_doc.content)

    assert "right_format" not in parsed
    assert "battery" not in parsed
    assert parsed["format"].endswith("$character")
    assert "$git_branch" in parsed["format"]


def test_all_features_render_valid_toml(generator: ConfigGenerator) -> None:
    """Everything enabled still yields one table per module."""
    result = generator.generate(resolve(default_flags()), ParseResult())
    parsed = toml.loads(result.structured_doc.content)

    assert parsed["right_format"] == "$cmd_duration$time$battery"
    assert len(parsed["battery"]["display"]) == 3
    assert result.structured_doc.content.count("[battery]") == 1


def test_fragment_with_own_renderer(tmp_path: Path) -> None:
    """A caller-supplied fragment renders through its own function."""

    def short_directory(_flags) -> list[TomlTable]:
        table = TomlTable("directory")
        table.set("truncation_length", 1)
        return [table]

    generator = ConfigGenerator(
        tmp_path / ".zshrc",
        tmp_path / "starship.toml",
        fragments=(
            ModuleFragment(StarshipModule.DIRECTORY, None, short_directory),
            ModuleFragment(StarshipModule.JOBS, Feature.JOBS),
        ),
    )
    flags = default_flags(auto=False)
    flags[Feature.JOBS] = True

    result = generator.generate(resolve(flags), ParseResult())
    parsed = toml.loads(result.structured_doc.content)

    assert parsed["directory"] == {"truncation_length": 1}
    assert "jobs" in parsed
    assert "battery" not in parsed

"""Starship module fragments.

Each ``StarshipModule`` has exactly one registered renderer; a fragment may
carry its own instead. ``MODULE_FRAGMENTS`` lists the fragments in output
order together with the flag gating each one; fragments without a flag are
always rendered (their tables still follow the flags, e.g. ``disabled =
true`` for language modules that are switched off).
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum

from zsh_migrator.core.generator.structured_document import TomlTable
from zsh_migrator.domain.features import Feature

FeatureFlags = Mapping[Feature, bool]


class StarshipModule(Enum):
    """Closed set of tables the generator knows how to render."""

    CHARACTER = "character"
    DIRECTORY = "directory"
    GIT_BRANCH = "git_branch"
    GIT_STATUS = "git_status"
    NODEJS = "nodejs"
    PYTHON = "python"
    DOCKER_CONTEXT = "docker_context"
    KUBERNETES = "kubernetes"
    AWS = "aws"
    TERRAFORM = "terraform"
    JOBS = "jobs"
    SHELL = "shell"
    USERNAME = "username"
    HOSTNAME = "hostname"
    PACKAGE = "package"
    CMD_DURATION = "cmd_duration"
    TIME = "time"
    BATTERY = "battery"
    BATTERY_DISPLAY = "battery.display"


Renderer = Callable[[FeatureFlags], list[TomlTable]]


@dataclass(frozen=True, slots=True)
class ModuleFragment:
    """A flag-gated chunk of the prompt config.

    ``renderer`` overrides the registered renderer for ``module``.
    """

    module: StarshipModule
    flag: Feature | None
    renderer: Renderer | None = None

    def is_enabled(self, flags: FeatureFlags) -> bool:
        """Whether the fragment renders for ``flags``."""
        return self.flag is None or bool(flags.get(self.flag, False))

    def render(self, flags: FeatureFlags) -> list[TomlTable]:
        """Render the fragment's tables."""
        render = self.renderer or RENDERERS[self.module]
        return render(flags)


def _on(flags: FeatureFlags, feature: Feature) -> bool:
    return bool(flags.get(feature, False))


def _table(name: str, **entries: object) -> TomlTable:
    table = TomlTable(name)
    for key, value in entries.items():
        table.set(key, value)  # type: ignore[arg-type]
    return table


def _character(flags: FeatureFlags) -> list[TomlTable]:
    if _on(flags, Feature.CUSTOM_SYMBOLS):
        return [
            _table(
                "character",
                success_symbol="[➜](bold green)",
                error_symbol="[✗](bold red)",
            )
        ]
    return [
        _table(
            "character",
            success_symbol="[❯](bold green)",
            error_symbol="[❯](bold red)",
        )
    ]


def _directory(flags: FeatureFlags) -> list[TomlTable]:
    table = TomlTable("directory")
    if _on(flags, Feature.TRUNC_DIR):
        table.set("truncation_length", 3)
        table.set("truncate_to_repo", True)
    else:
        table.set("truncation_length", 0)
    if _on(flags, Feature.COLOR_DIR):
        table.set("style", "bold blue")
    return [table]


def _git_branch(flags: FeatureFlags) -> list[TomlTable]:
    symbol = "🌱 " if _on(flags, Feature.CUSTOM_SYMBOLS) else "git:"
    return [_table("git_branch", symbol=symbol, style="bold yellow")]


def _git_status(_flags: FeatureFlags) -> list[TomlTable]:
    return [
        _table(
            "git_status",
            style="bold red",
            conflicted="🏳",
            ahead="⇡${count}",
            behind="⇣${count}",
            diverged="⇕⇡${ahead_count}⇣${behind_count}",
            untracked="?${count}",
            stashed="≡${count}",
            modified="!${count}",
            staged="+${count}",
            renamed="»${count}",
            deleted="✘${count}",
        )
    ]


def _language(name: str, feature: Feature, symbol: str) -> Renderer:
    def render(flags: FeatureFlags) -> list[TomlTable]:
        table = TomlTable(name)
        table.set("disabled", not _on(flags, feature))
        if _on(flags, feature) and _on(flags, Feature.LANG_SYMBOLS):
            table.set("symbol", symbol)
        return [table]

    return render


def _docker_context(flags: FeatureFlags) -> list[TomlTable]:
    return [
        _table(
            "docker_context",
            format="🐳 [$context]($style) ",
            style="blue bold",
            only_with_files=not _on(flags, Feature.DOCKER_DETAILED),
        )
    ]


def _kubernetes(flags: FeatureFlags) -> list[TomlTable]:
    fmt = "☸ [$context]($style) "
    if _on(flags, Feature.KUBERNETES_CONTEXT):
        fmt = "☸ [$context( \\($namespace\\))]($style) "
    return [
        _table("kubernetes", disabled=False, format=fmt, style="cyan bold")
    ]


def _aws(_flags: FeatureFlags) -> list[TomlTable]:
    return [
        _table(
            "aws",
            format="☁️  [$symbol$profile($region)]($style) ",
            style="bold yellow",
        )
    ]


def _terraform(_flags: FeatureFlags) -> list[TomlTable]:
    return [
        _table(
            "terraform",
            format="Terraform: [$workspace]($style) ",
            style="bold purple",
        )
    ]


def _jobs(_flags: FeatureFlags) -> list[TomlTable]:
    return [_table("jobs", symbol="✦", number_threshold=1, style="bold blue")]


def _shell(_flags: FeatureFlags) -> list[TomlTable]:
    return [
        _table(
            "shell",
            disabled=False,
            format="🐚 [$indicator]($style) ",
            style="bold cyan",
        )
    ]


def _username(_flags: FeatureFlags) -> list[TomlTable]:
    return [
        _table(
            "username",
            style_user="bold green",
            style_root="bold red",
            show_always=False,
        )
    ]


def _hostname(_flags: FeatureFlags) -> list[TomlTable]:
    return [_table("hostname", ssh_only=True, style="bold dimmed green")]


def _package(flags: FeatureFlags) -> list[TomlTable]:
    return [_table("package", disabled=not _on(flags, Feature.PKG_VERSION))]


def _cmd_duration(_flags: FeatureFlags) -> list[TomlTable]:
    return [
        _table(
            "cmd_duration",
            min_time=500,
            format="⏱ [$duration]($style) ",
            style="yellow bold",
        )
    ]


def _time(_flags: FeatureFlags) -> list[TomlTable]:
    return [
        _table(
            "time",
            disabled=False,
            format="🕒 [$time]($style) ",
            time_format="%H:%M",
            style="bold blue",
        )
    ]


def _battery(_flags: FeatureFlags) -> list[TomlTable]:
    return [
        _table(
            "battery",
            full_symbol="🔋 ",
            charging_symbol="⚡ ",
            discharging_symbol="🔌 ",
            format="[$symbol$percentage]($style) ",
        )
    ]


def _battery_display(_flags: FeatureFlags) -> list[TomlTable]:
    thresholds = ((15, "bold red"), (50, "bold yellow"), (100, "bold green"))
    tables = []
    for threshold, style in thresholds:
        table = TomlTable("battery.display", array=True)
        table.set("threshold", threshold)
        table.set("style", style)
        tables.append(table)
    return tables


RENDERERS: dict[StarshipModule, Renderer] = {
    StarshipModule.CHARACTER: _character,
    StarshipModule.DIRECTORY: _directory,
    StarshipModule.GIT_BRANCH: _git_branch,
    StarshipModule.GIT_STATUS: _git_status,
    StarshipModule.NODEJS: _language("nodejs", Feature.NODEJS, "⬢ "),
    StarshipModule.PYTHON: _language("python", Feature.PYTHON, "🐍 "),
    StarshipModule.DOCKER_CONTEXT: _docker_context,
    StarshipModule.KUBERNETES: _kubernetes,
    StarshipModule.AWS: _aws,
    StarshipModule.TERRAFORM: _terraform,
    StarshipModule.JOBS: _jobs,
    StarshipModule.SHELL: _shell,
    StarshipModule.USERNAME: _username,
    StarshipModule.HOSTNAME: _hostname,
    StarshipModule.PACKAGE: _package,
    StarshipModule.CMD_DURATION: _cmd_duration,
    StarshipModule.TIME: _time,
    StarshipModule.BATTERY: _battery,
    StarshipModule.BATTERY_DISPLAY: _battery_display,
}

_missing = set(StarshipModule) - set(RENDERERS)
if _missing:
    msg = f"No renderer for modules: {sorted(m.value for m in _missing)}"
    raise RuntimeError(msg)

MODULE_FRAGMENTS: tuple[ModuleFragment, ...] = (
    ModuleFragment(StarshipModule.CHARACTER, None),
    ModuleFragment(StarshipModule.DIRECTORY, None),
    ModuleFragment(StarshipModule.GIT_BRANCH, Feature.GIT),
    ModuleFragment(StarshipModule.GIT_STATUS, Feature.GIT),
    ModuleFragment(StarshipModule.NODEJS, None),
    ModuleFragment(StarshipModule.PYTHON, None),
    ModuleFragment(StarshipModule.DOCKER_CONTEXT, Feature.DOCKER),
    ModuleFragment(StarshipModule.KUBERNETES, Feature.KUBERNETES),
    ModuleFragment(StarshipModule.AWS, Feature.AWS),
    ModuleFragment(StarshipModule.TERRAFORM, Feature.TERRAFORM),
    ModuleFragment(StarshipModule.JOBS, Feature.JOBS),
    ModuleFragment(StarshipModule.SHELL, Feature.SHELL),
    ModuleFragment(StarshipModule.USERNAME, Feature.USER_SMART),
    ModuleFragment(StarshipModule.HOSTNAME, Feature.HOST_SMART),
    ModuleFragment(StarshipModule.PACKAGE, None),
    ModuleFragment(StarshipModule.CMD_DURATION, Feature.CMD_DURATION),
    ModuleFragment(StarshipModule.TIME, Feature.TIME),
    ModuleFragment(StarshipModule.BATTERY, Feature.BATTERY),
    ModuleFragment(StarshipModule.BATTERY_DISPLAY, Feature.BATTERY_SMART),
)

# Left prompt order: (flag or None, format variable)
LEFT_FORMAT: tuple[tuple[Feature | None, str], ...] = (
    (None, "$username"),
    (None, "$hostname"),
    (None, "$directory"),
    (Feature.GIT, "$git_branch"),
    (Feature.GIT, "$git_status"),
    (Feature.NODEJS, "$nodejs"),
    (Feature.PYTHON, "$python"),
    (Feature.DOCKER, "$docker_context"),
    (Feature.KUBERNETES, "$kubernetes"),
    (Feature.AWS, "$aws"),
    (Feature.TERRAFORM, "$terraform"),
    (Feature.JOBS, "$jobs"),
    (Feature.SHELL, "$shell"),
)

RIGHT_FORMAT: tuple[tuple[Feature, str], ...] = (
    (Feature.CMD_DURATION, "$cmd_duration"),
    (Feature.TIME, "$time"),
    (Feature.BATTERY, "$battery"),
)


def build_left_format(flags: FeatureFlags) -> str:
    """Top-level ``format`` string for the enabled modules."""
    parts = [
        variable
        for feature, variable in LEFT_FORMAT
        if feature is None or _on(flags, feature)
    ]
    if _on(flags, Feature.MULTILINE):
        parts.append("$line_break")
    parts.append("$character")
    return "".join(parts)


def build_right_format(flags: FeatureFlags) -> str:
    """Top-level ``right_format`` string, empty when nothing is enabled."""
    if not _on(flags, Feature.RIGHT_FORMAT):
        return ""
    return "".join(
        variable for feature, variable in RIGHT_FORMAT if _on(flags, feature)
    )

"""Feature flags and the static dependency graph between them.

Flags are selected by the user (or by auto mode), adjusted by CLI
overrides, then made consistent by ``core.resolver.resolve`` before the
generator reads them.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum


class Feature(Enum):
    """Closed set of feature flag ids."""

    # Plugins loaded by the generated .zshrc
    AUTOSUGGESTIONS = "autosuggestions"
    SYNTAX_HIGHLIGHTING = "syntax_highlighting"
    COMPLETIONS = "completions"
    HISTORY_SUBSTRING_SEARCH = "history_substring_search"
    YOU_SHOULD_USE = "you_should_use"

    # Starship prompt modules
    BLANK_LINE = "blank_line"
    GIT = "git"
    NODEJS = "nodejs"
    PYTHON = "python"
    DOCKER = "docker"
    DOCKER_DETAILED = "docker_detailed"
    CUSTOM_SYMBOLS = "custom_symbols"
    LANG_SYMBOLS = "lang_symbols"
    MULTILINE = "multiline"
    TRUNC_DIR = "trunc_dir"
    COLOR_DIR = "color_dir"
    CMD_DURATION = "cmd_duration"
    USER_SMART = "user_smart"
    HOST_SMART = "host_smart"
    BATTERY = "battery"
    BATTERY_SMART = "battery_smart"
    JOBS = "jobs"
    TIME = "time"
    PKG_VERSION = "pkg_version"
    SHELL = "shell"
    AWS = "aws"
    KUBERNETES = "kubernetes"
    KUBERNETES_CONTEXT = "kubernetes_context"
    RIGHT_FORMAT = "right_format"
    TERRAFORM = "terraform"

    # Zsh behaviour
    HISTORY_ENHANCED = "history_enhanced"
    AUTOCOMPLETION_ENHANCED = "autocompletion_enhanced"
    CORRECTION = "correction"
    PRODUCTIVITY_ALIASES = "productivity_aliases"


PLUGIN_FEATURES: tuple[Feature, ...] = (
    Feature.AUTOSUGGESTIONS,
    Feature.SYNTAX_HIGHLIGHTING,
    Feature.COMPLETIONS,
    Feature.HISTORY_SUBSTRING_SEARCH,
    Feature.YOU_SHOULD_USE,
)


@dataclass(frozen=True, slots=True)
class DependencyEdge:
    """``child`` may only be enabled while ``parent`` is enabled."""

    child: Feature
    parent: Feature


@dataclass(frozen=True, slots=True)
class ContainerRule:
    """``container`` is disabled once every one of ``children`` is."""

    container: Feature
    children: tuple[Feature, ...]


DEPENDENCY_EDGES: tuple[DependencyEdge, ...] = (
    DependencyEdge(Feature.CMD_DURATION, Feature.RIGHT_FORMAT),
    DependencyEdge(Feature.TIME, Feature.RIGHT_FORMAT),
    DependencyEdge(Feature.BATTERY, Feature.RIGHT_FORMAT),
    DependencyEdge(Feature.KUBERNETES_CONTEXT, Feature.KUBERNETES),
    DependencyEdge(Feature.DOCKER_DETAILED, Feature.DOCKER),
    DependencyEdge(Feature.BATTERY_SMART, Feature.BATTERY),
)

CONTAINER_RULES: tuple[ContainerRule, ...] = (
    ContainerRule(
        Feature.RIGHT_FORMAT,
        (Feature.CMD_DURATION, Feature.TIME, Feature.BATTERY),
    ),
)


def default_flags(*, auto: bool = True) -> dict[Feature, bool]:
    """Initial flag selection.

    Auto mode turns every feature on, which is what a non-interactive run
    gets. Without it everything starts off and the user opts in with
    ``--enable``.
    """
    return dict.fromkeys(Feature, auto)


def apply_overrides(
    flags: Mapping[Feature, bool],
    enable: Iterable[str] = (),
    disable: Iterable[str] = (),
) -> tuple[dict[Feature, bool], list[str]]:
    """Apply ``--enable``/``--disable`` ids on top of a selection.

    Disables win over enables when an id appears in both.

    Args:
        flags: Starting selection
        enable: Feature ids to switch on
        disable: Feature ids to switch off

    Returns:
        Tuple of (new flags, ids that matched no feature)

    """
    updated = dict(flags)
    unknown: list[str] = []
    for value, state in [(v, True) for v in enable] + [
        (v, False) for v in disable
    ]:
        try:
            updated[Feature(value.strip())] = state
        except ValueError:
            unknown.append(value)
    return updated, unknown


def split_feature_ids(values: Iterable[str] | None) -> list[str]:
    """Flatten comma-separated CLI values into individual ids."""
    ids: list[str] = []
    for value in values or ():
        ids.extend(part.strip() for part in value.split(",") if part.strip())
    return ids

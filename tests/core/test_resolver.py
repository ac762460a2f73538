"""Tests for feature flag resolution."""

from types import MappingProxyType

from zsh_migrator.core.resolver import find_unknown_references, resolve
from zsh_migrator.domain.features import (
    CONTAINER_RULES,
    DEPENDENCY_EDGES,
    Feature,
    default_flags,
)


def _is_fixed_point(flags) -> bool:
    for edge in DEPENDENCY_EDGES:
        if flags[edge.child] and not flags[edge.parent]:
            return False
    for rule in CONTAINER_RULES:
        if flags[rule.container] and not any(
            flags[child] for child in rule.children
        ):
            return False
    return True


def test_container_disabled_when_children_off() -> None:
    """right_format turns off once all of its modules are off."""
    flags = {
        Feature.RIGHT_FORMAT: True,
        Feature.CMD_DURATION: False,
        Feature.TIME: False,
        Feature.BATTERY: False,
    }

    resolved = resolve(flags)

    assert resolved[Feature.RIGHT_FORMAT] is False


def test_child_disabled_with_parent_and_cascades() -> None:
    """Disabling a parent propagates through the graph to a fixed point."""
    flags = default_flags(auto=True)
    flags[Feature.RIGHT_FORMAT] = False

    resolved = resolve(flags)

    assert resolved[Feature.BATTERY] is False
    assert resolved[Feature.BATTERY_SMART] is False
    assert resolved[Feature.TIME] is False
    assert resolved[Feature.CMD_DURATION] is False
    assert resolved[Feature.GIT] is True


def test_all_enabled_is_unchanged() -> None:
    """A consistent selection is returned as is."""
    flags = default_flags(auto=True)

    assert dict(resolve(flags)) == flags


def test_resolution_reaches_fixed_point() -> None:
    """No rule can fire again after resolution."""
    flags = default_flags(auto=False)
    flags[Feature.KUBERNETES_CONTEXT] = True
    flags[Feature.BATTERY_SMART] = True
    flags[Feature.DOCKER_DETAILED] = True
    flags[Feature.RIGHT_FORMAT] = True

    resolved = resolve(flags)

    assert _is_fixed_point(resolved)
    assert dict(resolve(resolved)) == dict(resolved)
    assert not any(resolved.values())


def test_result_is_read_only_and_input_untouched() -> None:
    """Resolution never mutates the caller's mapping."""
    flags = {Feature.RIGHT_FORMAT: True, Feature.TIME: False}

    resolved = resolve(flags)

    assert flags[Feature.RIGHT_FORMAT] is True
    assert isinstance(resolved, MappingProxyType)


def test_rules_with_missing_flags_are_skipped() -> None:
    """Edges referencing unselected flags are ignored, not errors."""
    flags = {Feature.TIME: True}

    resolved = resolve(flags)

    assert dict(resolved) == {Feature.TIME: True}
    assert Feature.RIGHT_FORMAT in find_unknown_references(flags)

"""Tests for flag selection helpers."""

from zsh_migrator.domain.features import (
    Feature,
    apply_overrides,
    default_flags,
    split_feature_ids,
)


def test_default_flags_auto_and_manual() -> None:
    """Auto mode enables everything, manual mode nothing."""
    assert all(default_flags(auto=True).values())
    assert not any(default_flags(auto=False).values())
    assert set(default_flags()) == set(Feature)


def test_apply_overrides_disable_wins() -> None:
    """An id in both lists ends up disabled; unknown ids are reported."""
    flags, unknown = apply_overrides(
        default_flags(auto=False),
        enable=["git", "time", "bogus"],
        disable=["time"],
    )

    assert flags[Feature.GIT] is True
    assert flags[Feature.TIME] is False
    assert unknown == ["bogus"]


def test_split_feature_ids() -> None:
    """Comma-separated and repeated values are flattened."""
    assert split_feature_ids(["git,time", " battery ", ""]) == [
        "git",
        "time",
        "battery",
    ]
    assert split_feature_ids(None) == []

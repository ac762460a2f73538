"""Tests for optional tool detection."""

from zsh_migrator.core.tools import TOOL_BINARIES, detect_tools, no_tools


def test_detect_tools_uses_lookup() -> None:
    """Presence follows the injected lookup function."""
    installed = {"bat", "rg"}

    found = detect_tools(
        which=lambda name: f"/usr/bin/{name}" if name in installed else None
    )

    assert found == {
        "eza": False,
        "bat": True,
        "fd": False,
        "rg": True,
        "fzf": False,
    }


def test_no_tools_reports_everything_absent() -> None:
    """--skip-tools behaves as if nothing were installed."""
    assert no_tools() == dict.fromkeys(TOOL_BINARIES, False)

"""Tests for fzfkit.snapshot -- capture once, restore with absent/empty distinction."""

from __future__ import annotations

import pytest

from fzfkit.exceptions import SnapshotError
from fzfkit.session import RestoreVariable, SaveVariable
from fzfkit.snapshot import TRACKED_VARIABLES, EnvSnapshot


def test_tracked_variables() -> None:
    assert TRACKED_VARIABLES == (
        "FZF_DEFAULT_COMMAND",
        "FZF_CTRL_T_COMMAND",
        "FZF_ALT_C_COMMAND",
    )


class TestCapture:
    def test_absent_is_none_and_empty_is_empty(self) -> None:
        snapshot = EnvSnapshot()
        snapshot.capture({"FZF_CTRL_T_COMMAND": ""})
        assert snapshot.values == {
            "FZF_DEFAULT_COMMAND": None,
            "FZF_CTRL_T_COMMAND": "",
            "FZF_ALT_C_COMMAND": None,
        }

    def test_capture_twice_raises(self) -> None:
        snapshot = EnvSnapshot()
        snapshot.capture({})
        with pytest.raises(SnapshotError):
            snapshot.capture({})

    def test_values_before_capture_raises(self) -> None:
        with pytest.raises(SnapshotError):
            EnvSnapshot().values

    def test_capture_is_not_affected_by_later_changes(self) -> None:
        env = {"FZF_DEFAULT_COMMAND": "find ."}
        snapshot = EnvSnapshot()
        snapshot.capture(env)
        env["FZF_DEFAULT_COMMAND"] = "fd"
        assert snapshot.values["FZF_DEFAULT_COMMAND"] == "find ."


class TestRestore:
    def test_restore_round_trip(self) -> None:
        original = {"FZF_DEFAULT_COMMAND": "rg --files", "FZF_CTRL_T_COMMAND": "", "OTHER": "1"}
        env = dict(original)
        snapshot = EnvSnapshot()
        snapshot.capture(env)

        env["FZF_DEFAULT_COMMAND"] = "fd"
        env["FZF_CTRL_T_COMMAND"] = "fd"
        env["FZF_ALT_C_COMMAND"] = "fd --type=d"
        snapshot.restore(env)

        assert env == original
        assert "FZF_ALT_C_COMMAND" not in env

    def test_restore_absent_removes_instead_of_emptying(self) -> None:
        env: dict[str, str] = {}
        snapshot = EnvSnapshot()
        snapshot.capture(env)
        env["FZF_DEFAULT_COMMAND"] = "fd"
        snapshot.restore(env)
        assert "FZF_DEFAULT_COMMAND" not in env

    def test_restore_before_capture_raises(self) -> None:
        with pytest.raises(SnapshotError):
            EnvSnapshot().restore({})

    def test_restore_operations(self) -> None:
        snapshot = EnvSnapshot()
        snapshot.capture({"FZF_ALT_C_COMMAND": "find . -type d"})
        assert snapshot.restore_operations() == [
            RestoreVariable("FZF_DEFAULT_COMMAND", None),
            RestoreVariable("FZF_CTRL_T_COMMAND", None),
            RestoreVariable("FZF_ALT_C_COMMAND", "find . -type d"),
        ]

    def test_save_operations_follow_capture_order(self) -> None:
        snapshot = EnvSnapshot()
        snapshot.capture({}, ["B", "A"])
        assert snapshot.save_operations() == [SaveVariable("B"), SaveVariable("A")]

    def test_save_operations_before_capture_raises(self) -> None:
        with pytest.raises(SnapshotError):
            EnvSnapshot().save_operations()

"""Shared test fixtures for fzfkit.

Provides fake collaborator tools, isolated config environments, scratch
shell sessions, and a CLI runner. These fixtures are automatically
discovered by pytest and available to all test modules.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

import pytest

from fzfkit.models import CompanionConfig, GlobalConfig
from fzfkit.output import reset_output
from fzfkit.plugins import FzfPlugin
from fzfkit.session import ShellSession
from fzfkit.tools import (
    FileEnumerator,
    Selector,
    SelectorInvocation,
    SelectorResult,
    Toolchain,
)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation. The
    ``fzfkit`` logger is put back to propagating so ``caplog`` sees records
    after a CLI test installed its own handler.
    """
    yield
    reset_output()
    logger = logging.getLogger("fzfkit")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


class FakeSelector(Selector):
    """Records invocations instead of running fzf."""

    def __init__(self, result: Optional[SelectorResult] = None) -> None:
        super().__init__("fzf")
        self.invocations: list[SelectorInvocation] = []
        self.result = result or SelectorResult(0, ["picked"])

    def run(
        self,
        invocation: SelectorInvocation,
        candidates: Optional[Iterable[str]] = None,
    ) -> SelectorResult:
        self.invocations.append(invocation)
        return self.result


class FakeEnumerator(FileEnumerator):
    """Records enumerate calls instead of running fd."""

    def __init__(self) -> None:
        super().__init__("fd")
        self.calls: list[tuple[str, Optional[str]]] = []

    def enumerate(self, base_dir: str, type_filter: Optional[str] = None) -> list[str]:
        self.calls.append((base_dir, type_filter))
        return [f"{base_dir}/one", f"{base_dir}/two"]


@pytest.fixture
def fake_selector() -> FakeSelector:
    return FakeSelector()


@pytest.fixture
def fake_enumerator() -> FakeEnumerator:
    return FakeEnumerator()


@pytest.fixture
def tools(fake_selector: FakeSelector, fake_enumerator: FakeEnumerator) -> Toolchain:
    """Stock toolchain with fd and fzf replaced by recording fakes."""
    return Toolchain(enumerator=fake_enumerator, selector=fake_selector)


# ---------------------------------------------------------------------------
# Plugin and session fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def config() -> GlobalConfig:
    """Default config with the companion script disabled."""
    return GlobalConfig(companion=CompanionConfig(enabled=False))


@pytest.fixture
def plugin(config: GlobalConfig, tools: Toolchain) -> FzfPlugin:
    return FzfPlugin(config, tools)


@pytest.fixture
def environ() -> dict[str, str]:
    """A small environment where the fzf variables are unset."""
    return {"HOME": "/home/tester", "PATH": "/usr/bin:/bin"}


@pytest.fixture
def session(environ: dict[str, str]) -> ShellSession:
    return ShellSession(environ=environ)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of
    tmp_path, forces the XDG layout, and clears fzfkit and fzf
    environment variables so that tests never see real user state.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("fzfkit.config._is_xdg_platform", lambda: True)

    for var in [
        "FZFKIT_SHELL",
        "FZF_DEFAULT_COMMAND",
        "FZF_CTRL_T_COMMAND",
        "FZF_ALT_C_COMMAND",
        "FZF_CTRL_T_OPTS",
        "FZF_ALT_C_OPTS",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()

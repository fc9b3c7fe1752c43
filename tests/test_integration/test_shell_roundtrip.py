"""Evaluate the emitted init script in a real shell and unload it again."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from fzfkit.app import app

DEFAULT_COMMAND = "fd --hidden --strip-cwd-prefix --exclude .git"

# $1 is the path of the generated script. FZF_DEFAULT_COMMAND is set but not
# exported, so only the shell itself can see it.
DRIVER = r"""
FZF_DEFAULT_COMMAND="rg --files"
export FZF_CTRL_T_COMMAND=""
unset FZF_ALT_C_COMMAND
eval "$(cat "$1")"
eval "$(cat "$1")"
printf 'loaded=%s\n' "$FZF_DEFAULT_COMMAND"
if alias fp > /dev/null 2>&1; then printf 'alias_loaded=fp\n'; fi
fzf_plugin_unload
fzf_plugin_unload 2> /dev/null
printf 'default=[%s]\n' "${FZF_DEFAULT_COMMAND-<unset>}"
printf 'ctrl_t=[%s]\n' "${FZF_CTRL_T_COMMAND-<unset>}"
printf 'alt_c=[%s]\n' "${FZF_ALT_C_COMMAND-<unset>}"
for name in _fzf_compgen_path _fzf_compgen_dir _fzf_comprun fzf_plugin_unload; do
    if typeset -f "$name" > /dev/null; then printf 'function=%s\n' "$name"; fi
done
if alias fp > /dev/null 2>&1; then printf 'alias=fp\n'; fi
if [ -n "${_fzfkit_saved_FZF_DEFAULT_COMMAND_set+x}" ]; then printf 'leftover\n'; fi
true
"""

SHELLS = [
    pytest.param(
        "bash",
        ["--norc", "--noprofile"],
        marks=pytest.mark.skipif(shutil.which("bash") is None, reason="bash not installed"),
    ),
    pytest.param(
        "zsh",
        ["-f"],
        marks=pytest.mark.skipif(shutil.which("zsh") is None, reason="zsh not installed"),
    ),
]


def _generate_script(cli_runner, shell: str, path: Path) -> None:
    for key, value in [("companion.enabled", "false"), ("aliases.fp", "fzf -m")]:
        result = cli_runner.invoke(app, ["config", "set", key, value])
        assert result.exit_code == 0, result.output
    result = cli_runner.invoke(app, ["init", shell])
    assert result.exit_code == 0, result.output
    path.write_text(result.stdout)


def _run(shell: str, flags: list[str], script: Path, home: Path) -> list[str]:
    env = {"PATH": os.environ.get("PATH", "/usr/bin:/bin"), "HOME": str(home)}
    result = subprocess.run(
        [shutil.which(shell), *flags, "-c", DRIVER, "fzfkit-test", str(script)],
        env=env,
        capture_output=True,
        text=True,
        timeout=30,
    )
    assert result.returncode == 0, result.stderr
    return result.stdout.splitlines()


@pytest.mark.parametrize(("shell", "flags"), SHELLS)
def test_load_then_unload_restores_shell(
    shell: str, flags: list[str], cli_runner, isolated_config: Path
) -> None:
    script = isolated_config / f"init.{shell}"
    _generate_script(cli_runner, shell, script)

    lines = _run(shell, flags, script, isolated_config)

    assert lines == [
        f"loaded={DEFAULT_COMMAND}",
        "alias_loaded=fp",
        "default=[rg --files]",
        "ctrl_t=[]",
        "alt_c=[<unset>]",
    ]

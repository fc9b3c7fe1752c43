"""Tests for fzfkit.render -- zsh and bash source generation."""

from __future__ import annotations

import pytest

from fzfkit.models import ShellKind
from fzfkit.plugins import FzfPlugin
from fzfkit.plugins.fzf.plugin import UNLOAD_FUNCTION
from fzfkit.render import render_function, render_operation, render_script
from fzfkit.session import (
    DefineAlias,
    Export,
    RemoveAlias,
    RemoveFunction,
    RestoreVariable,
    RunCommand,
    SaveVariable,
    ShellFunction,
    ShellSession,
    Source,
    Unset,
)


class TestOperations:
    @pytest.mark.parametrize("shell", list(ShellKind))
    def test_export_is_quoted(self, shell: ShellKind) -> None:
        op = Export("FZF_ALT_C_OPTS", "--preview 'eza --tree {}'")
        assert render_operation(op, shell) == (
            "export FZF_ALT_C_OPTS='--preview '\"'\"'eza --tree {}'\"'\"''"
        )

    def test_export_simple_value(self) -> None:
        assert render_operation(Export("A", "fd"), ShellKind.ZSH) == "export A=fd"

    def test_unset_never_assigns_empty(self) -> None:
        assert render_operation(Unset("FZF_DEFAULT_COMMAND"), ShellKind.BASH) == (
            "unset FZF_DEFAULT_COMMAND"
        )

    def test_remove_function_zsh(self) -> None:
        assert render_operation(RemoveFunction("_fzf_comprun"), ShellKind.ZSH) == (
            "(( ${+functions[_fzf_comprun]} )) && unfunction _fzf_comprun"
        )

    def test_remove_function_bash(self) -> None:
        assert render_operation(RemoveFunction("_fzf_comprun"), ShellKind.BASH) == (
            "declare -F _fzf_comprun > /dev/null && unset -f _fzf_comprun"
        )

    def test_alias_operations(self) -> None:
        assert render_operation(DefineAlias("fp", "fzf -m"), ShellKind.ZSH) == "alias fp='fzf -m'"
        assert render_operation(RemoveAlias("fp"), ShellKind.ZSH) == "unalias fp 2> /dev/null"

    def test_source_and_run(self) -> None:
        assert render_operation(Source("/a b/fzf-git.sh"), ShellKind.BASH) == (
            "source '/a b/fzf-git.sh'"
        )
        op = RunCommand(("git", "submodule", "init"), "/repo")
        assert render_operation(op, ShellKind.ZSH) == "(cd /repo && git submodule init)"
        assert render_operation(RunCommand(("true",)), ShellKind.ZSH) == "true"

    @pytest.mark.parametrize("shell", list(ShellKind))
    def test_save_variable_reads_the_shell(self, shell: ShellKind) -> None:
        assert render_operation(SaveVariable("FZF_DEFAULT_COMMAND"), shell) == (
            "_fzfkit_saved_FZF_DEFAULT_COMMAND_set=${FZF_DEFAULT_COMMAND+x}; "
            "_fzfkit_saved_FZF_DEFAULT_COMMAND=${FZF_DEFAULT_COMMAND-}"
        )

    def test_restore_variable_ignores_in_process_value(self) -> None:
        rendered = render_operation(RestoreVariable("FZF_ALT_C_COMMAND", "find ."), ShellKind.BASH)
        assert rendered.splitlines() == [
            'if [ -n "${_fzfkit_saved_FZF_ALT_C_COMMAND_set-}" ]; then',
            '    FZF_ALT_C_COMMAND="$_fzfkit_saved_FZF_ALT_C_COMMAND"',
            "else",
            "    unset FZF_ALT_C_COMMAND",
            "fi",
            "unset _fzfkit_saved_FZF_ALT_C_COMMAND _fzfkit_saved_FZF_ALT_C_COMMAND_set",
        ]

    def test_unknown_operation_raises(self) -> None:
        with pytest.raises(TypeError):
            render_operation(object(), ShellKind.ZSH)  # type: ignore[arg-type]


class TestFunctions:
    def test_string_body_is_indented(self) -> None:
        function = ShellFunction("_fzf_compgen_dir", 'fd --type=d . "$1"')
        assert render_function(function, ShellKind.ZSH) == (
            '_fzf_compgen_dir() {\n    fd --type=d . "$1"\n}'
        )

    def test_operation_body(self) -> None:
        function = ShellFunction("undo", [Unset("X"), RemoveFunction("undo")])
        assert render_function(function, ShellKind.BASH) == (
            "undo() {\n"
            "    unset X\n"
            "    declare -F undo > /dev/null && unset -f undo\n"
            "}"
        )

    def test_empty_body_gets_noop(self) -> None:
        assert render_function(ShellFunction("nothing", []), ShellKind.ZSH) == (
            "nothing() {\n    :\n}"
        )


class TestScript:
    def test_plugin_load_script(self, plugin: FzfPlugin, session: ShellSession) -> None:
        plugin.initialize(session)
        script = render_script(session.journal, ShellKind.ZSH)

        assert script.startswith("# Generated by fzfkit")
        assert script.endswith("\n")
        assert (
            "export FZF_DEFAULT_COMMAND='fd --hidden --strip-cwd-prefix --exclude .git'" in script
        )
        assert "_fzf_compgen_path() {" in script
        assert "_fzf_comprun() {" in script
        assert f"{UNLOAD_FUNCTION}() {{" in script
        assert "_fzfkit_saved_FZF_DEFAULT_COMMAND_set=${FZF_DEFAULT_COMMAND+x}" in script
        assert script.index("_fzfkit_saved_FZF_DEFAULT_COMMAND_set=") < script.index(
            "export FZF_DEFAULT_COMMAND="
        )
        assert f"(( ${{+functions[{UNLOAD_FUNCTION}]}} )) && unfunction {UNLOAD_FUNCTION}" in script

    def test_previous_value_is_not_baked_in(self, plugin: FzfPlugin) -> None:
        session = ShellSession(environ={"FZF_DEFAULT_COMMAND": "rg --files"})
        plugin.initialize(session)
        script = render_script(session.journal, ShellKind.BASH)
        assert "rg --files" not in script
        assert 'FZF_DEFAULT_COMMAND="$_fzfkit_saved_FZF_DEFAULT_COMMAND"' in script

    @pytest.mark.parametrize("shell", list(ShellKind))
    def test_single_blank_line_between_functions(
        self, plugin: FzfPlugin, session: ShellSession, shell: ShellKind
    ) -> None:
        plugin.initialize(session)
        script = render_script(session.journal, shell, guard=UNLOAD_FUNCTION)
        assert "\n\n\n" not in script
        assert "}\n\n    _fzf_compgen_dir() {" in script

    def test_guard_wraps_script(self) -> None:
        script = render_script([Export("A", "1")], ShellKind.ZSH, guard="fzf_plugin_unload")
        lines = script.splitlines()
        assert lines[1] == "if ! typeset -f fzf_plugin_unload > /dev/null; then"
        assert lines[2] == "    export A=1"
        assert lines[3] == "fi"

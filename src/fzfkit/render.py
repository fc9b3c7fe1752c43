"""Render session operations as zsh or bash source text.

This is the bridge between the in-process session model and a real shell:
``fzfkit init`` loads the plugin into a scratch
:class:`~fzfkit.session.ShellSession` and prints its journal through
:func:`render_script`, so that::

    eval "$(fzfkit init zsh)"

performs the same load in the user's shell. Function bodies given as
operation lists (such as ``fzf_plugin_unload``) are rendered recursively.

All values are quoted with :func:`shlex.quote`. Overwritten variables are
saved and restored by the shell itself through ``_fzfkit_saved_NAME`` helper
variables, so a value that was set but never exported survives a load and
unload, and a variable absent before load is unset again instead of being
left empty.
"""

from __future__ import annotations

import shlex
from collections.abc import Iterable
from typing import Optional

from fzfkit import __version__
from fzfkit.models import ShellKind
from fzfkit.session import (
    DefineAlias,
    DefineFunction,
    Export,
    Operation,
    RemoveAlias,
    RemoveFunction,
    RestoreVariable,
    RunCommand,
    SaveVariable,
    ShellFunction,
    Source,
    Unset,
)

_INDENT = "    "


def _indent(text: str) -> str:
    return "\n".join(f"{_INDENT}{line}" if line else "" for line in text.splitlines())


def _saved_slot(name: str) -> str:
    return f"_fzfkit_saved_{name}"


def _save_variable(name: str) -> str:
    slot = _saved_slot(name)
    return f"{slot}_set=${{{name}+x}}; {slot}=${{{name}-}}"


def _restore_variable(name: str) -> str:
    slot = _saved_slot(name)
    return "\n".join(
        [
            f'if [ -n "${{{slot}_set-}}" ]; then',
            f'{_INDENT}{name}="${slot}"',
            "else",
            f"{_INDENT}unset {name}",
            "fi",
            f"unset {slot} {slot}_set",
        ]
    )


def _remove_function(name: str, shell: ShellKind) -> str:
    if shell is ShellKind.ZSH:
        return f"(( ${{+functions[{name}]}} )) && unfunction {name}"
    return f"declare -F {name} > /dev/null && unset -f {name}"


def render_function(function: ShellFunction, shell: ShellKind) -> str:
    """Render a full function definition."""
    if isinstance(function.body, str):
        body = function.body
    else:
        body = "\n".join(render_operation(op, shell) for op in function.body)
    if not body.strip():
        body = ":"
    return f"{function.name}() {{\n{_indent(body)}\n}}"


def render_operation(op: Operation, shell: ShellKind) -> str:
    """Render a single operation as one or more lines of shell source.

    Raises:
        TypeError: If *op* is not a known operation type.
    """
    if isinstance(op, Export):
        return f"export {op.name}={shlex.quote(op.value)}"
    if isinstance(op, Unset):
        return f"unset {op.name}"
    if isinstance(op, SaveVariable):
        return _save_variable(op.name)
    if isinstance(op, RestoreVariable):
        return _restore_variable(op.name)
    if isinstance(op, DefineFunction):
        return render_function(op.function, shell)
    if isinstance(op, RemoveFunction):
        return _remove_function(op.name, shell)
    if isinstance(op, DefineAlias):
        return f"alias {op.name}={shlex.quote(op.value)}"
    if isinstance(op, RemoveAlias):
        return f"unalias {op.name} 2> /dev/null"
    if isinstance(op, Source):
        return f"source {shlex.quote(op.path)}"
    if isinstance(op, RunCommand):
        command = shlex.join(op.argv)
        if op.cwd:
            return f"(cd {shlex.quote(op.cwd)} && {command})"
        return command
    raise TypeError(f"Unknown session operation: {op!r}")


def render_script(
    ops: Iterable[Operation],
    shell: ShellKind,
    guard: Optional[str] = None,
) -> str:
    """Render *ops* as a complete script ready for ``eval``.

    Args:
        ops: Operations to render, in order.
        shell: Target dialect.
        guard: Optional function name. When given, the whole script only
            runs if that function is not already defined, so evaluating
            the script twice in one shell is a no-op.
    """
    body: list[str] = []
    for op in ops:
        rendered = render_operation(op, shell)
        # one blank line around function definitions
        if isinstance(op, DefineFunction):
            if body and body[-1]:
                body.append("")
            body.extend([rendered, ""])
        else:
            body.append(rendered)
    text = "\n".join(body).strip("\n")

    lines = [f"# Generated by fzfkit {__version__} for {shell.value}"]
    if guard is None:
        lines.append(text)
    else:
        lines.append(f"if ! typeset -f {guard} > /dev/null; then")
        lines.append(_indent(text))
        lines.append("fi")
    return "\n".join(lines) + "\n"

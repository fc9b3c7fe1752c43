"""Context-sensitive preview dispatcher for fzf completion.

fzf's completion script calls ``_fzf_comprun <command> <fzf args...>`` when
the user triggers ``**<TAB>``. The dispatcher picks a preview expression
from the command being completed and forwards everything else to fzf
unchanged:

==================  ====================================================
Command             Preview
==================  ====================================================
``cd``              directory tree (eza)
``export|unset``    current value of the variable
``ssh``             DNS lookup of the host (dig)
anything else       tree for directories, highlighted file otherwise
==================  ====================================================
"""

from __future__ import annotations

import enum
import logging
import shlex
from collections.abc import Sequence

from fzfkit.tools import PLACEHOLDER, SelectorInvocation, SelectorResult, Toolchain

logger = logging.getLogger(__name__)


class PreviewKind(str, enum.Enum):
    """Preview strategies the dispatcher can choose from."""

    TREE = "tree"
    VARIABLE = "variable"
    DNS = "dns"
    FILE_OR_DIR = "file_or_dir"


COMMAND_PREVIEWS: dict[str, PreviewKind] = {
    "cd": PreviewKind.TREE,
    "export": PreviewKind.VARIABLE,
    "unset": PreviewKind.VARIABLE,
    "ssh": PreviewKind.DNS,
}
"""Commands with a dedicated preview; every other command gets FILE_OR_DIR."""

VARIABLE_PREVIEW = f"eval 'echo ${PLACEHOLDER}'"


class Dispatcher:
    """Chooses preview expressions and forwards completion to the selector.

    Args:
        tools: The collaborator tools whose preview expressions and
            selector are used.
    """

    def __init__(self, tools: Toolchain) -> None:
        self._tools = tools

    # ------------------------------------------------------------------
    # Preview expressions
    # ------------------------------------------------------------------

    def tree_preview(self) -> str:
        return self._tools.tree.preview_expression()

    def file_or_dir_preview(self) -> str:
        """Tree listing for directories, highlighted contents for files."""
        return (
            f"if [ -d {PLACEHOLDER} ]; then {self._tools.tree.preview_expression()}; "
            f"else {self._tools.highlighter.preview_expression()}; fi"
        )

    def expression(self, kind: PreviewKind) -> str:
        if kind is PreviewKind.TREE:
            return self.tree_preview()
        if kind is PreviewKind.VARIABLE:
            return VARIABLE_PREVIEW
        if kind is PreviewKind.DNS:
            return self._tools.lookup.preview_expression()
        return self.file_or_dir_preview()

    @staticmethod
    def kind_for(command: str) -> PreviewKind:
        return COMMAND_PREVIEWS.get(command, PreviewKind.FILE_OR_DIR)

    def preview_for(self, command: str) -> str:
        """Return the preview expression used when completing *command*."""
        return self.expression(self.kind_for(command))

    # ------------------------------------------------------------------
    # Option strings exported for the key bindings
    # ------------------------------------------------------------------

    def ctrl_t_opts(self) -> str:
        return f"--preview {shlex.quote(self.file_or_dir_preview())}"

    def alt_c_opts(self) -> str:
        return f"--preview {shlex.quote(self.tree_preview())}"

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def invocation(self, command: str, args: Sequence[str] = ()) -> SelectorInvocation:
        """Plan the selector call for *command*; *args* are appended untouched."""
        return SelectorInvocation(self.preview_for(command), tuple(args))

    def dispatch(self, command: str, args: Sequence[str] = ()) -> SelectorResult:
        """Run the selector for *command* with the caller's fzf arguments."""
        invocation = self.invocation(command, args)
        logger.debug("Dispatching '%s' with %s preview", command, self.kind_for(command).value)
        return self._tools.selector.run(invocation)

    def shell_body(self) -> str:
        """Shell source of the ``_fzf_comprun`` function."""
        selector = shlex.quote(self._tools.selector.executable)
        grouped: dict[PreviewKind, list[str]] = {}
        for command, kind in COMMAND_PREVIEWS.items():
            grouped.setdefault(kind, []).append(command)

        arms = [("|".join(commands), self.expression(kind)) for kind, commands in grouped.items()]
        arms.append(("*", self.file_or_dir_preview()))
        width = max(len(pattern) for pattern, _ in arms) + 1

        lines = ["local command=$1", "shift", "", 'case "$command" in']
        for pattern, preview in arms:
            label = f"{pattern})".ljust(width + 1)
            lines.append(f'    {label} {selector} --preview {shlex.quote(preview)} "$@" ;;')
        lines.append("esac")
        return "\n".join(lines)

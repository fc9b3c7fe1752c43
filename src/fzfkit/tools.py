"""External collaborator tools: fd, eza, bat, dig, and fzf.

fzfkit implements none of file enumeration, tree rendering, highlighting, or
fuzzy matching itself. Each tool is wrapped in a small strategy object that
knows two things:

* how to spell its invocation, either as an argv list or as the shell text
  used inside ``FZF_*`` variables and preview expressions;
* how to run it with :func:`subprocess.run` when Python needs the result.

The wrappers are bundled into a :class:`Toolchain`, built from
configuration by :meth:`Toolchain.from_config`. Tests substitute fakes for
any member.

Binaries are resolved on ``PATH`` only when a tool actually runs. A missing
binary raises :class:`~fzfkit.exceptions.ToolNotFoundError` at that
point, never while the plugin loads.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from fzfkit.exceptions import ToolNotFoundError
from fzfkit.models import GlobalConfig

logger = logging.getLogger(__name__)

PLACEHOLDER = "{}"
"""fzf replaces this token with the highlighted item in preview commands."""


def _run_tool(argv: Sequence[str], **kwargs: Any) -> subprocess.CompletedProcess:
    """Run *argv*, translating a missing executable into :class:`ToolNotFoundError`."""
    logger.debug("Running %s", shlex.join(argv))
    try:
        return subprocess.run(list(argv), **kwargs)
    except FileNotFoundError:
        raise ToolNotFoundError(argv[0]) from None


def _color_flag(color: bool) -> str:
    return "--color=always" if color else "--color=never"


def _head(text: str, max_lines: int) -> str:
    lines = text.splitlines(keepends=True)
    return "".join(lines[:max_lines])


class FileEnumerator:
    """Wrapper around ``fd`` for listing candidate paths.

    Args:
        executable: Binary name or path.
        hidden: Include hidden files.
        exclude: Directory names to skip.
        strip_cwd_prefix: Emit ``./``-less relative paths in the default
            commands.
    """

    def __init__(
        self,
        executable: str = "fd",
        hidden: bool = True,
        exclude: Iterable[str] = (".git",),
        strip_cwd_prefix: bool = True,
    ) -> None:
        self.executable = executable
        self.hidden = hidden
        self.exclude = tuple(exclude)
        self.strip_cwd_prefix = strip_cwd_prefix

    def _argv(self, type_filter: Optional[str], strip: bool) -> list[str]:
        argv = [self.executable]
        if type_filter:
            argv.append(f"--type={type_filter}")
        if self.hidden:
            argv.append("--hidden")
        if strip:
            argv.append("--strip-cwd-prefix")
        for name in self.exclude:
            argv.extend(["--exclude", name])
        return argv

    def command(self, type_filter: Optional[str] = None) -> list[str]:
        """Argv listing everything under the working directory.

        Used for ``FZF_DEFAULT_COMMAND`` and friends.
        """
        return self._argv(type_filter, self.strip_cwd_prefix)

    def scoped_command(self, base_dir: str, type_filter: Optional[str] = None) -> list[str]:
        """Argv listing everything under *base_dir*."""
        return [*self._argv(type_filter, False), ".", base_dir]

    def command_line(self, type_filter: Optional[str] = None) -> str:
        return shlex.join(self.command(type_filter))

    def compgen_body(self, type_filter: Optional[str] = None) -> str:
        """Shell body for a completion generator taking the base path as ``$1``."""
        return f'{shlex.join(self._argv(type_filter, False))} . "$1"'

    def enumerate(self, base_dir: str, type_filter: Optional[str] = None) -> list[str]:
        """Run ``fd`` under *base_dir* and return the listed paths."""
        result = _run_tool(
            self.scoped_command(base_dir, type_filter), capture_output=True, text=True
        )
        if result.returncode != 0:
            logger.warning(
                "%s exited with %d: %s", self.executable, result.returncode, result.stderr.strip()
            )
        return result.stdout.splitlines()


class TreeRenderer:
    """Wrapper around ``eza --tree`` for directory previews."""

    def __init__(self, executable: str = "eza", max_lines: int = 200, color: bool = True) -> None:
        self.executable = executable
        self.max_lines = max_lines
        self.color = color

    def argv(self, path: str) -> list[str]:
        return [self.executable, "--tree", _color_flag(self.color), path]

    def preview_expression(self, placeholder: str = PLACEHOLDER) -> str:
        command = shlex.join([self.executable, "--tree", _color_flag(self.color)])
        return f"{command} {placeholder} | head -{self.max_lines}"

    def render(self, path: str) -> str:
        """Return the tree listing of *path*, cut to :attr:`max_lines`."""
        result = _run_tool(self.argv(path), capture_output=True, text=True)
        return _head(result.stdout, self.max_lines)


class Highlighter:
    """Wrapper around ``bat`` for file previews."""

    def __init__(self, executable: str = "bat", max_lines: int = 500, color: bool = True) -> None:
        self.executable = executable
        self.max_lines = max_lines
        self.color = color

    def _command(self) -> list[str]:
        return [self.executable, "-n", _color_flag(self.color), "--line-range", f":{self.max_lines}"]

    def argv(self, path: str) -> list[str]:
        return [*self._command(), path]

    def preview_expression(self, placeholder: str = PLACEHOLDER) -> str:
        return f"{shlex.join(self._command())} {placeholder}"

    def render(self, path: str) -> str:
        result = _run_tool(self.argv(path), capture_output=True, text=True)
        return result.stdout


class HostLookup:
    """Wrapper around ``dig`` for ssh host previews."""

    def __init__(self, executable: str = "dig") -> None:
        self.executable = executable

    def preview_expression(self, placeholder: str = PLACEHOLDER) -> str:
        return f"{shlex.quote(self.executable)} {placeholder}"

    def lookup(self, host: str) -> str:
        result = _run_tool([self.executable, host], capture_output=True, text=True)
        return result.stdout


@dataclass(frozen=True)
class SelectorInvocation:
    """A planned fzf call: the preview expression plus pass-through args."""

    preview: str
    args: tuple[str, ...] = ()


@dataclass
class SelectorResult:
    """Outcome of a selector run.

    fzf exits 0 with a selection, 1 when nothing matched, and 130 when the
    user aborted. None of these are errors from fzfkit's point of view.
    """

    returncode: int
    selected: list[str] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return self.returncode == 0


class Selector:
    """Wrapper around ``fzf``."""

    def __init__(self, executable: str = "fzf") -> None:
        self.executable = executable

    def argv(self, invocation: SelectorInvocation) -> list[str]:
        return [self.executable, "--preview", invocation.preview, *invocation.args]

    def run(
        self,
        invocation: SelectorInvocation,
        candidates: Optional[Iterable[str]] = None,
    ) -> SelectorResult:
        """Run fzf and collect the selected lines.

        Args:
            invocation: Preview expression and extra arguments.
            candidates: Items to choose from. When ``None`` fzf inherits
                stdin, or falls back to ``FZF_DEFAULT_COMMAND`` itself.
        """
        stdin_text = None
        if candidates is not None:
            stdin_text = "".join(f"{item}\n" for item in candidates)
        result = _run_tool(
            self.argv(invocation),
            input=stdin_text,
            stdout=subprocess.PIPE,
            text=True,
        )
        return SelectorResult(result.returncode, result.stdout.splitlines())


@dataclass
class Toolchain:
    """The full set of collaborator tools used by the plugin."""

    enumerator: FileEnumerator = field(default_factory=FileEnumerator)
    tree: TreeRenderer = field(default_factory=TreeRenderer)
    highlighter: Highlighter = field(default_factory=Highlighter)
    lookup: HostLookup = field(default_factory=HostLookup)
    selector: Selector = field(default_factory=Selector)

    @classmethod
    def from_config(cls, config: GlobalConfig) -> Toolchain:
        """Build a toolchain from the ``tools``, ``finder``, and ``preview`` settings."""
        return cls(
            enumerator=FileEnumerator(
                config.tools.finder,
                hidden=config.finder.hidden,
                exclude=config.finder.exclude,
                strip_cwd_prefix=config.finder.strip_cwd_prefix,
            ),
            tree=TreeRenderer(
                config.tools.tree,
                max_lines=config.preview.tree_max_lines,
                color=config.preview.color,
            ),
            highlighter=Highlighter(
                config.tools.pager,
                max_lines=config.preview.pager_max_lines,
                color=config.preview.color,
            ),
            lookup=HostLookup(config.tools.dns_lookup),
            selector=Selector(config.tools.selector),
        )

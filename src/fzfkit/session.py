"""Shell session context: environment, function table, and alias table.

A :class:`ShellSession` is the explicit stand-in for the global state of an
interactive shell. Plugins never touch ``os.environ`` or a shell directly;
they describe each change as an *operation* and hand it to
:meth:`ShellSession.apply`, which mutates the session and appends the
operation to :attr:`ShellSession.journal`.

The journal is what :mod:`fzfkit.render` turns into zsh or bash source, so
the in-process model and the emitted script always agree on what a load or
unload does.

Operation types:

* :class:`Export` / :class:`Unset` -- environment variables.
* :class:`SaveVariable` / :class:`RestoreVariable` -- keep a variable's prior
  value aside and put it back later.
* :class:`DefineFunction` / :class:`RemoveFunction` -- named callables.
* :class:`DefineAlias` / :class:`RemoveAlias` -- aliases.
* :class:`Source` -- load a script into the shell.
* :class:`RunCommand` -- run an external command (e.g. ``git submodule``).
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, MutableMapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from fzfkit.exceptions import UndefinedFunctionError

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Operations
# ------------------------------------------------------------------


@dataclass(frozen=True)
class Export:
    """Set and export an environment variable."""

    name: str
    value: str


@dataclass(frozen=True)
class Unset:
    """Remove an environment variable entirely."""

    name: str


@dataclass(frozen=True)
class SaveVariable:
    """Set the current value of a variable aside before it is overwritten.

    In a live shell the value is read by the shell itself, so a variable
    that is set but not exported is kept too. In-process the caller's
    snapshot already holds the value and this only journals the step.
    """

    name: str


@dataclass(frozen=True)
class RestoreVariable:
    """Put back a variable saved by :class:`SaveVariable`.

    *value* is the in-process snapshot value; ``None`` means the variable
    was absent and is removed again.
    """

    name: str
    value: Optional[str] = None


@dataclass(frozen=True)
class DefineFunction:
    """Define (or redefine) a session function."""

    function: ShellFunction


@dataclass(frozen=True)
class RemoveFunction:
    """Remove a session function if it is currently defined."""

    name: str


@dataclass(frozen=True)
class DefineAlias:
    """Define an alias."""

    name: str
    value: str


@dataclass(frozen=True)
class RemoveAlias:
    """Remove an alias; a missing alias is not an error."""

    name: str


@dataclass(frozen=True)
class Source:
    """Load a script file into the shell."""

    path: str


@dataclass(frozen=True)
class RunCommand:
    """Run an external command, optionally from a working directory."""

    argv: tuple[str, ...]
    cwd: Optional[str] = None


Operation = Union[
    Export,
    Unset,
    SaveVariable,
    RestoreVariable,
    DefineFunction,
    RemoveFunction,
    DefineAlias,
    RemoveAlias,
    Source,
    RunCommand,
]


@dataclass(frozen=True)
class ShellFunction:
    """A named session function.

    Attributes:
        name: The function name as seen by the shell.
        body: Shell source for the function body, or a sequence of
            operations rendered into the body at emit time.
        handler: Python callable run by :meth:`ShellSession.call`.
    """

    name: str
    body: Union[str, Sequence[Operation]]
    handler: Optional[Callable[..., Any]] = field(default=None, compare=False)


def _run_subprocess(argv: Sequence[str], cwd: Optional[str]) -> int:
    """Default :class:`RunCommand` runner backed by :func:`subprocess.run`."""
    result = subprocess.run(list(argv), cwd=cwd)
    return result.returncode


# ------------------------------------------------------------------
# Session
# ------------------------------------------------------------------


class ShellSession:
    """Mutable model of one interactive shell session.

    Args:
        environ: The environment mapping to mutate. Defaults to the live
            ``os.environ``; tests pass a plain dict.
        runner: Callable executing :class:`RunCommand` operations as
            ``runner(argv, cwd) -> returncode``. ``None`` records the
            operation in the journal without running it, which is what the
            shell emitter wants. Pass :data:`RUN_SUBPROCESS` to execute for
            real.
    """

    def __init__(
        self,
        environ: Optional[MutableMapping[str, str]] = None,
        runner: Optional[Callable[[Sequence[str], Optional[str]], int]] = None,
    ) -> None:
        self.environ: MutableMapping[str, str] = os.environ if environ is None else environ
        self._runner = runner
        self._functions: dict[str, ShellFunction] = {}
        self._aliases: dict[str, str] = {}
        self._sourced: list[str] = []
        self._journal: list[Operation] = []
        self.state: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def functions(self) -> dict[str, ShellFunction]:
        """Currently defined functions keyed by name (a copy)."""
        return dict(self._functions)

    @property
    def aliases(self) -> dict[str, str]:
        """Currently defined aliases (a copy)."""
        return dict(self._aliases)

    @property
    def sourced(self) -> list[str]:
        """Paths of scripts sourced into this session, in order."""
        return list(self._sourced)

    @property
    def journal(self) -> list[Operation]:
        """Every operation applied so far, in order."""
        return list(self._journal)

    def has_function(self, name: str) -> bool:
        return name in self._functions

    def has_alias(self, name: str) -> bool:
        return name in self._aliases

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def apply(self, op: Operation) -> None:
        """Apply *op* to the session and record it in the journal.

        Raises:
            TypeError: If *op* is not a known operation type.
        """
        if isinstance(op, Export):
            self.environ[op.name] = op.value
        elif isinstance(op, Unset):
            self.environ.pop(op.name, None)
        elif isinstance(op, SaveVariable):
            pass
        elif isinstance(op, RestoreVariable):
            if op.value is None:
                self.environ.pop(op.name, None)
            else:
                self.environ[op.name] = op.value
        elif isinstance(op, DefineFunction):
            self._functions[op.function.name] = op.function
        elif isinstance(op, RemoveFunction):
            self._functions.pop(op.name, None)
        elif isinstance(op, DefineAlias):
            self._aliases[op.name] = op.value
        elif isinstance(op, RemoveAlias):
            if self._aliases.pop(op.name, None) is None:
                logger.debug("Alias '%s' was not defined", op.name)
        elif isinstance(op, Source):
            self._sourced.append(op.path)
        elif isinstance(op, RunCommand):
            if self._runner is not None:
                code = self._runner(op.argv, op.cwd)
                if code != 0:
                    logger.warning("Command %s exited with %d", " ".join(op.argv), code)
        else:
            raise TypeError(f"Unknown session operation: {op!r}")
        self._journal.append(op)

    def export(self, name: str, value: str) -> None:
        self.apply(Export(name, value))

    def unset(self, name: str) -> None:
        self.apply(Unset(name))

    def define_function(self, function: ShellFunction) -> None:
        self.apply(DefineFunction(function))

    def remove_function(self, name: str) -> bool:
        """Remove function *name* if defined.

        Returns:
            ``True`` if a function was removed, ``False`` if none existed.
        """
        existed = name in self._functions
        self.apply(RemoveFunction(name))
        return existed

    def define_alias(self, name: str, value: str) -> None:
        self.apply(DefineAlias(name, value))

    def remove_alias(self, name: str) -> bool:
        """Remove alias *name*; returns whether it existed."""
        existed = name in self._aliases
        self.apply(RemoveAlias(name))
        return existed

    def source(self, path: str) -> None:
        self.apply(Source(path))

    def run(self, argv: Sequence[str], cwd: Optional[str] = None) -> None:
        self.apply(RunCommand(tuple(argv), cwd))

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def call(self, name: str, *args: Any) -> Any:
        """Invoke the Python handler of function *name*.

        Raises:
            UndefinedFunctionError: If *name* is not defined or has no
                Python handler.
        """
        function = self._functions.get(name)
        if function is None or function.handler is None:
            raise UndefinedFunctionError(f"Function '{name}' is not defined")
        return function.handler(*args)


RUN_SUBPROCESS = _run_subprocess
"""Runner that executes :class:`RunCommand` operations with :mod:`subprocess`."""

"""fzf plugin -- wire fd, eza, bat, and dig into fzf, and undo it again.

Loading the plugin into a session:

1. Snapshots ``FZF_DEFAULT_COMMAND``, ``FZF_CTRL_T_COMMAND``, and
   ``FZF_ALT_C_COMMAND``. The emitted script saves them in the shell, so
   values that were never exported are kept as well.
2. Exports fd-based replacements for those three variables.
3. Defines the ``_fzf_compgen_path`` and ``_fzf_compgen_dir`` completion
   generators that fzf's completion script looks up by name.
4. Exports ``FZF_CTRL_T_OPTS`` and ``FZF_ALT_C_OPTS`` with preview options.
5. Defines ``_fzf_comprun``, the per-command preview dispatcher.
6. Defines any aliases from the ``aliases`` config section.
7. Sources (or fetches) the ``fzf-git.sh`` companion script.
8. Defines ``fzf_plugin_unload``, which reverses steps 1-6 and then removes
   itself.

Every function and alias is remembered in a :class:`~fzfkit.registry.Registry`
so that unloading removes exactly what loading defined. Variables are put
back from the snapshot, with variables that were absent before load
removed rather than left empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from fzfkit.bootstrap import companion_operations
from fzfkit.dispatch import Dispatcher
from fzfkit.exceptions import PluginError
from fzfkit.models import GlobalConfig
from fzfkit.plugins.base import Plugin
from fzfkit.registry import DefinitionKind, Registry
from fzfkit.session import Operation, RemoveAlias, RemoveFunction, ShellFunction, ShellSession
from fzfkit.snapshot import TRACKED_VARIABLES, EnvSnapshot
from fzfkit.tools import SelectorResult, Toolchain

logger = logging.getLogger(__name__)

PLUGIN_NAME = "fzf"

COMPGEN_PATH_FUNCTION = "_fzf_compgen_path"
COMPGEN_DIR_FUNCTION = "_fzf_compgen_dir"
COMPRUN_FUNCTION = "_fzf_comprun"
UNLOAD_FUNCTION = "fzf_plugin_unload"


@dataclass
class PluginState:
    """Per-session bookkeeping kept between load and unload."""

    registry: Registry = field(default_factory=Registry)
    snapshot: EnvSnapshot = field(default_factory=EnvSnapshot)


class FzfPlugin(Plugin):
    """Integrates fzf into a :class:`~fzfkit.session.ShellSession`.

    Args:
        config: Effective configuration. Defaults to a stock
            :class:`~fzfkit.models.GlobalConfig`.
        tools: Collaborator tools. Defaults to the toolchain described by
            *config*; tests pass fakes here.
    """

    def __init__(
        self,
        config: Optional[GlobalConfig] = None,
        tools: Optional[Toolchain] = None,
    ) -> None:
        self.config = config if config is not None else GlobalConfig()
        self.tools = tools if tools is not None else Toolchain.from_config(self.config)
        self.dispatcher = Dispatcher(self.tools)

    @property
    def name(self) -> str:
        return PLUGIN_NAME

    @property
    def description(self) -> str:
        return "fzf integration with fd listings and eza/bat previews"

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def initialize(self, session: ShellSession) -> None:
        """Load the plugin into *session*.

        Raises:
            PluginError: If the plugin is already loaded. A second load
                would snapshot the plugin's own values and make unload
                restore the wrong environment.
        """
        if self.is_loaded(session):
            raise PluginError(f"Plugin '{self.name}' is already loaded")

        state = PluginState()
        state.snapshot.capture(session.environ, TRACKED_VARIABLES)
        session.state[self.name] = state
        for op in state.snapshot.save_operations():
            session.apply(op)

        enumerator = self.tools.enumerator
        default_command = enumerator.command_line()
        session.export("FZF_DEFAULT_COMMAND", default_command)
        session.export("FZF_CTRL_T_COMMAND", default_command)
        session.export("FZF_ALT_C_COMMAND", enumerator.command_line("d"))

        self._define_function(
            session,
            state,
            ShellFunction(
                COMPGEN_PATH_FUNCTION,
                enumerator.compgen_body(),
                lambda base: enumerator.enumerate(base),
            ),
        )
        self._define_function(
            session,
            state,
            ShellFunction(
                COMPGEN_DIR_FUNCTION,
                enumerator.compgen_body("d"),
                lambda base: enumerator.enumerate(base, "d"),
            ),
        )

        session.export("FZF_CTRL_T_OPTS", self.dispatcher.ctrl_t_opts())
        session.export("FZF_ALT_C_OPTS", self.dispatcher.alt_c_opts())

        self._define_function(
            session,
            state,
            ShellFunction(COMPRUN_FUNCTION, self.dispatcher.shell_body(), self._comprun),
        )

        for alias_name, alias_value in self.config.aliases.items():
            self._define_alias(session, state, alias_name, alias_value)

        for op in companion_operations(self.config.companion):
            session.apply(op)

        session.define_function(
            ShellFunction(UNLOAD_FUNCTION, self.unload_plan(state), lambda: self.unload(session))
        )
        logger.info(
            "Loaded plugin '%s' (%d definitions)", self.name, len(state.registry)
        )

    def _define_function(
        self, session: ShellSession, state: PluginState, function: ShellFunction
    ) -> None:
        session.define_function(function)
        state.registry.remember(DefinitionKind.FUNCTION, function.name)

    def _define_alias(
        self, session: ShellSession, state: PluginState, name: str, value: str
    ) -> None:
        session.define_alias(name, value)
        state.registry.remember(DefinitionKind.ALIAS, name)

    def _comprun(self, command: str, *args: str) -> SelectorResult:
        return self.dispatcher.dispatch(command, args)

    # ------------------------------------------------------------------
    # Unload
    # ------------------------------------------------------------------

    @staticmethod
    def unload_plan(state: PluginState) -> list[Operation]:
        """Operations that reverse a load recorded in *state*.

        Functions first, then aliases, then the environment snapshot, and
        finally the unload function itself.
        """
        ops: list[Operation] = []
        ops.extend(RemoveFunction(name) for name in state.registry.enumerate(DefinitionKind.FUNCTION))
        ops.extend(RemoveAlias(name) for name in state.registry.enumerate(DefinitionKind.ALIAS))
        ops.extend(state.snapshot.restore_operations())
        ops.append(RemoveFunction(UNLOAD_FUNCTION))
        return ops

    def unload(self, session: ShellSession) -> None:
        """Remove everything this plugin defined and restore the environment.

        Missing functions and aliases are skipped. Calling this on a
        session where the plugin is not loaded does nothing.
        """
        state: Optional[PluginState] = session.state.get(self.name)
        if state is None:
            logger.debug("Plugin '%s' is not loaded, nothing to unload", self.name)
            return

        plan = self.unload_plan(state)
        state.registry.clear()
        for op in plan:
            if isinstance(op, RemoveFunction) and not session.has_function(op.name):
                logger.debug("Function '%s' already removed", op.name)
                continue
            session.apply(op)
        del session.state[self.name]
        logger.info("Unloaded plugin '%s'", self.name)

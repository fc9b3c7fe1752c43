"""Abstract base class for fzfkit plugins.

Every plugin must subclass :class:`Plugin` and implement :attr:`name`,
:meth:`initialize`, and :meth:`unload`. The lifecycle is a two-state
machine per session::

    Unloaded --initialize--> Loaded --unload--> Unloaded

Initialising an already loaded session is rejected; unloading a session
that is not loaded does nothing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fzfkit import __version__
from fzfkit.session import ShellSession


class Plugin(ABC):
    """Base class for all fzfkit plugins."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique plugin name, also the key into ``session.state``."""
        ...

    @property
    def version(self) -> str:
        return __version__

    @property
    def description(self) -> str:
        return ""

    def is_loaded(self, session: ShellSession) -> bool:
        """Return whether this plugin currently has state in *session*."""
        return self.name in session.state

    @abstractmethod
    def initialize(self, session: ShellSession) -> None:
        """Apply the plugin's definitions to *session*.

        Raises:
            PluginError: If the plugin is already loaded in *session*.
        """
        ...

    @abstractmethod
    def unload(self, session: ShellSession) -> None:
        """Reverse everything :meth:`initialize` did to *session*."""
        ...

"""Plugin layer for fzfkit -- session plugins with a reversible lifecycle.

A plugin mutates a :class:`~fzfkit.session.ShellSession` when it is
initialised and must be able to undo exactly those mutations when it is
unloaded. Per-session bookkeeping lives in ``session.state`` under the
plugin's name, never in module globals.

Key classes:

* :class:`Plugin` -- Abstract base class that all plugins extend.
* :class:`FzfPlugin` -- The fzf integration (environment, completion
  helpers, preview dispatcher, companion script).

Example:
    Typical usage::

        from fzfkit.plugins import FzfPlugin
        from fzfkit.session import ShellSession

        session = ShellSession(environ=dict(os.environ))
        plugin = FzfPlugin()
        plugin.initialize(session)
        ...
        plugin.unload(session)
"""

from fzfkit.plugins.base import Plugin
from fzfkit.plugins.fzf import FzfPlugin

__all__ = ["Plugin", "FzfPlugin"]

"""fzf integration plugin -- environment, completion helpers, and previews.

The main export is :class:`FzfPlugin`. :class:`PluginState` is the
per-session bookkeeping (registry plus environment snapshot) it stores in
``session.state["fzf"]``.
"""

from fzfkit.plugins.fzf.plugin import FzfPlugin, PluginState

__all__ = ["FzfPlugin", "PluginState"]

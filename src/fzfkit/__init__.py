"""fzfkit -- wire fzf into an interactive shell, reversibly.

fzfkit exports the ``FZF_*`` variables, completion generators, and a
per-command preview dispatcher that make fzf use fd for listings and
eza/bat/dig for previews. Everything it defines is recorded so it can be
removed again, and the variables it overwrites are restored on unload.

Typical use from ``~/.zshrc``::

    eval "$(fzfkit init zsh)"
    # ... later, to undo it:
    fzf_plugin_unload

Modules:
    app: Typer application and CLI entry point.
    session: Shell session model and the operations that mutate it.
    registry: Names defined by the plugin, for removal on unload.
    snapshot: Saved environment values, for restoration on unload.
    plugins: The plugin base class and the fzf plugin.
    dispatch: Preview selection for ``_fzf_comprun``.
    tools: Wrappers around the external fd/eza/bat/dig/fzf binaries.
    render: zsh/bash source generation.
    config: XDG-aware configuration loading and precedence.
"""

__version__ = "0.1.0"

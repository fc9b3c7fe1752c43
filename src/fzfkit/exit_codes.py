"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~fzfkit.exceptions.FzfkitError` subclass. Shell rc
files that ``eval`` the output of ``fzfkit init`` can inspect the exit code
to tell a broken config apart from a missing tool.

Example::

    $ fzfkit comprun cd
    $ echo $?
    127   # EXIT_TOOL_NOT_FOUND -- fzf is not on PATH
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unsupported shell."""

EXIT_UNDEFINED_FUNCTION = 4
"""A session function was called that is not (or no longer) defined."""

EXIT_PLUGIN_ERROR = 10
"""The plugin failed to load or unload (e.g. double initialisation)."""

EXIT_TOOL_NOT_FOUND = 127
"""An external collaborator binary could not be executed (shell convention)."""

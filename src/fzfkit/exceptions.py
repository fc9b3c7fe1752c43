"""Exception hierarchy for fzfkit.

All exceptions inherit from :class:`FzfkitError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`fzfkit.exit_codes`.
The top-level error handler in :func:`fzfkit.app.main` catches
``FzfkitError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    FzfkitError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- ConfigError             (exit 1)
    +-- UndefinedFunctionError  (exit 4)
    +-- PluginError             (exit 10)
    |   +-- SnapshotError       (exit 10)
    +-- ToolNotFoundError       (exit 127)
"""

from fzfkit.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PLUGIN_ERROR,
    EXIT_TOOL_NOT_FOUND,
    EXIT_UNDEFINED_FUNCTION,
)


class FzfkitError(Exception):
    """Base exception for all fzfkit errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`fzfkit.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(FzfkitError):
    """Raised for invalid CLI arguments or an unsupported target shell."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(FzfkitError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class UndefinedFunctionError(FzfkitError):
    """Raised when calling a session function that is not defined."""

    exit_code = EXIT_UNDEFINED_FUNCTION


class PluginError(FzfkitError):
    """Raised when the plugin cannot be loaded or unloaded."""

    exit_code = EXIT_PLUGIN_ERROR


class SnapshotError(PluginError):
    """Raised when an environment snapshot is captured twice or restored before capture."""


class ToolNotFoundError(FzfkitError):
    """Raised when an external tool binary cannot be executed.

    Args:
        tool: The executable name that could not be found.
    """

    exit_code = EXIT_TOOL_NOT_FOUND

    def __init__(self, tool: str) -> None:
        super().__init__(f"External tool '{tool}' was not found on PATH")
        self.tool = tool

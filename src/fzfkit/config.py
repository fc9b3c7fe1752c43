"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for fzfkit:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.fzfkit/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`. :func:`xdg_config_for` resolves the config
  directory of *other* applications (fzf itself) without creating it.
* **Global config** -- A single :class:`~fzfkit.models.GlobalConfig`
  JSON file storing tool names, finder flags, preview limits, extra
  aliases, and companion-script settings.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, and the config file into the effective
  configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from fzfkit.exceptions import ConfigError, InvalidUsageError
from fzfkit.models import GlobalConfig, ShellKind

_APP_NAME = "fzfkit"
_CONFIG_FILENAME = "config.json"

SHELL_ENV_VAR = "FZFKIT_SHELL"
"""Environment variable overriding the configured target shell."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def xdg_config_for(app_name: str) -> Path:
    """Return ``$XDG_CONFIG_HOME/<app_name>`` (default ``~/.config/<app_name>``).

    Unlike :func:`get_config_dir` this never creates the directory: it is
    used to locate files owned by other tools.
    """
    return _xdg_base("XDG_CONFIG_HOME", (".config",)) / app_name


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/fzfkit/`` (default ``~/.config/fzfkit/``).
    On macOS/Windows: ``~/.fzfkit/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = xdg_config_for(_APP_NAME)
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/fzfkit/`` (default ``~/.local/share/fzfkit/``).
    On macOS/Windows: ``~/.fzfkit/data/``.
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~fzfkit.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Precedence resolution ---


def parse_shell(value: str) -> ShellKind:
    """Convert a shell name (or path such as ``/bin/zsh``) to :class:`ShellKind`.

    Raises:
        InvalidUsageError: If the shell is not supported.
    """
    name = os.path.basename(value.strip()).lower()
    try:
        return ShellKind(name)
    except ValueError:
        supported = ", ".join(kind.value for kind in ShellKind)
        raise InvalidUsageError(f"Unsupported shell: {value}. Supported: {supported}") from None


def resolve_config(cli_shell: Optional[str] = None) -> GlobalConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flag (``cli_shell``)
        2. Environment variable ``FZFKIT_SHELL``
        3. User config (``~/.config/fzfkit/config.json``)
        4. Defaults

    Returns:
        The effective :class:`~fzfkit.models.GlobalConfig`.
    """
    config = load_global_config()

    env_shell = os.environ.get(SHELL_ENV_VAR)
    if env_shell:
        config.shell = parse_shell(env_shell)
    if cli_shell is not None:
        config.shell = parse_shell(cli_shell)

    return config

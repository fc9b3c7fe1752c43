"""Companion ``fzf-git.sh`` script: locate it, source it, or fetch it.

The companion script adds git-aware key bindings on top of fzf. fzfkit
only decides *what* to do with it; the resulting operations are applied to
a session like any other load step:

* script present -> :class:`~fzfkit.session.Source` it;
* script missing and fetching enabled -> ``git submodule init`` followed by
  ``git submodule update`` in the companion repository directory;
* otherwise -> nothing, with a warning in the log.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fzfkit.config import xdg_config_for
from fzfkit.models import CompanionConfig
from fzfkit.session import Operation, RunCommand, Source

logger = logging.getLogger(__name__)

COMPANION_NAME = "fzf-git.sh"


def companion_script_path(config: CompanionConfig) -> Path:
    """Return the configured script path, or ``<fzf config>/fzf-git.sh/fzf-git.sh``."""
    if config.path:
        return Path(config.path).expanduser()
    return xdg_config_for("fzf") / COMPANION_NAME / COMPANION_NAME


def companion_repo_dir(config: CompanionConfig) -> Path:
    """Directory in which git submodule commands run when fetching."""
    if config.repo_dir:
        return Path(config.repo_dir).expanduser()
    return xdg_config_for("fzf")


def companion_operations(config: CompanionConfig) -> list[Operation]:
    """Plan the operations that load or fetch the companion script."""
    if not config.enabled:
        return []

    script = companion_script_path(config)
    if script.is_file():
        logger.debug("Sourcing companion script %s", script)
        return [Source(str(script))]

    if not config.fetch:
        logger.warning("Companion script %s not found and fetching is disabled", script)
        return []

    cwd = str(companion_repo_dir(config))
    logger.info("Companion script %s not found, fetching submodules in %s", script, cwd)
    return [
        RunCommand(("git", "submodule", "init"), cwd),
        RunCommand(("git", "submodule", "update"), cwd),
    ]

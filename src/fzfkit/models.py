"""Canonical Pydantic models shared across all fzfkit modules.

This is the single source of truth for configuration shapes in the project.
Every model is serialised as part of :class:`GlobalConfig` in the user's
config directory (see :mod:`fzfkit.config`):

    :class:`ToolsConfig`, :class:`FinderConfig`, :class:`PreviewConfig`,
    :class:`CompanionConfig`, and :class:`GlobalConfig`.

All models use Pydantic v2. Defaults reproduce the stock fd/eza/bat/fzf
wiring so that an empty or missing config file behaves sensibly.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ShellKind(str, enum.Enum):
    """Shell dialects the emitter can target."""

    ZSH = "zsh"
    BASH = "bash"


# --- Tools ---


class ToolsConfig(BaseModel):
    """Executable names of the external collaborator tools.

    Each value is looked up on ``PATH`` at invocation time, never at load
    time. Override these when a tool is installed under a different name
    (e.g. ``fdfind`` on Debian, ``batcat`` on Ubuntu).
    """

    finder: str = Field(default="fd", description="File enumeration tool")
    tree: str = Field(default="eza", description="Directory tree renderer")
    pager: str = Field(default="bat", description="Syntax-highlighting pager")
    selector: str = Field(default="fzf", description="Fuzzy selection tool")
    dns_lookup: str = Field(default="dig", description="DNS lookup tool for ssh previews")


class FinderConfig(BaseModel):
    """Flags passed to the file enumeration tool."""

    hidden: bool = Field(default=True, description="Include hidden files")
    exclude: list[str] = Field(
        default_factory=lambda: [".git"],
        description="Directory names excluded from traversal",
    )
    strip_cwd_prefix: bool = Field(
        default=True, description="Print paths relative to the working directory"
    )


class PreviewConfig(BaseModel):
    """Limits and colour settings for preview commands."""

    tree_max_lines: int = Field(default=200, description="Lines kept from tree output")
    pager_max_lines: int = Field(default=500, description="Lines rendered by the pager")
    color: bool = Field(default=True, description="Force colour in previews")

    @field_validator("tree_max_lines", "pager_max_lines")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("line limits must be positive")
        return value


class CompanionConfig(BaseModel):
    """Settings for the ``fzf-git.sh`` companion integration script.

    When :attr:`path` is unset the script is looked up under the fzf XDG
    config directory. When the script is missing and :attr:`fetch` is
    enabled, ``git submodule init`` and ``git submodule update`` run in
    :attr:`repo_dir` (defaulting to the fzf config directory).
    """

    enabled: bool = Field(default=True, description="Load the companion script")
    path: Optional[str] = Field(default=None, description="Explicit script path")
    fetch: bool = Field(
        default=True, description="Fetch the script via git submodules when missing"
    )
    repo_dir: Optional[str] = Field(
        default=None, description="Directory in which to run git submodule commands"
    )


class GlobalConfig(BaseModel):
    """Top-level configuration stored at ``~/.config/fzfkit/config.json``.

    Loaded by :func:`~fzfkit.config.load_global_config` and persisted by
    :func:`~fzfkit.config.save_global_config`. Fields here have the lowest
    precedence; environment variables and CLI flags override them.
    """

    shell: ShellKind = ShellKind.ZSH
    aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Extra aliases defined on load and removed on unload",
    )
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    finder: FinderConfig = Field(default_factory=FinderConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)
    companion: CompanionConfig = Field(default_factory=CompanionConfig)

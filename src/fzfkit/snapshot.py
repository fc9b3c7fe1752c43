"""Snapshot of environment variables the plugin overwrites.

The snapshot is taken once, before the first overwrite, and is read-only
afterwards. An absent variable is stored as ``None`` so that restoring it
removes the variable instead of leaving an empty-but-present entry behind.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Optional

from fzfkit.exceptions import SnapshotError
from fzfkit.session import Operation, RestoreVariable, SaveVariable

logger = logging.getLogger(__name__)

TRACKED_VARIABLES: tuple[str, ...] = (
    "FZF_DEFAULT_COMMAND",
    "FZF_CTRL_T_COMMAND",
    "FZF_ALT_C_COMMAND",
)
"""Variables whose original values are restored on unload."""


class EnvSnapshot:
    """Saved values of a fixed set of environment variables."""

    def __init__(self) -> None:
        self._values: Optional[dict[str, Optional[str]]] = None

    @property
    def captured(self) -> bool:
        return self._values is not None

    @property
    def values(self) -> Mapping[str, Optional[str]]:
        """The captured values; ``None`` marks a variable that was absent.

        Raises:
            SnapshotError: If nothing has been captured yet.
        """
        if self._values is None:
            raise SnapshotError("Environment snapshot has not been captured")
        return dict(self._values)

    def capture(
        self,
        environ: Mapping[str, str],
        names: Iterable[str] = TRACKED_VARIABLES,
    ) -> None:
        """Record the current value of each variable in *names*.

        Raises:
            SnapshotError: If this snapshot was already captured.
        """
        if self._values is not None:
            raise SnapshotError("Environment snapshot was already captured")
        self._values = {name: environ.get(name) for name in names}
        logger.debug("Captured environment snapshot: %s", sorted(self._values))

    def save_operations(self) -> list[Operation]:
        """One :class:`SaveVariable` per captured variable.

        Applied before the variables are overwritten, so that an emitted
        script keeps the values the shell itself holds.
        """
        return [SaveVariable(name) for name in self.values]

    def restore_operations(self) -> list[Operation]:
        """One :class:`RestoreVariable` per captured variable."""
        return [RestoreVariable(name, value) for name, value in self.values.items()]

    def restore(self, environ: MutableMapping[str, str]) -> None:
        """Write every captured value back into *environ*.

        Raises:
            SnapshotError: If nothing has been captured yet.
        """
        for name, value in self.values.items():
            if value is None:
                environ.pop(name, None)
            else:
                environ[name] = value

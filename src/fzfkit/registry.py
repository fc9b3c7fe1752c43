"""Registry of names the plugin defines, kept so they can be removed later.

The registry holds one ordered set per :class:`DefinitionKind`. Insertion
order is preserved for readable unload scripts, but removal correctness
never depends on it: every removal is independent of the others.
"""

from __future__ import annotations

import enum


class DefinitionKind(str, enum.Enum):
    """The kinds of session definitions the plugin can register."""

    FUNCTION = "function"
    ALIAS = "alias"


class Registry:
    """Ordered, duplicate-free sets of defined function and alias names.

    Example::

        registry = Registry()
        registry.remember("function", "_fzf_comprun")
        registry.remember("function", "_fzf_comprun")
        registry.enumerate("function")   # ["_fzf_comprun"]
    """

    def __init__(self) -> None:
        # dict keys double as an insertion-ordered set
        self._names: dict[DefinitionKind, dict[str, None]] = {
            kind: {} for kind in DefinitionKind
        }

    def remember(self, kind: DefinitionKind | str, name: str) -> None:
        """Record *name* under *kind*; a name already present is left alone.

        Args:
            kind: ``"function"`` or ``"alias"`` (or the enum member).
            name: The session-level name that was defined.

        Raises:
            ValueError: If *kind* is not a :class:`DefinitionKind`.
        """
        self._names[DefinitionKind(kind)].setdefault(name, None)

    def enumerate(self, kind: DefinitionKind | str) -> list[str]:
        """Return the remembered names of *kind* in insertion order."""
        return list(self._names[DefinitionKind(kind)])

    def clear(self) -> None:
        """Forget every remembered name."""
        for names in self._names.values():
            names.clear()

    def __len__(self) -> int:
        return sum(len(names) for names in self._names.values())

    def __repr__(self) -> str:
        functions = self.enumerate(DefinitionKind.FUNCTION)
        aliases = self.enumerate(DefinitionKind.ALIAS)
        return f"Registry(functions={functions!r}, aliases={aliases!r})"

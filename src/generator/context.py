"""
Module 3: Context Chain

Ancestor-linked cursor used while walking a scaffold during placement.
Levels are created on the way down and discarded on the way back up.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from .scaffold import ArrayScaffold, ObjectScaffold

Key = Union[str, int, None]


@dataclass
class ContextLevel:
    """One step of the placement walk: a node, how it was reached, and its parent level."""
    node: Any
    key: Key = None
    parent: Optional["ContextLevel"] = None

    def child(self, node: Any, key: Key) -> "ContextLevel":
        """Push a level for a child of this node."""
        return ContextLevel(node=node, key=key, parent=self)

    def ancestor(self, steps: int) -> Optional["ContextLevel"]:
        """Return the level `steps` above this one (0 is this level)."""
        level: Optional[ContextLevel] = self
        for _ in range(steps):
            if level is None:
                return None
            level = level.parent
        return level

    def lineage(self) -> Iterator["ContextLevel"]:
        """Iterate from this level up to the root."""
        level: Optional[ContextLevel] = self
        while level is not None:
            yield level
            level = level.parent

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.lineage()) - 1

    @property
    def enclosing_object(self) -> Optional[ObjectScaffold]:
        """The object scope one level up, if that level is an object."""
        parent = self.ancestor(1)
        if parent is not None and isinstance(parent.node, ObjectScaffold):
            return parent.node
        return None

    def enclosing_array(self) -> Optional["ContextLevel"]:
        """Nearest ancestor level whose node is an array scaffold."""
        for level in self.lineage():
            if level is not self and isinstance(level.node, ArrayScaffold):
                return level
        return None

    def path(self) -> str:
        """Dotted path from the root, for log and error messages."""
        keys = [str(level.key) for level in self.lineage() if level.key is not None]
        return ".".join(reversed(keys)) or "<root>"

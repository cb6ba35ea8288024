"""Ordered, rooted tree of nodes."""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterator

from ..errors import ConcurrentStructuralMutation, DuplicateIdentifier, GraphFrozen
from .node import PATH_SEPARATOR

if TYPE_CHECKING:
    from .node import Node


class Graph:
    """Owns the root node and, through it, every descendant.

    The structure only grows (``attach``); there is no removal or
    re-parenting. Synthesis freezes the structure for good.
    """

    def __init__(self, root: Node):
        self.root = root
        self._frozen = False
        # Bumped on every structural change; traversals compare against it.
        self._version = 0
        self._aspect_sequence = 0
        self._aspect_pass_running = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def attach(self, parent: Node, child: Node) -> None:
        """Append ``child`` to ``parent``'s children."""
        if self._frozen:
            raise GraphFrozen(
                f"Cannot add '{child.id}' to '{parent.path or '<root>'}': "
                "graph is frozen for synthesis",
                {"parent": parent.path, "id": child.id},
            )
        if parent.graph is not self:
            raise ValueError(f"Parent '{parent.path}' belongs to another graph")
        if child.parent is not None or child is self.root:
            raise ValueError(f"Node '{child.id}' is already attached")
        if parent.find_child(child.id) is not None:
            raise DuplicateIdentifier(parent.path, child.id)

        parent._children.append(child)
        child.parent = parent
        self._version += 1

    def traverse(self, root: Node | None = None) -> Iterator[Node]:
        """Yield nodes in pre-order starting at ``root`` (graph root by default).

        Each call starts a fresh walk over the current tree. A structural
        change made while the walk is in progress makes the walk raise
        ConcurrentStructuralMutation on its next step.
        """
        start = self.root if root is None else root
        if start.graph is not self:
            raise ValueError(f"Node '{start.path}' belongs to another graph")
        version = self._version
        pending = [start]
        while pending:
            node = pending.pop()
            yield node
            if self._version != version:
                raise ConcurrentStructuralMutation(
                    "Graph structure changed during traversal",
                    {"at": node.path},
                )
            pending.extend(reversed(node._children))

    def find(self, path: str) -> Node:
        """Look a node up by its path; '' is the root."""
        node = self.root
        if not path:
            return node
        for part in path.split(PATH_SEPARATOR):
            child = node.find_child(part)
            if child is None:
                raise KeyError(path)
            node = child
        return node

    def __iter__(self) -> Iterator[Node]:
        return self.traverse()

    def __len__(self) -> int:
        return sum(1 for _ in self.traverse())

"""Graph nodes: declared resources and grouping containers."""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

from .capabilities import Capability, new_capability_state

if TYPE_CHECKING:
    from .graph import Graph

PATH_SEPARATOR = "/"


class Node:
    """A single addressable entity in the construct graph.

    Passing ``scope=None`` creates a root node with a new graph. Any other
    node attaches itself to ``scope`` while it is constructed, so a node
    that raises during attach never enters the graph.
    """

    # Every kind can record suppressions; resource kinds add TAGGABLE.
    CAPABILITIES: frozenset[Capability] = frozenset({Capability.SUPPRESSIBLE})

    def __init__(self, scope: Node | None, id: str):
        if scope is not None:
            _validate_id(id)
        self.id = id
        self.parent: Node | None = None
        self._children: list[Node] = []
        self._capability_state: dict[Capability, Any] = new_capability_state(
            self.CAPABILITIES
        )
        self._aspects: list = []

        if scope is None:
            from .graph import Graph

            self.graph: Graph = Graph(self)
        else:
            self.graph = scope.graph
            self.graph.attach(scope, self)

    @property
    def capabilities(self) -> frozenset[Capability]:
        return self.CAPABILITIES

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def children(self) -> tuple[Node, ...]:
        return tuple(self._children)

    @property
    def path(self) -> str:
        """Ids from below the root down to this node, joined by '/'."""
        return PATH_SEPARATOR.join(node.id for node in self.scopes[1:])

    @property
    def scopes(self) -> list[Node]:
        """All nodes from the root down to (and including) this node."""
        chain = []
        node: Node | None = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return list(reversed(chain))

    @property
    def root(self) -> Node:
        return self.graph.root

    def find_child(self, id: str) -> Node | None:
        for child in self._children:
            if child.id == id:
                return child
        return None

    def __repr__(self) -> str:
        return f"<{self.kind} {self.path or '<root>'}>"


def _validate_id(id: str) -> None:
    if not isinstance(id, str) or not id:
        raise ValueError("Node id must be a non-empty string")
    if PATH_SEPARATOR in id:
        raise ValueError(f"Node id '{id}' must not contain '{PATH_SEPARATOR}'")

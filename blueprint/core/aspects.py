"""Aspects: visitors applied to a subtree at synthesis time."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..errors import ConcurrentStructuralMutation

if TYPE_CHECKING:
    from .graph import Graph
    from .node import Node


class Aspect(ABC):
    """Visitor contract. ``visit`` is called once per node of the subtree.

    Aspects may change capability state of the visited node but must not add
    nodes while the pass is running.
    """

    @abstractmethod
    def visit(self, node: Node) -> None:
        ...


@dataclass(frozen=True)
class AspectRegistration:
    sequence: int
    scope: Node
    aspect: Any


class Aspects:
    """Aspects registered against one scope.

    Usage mirrors ``Aspects.of(app).add(ApplyTags({...}))``.
    """

    def __init__(self, scope: Node):
        self._scope = scope

    @classmethod
    def of(cls, scope: Node) -> Aspects:
        return cls(scope)

    def check_open(self, aspect_name: str) -> None:
        """Raise if aspects are being applied and registration is closed."""
        if self._scope.graph._aspect_pass_running:
            raise ConcurrentStructuralMutation(
                "Cannot register aspects while aspects are being applied",
                {"scope": self._scope.path, "aspect": aspect_name},
            )

    def add(self, aspect: Any) -> None:
        if not callable(getattr(aspect, "visit", None)):
            raise TypeError(f"{type(aspect).__name__} does not implement visit(node)")
        self.check_open(type(aspect).__name__)
        graph = self._scope.graph
        graph._aspect_sequence += 1
        self._scope._aspects.append(
            AspectRegistration(graph._aspect_sequence, self._scope, aspect)
        )

    @property
    def all(self) -> list[Any]:
        return [registration.aspect for registration in self._scope._aspects]


def registrations(graph: Graph) -> list[AspectRegistration]:
    """Every registration in the graph, in registration order."""
    found = [
        registration
        for node in graph.traverse()
        for registration in node._aspects
    ]
    return sorted(found, key=lambda registration: registration.sequence)

"""Base class for declared cloud resources and template references."""

from __future__ import annotations
from enum import Enum
from typing import Any

from ..core.capabilities import Capability
from ..core.node import Node


class RemovalPolicy(str, Enum):
    DESTROY = "Delete"
    RETAIN = "Retain"
    SNAPSHOT = "Snapshot"


class Resource(Node):
    """A node that becomes one entry under ``Resources`` in the template.

    Concrete kinds set ``resource_type`` and fill ``properties``; values in
    ``properties`` may contain ``Ref``/``GetAtt`` references to other
    resources, resolved to logical ids at synthesis.
    """

    CAPABILITIES = frozenset({Capability.TAGGABLE, Capability.SUPPRESSIBLE})
    resource_type: str = ""

    def __init__(
        self,
        scope: Node,
        id: str,
        properties: dict[str, Any] | None = None,
        removal_policy: RemovalPolicy | None = None,
    ):
        super().__init__(scope, id)
        self.properties: dict[str, Any] = dict(properties or {})
        self.removal_policy = removal_policy
        self.depends_on: list[Resource] = []

    @property
    def ref(self) -> Ref:
        return Ref(self)

    def get_att(self, attribute: str) -> GetAtt:
        return GetAtt(self, attribute)

    def add_dependency(self, other: Resource) -> None:
        if other not in self.depends_on:
            self.depends_on.append(other)


class UntaggableResource(Resource):
    """Resource whose template type does not accept tags."""

    CAPABILITIES = frozenset({Capability.SUPPRESSIBLE})


class Ref:
    """Reference to a resource's primary identifier."""

    def __init__(self, target: Resource):
        self.target = target

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Ref) and other.target is self.target

    def __hash__(self) -> int:
        return hash(("Ref", id(self.target)))

    def __repr__(self) -> str:
        return f"Ref({self.target.path})"


class GetAtt:
    """Reference to an attribute of a resource."""

    def __init__(self, target: Resource, attribute: str):
        self.target = target
        self.attribute = attribute

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, GetAtt)
            and other.target is self.target
            and other.attribute == self.attribute
        )

    def __hash__(self) -> int:
        return hash(("GetAtt", id(self.target), self.attribute))

    def __repr__(self) -> str:
        return f"GetAtt({self.target.path}.{self.attribute})"

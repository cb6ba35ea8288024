"""Exception hierarchy for the blueprint framework."""

from __future__ import annotations
from typing import Any


class BlueprintError(Exception):
    """Base exception for all blueprint errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DuplicateIdentifier(BlueprintError):
    """Two siblings share an identifier at attach time."""

    def __init__(self, parent_path: str, node_id: str):
        self.parent_path = parent_path
        self.node_id = node_id
        super().__init__(
            f"There is already a node with id '{node_id}' in '{parent_path or '<root>'}'",
            {"parent": parent_path, "id": node_id},
        )


class NotSupported(BlueprintError):
    """Capability state was requested from a node that does not declare it."""

    def __init__(self, node_path: str, capability: str):
        self.node_path = node_path
        self.capability = capability
        super().__init__(
            f"Node '{node_path or '<root>'}' does not support capability '{capability}'",
            {"node": node_path, "capability": capability},
        )


class ConcurrentStructuralMutation(BlueprintError):
    """The tree shape changed while a traversal or aspect pass was running."""


class GraphFrozen(ConcurrentStructuralMutation):
    """Structural change attempted after synthesis froze the graph."""


class InvalidTag(BlueprintError, ValueError):
    """Tag key or value is not a non-empty string."""


class InvalidSuppression(BlueprintError, ValueError):
    """Suppression entry is missing a rule id or a reason."""


class SynthesisError(BlueprintError):
    """The final graph cannot be serialized."""


class ContextLookupError(BlueprintError):
    """An environment lookup (e.g. VPC by name) failed."""


class ConfigurationError(BlueprintError, ValueError):
    """Invalid configuration value from the environment or CLI."""

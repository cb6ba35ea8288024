"""Capability registry and the per-node capability state records.

A node kind declares which capabilities it supports when it is defined
(``CAPABILITIES`` class attribute). The node owns one state object per
declared capability; aspects look the state up through ``capability_state``
after checking ``has_capability``.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator

from ..errors import InvalidSuppression, InvalidTag, NotSupported

if TYPE_CHECKING:
    from .node import Node


class Capability(str, Enum):
    TAGGABLE = "taggable"
    SUPPRESSIBLE = "suppressible"


class TagSet:
    """Tags of a single node. Last write wins per key."""

    def __init__(self):
        self._tags: dict[str, str] = {}

    def set_tag(self, key: str, value: str) -> None:
        if not isinstance(key, str) or not key:
            raise InvalidTag("Tag key must be a non-empty string", {"key": key})
        if not isinstance(value, str) or not value:
            raise InvalidTag(
                f"Tag '{key}' must have a non-empty string value",
                {"key": key, "value": value},
            )
        self._tags[key] = value

    def get(self, key: str) -> str | None:
        return self._tags.get(key)

    def as_dict(self) -> dict[str, str]:
        return dict(self._tags)

    def render(self) -> list[dict[str, str]]:
        """Tags in template format, sorted by key."""
        return [{"Key": key, "Value": self._tags[key]} for key in sorted(self._tags)]

    def __contains__(self, key: object) -> bool:
        return key in self._tags

    def __len__(self) -> int:
        return len(self._tags)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TagSet):
            return self._tags == other._tags
        if isinstance(other, dict):
            return self._tags == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"TagSet({self._tags!r})"


@dataclass(frozen=True)
class SuppressionEntry:
    """An accepted exception for one policy rule."""

    rule_id: str
    reason: str
    applies_to_subtree: bool = False

    def __post_init__(self):
        if not isinstance(self.rule_id, str) or not self.rule_id:
            raise InvalidSuppression("Suppression rule id must be a non-empty string")
        if not isinstance(self.reason, str) or not self.reason.strip():
            raise InvalidSuppression(
                f"Suppression of '{self.rule_id}' needs a reason",
                {"rule_id": self.rule_id},
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.rule_id,
            "reason": self.reason,
            "applies_to_children": self.applies_to_subtree,
        }


class SuppressionLedger:
    """Append-only record of suppression entries, in insertion order."""

    def __init__(self):
        self._entries: list[SuppressionEntry] = []

    def append(self, entry: SuppressionEntry) -> None:
        self._entries.append(entry)

    @property
    def entries(self) -> tuple[SuppressionEntry, ...]:
        return tuple(self._entries)

    def matching(self, rule_id: str) -> list[SuppressionEntry]:
        return [entry for entry in self._entries if entry.rule_id == rule_id]

    def __iter__(self) -> Iterator[SuppressionEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


STATE_FACTORIES = {
    Capability.TAGGABLE: TagSet,
    Capability.SUPPRESSIBLE: SuppressionLedger,
}


def new_capability_state(capabilities) -> dict[Capability, Any]:
    """Fresh state objects for a set of declared capabilities."""
    return {cap: STATE_FACTORIES[cap]() for cap in sorted(capabilities, key=lambda c: c.value)}


def has_capability(node: Node, capability: Capability) -> bool:
    return capability in node.capabilities


def capability_state(node: Node, capability: Capability):
    """Return the node's state for ``capability`` or raise NotSupported."""
    try:
        return node._capability_state[capability]
    except KeyError:
        raise NotSupported(node.path, capability.value) from None


def tags_of(node: Node) -> TagSet:
    return capability_state(node, Capability.TAGGABLE)


def ledger_of(node: Node) -> SuppressionLedger:
    return capability_state(node, Capability.SUPPRESSIBLE)

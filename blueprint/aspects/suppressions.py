"""Suppression aspect: record accepted policy exceptions on a node.

Suppressions target one known node, so they are appended when the aspect is
created instead of during the aspect pass.
"""

from __future__ import annotations
from typing import Iterable, Mapping, Sequence, Union

from ..core.aspects import Aspect, Aspects
from ..core.capabilities import SuppressionEntry, ledger_of
from ..core.node import Node
from ..errors import InvalidSuppression
from ..utils import get_logger

logger = get_logger()

SuppressionInput = Union[Mapping[str, str], Sequence[str]]


def _to_entry(item: SuppressionInput, applies_to_subtree: bool) -> SuppressionEntry:
    if isinstance(item, Mapping):
        rule_id = item.get("id", "")
        reason = item.get("reason", "")
    elif isinstance(item, (tuple, list)) and len(item) == 2:
        rule_id, reason = item
    else:
        raise InvalidSuppression(
            "Suppression must be {'id': ..., 'reason': ...} or (rule_id, reason)",
            {"suppression": repr(item)},
        )
    return SuppressionEntry(rule_id, reason, applies_to_subtree)


class SuppressionAspect(Aspect):
    """Append suppression entries to ``target``'s ledger on construction."""

    def __init__(
        self,
        target: Node,
        suppressions: Iterable[SuppressionInput],
        applies_to_subtree: bool = False,
    ):
        # Validate everything before touching the ledger
        entries = [_to_entry(item, applies_to_subtree) for item in suppressions]
        ledger = ledger_of(target)
        for entry in entries:
            ledger.append(entry)
        self.target = target
        self.entries = tuple(entries)

        logger.debug(
            "Suppressions recorded",
            extra={
                "node": target.path,
                "rules": [entry.rule_id for entry in entries],
                "applies_to_subtree": applies_to_subtree,
            },
        )

    def visit(self, node: Node) -> None:
        pass


def add_resource_suppressions(
    node: Node,
    suppressions: Iterable[SuppressionInput],
    apply_to_children: bool = False,
) -> SuppressionAspect:
    """Suppress rules on ``node`` (and its descendants if ``apply_to_children``)."""
    registry = Aspects.of(node)
    registry.check_open(SuppressionAspect.__name__)
    aspect = SuppressionAspect(node, suppressions, apply_to_children)
    registry.add(aspect)
    return aspect


def add_stack_suppressions(
    stack: Node, suppressions: Iterable[SuppressionInput]
) -> SuppressionAspect:
    """Suppress rules on every node of ``stack``."""
    return add_resource_suppressions(stack, suppressions, apply_to_children=True)

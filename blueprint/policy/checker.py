"""Policy checker: evaluate rules against a finished graph.

A finding on a node is suppressed when the node's own ledger has an entry
for the rule, or when an ancestor's ledger has one that applies to its
subtree. Entries are independent: any applicable match suppresses.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Callable, Iterable

from ..core.capabilities import (
    Capability,
    SuppressionEntry,
    has_capability,
    ledger_of,
)
from ..core.node import Node
from ..utils import get_logger

logger = get_logger()


class Level(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Rule:
    """``check(node)`` returns True when the node is non-compliant."""

    rule_id: str
    level: Level
    description: str
    check: Callable[[Node], bool]


@dataclass(frozen=True)
class Finding:
    rule_id: str
    level: Level
    path: str
    message: str
    suppressed: bool = False
    suppression_reason: str | None = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["level"] = self.level.value
        return data


@dataclass
class PolicyReport:
    checker: str
    findings: list[Finding] = field(default_factory=list)

    @property
    def reported(self) -> list[Finding]:
        return [f for f in self.findings if not f.suppressed]

    @property
    def errors(self) -> list[Finding]:
        return [f for f in self.reported if f.level == Level.ERROR]

    @property
    def warnings(self) -> list[Finding]:
        return [f for f in self.reported if f.level == Level.WARNING]

    @property
    def suppressed(self) -> list[Finding]:
        return [f for f in self.findings if f.suppressed]

    def to_dict(self) -> dict:
        return {
            "checker": self.checker,
            "findings": [f.to_dict() for f in self.findings],
            "summary": {
                "errors": len(self.errors),
                "warnings": len(self.warnings),
                "suppressed": len(self.suppressed),
            },
        }


def is_suppressed(node: Node, rule_id: str) -> SuppressionEntry | None:
    """Return the entry that suppresses ``rule_id`` on ``node``, if any."""
    for scope in reversed(node.scopes):
        if not has_capability(scope, Capability.SUPPRESSIBLE):
            continue
        for entry in ledger_of(scope).matching(rule_id):
            if scope is node or entry.applies_to_subtree:
                return entry
    return None


class PolicyChecker:
    """Evaluates a fixed rule set against every node of a subtree."""

    def __init__(self, rules: Iterable[Rule] | None = None, name: str = "BlueprintChecks"):
        if rules is None:
            from .rules import DEFAULT_RULES

            rules = DEFAULT_RULES
        self.rules = list(rules)
        self.name = name
        seen = set()
        for rule in self.rules:
            if rule.rule_id in seen:
                raise ValueError(f"Duplicate rule id '{rule.rule_id}'")
            seen.add(rule.rule_id)

    def check(self, root: Node) -> PolicyReport:
        report = PolicyReport(checker=self.name)
        for node in root.graph.traverse(root):
            for rule in self.rules:
                if not rule.check(node):
                    continue
                entry = is_suppressed(node, rule.rule_id)
                report.findings.append(
                    Finding(
                        rule_id=rule.rule_id,
                        level=rule.level,
                        path=node.path,
                        message=rule.description,
                        suppressed=entry is not None,
                        suppression_reason=entry.reason if entry else None,
                    )
                )

        for finding in report.reported:
            log = logger.error if finding.level == Level.ERROR else logger.warning
            log(
                f"[{finding.rule_id}] {finding.path}: {finding.message}",
                extra={"rule_id": finding.rule_id, "node": finding.path},
            )
        logger.info(
            f"{self.name}: {len(report.errors)} errors, "
            f"{len(report.warnings)} warnings, {len(report.suppressed)} suppressed",
            extra={"checker": self.name, "rules": len(self.rules)},
        )
        return report

"""Pluggable policy checks over a synthesized graph."""

from .checker import Finding, Level, PolicyChecker, PolicyReport, Rule, is_suppressed
from .rules import DEFAULT_RULES

__all__ = [
    "Finding",
    "Level",
    "PolicyChecker",
    "PolicyReport",
    "Rule",
    "is_suppressed",
    "DEFAULT_RULES",
]

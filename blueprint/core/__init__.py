"""Construct graph core: nodes, capabilities, graph, aspects, app."""

from .capabilities import (
    Capability,
    SuppressionEntry,
    SuppressionLedger,
    TagSet,
    capability_state,
    has_capability,
    ledger_of,
    tags_of,
)
from .node import Node
from .graph import Graph
from .aspects import Aspect, Aspects
from .app import App, Environment, Stack

__all__ = [
    "Capability",
    "SuppressionEntry",
    "SuppressionLedger",
    "TagSet",
    "capability_state",
    "has_capability",
    "ledger_of",
    "tags_of",
    "Node",
    "Graph",
    "Aspect",
    "Aspects",
    "App",
    "Environment",
    "Stack",
]

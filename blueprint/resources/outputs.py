"""Stack outputs."""

from __future__ import annotations
from typing import Any

from ..core.node import Node


class Output(Node):
    """A value exported from the stack once deployed."""

    def __init__(
        self,
        scope: Node,
        id: str,
        value: Any,
        description: str | None = None,
        export_name: str | None = None,
    ):
        if value is None or value == "":
            raise ValueError(f"Output '{id}' needs a value")
        super().__init__(scope, id)
        self.value = value
        self.description = description
        self.export_name = export_name

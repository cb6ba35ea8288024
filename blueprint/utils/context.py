"""Cache for environment lookups, persisted as JSON."""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any

from .logging_config import get_logger

logger = get_logger()


class ContextStore:
    """Key/value store for lookup results (e.g. VPC ids).

    Values loaded from ``path`` take precedence over a fresh lookup, so a
    committed context file makes synthesis reproducible without AWS access.
    """

    def __init__(self, path: str | Path | None = None, values: dict | None = None):
        self.path = Path(path) if path else None
        self._values: dict[str, Any] = {}
        self.dirty = False
        if self.path and self.path.exists():
            with open(self.path) as f:
                self._values.update(json.load(f))
            logger.debug(
                "Loaded lookup context",
                extra={"path": str(self.path), "keys": len(self._values)},
            )
        if values:
            self._values.update(values)

    def get(self, key: str) -> Any:
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self.dirty = True

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def save(self) -> None:
        if not self.path or not self.dirty:
            return
        self.path.write_text(json.dumps(self._values, indent=2, sort_keys=True) + "\n")
        logger.info("Saved lookup context", extra={"path": str(self.path)})
        self.dirty = False


def vpc_context_key(account: str, region: str, vpc_name: str) -> str:
    return f"vpc-provider:account={account}:filter.tag:Name={vpc_name}:region={region}"

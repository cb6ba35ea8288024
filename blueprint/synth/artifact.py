"""Synthesis output: templates, tree and manifest."""

from __future__ import annotations
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..utils import get_logger

logger = get_logger()

TREE_FILE = "tree.json"
MANIFEST_FILE = "manifest.json"
POLICY_REPORT_FILE = "policy-report.json"


def dump_json(document: Any) -> str:
    """Stable JSON rendering used for every output file."""
    return json.dumps(document, indent=1, sort_keys=True, ensure_ascii=False) + "\n"


def template_file_name(stack_name: str) -> str:
    return f"{stack_name}.template.json"


@dataclass
class Artifact:
    """Serialized final graph.

    ``templates`` maps stack name to its template. ``reports`` holds policy
    reports produced after synthesis; they are written next to the
    templates but are not part of ``to_json()``.
    """

    templates: dict[str, dict[str, Any]]
    tree: dict[str, Any]
    manifest: dict[str, Any]
    reports: list = field(default_factory=list)

    def template(self, stack_name: str) -> dict[str, Any]:
        try:
            return self.templates[stack_name]
        except KeyError:
            raise KeyError(f"No stack named '{stack_name}' in artifact") from None

    def to_json(self) -> str:
        return dump_json(
            {"manifest": self.manifest, "templates": self.templates, "tree": self.tree}
        )

    def write(self, outdir: str | Path) -> list[Path]:
        """Write every document to ``outdir`` and return the written paths."""
        out = Path(outdir)
        out.mkdir(parents=True, exist_ok=True)

        documents: dict[str, Any] = {
            template_file_name(name): template for name, template in self.templates.items()
        }
        documents[TREE_FILE] = self.tree
        documents[MANIFEST_FILE] = self.manifest
        if self.reports:
            documents[POLICY_REPORT_FILE] = [report.to_dict() for report in self.reports]

        written = []
        for file_name in sorted(documents):
            path = out / file_name
            path.write_text(dump_json(documents[file_name]))
            written.append(path)

        logger.info(
            "Wrote synthesis output",
            extra={"outdir": str(out), "files": [p.name for p in written]},
        )
        return written

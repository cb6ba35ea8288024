"""Synthesis: apply aspects in registration order, then serialize the graph."""

from __future__ import annotations
import hashlib
import re
import time
from enum import Enum
from typing import Any

from ..core.app import Stack
from ..core.aspects import registrations
from ..core.capabilities import Capability, has_capability, ledger_of, tags_of
from ..core.graph import Graph
from ..core.node import Node
from ..errors import SynthesisError
from ..resources.base import GetAtt, Ref, Resource
from ..resources.outputs import Output
from ..utils import get_logger
from .artifact import Artifact, TREE_FILE, template_file_name

logger = get_logger()

TEMPLATE_FORMAT_VERSION = "2010-09-09"
MANIFEST_VERSION = "1.0"
PATH_METADATA_KEY = "blueprint:path"
SUPPRESSION_METADATA_KEY = "blueprint_nag"

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
# Path components left out of the readable part of a logical id
_HIDDEN_COMPONENTS = ("Default", "Resource")
MAX_LOGICAL_ID_LENGTH = 255


def make_logical_id(components: list[str]) -> str:
    """Template-safe identifier for a path below its stack."""
    if len(components) == 1:
        candidate = _NON_ALNUM.sub("", components[0])
        if candidate and len(candidate) <= MAX_LOGICAL_ID_LENGTH:
            return candidate
    digest = hashlib.md5("/".join(components).encode("utf-8")).hexdigest()[:8].upper()
    readable = "".join(
        _NON_ALNUM.sub("", component)
        for component in components
        if component not in _HIDDEN_COMPONENTS
    )
    return readable[: MAX_LOGICAL_ID_LENGTH - len(digest)] + digest


class Synthesizer:
    """One deterministic pass over a graph.

    Steps: freeze the structure, run each registered aspect over its whole
    subtree (one aspect finishes before the next starts), serialize.
    An aspect failure propagates unchanged and no artifact is produced.
    """

    def synthesize(self, graph: Graph) -> Artifact:
        start_time = time.time()
        graph.freeze()

        self.apply_aspects(graph)
        artifact = self.serialize(graph)

        logger.info(
            "Synthesis complete",
            extra={
                "stacks": sorted(artifact.templates),
                "nodes": len(graph),
                "duration_ms": round((time.time() - start_time) * 1000, 1),
            },
        )
        return artifact

    def apply_aspects(self, graph: Graph) -> None:
        ordered = registrations(graph)
        graph._aspect_pass_running = True
        try:
            for registration in ordered:
                aspect_name = type(registration.aspect).__name__
                current: Node | None = None
                visited = 0
                try:
                    for current in graph.traverse(registration.scope):
                        registration.aspect.visit(current)
                        visited += 1
                except Exception as e:
                    logger.error(
                        f"Aspect {aspect_name} failed, synthesis aborted: {e}",
                        extra={
                            "aspect": aspect_name,
                            "scope": registration.scope.path,
                            "node": current.path if current is not None else None,
                        },
                    )
                    raise
                logger.debug(
                    "Aspect applied",
                    extra={
                        "aspect": aspect_name,
                        "scope": registration.scope.path,
                        "visited": visited,
                    },
                )
        finally:
            graph._aspect_pass_running = False

    def serialize(self, graph: Graph) -> Artifact:
        logical_ids = self._assign_logical_ids(graph)
        templates: dict[str, dict[str, Any]] = {}
        artifacts: dict[str, Any] = {}

        for node in graph.traverse():
            if not isinstance(node, Stack):
                continue
            if node.stack_name in templates:
                raise SynthesisError(
                    f"Duplicate stack name '{node.stack_name}'", {"stack": node.path}
                )
            templates[node.stack_name] = self._render_template(node, logical_ids)
            artifacts[node.stack_name] = {
                "environment": "aws://{}/{}".format(
                    node.env.account or "unknown-account",
                    node.env.region or "unknown-region",
                ),
                "properties": {"templateFile": template_file_name(node.stack_name)},
                "type": "aws:cloudformation:stack",
            }

        manifest = {
            "artifacts": artifacts,
            "tree": TREE_FILE,
            "version": MANIFEST_VERSION,
        }
        return Artifact(
            templates=templates,
            tree=self._render_tree(graph.root, logical_ids),
            manifest=manifest,
        )

    def _assign_logical_ids(self, graph: Graph) -> dict[Node, str]:
        logical_ids: dict[Node, str] = {}
        taken: dict[tuple[Stack, str], str] = {}
        for node in graph.traverse():
            if not isinstance(node, (Resource, Output)):
                continue
            try:
                stack = Stack.of(node)
            except ValueError:
                raise SynthesisError(
                    f"'{node.path}' must be defined within a Stack", {"node": node.path}
                ) from None
            components = [scope.id for scope in node.scopes[len(stack.scopes):]]
            logical_id = make_logical_id(components)
            clash = taken.get((stack, logical_id))
            if clash is not None:
                raise SynthesisError(
                    f"Logical id '{logical_id}' of '{node.path}' clashes with '{clash}'",
                    {"logical_id": logical_id},
                )
            taken[(stack, logical_id)] = node.path
            logical_ids[node] = logical_id
        return logical_ids

    def _resolve(self, value: Any, stack: Stack, logical_ids: dict[Node, str]) -> Any:
        if isinstance(value, (Ref, GetAtt)):
            target_stack = Stack.of(value.target)
            if target_stack is not stack:
                raise SynthesisError(
                    f"Cross-stack reference from '{stack.path}' to "
                    f"'{value.target.path}' is not supported",
                    {"stack": stack.path, "target": value.target.path},
                )
            logical_id = logical_ids[value.target]
            if isinstance(value, Ref):
                return {"Ref": logical_id}
            return {"Fn::GetAtt": [logical_id, value.attribute]}
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, dict):
            return {str(k): self._resolve(v, stack, logical_ids) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._resolve(v, stack, logical_ids) for v in value]
        return value

    def _render_template(self, stack: Stack, logical_ids: dict[Node, str]) -> dict[str, Any]:
        resources: dict[str, Any] = {}
        outputs: dict[str, Any] = {}

        for node in stack.graph.traverse(stack):
            if node is not stack and isinstance(node, Stack):
                continue
            if Stack.of(node) is not stack:
                continue
            if isinstance(node, Resource):
                resources[logical_ids[node]] = self._render_resource(node, stack, logical_ids)
            elif isinstance(node, Output):
                output: dict[str, Any] = {
                    "Value": self._resolve(node.value, stack, logical_ids)
                }
                if node.description:
                    output["Description"] = node.description
                if node.export_name:
                    output["Export"] = {"Name": node.export_name}
                outputs[logical_ids[node]] = output

        template: dict[str, Any] = {
            "AWSTemplateFormatVersion": TEMPLATE_FORMAT_VERSION,
            "Resources": resources,
        }
        if outputs:
            template["Outputs"] = outputs
        if stack.description:
            template["Description"] = stack.description
        return template

    def _render_resource(
        self, resource: Resource, stack: Stack, logical_ids: dict[Node, str]
    ) -> dict[str, Any]:
        properties = self._resolve(resource.properties, stack, logical_ids)
        if has_capability(resource, Capability.TAGGABLE) and len(tags_of(resource)):
            properties["Tags"] = tags_of(resource).render()

        metadata: dict[str, Any] = {PATH_METADATA_KEY: resource.path}
        ledger = ledger_of(resource)
        if len(ledger):
            metadata[SUPPRESSION_METADATA_KEY] = {
                "rules_to_suppress": [entry.to_dict() for entry in ledger]
            }

        rendered: dict[str, Any] = {
            "Metadata": metadata,
            "Type": resource.resource_type,
        }
        if properties:
            rendered["Properties"] = properties
        if resource.removal_policy is not None:
            rendered["DeletionPolicy"] = resource.removal_policy.value
            rendered["UpdateReplacePolicy"] = resource.removal_policy.value
        if resource.depends_on:
            rendered["DependsOn"] = sorted(logical_ids[dep] for dep in resource.depends_on)
        return rendered

    def _render_tree(self, node: Node, logical_ids: dict[Node, str]) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "capabilities": sorted(cap.value for cap in node.capabilities),
            "id": node.id,
            "kind": node.kind,
            "path": node.path,
        }
        if isinstance(node, Resource):
            entry["resourceType"] = node.resource_type
        if node in logical_ids:
            entry["logicalId"] = logical_ids[node]
        if has_capability(node, Capability.TAGGABLE):
            entry["tags"] = tags_of(node).as_dict()
        if has_capability(node, Capability.SUPPRESSIBLE):
            entry["suppressions"] = [e.to_dict() for e in ledger_of(node)]
        entry["children"] = [self._render_tree(child, logical_ids) for child in node.children]
        return entry


def synthesize(graph: Graph) -> Artifact:
    """Apply every registered aspect and serialize ``graph``."""
    return Synthesizer().synthesize(graph)

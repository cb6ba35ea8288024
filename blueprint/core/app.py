"""Root and stack containers."""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..utils import get_logger
from ..utils.context import ContextStore
from .node import Node

if TYPE_CHECKING:
    from ..policy.checker import PolicyChecker
    from ..synth.artifact import Artifact

logger = get_logger()


@dataclass(frozen=True)
class Environment:
    """Target account and region of a stack."""

    account: str | None = None
    region: str | None = None

    @property
    def is_agnostic(self) -> bool:
        return not self.account or not self.region


class App(Node):
    """Root of the construct graph."""

    def __init__(self, context: ContextStore | dict | None = None):
        super().__init__(None, "")
        if isinstance(context, ContextStore):
            self.context = context
        else:
            self.context = ContextStore(values=context)
        self._policy_checkers: list[PolicyChecker] = []

    def add_policy_checker(self, checker: PolicyChecker) -> None:
        """Run ``checker`` over the finished graph after every synthesis."""
        self._policy_checkers.append(checker)

    @property
    def stacks(self) -> list[Stack]:
        return [node for node in self.graph.traverse() if isinstance(node, Stack)]

    def synth(self, outdir: str | None = None) -> Artifact:
        """Synthesize the graph, run policy checkers, optionally write output."""
        from ..synth import synthesize

        artifact = synthesize(self.graph)
        for checker in self._policy_checkers:
            artifact.reports.append(checker.check(self))
        if outdir:
            artifact.write(outdir)
        return artifact


class Stack(Node):
    """Unit of deployment; groups resources into one template."""

    def __init__(
        self,
        scope: Node,
        id: str,
        env: Environment | None = None,
        description: str | None = None,
    ):
        super().__init__(scope, id)
        self.env = env or Environment()
        self.description = description
        if self.env.is_agnostic:
            logger.debug(
                "Stack is environment-agnostic",
                extra={"stack": self.path},
            )

    @property
    def stack_name(self) -> str:
        return self.id

    @staticmethod
    def of(node: Node) -> Stack:
        """Nearest enclosing stack of ``node`` (the node itself included)."""
        for scope in reversed(node.scopes):
            if isinstance(scope, Stack):
                return scope
        raise ValueError(f"'{node.path}' is not defined within a Stack")

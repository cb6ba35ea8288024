"""IAM roles assumed by AWS services."""

from __future__ import annotations
from typing import Any, Iterable

from ..core.node import Node
from .base import GetAtt, Resource

POLICY_VERSION = "2012-10-17"


class Role(Resource):
    """Role with an inline default policy that grows through ``add_to_policy``."""

    resource_type = "AWS::IAM::Role"

    def __init__(self, scope: Node, id: str, assumed_by: str, description: str | None = None):
        if not assumed_by:
            raise ValueError("Role needs a service principal")
        properties: dict[str, Any] = {
            "AssumeRolePolicyDocument": {
                "Statement": [
                    {
                        "Action": "sts:AssumeRole",
                        "Effect": "Allow",
                        "Principal": {"Service": assumed_by},
                    }
                ],
                "Version": POLICY_VERSION,
            },
        }
        if description:
            properties["Description"] = description
        super().__init__(scope, id, properties)
        self.assumed_by = assumed_by

    @property
    def role_arn(self) -> GetAtt:
        return self.get_att("Arn")

    @property
    def statements(self) -> list[dict[str, Any]]:
        policies = self.properties.get("Policies", [])
        return policies[0]["PolicyDocument"]["Statement"] if policies else []

    def add_to_policy(self, actions: Iterable[str], resources: Iterable[Any]) -> None:
        actions, resources = sorted(actions), list(resources)
        if not actions or not resources:
            raise ValueError("Policy statement needs actions and resources")
        if "Policies" not in self.properties:
            self.properties["Policies"] = [
                {
                    "PolicyDocument": {"Statement": [], "Version": POLICY_VERSION},
                    "PolicyName": "DefaultPolicy",
                }
            ]
        self.statements.append(
            {"Action": actions, "Effect": "Allow", "Resource": resources}
        )

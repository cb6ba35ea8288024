"""Secrets Manager secret."""

from __future__ import annotations

from ..core.node import Node
from .base import RemovalPolicy, Resource, UntaggableResource


class Secret(Resource):
    """A generated secret. ``rotation_days`` adds a rotation schedule."""

    resource_type = "AWS::SecretsManager::Secret"

    def __init__(
        self,
        scope: Node,
        id: str,
        description: str | None = None,
        removal_policy: RemovalPolicy = RemovalPolicy.RETAIN,
        rotation_days: int | None = None,
    ):
        if rotation_days is not None and not 1 <= rotation_days <= 1000:
            raise ValueError("rotation_days must be between 1 and 1000")
        properties = {"GenerateSecretString": {}}
        if description:
            properties["Description"] = description
        super().__init__(scope, id, properties, removal_policy=removal_policy)

        self.rotation_schedule: RotationSchedule | None = None
        if rotation_days is not None:
            self.rotation_schedule = RotationSchedule(self, "Schedule", self, rotation_days)

    @property
    def secret_arn(self):
        return self.ref


class RotationSchedule(UntaggableResource):
    resource_type = "AWS::SecretsManager::RotationSchedule"

    def __init__(self, scope: Node, id: str, secret: Secret, rotation_days: int):
        super().__init__(
            scope,
            id,
            {
                "SecretId": secret.ref,
                "RotationRules": {"AutomaticallyAfterDays": rotation_days},
            },
        )
        self.rotation_days = rotation_days

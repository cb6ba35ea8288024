"""Container cluster, task definition, service and task auto scaling."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from ..core.node import Node
from .base import Resource, UntaggableResource
from .iam import Role
from .loadbalancing import ApplicationTargetGroup
from .network import SecurityGroup
from .secrets import Secret

ECS_TASKS_PRINCIPAL = "ecs-tasks.amazonaws.com"
SECRET_READ_ACTIONS = ("secretsmanager:DescribeSecret", "secretsmanager:GetSecretValue")

# Valid Fargate CPU units and the memory (MiB) each allows
FARGATE_MEMORY_BY_CPU = {
    256: range(512, 2049, 512),
    512: range(1024, 4097, 1024),
    1024: range(2048, 8193, 1024),
    2048: range(4096, 16385, 1024),
    4096: range(8192, 30721, 1024),
}


def validate_fargate_size(cpu: int, memory_limit_mib: int) -> None:
    allowed = FARGATE_MEMORY_BY_CPU.get(cpu)
    if allowed is None:
        raise ValueError(f"Invalid Fargate cpu value: {cpu}")
    if memory_limit_mib not in allowed:
        raise ValueError(f"Invalid memory {memory_limit_mib} MiB for {cpu} cpu units")


class OperatingSystemFamily(str, Enum):
    LINUX = "LINUX"
    WINDOWS_SERVER_2022_CORE = "WINDOWS_SERVER_2022_CORE"


class CpuArchitecture(str, Enum):
    X86_64 = "X86_64"
    ARM64 = "ARM64"


class PropagatedTagSource(str, Enum):
    SERVICE = "SERVICE"
    TASK_DEFINITION = "TASK_DEFINITION"
    NONE = "NONE"


@dataclass(frozen=True)
class RuntimePlatform:
    operating_system_family: OperatingSystemFamily = OperatingSystemFamily.LINUX
    cpu_architecture: CpuArchitecture = CpuArchitecture.X86_64


@dataclass(frozen=True)
class ContainerImage:
    image_name: str

    @classmethod
    def from_registry(cls, name: str) -> ContainerImage:
        if not name:
            raise ValueError("Container image name must not be empty")
        return cls(name)


class Cluster(Resource):
    resource_type = "AWS::ECS::Cluster"

    def __init__(self, scope: Node, id: str):
        super().__init__(scope, id)


class FargateTaskDefinition(Resource):
    resource_type = "AWS::ECS::TaskDefinition"

    def __init__(
        self,
        scope: Node,
        id: str,
        image: ContainerImage,
        cpu: int = 256,
        memory_limit_mib: int = 512,
        container_port: int = 80,
        secrets: dict[str, Secret] | None = None,
        runtime_platform: RuntimePlatform | None = None,
        container_name: str = "web",
    ):
        validate_fargate_size(cpu, memory_limit_mib)
        platform = runtime_platform or RuntimePlatform()
        container = {
            "Essential": True,
            "Image": image.image_name,
            "Name": container_name,
            "PortMappings": [{"ContainerPort": container_port, "Protocol": "tcp"}],
        }
        if secrets:
            container["Secrets"] = [
                {"Name": name, "ValueFrom": secret.ref}
                for name, secret in sorted(secrets.items())
            ]
        super().__init__(
            scope,
            id,
            {
                "ContainerDefinitions": [container],
                "Cpu": str(cpu),
                "Memory": str(memory_limit_mib),
                "NetworkMode": "awsvpc",
                "RequiresCompatibilities": ["FARGATE"],
                "RuntimePlatform": {
                    "CpuArchitecture": platform.cpu_architecture.value,
                    "OperatingSystemFamily": platform.operating_system_family.value,
                },
            },
        )
        self.container_name = container_name
        self.container_port = container_port

        # ECS resolves container secrets with the execution role
        self.execution_role: Role | None = None
        if secrets:
            self.execution_role = Role(self, "ExecutionRole", assumed_by=ECS_TASKS_PRINCIPAL)
            self.execution_role.add_to_policy(
                SECRET_READ_ACTIONS,
                [secret.secret_arn for _, secret in sorted(secrets.items())],
            )
            self.properties["ExecutionRoleArn"] = self.execution_role.role_arn
            self.add_dependency(self.execution_role)


class FargateService(Resource):
    resource_type = "AWS::ECS::Service"

    def __init__(
        self,
        scope: Node,
        id: str,
        cluster: Cluster,
        task_definition: FargateTaskDefinition,
        subnet_ids: list[str],
        security_group: SecurityGroup,
        desired_count: int = 1,
        propagate_tags: PropagatedTagSource | None = None,
        target_group: ApplicationTargetGroup | None = None,
    ):
        if desired_count < 0:
            raise ValueError("desired_count must not be negative")
        properties = {
            "Cluster": cluster.ref,
            "DesiredCount": desired_count,
            "LaunchType": "FARGATE",
            "NetworkConfiguration": {
                "AwsvpcConfiguration": {
                    "AssignPublicIp": "DISABLED",
                    "SecurityGroups": [security_group.security_group_id],
                    "Subnets": list(subnet_ids),
                }
            },
            "TaskDefinition": task_definition.ref,
        }
        if propagate_tags is not None:
            properties["PropagateTags"] = propagate_tags.value
        if target_group is not None:
            properties["LoadBalancers"] = [
                {
                    "ContainerName": task_definition.container_name,
                    "ContainerPort": task_definition.container_port,
                    "TargetGroupArn": target_group.ref,
                }
            ]
        super().__init__(scope, id, properties)
        self.cluster = cluster
        self.task_definition = task_definition

    @property
    def service_name(self):
        return self.get_att("Name")

    def auto_scale_task_count(self, min_capacity: int, max_capacity: int) -> ScalableTarget:
        return ScalableTarget(self, "TaskCount", self, min_capacity, max_capacity)


class ScalableTarget(UntaggableResource):
    resource_type = "AWS::ApplicationAutoScaling::ScalableTarget"

    def __init__(
        self,
        scope: Node,
        id: str,
        service: FargateService,
        min_capacity: int,
        max_capacity: int,
    ):
        if min_capacity < 0 or max_capacity < min_capacity:
            raise ValueError(
                f"Invalid capacity range {min_capacity}..{max_capacity}"
            )
        super().__init__(
            scope,
            id,
            {
                "MaxCapacity": max_capacity,
                "MinCapacity": min_capacity,
                "ResourceId": {
                    "Fn::Join": [
                        "",
                        [
                            "service/",
                            service.cluster.ref,
                            "/",
                            service.service_name,
                        ],
                    ]
                },
                "ScalableDimension": "ecs:service:DesiredCount",
                "ServiceNamespace": "ecs",
            },
        )
        self.min_capacity = min_capacity
        self.max_capacity = max_capacity

    def scale_on_cpu_utilization(self, id: str, target_utilization_percent: float) -> ScalingPolicy:
        return ScalingPolicy(
            self, id, self, "ECSServiceAverageCPUUtilization", target_utilization_percent
        )

    def scale_on_memory_utilization(self, id: str, target_utilization_percent: float) -> ScalingPolicy:
        return ScalingPolicy(
            self, id, self, "ECSServiceAverageMemoryUtilization", target_utilization_percent
        )


class ScalingPolicy(UntaggableResource):
    resource_type = "AWS::ApplicationAutoScaling::ScalingPolicy"

    def __init__(
        self,
        scope: Node,
        id: str,
        target: ScalableTarget,
        metric_type: str,
        target_value: float,
    ):
        if not 0 < target_value <= 100:
            raise ValueError("target utilization must be within (0, 100]")
        super().__init__(
            scope,
            id,
            {
                "PolicyName": id,
                "PolicyType": "TargetTrackingScaling",
                "ScalingTargetId": target.ref,
                "TargetTrackingScalingPolicyConfiguration": {
                    "PredefinedMetricSpecification": {
                        "PredefinedMetricType": metric_type
                    },
                    "TargetValue": target_value,
                },
            },
        )

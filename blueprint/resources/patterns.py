"""Composite pattern: a Fargate service behind an application load balancer."""

from __future__ import annotations

from ..core.node import Node
from .compute import (
    Cluster,
    ContainerImage,
    FargateService,
    FargateTaskDefinition,
    PropagatedTagSource,
    RuntimePlatform,
    ScalableTarget,
    validate_fargate_size,
)
from .loadbalancing import (
    ApplicationListener,
    ApplicationLoadBalancer,
    ApplicationTargetGroup,
)
from .network import ANY_IPV4, SecurityGroup, SubnetType, VpcLookup
from .secrets import Secret


class ApplicationLoadBalancedFargateService(Node):
    """Grouping container declaring cluster, load balancer and service.

    The container itself is not taggable; the resources it declares are.
    """

    def __init__(
        self,
        scope: Node,
        id: str,
        vpc: VpcLookup,
        image: ContainerImage,
        cpu: int = 256,
        memory_limit_mib: int = 512,
        container_port: int = 80,
        listener_port: int = 80,
        secrets: dict[str, Secret] | None = None,
        task_subnets: SubnetType = SubnetType.PRIVATE_WITH_EGRESS,
        public_load_balancer: bool = True,
        propagate_tags: PropagatedTagSource | None = None,
        runtime_platform: RuntimePlatform | None = None,
        desired_count: int = 1,
        cluster: Cluster | None = None,
    ):
        # Everything that can fail is checked before the pattern attaches
        lb_subnets = vpc.select_subnets(
            SubnetType.PUBLIC if public_load_balancer else SubnetType.PRIVATE_WITH_EGRESS
        )
        service_subnets = vpc.select_subnets(task_subnets)
        validate_fargate_size(cpu, memory_limit_mib)
        if desired_count < 0:
            raise ValueError("desired_count must not be negative")

        super().__init__(scope, id)

        self.cluster = cluster or Cluster(self, "Cluster")
        lb_security_group = SecurityGroup(
            self, "LBSecurityGroup", vpc, description=f"{self.path} load balancer"
        )
        lb_security_group.add_ingress_rule(
            ANY_IPV4 if public_load_balancer else vpc.cidr_block or ANY_IPV4,
            listener_port,
            description=f"Allow from anyone on port {listener_port}",
        )
        self.load_balancer = ApplicationLoadBalancer(
            self,
            "LB",
            lb_subnets,
            lb_security_group,
            internet_facing=public_load_balancer,
        )
        self.target_group = ApplicationTargetGroup(
            self, "TargetGroup", vpc.vpc_id, port=container_port
        )
        self.listener = ApplicationListener(
            self.load_balancer,
            "PublicListener",
            self.load_balancer,
            self.target_group,
            port=listener_port,
        )

        self.task_definition = FargateTaskDefinition(
            self,
            "TaskDef",
            image=image,
            cpu=cpu,
            memory_limit_mib=memory_limit_mib,
            container_port=container_port,
            secrets=secrets,
            runtime_platform=runtime_platform,
        )

        service_security_group = SecurityGroup(
            self, "ServiceSecurityGroup", vpc, description=f"{self.path} service"
        )
        service_security_group.allow_from(
            lb_security_group,
            container_port,
            description="Load balancer to target",
        )
        self.service = FargateService(
            self,
            "Service",
            cluster=self.cluster,
            task_definition=self.task_definition,
            subnet_ids=service_subnets,
            security_group=service_security_group,
            desired_count=desired_count,
            propagate_tags=propagate_tags,
            target_group=self.target_group,
        )
        self.service.add_dependency(self.listener)

    def auto_scale_task_count(self, min_capacity: int, max_capacity: int) -> ScalableTarget:
        return self.service.auto_scale_task_count(min_capacity, max_capacity)

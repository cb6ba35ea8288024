"""Application stack: container service behind a load balancer and a CDN."""

from __future__ import annotations

from blueprint.aspects import add_resource_suppressions
from blueprint.core import Environment, Node, Stack
from blueprint.resources import (
    AllowedMethods,
    ApplicationLoadBalancedFargateService,
    BehaviorOptions,
    ContainerImage,
    CpuArchitecture,
    Distribution,
    HttpVersion,
    LoadBalancerV2Origin,
    OperatingSystemFamily,
    OriginProtocolPolicy,
    Output,
    PropagatedTagSource,
    RemovalPolicy,
    RuntimePlatform,
    Secret,
    SubnetType,
    ViewerProtocolPolicy,
    VpcLookup,
)


class MyAppStack(Stack):
    """
    Stack for the migrated application.

    Declares:
    - Lookup of the landing zone VPC by name
    - Placeholder task secret
    - ARM64 Fargate service behind a public application load balancer
    - CPU and memory based task auto scaling (1-20 tasks)
    - CloudFront distribution in front of the load balancer
    """

    def __init__(
        self,
        scope: Node,
        construct_id: str,
        vpc_name: str,
        container_image: ContainerImage,
        env: Environment | None = None,
        description: str | None = None,
        ec2=None,
    ) -> None:
        super().__init__(scope, construct_id, env=env, description=description)

        vpc = VpcLookup(self, "vpc", vpc_name=vpc_name, ec2=ec2)

        # Dummy secret
        secret = Secret(self, "TaskSecret", removal_policy=RemovalPolicy.DESTROY)

        self.load_balanced_service = ApplicationLoadBalancedFargateService(
            self,
            "Service",
            vpc=vpc,
            image=container_image,
            memory_limit_mib=1024,
            cpu=512,
            secrets={"SAMPLE_SECRET": secret},
            task_subnets=SubnetType.PRIVATE_WITH_EGRESS,
            public_load_balancer=True,
            propagate_tags=PropagatedTagSource.SERVICE,
            runtime_platform=RuntimePlatform(
                operating_system_family=OperatingSystemFamily.LINUX,
                cpu_architecture=CpuArchitecture.ARM64,
            ),
        )
        self.load_balanced_service.target_group.configure_health_check(path="/")
        add_resource_suppressions(
            self.load_balanced_service,
            [
                ("BP-ELB1", "Access logs are collected at the CDN in front of the load balancer"),
                ("BP-ELB2", "Only the CDN talks to the load balancer; viewers are redirected to HTTPS"),
            ],
            apply_to_children=True,
        )

        scalable_target = self.load_balanced_service.auto_scale_task_count(
            min_capacity=1, max_capacity=20
        )
        scalable_target.scale_on_cpu_utilization("CpuScaling", target_utilization_percent=50)
        scalable_target.scale_on_memory_utilization(
            "MemoryScaling", target_utilization_percent=50
        )

        self.distribution = Distribution(
            self,
            "Distribution",
            default_behavior=BehaviorOptions(
                origin=LoadBalancerV2Origin(
                    self.load_balanced_service.load_balancer,
                    protocol_policy=OriginProtocolPolicy.HTTP_ONLY,
                ),
                allowed_methods=AllowedMethods.ALLOW_ALL,
                viewer_protocol_policy=ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
            ),
            http_version=HttpVersion.HTTP2_AND_3,
        )
        add_resource_suppressions(
            self.distribution,
            [
                {
                    "id": "BP-CFR1",
                    "reason": "Load balancer has no certificate yet, origin traffic stays on HTTP",
                },
            ],
        )

        Output(
            self,
            "ServiceDistributionDomainName",
            value=self.distribution.distribution_domain_name,
        )
        Output(
            self,
            "ServiceDistributionId",
            value=self.distribution.distribution_id,
        )

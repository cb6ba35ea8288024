"""Application load balancer, listener and target group."""

from __future__ import annotations
from enum import Enum

from ..core.node import Node
from .base import GetAtt, Resource, UntaggableResource
from .network import SecurityGroup


class ApplicationProtocol(str, Enum):
    HTTP = "HTTP"
    HTTPS = "HTTPS"


class ApplicationLoadBalancer(Resource):
    resource_type = "AWS::ElasticLoadBalancingV2::LoadBalancer"

    def __init__(
        self,
        scope: Node,
        id: str,
        subnet_ids: list[str],
        security_group: SecurityGroup,
        internet_facing: bool = False,
        access_logs_bucket: str | None = None,
    ):
        attributes = [{"Key": "deletion_protection.enabled", "Value": "false"}]
        if access_logs_bucket:
            attributes += [
                {"Key": "access_logs.s3.enabled", "Value": "true"},
                {"Key": "access_logs.s3.bucket", "Value": access_logs_bucket},
            ]
        super().__init__(
            scope,
            id,
            {
                "LoadBalancerAttributes": attributes,
                "Scheme": "internet-facing" if internet_facing else "internal",
                "SecurityGroups": [security_group.security_group_id],
                "Subnets": list(subnet_ids),
                "Type": "application",
            },
        )
        self.internet_facing = internet_facing
        self.access_logs_bucket = access_logs_bucket
        self.security_group = security_group

    @property
    def load_balancer_dns_name(self) -> GetAtt:
        return self.get_att("DNSName")


class ApplicationTargetGroup(Resource):
    resource_type = "AWS::ElasticLoadBalancingV2::TargetGroup"

    def __init__(
        self,
        scope: Node,
        id: str,
        vpc_id: str,
        port: int = 80,
        protocol: ApplicationProtocol = ApplicationProtocol.HTTP,
    ):
        super().__init__(
            scope,
            id,
            {
                "Port": port,
                "Protocol": protocol.value,
                "TargetType": "ip",
                "VpcId": vpc_id,
            },
        )

    def configure_health_check(
        self,
        path: str = "/",
        interval_seconds: int = 30,
        healthy_threshold: int = 5,
        unhealthy_threshold: int = 2,
    ) -> None:
        if not path.startswith("/"):
            raise ValueError(f"Health check path must start with '/': {path}")
        self.properties.update(
            {
                "HealthCheckEnabled": True,
                "HealthCheckIntervalSeconds": interval_seconds,
                "HealthCheckPath": path,
                "HealthyThresholdCount": healthy_threshold,
                "UnhealthyThresholdCount": unhealthy_threshold,
            }
        )


class ApplicationListener(UntaggableResource):
    resource_type = "AWS::ElasticLoadBalancingV2::Listener"

    def __init__(
        self,
        scope: Node,
        id: str,
        load_balancer: ApplicationLoadBalancer,
        default_target_group: ApplicationTargetGroup,
        port: int = 80,
        protocol: ApplicationProtocol = ApplicationProtocol.HTTP,
    ):
        super().__init__(
            scope,
            id,
            {
                "DefaultActions": [
                    {"TargetGroupArn": default_target_group.ref, "Type": "forward"}
                ],
                "LoadBalancerArn": load_balancer.ref,
                "Port": port,
                "Protocol": protocol.value,
            },
        )
        self.port = port
        self.protocol = protocol

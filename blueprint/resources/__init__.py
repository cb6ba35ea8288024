"""Resource kinds that can be declared in a stack."""

from .base import GetAtt, Ref, RemovalPolicy, Resource, UntaggableResource
from .network import SecurityGroup, SubnetType, VpcLookup
from .secrets import RotationSchedule, Secret
from .iam import Role
from .loadbalancing import (
    ApplicationListener,
    ApplicationLoadBalancer,
    ApplicationProtocol,
    ApplicationTargetGroup,
)
from .compute import (
    Cluster,
    ContainerImage,
    CpuArchitecture,
    FargateService,
    FargateTaskDefinition,
    OperatingSystemFamily,
    PropagatedTagSource,
    RuntimePlatform,
    ScalableTarget,
    ScalingPolicy,
)
from .patterns import ApplicationLoadBalancedFargateService
from .cdn import (
    AllowedMethods,
    BehaviorOptions,
    Distribution,
    HttpVersion,
    LoadBalancerV2Origin,
    OriginProtocolPolicy,
    ViewerProtocolPolicy,
)
from .outputs import Output

__all__ = [
    "GetAtt",
    "Ref",
    "RemovalPolicy",
    "Resource",
    "UntaggableResource",
    "SecurityGroup",
    "SubnetType",
    "VpcLookup",
    "RotationSchedule",
    "Secret",
    "Role",
    "ApplicationListener",
    "ApplicationLoadBalancer",
    "ApplicationProtocol",
    "ApplicationTargetGroup",
    "Cluster",
    "ContainerImage",
    "CpuArchitecture",
    "FargateService",
    "FargateTaskDefinition",
    "OperatingSystemFamily",
    "PropagatedTagSource",
    "RuntimePlatform",
    "ScalableTarget",
    "ScalingPolicy",
    "ApplicationLoadBalancedFargateService",
    "AllowedMethods",
    "BehaviorOptions",
    "Distribution",
    "HttpVersion",
    "LoadBalancerV2Origin",
    "OriginProtocolPolicy",
    "ViewerProtocolPolicy",
    "Output",
]

"""Network lookup and security groups."""

from __future__ import annotations
from enum import Enum
from typing import Any

from ..core.app import Stack
from ..core.node import Node
from ..errors import ContextLookupError
from ..utils import get_logger, lookup_vpc
from ..utils.context import vpc_context_key
from .base import GetAtt, Resource

logger = get_logger()

ANY_IPV4 = "0.0.0.0/0"


class SubnetType(str, Enum):
    PUBLIC = "Public"
    PRIVATE_WITH_EGRESS = "Private"
    PRIVATE_ISOLATED = "Isolated"


class VpcLookup(Node):
    """An existing VPC found by name.

    Results come from the app's lookup context when present, otherwise from
    the EC2 API; fresh results are stored back into the context. Requires an
    environment-specific stack. The lookup runs before the node attaches, so
    a failed lookup leaves the graph unchanged.
    """

    def __init__(self, scope: Node, id: str, vpc_name: str, ec2=None):
        path = f"{scope.path}/{id}" if scope.path else id
        env = Stack.of(scope).env
        if env.is_agnostic:
            raise ContextLookupError(
                "VPC lookup requires a stack with an explicit account and region",
                {"node": path, "vpc_name": vpc_name},
            )

        context = scope.root.context
        key = vpc_context_key(env.account, env.region, vpc_name)
        attributes = context.get(key)
        fresh = attributes is None
        if fresh:
            attributes = lookup_vpc(vpc_name, env.region, ec2=ec2)
        else:
            logger.debug("VPC lookup served from context", extra={"key": key})

        super().__init__(scope, id)
        if fresh:
            context.set(key, attributes)

        self.vpc_name = vpc_name
        self.vpc_id: str = attributes["vpc_id"]
        self.cidr_block: str = attributes.get("cidr_block", "")
        self._subnets: dict[SubnetType, list[str]] = {
            SubnetType.PUBLIC: list(attributes.get("public_subnet_ids", [])),
            SubnetType.PRIVATE_WITH_EGRESS: list(attributes.get("private_subnet_ids", [])),
            SubnetType.PRIVATE_ISOLATED: list(attributes.get("isolated_subnet_ids", [])),
        }

    def select_subnets(self, subnet_type: SubnetType) -> list[str]:
        subnet_ids = self._subnets[subnet_type]
        if not subnet_ids:
            raise ContextLookupError(
                f"VPC '{self.vpc_name}' has no {subnet_type.value} subnets",
                {"vpc_id": self.vpc_id, "subnet_type": subnet_type.value},
            )
        return list(subnet_ids)


class SecurityGroup(Resource):
    resource_type = "AWS::EC2::SecurityGroup"

    def __init__(self, scope: Node, id: str, vpc: VpcLookup, description: str = ""):
        super().__init__(
            scope,
            id,
            {
                "GroupDescription": description or id,
                "VpcId": vpc.vpc_id,
                "SecurityGroupIngress": [],
                "SecurityGroupEgress": [
                    {
                        "CidrIp": ANY_IPV4,
                        "Description": "Allow all outbound traffic by default",
                        "IpProtocol": "-1",
                    }
                ],
            },
        )

    @property
    def ingress_rules(self) -> list[dict[str, Any]]:
        return self.properties["SecurityGroupIngress"]

    @property
    def security_group_id(self) -> GetAtt:
        return self.get_att("GroupId")

    def add_ingress_rule(self, cidr: str, port: int, description: str = "") -> None:
        self.ingress_rules.append(
            {
                "CidrIp": cidr,
                "Description": description or f"from {cidr}:{port}",
                "FromPort": port,
                "IpProtocol": "tcp",
                "ToPort": port,
            }
        )

    def allow_from(self, other: SecurityGroup, port: int, description: str = "") -> None:
        self.ingress_rules.append(
            {
                "Description": description or f"from {other.path}:{port}",
                "FromPort": port,
                "IpProtocol": "tcp",
                "SourceSecurityGroupId": other.security_group_id,
                "ToPort": port,
            }
        )

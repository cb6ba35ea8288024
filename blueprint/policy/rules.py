"""Default rule pack (tags, secrets, load balancing, CDN)."""

from __future__ import annotations

from ..aspects.tagging import MANDATORY_TAG_KEYS
from ..core.capabilities import Capability, has_capability, tags_of
from ..core.node import Node
from ..resources.base import RemovalPolicy
from ..resources.cdn import Distribution, OriginProtocolPolicy
from ..resources.loadbalancing import (
    ApplicationListener,
    ApplicationLoadBalancer,
    ApplicationProtocol,
)
from ..resources.network import ANY_IPV4, SecurityGroup
from ..resources.secrets import Secret
from .checker import Level, Rule

WEB_PORTS = {80, 443}


def check_missing_mandatory_tags(node: Node) -> bool:
    """Taggable node without every mandatory tag."""
    if not has_capability(node, Capability.TAGGABLE):
        return False
    tag_set = tags_of(node)
    return any(key not in tag_set for key in MANDATORY_TAG_KEYS)


def check_secret_without_rotation(node: Node) -> bool:
    return isinstance(node, Secret) and node.rotation_schedule is None


def check_secret_destroyed_on_removal(node: Node) -> bool:
    return isinstance(node, Secret) and node.removal_policy == RemovalPolicy.DESTROY


def check_load_balancer_without_access_logs(node: Node) -> bool:
    return isinstance(node, ApplicationLoadBalancer) and not node.access_logs_bucket


def check_plain_http_listener(node: Node) -> bool:
    return (
        isinstance(node, ApplicationListener)
        and node.protocol == ApplicationProtocol.HTTP
    )


def check_open_non_web_ingress(node: Node) -> bool:
    """Security group open to 0.0.0.0/0 on a port other than 80/443."""
    if not isinstance(node, SecurityGroup):
        return False
    return any(
        rule.get("CidrIp") == ANY_IPV4 and rule.get("FromPort") not in WEB_PORTS
        for rule in node.ingress_rules
    )


def check_http_only_origin(node: Node) -> bool:
    return (
        isinstance(node, Distribution)
        and node.default_behavior.origin.protocol_policy
        == OriginProtocolPolicy.HTTP_ONLY
    )


def check_distribution_without_logging(node: Node) -> bool:
    return isinstance(node, Distribution) and not node.log_bucket


DEFAULT_RULES = (
    Rule(
        "BP-TAG1",
        Level.ERROR,
        "Resource is missing one of the mandatory tags: " + ", ".join(MANDATORY_TAG_KEYS),
        check_missing_mandatory_tags,
    ),
    Rule(
        "BP-SM1",
        Level.WARNING,
        "Secret does not have automatic rotation configured",
        check_secret_without_rotation,
    ),
    Rule(
        "BP-SM2",
        Level.WARNING,
        "Secret is deleted when removed from the stack",
        check_secret_destroyed_on_removal,
    ),
    Rule(
        "BP-ELB1",
        Level.ERROR,
        "Application load balancer does not have access logging enabled",
        check_load_balancer_without_access_logs,
    ),
    Rule(
        "BP-ELB2",
        Level.WARNING,
        "Load balancer listener accepts plain HTTP",
        check_plain_http_listener,
    ),
    Rule(
        "BP-EC23",
        Level.ERROR,
        "Security group allows inbound traffic from 0.0.0.0/0 on a non-web port",
        check_open_non_web_ingress,
    ),
    Rule(
        "BP-CFR1",
        Level.ERROR,
        "Distribution connects to its origin over plain HTTP",
        check_http_only_origin,
    ),
    Rule(
        "BP-CFR2",
        Level.WARNING,
        "Distribution does not have access logging enabled",
        check_distribution_without_logging,
    ),
)

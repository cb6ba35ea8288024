"""CDN distribution in front of a load balancer origin."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from ..core.node import Node
from .base import GetAtt, Ref, Resource
from .loadbalancing import ApplicationLoadBalancer


class OriginProtocolPolicy(str, Enum):
    HTTP_ONLY = "http-only"
    HTTPS_ONLY = "https-only"
    MATCH_VIEWER = "match-viewer"


class ViewerProtocolPolicy(str, Enum):
    ALLOW_ALL = "allow-all"
    HTTPS_ONLY = "https-only"
    REDIRECT_TO_HTTPS = "redirect-to-https"


class HttpVersion(str, Enum):
    HTTP1_1 = "http1.1"
    HTTP2 = "http2"
    HTTP2_AND_3 = "http2and3"
    HTTP3 = "http3"


class AllowedMethods(Enum):
    ALLOW_GET_HEAD = ("GET", "HEAD")
    ALLOW_GET_HEAD_OPTIONS = ("GET", "HEAD", "OPTIONS")
    ALLOW_ALL = ("GET", "HEAD", "OPTIONS", "PUT", "PATCH", "POST", "DELETE")


@dataclass(frozen=True)
class LoadBalancerV2Origin:
    load_balancer: ApplicationLoadBalancer
    protocol_policy: OriginProtocolPolicy = OriginProtocolPolicy.HTTPS_ONLY


@dataclass(frozen=True)
class BehaviorOptions:
    origin: LoadBalancerV2Origin
    allowed_methods: AllowedMethods = AllowedMethods.ALLOW_GET_HEAD
    viewer_protocol_policy: ViewerProtocolPolicy = ViewerProtocolPolicy.ALLOW_ALL


# Managed CachingOptimized cache policy
CACHING_OPTIMIZED_POLICY_ID = "658327ea-f89d-4fab-a63d-7e88639e58f6"


class Distribution(Resource):
    resource_type = "AWS::CloudFront::Distribution"

    def __init__(
        self,
        scope: Node,
        id: str,
        default_behavior: BehaviorOptions,
        http_version: HttpVersion = HttpVersion.HTTP2,
        log_bucket: str | None = None,
        enabled: bool = True,
    ):
        origin = default_behavior.origin
        origin_id = f"{id}Origin1"
        config = {
            "DefaultCacheBehavior": {
                "AllowedMethods": list(default_behavior.allowed_methods.value),
                "CachePolicyId": CACHING_OPTIMIZED_POLICY_ID,
                "Compress": True,
                "TargetOriginId": origin_id,
                "ViewerProtocolPolicy": default_behavior.viewer_protocol_policy.value,
            },
            "Enabled": enabled,
            "HttpVersion": http_version.value,
            "IPV6Enabled": True,
            "Origins": [
                {
                    "CustomOriginConfig": {
                        "OriginProtocolPolicy": origin.protocol_policy.value,
                        "OriginSSLProtocols": ["TLSv1.2"],
                    },
                    "DomainName": origin.load_balancer.load_balancer_dns_name,
                    "Id": origin_id,
                }
            ],
        }
        if log_bucket:
            config["Logging"] = {"Bucket": log_bucket}
        super().__init__(scope, id, {"DistributionConfig": config})
        self.default_behavior = default_behavior
        self.log_bucket = log_bucket

    @property
    def distribution_domain_name(self) -> GetAtt:
        return self.get_att("DomainName")

    @property
    def distribution_id(self) -> Ref:
        return self.ref

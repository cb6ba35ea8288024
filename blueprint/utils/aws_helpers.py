"""AWS helper functions."""

from __future__ import annotations
from typing import Any

import boto3
from botocore.exceptions import ClientError

from ..errors import ContextLookupError
from .logging_config import get_logger

logger = get_logger()

# Subnet type tag written by most landing zone tooling
SUBNET_TYPE_TAG = "aws-cdk:subnet-type"


def convert_tags_to_dict(tags: list[dict[str, str]] | None) -> dict[str, str]:
    """Convert AWS tag list to dictionary."""
    return {tag["Key"]: tag["Value"] for tag in tags} if tags else {}


def classify_subnet(subnet: dict[str, Any]) -> str:
    """Return 'Public', 'Private' or 'Isolated' for a described subnet."""
    tags_dict = convert_tags_to_dict(subnet.get("Tags"))
    subnet_type = tags_dict.get(SUBNET_TYPE_TAG)
    if subnet_type in ("Public", "Private", "Isolated"):
        return subnet_type
    return "Public" if subnet.get("MapPublicIpOnLaunch") else "Private"


def lookup_vpc(vpc_name: str, region: str, ec2=None) -> dict[str, Any]:
    """
    Find a VPC by its Name tag and describe its subnets.

    Returns a dict with vpc_id, cidr_block and subnet ids grouped by type.
    """
    ec2 = ec2 or boto3.client("ec2", region_name=region)

    try:
        vpcs = ec2.describe_vpcs(
            Filters=[{"Name": "tag:Name", "Values": [vpc_name]}]
        )["Vpcs"]
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "")
        raise ContextLookupError(
            f"Failed to look up VPC '{vpc_name}' in {region}: {e}",
            {"vpc_name": vpc_name, "region": region, "error_code": error_code},
        ) from e

    if not vpcs:
        raise ContextLookupError(
            f"Could not find any VPC named '{vpc_name}' in {region}",
            {"vpc_name": vpc_name, "region": region},
        )
    if len(vpcs) > 1:
        raise ContextLookupError(
            f"Found {len(vpcs)} VPCs named '{vpc_name}' in {region}, expected one",
            {"vpc_ids": sorted(vpc["VpcId"] for vpc in vpcs)},
        )

    vpc = vpcs[0]
    try:
        subnets = ec2.describe_subnets(
            Filters=[{"Name": "vpc-id", "Values": [vpc["VpcId"]]}]
        )["Subnets"]
    except ClientError as e:
        raise ContextLookupError(
            f"Failed to describe subnets of {vpc['VpcId']}: {e}",
            {"vpc_id": vpc["VpcId"], "region": region},
        ) from e

    grouped: dict[str, list[str]] = {"Public": [], "Private": [], "Isolated": []}
    for subnet in subnets:
        grouped[classify_subnet(subnet)].append(subnet["SubnetId"])

    logger.info(
        "Resolved VPC lookup",
        extra={
            "vpc_name": vpc_name,
            "vpc_id": vpc["VpcId"],
            "region": region,
            "subnets": {k: len(v) for k, v in grouped.items()},
        },
    )

    return {
        "vpc_id": vpc["VpcId"],
        "cidr_block": vpc.get("CidrBlock", ""),
        "public_subnet_ids": sorted(grouped["Public"]),
        "private_subnet_ids": sorted(grouped["Private"]),
        "isolated_subnet_ids": sorted(grouped["Isolated"]),
    }

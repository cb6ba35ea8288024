"""Unit tests for VPC lookup and the lookup context."""

from __future__ import annotations
import json
import pytest
from botocore.exceptions import ClientError

from blueprint.core import App, Stack
from blueprint.errors import ContextLookupError
from blueprint.resources import SubnetType, VpcLookup
from blueprint.utils import lookup_vpc
from blueprint.utils.context import ContextStore, vpc_context_key
from tests.conftest import TEST_ACCOUNT, TEST_REGION, TEST_VPC_NAME


@pytest.mark.unit
@pytest.mark.aws
class TestLookupVpc:
    """Test lookup_vpc against a mocked EC2 client."""

    def test_groups_subnets_by_type(self, mock_ec2_client):
        ec2 = mock_ec2_client(
            subnets=[
                {"SubnetId": "subnet-pub2", "MapPublicIpOnLaunch": True},
                {"SubnetId": "subnet-pub1", "MapPublicIpOnLaunch": True},
                {"SubnetId": "subnet-priv1", "MapPublicIpOnLaunch": False},
                {
                    "SubnetId": "subnet-iso1",
                    "MapPublicIpOnLaunch": False,
                    "Tags": [{"Key": "aws-cdk:subnet-type", "Value": "Isolated"}],
                },
            ]
        )

        result = lookup_vpc(TEST_VPC_NAME, TEST_REGION, ec2=ec2)

        assert result == {
            "vpc_id": "vpc-0abc",
            "cidr_block": "10.0.0.0/16",
            "public_subnet_ids": ["subnet-pub1", "subnet-pub2"],
            "private_subnet_ids": ["subnet-priv1"],
            "isolated_subnet_ids": ["subnet-iso1"],
        }
        ec2.describe_vpcs.assert_called_once_with(
            Filters=[{"Name": "tag:Name", "Values": [TEST_VPC_NAME]}]
        )

    def test_no_matching_vpc(self, mock_ec2_client):
        ec2 = mock_ec2_client(vpcs=[])

        with pytest.raises(ContextLookupError) as exc_info:
            lookup_vpc(TEST_VPC_NAME, TEST_REGION, ec2=ec2)

        assert exc_info.value.details["vpc_name"] == TEST_VPC_NAME
        ec2.describe_subnets.assert_not_called()

    def test_ambiguous_vpc_name(self, mock_ec2_client):
        ec2 = mock_ec2_client(vpcs=[{"VpcId": "vpc-2"}, {"VpcId": "vpc-1"}])

        with pytest.raises(ContextLookupError) as exc_info:
            lookup_vpc(TEST_VPC_NAME, TEST_REGION, ec2=ec2)

        assert exc_info.value.details["vpc_ids"] == ["vpc-1", "vpc-2"]

    def test_client_error_is_wrapped(self, mock_ec2_client):
        ec2 = mock_ec2_client()
        ec2.describe_vpcs.side_effect = ClientError(
            {"Error": {"Code": "UnauthorizedOperation", "Message": "denied"}},
            "DescribeVpcs",
        )

        with pytest.raises(ContextLookupError) as exc_info:
            lookup_vpc(TEST_VPC_NAME, TEST_REGION, ec2=ec2)

        assert exc_info.value.details["error_code"] == "UnauthorizedOperation"
        assert isinstance(exc_info.value.__cause__, ClientError)


@pytest.mark.unit
@pytest.mark.aws
class TestVpcLookupNode:
    """Test VpcLookup context handling."""

    def test_served_from_context(self, vpc_context, test_env, mock_ec2_client):
        ec2 = mock_ec2_client()
        stack = Stack(App(context=vpc_context), "S", env=test_env)

        vpc = VpcLookup(stack, "vpc", vpc_name=TEST_VPC_NAME, ec2=ec2)

        assert vpc.vpc_id == "vpc-0abc"
        assert vpc.select_subnets(SubnetType.PUBLIC) == ["subnet-pub1", "subnet-pub2"]
        ec2.describe_vpcs.assert_not_called()

    def test_fresh_lookup_is_stored(self, test_env, mock_ec2_client, tmp_path):
        context = ContextStore(tmp_path / "cdk.context.json")
        stack = Stack(App(context=context), "S", env=test_env)

        vpc = VpcLookup(stack, "vpc", vpc_name=TEST_VPC_NAME, ec2=mock_ec2_client())
        context.save()

        key = vpc_context_key(TEST_ACCOUNT, TEST_REGION, TEST_VPC_NAME)
        saved = json.loads((tmp_path / "cdk.context.json").read_text())
        assert saved[key]["vpc_id"] == vpc.vpc_id
        assert context.dirty is False

    def test_unchanged_context_is_not_written(self, vpc_context, tmp_path):
        context = ContextStore(tmp_path / "cdk.context.json", values=vpc_context)

        context.save()

        assert not (tmp_path / "cdk.context.json").exists()

    def test_environment_agnostic_stack_is_rejected(self, mock_ec2_client):
        stack = Stack(App(), "S")

        with pytest.raises(ContextLookupError):
            VpcLookup(stack, "vpc", vpc_name=TEST_VPC_NAME, ec2=mock_ec2_client())

    def test_missing_subnet_type(self, vpc_context, test_env):
        stack = Stack(App(context=vpc_context), "S", env=test_env)
        vpc = VpcLookup(stack, "vpc", vpc_name=TEST_VPC_NAME)

        with pytest.raises(ContextLookupError):
            vpc.select_subnets(SubnetType.PRIVATE_ISOLATED)

    def test_failed_lookup_does_not_attach(self, test_env, mock_ec2_client):
        """
        GIVEN a lookup that finds no VPC
        WHEN the same id is declared again with a working client
        THEN the retry succeeds because the failed node never attached
        """
        app = App(context={})
        stack = Stack(app, "S", env=test_env)

        with pytest.raises(ContextLookupError):
            VpcLookup(stack, "vpc", vpc_name=TEST_VPC_NAME, ec2=mock_ec2_client(vpcs=[]))

        assert stack.children == ()
        assert app.context.dirty is False

        vpc = VpcLookup(stack, "vpc", vpc_name=TEST_VPC_NAME, ec2=mock_ec2_client())
        assert stack.children == (vpc,)

    def test_agnostic_stack_failure_does_not_attach(self, mock_ec2_client):
        stack = Stack(App(), "S")

        with pytest.raises(ContextLookupError):
            VpcLookup(stack, "vpc", vpc_name=TEST_VPC_NAME, ec2=mock_ec2_client())

        assert stack.children == ()

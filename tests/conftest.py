"""Pytest configuration and shared fixtures for blueprint tests."""

from __future__ import annotations
import pytest
from unittest.mock import Mock

from blueprint.core import App, Environment, Node, Stack
from blueprint.models import Config
from blueprint.resources import Resource
from blueprint.utils.context import vpc_context_key

TEST_ACCOUNT = "123456789012"
TEST_REGION = "us-east-1"
TEST_VPC_NAME = "landingzone-vpc"

VPC_ATTRIBUTES = {
    "vpc_id": "vpc-0abc",
    "cidr_block": "10.0.0.0/16",
    "public_subnet_ids": ["subnet-pub1", "subnet-pub2"],
    "private_subnet_ids": ["subnet-priv1", "subnet-priv2"],
    "isolated_subnet_ids": [],
}


class TaggableResource(Resource):
    resource_type = "Test::Taggable"


class TreeBuilder:
    """Builder for small graphs.

    Nodes are addressed by id; ``parent`` defaults to the stack (or the app
    when no stack was added).
    """

    def __init__(self):
        self.app = App()
        self._scope: Node = self.app
        self._nodes: dict[str, Node] = {}

    def with_stack(self, stack_id: str = "TestStack", **kwargs) -> TreeBuilder:
        self._scope = Stack(self.app, stack_id, **kwargs)
        self._nodes[stack_id] = self._scope
        return self

    def with_container(self, node_id: str, parent: str | None = None) -> TreeBuilder:
        self._nodes[node_id] = Node(self._parent(parent), node_id)
        return self

    def with_taggable(self, node_id: str, parent: str | None = None) -> TreeBuilder:
        self._nodes[node_id] = TaggableResource(self._parent(parent), node_id)
        return self

    def _parent(self, parent: str | None) -> Node:
        return self._nodes[parent] if parent else self._scope

    def node(self, node_id: str) -> Node:
        return self._nodes[node_id]

    def build(self) -> App:
        return self.app


@pytest.fixture
def tree_builder():
    """Fixture that returns a new TreeBuilder."""
    return TreeBuilder()


@pytest.fixture
def scenario_tree(tree_builder):
    """Stack R (not taggable) with taggable child svc, its child db, a sibling and a group."""
    return (
        tree_builder.with_stack("R")
        .with_container("group")
        .with_taggable("svc")
        .with_taggable("db", parent="svc")
        .with_taggable("other")
    )


@pytest.fixture
def vpc_context():
    """Lookup context with the test VPC already resolved."""
    return {vpc_context_key(TEST_ACCOUNT, TEST_REGION, TEST_VPC_NAME): dict(VPC_ATTRIBUTES)}


@pytest.fixture
def test_env():
    return Environment(account=TEST_ACCOUNT, region=TEST_REGION)


@pytest.fixture
def config():
    """Config built from a fixed environment."""
    return Config.from_env(
        {
            "STAGE": "dev",
            "PROJECT": "Premium Parking migration",
            "OWNER": "Premium Parking",
            "MAP_MIGRATED": "d-server-tbd",
            "CDK_DEFAULT_ACCOUNT": TEST_ACCOUNT,
            "CDK_DEFAULT_REGION": TEST_REGION,
            "VPC_NAME": TEST_VPC_NAME,
        }
    )


@pytest.fixture
def mock_ec2_client():
    """Factory for mock EC2 clients answering VPC and subnet lookups."""

    def _create_mock(vpcs=None, subnets=None):
        mock = Mock()
        mock.describe_vpcs.return_value = {
            "Vpcs": vpcs if vpcs is not None else [
                {"VpcId": "vpc-0abc", "CidrBlock": "10.0.0.0/16"}
            ]
        }
        mock.describe_subnets.return_value = {
            "Subnets": subnets if subnets is not None else [
                {"SubnetId": "subnet-pub1", "MapPublicIpOnLaunch": True},
                {"SubnetId": "subnet-priv1", "MapPublicIpOnLaunch": False},
            ]
        }
        return mock

    return _create_mock

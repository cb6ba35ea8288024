"""Fixtures specific to integration tests."""

import json
import pytest

from tests.conftest import TEST_ACCOUNT, TEST_REGION, TEST_VPC_NAME


@pytest.fixture(autouse=True)
def _mark_as_integration(request):
    """Automatically mark all tests in integration/ as integration tests."""
    request.node.add_marker(pytest.mark.integration)


@pytest.fixture
def synth_env(monkeypatch, tmp_path, vpc_context):
    """Process environment for running the CLI against a temporary outdir.

    The lookup context file is pre-populated so no AWS call is made.
    """
    context_file = tmp_path / "cdk.context.json"
    context_file.write_text(json.dumps(vpc_context))
    outdir = tmp_path / "cdk.out"

    for name in ("PROJECT", "OWNER", "MAP_MIGRATED", "STACK_NAME", "CONTAINER_IMAGE",
                 "POLICY_CHECKS_ENABLED", "FAIL_ON_FINDINGS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STAGE", "dev")
    monkeypatch.setenv("VPC_NAME", TEST_VPC_NAME)
    monkeypatch.setenv("CDK_DEFAULT_ACCOUNT", TEST_ACCOUNT)
    monkeypatch.setenv("CDK_DEFAULT_REGION", TEST_REGION)
    monkeypatch.setenv("OUTDIR", str(outdir))
    monkeypatch.setenv("CONTEXT_FILE", str(context_file))
    return {"outdir": outdir, "context_file": context_file}

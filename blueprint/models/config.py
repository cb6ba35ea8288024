"""Configuration from environment variables.

LOG_LEVEL is read by ``blueprint.utils.logging_config`` when the logger is
created, before any configuration is loaded.
"""

from __future__ import annotations
import os
from typing import Mapping

from ..aspects.tagging import VALID_STAGES, build_required_tags
from ..errors import ConfigurationError

# Mandatory tag values
DEFAULT_STAGE = "dev"
DEFAULT_PROJECT = "Premium Parking migration"
DEFAULT_OWNER = "Premium Parking"
DEFAULT_MAP_MIGRATED = "d-server-tbd"

# Stack declaration
DEFAULT_STACK_NAME = "my-app-dev"
DEFAULT_VPC_NAME = "landingzone-vpc"
DEFAULT_CONTAINER_IMAGE = "nginx"

# Output
DEFAULT_OUTDIR = "cdk.out"
DEFAULT_CONTEXT_FILE = "cdk.context.json"


def _flag(environ: Mapping[str, str], name: str, default: str) -> bool:
    value = environ.get(name, default).lower()
    if value not in ("true", "false"):
        raise ConfigurationError(
            f"{name} must be 'true' or 'false'", {"name": name, "value": value}
        )
    return value == "true"


class Config:
    """Synthesis configuration, read from ``environ`` (defaults to ``os.environ``)."""

    def __init__(self, environ: Mapping[str, str] | None = None):
        env = os.environ if environ is None else environ
        self.stage = env.get("STAGE", DEFAULT_STAGE)
        self.project = env.get("PROJECT", DEFAULT_PROJECT)
        self.owner = env.get("OWNER", DEFAULT_OWNER)
        self.map_migrated = env.get("MAP_MIGRATED", DEFAULT_MAP_MIGRATED)
        self.stack_name = env.get("STACK_NAME", DEFAULT_STACK_NAME)
        self.vpc_name = env.get("VPC_NAME", DEFAULT_VPC_NAME)
        self.container_image = env.get("CONTAINER_IMAGE", DEFAULT_CONTAINER_IMAGE)
        # for development, account/region come from the CLI environment
        self.account = env.get("CDK_DEFAULT_ACCOUNT")
        self.region = env.get("CDK_DEFAULT_REGION")
        self.outdir = env.get("OUTDIR", DEFAULT_OUTDIR)
        self.context_file = env.get("CONTEXT_FILE", DEFAULT_CONTEXT_FILE)
        self.policy_checks_enabled = _flag(env, "POLICY_CHECKS_ENABLED", "true")
        self.fail_on_findings = _flag(env, "FAIL_ON_FINDINGS", "false")
        self.validate()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        return cls(environ)

    def validate(self) -> None:
        if self.stage not in VALID_STAGES:
            raise ConfigurationError(
                f"STAGE must be one of {', '.join(VALID_STAGES)}",
                {"stage": self.stage},
            )
        for name in ("project", "owner", "map_migrated", "stack_name", "vpc_name"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name.upper()} must not be empty")

    @property
    def tags(self) -> dict[str, str]:
        """Mandatory tags applied to every taggable resource."""
        return build_required_tags(
            self.stage, self.project, self.owner, self.map_migrated
        )

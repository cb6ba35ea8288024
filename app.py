#!/usr/bin/env python3
"""Blueprint app: declare the application stack, tag it, check it, synthesize."""

from __future__ import annotations
import argparse
import sys

from blueprint.aspects import ApplyTags, add_stack_suppressions
from blueprint.core import App, Aspects, Environment
from blueprint.errors import ConfigurationError
from blueprint.models import Config
from blueprint.policy import PolicyChecker
from blueprint.resources import ContainerImage
from blueprint.utils import get_logger, set_log_level
from blueprint.utils.context import ContextStore
from stacks import MyAppStack

logger = get_logger()


def build_app(config: Config, context: ContextStore | dict | None = None, ec2=None) -> App:
    """Declare the stack and register tags and policy checks on the app root."""
    app = App(context=context)

    stack = MyAppStack(
        app,
        config.stack_name,
        vpc_name=config.vpc_name,
        container_image=ContainerImage.from_registry(config.container_image),
        # for development, use account/region from the CLI environment
        env=Environment(account=config.account, region=config.region),
        ec2=ec2,
    )
    add_stack_suppressions(
        stack,
        [{"id": "BP-SM1", "reason": "Placeholder task secret, no rotation lambda yet"}],
    )

    # Apply tags
    Aspects.of(app).add(ApplyTags(config.tags))

    if config.policy_checks_enabled:
        app.add_policy_checker(PolicyChecker())
    return app


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synthesize the application stack")
    parser.add_argument("--outdir", help="Output directory (default: $OUTDIR or cdk.out)")
    parser.add_argument(
        "--fail-on-findings",
        action="store_true",
        help="Exit non-zero when unsuppressed policy errors are found",
    )
    parser.add_argument(
        "--no-policy-checks", action="store_true", help="Skip policy checks"
    )
    parser.add_argument("--log-level", help="Override $LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        if args.log_level:
            set_log_level(args.log_level)
        config = Config.from_env()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    if args.outdir:
        config.outdir = args.outdir
    if args.fail_on_findings:
        config.fail_on_findings = True
    if args.no_policy_checks:
        config.policy_checks_enabled = False

    context = ContextStore(config.context_file)
    try:
        app = build_app(config, context)
        artifact = app.synth(outdir=config.outdir)
    except Exception as e:
        logger.error(f"Synthesis failed: {e}")
        raise
    context.save()

    error_count = sum(len(report.errors) for report in artifact.reports)
    if error_count and config.fail_on_findings:
        logger.error(
            f"{error_count} unsuppressed policy errors",
            extra={"outdir": config.outdir},
        )
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

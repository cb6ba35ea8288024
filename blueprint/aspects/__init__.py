"""Concrete aspects: tagging and policy suppressions."""

from .tagging import MANDATORY_TAG_KEYS, ApplyTags, build_required_tags
from .suppressions import (
    SuppressionAspect,
    add_resource_suppressions,
    add_stack_suppressions,
)

__all__ = [
    "MANDATORY_TAG_KEYS",
    "ApplyTags",
    "build_required_tags",
    "SuppressionAspect",
    "add_resource_suppressions",
    "add_stack_suppressions",
]

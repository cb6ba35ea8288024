"""Tagging aspect: uniform tags on every taggable node."""

from __future__ import annotations
from typing import Mapping

from ..core.aspects import Aspect
from ..core.capabilities import Capability, has_capability, tags_of
from ..core.node import Node
from ..errors import ConfigurationError, InvalidTag

MANDATORY_TAG_KEYS = ("stage", "project", "owner", "map-migrated")
VALID_STAGES = ("dev", "staging", "prod")


class ApplyTags(Aspect):
    """Set every configured tag on each taggable node, overwriting existing values."""

    def __init__(self, tags: Mapping[str, str]):
        for key, value in tags.items():
            if not isinstance(key, str) or not key:
                raise InvalidTag("Tag key must be a non-empty string", {"key": key})
            if not isinstance(value, str) or not value:
                raise InvalidTag(
                    f"Tag '{key}' must have a non-empty string value",
                    {"key": key, "value": value},
                )
        self._tags = dict(tags)

    @property
    def tags(self) -> dict[str, str]:
        return dict(self._tags)

    def visit(self, node: Node) -> None:
        if not has_capability(node, Capability.TAGGABLE):
            return
        tag_set = tags_of(node)
        for key, value in self._tags.items():
            tag_set.set_tag(key, value)

    def __repr__(self) -> str:
        return f"ApplyTags({self._tags!r})"


def build_required_tags(
    stage: str,
    project: str,
    owner: str,
    map_migrated: str,
    extra: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Mandatory tag mapping, validated. ``extra`` may add keys but not replace mandatory ones."""
    if stage not in VALID_STAGES:
        raise ConfigurationError(
            f"stage must be one of {', '.join(VALID_STAGES)}", {"stage": stage}
        )
    tags = {
        "stage": stage,
        "project": project,
        "owner": owner,
        "map-migrated": map_migrated,
    }
    missing = [key for key in MANDATORY_TAG_KEYS if not tags[key]]
    if missing:
        raise ConfigurationError(
            f"Missing mandatory tag values: {', '.join(missing)}", {"missing": missing}
        )
    if extra:
        overlap = sorted(key for key in extra if key in MANDATORY_TAG_KEYS)
        if overlap:
            raise ConfigurationError(
                f"Extra tags must not replace mandatory tags: {', '.join(overlap)}",
                {"keys": overlap},
            )
        tags.update(extra)
    return tags

"""Unit tests for the capability registry and capability state records."""

from __future__ import annotations
import pytest

from blueprint.core import (
    Capability,
    SuppressionEntry,
    SuppressionLedger,
    TagSet,
    capability_state,
    has_capability,
    ledger_of,
    tags_of,
)
from blueprint.errors import InvalidSuppression, InvalidTag, NotSupported


@pytest.mark.unit
class TestCapabilityRegistry:
    """Test capability detection and typed accessors."""

    def test_taggable_resource_declares_both_capabilities(self, scenario_tree):
        svc = scenario_tree.node("svc")

        assert has_capability(svc, Capability.TAGGABLE)
        assert has_capability(svc, Capability.SUPPRESSIBLE)
        assert isinstance(tags_of(svc), TagSet)
        assert isinstance(ledger_of(svc), SuppressionLedger)

    def test_grouping_container_is_not_taggable(self, scenario_tree):
        group = scenario_tree.node("group")

        assert has_capability(group, Capability.TAGGABLE) is False
        assert has_capability(group, Capability.SUPPRESSIBLE) is True

    def test_unsupported_capability_state_raises_not_supported(self, scenario_tree):
        """
        GIVEN a grouping container
        WHEN its tag set is requested
        THEN NotSupported should be raised naming the node and capability
        """
        with pytest.raises(NotSupported) as exc_info:
            capability_state(scenario_tree.node("group"), Capability.TAGGABLE)

        assert exc_info.value.node_path == "R/group"
        assert exc_info.value.capability == "taggable"

    def test_each_node_owns_its_state(self, scenario_tree):
        tags_of(scenario_tree.node("svc")).set_tag("k", "v")

        assert "k" not in tags_of(scenario_tree.node("other"))


@pytest.mark.unit
class TestTagSet:
    """Test tag set merge policy."""

    def test_last_write_wins(self):
        tags = TagSet()
        tags.set_tag("stage", "dev")
        tags.set_tag("stage", "prod")

        assert tags == {"stage": "prod"}

    def test_render_is_sorted_by_key(self):
        tags = TagSet()
        tags.set_tag("owner", "team-x")
        tags.set_tag("a-key", "1")

        assert tags.render() == [
            {"Key": "a-key", "Value": "1"},
            {"Key": "owner", "Value": "team-x"},
        ]

    @pytest.mark.parametrize("key,value", [("", "v"), ("k", ""), ("k", None)])
    def test_empty_key_or_value_is_rejected(self, key, value):
        tags = TagSet()

        with pytest.raises(InvalidTag):
            tags.set_tag(key, value)
        assert len(tags) == 0


@pytest.mark.unit
class TestSuppressionLedger:
    """Test the append-only ledger."""

    def test_entries_keep_insertion_order_and_duplicates(self):
        ledger = SuppressionLedger()
        first = SuppressionEntry("RULE-1", "accepted")
        ledger.append(first)
        ledger.append(SuppressionEntry("RULE-2", "accepted", True))
        ledger.append(first)

        assert [e.rule_id for e in ledger.entries] == ["RULE-1", "RULE-2", "RULE-1"]
        assert len(ledger.matching("RULE-1")) == 2

    def test_entries_view_is_read_only(self):
        ledger = SuppressionLedger()
        ledger.append(SuppressionEntry("RULE-1", "accepted"))

        assert isinstance(ledger.entries, tuple)

    @pytest.mark.parametrize("rule_id,reason", [("", "why"), ("RULE-1", ""), ("RULE-1", "  ")])
    def test_entry_requires_rule_id_and_reason(self, rule_id, reason):
        with pytest.raises(InvalidSuppression):
            SuppressionEntry(rule_id, reason)

    def test_entry_serializes_scope_flag(self):
        entry = SuppressionEntry("RULE-1", "accepted", applies_to_subtree=True)

        assert entry.to_dict() == {
            "id": "RULE-1",
            "reason": "accepted",
            "applies_to_children": True,
        }

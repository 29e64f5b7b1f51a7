"""Tests for ConflictResolver detection, resolution and state queries."""

import pytest

from jetgit.conflict.models import ConflictRegion, Resolution
from jetgit.conflict.resolver import ConflictResolver
from jetgit.core.config import ResolverSettings


@pytest.fixture
def resolver():
    return ConflictResolver()


def make_region(start=0, end=4, current="a", incoming="b", **kwargs):
    return ConflictRegion(
        start_line=start,
        end_line=end,
        current_content=current,
        incoming_content=incoming,
        **kwargs,
    )


class TestDetection:
    """Tests for detect_conflicts."""

    def test_detects_regions(self, resolver, conflicted):
        regions = resolver.detect_conflicts(
            conflicted("x", (["a"], ["b"]), "y")
        )
        assert len(regions) == 1
        assert regions[0].start_line == 1

    def test_non_string_rejected(self, resolver):
        with pytest.raises(TypeError):
            resolver.detect_conflicts(42)

    def test_parse_failure_reported_as_empty(self, conflicted):
        class Broken(ConflictResolver):
            def parse_conflict_markers(self, content):
                raise RuntimeError("boom")

        assert Broken().detect_conflicts(conflicted((["a"], ["b"]))) == []

    def test_diff3_setting_reaches_parser(self):
        content = "<<<<<<< a\nours\n||||||| base\nold\n=======\nnew\n>>>>>>> b"
        resolver = ConflictResolver(ResolverSettings(diff3=True))

        regions = resolver.detect_conflicts(content)

        assert regions[0].base_content == "old"


class TestResolveNonConflicting:
    """Tests for the automatic resolution pass."""

    def test_identical_sides_resolved(self, resolver):
        regions = [make_region(current="same", incoming="same")]

        resolved = resolver.resolve_non_conflicting_changes(regions)

        assert resolved[0].is_resolved
        assert resolved[0].resolution is Resolution.CURRENT
        assert resolved[0].auto_resolved is True
        assert resolved[0].auto_resolve_reason == (
            "Identical content on both sides"
        )

    def test_input_not_mutated(self, resolver):
        regions = [make_region(current="", incoming="x")]

        resolver.resolve_non_conflicting_changes(regions)

        assert regions[0].is_resolved is False
        assert regions[0].resolution is None

    def test_order_and_length_preserved(self, resolver):
        regions = [
            make_region(0, 4, current="x = 1", incoming="x = 2"),
            make_region(5, 9, current="", incoming="added"),
            make_region(10, 14, current="kept", incoming=""),
        ]

        resolved = resolver.resolve_non_conflicting_changes(regions)

        assert [r.start_line for r in resolved] == [0, 5, 10]
        assert resolved[0].is_resolved is False
        assert resolved[1].resolution is Resolution.INCOMING
        assert resolved[2].resolution is Resolution.CURRENT

    def test_already_resolved_left_alone(self, resolver):
        done = make_region(
            current="", incoming="x",
            is_resolved=True, resolution=Resolution.CURRENT,
        )

        resolved = resolver.resolve_non_conflicting_changes([done])

        assert resolved[0] is done

    def test_explicit_rules_replace_chain(self):
        resolver = ConflictResolver(rules=[])

        resolved = resolver.resolve_non_conflicting_changes(
            [make_region(current="same", incoming="same")]
        )

        assert resolved[0].is_resolved is False


class TestManualResolution:
    """Tests for user-chosen resolutions."""

    def test_resolve_conflict_marks_manual(self, resolver):
        region = resolver.resolve_conflict(make_region(), "incoming")

        assert region.is_resolved
        assert region.resolution is Resolution.INCOMING
        assert region.auto_resolved is False

    def test_manual_content_kept(self, resolver):
        region = resolver.resolve_conflict(
            make_region(), Resolution.MANUAL, manual_content="merged"
        )

        assert region.manual_content == "merged"

    def test_unknown_resolution_rejected(self, resolver):
        with pytest.raises(ValueError):
            resolver.resolve_conflict(make_region(), "theirs")

    def test_merge_conflict_regions(self, resolver):
        assert resolver.merge_conflict_regions("", "new") == "new"
        assert resolver.merge_conflict_regions("import a", "import b") == (
            "import a\nimport b"
        )
        assert resolver.merge_conflict_regions("x = 1", "x = 2") == "x = 1"


class TestStateQueries:
    """Tests for the resolved/complete/stats queries."""

    def test_resolved_needs_resolution_value(self, resolver):
        assert not resolver.is_conflict_resolved(
            make_region(is_resolved=True)
        )
        assert resolver.is_conflict_resolved(
            make_region(is_resolved=True, resolution=Resolution.BOTH)
        )

    def test_all_resolved_gate(self, resolver):
        done = make_region(is_resolved=True, resolution=Resolution.CURRENT)
        open_region = make_region(5, 9)

        assert resolver.get_all_conflicts_resolved([]) is False
        assert resolver.get_all_conflicts_resolved([done]) is True
        assert resolver.get_all_conflicts_resolved([done, open_region]) is False

    def test_can_complete_merge_messages(self, resolver):
        done = make_region(is_resolved=True, resolution=Resolution.CURRENT)

        assert resolver.can_complete_merge([done]).can_complete
        one = resolver.can_complete_merge([done, make_region()])
        two = resolver.can_complete_merge([make_region(), make_region()])

        assert not one.can_complete
        assert one.reason == "1 conflict still needs to be resolved"
        assert two.reason == "2 conflicts still need to be resolved"

    def test_stats_partition(self, resolver):
        regions = [
            make_region(is_resolved=True, resolution=Resolution.CURRENT,
                        auto_resolved=True),
            make_region(is_resolved=True, resolution=Resolution.INCOMING,
                        auto_resolved=False),
            make_region(),
        ]

        stats = resolver.get_conflict_stats(regions)

        assert stats.total == 3
        assert stats.resolved == 2
        assert stats.auto_resolved == 1
        assert stats.manually_resolved == 1
        assert stats.unresolved == 1
        assert stats.total == stats.resolved + stats.unresolved

    def test_resolution_state(self, resolver):
        regions = resolver.resolve_non_conflicting_changes([
            make_region(0, 4, current="", incoming="x"),
            make_region(5, 9, current="x = 1", incoming="x = 2"),
        ])

        state = resolver.get_conflict_resolution_state(regions)

        assert state.requires_manual_intervention
        assert not state.can_complete_automatically
        assert len(state.auto_resolved_conflicts) == 1
        assert len(state.manual_conflicts) == 1
        assert "1 conflict auto-resolved." in state.resolution_summary
        assert "1 conflict requires manual resolution." in (
            state.resolution_summary
        )
        assert "remaining 1 conflict" in state.next_action

    def test_feedback(self, resolver):
        regions = resolver.resolve_non_conflicting_changes([
            make_region(2, 6, current="", incoming="x"),
        ])

        feedback = resolver.generate_auto_resolution_feedback(regions)

        assert feedback.message == "Automatically resolved 1 conflict"
        assert feedback.details[0].feedback.startswith("Lines 3-7: Pure")
        assert feedback.details[0].feedback.endswith("(incoming)")

    def test_feedback_none(self, resolver):
        feedback = resolver.generate_auto_resolution_feedback([make_region()])

        assert feedback.details == []
        assert "No conflicts" in feedback.message

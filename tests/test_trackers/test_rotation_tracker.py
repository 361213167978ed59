"""Tests for rotation test tracking"""

import pytest
from mock_backend.trackers.rotation import EXPECTED_PATTERN, RotationTestTracker

SESSION_ID = "maestro_session_rotation"


@pytest.fixture
def tracker():
    tracker = RotationTestTracker()
    tracker.initialize_session(SESSION_ID)
    return tracker


class TestRotationAnalysis:
    """Tests for the one-added-one-removed pattern"""

    def test_matches_expected_pattern(self, tracker):
        tracker.track_media_changes(SESSION_ID, {
            "added": [{"identifier": "new-1"}],
            "removed": [{"identifier": "old-1"}]
        })

        media_changes = tracker.get_analysis(SESSION_ID).media_changes
        assert media_changes.unique_added == 1
        assert media_changes.unique_removed == 1
        assert media_changes.matches_expected_pattern is True
        assert media_changes.expected_pattern == EXPECTED_PATTERN

    def test_repeated_identifier_still_matches(self, tracker):
        for _ in range(2):
            tracker.track_media_changes(SESSION_ID, {
                "added": [{"identifier": "new-1"}],
                "removed": [{"identifier": "old-1"}]
            })

        media_changes = tracker.get_analysis(SESSION_ID).media_changes
        assert media_changes.total_added == 2
        assert media_changes.matches_expected_pattern is True

    def test_two_additions_fail_pattern(self, tracker):
        tracker.track_media_changes(SESSION_ID, {
            "added": [{"identifier": "new-1"}, {"identifier": "new-2"}],
            "removed": [{"identifier": "old-1"}]
        })

        media_changes = tracker.get_analysis(SESSION_ID).media_changes
        assert media_changes.unique_added == 2
        assert media_changes.matches_expected_pattern is False

    def test_temp_id_fallback(self, tracker):
        tracker.track_media_changes(SESSION_ID, {"added": [{"temp_id": "tmp-1"}], "removed": []})
        assert tracker.get_analysis(SESSION_ID).media_changes.added_identifiers == ["tmp-1"]

    def test_nothing_tracked(self, tracker):
        analysis = tracker.get_analysis(SESSION_ID)
        assert analysis.media_changes.total_changes == 0
        assert analysis.media_changes.matches_expected_pattern is False

    def test_rotation_events(self, tracker):
        tracker.track_rotation_event(SESSION_ID, {"orientation": "landscape", "media_state": ["a"]})
        tracker.track_rotation_event(SESSION_ID, {})

        events = tracker.get_analysis(SESSION_ID).rotation_events
        assert events.total_events == 2
        assert events.events[0].orientation == "landscape"
        assert events.events[1].orientation == "unknown"

    def test_timeline_keeps_order(self, tracker):
        tracker.track_media_changes(SESSION_ID, {"added": [{"identifier": "a"}], "removed": []})
        tracker.track_media_changes(SESSION_ID, {"added": [], "removed": [{"identifier": "b"}]})

        timeline = tracker.get_analysis(SESSION_ID).timeline
        assert [change.added_count for change in timeline.media_changes] == [1, 0]
        assert [change.removed_identifiers for change in timeline.media_changes] == [[], ["b"]]

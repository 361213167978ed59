"""Tests for remove-listing test tracking"""

import pytest
from mock_backend.trackers.remove_listing import RemoveListingTestTracker

SESSION_ID = "maestro_session_remove"


@pytest.fixture
def tracker():
    tracker = RemoveListingTestTracker()
    tracker.initialize_session(SESSION_ID)
    return tracker


def removal(listings, media):
    return {
        "removed_listings": [{"identifier": listing, "title": f"Listing {listing}"} for listing in listings],
        "removed_media": [{"identifier": identifier, "listing_id": parent} for identifier, parent in media]
    }


class TestRemoveListingAnalysis:
    """Tests for the one-listing-removed pattern"""

    def test_one_listing_with_media_passes(self, tracker):
        tracker.track_removal_changes(SESSION_ID, removal(["L1"], [("M1", "L1"), ("M2", "L1"), ("M3", "L1")]))

        analysis = tracker.get_analysis(SESSION_ID)
        summary = analysis.removal_summary
        assert summary.unique_listings_removed == 1
        assert summary.unique_media_removed == 3
        assert summary.avg_media_per_listing == 3.0
        assert summary.matches_expected_pattern is True
        assert analysis.media_by_listing == {"L1": ["M1", "M2", "M3"]}
        assert analysis.test_result.success is True
        assert analysis.test_result.message == "Test passed: One listing successfully removed with all associated media"
        assert analysis.test_result.details == {
            "listings_removed": 1,
            "media_items_removed": 3,
            "expected_listings": 1
        }

    def test_two_listings_fail(self, tracker):
        tracker.track_removal_changes(SESSION_ID, removal(["L1", "L2"], [("M1", "L1")]))

        analysis = tracker.get_analysis(SESSION_ID)
        assert analysis.removal_summary.matches_expected_pattern is False
        assert analysis.removal_summary.avg_media_per_listing == 0.5
        assert analysis.test_result.success is False
        assert analysis.test_result.message == "Test failed: Expected 1 listing removal, found 2"

    def test_no_listings(self, tracker):
        tracker.track_removal_changes(SESSION_ID, removal([], [("M1", None)]))

        analysis = tracker.get_analysis(SESSION_ID)
        assert analysis.removal_summary.avg_media_per_listing == 0.0
        assert analysis.media_by_listing == {"unknown": ["M1"]}
        assert analysis.test_result.message == "Test failed: Expected 1 listing removal, found 0"

    def test_avg_is_rounded(self, tracker):
        tracker.track_removal_changes(SESSION_ID, removal(["L1", "L2", "L3"], [("M1", "L1")]))
        assert tracker.get_analysis(SESSION_ID).removal_summary.avg_media_per_listing == 0.33

    def test_media_grouping_is_distinct(self, tracker):
        tracker.track_removal_changes(SESSION_ID, removal(["L1"], [("M1", "L1")]))
        tracker.track_removal_changes(SESSION_ID, removal(["L1"], [("M1", "L1")]))

        analysis = tracker.get_analysis(SESSION_ID)
        assert analysis.media_by_listing == {"L1": ["M1"]}
        assert analysis.removal_summary.total_listings_removed == 2
        assert analysis.removal_summary.unique_listings_removed == 1

    def test_removal_events(self, tracker):
        tracker.track_removal_event(SESSION_ID, {"action": "remove_listing", "target_listing": 42, "associated_media_count": 2})

        events = tracker.get_analysis(SESSION_ID).removal_events
        assert events.total_events == 1
        assert events.events[0].target_listing == "42"
        assert events.events[0].associated_media_count == 2

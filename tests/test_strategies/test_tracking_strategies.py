"""Tests for the tracking scenario strategies"""

import json
import pytest
from fastapi.responses import JSONResponse, PlainTextResponse
from mock_backend.models.intercept import InterceptedRequest
from mock_backend.models.scenario import ResponseOverride
from mock_backend.services.session_service import TestSessionService
from mock_backend.strategies.camera_performance import CameraPerformanceStrategy
from mock_backend.strategies.remove_listing import RemoveListingTestStrategy, classify_removals
from mock_backend.strategies.rotation import RotationTestStrategy, classify_media_changes
from mock_backend.trackers.camera_performance import CameraPerformanceTracker
from mock_backend.trackers.remove_listing import RemoveListingTestTracker
from mock_backend.trackers.rotation import RotationTestTracker

TRACKING = ResponseOverride(type="dynamic", generator="camera-performance", parameters={"enable_logging": True})


@pytest.fixture
def session():
    return TestSessionService().create_session("camera-performance-test")


def intercepted(endpoint, path, body=None, method="POST"):
    return InterceptedRequest(method=method, path=path, endpoint=endpoint, route_name=endpoint, body=body)


class TestCameraPerformanceStrategy:
    """Tests for CameraPerformanceStrategy"""

    def test_initializes_tracker_and_sleeps(self, session, sleeps):
        tracker = CameraPerformanceTracker()
        strategy = CameraPerformanceStrategy(tracker)
        config = ResponseOverride(type="dynamic", generator="camera-performance", parameters={"delay": 5})

        result = strategy.process_request(intercepted("catalog.sync", "/mobile-api/v1/catalog/sync"), config, session)

        assert tracker.session_exists(session.session_id)
        assert sleeps == [5.0]
        assert result == {"continue": True, "delay_applied": 5.0, "logging_enabled": False}

    def test_tracks_upload_request(self, session):
        tracker = CameraPerformanceTracker()
        strategy = CameraPerformanceStrategy(tracker)
        body = {"media": [{"identifier": "A", "filename": "a.jpg", "content_type": "image/jpeg", "size": 10}]}

        strategy.process_request(
            intercepted("catalog.request-upload", "/mobile-api/v1/catalog/request-upload", body), TRACKING, session
        )

        assert tracker.get_analysis(session.session_id).upload_requests.unique_identifiers == ["A"]

    def test_tracks_changes_request(self, session):
        tracker = CameraPerformanceTracker()
        strategy = CameraPerformanceStrategy(tracker)
        body = {"changes": {"media": [{"temp_id": "t1"}]}}

        strategy.process_request(intercepted("catalog.changes", "/mobile-api/v1/catalog/changes", body), TRACKING, session)

        assert tracker.get_analysis(session.session_id).changes_requests.unique_identifiers == ["t1"]

    def test_no_tracking_without_logging(self, session):
        tracker = CameraPerformanceTracker()
        strategy = CameraPerformanceStrategy(tracker)
        config = ResponseOverride(type="dynamic", generator="camera-performance")
        body = {"media": [{"identifier": "A"}]}

        strategy.process_request(
            intercepted("catalog.request-upload", "/mobile-api/v1/catalog/request-upload", body), config, session
        )

        assert tracker.get_analysis(session.session_id).upload_requests.total_requests == 0

    def test_never_overrides(self):
        strategy = CameraPerformanceStrategy(CameraPerformanceTracker())
        assert strategy.should_override_response(TRACKING) is False

    def test_fixed_last_modified_rewrite(self, session):
        strategy = CameraPerformanceStrategy(CameraPerformanceTracker())
        config = ResponseOverride(
            type="dynamic", generator="camera-performance",
            parameters={"fixed_last_modified": "2025-08-27 20:24:35"}
        )
        original = JSONResponse(status_code=202, content={"data": [], "last_modified": "now"})

        response = strategy.process_response(original, config, session)

        assert response.status_code == 202
        assert json.loads(response.body) == {"data": [], "last_modified": "2025-08-27 20:24:35"}

    def test_non_json_body_untouched(self, session):
        strategy = CameraPerformanceStrategy(CameraPerformanceTracker())
        config = ResponseOverride(type="dynamic", generator="camera-performance", parameters={"fixed_last_modified": "x"})
        original = PlainTextResponse("hello")

        assert strategy.process_response(original, config, session) is original


class TestRotationTestStrategy:
    """Tests for RotationTestStrategy"""

    def test_classify_media_changes(self):
        classified = classify_media_changes({"media": [
            {"temp_id": "new-1"},
            {"id": "old-1", "deleted": True},
            {"temp_id": "tmp-2", "deleted": True, "id": None},
            {"id": "kept", "temp_id": "x"},
            {"id": "untouched"},
        ]})
        assert [item["identifier"] for item in classified["added"]] == ["new-1", "tmp-2"]
        assert [item["identifier"] for item in classified["removed"]] == ["old-1", "tmp-2"]

    def test_classify_keeps_falsy_ids(self):
        classified = classify_media_changes({"media": [
            {"id": 0, "deleted": True},
            {"id": 0, "temp_id": "t-1"},
            {"id": "", "temp_id": "t-2", "deleted": True},
        ]})
        assert classified["added"] == []
        assert [item["identifier"] for item in classified["removed"]] == [0, ""]

    def test_malformed_changes_ignored(self, session):
        tracker = RotationTestTracker()
        strategy = RotationTestStrategy(tracker)

        for body in ({"changes": [{"id": 1}]}, {"changes": {"media": 5}}, {"changes": "x"}):
            strategy.process_request(intercepted("catalog.changes", "/mobile-api/v1/catalog/changes", body), TRACKING, session)

        analysis = tracker.get_analysis(session.session_id)
        assert analysis.media_changes.total_changes == 0
        assert analysis.rotation_events.total_events == 0

    def test_tracks_changes(self, session):
        tracker = RotationTestTracker()
        strategy = RotationTestStrategy(tracker)
        body = {"changes": {
            "media": [{"temp_id": "new-1"}, {"id": "old-1", "deleted": True}],
            "rotation": {"orientation": "landscape"}
        }}

        strategy.process_request(intercepted("catalog.changes", "/mobile-api/v1/catalog/changes", body), TRACKING, session)

        analysis = tracker.get_analysis(session.session_id)
        assert analysis.media_changes.matches_expected_pattern is True
        assert analysis.rotation_events.total_events == 1

    def test_ignores_non_changes_paths(self, session):
        tracker = RotationTestTracker()
        strategy = RotationTestStrategy(tracker)
        body = {"changes": {"media": [{"temp_id": "new-1"}]}}

        strategy.process_request(intercepted("catalog.sync", "/mobile-api/v1/catalog/sync", body, "GET"), TRACKING, session)

        assert tracker.get_analysis(session.session_id).media_changes.total_changes == 0

    def test_empty_classification_not_tracked(self, session):
        tracker = RotationTestTracker()
        strategy = RotationTestStrategy(tracker)
        body = {"changes": {"media": [{"id": "kept"}]}}

        strategy.process_request(intercepted("catalog.changes", "/mobile-api/v1/catalog/changes", body), TRACKING, session)

        assert tracker.get_analysis(session.session_id).media_changes.total_changes == 0


class TestRemoveListingTestStrategy:
    """Tests for RemoveListingTestStrategy"""

    def test_classify_removals(self):
        classified = classify_removals({
            "listings": [
                {"id": "L1", "action": "delete", "title": "Seats"},
                {"id": "L2", "action": "update"},
                {"temp_id": "T3", "action": "remove"},
            ],
            "media": [
                {"id": "M1", "action": "delete", "listing_id": "L1"},
                {"id": "M2", "action": "create", "listing_id": "L1"},
            ]
        })
        assert [listing["identifier"] for listing in classified["removed_listings"]] == ["L1", "T3"]
        assert classified["removed_media"] == [{"identifier": "M1", "listing_id": "L1"}]

    def test_classify_removals_keeps_falsy_ids(self):
        classified = classify_removals({
            "listings": [{"id": 0, "temp_id": "T0", "action": "delete"}],
            "media": [{"id": 0, "action": "remove", "listing_id": 0}],
        })
        assert classified["removed_listings"][0]["identifier"] == 0
        assert classified["removed_media"] == [{"identifier": 0, "listing_id": 0}]

    def test_malformed_changes_ignored(self, session):
        tracker = RemoveListingTestTracker()
        strategy = RemoveListingTestStrategy(tracker)

        for body in ({"changes": [{"id": 1}]}, {"changes": {"listings": {"id": "L1"}, "media": 3}}):
            strategy.process_request(intercepted("catalog.changes", "/mobile-api/v1/catalog/changes", body), TRACKING, session)

        analysis = tracker.get_analysis(session.session_id)
        assert analysis.removal_events.events == []

    def test_tracks_removal_and_event(self, session):
        tracker = RemoveListingTestTracker()
        strategy = RemoveListingTestStrategy(tracker)
        body = {"changes": {
            "listings": [{"id": "L1", "action": "delete"}],
            "media": [
                {"id": "M1", "action": "delete", "listing_id": "L1"},
                {"id": "M2", "action": "delete", "listing_id": "L1"},
            ]
        }}

        strategy.process_request(intercepted("catalog.changes", "/mobile-api/v1/catalog/changes", body), TRACKING, session)

        analysis = tracker.get_analysis(session.session_id)
        assert analysis.test_result.success is True
        assert analysis.media_by_listing == {"L1": ["M1", "M2"]}
        assert analysis.removal_events.events[0].target_listing == "L1"
        assert analysis.removal_events.events[0].associated_media_count == 2

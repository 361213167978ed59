"""Analysis endpoints for the tracking scenarios"""

import logging
from typing import Optional, Tuple
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from ....services.session_service import extract_session_id, get_session_service
from ....trackers.base import SessionTracker
from ....trackers.camera_performance import get_camera_performance_tracker
from ....trackers.remove_listing import get_remove_listing_test_tracker
from ....trackers.rotation import get_rotation_test_tracker

logger = logging.getLogger(__name__)

CAMERA_PERFORMANCE_SCENARIO = "camera-performance-test"
ROTATION_SCENARIO = "rotation-test"
REMOVE_LISTING_SCENARIO = "remove-listing-test"

CLEARED_MESSAGE = "Tracking data cleared and re-initialized"

router = APIRouter(tags=["tracker-analysis"])


def _no_session_id() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "No test session ID provided",
            "message": "Please provide X-Test-Session-ID header or test_session_id query parameter"
        }
    )


def _no_tracking_data(session_id: str, what: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "No tracking data available",
            "session_id": session_id,
            "message": f"No {what} have been tracked for this session"
        }
    )


def _scenario_session(request: Request, required_scenario: str) -> Tuple[Optional[str], Optional[JSONResponse]]:
    """
    Session id of the request, checked against the scenario the endpoint serves.

    Returns:
        (session_id, None) on success, (session_id or None, error response) otherwise
    """
    session_id = extract_session_id(request.headers, request.query_params)
    if not session_id:
        return None, _no_session_id()

    session = get_session_service().get_session(session_id)
    if session is None:
        return session_id, JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "Session not found",
                "session_id": session_id,
                "message": "The test session may have expired or does not exist"
            }
        )

    if session.scenario != required_scenario:
        return session_id, JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={
                "error": "Invalid scenario",
                "current_scenario": session.scenario,
                "required_scenario": required_scenario,
                "message": f"This endpoint is only available for {required_scenario} scenario"
            }
        )

    return session_id, None


def _clear(request: Request, required_scenario: str, tracker: SessionTracker):
    session_id, error = _scenario_session(request, required_scenario)
    if error is not None:
        return error

    tracker.clear_session(session_id)
    tracker.initialize_session(session_id)
    logger.info(f"[{tracker.tag}] {CLEARED_MESSAGE} - session_id: {session_id}")

    return {"success": True, "message": CLEARED_MESSAGE, "session_id": session_id}


@router.get("/camera-performance/analysis")
async def camera_performance_analysis(request: Request):
    """
    Upload statistics for a camera performance session.

    **Errors:**
    - 400: No session id in header or query
    - 403: Session is not running `camera-performance-test`
    - 404: Session or tracking data not found
    """
    session_id, error = _scenario_session(request, CAMERA_PERFORMANCE_SCENARIO)
    if error is not None:
        return error

    analysis = get_camera_performance_tracker().get_analysis(session_id)
    if analysis is None:
        return _no_tracking_data(session_id, "uploads")

    uploads = analysis.upload_requests
    changes = analysis.changes_requests
    logger.info(
        f"[CAMERA-PERFORMANCE-ANALYSIS] Analysis requested - session_id: {session_id}, "
        f"unique_uploads: {uploads.unique_media_items}, duplicates: {uploads.duplicate_items}"
    )

    return {
        "success": True,
        "data": analysis.model_dump(),
        "summary": {
            "total_unique_uploads": uploads.unique_media_items,
            "total_upload_requests": uploads.total_requests,
            "total_duplicate_uploads": uploads.duplicate_items,
            "duplicate_upload_identifiers": list(uploads.duplicates.keys()),
            "total_unique_changes": changes.unique_media_items,
            "total_changes_requests": changes.total_requests,
            "has_duplicates": bool(uploads.duplicates)
        }
    }


@router.post("/camera-performance/clear")
async def camera_performance_clear(request: Request):
    """Drop the camera performance tracking data and start over"""
    return _clear(request, CAMERA_PERFORMANCE_SCENARIO, get_camera_performance_tracker())


@router.get("/rotation-test/analysis")
async def rotation_test_analysis(request: Request):
    """Media added and removed during a rotation test session"""
    session_id, error = _scenario_session(request, ROTATION_SCENARIO)
    if error is not None:
        return error

    analysis = get_rotation_test_tracker().get_analysis(session_id)
    if analysis is None:
        return _no_tracking_data(session_id, "media changes")

    media_changes = analysis.media_changes
    logger.info(
        f"[ROTATION-TEST-ANALYSIS] Analysis requested - session_id: {session_id}, "
        f"unique_added: {media_changes.unique_added}, unique_removed: {media_changes.unique_removed}, "
        f"matches_pattern: {media_changes.matches_expected_pattern}"
    )

    return {
        "success": True,
        "data": analysis.model_dump(),
        "summary": {
            "total_unique_added": media_changes.unique_added,
            "total_unique_removed": media_changes.unique_removed,
            "matches_expected_pattern": media_changes.matches_expected_pattern,
            "expected_pattern": media_changes.expected_pattern,
            "rotation_events_count": analysis.rotation_events.total_events
        }
    }


@router.post("/rotation-test/clear")
async def rotation_test_clear(request: Request):
    return _clear(request, ROTATION_SCENARIO, get_rotation_test_tracker())


@router.get("/rotation-test/timeline")
async def rotation_test_timeline(request: Request):
    """Chronological media changes and rotation events"""
    session_id = extract_session_id(request.headers, request.query_params)
    if not session_id:
        return _no_session_id()

    analysis = get_rotation_test_tracker().get_analysis(session_id)
    if analysis is None:
        return _no_tracking_data(session_id, "media changes")

    return {
        "success": True,
        "session_id": session_id,
        "timeline": analysis.timeline.model_dump(),
        "rotation_events": [event.model_dump() for event in analysis.rotation_events.events]
    }


@router.get("/remove-listing-test/analysis")
async def remove_listing_test_analysis(request: Request):
    """Listings and media removed during a remove-listing test session"""
    session_id, error = _scenario_session(request, REMOVE_LISTING_SCENARIO)
    if error is not None:
        return error

    analysis = get_remove_listing_test_tracker().get_analysis(session_id)
    if analysis is None:
        return _no_tracking_data(session_id, "listing removals")

    removal_summary = analysis.removal_summary
    logger.info(
        f"[REMOVE-LISTING-TEST-ANALYSIS] Analysis requested - session_id: {session_id}, "
        f"unique_listings_removed: {removal_summary.unique_listings_removed}, "
        f"unique_media_removed: {removal_summary.unique_media_removed}, "
        f"test_success: {analysis.test_result.success}"
    )

    return {
        "success": True,
        "data": analysis.model_dump(),
        "summary": {
            "total_listings_removed": removal_summary.unique_listings_removed,
            "total_media_removed": removal_summary.unique_media_removed,
            "matches_expected_pattern": removal_summary.matches_expected_pattern,
            "expected_pattern": removal_summary.expected_pattern,
            "avg_media_per_listing": removal_summary.avg_media_per_listing,
            "test_passed": analysis.test_result.success
        }
    }


@router.post("/remove-listing-test/clear")
async def remove_listing_test_clear(request: Request):
    return _clear(request, REMOVE_LISTING_SCENARIO, get_remove_listing_test_tracker())


@router.get("/remove-listing-test/timeline")
async def remove_listing_test_timeline(request: Request):
    """Chronological removals grouped with the media of each listing"""
    session_id = extract_session_id(request.headers, request.query_params)
    if not session_id:
        return _no_session_id()

    analysis = get_remove_listing_test_tracker().get_analysis(session_id)
    if analysis is None:
        return _no_tracking_data(session_id, "listing removals")

    return {
        "success": True,
        "session_id": session_id,
        "timeline": analysis.timeline.model_dump(),
        "media_by_listing": analysis.media_by_listing
    }

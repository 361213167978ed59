"""Camera performance scenario strategy"""

import logging
import time
from typing import Any, Dict, List, Optional
from starlette.responses import Response
from ..models.intercept import InterceptedRequest
from ..models.scenario import ResponseOverride
from ..models.session import TestSession
from ..trackers.camera_performance import CameraPerformanceTracker
from .base import ScenarioStrategy, apply_fixed_last_modified, list_field, request_changes

logger = logging.getLogger(__name__)

TAG = "CAMERA-PERFORMANCE"


def _upload_items(body: Dict[str, Any]) -> List[Dict[str, Any]]:
    items = []
    for item in list_field(body, "media"):
        if not isinstance(item, dict):
            continue
        items.append({
            "identifier": item.get("identifier"),
            "filename": item.get("filename"),
            "content_type": item.get("content_type"),
            "size": item.get("size"),
        })
    return items


class CameraPerformanceStrategy(ScenarioStrategy):
    """
    Slows the catalog endpoints down and records which media the app
    uploads, so duplicate uploads show up in the tracker analysis.

    Parameters read from the endpoint configuration:
        delay: seconds to sleep before the controller runs
        enable_logging: classify and track the request
        fixed_last_modified: value forced into `last_modified` of JSON bodies
    """

    def __init__(self, tracker: CameraPerformanceTracker):
        self.tracker = tracker

    def process_request(self, request: InterceptedRequest, config: ResponseOverride, session: TestSession) -> Dict[str, Any]:
        parameters = config.parameters
        session_id = session.session_id

        if not self.tracker.session_exists(session_id):
            self.tracker.initialize_session(session_id)

        delay = float(parameters.get("delay") or 0)
        if delay > 0:
            logger.info(f"[{TAG}] Applying delay - session_id: {session_id}, endpoint: {request.endpoint}, delay: {delay}s")
            time.sleep(delay)

        logging_enabled = bool(parameters.get("enable_logging", False))
        if logging_enabled:
            self._track(request, session_id)

        return {"continue": True, "delay_applied": delay, "logging_enabled": logging_enabled}

    def _track(self, request: InterceptedRequest, session_id: str):
        endpoint = request.endpoint
        body = request.json_body()

        if "changes" in endpoint:
            changes = request_changes(request)
            logger.info(
                f"[{TAG}] Changes request - session_id: {session_id}, "
                f"media_count: {len(list_field(changes, 'media'))}"
            )
            self.tracker.track_changes_request(session_id, changes)
        elif "request-upload" in endpoint:
            media_items = _upload_items(body)
            logger.info(
                f"[{TAG}] Upload request - session_id: {session_id}, media_count: {len(media_items)}"
            )
            if media_items:
                self.tracker.track_upload_request(session_id, media_items)
        elif "s3-upload" in endpoint or "mock-s3" in endpoint:
            logger.info(
                f"[{TAG}] S3 upload - session_id: {session_id}, path: {request.path}, "
                f"content_length: {request.headers.get('content-length')}"
            )
        else:
            logger.info(f"[{TAG}] Request - session_id: {session_id}, endpoint: {endpoint}")

    def process_response(self, response: Response, config: ResponseOverride, session: TestSession) -> Response:
        return apply_fixed_last_modified(response, config.parameters)

    def should_override_response(self, config: ResponseOverride) -> bool:
        return False

    def generate_response(self, request: InterceptedRequest, config: ResponseOverride, session: TestSession) -> Optional[Response]:
        return None

"""Device rotation scenario strategy"""

import logging
from typing import Any, Dict, Optional
from starlette.responses import Response
from ..models.intercept import InterceptedRequest
from ..models.scenario import ResponseOverride
from ..models.session import TestSession
from ..trackers.rotation import RotationTestTracker
from .base import ScenarioStrategy, apply_fixed_last_modified, first_present, list_field, request_changes

logger = logging.getLogger(__name__)

TAG = "ROTATION-TEST"


def classify_media_changes(changes: Dict[str, Any]) -> Dict[str, list]:
    """
    Split `changes.media[]` into added and removed items.

    New media carry a client `temp_id` and no server `id`; removed media are
    flagged with `deleted: true`. A new item that is also deleted counts as
    both.
    """
    added = []
    removed = []
    for item in list_field(changes, "media"):
        if not isinstance(item, dict):
            continue
        if item.get("temp_id") is not None and item.get("id") is None:
            added.append({"identifier": item["temp_id"], "temp_id": item["temp_id"]})
        if item.get("deleted") is True:
            removed.append({"identifier": first_present(item, "id", "temp_id")})
    return {"added": added, "removed": removed}


class RotationTestStrategy(ScenarioStrategy):
    """Tracks media added and removed across a device rotation"""

    def __init__(self, tracker: RotationTestTracker):
        self.tracker = tracker

    def process_request(self, request: InterceptedRequest, config: ResponseOverride, session: TestSession) -> Dict[str, Any]:
        session_id = session.session_id
        logging_enabled = bool(config.parameters.get("enable_logging", False))

        if not self.tracker.session_exists(session_id):
            self.tracker.initialize_session(session_id)

        if logging_enabled:
            logger.info(
                f"[{TAG}] Request - session_id: {session_id}, method: {request.method}, "
                f"endpoint: {request.endpoint}"
            )

        if "changes" in request.path:
            changes = request_changes(request)
            classified = classify_media_changes(changes)
            if classified["added"] or classified["removed"]:
                self.tracker.track_media_changes(session_id, classified)

            rotation = changes.get("rotation")
            if isinstance(rotation, dict):
                self.tracker.track_rotation_event(session_id, rotation)

        return {"continue": True, "logging_enabled": logging_enabled}

    def process_response(self, response: Response, config: ResponseOverride, session: TestSession) -> Response:
        return apply_fixed_last_modified(response, config.parameters)

    def should_override_response(self, config: ResponseOverride) -> bool:
        return False

    def generate_response(self, request: InterceptedRequest, config: ResponseOverride, session: TestSession) -> Optional[Response]:
        return None

"""Remove-listing scenario strategy"""

import logging
from typing import Any, Dict, Optional
from starlette.responses import Response
from ..models.intercept import InterceptedRequest
from ..models.scenario import ResponseOverride
from ..models.session import TestSession
from ..trackers.remove_listing import RemoveListingTestTracker
from .base import ScenarioStrategy, apply_fixed_last_modified, first_present, list_field, request_changes

logger = logging.getLogger(__name__)

TAG = "REMOVE-LISTING-TEST"

REMOVAL_ACTIONS = ("delete", "remove")


def _is_removal(item: Any) -> bool:
    return isinstance(item, dict) and item.get("action") in REMOVAL_ACTIONS


def classify_removals(changes: Dict[str, Any]) -> Dict[str, list]:
    """Pick the listings and media marked for deletion out of a changes payload"""
    removed_listings = [
        {
            "identifier": first_present(listing, "id", "temp_id"),
            "title": listing.get("title"),
            "status": listing.get("status"),
        }
        for listing in list_field(changes, "listings") if _is_removal(listing)
    ]
    removed_media = [
        {
            "identifier": first_present(item, "id", "temp_id"),
            "listing_id": item.get("listing_id"),
        }
        for item in list_field(changes, "media") if _is_removal(item)
    ]
    return {"removed_listings": removed_listings, "removed_media": removed_media}


class RemoveListingTestStrategy(ScenarioStrategy):
    """Tracks listing deletions and the media removed with them"""

    def __init__(self, tracker: RemoveListingTestTracker):
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
            classified = classify_removals(request_changes(request))
            if classified["removed_listings"] or classified["removed_media"]:
                self.tracker.track_removal_changes(session_id, classified)

            for listing in classified["removed_listings"]:
                associated = [
                    item for item in classified["removed_media"]
                    if item["listing_id"] == listing["identifier"]
                ]
                self.tracker.track_removal_event(session_id, {
                    "action": "remove_listing",
                    "target_listing": listing["identifier"],
                    "associated_media_count": len(associated),
                    "context": {"endpoint": request.endpoint},
                })

        return {"continue": True, "logging_enabled": logging_enabled}

    def process_response(self, response: Response, config: ResponseOverride, session: TestSession) -> Response:
        return apply_fixed_last_modified(response, config.parameters)

    def should_override_response(self, config: ResponseOverride) -> bool:
        return False

    def generate_response(self, request: InterceptedRequest, config: ResponseOverride, session: TestSession) -> Optional[Response]:
        return None

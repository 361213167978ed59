"""Upload / changes tracking for the camera performance scenario"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional
from ..models.tracking import (
    CameraPerformanceAnalysis,
    CameraPerformanceRecord,
    CameraPerformanceTimeline,
    ChangesRequestStats,
    TrackedRequest,
    UploadRequestStats,
)
from ..utils import timeutils
from .base import SessionTracker, as_identifier, unique_identifiers

logger = logging.getLogger(__name__)


class CameraPerformanceTracker(SessionTracker[CameraPerformanceRecord]):
    """
    Records upload-request and changes-request identifiers so a test can
    check whether the app uploaded any photo more than once.
    """

    tag = "CAMERA-PERFORMANCE-TRACKER"
    record_type = CameraPerformanceRecord

    def track_upload_request(self, session_id: str, media_items: List[Dict[str, Any]]) -> None:
        """Track one request-upload call with its media items"""
        identifiers = [as_identifier(item.get("identifier")) for item in media_items]

        def mutate(record: CameraPerformanceRecord):
            record.upload_identifiers.extend(i for i in identifiers if i is not None)
            record.upload_requests.append(TrackedRequest(
                timestamp=timeutils.now_iso(),
                media_count=len(media_items),
                identifiers=identifiers
            ))

        record = self._track(session_id, mutate, "upload")
        if record is not None:
            logger.info(
                f"[{self.tag}] Upload request tracked - session_id: {session_id}, "
                f"media_count: {len(media_items)}, total_uploads: {len(record.upload_identifiers)}, "
                f"unique_uploads: {len(set(record.upload_identifiers))}"
            )

    def track_changes_request(self, session_id: str, changes: Dict[str, Any]) -> None:
        """Track one changes call; media are identified by `temp_id`"""
        media_items = changes.get("media")
        if not isinstance(media_items, list):
            media_items = []
        identifiers = [
            as_identifier(item.get("temp_id")) if isinstance(item, dict) else None
            for item in media_items
        ]

        def mutate(record: CameraPerformanceRecord):
            record.changes_identifiers.extend(i for i in identifiers if i is not None)
            record.changes_requests.append(TrackedRequest(
                timestamp=timeutils.now_iso(),
                media_count=len(media_items),
                identifiers=identifiers
            ))

        record = self._track(session_id, mutate, "changes")
        if record is not None:
            logger.info(
                f"[{self.tag}] Changes request tracked - session_id: {session_id}, "
                f"media_count: {len(media_items)}, total_changes: {len(record.changes_identifiers)}, "
                f"unique_changes: {len(set(record.changes_identifiers))}"
            )

    def get_analysis(self, session_id: str) -> Optional[CameraPerformanceAnalysis]:
        """Upload and changes statistics, or None if the session was never initialized"""
        record = self.get_record(session_id)
        if record is None:
            return None

        unique_uploads = unique_identifiers(record.upload_identifiers)
        unique_changes = unique_identifiers(record.changes_identifiers)

        upload_counts = Counter(i for i in record.upload_identifiers if i)
        duplicates = {identifier: count for identifier, count in upload_counts.items() if count > 1}
        total_uploads = sum(upload_counts.values())
        total_changes = sum(1 for i in record.changes_identifiers if i)

        return CameraPerformanceAnalysis(
            session_id=session_id,
            started_at=record.started_at,
            analysis_at=timeutils.now_iso(),
            upload_requests=UploadRequestStats(
                total_requests=len(record.upload_requests),
                total_media_items=total_uploads,
                unique_media_items=len(unique_uploads),
                duplicate_items=total_uploads - len(unique_uploads),
                unique_identifiers=unique_uploads,
                duplicates=duplicates
            ),
            changes_requests=ChangesRequestStats(
                total_requests=len(record.changes_requests),
                total_media_items=total_changes,
                unique_media_items=len(unique_changes),
                unique_identifiers=unique_changes
            ),
            timeline=CameraPerformanceTimeline(
                upload_requests=record.upload_requests,
                changes_requests=record.changes_requests
            )
        )


# Singleton instance
_camera_performance_tracker = CameraPerformanceTracker()


def get_camera_performance_tracker() -> CameraPerformanceTracker:
    """Get the camera performance tracker instance"""
    return _camera_performance_tracker

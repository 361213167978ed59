"""Media change tracking for the device rotation scenario"""

import logging
from typing import Any, Dict, Optional
from ..models.tracking import (
    MediaChangeEvent,
    MediaChangeStats,
    MediaEvent,
    RotationAnalysis,
    RotationEvent,
    RotationEventStats,
    RotationRecord,
    RotationTimeline,
)
from ..utils import timeutils
from .base import SessionTracker, as_identifier, unique_identifiers

logger = logging.getLogger(__name__)

EXPECTED_PATTERN = "1 new media and 1 removed"


def _identifier(item: Dict[str, Any]) -> Optional[str]:
    identifier = as_identifier(item.get("identifier"))
    return identifier if identifier is not None else as_identifier(item.get("temp_id"))


class RotationTestTracker(SessionTracker[RotationRecord]):
    """
    Records media additions and removals around a device rotation.

    The expected outcome of the rotation test is exactly one distinct added
    media and exactly one distinct removed media.
    """

    tag = "ROTATION-TEST-TRACKER"
    record_type = RotationRecord

    def track_media_changes(self, session_id: str, changes: Dict[str, Any]) -> None:
        """
        Track classified media changes.

        Args:
            session_id: Test session identifier
            changes: `{"added": [...], "removed": [...]}`; each item carries
                `identifier` (or `temp_id`)
        """
        added = changes.get("added") or []
        removed = changes.get("removed") or []

        def mutate(record: RotationRecord):
            now = timeutils.now_iso()
            for item in added:
                record.added_media.append(MediaEvent(identifier=_identifier(item), timestamp=now, type="added"))
            for item in removed:
                record.removed_media.append(MediaEvent(identifier=_identifier(item), timestamp=now, type="removed"))
            record.media_changes.append(MediaChangeEvent(
                timestamp=now,
                added_count=len(added),
                removed_count=len(removed),
                added_identifiers=[_identifier(item) for item in added],
                removed_identifiers=[_identifier(item) for item in removed]
            ))

        record = self._track(session_id, mutate, "changes")
        if record is not None:
            logger.info(
                f"[{self.tag}] Media changes tracked - session_id: {session_id}, added: {len(added)}, "
                f"removed: {len(removed)}, total_added: {len(record.added_media)}, "
                f"total_removed: {len(record.removed_media)}"
            )

    def track_rotation_event(self, session_id: str, event_data: Dict[str, Any]) -> None:
        """Track an orientation change reported by the client"""
        orientation = str(event_data.get("orientation") or "unknown")

        def mutate(record: RotationRecord):
            record.rotation_events.append(RotationEvent(
                timestamp=timeutils.now_iso(),
                orientation=orientation,
                media_state=event_data.get("media_state") or []
            ))

        record = self._track(session_id, mutate, "rotation")
        if record is not None:
            logger.info(
                f"[{self.tag}] Rotation event tracked - session_id: {session_id}, "
                f"orientation: {orientation}, event_count: {len(record.rotation_events)}"
            )

    def get_analysis(self, session_id: str) -> Optional[RotationAnalysis]:
        record = self.get_record(session_id)
        if record is None:
            return None

        unique_added = unique_identifiers(event.identifier for event in record.added_media)
        unique_removed = unique_identifiers(event.identifier for event in record.removed_media)
        matches = len(unique_added) == 1 and len(unique_removed) == 1

        return RotationAnalysis(
            session_id=session_id,
            started_at=record.started_at,
            analysis_at=timeutils.now_iso(),
            media_changes=MediaChangeStats(
                total_changes=len(record.media_changes),
                total_added=len(record.added_media),
                total_removed=len(record.removed_media),
                unique_added=len(unique_added),
                unique_removed=len(unique_removed),
                added_identifiers=unique_added,
                removed_identifiers=unique_removed,
                matches_expected_pattern=matches,
                expected_pattern=EXPECTED_PATTERN
            ),
            rotation_events=RotationEventStats(
                total_events=len(record.rotation_events),
                events=record.rotation_events
            ),
            timeline=RotationTimeline(
                media_changes=record.media_changes,
                added_media=record.added_media,
                removed_media=record.removed_media
            )
        )


# Singleton instance
_rotation_test_tracker = RotationTestTracker()


def get_rotation_test_tracker() -> RotationTestTracker:
    """Get the rotation test tracker instance"""
    return _rotation_test_tracker

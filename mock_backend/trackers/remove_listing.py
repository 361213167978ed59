"""Listing removal tracking for the remove-listing scenario"""

import logging
from typing import Any, Dict, List, Optional
from ..models.tracking import (
    RemovalChange,
    RemovalEvent,
    RemovalEventStats,
    RemovalSummary,
    RemovedListing,
    RemovedMedia,
    RemoveListingAnalysis,
    RemoveListingRecord,
    RemoveListingTimeline,
    TestResult,
)
from ..utils import timeutils
from .base import SessionTracker, as_identifier, unique_identifiers

logger = logging.getLogger(__name__)

EXPECTED_PATTERN = "1 listing removed with all associated media"
EXPECTED_LISTINGS = 1
UNKNOWN_LISTING = "unknown"


class RemoveListingTestTracker(SessionTracker[RemoveListingRecord]):
    """
    Records listing and media removals.

    The remove-listing test passes when exactly one distinct listing was
    removed; the media removed alongside it are grouped by parent listing.
    """

    tag = "REMOVE-LISTING-TEST-TRACKER"
    record_type = RemoveListingRecord

    def track_removal_changes(self, session_id: str, changes: Dict[str, Any]) -> None:
        """
        Track classified removals.

        Args:
            session_id: Test session identifier
            changes: `{"removed_listings": [...], "removed_media": [...]}`
        """
        listings = changes.get("removed_listings") or []
        media = changes.get("removed_media") or []

        def mutate(record: RemoveListingRecord):
            now = timeutils.now_iso()
            for listing in listings:
                record.removed_listings.append(RemovedListing(
                    identifier=as_identifier(listing.get("identifier")),
                    title=listing.get("title"),
                    status=listing.get("status"),
                    timestamp=now
                ))
            for item in media:
                record.removed_media.append(RemovedMedia(
                    identifier=as_identifier(item.get("identifier")),
                    listing_id=as_identifier(item.get("listing_id")),
                    timestamp=now
                ))
            record.removal_changes.append(RemovalChange(
                timestamp=now,
                removed_listings_count=len(listings),
                removed_media_count=len(media),
                removed_listing_ids=[as_identifier(listing.get("identifier")) for listing in listings],
                removed_media_ids=[as_identifier(item.get("identifier")) for item in media]
            ))

        record = self._track(session_id, mutate, "changes")
        if record is not None:
            logger.info(
                f"[{self.tag}] Removal changes tracked - session_id: {session_id}, "
                f"removed_listings: {len(listings)}, removed_media: {len(media)}, "
                f"total_removed_listings: {len(record.removed_listings)}, "
                f"total_removed_media: {len(record.removed_media)}"
            )

    def track_removal_event(self, session_id: str, event_data: Dict[str, Any]) -> None:
        """Track a user action that triggered a removal"""
        action = str(event_data.get("action") or "unknown")

        def mutate(record: RemoveListingRecord):
            record.removal_events.append(RemovalEvent(
                timestamp=timeutils.now_iso(),
                action=action,
                target_listing=as_identifier(event_data.get("target_listing")),
                associated_media_count=int(event_data.get("associated_media_count") or 0),
                context=event_data.get("context") or {}
            ))

        record = self._track(session_id, mutate, "removal")
        if record is not None:
            logger.info(
                f"[{self.tag}] Removal event tracked - session_id: {session_id}, "
                f"action: {action}, event_count: {len(record.removal_events)}"
            )

    def get_analysis(self, session_id: str) -> Optional[RemoveListingAnalysis]:
        record = self.get_record(session_id)
        if record is None:
            return None

        unique_listings = unique_identifiers(listing.identifier for listing in record.removed_listings)
        unique_media = unique_identifiers(item.identifier for item in record.removed_media)

        media_by_listing: Dict[str, List[str]] = {}
        for item in record.removed_media:
            group = media_by_listing.setdefault(item.listing_id or UNKNOWN_LISTING, [])
            if item.identifier and item.identifier not in group:
                group.append(item.identifier)

        matches = len(unique_listings) == EXPECTED_LISTINGS
        avg_media_per_listing = (
            round(len(unique_media) / len(unique_listings), 2) if unique_listings else 0.0
        )

        if matches:
            message = "Test passed: One listing successfully removed with all associated media"
        else:
            message = f"Test failed: Expected {EXPECTED_LISTINGS} listing removal, found {len(unique_listings)}"

        return RemoveListingAnalysis(
            session_id=session_id,
            started_at=record.started_at,
            analysis_at=timeutils.now_iso(),
            removal_summary=RemovalSummary(
                total_removal_events=len(record.removal_changes),
                total_listings_removed=len(record.removed_listings),
                total_media_removed=len(record.removed_media),
                unique_listings_removed=len(unique_listings),
                unique_media_removed=len(unique_media),
                listings_removed=unique_listings,
                media_removed=unique_media,
                matches_expected_pattern=matches,
                expected_pattern=EXPECTED_PATTERN,
                avg_media_per_listing=avg_media_per_listing
            ),
            media_by_listing=media_by_listing,
            removal_events=RemovalEventStats(
                total_events=len(record.removal_events),
                events=record.removal_events
            ),
            timeline=RemoveListingTimeline(
                removal_changes=record.removal_changes,
                removed_listings=record.removed_listings,
                removed_media=record.removed_media
            ),
            test_result=TestResult(
                success=matches,
                message=message,
                details={
                    "listings_removed": len(unique_listings),
                    "media_items_removed": len(unique_media),
                    "expected_listings": EXPECTED_LISTINGS
                }
            )
        )


# Singleton instance
_remove_listing_test_tracker = RemoveListingTestTracker()


def get_remove_listing_test_tracker() -> RemoveListingTestTracker:
    """Get the remove listing test tracker instance"""
    return _remove_listing_test_tracker

"""Tracker record and analysis models"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List


# --- Camera performance -----------------------------------------------------

class TrackedRequest(BaseModel):
    """One observed upload or changes request"""
    timestamp: str
    media_count: int
    identifiers: List[Optional[str]] = Field(default_factory=list)


class CameraPerformanceRecord(BaseModel):
    session_id: str
    started_at: str
    upload_identifiers: List[str] = Field(default_factory=list)
    changes_identifiers: List[str] = Field(default_factory=list)
    upload_requests: List[TrackedRequest] = Field(default_factory=list)
    changes_requests: List[TrackedRequest] = Field(default_factory=list)


class UploadRequestStats(BaseModel):
    total_requests: int
    total_media_items: int
    unique_media_items: int
    duplicate_items: int
    unique_identifiers: List[str]
    duplicates: Dict[str, int]


class ChangesRequestStats(BaseModel):
    total_requests: int
    total_media_items: int
    unique_media_items: int
    unique_identifiers: List[str]


class CameraPerformanceTimeline(BaseModel):
    upload_requests: List[TrackedRequest]
    changes_requests: List[TrackedRequest]


class CameraPerformanceAnalysis(BaseModel):
    session_id: str
    started_at: str
    analysis_at: str
    upload_requests: UploadRequestStats
    changes_requests: ChangesRequestStats
    timeline: CameraPerformanceTimeline


# --- Rotation ---------------------------------------------------------------

class MediaEvent(BaseModel):
    identifier: Optional[str] = None
    timestamp: str
    type: str


class MediaChangeEvent(BaseModel):
    timestamp: str
    added_count: int
    removed_count: int
    added_identifiers: List[Optional[str]]
    removed_identifiers: List[Optional[str]]


class RotationEvent(BaseModel):
    timestamp: str
    orientation: str = "unknown"
    media_state: Any = Field(default_factory=list)


class RotationRecord(BaseModel):
    session_id: str
    started_at: str
    media_changes: List[MediaChangeEvent] = Field(default_factory=list)
    added_media: List[MediaEvent] = Field(default_factory=list)
    removed_media: List[MediaEvent] = Field(default_factory=list)
    rotation_events: List[RotationEvent] = Field(default_factory=list)


class MediaChangeStats(BaseModel):
    total_changes: int
    total_added: int
    total_removed: int
    unique_added: int
    unique_removed: int
    added_identifiers: List[str]
    removed_identifiers: List[str]
    matches_expected_pattern: bool
    expected_pattern: str


class RotationEventStats(BaseModel):
    total_events: int
    events: List[RotationEvent]


class RotationTimeline(BaseModel):
    media_changes: List[MediaChangeEvent]
    added_media: List[MediaEvent]
    removed_media: List[MediaEvent]


class RotationAnalysis(BaseModel):
    session_id: str
    started_at: str
    analysis_at: str
    media_changes: MediaChangeStats
    rotation_events: RotationEventStats
    timeline: RotationTimeline


# --- Remove listing ---------------------------------------------------------

class RemovedListing(BaseModel):
    identifier: Optional[str] = None
    title: Optional[str] = None
    status: Optional[str] = None
    timestamp: str
    type: str = "listing_removed"


class RemovedMedia(BaseModel):
    identifier: Optional[str] = None
    listing_id: Optional[str] = None
    timestamp: str
    type: str = "media_removed"


class RemovalChange(BaseModel):
    timestamp: str
    removed_listings_count: int
    removed_media_count: int
    removed_listing_ids: List[Optional[str]]
    removed_media_ids: List[Optional[str]]


class RemovalEvent(BaseModel):
    timestamp: str
    action: str = "unknown"
    target_listing: Optional[str] = None
    associated_media_count: int = 0
    context: Dict[str, Any] = Field(default_factory=dict)


class RemoveListingRecord(BaseModel):
    session_id: str
    started_at: str
    removal_changes: List[RemovalChange] = Field(default_factory=list)
    removed_listings: List[RemovedListing] = Field(default_factory=list)
    removed_media: List[RemovedMedia] = Field(default_factory=list)
    removal_events: List[RemovalEvent] = Field(default_factory=list)


class RemovalSummary(BaseModel):
    total_removal_events: int
    total_listings_removed: int
    total_media_removed: int
    unique_listings_removed: int
    unique_media_removed: int
    listings_removed: List[str]
    media_removed: List[str]
    matches_expected_pattern: bool
    expected_pattern: str
    avg_media_per_listing: float


class RemovalEventStats(BaseModel):
    total_events: int
    events: List[RemovalEvent]


class RemoveListingTimeline(BaseModel):
    removal_changes: List[RemovalChange]
    removed_listings: List[RemovedListing]
    removed_media: List[RemovedMedia]


class TestResult(BaseModel):
    __test__ = False  # not a pytest test class

    success: bool
    message: str
    details: Dict[str, Any]


class RemoveListingAnalysis(BaseModel):
    session_id: str
    started_at: str
    analysis_at: str
    removal_summary: RemovalSummary
    media_by_listing: Dict[str, List[str]]
    removal_events: RemovalEventStats
    timeline: RemoveListingTimeline
    test_result: TestResult

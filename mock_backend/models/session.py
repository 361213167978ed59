"""Test session data models"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List
from datetime import datetime


class SessionState(BaseModel):
    """Mutable per-session bookkeeping"""
    request_count: int = Field(default=0, ge=0)
    last_request_at: Optional[datetime] = None
    custom_data: Dict[str, Any] = Field(default_factory=dict)


class TestSession(BaseModel):
    """Internal session record owned by the session store"""
    __test__ = False  # not a pytest test class

    session_id: str
    scenario: str
    created_at: datetime
    expires_at: datetime
    metadata: Dict[str, Any] = Field(default_factory=dict)
    state: SessionState = Field(default_factory=SessionState)


class SessionMetadata(BaseModel):
    """Metadata sent by the test runner on activation"""
    test_name: Optional[str] = None
    test_suite: Optional[str] = None
    maestro_flow: Optional[str] = None

    class Config:
        extra = "allow"


class ActivateRequest(BaseModel):
    """Request to activate a scenario and open a session"""
    scenario: str = Field(default="default", description="Scenario to activate")
    metadata: SessionMetadata = Field(default_factory=SessionMetadata)

    class Config:
        json_schema_extra = {
            "example": {
                "scenario": "rotation-test",
                "metadata": {
                    "test_name": "rotate_with_new_photo",
                    "test_suite": "media",
                    "maestro_flow": "flows/rotation.yaml"
                }
            }
        }


class ActivateResponse(BaseModel):
    """Response from activating a scenario"""
    session_id: str
    scenario: str
    expires_at: datetime
    is_generic: bool = False
    requested_scenario: str


class SwitchRequest(BaseModel):
    """Request to switch the scenario of an existing session"""
    scenario: str


class SwitchResponse(BaseModel):
    session_id: str
    scenario: str
    message: str = "Scenario switched successfully"


class CurrentSessionResponse(BaseModel):
    session_id: str
    scenario: str
    active: bool = True
    request_count: int
    expires_at: datetime


class SessionMetricsEntry(BaseModel):
    session_id: str
    scenario: str
    request_count: int
    created_at: datetime
    expires_at: datetime


class MetricsResponse(BaseModel):
    active_sessions: int
    scenarios_in_use: List[str]
    total_requests: int
    sessions: List[SessionMetricsEntry]

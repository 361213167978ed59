"""Scenario definition models"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List
from enum import Enum


WILDCARD_ENDPOINT = "*"


class ResponseType(str, Enum):
    """How a configured override produces its response"""
    STATIC = "static"
    DYNAMIC = "dynamic"
    ERROR = "error"
    CUSTOM = "custom"


class ResponseOverride(BaseModel):
    """Per-endpoint response configuration inside a scenario"""
    type: ResponseType
    data: Optional[Any] = None
    status_code: Optional[int] = Field(None, ge=100, le=599)
    headers: Dict[str, str] = Field(default_factory=dict)
    generator: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)
    handler: Optional[str] = None
    delay_ms: int = Field(default=0, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "type": "error",
                "status_code": 429,
                "data": {"error": "Too Many Requests", "retry_after": 60},
                "headers": {"Retry-After": "60"}
            }
        }


class ScenarioDefinition(BaseModel):
    """A named bundle of response overrides"""
    name: str
    display_name: str
    description: str = ""
    responses: Dict[str, ResponseOverride] = Field(default_factory=dict)
    strategy: Optional[str] = None
    author: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ScenarioSummary(BaseModel):
    """Entry of the available-scenarios listing"""
    name: str
    display_name: str
    description: str
    endpoints: List[str]


class ScenarioMetadata(BaseModel):
    """Scenario details exposed by the debug endpoint"""
    name: str
    description: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    author: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

"""Framework-neutral view of an intercepted request"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any


class InterceptedRequest(BaseModel):
    """Request details handed to scenario strategies and custom handlers"""
    method: str
    path: str
    endpoint: str = Field(..., description="Resolved endpoint identifier (route name, action or path)")
    route_name: Optional[str] = None
    path_params: Dict[str, Any] = Field(default_factory=dict)
    query_params: Dict[str, str] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[Any] = None
    client_host: Optional[str] = None
    user_agent: Optional[str] = None

    def json_body(self) -> Dict[str, Any]:
        """Request body when it is a JSON object, else an empty dict"""
        return self.body if isinstance(self.body, dict) else {}

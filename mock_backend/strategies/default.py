"""Pass-through strategy"""

from typing import Any, Dict, Optional
from starlette.responses import Response
from ..models.intercept import InterceptedRequest
from ..models.scenario import ResponseOverride
from ..models.session import TestSession
from .base import ScenarioStrategy


class DefaultScenarioStrategy(ScenarioStrategy):
    """Does nothing: no tracking, no rewriting, never overrides"""

    def process_request(self, request: InterceptedRequest, config: ResponseOverride, session: TestSession) -> Dict[str, Any]:
        return {"continue": True, "modifications": {}}

    def process_response(self, response: Response, config: ResponseOverride, session: TestSession) -> Response:
        return response

    def should_override_response(self, config: ResponseOverride) -> bool:
        return False

    def generate_response(self, request: InterceptedRequest, config: ResponseOverride, session: TestSession) -> Optional[Response]:
        return None

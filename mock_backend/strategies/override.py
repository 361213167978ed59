"""Full-override strategy for configuration-only scenarios"""

import logging
import time
from typing import Any, Dict, Optional
from starlette.responses import Response
from ..models.intercept import InterceptedRequest
from ..models.scenario import ResponseOverride, ResponseType
from ..models.session import TestSession
from ..services.response_generator import ResponseGeneratorService
from .base import ScenarioStrategy

logger = logging.getLogger(__name__)


class OverrideScenarioStrategy(ScenarioStrategy):
    """Replaces the controller with the configured response"""

    def __init__(self, responses: ResponseGeneratorService):
        self.responses = responses

    def process_request(self, request: InterceptedRequest, config: ResponseOverride, session: TestSession) -> Dict[str, Any]:
        if config.delay_ms > 0:
            logger.info(
                f"Delaying override response - session_id: {session.session_id}, "
                f"endpoint: {request.endpoint}, delay_ms: {config.delay_ms}"
            )
            time.sleep(config.delay_ms / 1000)
        return {"continue": True, "delay_applied": config.delay_ms}

    def process_response(self, response: Response, config: ResponseOverride, session: TestSession) -> Response:
        return response

    def should_override_response(self, config: ResponseOverride) -> bool:
        return config.type in (
            ResponseType.STATIC,
            ResponseType.DYNAMIC,
            ResponseType.ERROR,
            ResponseType.CUSTOM,
        )

    def generate_response(self, request: InterceptedRequest, config: ResponseOverride, session: TestSession) -> Optional[Response]:
        return self.responses.build_response(request, config, session)

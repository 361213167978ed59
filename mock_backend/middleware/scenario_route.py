"""Test scenario interception for mock API routes"""

import json
import logging
from typing import Any, Callable, Coroutine, Optional
from fastapi import Request
from fastapi.routing import APIRoute
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response
from ..core.config import settings
from ..core.errors import StrategyNotFoundError
from ..models.intercept import InterceptedRequest
from ..services.scenario_registry import get_scenario_registry
from ..services.session_service import SESSION_HEADER, extract_session_id, get_session_service
from ..strategies.registry import get_strategy_registry

logger = logging.getLogger(__name__)

SCENARIO_HEADER = "X-Test-Scenario"

RouteHandler = Callable[[Request], Coroutine[Any, Any, Response]]


async def _read_json_body(request: Request) -> Optional[Any]:
    """JSON request body, or None for empty and non-JSON bodies"""
    if "json" not in request.headers.get("content-type", ""):
        return None
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return None


class ScenarioRoute(APIRoute):
    """
    Route class that runs the test scenario pipeline around the endpoint.

    Routers created with `route_class=ScenarioRoute` get their handlers
    wrapped; without an active test session the controller runs untouched.
    Request bodies are cached by Starlette, so reading them here does not
    consume them for the controller.
    """

    def endpoint_id(self, request: Request) -> str:
        return self.name or getattr(self.endpoint, "__qualname__", None) or request.url.path

    def get_route_handler(self) -> RouteHandler:
        original_route_handler = super().get_route_handler()

        async def scenario_route_handler(request: Request) -> Response:
            return await self.intercept(request, original_route_handler)

        return scenario_route_handler

    async def intercept(self, request: Request, call_next: RouteHandler) -> Response:
        if not settings.test_scenarios_enabled:
            return await call_next(request)

        path = request.url.path
        if path.startswith(settings.api_prefix):
            return await call_next(request)

        session_id = extract_session_id(request.headers, request.query_params, request.cookies)
        if not session_id:
            return await call_next(request)

        session_service = get_session_service()
        session = session_service.get_session(session_id)
        if session is None:
            logger.warning(f"Test session not found or expired: {session_id}")
            return await call_next(request)

        try:
            session_service.increment_request_count(session_id)
            session = session_service.get_session(session_id) or session
        except Exception as e:
            logger.error(f"Failed to update request count - session_id: {session_id}, error: {e}")

        registry = get_scenario_registry()
        definition = registry.get(session.scenario)
        if definition is None:
            logger.error(f"Scenario configuration not found: {session.scenario}")
            return await call_next(request)

        endpoint = self.endpoint_id(request)

        if settings.logging_enabled:
            logger.info(
                f"Processing test scenario request - session_id: {session_id}, "
                f"scenario: {session.scenario}, endpoint: {endpoint}, "
                f"method: {request.method}, request_count: {session.state.request_count}"
            )

        try:
            strategy = get_strategy_registry().resolve(session.scenario, definition)
        except StrategyNotFoundError as e:
            logger.error(f"Strategy resolution failed - scenario: {session.scenario}, error: {e}")
            return await call_next(request)

        config = registry.get_response_config(session.scenario, endpoint)
        if config is None:
            return await call_next(request)

        intercepted = InterceptedRequest(
            method=request.method,
            path=path,
            endpoint=endpoint,
            route_name=self.name,
            path_params=dict(request.path_params),
            query_params=dict(request.query_params),
            headers=dict(request.headers),
            body=await _read_json_body(request),
            client_host=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent")
        )

        result = await run_in_threadpool(strategy.process_request, intercepted, config, session)
        logger.debug(f"Strategy pre-processing result - endpoint: {endpoint}, result: {result}")

        if strategy.should_override_response(config):
            response = await run_in_threadpool(strategy.generate_response, intercepted, config, session)
            if response is not None:
                return self._tag(response, session.scenario, session_id)

        response = await call_next(request)
        response = strategy.process_response(response, config, session)
        return self._tag(response, session.scenario, session_id)

    @staticmethod
    def _tag(response: Response, scenario: str, session_id: str) -> Response:
        if settings.debug_headers_enabled:
            response.headers[SCENARIO_HEADER] = scenario
            response.headers[SESSION_HEADER] = session_id
        return response

"""Builds complete responses for overriding scenario configurations"""

import logging
import random
import threading
import uuid
from typing import Any, Callable, Dict, List, Optional, Union
from fastapi.responses import JSONResponse
from starlette.responses import Response
from ..core.errors import GeneratorNotFoundError
from ..generators.base import ResponseGenerator
from ..generators.catalog import EmptyCatalogGenerator, SingleEventGenerator
from ..generators.scenario_passthrough import (
    CameraPerformanceGenerator,
    RotationTestGenerator,
    RemoveListingTestGenerator,
)
from ..models.intercept import InterceptedRequest
from ..models.scenario import ResponseOverride, ResponseType
from ..models.session import TestSession
from ..utils import timeutils

logger = logging.getLogger(__name__)

CustomHandler = Callable[
    [InterceptedRequest, TestSession, ResponseOverride],
    Union[Response, Dict[str, Any]]
]


def substitute_variables(text: str) -> str:
    """Replace `{{timestamp}}`-style placeholders in a string"""
    now = timeutils.utcnow()
    variables = {
        "{{timestamp}}": timeutils.isoformat(now),
        "{{date}}": now.date().isoformat(),
        "{{time}}": now.strftime("%H:%M:%S"),
        "{{uuid}}": str(uuid.uuid4()),
        "{{random_int}}": str(random.randint(1, 1000000)),
    }
    for placeholder, value in variables.items():
        if placeholder in text:
            text = text.replace(placeholder, value)
    return text


def process_variable_substitutions(data: Any) -> Any:
    """Apply `substitute_variables` to every string leaf of a payload"""
    if isinstance(data, str):
        return substitute_variables(data)
    if isinstance(data, dict):
        return {key: process_variable_substitutions(value) for key, value in data.items()}
    if isinstance(data, list):
        return [process_variable_substitutions(item) for item in data]
    return data


def session_echo_handler(
    request: InterceptedRequest,
    session: TestSession,
    config: ResponseOverride
) -> Dict[str, Any]:
    """Custom handler reporting what the scenario engine saw for this request"""
    return {
        "session_id": session.session_id,
        "scenario": session.scenario,
        "request_count": session.state.request_count,
        "endpoint": request.endpoint,
        "method": request.method,
        "path": request.path,
        "parameters": config.parameters,
    }


class ResponseGeneratorService:
    """
    Registry of dynamic generators and custom handlers.

    Scenario configuration refers to both by string key; keys are checked when
    scenarios are loaded, so lookups at request time only fail if the registry
    was changed after loading.
    """

    def __init__(self):
        self._generators: Dict[str, ResponseGenerator] = {}
        self._handlers: Dict[str, CustomHandler] = {}
        self._lock = threading.Lock()

    def register_generator(self, name: str, generator: ResponseGenerator):
        with self._lock:
            self._generators[name] = generator

    def register_handler(self, name: str, handler: CustomHandler):
        with self._lock:
            self._handlers[name] = handler

    def has_generator(self, name: str) -> bool:
        return name in self._generators

    def has_handler(self, name: str) -> bool:
        return name in self._handlers

    def get_generators(self) -> List[str]:
        return sorted(self._generators)

    def generate(self, name: str, parameters: Dict[str, Any], session: Optional[TestSession] = None) -> Dict[str, Any]:
        """Run a registered generator"""
        generator = self._generators.get(name)
        if generator is None:
            raise GeneratorNotFoundError(f"Generator '{name}' not found")
        return generator.generate(parameters, session)

    def build_response(
        self,
        request: InterceptedRequest,
        config: ResponseOverride,
        session: TestSession
    ) -> Response:
        """
        Produce the complete response for an overriding configuration.

        Generator and handler failures are logged and turned into a 500 for
        this request only.
        """
        if config.type == ResponseType.STATIC:
            return self._static_response(config)
        if config.type == ResponseType.DYNAMIC:
            return self._dynamic_response(config, session)
        if config.type == ResponseType.ERROR:
            return self._error_response(config)
        if config.type == ResponseType.CUSTOM:
            return self._custom_response(request, config, session)
        return JSONResponse(status_code=500, content={"error": "Invalid response type"})

    def _static_response(self, config: ResponseOverride) -> Response:
        data = process_variable_substitutions(config.data if config.data is not None else {})
        return JSONResponse(
            status_code=config.status_code or 200,
            content=data,
            headers=config.headers
        )

    def _dynamic_response(self, config: ResponseOverride, session: TestSession) -> Response:
        if not config.generator:
            return JSONResponse(status_code=500, content={"error": "Generator not specified"})

        try:
            data = self.generate(config.generator, config.parameters, session)
        except Exception as e:
            logger.error(f"Failed to generate dynamic response - generator: {config.generator}, error: {e}")
            return JSONResponse(status_code=500, content={"error": "Response generation failed"})

        return JSONResponse(
            status_code=config.status_code or 200,
            content=data,
            headers=config.headers
        )

    def _error_response(self, config: ResponseOverride) -> Response:
        data = config.data if config.data is not None else {"error": "Test scenario error"}
        return JSONResponse(
            status_code=config.status_code or 500,
            content=data,
            headers=config.headers
        )

    def _custom_response(
        self,
        request: InterceptedRequest,
        config: ResponseOverride,
        session: TestSession
    ) -> Response:
        handler = self._handlers.get(config.handler) if config.handler else None
        if handler is None:
            return JSONResponse(status_code=500, content={"error": "Custom handler not found"})

        try:
            result = handler(request, session, config)
        except Exception as e:
            logger.error(f"Custom response handler failed - handler: {config.handler}, error: {e}")
            return JSONResponse(status_code=500, content={"error": "Custom response failed"})

        if isinstance(result, Response):
            return result
        return JSONResponse(
            status_code=config.status_code or 200,
            content=result,
            headers=config.headers
        )


def _build_default_service() -> ResponseGeneratorService:
    service = ResponseGeneratorService()
    for generator in (
        EmptyCatalogGenerator(),
        SingleEventGenerator(),
        CameraPerformanceGenerator(),
        RotationTestGenerator(),
        RemoveListingTestGenerator(),
    ):
        service.register_generator(generator.name, generator)
    service.register_handler("session_echo", session_echo_handler)
    return service


# Singleton instance
_response_generator_service = _build_default_service()


def get_response_generator_service() -> ResponseGeneratorService:
    """Get the response generator service instance"""
    return _response_generator_service

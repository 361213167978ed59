"""Error codes and error payload helpers for the scenario control API"""

from enum import Enum
from typing import Any, Dict, Optional
from fastapi.responses import JSONResponse


class ScenarioErrorCode(str, Enum):
    """Stable machine-readable error codes"""
    MISSING_SESSION_HEADER = "TSE001"
    SESSION_NOT_FOUND = "TSE002"
    UNKNOWN_SCENARIO = "TSE003"


class ScenarioConfigError(Exception):
    """Raised when scenario configuration cannot be loaded or validated"""


class StrategyNotFoundError(LookupError):
    """Raised when a scenario references a strategy key that is not registered"""


class GeneratorNotFoundError(LookupError):
    """Raised when a dynamic response names an unregistered generator"""


def error_response(
    status_code: int,
    error: str,
    message: str,
    extra: Optional[Dict[str, Any]] = None
) -> JSONResponse:
    """
    Build the `{error, message}` body used by every control endpoint.

    Args:
        status_code: HTTP status to return
        error: Error code (a `ScenarioErrorCode` value or a short label)
        message: Human readable explanation
        extra: Additional fields merged into the body
    """
    body: Dict[str, Any] = {"error": error, "message": message}
    if extra:
        body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def missing_session_header() -> JSONResponse:
    return error_response(
        400,
        ScenarioErrorCode.MISSING_SESSION_HEADER.value,
        "Invalid session ID: Session ID header required"
    )


def session_not_found(message: str = "Session expired or not found") -> JSONResponse:
    return error_response(404, ScenarioErrorCode.SESSION_NOT_FOUND.value, message)


def unknown_scenario(scenario: str) -> JSONResponse:
    return error_response(
        400,
        ScenarioErrorCode.UNKNOWN_SCENARIO.value,
        f"Unknown scenario: {scenario}",
        {"scenario": scenario}
    )

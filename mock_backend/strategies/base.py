"""Scenario strategy interface"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from fastapi.responses import JSONResponse
from starlette.responses import Response
from ..models.intercept import InterceptedRequest
from ..models.scenario import ResponseOverride
from ..models.session import TestSession

logger = logging.getLogger(__name__)

# Headers recomputed when a JSON body is re-rendered
_RENDER_HEADERS = {"content-length", "content-type"}


class ScenarioStrategy(ABC):
    """
    Request/response interception behaviour for a scenario.

    Strategies hold no per-session state; everything session-specific lives
    in the session store and the trackers, so one instance serves all
    requests.
    """

    @abstractmethod
    def process_request(
        self,
        request: InterceptedRequest,
        config: ResponseOverride,
        session: TestSession
    ) -> Dict[str, Any]:
        """
        Run before the controller. May block (configured delays), so the
        pipeline calls it from the threadpool.

        Returns:
            Informational result; the pipeline logs it but does not act on it
        """

    @abstractmethod
    def process_response(
        self,
        response: Response,
        config: ResponseOverride,
        session: TestSession
    ) -> Response:
        """Run after the controller; may return a rewritten response"""

    @abstractmethod
    def should_override_response(self, config: ResponseOverride) -> bool:
        """Whether the controller is skipped for this configuration"""

    @abstractmethod
    def generate_response(
        self,
        request: InterceptedRequest,
        config: ResponseOverride,
        session: TestSession
    ) -> Optional[Response]:
        """Build the complete response when overriding; None falls back to the controller"""


def read_json_body(response: Response) -> Optional[Any]:
    """Decode a buffered JSON response body, or None if not JSON"""
    body = getattr(response, "body", None)
    if not body:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" not in content_type:
        return None
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return None


def render_json(response: Response, data: Any) -> Response:
    """New JSON response carrying the status and headers of `response`"""
    headers = {
        key: value for key, value in response.headers.items()
        if key.lower() not in _RENDER_HEADERS
    }
    return JSONResponse(content=data, status_code=response.status_code, headers=headers)


def apply_fixed_last_modified(response: Response, parameters: Dict[str, Any]) -> Response:
    """Overwrite `last_modified` in a JSON object body when configured"""
    fixed = parameters.get("fixed_last_modified")
    if fixed is None:
        return response

    data = read_json_body(response)
    if not isinstance(data, dict) or not data:
        return response

    data["last_modified"] = fixed
    return render_json(response, data)


def request_changes(request: InterceptedRequest) -> Dict[str, Any]:
    """`changes` object of a changes request; anything else reads as empty"""
    changes = request.json_body().get("changes")
    return changes if isinstance(changes, dict) else {}


def list_field(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    return value if isinstance(value, list) else []


def first_present(item: Dict[str, Any], *keys: str) -> Optional[Any]:
    """First value among `keys` that is not None; falsy ids such as 0 count"""
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return None

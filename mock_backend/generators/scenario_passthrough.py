"""
Descriptor generators for tracking scenarios.

The tracking scenarios reference these from configuration, but their strategies
never override the controller, so in practice the generators only run when a
scenario pairs them with the `override` strategy. The payload then describes
what the scenario would have applied.
"""

from typing import Any, Dict, Optional
from .base import ResponseGenerator
from ..models.session import TestSession


class _PassthroughGenerator(ResponseGenerator):
    track_changes = False

    def generate(self, parameters: Dict[str, Any], session: Optional[TestSession] = None) -> Dict[str, Any]:
        payload = {
            "passthrough": True,
            "delay_applied": parameters.get("delay", 0),
            "logging_enabled": parameters.get("enable_logging", False),
            "modifications": {
                "last_modified": parameters.get("fixed_last_modified")
            }
        }
        if self.track_changes:
            payload["track_changes"] = True
        return payload


class CameraPerformanceGenerator(_PassthroughGenerator):
    name = "camera-performance"
    description = "Camera performance testing generator with delays and logging"


class RotationTestGenerator(_PassthroughGenerator):
    name = "rotation-test"
    description = "Rotation testing generator that tracks media changes during device rotation"
    track_changes = True


class RemoveListingTestGenerator(_PassthroughGenerator):
    name = "remove-listing-test"
    description = "Remove listing testing generator that tracks listing and media removals"
    track_changes = True

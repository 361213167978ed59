"""Scenario name / strategy key to strategy resolution"""

import logging
import threading
from typing import Dict, Optional
from ..core.errors import StrategyNotFoundError
from ..models.scenario import ScenarioDefinition
from ..services.response_generator import get_response_generator_service
from ..trackers.camera_performance import get_camera_performance_tracker
from ..trackers.remove_listing import get_remove_listing_test_tracker
from ..trackers.rotation import get_rotation_test_tracker
from .base import ScenarioStrategy
from .camera_performance import CameraPerformanceStrategy
from .default import DefaultScenarioStrategy
from .override import OverrideScenarioStrategy
from .remove_listing import RemoveListingTestStrategy
from .rotation import RotationTestStrategy

logger = logging.getLogger(__name__)

OVERRIDE_STRATEGY = "override"


class StrategyRegistry:
    """
    Maps scenarios to strategies.

    Resolution order:
    1. strategy registered under the scenario name
    2. strategy registered under the definition's `strategy` key
    3. the default pass-through strategy
    """

    def __init__(self, default: Optional[ScenarioStrategy] = None):
        self.default = default or DefaultScenarioStrategy()
        self._by_scenario: Dict[str, ScenarioStrategy] = {}
        self._by_key: Dict[str, ScenarioStrategy] = {}
        self._lock = threading.Lock()

    def register(self, scenario: str, strategy: ScenarioStrategy):
        """Bind a strategy to a scenario name"""
        with self._lock:
            self._by_scenario[scenario] = strategy
        logger.info(f"Registered strategy {type(strategy).__name__} for scenario: {scenario}")

    def register_key(self, key: str, strategy: ScenarioStrategy):
        """Bind a strategy to a key usable from scenario configuration"""
        with self._lock:
            self._by_key[key] = strategy

    def has_key(self, key: str) -> bool:
        return key in self._by_key

    def resolve(self, scenario: str, definition: Optional[ScenarioDefinition] = None) -> ScenarioStrategy:
        strategy = self._by_scenario.get(scenario)
        if strategy is not None:
            return strategy

        if definition is not None and definition.strategy:
            strategy = self._by_key.get(definition.strategy)
            if strategy is None:
                raise StrategyNotFoundError(
                    f"Strategy '{definition.strategy}' not found for scenario '{scenario}'"
                )
            return strategy

        return self.default


def build_strategy_registry() -> StrategyRegistry:
    """Registry wired to the shared trackers and response generators"""
    registry = StrategyRegistry()
    registry.register("camera-performance-test", CameraPerformanceStrategy(get_camera_performance_tracker()))
    registry.register("rotation-test", RotationTestStrategy(get_rotation_test_tracker()))
    registry.register("remove-listing-test", RemoveListingTestStrategy(get_remove_listing_test_tracker()))
    registry.register_key(OVERRIDE_STRATEGY, OverrideScenarioStrategy(get_response_generator_service()))
    return registry


# Singleton instance
_strategy_registry = build_strategy_registry()


def get_strategy_registry() -> StrategyRegistry:
    """Get the strategy registry instance"""
    return _strategy_registry

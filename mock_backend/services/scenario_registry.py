"""Scenario definitions loaded from YAML configuration"""

import logging
import threading
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from ..core.config import settings
from ..core.errors import ScenarioConfigError
from ..models.scenario import (
    ResponseOverride,
    ResponseType,
    ScenarioDefinition,
    ScenarioMetadata,
    ScenarioSummary,
    WILDCARD_ENDPOINT,
)
from .response_generator import ResponseGeneratorService, get_response_generator_service

logger = logging.getLogger(__name__)

STRICT_POLICY = "strict"
DEFAULT_POLICY = "default"

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _resolve_config_path(config_path: str) -> Path:
    """Relative paths are tried against the working directory, then the project root"""
    path = Path(config_path)
    if not path.is_absolute() and not path.exists():
        return PROJECT_ROOT / path
    return path


class ScenarioRegistry:
    """
    In-memory table of scenario definitions.

    Two policies exist for unknown scenario names:
    - strict: `get` returns None and callers decide (control API answers TSE003)
    - default: `get` silently returns the configured default scenario

    The table is replaced wholesale on `reload`, so readers always see either
    the old or the new set of scenarios.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        policy: Optional[str] = None,
        default_scenario: Optional[str] = None,
        generators: Optional[ResponseGeneratorService] = None
    ):
        self.config_path = _resolve_config_path(config_path or settings.scenario_config_path)
        self.policy = policy or settings.unknown_scenario_policy
        self.default_scenario = default_scenario or settings.default_scenario
        self.generators = generators or get_response_generator_service()
        self._scenarios: Dict[str, ScenarioDefinition] = {}
        self._reload_lock = threading.Lock()
        self._scenarios = self._load(self.config_path)

    def _load(self, path: Path) -> Dict[str, ScenarioDefinition]:
        """Read every scenario file under `path` into a fresh table"""
        scenarios: Dict[str, ScenarioDefinition] = {}

        if not path.is_dir():
            logger.warning(f"Scenario config directory not found: {path}")
            return scenarios

        files = sorted(list(path.glob("*.yaml")) + list(path.glob("*.yml")))
        for file in files:
            with open(file, "r", encoding="utf-8") as f:
                try:
                    content = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ScenarioConfigError(f"Invalid YAML in {file}: {e}") from e

            if not isinstance(content, dict):
                raise ScenarioConfigError(f"{file} must map scenario names to definitions")

            for name, raw in content.items():
                scenarios[name] = self._parse(name, raw, file)

        logger.info(f"Loaded {len(scenarios)} scenarios from {path}")
        return scenarios

    def _parse(self, name: str, raw: Any, source: Path) -> ScenarioDefinition:
        if not isinstance(raw, dict):
            raise ScenarioConfigError(f"Scenario '{name}' in {source} is not a mapping")

        try:
            definition = ScenarioDefinition(
                name=name,
                display_name=raw.get("name", name),
                description=raw.get("description", ""),
                responses=raw.get("responses") or {},
                strategy=raw.get("strategy"),
                author=raw.get("author"),
                tags=raw.get("tags") or [],
                created_at=raw.get("created_at"),
                updated_at=raw.get("updated_at"),
            )
        except ValidationError as e:
            raise ScenarioConfigError(f"Scenario '{name}' in {source} is invalid: {e}") from e

        for endpoint, override in definition.responses.items():
            self._validate_override(name, endpoint, override)

        return definition

    def _validate_override(self, scenario: str, endpoint: str, override: ResponseOverride):
        if override.type == ResponseType.DYNAMIC and override.generator:
            if not self.generators.has_generator(override.generator):
                raise ScenarioConfigError(
                    f"Scenario '{scenario}' endpoint '{endpoint}' uses unknown generator '{override.generator}'"
                )
        if override.type == ResponseType.CUSTOM:
            if not override.handler or not self.generators.has_handler(override.handler):
                raise ScenarioConfigError(
                    f"Scenario '{scenario}' endpoint '{endpoint}' uses unknown handler '{override.handler}'"
                )

    def exists(self, name: str) -> bool:
        return name in self._scenarios

    def get(self, name: str) -> Optional[ScenarioDefinition]:
        """
        Resolve a scenario name.

        Under the default policy unknown names fall back to the default
        scenario (or None if even that is not configured).
        """
        scenarios = self._scenarios
        scenario = scenarios.get(name)
        if scenario is None and self.policy == DEFAULT_POLICY:
            return scenarios.get(self.default_scenario)
        return scenario

    def resolve_name(self, name: str) -> Optional[str]:
        """Name the session should store for a requested scenario, or None if rejected"""
        if self.exists(name):
            return name
        if self.policy == DEFAULT_POLICY:
            return self.default_scenario
        return None

    def get_response_config(self, scenario: str, endpoint: str) -> Optional[ResponseOverride]:
        """Exact endpoint match first, then the `*` wildcard"""
        definition = self.get(scenario)
        if definition is None:
            return None

        if endpoint in definition.responses:
            return definition.responses[endpoint]

        return definition.responses.get(WILDCARD_ENDPOINT)

    def list_scenarios(self) -> List[ScenarioSummary]:
        return [
            ScenarioSummary(
                name=name,
                display_name=definition.display_name,
                description=definition.description,
                endpoints=list(definition.responses.keys())
            )
            for name, definition in self._scenarios.items()
        ]

    def get_metadata(self, name: str) -> Optional[ScenarioMetadata]:
        definition = self.get(name)
        if definition is None:
            return None
        return ScenarioMetadata(
            name=definition.display_name,
            description=definition.description,
            created_at=definition.created_at,
            updated_at=definition.updated_at,
            author=definition.author,
            tags=definition.tags
        )

    def reload(self, config_path: Optional[str] = None) -> int:
        """
        Re-read scenario configuration.

        On a load error the current table is kept and the error propagates.

        Returns:
            Number of scenarios loaded
        """
        with self._reload_lock:
            path = _resolve_config_path(config_path) if config_path else self.config_path
            scenarios = self._load(path)
            self.config_path = path
            self._scenarios = scenarios
        return len(scenarios)


_scenario_registry: Optional[ScenarioRegistry] = None
_registry_lock = threading.Lock()


def get_scenario_registry() -> ScenarioRegistry:
    """Get the scenario registry instance, loading it on first use"""
    global _scenario_registry
    if _scenario_registry is None:
        with _registry_lock:
            if _scenario_registry is None:
                _scenario_registry = ScenarioRegistry()
    return _scenario_registry

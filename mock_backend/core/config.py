"""Configuration management"""

from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    api_title: str = "Mobile Mock Backend"
    api_version: str = "1.0.0"
    api_prefix: str = "/api/test-scenarios"

    # Scenario engine
    test_scenarios_enabled: bool = True
    scenario_config_path: str = "config/scenarios"
    unknown_scenario_policy: Literal["strict", "default"] = "strict"
    default_scenario: str = "default"

    # Session Settings
    session_ttl_seconds: int = 7200  # 2 hours
    max_concurrent_sessions: int = 100  # advisory only
    auto_cleanup_enabled: bool = True

    # Tracker Settings
    tracker_ttl_seconds: int = 7200  # 2 hours

    # Diagnostics
    debug_enabled: bool = True
    metrics_enabled: bool = True
    logging_enabled: bool = True
    debug_headers_enabled: bool = True

    # Development
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()

"""
Configuration management for Project Pulse.
"""

import json
import os
from typing import Optional
from pydantic import BaseModel, Field
from pathlib import Path

from .logging import get_logger

logger = get_logger(__name__)


class OrchestrationSettings(BaseModel):
    """Configuration for the orchestration protocol."""
    analysis_timeout_seconds: float = Field(default=10.0, gt=0, le=600)
    recommendation_limit: int = Field(default=5, ge=1, le=20)
    log_phase_timings: bool = Field(default=True)


class AgentSettings(BaseModel):
    """Configuration shared by the default analysis agents."""
    target_utilization_percent: float = Field(default=80.0, gt=0, le=100)
    bottleneck_dependent_threshold: int = Field(default=2, ge=1)
    hours_per_day: float = Field(default=8.0, gt=0, le=24)


class SystemConfig(BaseModel):
    """Main system configuration."""
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    json_logging: bool = Field(default=False)

    orchestration: OrchestrationSettings = Field(default_factory=OrchestrationSettings)
    agents: AgentSettings = Field(default_factory=AgentSettings)


def load_config_from_env() -> SystemConfig:
    """
    Load configuration from environment variables.

    Returns:
        SystemConfig: Configuration object with values from environment
    """
    config_data = {}

    if os.getenv("DEBUG"):
        config_data["debug"] = os.getenv("DEBUG").lower() == "true"

    if os.getenv("LOG_LEVEL"):
        config_data["log_level"] = os.getenv("LOG_LEVEL")

    if os.getenv("JSON_LOGGING"):
        config_data["json_logging"] = os.getenv("JSON_LOGGING").lower() == "true"

    orchestration_config = {}
    if os.getenv("ORCHESTRATION_TIMEOUT"):
        orchestration_config["analysis_timeout_seconds"] = float(os.getenv("ORCHESTRATION_TIMEOUT"))

    if os.getenv("RECOMMENDATION_LIMIT"):
        orchestration_config["recommendation_limit"] = int(os.getenv("RECOMMENDATION_LIMIT"))

    if orchestration_config:
        config_data["orchestration"] = orchestration_config

    agent_config = {}
    if os.getenv("HOURS_PER_DAY"):
        agent_config["hours_per_day"] = float(os.getenv("HOURS_PER_DAY"))

    if os.getenv("TARGET_UTILIZATION"):
        agent_config["target_utilization_percent"] = float(os.getenv("TARGET_UTILIZATION"))

    if agent_config:
        config_data["agents"] = agent_config

    return SystemConfig(**config_data)


def load_config_from_file(config_path: Optional[Path] = None) -> SystemConfig:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to configuration file

    Returns:
        SystemConfig: Configuration object, defaults when the file is missing or unreadable
    """
    if config_path is None:
        config_path = Path("project_pulse.json")

    if not config_path.exists():
        return SystemConfig()

    try:
        with open(config_path, 'r', encoding="utf-8") as f:
            config_data = json.load(f)
        return SystemConfig(**config_data)
    except Exception as e:
        logger.warning(f"Could not load config from {config_path}: {e}")
        return SystemConfig()


_config: Optional[SystemConfig] = None


def get_config() -> SystemConfig:
    """
    Get the global configuration instance.

    Environment variables are merged over the file configuration.

    Returns:
        SystemConfig: Global configuration
    """
    global _config
    if _config is None:
        _config = load_config_from_file()
        env_config = load_config_from_env()

        overrides = env_config.model_dump(exclude_unset=True)
        if overrides:
            config_dict = _config.model_dump()
            for key, value in overrides.items():
                if isinstance(value, dict) and isinstance(config_dict.get(key), dict):
                    config_dict[key].update(value)
                else:
                    config_dict[key] = value
            _config = SystemConfig(**config_dict)

    return _config


def set_config(config: Optional[SystemConfig]) -> None:
    """
    Set the global configuration instance.

    Args:
        config: Configuration to set as global, or None to force a reload
    """
    global _config
    _config = config

"""
Norm Audit configuration module.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from norm_audit.config.scoring_parameters import ScoringParameters
from norm_audit.exceptions import ConfigurationError

__all__ = [
    "EngineConfig",
    "ScoringParameters",
    "get_engine_config",
    "DEFAULT_CONFIG_PATH",
]

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "engine_config.yaml"


class EngineConfig:
    """
    Engine configuration manager

    Loads engine configuration from a YAML file with environment
    variable override support.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize engine configuration

        Args:
            config_path: Path to engine_config.yaml (optional)
        """
        self._explicit_path = config_path is not None
        if config_path is None:
            env_path = os.getenv("NORM_AUDIT_CONFIG")
            if env_path:
                config_path = Path(env_path)
                self._explicit_path = True
            else:
                config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._config: Optional[Dict[str, Any]] = None

    def load(self) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if self._config is not None:
            return self._config

        if not self.config_path.exists():
            if self._explicit_path:
                logger.warning(
                    "Config file %s not found, using built-in defaults", self.config_path
                )
            self._config = self._get_default_config()
            return self._config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config root in {self.config_path} must be a mapping")

        self._config = loaded
        return self._config

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration"""
        return {
            "knowledge_base": {"path": None},
            "scoring": ScoringParameters().to_dict(),
            "logging": {"level": "INFO"},
        }

    def get_knowledge_base_path(self) -> Optional[Path]:
        """
        Get knowledge base path with environment variable override

        Priority:
            1. NORM_AUDIT_KNOWLEDGE_BASE environment variable
            2. Configuration file
            3. None (bundled legal_norms.json)
        """
        env_path = os.getenv("NORM_AUDIT_KNOWLEDGE_BASE")
        if env_path:
            return Path(env_path)

        config = self.load()
        path = (config.get("knowledge_base") or {}).get("path")
        if not path:
            return None

        path = Path(path)
        if not path.is_absolute():
            path = self.config_path.parent / path
        return path

    def get_scoring_parameters(self) -> ScoringParameters:
        """
        Get scoring parameters

        NORM_AUDIT_MAX_INPUT_CHARS overrides max_input_chars.
        """
        config = self.load()
        values = dict(config.get("scoring") or {})

        env_max = os.getenv("NORM_AUDIT_MAX_INPUT_CHARS")
        if env_max:
            values["max_input_chars"] = env_max

        return ScoringParameters.from_mapping(values)

    def get_log_level(self) -> str:
        """Get log level (NORM_AUDIT_LOG_LEVEL overrides the file)"""
        env_level = os.getenv("NORM_AUDIT_LOG_LEVEL")
        if env_level:
            return env_level.upper()

        config = self.load()
        return str((config.get("logging") or {}).get("level", "INFO")).upper()


# Global configuration instance
_engine_config: Optional[EngineConfig] = None


def get_engine_config(config_path: Optional[Path] = None) -> EngineConfig:
    """
    Get global engine configuration instance

    Args:
        config_path: Optional path to configuration file

    Returns:
        EngineConfig instance
    """
    global _engine_config

    if config_path is not None:
        return EngineConfig(config_path)

    if _engine_config is None:
        _engine_config = EngineConfig()

    return _engine_config

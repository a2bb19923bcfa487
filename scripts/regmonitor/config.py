"""
Configuration management for the Regulatory Monitor.

Handles loading and accessing configuration from YAML files and environment variables.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


class Config:
    """Configuration manager for the Regulatory Monitor dashboard."""

    # Default configuration values
    DEFAULTS: Dict[str, Any] = {
        "paths": {
            "base_dir": None,  # Set dynamically
            "logs": "logs",
        },
        "sources": [
            "CBI",
            "EIOPA",
            "Pensions Authority",
        ],
        "source_aliases": {
            "central bank of ireland": "CBI",
            "central bank": "CBI",
            "european insurance and occupational pensions authority": "EIOPA",
            "pensions authority": "Pensions Authority",
            "the pensions authority": "Pensions Authority",
            "irish pensions authority": "Pensions Authority",
        },
        "gemini": {
            "base_url": "https://generativelanguage.googleapis.com/v1beta",
            "fetch_model": "gemini-3-flash-preview",
            "analysis_model": "gemini-3-pro-preview",
            "timeout": 60,
            "max_retries": 1,
        },
        "intelligence": {
            "strict": False,
            "window_days": 30,
            "fallback_on_empty": False,
            "default_url": "https://www.centralbank.ie",
        },
        "scheduler": {
            "enabled": False,
            "interval_minutes": 60,
            "timezone": "Europe/Dublin",
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "file_enabled": False,
        },
    }

    _instance: Optional["Config"] = None
    _config: Dict[str, Any] = {}
    _base_dir: Optional[Path] = None

    def __new__(cls) -> "Config":
        """Singleton pattern to ensure single configuration instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        """Initialize configuration if not already done."""
        if self._initialized:
            return
        self._initialized = True
        self._config = copy.deepcopy(self.DEFAULTS)
        self._base_dir = self._find_base_dir()
        self._load_config_file()

    def _find_base_dir(self) -> Path:
        """Find the base directory of the Regulatory Monitor installation."""
        env_base = os.environ.get("REGMONITOR_BASE_DIR")
        if env_base:
            return Path(env_base)

        # scripts/regmonitor/config.py -> scripts/regmonitor -> scripts -> base
        current_file = Path(__file__).resolve()
        return current_file.parent.parent.parent

    def _load_config_file(self) -> None:
        """Load configuration from YAML file if it exists."""
        config_path = self._base_dir / "config" / "config.yaml"
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
                self._merge_config(file_config)

        self._config["paths"]["base_dir"] = str(self._base_dir)

    def _merge_config(self, new_config: Dict[str, Any]) -> None:
        """Deep merge new configuration into existing configuration."""
        for key, value in new_config.items():
            if key in self._config and isinstance(self._config[key], dict) and isinstance(value, dict):
                self._config[key].update(value)
            else:
                self._config[key] = value

    @property
    def base_dir(self) -> Path:
        """Get the base directory path."""
        return self._base_dir

    @property
    def logs_dir(self) -> Path:
        """Get the logs directory path."""
        return self._base_dir / self._config["paths"]["logs"]

    @property
    def sources(self) -> List[str]:
        """Get the closed set of monitored regulators."""
        return self._config["sources"]

    @property
    def api_key(self) -> Optional[str]:
        """Gemini API key from the environment, or None when running in mock mode."""
        key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
        if key and key.strip():
            return key.strip()
        return None

    @property
    def strict(self) -> bool:
        """Whether a missing credential or provider failure is surfaced as an error."""
        env_strict = os.environ.get("REGMONITOR_STRICT")
        if env_strict is not None:
            return env_strict.strip().lower() in ("1", "true", "yes", "on")
        return bool(self.get("intelligence.strict", False))

    def validate_source(self, source: str) -> tuple[bool, str]:
        """
        Validate a regulator name against configured sources.

        Args:
            source: Source name to validate.

        Returns:
            Tuple of (is_valid, suggestion_or_error)
        """
        if not source:
            return False, "Source cannot be empty"

        if self.normalize_source(source) is not None:
            return True, ""

        valid_sources = [s.lower() for s in self.sources]
        from difflib import get_close_matches
        matches = get_close_matches(source.lower(), valid_sources, n=1, cutoff=0.6)
        if matches:
            return False, f"Invalid source '{source}'. Did you mean '{matches[0]}'? Valid sources: {', '.join(self.sources)}"
        return False, f"Invalid source '{source}'. Valid sources: {', '.join(self.sources)}"

    def normalize_source(self, source: str) -> Optional[str]:
        """
        Normalize a regulator name to its configured spelling.

        Args:
            source: Source name as returned by the provider.

        Returns:
            Canonical source name, or None if it is not a monitored regulator.
        """
        if not source:
            return None
        cleaned = " ".join(str(source).split()).lower()
        for valid_source in self.sources:
            if cleaned == valid_source.lower():
                return valid_source
        alias = self._config.get("source_aliases", {}).get(cleaned)
        if alias in self.sources:
            return alias
        # e.g. "CBI (Central Bank of Ireland)"
        for valid_source in self.sources:
            if cleaned.startswith(valid_source.lower() + " "):
                return valid_source
        return None

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key.

        Supports dot notation for nested keys (e.g., 'gemini.timeout').
        """
        keys = key.split(".")
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def reload(self) -> None:
        """Reload configuration from file."""
        self._config = copy.deepcopy(self.DEFAULTS)
        self._load_config_file()


# Global configuration instance
config = Config()

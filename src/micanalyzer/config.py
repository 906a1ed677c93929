import json
import logging
import os
from pathlib import Path
from typing import Dict, Any

from pydantic import ValidationError

from .models.features import AnalyzerSettings

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "MICANALYZER_HOME"


class Config:
    """Simple configuration manager for persisting user settings."""

    _instance = None
    _defaults: Dict[str, Any] = {
        "analyzer": AnalyzerSettings().model_dump(),
        "microphone_index": 0,
        "max_record_seconds": 10.0,
        "log_level": "INFO",
    }

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._load()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Forget the loaded settings so the next Config() reads from disk."""
        cls._instance = None

    def _get_config_path(self) -> Path:
        """Get path to config file (~/.micanalyzer unless MICANALYZER_HOME is set)."""
        override = os.environ.get(HOME_ENV_VAR)
        app_dir = Path(override) if override else Path.home() / ".micanalyzer"
        app_dir.mkdir(parents=True, exist_ok=True)
        return app_dir / "settings.json"

    def _load(self):
        """Load settings from disk."""
        self._settings = json.loads(json.dumps(self._defaults))
        path = self._get_config_path()
        if path.exists():
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    self._settings.update(data)
                else:
                    logger.warning("Ignoring %s, expected a JSON object", path)
            except (OSError, ValueError) as e:
                logger.warning("Could not read %s, using defaults: %s", path, e)

    def save(self):
        """Save settings to disk."""
        path = self._get_config_path()
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(self._settings, f, indent=4)
        except OSError as e:
            logger.warning("Could not write %s: %s", path, e)

    def get(self, key: str, default: Any = None) -> Any:
        return self._settings.get(key, default)

    def set(self, key: str, value: Any):
        self._settings[key] = value
        self.save()

    @property
    def analyzer_settings(self) -> AnalyzerSettings:
        """Stored analyzer parameters; invalid stored values fall back to defaults."""
        try:
            return AnalyzerSettings(**self._settings.get("analyzer", {}))
        except (ValidationError, TypeError) as e:
            logger.warning("Stored analyzer settings are invalid, using defaults: %s", e)
            return AnalyzerSettings()

    @analyzer_settings.setter
    def analyzer_settings(self, value: AnalyzerSettings):
        self.set("analyzer", value.model_dump())

    @property
    def microphone_index(self) -> int:
        try:
            return int(self._settings.get("microphone_index", 0))
        except (TypeError, ValueError):
            logger.warning("Stored microphone index is invalid, using 0")
            return 0

    @microphone_index.setter
    def microphone_index(self, value: int):
        self.set("microphone_index", int(value))

    @property
    def max_record_seconds(self) -> float:
        try:
            return float(self._settings.get("max_record_seconds", 10.0))
        except (TypeError, ValueError):
            logger.warning("Stored max_record_seconds is invalid, using 10.0")
            return 10.0

    @property
    def log_level(self) -> str:
        return self._settings.get("log_level", "INFO")

    @log_level.setter
    def log_level(self, value: str):
        self.set("log_level", value)

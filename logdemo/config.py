import copy
import logging

import yaml

from logdemo.models import Level
from logdemo.sink import VALID_FORMATS

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager that loads from YAML and merges with defaults."""

    DEFAULTS = {
        "server": {
            "host": "0.0.0.0",
            "port": 8080,
            "debug": False,
        },
        "app": {
            "name": "Log Visualization Demo",
            "version": "1.0.0",
        },
        "api": {
            "prefix": "/api",
        },
        "scheduler": {
            "enabled": True,
            "health_interval": 5,
            "business_interval": 15,
            "metrics_interval": 10,
        },
        "sink": {
            "console": True,
            "file": "logs/application.log",
            "format": "text",
            "level": "DEBUG",
            "max_bytes": 10 * 1024 * 1024,
            "backup_count": 5,
        },
    }

    def __init__(self, config_path=None):
        self._config = copy.deepcopy(self.DEFAULTS)

        if config_path is not None:
            try:
                with open(config_path, "r") as f:
                    user_config = yaml.safe_load(f)

                if user_config and isinstance(user_config, dict):
                    self._config = self._deep_merge(self._config, user_config)
            except FileNotFoundError:
                pass
            except yaml.YAMLError:
                logger.warning("Invalid YAML in %s, using defaults", config_path)

        self._validate_sink()

    def _validate_sink(self):
        sink = self._config["sink"]
        defaults = self.DEFAULTS["sink"]
        if sink.get("format") not in VALID_FORMATS:
            logger.warning("Invalid sink format %r, falling back to 'text'", sink.get("format"))
            sink["format"] = defaults["format"]
        try:
            Level.parse(str(sink.get("level")))
        except ValueError:
            logger.warning("Invalid sink level %r, falling back to DEBUG", sink.get("level"))
            sink["level"] = defaults["level"]

    @staticmethod
    def _deep_merge(base, override):
        """Recursively merge override dict into base dict."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
        return result

    def get(self, key, default=None):
        """Get a top-level config key."""
        return self._config.get(key, default)

    def __getitem__(self, key):
        return self._config[key]

    def __contains__(self, key):
        return key in self._config

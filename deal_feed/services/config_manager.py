"""
Configuration management system for the Deal Feed.
"""

import os
import yaml
import json
from typing import Dict, Any, Optional

from ..models.config import (
    ClientConfig,
    Configuration,
    FeedConfig,
    LoggingConfig,
    ServerConfig,
)


class ConfigurationManager:
    """Manages loading, validation, and reloading of system configuration."""

    DEFAULT_PATHS = [
        "config/config.yaml",
        "config/config.yml",
        "config/config.json",
        "config.yaml",
        "config.yml",
        "config.json",
    ]

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file. If None, the standard
                locations are searched and built-in defaults are used when
                none exists.
        """
        self.config_path = config_path or self._find_config_file()
        self._config: Optional[Configuration] = None

    def _find_config_file(self) -> Optional[str]:
        """Find the configuration file in standard locations."""
        for path in self.DEFAULT_PATHS:
            if os.path.exists(path):
                return path
        return None

    def load_config(self) -> Configuration:
        """
        Load configuration from file.

        Returns:
            Configuration object with validated settings.

        Raises:
            ValueError: If configuration is invalid or file cannot be read.
            FileNotFoundError: If an explicit configuration file doesn't exist.
        """
        if self.config_path is None:
            config = Configuration()
            config.validate()
            self._config = config
            return config

        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            raw_config = self._read_file(self.config_path)

            # Expand environment variables
            raw_config = self._expand_env_vars(raw_config)

            config = self._parse_config(raw_config)
            config.validate()

            self._config = config

            return config

        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {e}")
        except Exception as e:
            raise ValueError(f"Error loading configuration: {e}")

    def _read_file(self, path: str) -> Dict[str, Any]:
        """Read a YAML or JSON configuration file into a dictionary."""
        with open(path, 'r', encoding='utf-8') as f:
            if path.endswith('.json'):
                raw_config = json.load(f)
            else:
                raw_config = yaml.safe_load(f)

        if raw_config is None:
            return {}
        if not isinstance(raw_config, dict):
            raise ValueError("Configuration root must be a mapping")
        return raw_config

    def _expand_env_vars(self, obj: Any) -> Any:
        """Recursively expand environment variables in configuration."""
        if isinstance(obj, dict):
            return {key: self._expand_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [self._expand_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            # Expand ${VAR_NAME} patterns
            if obj.startswith("${") and obj.endswith("}"):
                var_name = obj[2:-1]
                env_value = os.getenv(var_name)
                if env_value is None:
                    raise ValueError(f"Environment variable '{var_name}' not found")
                return env_value
            return obj
        else:
            return obj

    def _parse_config(self, raw_config: Dict[str, Any]) -> Configuration:
        """Parse raw configuration dictionary into Configuration object."""
        feed_data = raw_config.get("feed") or {}
        server_data = raw_config.get("server") or {}
        client_data = raw_config.get("client") or {}
        logging_data = raw_config.get("logging") or {}

        defaults = Configuration()

        feed = FeedConfig(
            actor=feed_data.get("actor", defaults.feed.actor),
            limit=self._as_int(feed_data.get("limit", defaults.feed.limit)),
            api_url=feed_data.get("api_url", defaults.feed.api_url),
            timeout=self._as_int(feed_data.get("timeout", defaults.feed.timeout)),
        )

        server = ServerConfig(
            host=server_data.get("host", defaults.server.host),
            port=self._as_int(server_data.get("port", defaults.server.port)),
        )

        client = ClientConfig(
            endpoint=client_data.get("endpoint", defaults.client.endpoint),
            poll_interval=self._as_int(
                client_data.get("poll_interval", defaults.client.poll_interval)
            ),
            seen_state_file=client_data.get(
                "seen_state_file", defaults.client.seen_state_file
            ),
            preferences_file=client_data.get(
                "preferences_file", defaults.client.preferences_file
            ),
        )

        logging_config = LoggingConfig(
            level=logging_data.get("level", defaults.logging.level),
            log_dir=logging_data.get("log_dir", defaults.logging.log_dir),
        )

        return Configuration(
            feed=feed, server=server, client=client, logging=logging_config
        )

    def _as_int(self, value: Any) -> Any:
        """Convert numeric strings (e.g. from env vars) to int, leave others."""
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return value

    def get_config(self) -> Configuration:
        """
        Get current configuration, loading if necessary.

        Returns:
            Current configuration object.
        """
        if self._config is None:
            return self.load_config()
        return self._config

    def get_config_template(self) -> Dict[str, Any]:
        """
        Get a template configuration dictionary.

        Returns:
            Dictionary with example configuration structure.
        """
        defaults = Configuration()
        return {
            "feed": {
                "actor": defaults.feed.actor,
                "limit": defaults.feed.limit,
                "api_url": defaults.feed.api_url,
                "timeout": defaults.feed.timeout,
            },
            "server": {
                "host": defaults.server.host,
                "port": defaults.server.port,
            },
            "client": {
                "endpoint": defaults.client.endpoint,
                "poll_interval": defaults.client.poll_interval,
                "seen_state_file": defaults.client.seen_state_file,
                "preferences_file": defaults.client.preferences_file,
            },
            "logging": {
                "level": defaults.logging.level,
                "log_dir": "logs",
            },
        }

"""
Unit tests for configuration management system.
"""

import json
import os
from unittest.mock import patch

import pytest
import yaml

from deal_feed.models.config import DEFAULT_ACTOR, Configuration
from deal_feed.services.config_manager import ConfigurationManager


class TestConfigurationManager:
    """Test ConfigurationManager functionality."""

    def create_config(self, tmp_path, config_data: dict, file_format: str = "yaml") -> str:
        """Write a configuration file and return its path."""
        path = tmp_path / f"config.{file_format}"
        with open(path, "w", encoding="utf-8") as f:
            if file_format == "json":
                json.dump(config_data, f, indent=2)
            else:
                yaml.dump(config_data, f, default_flow_style=False, allow_unicode=True)
        return str(path)

    def get_valid_config_data(self) -> dict:
        """Get valid configuration data for testing."""
        return {
            "feed": {
                "actor": "deals.example.social",
                "limit": 25,
                "api_url": "https://public.api.bsky.app/xrpc/app.bsky.feed.getAuthorFeed",
                "timeout": 20,
            },
            "server": {"host": "0.0.0.0", "port": 9000},
            "client": {
                "endpoint": "http://localhost:9000/deals",
                "poll_interval": 30,
            },
            "logging": {"level": "DEBUG"},
        }

    def test_load_valid_yaml_config(self, tmp_path):
        """Test loading valid YAML configuration."""
        path = self.create_config(tmp_path, self.get_valid_config_data())

        config = ConfigurationManager(path).load_config()

        assert isinstance(config, Configuration)
        assert config.feed.actor == "deals.example.social"
        assert config.feed.limit == 25
        assert config.server.port == 9000
        assert config.client.poll_interval == 30
        assert config.logging.level == "DEBUG"

    def test_load_valid_json_config(self, tmp_path):
        """Test loading valid JSON configuration."""
        path = self.create_config(tmp_path, self.get_valid_config_data(), "json")

        config = ConfigurationManager(path).load_config()

        assert config.server.host == "0.0.0.0"

    def test_partial_config_uses_defaults(self, tmp_path):
        path = self.create_config(tmp_path, {"server": {"port": 8181}})

        config = ConfigurationManager(path).load_config()

        assert config.server.port == 8181
        assert config.feed.actor == DEFAULT_ACTOR
        assert config.feed.limit == 50

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert ConfigurationManager(str(path)).load_config().feed.limit == 50

    def test_no_config_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        manager = ConfigurationManager()

        assert manager.config_path is None
        assert manager.load_config().server.port == 8080

    def test_default_location_found(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.yaml").write_text(
            yaml.dump({"feed": {"limit": 10}})
        )

        config = ConfigurationManager().load_config()

        assert config.feed.limit == 10

    def test_file_not_found(self):
        """Test an explicit configuration file that doesn't exist."""
        with pytest.raises(FileNotFoundError):
            ConfigurationManager("/nonexistent/config.yaml").load_config()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("feed: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            ConfigurationManager(str(path)).load_config()

    def test_invalid_values(self, tmp_path):
        data = self.get_valid_config_data()
        data["feed"]["limit"] = 500
        path = self.create_config(tmp_path, data)

        with pytest.raises(ValueError, match="limit"):
            ConfigurationManager(path).load_config()

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="mapping"):
            ConfigurationManager(str(path)).load_config()

    def test_environment_variable_expansion(self, tmp_path):
        """Test environment variable expansion, including numeric values."""
        data = self.get_valid_config_data()
        data["feed"]["actor"] = "${DEAL_FEED_ACTOR}"
        data["server"]["port"] = "${DEAL_FEED_PORT}"
        path = self.create_config(tmp_path, data)

        with patch.dict(os.environ, {"DEAL_FEED_ACTOR": "env.bsky.social", "DEAL_FEED_PORT": "8765"}):
            config = ConfigurationManager(path).load_config()

        assert config.feed.actor == "env.bsky.social"
        assert config.server.port == 8765

    def test_missing_environment_variable(self, tmp_path):
        data = self.get_valid_config_data()
        data["feed"]["actor"] = "${DEAL_FEED_UNSET_VARIABLE}"
        path = self.create_config(tmp_path, data)

        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="DEAL_FEED_UNSET_VARIABLE"):
                ConfigurationManager(path).load_config()

    def test_get_config_caches(self, tmp_path):
        manager = ConfigurationManager(self.create_config(tmp_path, self.get_valid_config_data()))

        assert manager.get_config() is manager.get_config()

    def test_config_template_loads(self, tmp_path):
        """Test that the generated template is itself a valid configuration."""
        template = ConfigurationManager().get_config_template()
        path = self.create_config(tmp_path, template)

        config = ConfigurationManager(path).load_config()

        assert config.logging.log_dir == "logs"
        assert set(template) == {"feed", "server", "client", "logging"}

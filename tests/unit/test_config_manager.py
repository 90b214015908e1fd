"""
Tests for the configuration management system.
"""
import os
import tempfile
import pytest
import json
import yaml
from pathlib import Path
from unittest.mock import patch

from history_core.config.config_manager import (
    ConfigManager,
    Environment,
    LogLevel,
    PatchConfig,
    ConfigValidationError,
    get_config,
    init_config,
)
from history_core.patching.patch import create_engine


class TestConfigManager:
    """Test the ConfigManager class."""

    def test_singleton_pattern(self):
        """Test that ConfigManager follows singleton pattern."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config1 = ConfigManager(temp_dir)
            config2 = ConfigManager()
            assert config1 is config2

    def test_default_configuration(self):
        """Test that default configuration is properly loaded."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            assert config.config.environment == Environment.DEVELOPMENT
            assert config.config.debug is False
            assert config.config.logging.level == LogLevel.INFO
            assert config.config.logging.json_format is False
            assert config.config.patching == PatchConfig()
            assert config.config.patching.match_threshold == 0.5
            assert config.config.patching.patch_margin == 4

    def test_yaml_config_loading(self):
        """Test loading configuration from YAML file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            test_config = {
                "environment": "testing",
                "debug": True,
                "logging": {"level": "debug"},
                "patching": {"match_threshold": 0.2, "patch_margin": 6},
            }
            with open(Path(temp_dir) / "config.yaml", "w") as f:
                yaml.dump(test_config, f)

            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            assert config.config.environment == Environment.TESTING
            assert config.config.debug is True
            assert config.config.logging.level == LogLevel.DEBUG
            assert config.config.patching.match_threshold == 0.2
            assert config.config.patching.patch_margin == 6
            assert str(Path(temp_dir) / "config.yaml") in config.loaded_files

    def test_json_config_loading(self):
        """Test loading configuration from JSON file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            test_config = {"environment": "staging", "patching": {"match_distance": 250}}
            with open(Path(temp_dir) / "config.json", "w") as f:
                json.dump(test_config, f)

            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            assert config.config.environment == Environment.STAGING
            assert config.config.patching.match_distance == 250

    def test_environment_specific_config(self):
        """Test loading environment-specific configuration."""
        with tempfile.TemporaryDirectory() as temp_dir:
            environments_dir = Path(temp_dir) / "environments"
            environments_dir.mkdir()

            with open(Path(temp_dir) / "config.yaml", "w") as f:
                yaml.dump({"patching": {"diff_timeout": 2.0}}, f)

            with open(environments_dir / "config.production.yaml", "w") as f:
                yaml.dump({"patching": {"diff_timeout": 0.5}}, f)

            with patch.dict(os.environ, {"ENVIRONMENT": "production"}, clear=True):
                config = ConfigManager(temp_dir)

            # Environment-specific config should override base config
            assert config.config.patching.diff_timeout == 0.5

    def test_environment_variable_override(self):
        """Test that environment variables override file configuration."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with open(Path(temp_dir) / "config.yaml", "w") as f:
                yaml.dump({"patching": {"match_threshold": 0.1}}, f)

            env_vars = {
                "MATCH_THRESHOLD": "0.9",
                "PATCH_MARGIN": "2",
                "DEBUG": "true",
                "LOG_LEVEL": "warning",
                "LOG_JSON": "yes",
            }
            with patch.dict(os.environ, env_vars, clear=True):
                config = ConfigManager(temp_dir)

            assert config.config.patching.match_threshold == 0.9
            assert config.config.patching.patch_margin == 2
            assert config.config.debug is True
            assert config.config.logging.level == LogLevel.WARNING
            assert config.config.logging.json_format is True

    def test_invalid_environment_value_is_ignored(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {"PATCH_MARGIN": "wide"}, clear=True):
                config = ConfigManager(temp_dir)

            assert config.config.patching.patch_margin == 4

    def test_unknown_file_key_is_ignored(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            with open(Path(temp_dir) / "config.yaml", "w") as f:
                yaml.dump({"patching": {"colour": "blue"}}, f)

            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            assert not hasattr(config.config.patching, "colour")

    def test_configuration_validation_failure(self):
        """Test configuration validation failures."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {"MATCH_THRESHOLD": "1.5"}, clear=True):
                with pytest.raises(ConfigValidationError) as exc_info:
                    ConfigManager(temp_dir)
            assert "Match threshold must be between 0.0 and 1.0" in str(exc_info.value)

    def test_get_and_set_methods(self):
        """Test the get and set methods for configuration values."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            assert config.get("patching.patch_margin") == 4
            assert config.get("nonexistent.key", "default") == "default"

            config.set("patching.patch_margin", 8)
            assert config.get("patching.patch_margin") == 8

            with pytest.raises(ConfigValidationError):
                config.set("patching.patch_delete_threshold", -0.1)
            assert config.get("patching.patch_delete_threshold") == 0.5

            with pytest.raises(ConfigValidationError):
                config.set("patching.match_threshold", 5.0)
            assert config.get("patching.match_threshold") == 0.5
            assert config.get("patching.patch_margin") == 8

    def test_rejected_set_keeps_engine_settings(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                init_config(temp_dir)

            with pytest.raises(ConfigValidationError):
                get_config().set("patching.match_threshold", 5.0)

            assert create_engine().Match_Threshold == 0.5

    def test_failed_reload_keeps_previous_configuration(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {"PATCH_MARGIN": "6"}, clear=True):
                config = ConfigManager(temp_dir)

            with patch.dict(os.environ, {"MATCH_THRESHOLD": "1.5"}, clear=True):
                with pytest.raises(ConfigValidationError):
                    config.reload_configuration()

            assert config.config.patching.match_threshold == 0.5
            assert config.config.patching.patch_margin == 6

    def test_failed_initialization_is_not_cached(self):
        with patch.dict(os.environ, {"MATCH_THRESHOLD": "1.5"}, clear=True):
            with pytest.raises(ConfigValidationError):
                get_config()
            with pytest.raises(ConfigValidationError):
                get_config()

        assert ConfigManager._instance is None

    def test_to_dict_method(self):
        """Test converting configuration to dictionary."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            config_dict = config.to_dict()

            assert config_dict["environment"] == "development"
            assert config_dict["logging"]["level"] == "INFO"
            assert config_dict["patching"]["match_distance"] == 1000

    def test_save_to_file(self):
        """Test saving configuration to file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)

            config.save_to_file("saved.yaml", "yaml")
            with open(Path(temp_dir) / "saved.yaml", "r") as f:
                saved_config = yaml.safe_load(f)
            assert saved_config["environment"] == "development"
            assert saved_config["patching"]["patch_margin"] == 4

            config.save_to_file("saved.json", "json")
            with open(Path(temp_dir) / "saved.json", "r") as f:
                saved_config = json.load(f)
            assert saved_config["logging"]["level"] == "INFO"

    def test_saved_file_loads_back(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict(os.environ, {}, clear=True):
                config = ConfigManager(temp_dir)
                config.set("patching.match_threshold", 0.35)
                config.save_to_file("config.yaml")

                config.config.patching.match_threshold = 0.5
                config.reload_configuration()

            assert config.config.patching.match_threshold == 0.35

    def test_global_config_functions(self):
        """Test global configuration functions."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config1 = init_config(temp_dir)
            assert isinstance(config1, ConfigManager)
            assert config1.config_dir == Path(temp_dir)

            config2 = get_config()
            assert config1 is config2


class TestConfigDataClasses:
    """Test the configuration data classes."""

    def test_enum_values(self):
        assert Environment.DEVELOPMENT.value == "development"
        assert LogLevel.INFO.value == "INFO"

    def test_patch_config_defaults(self):
        config = PatchConfig()

        assert config.diff_timeout == 1.0
        assert config.diff_edit_cost == 4
        assert config.match_distance == 1000
        assert config.patch_delete_threshold == 0.5

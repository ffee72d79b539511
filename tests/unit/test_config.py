"""Unit tests for configuration management."""

import os
from unittest.mock import patch

import pytest

from refract.core.config import RefractConfig, get_config, reload_config


class TestRefractConfig:
    """Tests for RefractConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        # Clear env and disable .env file loading
        with patch.dict(os.environ, {}, clear=True):
            config = RefractConfig(_env_file=None)

            assert config.log_level == "WARNING"
            assert config.override_include_interfaces is False
            assert config.max_hierarchy_depth == 64
            assert config.builtin_types is True

    def test_env_override(self) -> None:
        """Test environment variable override."""
        with patch.dict(
            os.environ,
            {
                "REFRACT_LOG_LEVEL": "DEBUG",
                "REFRACT_OVERRIDE_INCLUDE_INTERFACES": "true",
                "REFRACT_MAX_HIERARCHY_DEPTH": "8",
            },
        ):
            config = RefractConfig(_env_file=None)
            assert config.log_level == "DEBUG"
            assert config.override_include_interfaces is True
            assert config.max_hierarchy_depth == 8

    def test_validation_depth_min(self) -> None:
        """Test hierarchy depth minimum validation."""
        with patch.dict(os.environ, {"REFRACT_MAX_HIERARCHY_DEPTH": "0"}):
            with pytest.raises(ValueError):
                RefractConfig(_env_file=None)

    def test_validation_depth_max(self) -> None:
        """Test hierarchy depth maximum validation."""
        with patch.dict(os.environ, {"REFRACT_MAX_HIERARCHY_DEPTH": "5000"}):
            with pytest.raises(ValueError):
                RefractConfig(_env_file=None)


class TestConfigCaching:
    """Tests for configuration caching."""

    def test_get_config_cached(self) -> None:
        """Test that get_config returns cached instance."""
        reload_config()  # Clear cache first
        config1 = get_config()
        config2 = get_config()
        assert config1 is config2

    def test_reload_config_clears_cache(self) -> None:
        """Test that reload_config clears cache."""
        config1 = get_config()
        config2 = reload_config()
        config3 = get_config()

        assert config1 is not config2
        assert config2 is config3

    def test_reload_picks_up_environment(self) -> None:
        with patch.dict(os.environ, {"REFRACT_BUILTIN_TYPES": "false"}):
            assert reload_config().builtin_types is False
        assert reload_config().builtin_types is True

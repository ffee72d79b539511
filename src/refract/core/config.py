"""Global configuration for refract.

This module provides centralized configuration management with support for
environment variables and sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class RefractConfig(BaseSettings):
    """refract configuration settings.

    Values can be overridden via environment variables with REFRACT_ prefix.
    Example: REFRACT_LOG_LEVEL=DEBUG overrides log_level.
    """

    log_level: str = Field(
        default="WARNING",
        description="Logging level used by the CLI",
    )

    # Resolution defaults
    override_include_interfaces: bool = Field(
        default=False,
        description="Whether override hierarchies include interfaces when not specified",
    )
    max_hierarchy_depth: int = Field(
        default=64,
        ge=1,
        le=1024,
        description="Maximum superclass chain length accepted by the registry",
    )

    # Registry
    builtin_types: bool = Field(
        default=True,
        description="Preload primitive, wrapper and java.lang types into new registries",
    )

    model_config = {
        "env_prefix": "REFRACT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_config() -> RefractConfig:
    """Get cached configuration instance.

    Returns:
        RefractConfig singleton instance.
    """
    return RefractConfig()


def reload_config() -> RefractConfig:
    """Reload configuration (clears cache).

    Returns:
        Fresh RefractConfig instance.
    """
    get_config.cache_clear()
    return get_config()

# lazyvec/runtime/config.py
#
# Runtime configuration. Values come from the environment with the
# LAZYVEC_ prefix, e.g. LAZYVEC_VECTOR__MAX_SIZE=1000 or LAZYVEC_DEBUG_CHECKS=1.

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorConfig(BaseModel):
    """Capacity policy shared by every LazyVector."""

    default_capacity: int = Field(
        default=4,
        ge=1,
        description="Slots reserved by an empty vector",
    )
    max_size: int = Field(
        default=1_000_000_000,
        ge=1,
        description="Largest length or capacity a vector may reach",
    )


class ObservabilityConfig(BaseModel):
    """Logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log format"
    )


class Config(BaseSettings):
    """Main configuration for lazyvec."""

    model_config = SettingsConfigDict(
        env_prefix="LAZYVEC_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    vector: VectorConfig = Field(default_factory=VectorConfig)
    debug_checks: bool = Field(
        default=False,
        description="Validate operand lengths before every materialization",
    )
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()

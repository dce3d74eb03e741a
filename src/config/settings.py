"""Engine settings using Pydantic Settings.

Centralized configuration for the computation engine. Every field can be
overridden from the environment with the ``TAX_ENGINE_`` prefix, e.g.
``TAX_ENGINE_UNREGISTERED_JURISDICTION_POLICY=warn``.
"""

import logging
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class UnregisteredJurisdictionPolicy(str, Enum):
    """What compute_all does with a jurisdiction code that has no module."""

    SKIP = "skip"
    WARN = "warn"
    ERROR = "error"


class EngineSettings(BaseSettings):
    """Computation engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="TAX_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_tax_year: int = Field(default=2025, description="Tax year used when a return's year has no constants")

    # Jurisdictions
    unregistered_jurisdiction_policy: UnregisteredJurisdictionPolicy = Field(
        default=UnregisteredJurisdictionPolicy.SKIP,
        description="skip, warn (skip and log) or error (raise)",
    )
    parallel_jurisdictions: bool = Field(default=False, description="Run state modules on a thread pool")
    max_workers: int = Field(default=4, ge=1, description="Thread pool size for state modules")

    # Provenance
    include_zero_document_leaves: bool = Field(
        default=True,
        description="Emit document leaves whose amount is zero",
    )

    # Quality gates
    agi_deviation_threshold: float = Field(
        default=0.5,
        gt=0,
        description="Relative state/federal AGI gap that raises a warning",
    )
    balance_tolerance_cents: int = Field(default=1, ge=0, description="Allowed rounding gap in balance checks")

    @field_validator("unregistered_jurisdiction_policy", mode="before")
    @classmethod
    def normalize_policy(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


@lru_cache
def get_settings() -> EngineSettings:
    """
    Get cached engine settings instance.

    Returns:
        EngineSettings: Cached settings loaded from environment.
    """
    settings = EngineSettings()
    logger.debug(f"Engine settings loaded: {settings.model_dump()}")
    return settings

"""Configuration module for the computation engine."""

from .settings import EngineSettings, UnregisteredJurisdictionPolicy, get_settings

__all__ = [
    "EngineSettings",
    "UnregisteredJurisdictionPolicy",
    "get_settings",
]

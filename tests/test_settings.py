"""Tests for engine settings."""

import pytest
from pydantic import ValidationError

from config.settings import EngineSettings, UnregisteredJurisdictionPolicy, get_settings


class TestEngineSettings:

    def test_defaults(self, settings):
        assert settings.default_tax_year == 2025
        assert settings.unregistered_jurisdiction_policy == UnregisteredJurisdictionPolicy.SKIP
        assert settings.parallel_jurisdictions is False
        assert settings.max_workers == 4
        assert settings.include_zero_document_leaves is True
        assert settings.agi_deviation_threshold == 0.5
        assert settings.balance_tolerance_cents == 1

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("TAX_ENGINE_UNREGISTERED_JURISDICTION_POLICY", "WARN")
        monkeypatch.setenv("TAX_ENGINE_PARALLEL_JURISDICTIONS", "true")
        monkeypatch.setenv("TAX_ENGINE_MAX_WORKERS", "8")

        settings = EngineSettings(_env_file=None)

        assert settings.unregistered_jurisdiction_policy == UnregisteredJurisdictionPolicy.WARN
        assert settings.parallel_jurisdictions is True
        assert settings.max_workers == 8

    @pytest.mark.parametrize("field,value", [
        ("max_workers", 0),
        ("agi_deviation_threshold", 0),
        ("balance_tolerance_cents", -1),
        ("unregistered_jurisdiction_policy", "ignore"),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None, **{field: value})

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_cache_clear_picks_up_environment(self, monkeypatch):
        get_settings.cache_clear()
        monkeypatch.setenv("TAX_ENGINE_INCLUDE_ZERO_DOCUMENT_LEAVES", "false")

        assert get_settings().include_zero_document_leaves is False

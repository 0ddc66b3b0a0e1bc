"""
Unit Tests for Configuration and Logging

Tests:
- Settings validation and computed properties
- Match profile registry
- JSON log formatting with run context

Run with: pytest tests/test_configuration.py -v
"""

import json
import logging

import pytest

from config import Settings
from logging_config import JSONFormatter, RunContextFilter
from reconciliation.match_profiles import EntityType, MatchProfileRegistry


class TestSettings:
    """Test Settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.NAME_MATCH_THRESHOLD == pytest.approx(0.80)
        assert settings.internal_api_keys_list == []
        assert settings.validate_production_config() == []

    def test_api_keys_parsed(self):
        settings = Settings(_env_file=None, INTERNAL_API_KEYS=" a , b,, ")
        assert settings.internal_api_keys_list == ["a", "b"]

    def test_threshold_out_of_range(self):
        settings = Settings(_env_file=None, NAME_MATCH_THRESHOLD=1.5)
        assert "NAME_MATCH_THRESHOLD must be between 0 and 1 (exclusive)" in settings.validate_production_config()

    def test_production_requires_keys_and_origins(self):
        settings = Settings(_env_file=None, ENVIRONMENT="production", CORS_ORIGINS="*")
        errors = settings.validate_production_config()

        assert "INTERNAL_API_KEYS is required in production" in errors
        assert "CORS_ORIGINS cannot be '*' in production" in errors

    def test_dev_origins_only_outside_production(self):
        dev = Settings(_env_file=None, CORS_ORIGINS="https://clinic.example")
        prod = Settings(_env_file=None, ENVIRONMENT="production", CORS_ORIGINS="https://clinic.example")

        assert "http://localhost:3000" in dev.cors_origins_list
        assert prod.cors_origins_list == ["https://clinic.example"]


class TestMatchProfileRegistry:
    """Test MatchProfileRegistry."""

    def test_default_profiles(self):
        registry = MatchProfileRegistry(default_threshold=0.8)

        assert registry.get_threshold(EntityType.PATIENT) == 0.8
        assert registry.get_profile(EntityType.PROFESSIONAL).create_when_unmatched is True
        assert registry.get_profile(EntityType.PATIENT).create_when_unmatched is False

    def test_update_profile(self):
        registry = MatchProfileRegistry(default_threshold=0.8)
        registry.update_profile(EntityType.PATIENT, similarity_threshold=0.9, unknown_field=1)

        assert registry.get_threshold(EntityType.PATIENT) == 0.9
        assert registry.get_threshold(EntityType.PROFESSIONAL) == 0.8
        assert registry.to_dict()["Patient"]["similarity_threshold"] == 0.9


class TestJSONLogging:
    """Test structured log output."""

    def make_record(self, **extra):
        record = logging.LogRecord(
            name="reconciliation.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Reconciliation event: %s",
            args=("run_started",),
            exc_info=None
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_json_format(self):
        formatter = JSONFormatter(service_name="schedule-reconciliation")
        payload = json.loads(formatter.format(self.make_record(event="run_started")))

        assert payload["message"] == "Reconciliation event: run_started"
        assert payload["service"] == "schedule-reconciliation"
        assert payload["level"] == "INFO"
        assert payload["extra"]["event"] == "run_started"

    def test_run_context_filter(self):
        context = RunContextFilter()
        context.set_run_context("run-123")

        record = self.make_record()
        assert context.filter(record) is True
        assert record.run_id == "run-123"

        context.clear_run_context()
        record = self.make_record()
        context.filter(record)
        assert record.run_id is None

    def test_explicit_run_id_kept(self):
        context = RunContextFilter()
        context.set_run_context("run-123")

        record = self.make_record(run_id="run-456")
        context.filter(record)
        assert record.run_id == "run-456"

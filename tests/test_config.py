"""
Tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from employee_service.config import Settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("AUDIT_TABLE_NAME", "EmployeeLogProd")
        monkeypatch.setenv("DYNAMODB_ENDPOINT_URL", "http://localhost:8001")
        monkeypatch.setenv("DB_POOL_MAX_SIZE", "50")

        settings = Settings(_env_file=None)

        assert settings.audit_table_name == "EmployeeLogProd"
        assert settings.dynamodb_endpoint_url == "http://localhost:8001"
        assert settings.db_pool_max_size == 50

    def test_settings_are_immutable(self):
        settings = Settings(_env_file=None)

        with pytest.raises(ValidationError):
            settings.audit_table_name = "Other"

    def test_asyncpg_dsn_strips_driver_suffix(self):
        settings = Settings(_env_file=None, database_url="postgresql+asyncpg://u:p@db:5432/hr")

        assert settings.asyncpg_dsn == "postgresql://u:p@db:5432/hr"

    def test_table_name_too_short(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, audit_table_name="ab")

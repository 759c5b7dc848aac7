"""Pytest configuration and shared fixtures."""

from datetime import UTC, datetime

import pytest


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset the settings and logging singletons around every test."""
    from applywise.config.settings import reset_settings
    from applywise.utils.logging import reset_logging

    reset_settings()
    reset_logging()
    yield
    reset_settings()
    reset_logging()


@pytest.fixture
def now() -> datetime:
    """A fixed reference time for time-dependent queries."""
    return datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def settings():
    """Settings with defaults only (no .env file)."""
    from applywise.config.settings import Settings

    return Settings(_env_file=None)


@pytest.fixture
def make_application():
    """Factory for job applications with sensible defaults."""
    from applywise.tracker.models import JobApplication

    def _make(company_name: str = "ExampleCo", job_title: str = "Engineer", **kwargs):
        return JobApplication(company_name=company_name, job_title=job_title, **kwargs)

    return _make

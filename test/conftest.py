"""
Test Configuration

Environment setup MUST happen before any application import: settings and
the loguru sinks are built at import time.

Architecture:
- Unit tests (test/**/unit/): pure in-memory, seeded through InMemoryCatalog
- Shared fixtures for the seeded catalog and the booking service live in
  test/service/booking/unit/conftest.py
"""

import os


def _early_setup_test_environment() -> None:
    os.environ['TIMEZONE'] = 'UTC'
    os.environ['CURRENCY_DECIMAL_PLACES'] = '2'
    os.environ['LOG_FILE_ENABLED'] = 'false'
    os.environ.setdefault('DEPLOY_ENV', 'test')
    os.environ.setdefault('SERVICE_NAME', 'seat-reservation-engine')


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import Generator  # noqa: E402

import pytest  # noqa: E402

from src.platform.config.di import cleanup, setup  # noqa: E402


@pytest.fixture(autouse=True)
def reset_container() -> Generator[None, None, None]:
    """Each test gets fresh singletons (catalog, store, booking service)"""
    setup()
    yield
    cleanup()

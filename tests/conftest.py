"""
Pytest configuration and shared fixtures.

This module provides fixtures for:
- Deterministic market data / universe fakes
- A recording signal publisher
- Settings tuned for fast tests
- FastAPI test client wired to the fakes
"""

import os

import pytest

# Set testing environment before importing app modules
os.environ.setdefault("LOG_LEVEL", "WARNING")

from smcscan.container import create_container  # noqa: E402
from smcscan.shared.config.settings import Settings  # noqa: E402

from tests.factories import FakeMarketData, FakeUniverse, RecordingPublisher  # noqa: E402


# ─────────────────────────────────────────────────────────────────────────────
# Collaborator Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def market_data():
    """Market data that yields a BuyingZone for every symbol."""
    return FakeMarketData()


@pytest.fixture
def universe():
    return FakeUniverse(["BTC", "ETH", "SOL"])


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def test_settings():
    """Settings without .env lookup and with short timeouts."""
    return Settings(
        _env_file=None,
        scan_max_concurrency=3,
        scan_fetch_timeout_seconds=1.0,
        scan_retry_attempts=1,
        scan_retry_backoff_seconds=0.0,
        universe_size=10,
        ws_send_timeout_seconds=0.5,
    )


# ─────────────────────────────────────────────────────────────────────────────
# FastAPI Test Client
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def make_client(test_settings):
    """Factory for a TestClient whose container uses the given fakes."""
    from fastapi.testclient import TestClient
    from smcscan.main import create_app

    def _make(market_data=None, universe=None, **settings_overrides):
        settings = test_settings.model_copy(update=settings_overrides)
        container = create_container(
            settings,
            market_data_provider=market_data or FakeMarketData(),
            symbol_universe=universe or FakeUniverse(["BTC", "ETH"]),
        )
        return TestClient(create_app(settings=settings, container=container))

    return _make

"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for Settings() created at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from unittest.mock import AsyncMock, MagicMock

import pytest
from loguru import logger

from commission_engine.config.plans import build_plan_catalog
from commission_engine.config.settings import Settings
from commission_engine.services.commission.rate_table import RateTable


@pytest.fixture
def test_settings() -> Settings:
    """Settings with defaults, independent of any .env file."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        environment="test",
        _env_file=None,
    )


@pytest.fixture
def rate_table(test_settings) -> RateTable:
    """Default rate table (basic 800, premium 2500, depth 10)."""
    return RateTable(build_plan_catalog(test_settings), max_depth=10)


@pytest.fixture
def mock_uow():
    """Mock unit of work with async repositories."""
    uow = MagicMock()
    uow.users = AsyncMock()
    uow.referrals = AsyncMock()
    uow.commissions = AsyncMock()
    uow.earnings = AsyncMock()
    uow.wallet_transactions = AsyncMock()
    uow.platform_wallets = AsyncMock()
    uow.activities = AsyncMock()

    # async with uow.savepoint(): must not swallow exceptions
    savepoint = MagicMock()
    savepoint.__aenter__ = AsyncMock(return_value=None)
    savepoint.__aexit__ = AsyncMock(return_value=False)
    uow.savepoint = MagicMock(return_value=savepoint)
    return uow


@pytest.fixture
def mock_purchaser():
    """Purchasing user."""
    purchaser = MagicMock()
    purchaser.id = 7
    purchaser.name = "Priya"
    return purchaser


@pytest.fixture
def log_messages():
    """Capture loguru records emitted during the test."""
    records: list = []
    handler_id = logger.add(
        lambda message: records.append(message.record), level="DEBUG"
    )
    yield records
    logger.remove(handler_id)

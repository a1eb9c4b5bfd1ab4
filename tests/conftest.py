from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.fixtures.clock import FrozenClock


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def frozen_clock():
    """Clock frozen at 2026-03-10 12:00:00 UTC"""
    return FrozenClock(datetime(2026, 3, 10, 12, 0, 0))


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.publish = AsyncMock(return_value=True)
    return notifier


@pytest.fixture
def mock_admin_log_repo():
    """Mock admin log repository that echoes the entry back"""
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda admin_log: admin_log)
    return repo

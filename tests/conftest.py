"""Shared fixtures for relay and extraction tests."""

import copy
from unittest.mock import AsyncMock, Mock

import pytest

from chat.conversation import DEFAULT_CONFIG


@pytest.fixture
def config() -> dict:
    """A copy of the built-in configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def store() -> AsyncMock:
    """A store handle that records calls instead of hitting Supabase."""
    mock = AsyncMock()
    mock.owner_id = "household"
    mock.select = AsyncMock(return_value=[])
    mock.insert = AsyncMock(return_value=None)
    mock.upsert = AsyncMock(return_value=[])
    mock.delete = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def adapter() -> Mock:
    """A chat adapter whose create_message is scripted per test."""
    mock = Mock()
    mock.create_message = AsyncMock()
    return mock

"""
Test configuration and shared fixtures.

Gmail is never contacted: API tests override the Gmail client dependency
with a MagicMock.
"""
from typing import AsyncGenerator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from inbox_sorter.config import Settings
from inbox_sorter.services.gmail_client import GmailClient


@pytest.fixture
def settings() -> Settings:
    """Settings with Gmail tokens configured."""
    return Settings(
        _env_file=None,
        google_client_id="client-id",
        google_client_secret="client-secret",
        google_access_token="",
        google_refresh_token="refresh-token",
        batch_size=10,
        fetch_concurrency=3,
    )


@pytest.fixture
def unauthenticated_settings() -> Settings:
    """Settings without any Gmail tokens."""
    return Settings(
        _env_file=None,
        google_access_token="",
        google_refresh_token="",
    )


@pytest.fixture
def mock_gmail(settings: Settings) -> MagicMock:
    """Gmail client mock bound to the test settings."""
    client = MagicMock(spec=GmailClient)
    client.settings = settings
    return client


@pytest_asyncio.fixture
async def client(
    settings: Settings, mock_gmail: MagicMock
) -> AsyncGenerator[AsyncClient, None]:
    """Test HTTP client with overridden settings and Gmail dependencies."""
    from inbox_sorter.api.deps import get_gmail_client
    from inbox_sorter.config import get_settings
    from inbox_sorter.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_gmail_client] = lambda: mock_gmail

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()

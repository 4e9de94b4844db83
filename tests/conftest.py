"""Root pytest configuration for all tests."""

from unittest.mock import patch

import pytest

from src.confluence_client.client import ConfluenceClient
from src.confluence_client.models import ClientConfig, InstanceType
from tests.helpers.fake_http import FakeSession

CLOUD_URL = "https://example.atlassian.net/wiki"
SERVER_URL = "https://confluence.example.com"


@pytest.fixture
def no_sleep():
    """Patch out retry backoff sleeps; yields the mock for assertions."""
    with patch('src.confluence_client.retry_logic.time.sleep') as mock_sleep:
        yield mock_sleep


@pytest.fixture
def cloud_session():
    return FakeSession(CLOUD_URL)


@pytest.fixture
def server_session():
    return FakeSession(SERVER_URL)


@pytest.fixture
def cloud_client(cloud_session):
    """Client for a Cloud instance (v2 dialect, basic auth) over a fake session."""
    config = ClientConfig(
        base_url=CLOUD_URL,
        token="api-token",
        email="me@example.com",
        instance_type=InstanceType.CLOUD,
    )
    return ConfluenceClient(config, session=cloud_session)


@pytest.fixture
def server_client(server_session):
    """Client for a Server/DC instance (v1 dialect, bearer auth) over a fake session."""
    config = ClientConfig(
        base_url=SERVER_URL,
        token="pat-token",
        instance_type=InstanceType.SERVER,
    )
    return ConfluenceClient(config, session=server_session)

"""Pytest fixtures and shared test configuration.

Fixtures:
    - config: Client configuration with short timeouts and recovery delay
    - service: Scripted remote service (records requests, replays responses)
    - client: ServiceClient wired to the scripted service
    - library: Empty DocumentLibrary
    - id_factory: Predictable session id generator
"""

import itertools
from collections.abc import AsyncGenerator, Callable

import httpx
import pytest

from edubot.client.api import ServiceClient
from edubot.config import ClientConfig
from edubot.library.documents import DocumentLibrary
from tests.support import ScriptedService


@pytest.fixture
def config() -> ClientConfig:
    """Configuration with bounds small enough for fast tests."""
    return ClientConfig(
        api_base_url="http://test",
        chat_timeout=0.2,
        upload_timeout=0.2,
        delete_timeout=0.2,
        history_timeout=0.2,
        recovery_delay=0.05,
        max_upload_mb=50,
        history_limit=50,
    )


@pytest.fixture
def service() -> ScriptedService:
    return ScriptedService()


@pytest.fixture
async def client(
    config: ClientConfig, service: ScriptedService
) -> AsyncGenerator[ServiceClient]:
    """ServiceClient whose transport is the scripted service.

    Yields:
        Client closed after the test.
    """
    async with ServiceClient(config, transport=httpx.MockTransport(service.handle)) as c:
        yield c


@pytest.fixture
def library() -> DocumentLibrary:
    return DocumentLibrary()


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Session ids chat-1, chat-2, ... in call order."""
    counter = itertools.count(1)
    return lambda: f"chat-{next(counter)}"

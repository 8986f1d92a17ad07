
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from adboard.main import create_app
from adboard.config import Settings
from adboard.repositories.memory import InMemoryRepository
from adboard.identity.keys import generate_key_pair

@pytest.fixture
def repository():
    # Fresh storage per test
    return InMemoryRepository()

@pytest.fixture
def app(repository):
    # Limits are exercised in test_rate_limits.py only
    return create_app(Settings(RATE_LIMIT_ENABLED=False), repository=repository)

@pytest_asyncio.fixture
async def client(app):
    # Surface 500 responses instead of re-raising app errors in the test
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

@pytest.fixture
def key_pair():
    return generate_key_pair()

@pytest.fixture
def ad_payload():
    return {
        "title": "X",
        "targetUrl": "http://x",
        "budget": 10000,
        "duration": 7,
    }

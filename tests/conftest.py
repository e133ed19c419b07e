"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app


@pytest.fixture
async def client():
    """Async test client fixture."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def pod_spec():
    """Pod spec with a single toleration."""
    return {
        "spec": {
            "tolerations": [{"effect": "NoSchedule", "operator": "Exists"}]
        }
    }

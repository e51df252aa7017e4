"""
Shared test fixtures and helpers for the archmarket test suite.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict

import httpx
import pytest
import pytest_asyncio

from archmarket.auth import KeyRing, TokenManager
from archmarket.config import ConfigLoader
from archmarket.db import MemoryDocumentStore
from archmarket.modules.designs.models import DESIGNS, new_design
from archmarket.server import create_app

FIXED_NOW = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)


class FakeClock:
    """Controllable time source shared by the store and the services."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def design_document(**overrides) -> dict:
    """A published design document ready for ``store.insert``."""
    data = {
        "title": "Coastal Villa",
        "description": "A two storey villa facing the sea.",
        "category": "residential",
        "style": "modern",
        "price": 100.0,
        "status": "published",
        "model3d": {"file": "https://cdn.example.com/villa.glb", "format": "glb"},
    }
    data.update(overrides)
    return new_design(data, "admin-1")


def order_payload(design_id: str, **overrides) -> dict:
    payload = {
        "items": [{"design": design_id, "quantity": 1, "license": "personal"}],
        "paymentMethod": "stripe",
        "billingAddress": {"name": "Ada Lovelace", "email": "ada@example.com"},
    }
    payload.update(overrides)
    return payload


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return ConfigLoader.load(
        paths=[],
        env_file=None,
        use_environ=False,
        overrides={"database": {"url": "memory://"}},
    )


@pytest.fixture
def store(clock):
    return MemoryDocumentStore(clock)


@pytest.fixture(scope="session")
def key_ring():
    return KeyRing.generate()


@pytest.fixture
def app(config, store, key_ring, clock):
    return create_app(config, store=store, key_ring=key_ring, clock=clock)


@pytest.fixture
def token_manager(app) -> TokenManager:
    return app.server.container.resolve(TokenManager)


@pytest.fixture
def auth(token_manager):
    """``auth("user-1", "admin")`` -> Authorization header dict."""

    def _headers(subject: str, *roles: str) -> Dict[str, str]:
        token = token_manager.issue_access_token(subject, roles=list(roles) or None)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def customer(auth):
    return auth("customer-1")


@pytest.fixture
def other_customer(auth):
    return auth("customer-2")


@pytest.fixture
def admin(auth):
    return auth("admin-1", "admin")


@pytest_asyncio.fixture
async def client(app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def published_design(store):
    return await store.insert(DESIGNS, design_document())

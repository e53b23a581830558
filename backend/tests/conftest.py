"""
Customer Registry Backend — Test Configuration (conftest.py)
==============================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── sample_customer: A fully-populated Customer
    ├── customer_store: Empty CustomerStore
    ├── seeded_store: CustomerStore holding three customers
    ├── seed_file: Temporary JSON seed file
    └── test_client: HTTPX AsyncClient bound to a fresh app with its own store
"""

import json
import os

# Override settings for testing BEFORE any app imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CUSTOMERS_DATA_PATH"] = "./does-not-exist.json"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from app.schemas.customer import Customer
from app.store import CustomerStore


def make_customer(guid: str = "g1", **overrides) -> Customer:
    """Build a Customer with predictable defaults."""
    fields = {
        "guid": guid,
        "first_name": "A",
        "last_name": "B",
        "email": "a@b.com",
        "address": "X",
    }
    fields.update(overrides)
    return Customer(**fields)


@pytest.fixture
def sample_customer() -> Customer:
    return make_customer()


@pytest.fixture
def customer_store() -> CustomerStore:
    """A fresh, empty store per test."""
    return CustomerStore()


@pytest.fixture
def seeded_store() -> CustomerStore:
    """A store holding g1, g2, g3 in that order."""
    return CustomerStore(
        [
            make_customer("g1", first_name="Ada"),
            make_customer("g2", first_name="Alan"),
            make_customer("g3", first_name="Grace"),
        ]
    )


@pytest.fixture
def seed_file(tmp_path):
    """
    Writes a valid seed file and returns its path.

    Contains a duplicate guid to exercise de-duplication.
    """
    path = tmp_path / "customers.json"
    path.write_text(
        json.dumps(
            [
                make_customer("s1").model_dump(),
                make_customer("s2", last_name="Second").model_dump(),
                make_customer("s1", last_name="Duplicate").model_dump(),
            ]
        ),
        encoding="utf-8",
    )
    return str(path)


@pytest_asyncio.fixture
async def test_client(customer_store):
    """
    HTTPX AsyncClient talking to a new app that serves `customer_store`.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/customers")
            assert response.status_code == 200
    """
    from app.main import create_app

    app = create_app(store=customer_store, seed_path=None)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

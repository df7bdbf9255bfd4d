# tests/conftest.py
import pytest
import os
import json
from datetime import datetime
from decimal import Decimal

os.environ["PREFECT_TEST_MODE"] = "1"
os.environ["PREFECT_LOGGING_LEVEL"] = "ERROR"

import requests
from fastapi.testclient import TestClient

from sales_api import seeding
from sales_api.config import Settings
from sales_api.database import create_db_engine
from sales_api.main import create_app, get_engine
from sales_api.store import TransactionStore

SEED_URL = "https://example.test/product_transaction.json"

# In-memory SQLite; every engine built from these settings gets its own database
TEST_SETTINGS = Settings(
    DATABASE_URL="sqlite://",
    SEED_ON_STARTUP=False,
    SEED_URL=SEED_URL,
    LOG_LEVEL="WARNING",
)

def make_record(id, price="10.00", category="electronics", sold=True,
                date_of_sale="2022-03-05 10:00:00", title=None, description=None):
    """A row in the shape TransactionStore.bulk_insert expects."""
    return {
        "id": id,
        "title": title or f"Product {id}",
        "description": description or f"Description of product {id}",
        "price": Decimal(price),
        "category": category,
        "image": f"https://example.test/images/{id}.jpg",
        "sold": sold,
        "date_of_sale": datetime.fromisoformat(date_of_sale),
    }

def make_payload_item(id, price=10.0, category="electronics", sold=True, date_of_sale="2022-03-05T10:00:00+05:30"):
    """An object in the shape the remote dataset serves."""
    return {
        "id": id,
        "title": f"Product {id}",
        "description": f"Description of product {id}",
        "price": price,
        "category": category,
        "image": f"https://example.test/images/{id}.jpg",
        "sold": sold,
        "dateOfSale": date_of_sale,
    }

class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.payload = payload
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.text is not None:
            return json.loads(self.text)
        return self.payload

@pytest.fixture
def remote(monkeypatch):
    """
    Replaces requests.get in the seeder. Set `remote.response` to a
    FakeResponse or to an exception instance to raise.
    """
    class Remote:
        response = FakeResponse([])
        calls = []

        def get(self, url, timeout=None):
            self.calls.append(url)
            if isinstance(self.response, Exception):
                raise self.response
            return self.response

    fake = Remote()
    fake.calls = []
    monkeypatch.setattr(seeding.requests, "get", fake.get)
    return fake

@pytest.fixture(scope="function")
def engine():
    engine = create_db_engine(TEST_SETTINGS)
    yield engine
    engine.dispose()

@pytest.fixture(scope="function")
def store(engine):
    store = TransactionStore(engine)
    store.ensure_schema()
    return store

@pytest.fixture(scope="function")
def db_session(store):
    with store.session() as db:
        yield db

@pytest.fixture(scope="function")
def march_data(store):
    """The two-record March example: one sold at 50, one unsold at 150, different years."""
    store.bulk_insert([
        make_record(1, price="50.00", category="A", sold=True, date_of_sale="2022-03-05 00:00:00"),
        make_record(2, price="150.00", category="B", sold=False, date_of_sale="2023-03-20 00:00:00"),
    ])

@pytest.fixture(scope="function")
def client(store):
    """
    Overrides the engine dependency so requests hit the test store.
    """
    app = create_app(TEST_SETTINGS)

    def get_test_engine_override():
        yield store.engine

    app.dependency_overrides[get_engine] = get_test_engine_override

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()

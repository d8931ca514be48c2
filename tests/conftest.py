# tests/conftest.py

"""
Shared fixtures for the Product API tests.
The suite runs against an in-memory SQLite database; DATABASE_URL must be set
before product_api is imported because the engine is built at import time.
"""

import logging
import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

from product_api.db import Base, SessionLocal, engine
from product_api.main import app, get_product_service
from product_api.service import ProductService
from product_api.store import ProductStore, StorageError

# Suppress noisy logs from SQLAlchemy/FastAPI during tests for cleaner output
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("product_api.main").setLevel(logging.WARNING)


@pytest.fixture(autouse=True)
def reset_database():
    """Gives every test an empty schema."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="module")  # Client is created once per test module
def client():
    """
    Provides a TestClient for making HTTP requests to the FastAPI application.
    The TestClient runs the app's startup handlers.
    """
    with TestClient(app) as test_client:
        yield test_client


class BrokenStore(ProductStore):
    """Every call fails the way a dropped database connection would."""

    def _fail(self, *args, **kwargs):
        raise StorageError("server closed the connection unexpectedly")

    insert = fetch_by_id = count_active = fetch_range = save = soft_delete = _fail


@pytest.fixture
def broken_store():
    return BrokenStore()


@pytest.fixture
def broken_storage(client, broken_store):
    """Routes the app's requests to a store whose every call fails."""
    app.dependency_overrides[get_product_service] = lambda: ProductService(broken_store)
    try:
        yield client
    finally:
        app.dependency_overrides.pop(get_product_service, None)

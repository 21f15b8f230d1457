"""Test configuration and shared fixtures."""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auth import create_access_token
from database import get_session, init_db
from main import app
from models import Base


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every connection of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """TestClient whose requests use the in-memory database."""

    def _override_session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = _override_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _headers(role: str) -> dict:
    token = create_access_token(1, role.lower(), role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def accountant_headers() -> dict:
    return _headers("Accountant")


@pytest.fixture
def admin_headers() -> dict:
    return _headers("Admin")


@pytest.fixture
def developer_headers() -> dict:
    return _headers("Developer")


@pytest.fixture
def tax_customer(client, accountant_headers) -> dict:
    """Customer with a GSTIN (tax invoices)."""
    response = client.post(
        "/api/customers",
        json={"name": "Rohan Sharma", "address": "123 Diamond Street, Jaipur", "gstin": "08aaaaa0000a1z5"},
        headers=accountant_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def cash_customer(client, accountant_headers) -> dict:
    """Customer without a GSTIN (cash memos)."""
    response = client.post(
        "/api/customers",
        json={"name": "Priya Patel", "address": "456 Ruby Lane, Mumbai"},
        headers=accountant_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def make_invoice(client, accountant_headers):
    """Factory issuing an invoice through the API."""

    def _make(customer_id: int, **overrides) -> dict:
        payload = {
            "customer_id": customer_id,
            "issue_date": "2023-12-01",
            "due_date": "2024-01-01",
            "interest_rate": 2,
            "interest_compound": "Monthly",
            "discount": 0,
            "line_items": [
                {
                    "item_name": "Gold Chain",
                    "quantity": 1,
                    "net_weight": 2,
                    "rate": 5000,
                    "making_charge_type": "flat",
                    "making_charge_value": 0,
                    "apply_tax": False,
                }
            ],
        }
        payload.update(overrides)
        response = client.post("/api/invoices", json=payload, headers=accountant_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make

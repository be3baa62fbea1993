"""Shared fixtures: an in-memory database per test and an authenticated client"""
import os
import sys

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["CACHE_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["USE_SQLITE"] = "true"
os.environ.pop("REDIS_URL", None)

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

import models  # noqa: F401  registers the tables
from auth import SessionContext, create_access_token
from database import build_engine, create_db_and_tables, get_session
from dependencies import get_notification_service
from models import Doctor, Medicine
from store import Store
from utils.cache import QueryCache, RedisCache
from utils.notification_service import NotificationService


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", echo=False)
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session):
    return Store(session, cache=QueryCache(RedisCache(enabled=False)))


@pytest.fixture
def ctx():
    return SessionContext(user_id="user-1", email="patient@example.com", full_name="Pat Doe")


@pytest.fixture
def other_ctx():
    return SessionContext(user_id="user-2", email="other@example.com")


@pytest.fixture
def medicine(session):
    medicine = Medicine(name="Paracetamol 500mg", category="Pain Relief",
                        price=Decimal("9.99"), stock_quantity=10)
    session.add(medicine)
    session.commit()
    session.refresh(medicine)
    return medicine


@pytest.fixture
def cheap_medicine(session):
    medicine = Medicine(name="Cetirizine 10mg", category="Allergy",
                        price=Decimal("3.50"), stock_quantity=5)
    session.add(medicine)
    session.commit()
    session.refresh(medicine)
    return medicine


@pytest.fixture
def out_of_stock_medicine(session):
    medicine = Medicine(name="Vitamin D3", category="Supplements",
                        price=Decimal("7.25"), stock_quantity=0)
    session.add(medicine)
    session.commit()
    session.refresh(medicine)
    return medicine


@pytest.fixture
def doctor(session):
    doctor = Doctor(name="Dr. Asha Menon", specialty="General Medicine",
                    consultation_fee=Decimal("40.00"), rating=4.7,
                    available_days=["Mon"], available_hours="09:00-10:00",
                    created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    session.add(doctor)
    session.commit()
    session.refresh(doctor)
    return doctor


@pytest.fixture
def client(engine):
    from main import app

    def override_session():
        with Session(engine) as session:
            yield session

    notifier = NotificationService(lambda: Session(engine))
    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_notification_service] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_headers(user_id: str = "user-1", **claims) -> dict:
    token = create_access_token({"sub": user_id, **claims})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return make_headers("user-1", email="patient@example.com", user_metadata={"full_name": "Pat Doe"})

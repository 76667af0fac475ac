import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["SEED_DEMO_DATA"] = "false"

from datetime import datetime
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from papertrade.core.database import Base, get_db
from papertrade.main import app


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def register_and_login(client, username="trader", password="secret123"):
    r = client.post("/api/auth/register", json={"username": username, "password": password})
    assert r.status_code == 201, r.text
    r = client.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture()
def auth_headers(client):
    return register_and_login(client)


@pytest.fixture()
def other_headers(client):
    return register_and_login(client, username="someone_else")


def make_trade(**overrides):
    """Plain trade record with the same attributes as the ORM row."""
    fields = {
        "id": 1,
        "user_id": 1,
        "symbol": "BTC/USD",
        "position": "Long",
        "quantity": 1.0,
        "entry_price": 100.0,
        "current_price": None,
        "take_profit": 120.0,
        "stop_loss": 90.0,
        "profit_loss": None,
        "profit_loss_percentage": None,
        "api_used": "Binance",
        "notes": None,
        "is_active": True,
        "created_at": datetime(2025, 4, 1, 12, 0),
        "updated_at": datetime(2025, 4, 1, 12, 0),
        "closed_at": None,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_activity(**overrides):
    fields = {
        "id": 1,
        "user_id": 1,
        "trade_id": 1,
        "type": "Trade Started",
        "symbol": "BTC/USD",
        "price": 100.0,
        "amount": 1.0,
        "status": "Completed",
        "metadata_": {},
        "created_at": datetime(2025, 4, 1, 12, 0),
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


TRADE_PAYLOAD = {
    "symbol": "BTC/USD",
    "position": "Long",
    "quantity": 0.5,
    "entry_price": 100.0,
    "take_profit": 120.0,
    "stop_loss": 90.0,
    "api_used": "Binance",
    "notes": "breakout",
}

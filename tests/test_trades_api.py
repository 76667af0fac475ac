from datetime import datetime, timezone

import pytest

from conftest import TRADE_PAYLOAD
from papertrade.models.activity import TradeActivity
from papertrade.models.trade import Trade


def _create(client, headers, **overrides):
    r = client.post("/api/trades", json={**TRADE_PAYLOAD, **overrides}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_requires_authentication(client):
    assert client.get("/api/trades").status_code == 401
    assert client.get("/api/trades", headers={"Authorization": "Bearer nonsense"}).status_code == 401


def test_create_trade(client, auth_headers):
    trade = _create(client, auth_headers)
    assert trade["is_active"] is True
    assert trade["closed_at"] is None
    assert trade["current_price"] == trade["entry_price"] == 100.0
    assert trade["progress"] == pytest.approx(100 / 3)
    assert trade["profit_loss_display"]["text"] == "$0.00"

    activities = client.get("/api/trade-activities", headers=auth_headers).json()
    assert len(activities) == 1
    assert activities[0]["type"] == "Trade Started"
    assert activities[0]["status"] == "Completed"
    assert activities[0]["trade_id"] == trade["id"]
    assert activities[0]["price"] == 100.0
    assert activities[0]["amount"] == 0.5


def test_create_rejects_non_positive_values(client, auth_headers):
    for field in ("quantity", "entry_price", "take_profit", "stop_loss"):
        r = client.post("/api/trades", json={**TRADE_PAYLOAD, field: 0}, headers=auth_headers)
        assert r.status_code == 422, field
    r = client.post("/api/trades", json={**TRADE_PAYLOAD, "position": "Sideways"}, headers=auth_headers)
    assert r.status_code == 422


def test_update_trade(client, auth_headers):
    trade = _create(client, auth_headers, current_price=104.0)
    r = client.patch(
        f"/api/trades/{trade['id']}",
        json={"take_profit": 130.0, "current_price": 110.0, "profit_loss": 5.0, "profit_loss_percentage": 10.0},
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    updated = r.json()
    assert updated["take_profit"] == 130.0
    assert updated["profit_loss_display"]["text"] == "+$5.00 (10.00%)"
    assert updated["user_id"] == trade["user_id"]
    assert updated["is_active"] is True

    latest = client.get("/api/trade-activities", headers=auth_headers).json()[0]
    assert latest["type"] == "Trade Modified"
    assert latest["status"] == "Updated"
    # journal records the pre-edit price
    assert latest["price"] == 104.0
    assert "take_profit" in latest["metadata"]["fields"]


def test_stop_trade(client, auth_headers):
    trade = _create(client, auth_headers)
    r = client.post(f"/api/trades/{trade['id']}/stop", headers=auth_headers)
    assert r.status_code == 200, r.text
    stopped = r.json()
    assert stopped["is_active"] is False
    assert stopped["closed_at"] is not None

    r = client.post(f"/api/trades/{trade['id']}/stop", headers=auth_headers)
    assert r.status_code == 400

    types = [a["type"] for a in client.get("/api/trade-activities", headers=auth_headers).json()]
    assert types == ["Trade Stopped", "Trade Started"]


def test_foreign_and_missing_trades(client, auth_headers, other_headers):
    trade = _create(client, auth_headers)
    assert client.patch(f"/api/trades/{trade['id']}", json={"notes": "x"}, headers=other_headers).status_code == 403
    assert client.post(f"/api/trades/{trade['id']}/stop", headers=other_headers).status_code == 403
    assert client.patch("/api/trades/9999", json={"notes": "x"}, headers=auth_headers).status_code == 404
    assert client.post("/api/trades/9999/stop", headers=auth_headers).status_code == 404

    assert client.get("/api/trades", headers=other_headers).json() == []
    assert client.get("/api/trade-activities", headers=other_headers).json() == []


def test_activity_per_mutation_with_increasing_timestamps(client, auth_headers, db_session):
    trade = _create(client, auth_headers)
    client.patch(f"/api/trades/{trade['id']}", json={"notes": "one"}, headers=auth_headers)
    client.patch(f"/api/trades/{trade['id']}", json={"notes": "two"}, headers=auth_headers)
    client.post(f"/api/trades/{trade['id']}/stop", headers=auth_headers)

    rows = (
        db_session.query(TradeActivity)
        .filter(TradeActivity.trade_id == trade["id"])
        .order_by(TradeActivity.id)
        .all()
    )
    assert [a.type for a in rows] == ["Trade Started", "Trade Modified", "Trade Modified", "Trade Stopped"]
    stamps = [a.created_at for a in rows]
    assert all(earlier < later for earlier, later in zip(stamps, stamps[1:]))


def test_list_with_criteria(client, auth_headers):
    btc = _create(client, auth_headers, symbol="BTC/USD", api_used="Binance")
    eth = _create(client, auth_headers, symbol="ETH/USD", position="Short", api_used="Kraken")
    sol = _create(client, auth_headers, symbol="SOL/USD", api_used="Coinbase Pro")
    client.post(f"/api/trades/{sol['id']}/stop", headers=auth_headers)

    for trade_id, pnl in ((btc["id"], 12.0), (eth["id"], -3.0)):
        client.patch(f"/api/trades/{trade_id}", json={"profit_loss": pnl}, headers=auth_headers)

    listed = client.get("/api/trades", headers=auth_headers).json()
    # active first, newest first
    assert [t["symbol"] for t in listed] == ["ETH/USD", "BTC/USD", "SOL/USD"]

    r = client.get("/api/trades", params={"active_only": True, "sort": "profitAsc"}, headers=auth_headers)
    assert [t["symbol"] for t in r.json()] == ["ETH/USD", "BTC/USD"]

    r = client.get("/api/trades", params={"position": "short"}, headers=auth_headers)
    assert [t["symbol"] for t in r.json()] == ["ETH/USD"]

    r = client.get("/api/trades", params={"search": "kraken"}, headers=auth_headers)
    assert [t["symbol"] for t in r.json()] == ["ETH/USD"]

    r = client.get("/api/trades", params={"closed_only": True}, headers=auth_headers)
    assert [t["symbol"] for t in r.json()] == ["SOL/USD"]


def test_activity_listing_filters_then_limits(client, auth_headers):
    for symbol in ("BTC/USD", "ETH/USD", "XRP/USD"):
        _create(client, auth_headers, symbol=symbol)

    r = client.get("/api/trade-activities", params={"limit": 2}, headers=auth_headers)
    assert [a["symbol"] for a in r.json()] == ["XRP/USD", "ETH/USD"]

    r = client.get("/api/trade-activities", params={"search": "btc", "limit": 1}, headers=auth_headers)
    assert [a["symbol"] for a in r.json()] == ["BTC/USD"]

    r = client.get("/api/trade-activities", params={"sort": "oldest", "type": "started"}, headers=auth_headers)
    assert [a["symbol"] for a in r.json()] == ["BTC/USD", "ETH/USD", "XRP/USD"]

    today = datetime.now(timezone.utc).date().isoformat()
    r = client.get("/api/trade-activities", params={"from_date": today, "to_date": today}, headers=auth_headers)
    assert len(r.json()) == 3

    r = client.get("/api/trade-activities", params={"to_date": "2000-01-01"}, headers=auth_headers)
    assert r.json() == []


def test_trade_rows_keep_owner(client, auth_headers, db_session):
    trade = _create(client, auth_headers)
    client.patch(f"/api/trades/{trade['id']}", json={"quantity": 2.0}, headers=auth_headers)
    row = db_session.query(Trade).filter(Trade.id == trade["id"]).one()
    assert row.user_id == trade["user_id"]
    assert row.quantity == 2.0

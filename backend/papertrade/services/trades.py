"""
Trade lifecycle: create, edit and stop simulated trades.

Every mutation appends exactly one TradeActivity in the same transaction,
so the journal always mirrors the trade history. Ownership is checked here;
callers map LookupError → 404, PermissionError → 403 and ValueError → 400.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from papertrade.models.activity import TradeActivity
from papertrade.models.trade import Trade
from papertrade.models.user import User
from papertrade.schemas.trade import TradeCreate, TradeUpdate
from papertrade.services.metrics import as_utc

logger = logging.getLogger(__name__)

TRADE_STARTED = "Trade Started"
TRADE_MODIFIED = "Trade Modified"
TRADE_STOPPED = "Trade Stopped"


def _next_activity_time(db: Session, user_id: int) -> datetime:
    """Current UTC time, nudged past the user's latest activity if the clock hasn't moved."""
    now = datetime.now(timezone.utc)
    latest = as_utc(
        db.query(func.max(TradeActivity.created_at))
        .filter(TradeActivity.user_id == user_id)
        .scalar()
    )
    if latest is not None and now <= latest:
        return latest + timedelta(microseconds=1)
    return now


def record_activity(
    db: Session,
    user_id: int,
    activity_type: str,
    symbol: str,
    status: str,
    trade_id: Optional[int] = None,
    price: Optional[float] = None,
    amount: Optional[float] = None,
    metadata: Optional[dict] = None,
) -> TradeActivity:
    """Stage an activity row; the caller commits."""
    activity = TradeActivity(
        user_id=user_id,
        trade_id=trade_id,
        type=activity_type,
        symbol=symbol,
        price=price,
        amount=amount,
        status=status,
        metadata_=metadata or {},
        created_at=_next_activity_time(db, user_id),
    )
    db.add(activity)
    db.flush()
    return activity


def _get_owned_trade(db: Session, user: User, trade_id: int, action: str) -> Trade:
    trade = db.query(Trade).filter(Trade.id == trade_id).first()
    if trade is None:
        raise LookupError("Trade not found")
    if trade.user_id != user.id:
        logger.warning("User %s tried to %s trade %d owned by user %s", user.id, action, trade_id, trade.user_id)
        raise PermissionError(f"Not authorized to {action} this trade")
    return trade


def list_trades(db: Session, user: User) -> list[Trade]:
    """Active trades first, then newest first."""
    return (
        db.query(Trade)
        .filter(Trade.user_id == user.id)
        .order_by(Trade.is_active.desc(), Trade.created_at.desc(), Trade.id.desc())
        .all()
    )


def list_activities(db: Session, user: User, limit: Optional[int] = None) -> list[TradeActivity]:
    query = (
        db.query(TradeActivity)
        .filter(TradeActivity.user_id == user.id)
        .order_by(TradeActivity.created_at.desc(), TradeActivity.id.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def create_trade(db: Session, user: User, payload: TradeCreate) -> Trade:
    data = payload.model_dump()
    if data["current_price"] is None:
        data["current_price"] = data["entry_price"]

    now = datetime.now(timezone.utc)
    trade = Trade(
        user_id=user.id,
        is_active=True,
        created_at=now,
        updated_at=now,
        closed_at=None,
        **data,
    )
    try:
        db.add(trade)
        db.flush()
        record_activity(
            db, user.id, TRADE_STARTED, trade.symbol, "Completed",
            trade_id=trade.id, price=trade.entry_price, amount=trade.quantity,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(trade)
    logger.info("User %s opened %s %s trade %d", user.id, trade.position, trade.symbol, trade.id)
    return trade


def update_trade(db: Session, user: User, trade_id: int, payload: TradeUpdate) -> Trade:
    trade = _get_owned_trade(db, user, trade_id, "update")

    # the journal records the price and size the trade had before the edit
    price = trade.current_price or trade.entry_price
    amount = trade.quantity

    changes = payload.model_dump(exclude_none=True)
    try:
        for key, val in changes.items():
            setattr(trade, key, val)
        trade.updated_at = datetime.now(timezone.utc)
        record_activity(
            db, user.id, TRADE_MODIFIED, trade.symbol, "Updated",
            trade_id=trade.id, price=price, amount=amount,
            metadata={"fields": sorted(changes)},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(trade)
    logger.info("User %s modified trade %d (%s)", user.id, trade.id, ", ".join(sorted(changes)) or "no changes")
    return trade


def stop_trade(db: Session, user: User, trade_id: int) -> Trade:
    trade = _get_owned_trade(db, user, trade_id, "stop")
    if not trade.is_active:
        raise ValueError("Trade is already closed")

    now = datetime.now(timezone.utc)
    try:
        trade.is_active = False
        trade.closed_at = now
        trade.updated_at = now
        record_activity(
            db, user.id, TRADE_STOPPED, trade.symbol, "Closed",
            trade_id=trade.id, price=trade.current_price or trade.entry_price, amount=trade.quantity,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(trade)
    logger.info("User %s stopped trade %d", user.id, trade.id)
    return trade

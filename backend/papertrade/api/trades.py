from dataclasses import asdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from papertrade.core.auth import get_current_user
from papertrade.core.database import get_db
from papertrade.models.trade import Trade
from papertrade.models.user import User
from papertrade.schemas.trade import (
    TradeCreate,
    TradeUpdate,
    TradeResponse,
    TradeView,
    ProfitLossDisplayResponse,
)
from papertrade.services import trades as trade_service
from papertrade.services.filters import TradeCriteria, filter_and_sort_trades
from papertrade.services.metrics import compute_trade_progress, format_profit_loss

router = APIRouter(prefix="/api/trades", tags=["trades"])


def to_trade_view(trade: Trade) -> TradeView:
    pnl = format_profit_loss(trade.profit_loss, trade.profit_loss_percentage)
    return TradeView(
        **TradeResponse.model_validate(trade).model_dump(),
        progress=compute_trade_progress(trade),
        profit_loss_display=ProfitLossDisplayResponse(**asdict(pnl)),
    )


@router.get("", response_model=list[TradeView])
def list_trades(
    active_only: bool = False,
    closed_only: bool = False,
    position: Optional[str] = None,
    search: str = "",
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    sort: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the caller's trades.

    Without criteria the store order is kept (active first, newest first).
    """
    trades = trade_service.list_trades(db, current_user)
    criteria = TradeCriteria(
        active_only=active_only,
        closed_only=closed_only,
        position=position,
        search=search,
        from_date=from_date,
        to_date=to_date,
        sort=sort or "",
    )
    return [to_trade_view(t) for t in filter_and_sort_trades(trades, criteria)]


@router.post("", response_model=TradeView, status_code=status.HTTP_201_CREATED)
def create_trade(
    payload: TradeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    trade = trade_service.create_trade(db, current_user, payload)
    return to_trade_view(trade)


@router.patch("/{trade_id}", response_model=TradeView)
def update_trade(
    trade_id: int,
    payload: TradeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        trade = trade_service.update_trade(db, current_user, trade_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return to_trade_view(trade)


@router.post("/{trade_id}/stop", response_model=TradeView)
def stop_trade(
    trade_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        trade = trade_service.stop_trade(db, current_user, trade_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return to_trade_view(trade)

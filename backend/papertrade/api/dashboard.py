"""
Dashboard API — portfolio summary and trading performance, computed from
the caller's full trade snapshot.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from papertrade.api.trades import to_trade_view
from papertrade.core.auth import get_current_user
from papertrade.core.config import settings
from papertrade.core.database import get_db
from papertrade.models.user import User
from papertrade.schemas.activity import ActivityResponse
from papertrade.schemas.stats import (
    ActiveTradesPage,
    DashboardSummary,
    PortfolioStatsResponse,
    TradingPerformanceResponse,
)
from papertrade.services import trades as trade_service
from papertrade.services.filters import TradeCriteria, filter_and_sort_trades, paginate
from papertrade.services.metrics import compute_portfolio_stats, compute_trading_performance

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(
    page: int = Query(default=1, ge=1),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Stat cards, one page of active trade cards and the recent activity feed."""
    trades = trade_service.list_trades(db, user)
    stats = compute_portfolio_stats(trades)

    active = filter_and_sort_trades(trades, TradeCriteria(active_only=True))
    trade_page = paginate(active, page, settings.TRADES_PER_PAGE)

    activities = trade_service.list_activities(db, user, limit=settings.ACTIVITY_LIMIT_DEFAULT)

    return DashboardSummary(
        stats=PortfolioStatsResponse(**asdict(stats)),
        active_trades=ActiveTradesPage(
            items=[to_trade_view(t) for t in trade_page.items],
            page=trade_page.page,
            page_count=trade_page.page_count,
            total=trade_page.total,
        ),
        recent_activities=[ActivityResponse.model_validate(a) for a in activities],
    )


@router.get("/performance", response_model=TradingPerformanceResponse)
def trading_performance(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Closed-trade success rate and average return for the profile page."""
    trades = trade_service.list_trades(db, user)
    return TradingPerformanceResponse(**asdict(compute_trading_performance(trades)))

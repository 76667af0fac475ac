"""Response models for the dashboard and profile statistics."""

from typing import Optional
from pydantic import BaseModel

from papertrade.schemas.activity import ActivityResponse
from papertrade.schemas.trade import TradeView


class PortfolioStatsResponse(BaseModel):
    balance: float
    balance_display: str
    active_trades: int
    total_profit_loss: float
    profit_loss_display: str
    profit_percentage: float
    profit_percentage_display: str
    api_status: str


class TradingPerformanceResponse(BaseModel):
    total_trades: int
    active_trades: int
    closed_trades: int
    winning_trades: int
    losing_trades: int
    success_rate: float
    avg_profit_percent: float
    member_since: Optional[str] = None


class ActiveTradesPage(BaseModel):
    items: list[TradeView]
    page: int
    page_count: int
    total: int


class DashboardSummary(BaseModel):
    stats: PortfolioStatsResponse
    active_trades: ActiveTradesPage
    recent_activities: list[ActivityResponse]

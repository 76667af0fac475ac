"""
Derived portfolio statistics for the dashboard.

Every function here reads a snapshot of trade records (ORM rows or any
object exposing the same attributes) and returns display values without
touching the records. Missing or malformed numbers degrade to zero, or to
the neutral progress value, instead of raising.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

NEUTRAL_PROGRESS = 50.0

# A venue counts as "Connected" if any trade changed within this window
API_STATUS_WINDOW = timedelta(hours=24)

PROFIT_LOSS_CLASSES = {
    "positive": "text-green-600 dark:text-green-400",
    "negative": "text-red-600 dark:text-red-400",
    "neutral": "text-slate-500",
}


@dataclass(frozen=True)
class PortfolioStats:
    balance: float
    balance_display: str
    active_trades: int
    total_profit_loss: float
    profit_loss_display: str
    profit_percentage: float
    profit_percentage_display: str
    api_status: str


@dataclass(frozen=True)
class ProfitLossDisplay:
    text: str
    css_class: str
    tone: str  # positive | negative | neutral


@dataclass(frozen=True)
class TradingPerformance:
    total_trades: int
    active_trades: int
    closed_trades: int
    winning_trades: int
    losing_trades: int
    success_rate: float
    avg_profit_percent: float
    member_since: Optional[str] = None


# ─── Helpers ───

def to_number(value) -> Optional[float]:
    """Coerce a stored numeric (float, int, Decimal or numeric string) to float.

    Returns None for missing, malformed, NaN or infinite input.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (as SQLite returns them) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_currency(amount: float) -> str:
    """USD display: ``$1,234.56`` / ``-$1,234.56``."""
    # adding 0.0 folds a rounded -0.0 into 0.0
    amount = round(amount, 2) + 0.0
    if amount < 0:
        return f"-${abs(amount):,.2f}"
    return f"${amount:,.2f}"


def format_percentage_change(percentage: float) -> str:
    arrow = "↑" if percentage > 0 else "↓"
    return f"{arrow} {abs(percentage):.2f}%"


def _entry_value(trade) -> float:
    entry = to_number(trade.entry_price)
    quantity = to_number(trade.quantity)
    if entry is None or quantity is None:
        return 0.0
    return entry * quantity


def _unrealized_pnl(trade) -> float:
    current = to_number(trade.current_price)
    if current is None:
        return 0.0
    quantity = to_number(trade.quantity)
    entry = to_number(trade.entry_price)
    if quantity is None or entry is None:
        return 0.0
    return current * quantity - entry * quantity


# ─── Portfolio ───

def portfolio_balance(trades: Iterable) -> float:
    """Sum of entry price × quantity over every trade, open or closed."""
    return sum((_entry_value(t) for t in trades), 0.0)


def active_trade_count(trades: Iterable) -> int:
    return sum(1 for t in trades if t.is_active)


def aggregate_profit_loss(trades: Iterable) -> tuple[float, float]:
    """Unrealized P/L over active trades and its percentage of the entry value.

    A trade without a current price contributes no change. The percentage is
    0 when the active entry value is 0.
    """
    active = [t for t in trades if t.is_active]
    total = sum((_unrealized_pnl(t) for t in active), 0.0)
    invested = sum((_entry_value(t) for t in active), 0.0)
    percentage = (total / invested) * 100 if invested > 0 else 0.0
    return total, percentage


def api_status(trades: Iterable, now: Optional[datetime] = None) -> str:
    now = as_utc(now) or datetime.now(timezone.utc)
    stamps = [as_utc(t.updated_at) for t in trades if t.updated_at is not None]
    if stamps and max(stamps) > now - API_STATUS_WINDOW:
        return "Connected"
    return "Disconnected"


def compute_portfolio_stats(trades: Iterable, now: Optional[datetime] = None) -> PortfolioStats:
    trades = list(trades)
    balance = portfolio_balance(trades)
    total_pnl, percentage = aggregate_profit_loss(trades)
    return PortfolioStats(
        balance=balance,
        balance_display=format_currency(balance),
        active_trades=active_trade_count(trades),
        total_profit_loss=total_pnl,
        profit_loss_display=format_currency(total_pnl),
        profit_percentage=percentage,
        profit_percentage_display=format_percentage_change(percentage),
        api_status=api_status(trades, now),
    )


# ─── Per-trade ───

def progress_fraction(current_price, entry_price, take_profit, stop_loss) -> float:
    """Position of the current price inside the stop-loss → take-profit band, 0–100.

    Directionless: Long and Short trades are treated alike. Returns 50 when an
    input is missing or the band has zero width.
    """
    current = to_number(current_price)
    entry = to_number(entry_price)
    tp = to_number(take_profit)
    sl = to_number(stop_loss)
    # zero prices count as missing, same as an unset form field
    if not current or not entry or not tp or not sl:
        return NEUTRAL_PROGRESS

    total_range = abs(tp - sl)
    if total_range == 0:
        return NEUTRAL_PROGRESS
    distance_from_stop = abs(current - sl)
    return min(max(distance_from_stop / total_range * 100, 0.0), 100.0)


def compute_trade_progress(trade) -> float:
    return progress_fraction(
        trade.current_price,
        trade.entry_price,
        trade.take_profit,
        trade.stop_loss,
    )


def format_profit_loss(value, percentage=None) -> ProfitLossDisplay:
    """Signed dollar display of a stored P/L, optionally suffixed with its percentage.

    None, zero and unparsable values all render as the neutral ``$0.00``.
    """
    pnl = to_number(value)
    if not pnl:
        return ProfitLossDisplay("$0.00", PROFIT_LOSS_CLASSES["neutral"], "neutral")

    tone = "positive" if pnl > 0 else "negative"
    sign = "+" if pnl > 0 else "-"
    text = f"{sign}${abs(pnl):.2f}"
    pct = to_number(percentage)
    if pct is not None:
        text += f" ({pct:.2f}%)"
    return ProfitLossDisplay(text, PROFIT_LOSS_CLASSES[tone], tone)


# ─── Closed-trade performance ───

def success_rate(trades: Iterable) -> float:
    closed = [t for t in trades if not t.is_active]
    if not closed:
        return 0.0
    winners = sum(1 for t in closed if (to_number(t.profit_loss) or 0) > 0)
    return winners / len(closed) * 100


def average_return_percent(trades: Iterable, exclude_unpriced: bool = True) -> float:
    """Mean of (exit − entry) / entry × 100 over closed trades.

    The current price of a closed trade is its exit price. Trades missing
    either price are left out of the mean when ``exclude_unpriced`` is set,
    otherwise they count as a 0% return.
    """
    closed = [t for t in trades if not t.is_active]
    returns = []
    for t in closed:
        entry = to_number(t.entry_price)
        exit_price = to_number(t.current_price)
        if not entry or exit_price is None:
            continue
        returns.append((exit_price - entry) / entry * 100)

    count = len(returns) if exclude_unpriced else len(closed)
    if count == 0:
        return 0.0
    return sum(returns) / count


def compute_trading_performance(trades: Iterable, exclude_unpriced: bool = True) -> TradingPerformance:
    trades = list(trades)
    closed = [t for t in trades if not t.is_active]
    winning = sum(1 for t in closed if (to_number(t.profit_loss) or 0) > 0)

    created = [as_utc(t.created_at) for t in trades if t.created_at is not None]
    member_since = min(created).strftime("%B %Y") if created else None

    return TradingPerformance(
        total_trades=len(trades),
        active_trades=len(trades) - len(closed),
        closed_trades=len(closed),
        winning_trades=winning,
        losing_trades=len(closed) - winning,
        success_rate=success_rate(closed),
        avg_profit_percent=average_return_percent(closed, exclude_unpriced),
        member_since=member_since,
    )

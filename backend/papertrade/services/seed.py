"""Demo account with a few sample trades, created on an empty database."""

import logging

from sqlalchemy.orm import Session

from papertrade.core.auth import hash_password
from papertrade.models.trade import Trade
from papertrade.models.user import User
from papertrade.services.trades import record_activity, TRADE_STARTED, TRADE_STOPPED

logger = logging.getLogger(__name__)

DEMO_USERNAME = "demo"
DEMO_PASSWORD = "password"

SAMPLE_TRADES = [
    {
        "symbol": "BTC/USD",
        "entry_price": 36742.50,
        "current_price": 37842.18,
        "position": "Long",
        "quantity": 0.05,
        "take_profit": 38950.00,
        "stop_loss": 35250.00,
        "profit_loss": 1099.68,
        "profit_loss_percentage": 2.99,
        "api_used": "Binance",
    },
    {
        "symbol": "ETH/USD",
        "entry_price": 2435.20,
        "current_price": 2512.80,
        "position": "Long",
        "quantity": 0.75,
        "take_profit": 2650.00,
        "stop_loss": 2300.00,
        "profit_loss": 77.60,
        "profit_loss_percentage": 3.19,
        "api_used": "Coinbase Pro",
    },
    {
        "symbol": "XRP/USD",
        "entry_price": 0.6420,
        "current_price": 0.6280,
        "position": "Long",
        "quantity": 1000,
        "take_profit": 0.7100,
        "stop_loss": 0.6000,
        "profit_loss": -0.0140,
        "profit_loss_percentage": -2.18,
        "api_used": "Kraken",
    },
]


def seed_demo_data(db: Session) -> bool:
    """Create the demo user and sample trades. Returns False if the demo user already has trades."""
    user = db.query(User).filter(User.username == DEMO_USERNAME).first()
    if user is None:
        user = User(username=DEMO_USERNAME, password_hash=hash_password(DEMO_PASSWORD))
        db.add(user)
        db.flush()
        logger.info("Created demo user (id=%d)", user.id)

    if db.query(Trade).filter(Trade.user_id == user.id).count() > 0:
        logger.info("Demo user already has trades, skipping seed")
        return False

    try:
        trades = []
        for cfg in SAMPLE_TRADES:
            trade = Trade(user_id=user.id, is_active=True, **cfg)
            db.add(trade)
            trades.append(trade)
        db.flush()

        for trade in trades:
            record_activity(
                db, user.id, TRADE_STARTED, trade.symbol, "Completed",
                trade_id=trade.id, price=trade.entry_price, amount=trade.quantity,
            )
        eth = trades[1]
        record_activity(
            db, user.id, "Take Profit Modified", eth.symbol, "Updated",
            trade_id=eth.id, price=eth.entry_price, amount=eth.quantity,
        )
        # journal entry without a trade row behind it
        record_activity(db, user.id, TRADE_STOPPED, "SOL/USD", "Closed", price=82.30, amount=2.5)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Seeded %d sample trades for the demo user", len(SAMPLE_TRADES))
    return True

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, JSON
from sqlalchemy.orm import relationship

from papertrade.core.database import Base


class TradeActivity(Base):
    """Append-only audit entry written alongside every trade mutation."""

    __tablename__ = "trade_activities"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    trade_id = Column(Integer, ForeignKey("trades.id"))
    type = Column(String(50), nullable=False)      # Trade Started, Trade Modified, Trade Stopped
    symbol = Column(String(20), nullable=False)
    price = Column(Float)
    amount = Column(Float)
    status = Column(String(20))                    # Completed, Updated, Closed
    metadata_ = Column("metadata", JSON, default=dict)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    user = relationship("User", back_populates="activities")
    trade = relationship("Trade", back_populates="activities")

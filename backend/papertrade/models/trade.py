from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, Boolean, Text
from sqlalchemy.orm import relationship

from papertrade.core.database import Base


class Trade(Base):
    """A simulated position owned by one user.

    ``closed_at`` is set exactly when ``is_active`` flips to False; trades are
    never deleted.
    """

    __tablename__ = "trades"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    symbol = Column(String(20), nullable=False)
    position = Column(String(10), nullable=False)  # Long or Short
    quantity = Column(Float, nullable=False)
    entry_price = Column(Float, nullable=False)
    current_price = Column(Float)
    take_profit = Column(Float)
    stop_loss = Column(Float)
    profit_loss = Column(Float)
    profit_loss_percentage = Column(Float)
    api_used = Column(String(50))  # venue label, free text
    notes = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    closed_at = Column(DateTime)

    user = relationship("User", back_populates="trades")
    activities = relationship("TradeActivity", back_populates="trade")

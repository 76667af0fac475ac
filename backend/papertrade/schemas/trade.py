"""Pydantic schemas for simulated trades."""

from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, Field

POSITION_SIDES = Literal["Long", "Short"]


class TradeCreate(BaseModel):
    symbol: str = Field(min_length=1)
    position: POSITION_SIDES = "Long"
    quantity: float = Field(gt=0)
    entry_price: float = Field(gt=0)
    take_profit: float = Field(gt=0)
    stop_loss: float = Field(gt=0)
    current_price: Optional[float] = Field(default=None, gt=0)  # defaults to entry_price
    api_used: str = Field(default="Binance", min_length=1)
    notes: Optional[str] = None


class TradeUpdate(BaseModel):
    """Partial edit. Every field is optional. Symbol and ownership are fixed."""

    position: Optional[POSITION_SIDES] = None
    quantity: Optional[float] = Field(default=None, gt=0)
    entry_price: Optional[float] = Field(default=None, gt=0)
    take_profit: Optional[float] = Field(default=None, gt=0)
    stop_loss: Optional[float] = Field(default=None, gt=0)
    current_price: Optional[float] = Field(default=None, gt=0)
    profit_loss: Optional[float] = None
    profit_loss_percentage: Optional[float] = None
    api_used: Optional[str] = Field(default=None, min_length=1)
    notes: Optional[str] = None


class TradeResponse(BaseModel):
    id: int
    user_id: int
    symbol: str
    position: str
    quantity: float
    entry_price: float
    current_price: Optional[float] = None
    take_profit: Optional[float] = None
    stop_loss: Optional[float] = None
    profit_loss: Optional[float] = None
    profit_loss_percentage: Optional[float] = None
    api_used: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    closed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfitLossDisplayResponse(BaseModel):
    text: str
    css_class: str
    tone: str


class TradeView(TradeResponse):
    """Trade row enriched with the values a trade card renders."""

    progress: float
    profit_loss_display: ProfitLossDisplayResponse

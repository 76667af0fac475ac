from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field


class ActivityResponse(BaseModel):
    id: int
    user_id: int
    trade_id: Optional[int] = None
    type: str
    symbol: str
    price: Optional[float] = None
    amount: Optional[float] = None
    status: Optional[str] = None
    # ORM attribute is metadata_ (SQLAlchemy reserves "metadata")
    metadata: Optional[dict] = Field(default=None, validation_alias=AliasChoices("metadata_", "metadata"))
    created_at: datetime

    class Config:
        from_attributes = True

from typing import Optional, Literal
from pydantic import BaseModel, Field

THEMES = Literal["dark", "light"]

# Trading venues the settings page can hold API credentials for
VENUE_SERVICES = ("binance", "coinbase", "kraken", "bitfinex", "icicidirect")


class SettingsUpdate(BaseModel):
    theme: Optional[THEMES] = None


class SettingsResponse(BaseModel):
    theme: str = "dark"
    configured_venues: list[str] = []


# ─── Venue API configuration ───

class VenueApiConfig(BaseModel):
    """Credentials for one venue (stored encrypted)."""
    api_key: str = Field(min_length=1)
    api_secret: str = Field(min_length=1)
    is_testnet: bool = True
    notes: str = ""


class VenueConfigMasked(BaseModel):
    """Masked venue info returned to the frontend, never the raw secret."""
    service: str
    configured: bool = False
    is_testnet: bool = True
    notes: str = ""
    api_key_hint: str = ""  # last 4 characters of the key


class VenueConfigsResponse(BaseModel):
    venues: list[VenueConfigMasked] = []

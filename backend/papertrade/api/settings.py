import json
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from papertrade.core.auth import get_current_user
from papertrade.core.database import get_db
from papertrade.core.encryption import encrypt_value, decrypt_value
from papertrade.models.settings import UserSettings
from papertrade.models.user import User
from papertrade.schemas.settings import (
    VENUE_SERVICES,
    SettingsUpdate,
    SettingsResponse,
    VenueApiConfig,
    VenueConfigMasked,
    VenueConfigsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])


def _get_or_create_settings(db: Session, user: User) -> UserSettings:
    """Get existing settings or create defaults for user."""
    s = db.query(UserSettings).filter(UserSettings.user_id == user.id).first()
    if not s:
        s = UserSettings(user_id=user.id)
        db.add(s)
        db.commit()
        db.refresh(s)
    return s


def _load_venue_configs(s: UserSettings) -> dict:
    """Decrypt and parse the venue_api_configs JSON blob."""
    if not s.venue_api_configs:
        return {}
    raw = decrypt_value(s.venue_api_configs)
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Discarding unreadable venue config blob for user %s", s.user_id)
        return {}


def _save_venue_configs(s: UserSettings, configs: dict, db: Session):
    """Encrypt and persist the venue configuration blob."""
    s.venue_api_configs = encrypt_value(json.dumps(configs))
    db.commit()


def _settings_to_response(s: UserSettings) -> SettingsResponse:
    return SettingsResponse(
        theme=s.theme or "dark",
        configured_venues=sorted(_load_venue_configs(s)),
    )


def _check_service(service: str) -> str:
    service = service.lower()
    if service not in VENUE_SERVICES:
        raise HTTPException(status_code=404, detail=f"Unknown trading API service '{service}'")
    return service


# ─── GET settings ───
@router.get("", response_model=SettingsResponse)
def get_settings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    s = _get_or_create_settings(db, current_user)
    return _settings_to_response(s)


# ─── PUT partial update ───
@router.put("", response_model=SettingsResponse)
def update_settings(
    payload: SettingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    s = _get_or_create_settings(db, current_user)
    for key, val in payload.model_dump(exclude_none=True).items():
        setattr(s, key, val)
    db.commit()
    db.refresh(s)
    return _settings_to_response(s)


# ─── Trading venue API configuration ───

@router.get("/api", response_model=VenueConfigsResponse)
def get_venue_configs(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return masked venue info (never sends raw keys)."""
    s = _get_or_create_settings(db, current_user)
    configs = _load_venue_configs(s)

    venues = []
    for service in VENUE_SERVICES:
        entry = configs.get(service)
        if not entry:
            venues.append(VenueConfigMasked(service=service))
            continue
        venues.append(VenueConfigMasked(
            service=service,
            configured=True,
            is_testnet=entry.get("is_testnet", True),
            notes=entry.get("notes", ""),
            api_key_hint=entry.get("api_key", "")[-4:],
        ))
    return VenueConfigsResponse(venues=venues)


@router.post("/api/{service}")
def save_venue_config(
    service: str,
    payload: VenueApiConfig,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Store encrypted credentials for one venue."""
    service = _check_service(service)
    s = _get_or_create_settings(db, current_user)
    configs = _load_venue_configs(s)
    configs[service] = payload.model_dump()
    _save_venue_configs(s, configs, db)
    logger.info("User %s saved %s API configuration", current_user.id, service)
    return {"status": "ok", "service": service}


@router.delete("/api/{service}")
def delete_venue_config(
    service: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Remove stored credentials for a venue."""
    service = _check_service(service)
    s = _get_or_create_settings(db, current_user)
    configs = _load_venue_configs(s)
    configs.pop(service, None)
    _save_venue_configs(s, configs, db)
    return {"status": "ok", "service": service}

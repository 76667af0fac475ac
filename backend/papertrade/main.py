import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from papertrade.core.config import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
# Suppress noisy third-party loggers
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

from papertrade.core.database import engine, Base, SessionLocal
from papertrade.api import auth, health
from papertrade.api import trades as trades_api
from papertrade.api import activities as activities_api
from papertrade.api import dashboard as dashboard_api
from papertrade.api import settings as settings_api
from papertrade.services.seed import seed_demo_data

# Import all models so Base.metadata knows about them
from papertrade.models import user, trade, activity, settings as settings_model  # noqa: F401

logger = logging.getLogger(__name__)

# Ensure the SQLite data directory exists
if settings.DATABASE_URL.startswith("sqlite:///"):
    Path(settings.DATABASE_URL.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)

# Create all tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
)

_cors_origins = [settings.FRONTEND_URL]
if settings.DEBUG:
    _cors_origins += ["http://localhost:5173", "http://127.0.0.1:5173"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(auth.user_router)
app.include_router(trades_api.router)
app.include_router(activities_api.router)
app.include_router(dashboard_api.router)
app.include_router(settings_api.router)


def _seed_demo_user():
    """Create the demo account with sample trades on a fresh database."""
    db = SessionLocal()
    try:
        seed_demo_data(db)
    except Exception as e:
        logger.error("Failed to seed demo data: %s", e)
    finally:
        db.close()


@app.on_event("startup")
def startup_event():
    if settings.SEED_DEMO_DATA:
        _seed_demo_user()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

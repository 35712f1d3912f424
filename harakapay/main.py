# HarakaPay parent gateway entrypoint.

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from harakapay.api import app_config
from harakapay.api import auth
from harakapay.api import notifications
from harakapay.api import parent
from harakapay.api import payments
from harakapay.api import preferences
from harakapay.api.errors import register_exception_handlers
from harakapay.core.logging import configure_logging
from harakapay.core.settings import get_settings
from harakapay.db.base import Base
from harakapay.db.session import engine

logger = logging.getLogger(__name__)

app = FastAPI()
settings = get_settings()

origins = [
    "http://localhost:8081",
    "http://127.0.0.1:8081",
    "http://localhost:19006",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(notifications.router)
app.include_router(parent.router)
app.include_router(payments.router)
app.include_router(preferences.router)
app.include_router(app_config.router)

register_exception_handlers(app)


@app.get("/")
def read_root():
    return {"app": "HarakaPay parent gateway", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def prepare_gateway():
    configure_logging(settings.log_level)
    missing = settings.missing_required()
    if missing:
        logger.error("Missing required environment variables: %s", ", ".join(missing))
    Base.metadata.create_all(bind=engine)

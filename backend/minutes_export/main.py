from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import conversion, download, generation, health
from .core.config import get_settings
from .core.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("minutes_export.backend")

app = FastAPI(title=settings.app_name)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api")
app.include_router(download.router, prefix="/api")
app.include_router(conversion.router, prefix="/api")
app.include_router(generation.router, prefix="/api")

logger.info("%s started in %s mode", settings.app_name, settings.environment)


__all__ = ["app"]

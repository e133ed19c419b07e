"""FastAPI application entry point."""

from fastapi import FastAPI

from app import __version__
from app.api import edit, health
from app.config import settings

app = FastAPI(
    title="Object Updater",
    description="Policy-driven structural merges for configuration documents",
    version=__version__,
    debug=settings.debug,
)

app.include_router(health.router, tags=["health"])
app.include_router(edit.router, tags=["edit"])

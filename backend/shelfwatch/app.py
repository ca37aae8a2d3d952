"""FastAPI application setup for shelfwatch."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shelfwatch.api.dependencies import (
    bound_locations,
    get_app_settings,
    get_source,
    shutdown_dependencies,
)
from shelfwatch.api.routes_admin import router as admin_router
from shelfwatch.api.routes_devices import router as devices_router
from shelfwatch.api.routes_inventory import router as inventory_router
from shelfwatch.core.logging import configure_logging

configure_logging()

app = FastAPI(
    title="shelfwatch",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(inventory_router, prefix="", tags=["inventory"])
app.include_router(devices_router, prefix="", tags=["devices"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.on_event("startup")
async def startup() -> None:
    """Apply logging settings and open the snapshot source."""
    settings = get_app_settings()
    configure_logging(settings.log_level, use_json=settings.log_json)
    get_source()


@app.on_event("shutdown")
async def shutdown() -> None:
    shutdown_dependencies()


@app.get("/health", tags=["admin"])
def health() -> dict[str, object]:
    """Liveness check plus the locations that currently hold a store."""
    return {
        "ok": True,
        "source": get_app_settings().source,
        "locations": bound_locations(),
    }

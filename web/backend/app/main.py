"""FastAPI application for the GuardianNet web portal.

Provides REST API endpoints wrapping the guardnet package for:
- Scanning text through the decision pipeline
- Block-list management and schedules
- Activity logs, statistics and the uninstall lock
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from guardnet import __version__
from web.backend.app.routers import activity, scan, sites

app = FastAPI(
    title="GuardianNet API",
    description=(
        "REST API for GuardianNet. Provides endpoints for content scanning, "
        "block-list management and activity statistics."
    ),
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(scan.router)
app.include_router(sites.router)
app.include_router(activity.router)


# ---------------------------------------------------------------------------
# Root and health-check endpoints
# ---------------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "GuardianNet API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}

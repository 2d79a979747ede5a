"""FastAPI application entry point."""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import auth, dashboards, drafts, versions, widgets
from app.core import config
from app.core.logging import setup_logging
from app.persistence.db import init_db

setup_logging(debug=config.DEBUG, log_dir=config.LOG_DIR)

# ------------------------------------------------------------------
# App creation
# ------------------------------------------------------------------
app = FastAPI(
    title="Dashboard Studio API",
    description="Draft, publish and serve widget dashboards",
    version="1.0.0",
)

# CORS: allow everything for local dev (restrict for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------------
# Startup: initialise DB schema
# ------------------------------------------------------------------
@app.on_event("startup")
def on_startup():
    init_db()


# ------------------------------------------------------------------
# Routers
# ------------------------------------------------------------------
app.include_router(auth.router)
app.include_router(widgets.router)
app.include_router(dashboards.router)
app.include_router(drafts.router)
app.include_router(versions.router)

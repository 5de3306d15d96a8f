"""
Workbridge API - Main Application Entry Point

This module initializes the FastAPI application with:
- Logging and database schema initialization
- Domain error to HTTP status mapping
- Prometheus metrics middleware
- CORS middleware for frontend communication
- API router registration

Architecture:
    FastAPI App
    ├── Lifespan Management (startup)
    ├── Exception Handlers (WorkbridgeError -> status code)
    ├── Prometheus Middleware + /metrics
    ├── CORS Middleware (localhost:3000)
    └── API Router
        ├── /jobs - Job postings, matches and applications
        ├── /workers - Skill passports and recommendations
        ├── /selection - Bulk selection over ranked candidates
        └── /stats - Dashboard statistics
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from workbridge.config import get_settings
from workbridge.database import init_db
from workbridge.api import api_router
from workbridge.errors import WorkbridgeError
from workbridge.middleware import record_domain_error, setup_metrics

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle events.

    Startup:
        1. Configure logging from settings
        2. Initialize database tables

    Yields:
        Control to the application during its runtime
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    await init_db()
    logger.info("Workbridge API started")
    yield


app = FastAPI(
    title="Workbridge API",
    description="Job board matching engine for skilled workers",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(WorkbridgeError)
async def workbridge_error_handler(request: Request, exc: WorkbridgeError):
    record_domain_error(exc)
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


setup_metrics(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}

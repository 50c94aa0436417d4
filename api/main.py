"""
FastAPI application initialization
"""

from fastapi import FastAPI
from api.routes import health, data, sync, export
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.database import async_session_maker
from core.logging import setup_logging
from ingestion.extractors.scrape_api_extractor import ScrapeAPIExtractor
from ingestion.runner import SyncOrchestrator
from ingestion.scheduler import SyncScheduler
import logging

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Painel Holmes API",
    description="Contract pendency sync and dashboard backend",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(data.router)
app.include_router(sync.router)
app.include_router(export.router)


@app.on_event("startup")
async def startup_event():
    """Build the process-wide services and start the scheduler"""
    setup_logging()
    logger.info("Starting Painel Holmes API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")

    app.state.session_factory = async_session_maker
    app.state.orchestrator = SyncOrchestrator(
        session_factory=async_session_maker,
        extractor=ScrapeAPIExtractor()
    )
    app.state.scheduler = None

    if settings.SYNC_SCHEDULER_ENABLED:
        app.state.scheduler = SyncScheduler(app.state.orchestrator)
        app.state.scheduler.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down Painel Holmes API")
    if getattr(app.state, "scheduler", None):
        await app.state.scheduler.stop()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Painel Holmes API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "data": "/api/data",
            "sync": "/api/sync",
            "cron": "/api/cron",
            "export": "/api/export"
        }
    }

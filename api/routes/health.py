"""
Health check endpoint with database and sync status
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from api.dependencies import get_db, get_orchestrator
from ingestion.loaders.sync_log_tracker import SyncLogTracker
from ingestion.runner import SyncOrchestrator
from models.base import SyncStatus
from schemas.api import HealthCheckResponse
from schemas.sync import SyncLogResponse
from datetime import datetime
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    orchestrator: SyncOrchestrator = Depends(get_orchestrator)
):
    """
    Health check endpoint.

    Returns:
    - Database connectivity status
    - Whether a sync is running and the latest sync log

    healthy: database up and the last sync did not fail
    degraded: database up, last sync failed
    unhealthy: database unreachable
    """
    db_connected = False
    last_sync = None

    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")

    if db_connected:
        try:
            last_sync = await SyncLogTracker.latest(db)
        except Exception as e:
            logger.error(f"Failed to fetch last sync log: {str(e)}")

    if not db_connected:
        status = "unhealthy"
    elif last_sync is not None and last_sync.status == SyncStatus.ERROR:
        status = "degraded"
    else:
        status = "healthy"

    return HealthCheckResponse(
        status=status,
        timestamp=datetime.utcnow(),
        database_connected=db_connected,
        sync_running=orchestrator.is_running(),
        last_sync=SyncLogResponse.from_orm(last_sync) if last_sync else None
    )

"""
Manual and cron-triggered sync endpoints
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from api.dependencies import get_orchestrator
from core.config import settings
from ingestion.runner import SyncOrchestrator, ALREADY_RUNNING_MESSAGE
from schemas.sync import (
    CronRequest,
    CronResponse,
    SyncLogResponse,
    SyncResult,
    SyncStatusResponse,
)
from schemas.api import ErrorResponse
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Sync"])


@router.post(
    "/sync",
    response_model=SyncResult,
    responses={409: {"model": ErrorResponse}, 500: {"model": SyncResult}}
)
async def trigger_sync(orchestrator: SyncOrchestrator = Depends(get_orchestrator)):
    """
    Run a full sync and wait for it.

    Returns 409 when a sync is already in progress; 500 when the run
    failed (see message).
    """
    if orchestrator.is_running():
        return JSONResponse(
            status_code=409,
            content={"error": ALREADY_RUNNING_MESSAGE}
        )

    result = await orchestrator.run_sync()
    return JSONResponse(status_code=200 if result.success else 500, content=result.dict())


@router.get("/sync", response_model=SyncStatusResponse)
async def sync_status(orchestrator: SyncOrchestrator = Depends(get_orchestrator)):
    """Whether a sync is running, plus the latest sync log"""
    last_sync = await orchestrator.get_last_sync_log()
    return SyncStatusResponse(
        is_running=orchestrator.is_running(),
        last_sync=SyncLogResponse.from_orm(last_sync) if last_sync else None
    )


@router.post("/cron", response_model=CronResponse, responses={401: {"model": ErrorResponse}})
async def cron_sync(
    body: CronRequest,
    orchestrator: SyncOrchestrator = Depends(get_orchestrator)
):
    """
    Entry point for an external cron.

    When CRON_SECRET is configured the body must carry the same secret.
    A run already in progress is reported as skipped, not as an error.
    """
    if settings.CRON_SECRET and body.secret != settings.CRON_SECRET:
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    if orchestrator.is_running():
        return CronResponse(message=ALREADY_RUNNING_MESSAGE, skipped=True)

    result = await orchestrator.run_sync()
    logger.info(f"Cron sync executed: success={result.success}, records={result.records_processed}")

    return CronResponse(
        success=result.success,
        message=result.message,
        records_processed=result.records_processed
    )

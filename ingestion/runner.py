# ============================================================================
# File: ingestion/runner.py
# Description: Single-flight sync orchestrator for the scraping API
# ============================================================================
"""
Sync Orchestrator - fetch, validate and persist a full dataset refresh.

This module provides:
- Single-flight execution (a second call while running returns at once)
- One SyncLog row per attempt, closed as success or error
- Partial failure support (a broken record or contract is skipped)
- Strictly sequential contract and record processing
"""

from typing import Optional
from sqlalchemy.ext.asyncio import async_sessionmaker
import logging

from ingestion.extractors.scrape_api_extractor import ScrapeAPIExtractor
from ingestion.loaders.registro_loader import RegistroLoader
from ingestion.loaders.sync_log_tracker import SyncLogTracker
from models.base import SyncStatus
from models.sync_log import SyncLog
from schemas.sync import SyncResult
from core.exceptions import (
    SyncError,
    ContractLoadError,
    UpstreamRejectedError,
)

logger = logging.getLogger(__name__)

ALREADY_RUNNING_MESSAGE = "Sync already in progress"
SUCCESS_MESSAGE = "Sync completed successfully"


class SyncOrchestrator:
    """
    Sync orchestrator.

    State machine: Idle → Running → {Success, Error} → Idle.

    The running flag is process-local. Two processes sharing a database
    can still sync concurrently.

    One instance is created by the process entry point and shared by every
    caller (HTTP routes, scheduler, scripts).
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        extractor: Optional[ScrapeAPIExtractor] = None
    ):
        self.session_factory = session_factory
        self.extractor = extractor or ScrapeAPIExtractor()
        self._running = False

    def is_running(self) -> bool:
        return self._running

    async def get_last_sync_log(self) -> Optional[SyncLog]:
        """Most recent SyncLog row, or None when no sync ever ran"""
        async with self.session_factory() as session:
            return await SyncLogTracker.latest(session)

    async def run_sync(self) -> SyncResult:
        """
        Run one full sync.

        Steps:
        1. Create a RUNNING sync log
        2. Fetch and validate the upstream payload
        3. Replace each contract's registros, skipping failures
        4. Close the sync log as SUCCESS or ERROR

        Returns:
            SyncResult with success flag, message and number of records
            inserted. Never raises.
        """
        # Check and set with no await in between: atomic on the event loop
        if self._running:
            logger.warning("Sync requested while another sync is running; ignoring")
            return SyncResult(
                success=False,
                message=ALREADY_RUNNING_MESSAGE,
                records_processed=0
            )

        self._running = True
        try:
            async with self.session_factory() as session:
                return await self._run(session)
        finally:
            self._running = False

    async def _run(self, session) -> SyncResult:
        tracker = SyncLogTracker(session)
        records_processed = 0

        try:
            logger.info("Starting sync")
            await tracker.start()

            # --------------------------------------------------
            # PHASE 1: EXTRACTION + VALIDATION
            # --------------------------------------------------
            payload = await self.extractor.fetch_payload()

            if not payload.success:
                raise UpstreamRejectedError(
                    "API returned success=false",
                    context={"contracts": len(payload.data)}
                )

            # --------------------------------------------------
            # PHASE 2: LOAD, ONE CONTRACT AT A TIME
            # --------------------------------------------------
            logger.info(f"Processing {len(payload.data)} contracts")
            loader = RegistroLoader(session)
            failed_contracts = []

            for entry in payload.data:
                try:
                    records_processed += await loader.replace_contrato(entry)
                except ContractLoadError as e:
                    failed_contracts.append(entry.contrato)
                    logger.error(
                        f"Skipping contract {entry.contrato}: {e.message}",
                        extra={"error_context": e.to_dict()}
                    )

            # --------------------------------------------------
            # PHASE 3: FINALIZE
            # --------------------------------------------------
            await tracker.complete(
                status=SyncStatus.SUCCESS,
                message=SUCCESS_MESSAGE,
                records_processed=records_processed
            )

            logger.info(
                f"Sync completed: {records_processed} records processed"
                + (f", contracts skipped: {failed_contracts}" if failed_contracts else "")
            )

            return SyncResult(
                success=True,
                message=SUCCESS_MESSAGE,
                records_processed=records_processed
            )

        except SyncError as e:
            logger.error(
                f"Sync failed: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            await self._close_with_error(session, tracker, e.message)
            return SyncResult(success=False, message=e.message, records_processed=0)

        except Exception as e:
            logger.exception("Unexpected error during sync")
            message = str(e) or type(e).__name__
            await self._close_with_error(session, tracker, message)
            return SyncResult(success=False, message=message, records_processed=0)

    @staticmethod
    async def _close_with_error(session, tracker: SyncLogTracker, message: str) -> None:
        try:
            await session.rollback()
            await tracker.complete(
                status=SyncStatus.ERROR,
                message=f"Error: {message}"
            )
        except Exception:
            logger.exception("Failed to record sync error in sync log")

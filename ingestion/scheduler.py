import asyncio
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from core.config import settings
from ingestion.runner import SyncOrchestrator

logger = logging.getLogger(__name__)


class SyncScheduler:
    """Periodic sync trigger (every 4 hours, São Paulo time, by default)"""

    def __init__(
        self,
        orchestrator: SyncOrchestrator,
        cron: str = None,
        timezone: str = None
    ):
        self.orchestrator = orchestrator
        self.cron = cron or settings.SYNC_CRON
        self.timezone = timezone or settings.SYNC_TIMEZONE
        self.scheduler = AsyncIOScheduler(timezone=self.timezone)

    async def run_sync_job(self):
        """Job to run a scheduled sync"""
        if self.orchestrator.is_running():
            logger.info("Scheduler: sync already in progress, skipping this run")
            return None

        logger.info("Scheduler: starting scheduled sync")
        try:
            result = await self.orchestrator.run_sync()
        except Exception as e:
            logger.error(f"Scheduler: sync job crashed - {e}")
            return None

        if result.success:
            logger.info(f"Scheduler: sync finished, {result.records_processed} records processed")
        else:
            logger.error(f"Scheduler: sync failed - {result.message}")
        return result

    def start(self):
        """Start the scheduler"""
        self.scheduler.add_job(
            self.run_sync_job,
            trigger=CronTrigger.from_crontab(self.cron, timezone=self.timezone),
            id="sync_job",
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )
        self.scheduler.start()
        logger.info(f"Sync scheduler started ({self.cron}, {self.timezone})")

    async def stop(self):
        """Shut the scheduler down and wait until it reports stopped"""
        if not self.scheduler.running:
            return
        self.scheduler.shutdown(wait=False)
        # AsyncIOScheduler may complete shutdown on a later loop iteration
        while self.scheduler.running:
            await asyncio.sleep(0)
        logger.info("Sync scheduler stopped")

"""
SyncLog lifecycle: one row per sync attempt
"""

from typing import Optional
from datetime import datetime
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from models.sync_log import SyncLog
from models.base import SyncStatus
from core.exceptions import DatabaseError
import logging

logger = logging.getLogger(__name__)


class SyncLogTracker:
    """
    Create the RUNNING row at sync start and close it exactly once.

    Only the row id is kept between calls; the row is re-read before the
    final update because contract rollbacks expire loaded objects.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.sync_log_id: Optional[int] = None

    async def start(self, message: str = "Sync started") -> SyncLog:
        """Persist a RUNNING sync log"""
        sync_log = SyncLog(
            status=SyncStatus.RUNNING,
            message=message,
            records_processed=0,
            started_at=datetime.utcnow()
        )
        try:
            self.db.add(sync_log)
            await self.db.commit()
            await self.db.refresh(sync_log)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(
                "Failed to create sync log",
                context={"operation": "INSERT", "table_name": "sync_logs"},
                original_exception=e
            )

        self.sync_log_id = sync_log.id
        logger.info(f"Sync log {sync_log.id} created")
        return sync_log

    async def complete(
        self,
        status: SyncStatus,
        message: str,
        records_processed: int = 0
    ) -> Optional[SyncLog]:
        """Move the sync log to its terminal state"""
        if self.sync_log_id is None:
            return None

        sync_log = await self.db.get(SyncLog, self.sync_log_id)
        if sync_log is None:
            logger.warning(f"Sync log {self.sync_log_id} disappeared before completion")
            return None

        sync_log.status = status
        sync_log.message = message
        sync_log.records_processed = records_processed
        sync_log.ended_at = datetime.utcnow()
        await self.db.commit()
        return sync_log

    @staticmethod
    async def latest(db_session: AsyncSession) -> Optional[SyncLog]:
        """Most recent sync log, or None"""
        result = await db_session.execute(
            select(SyncLog)
            .order_by(SyncLog.started_at.desc(), SyncLog.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

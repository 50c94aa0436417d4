from sqlalchemy import Column, Integer, Text, Enum, DateTime, Index
from datetime import datetime
from models.base import Base, SyncStatus


class SyncLog(Base):
    """
    Audit row for one sync attempt.

    Lifecycle:
    - created in RUNNING when the run starts
    - updated exactly once to SUCCESS or ERROR when it ends
    - never deleted

    At most one row is RUNNING at a time; the orchestrator's in-process flag
    enforces this, not the database.
    """
    __tablename__ = "sync_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)

    status = Column(
        Enum(
            SyncStatus,
            name="sync_status",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=SyncStatus.RUNNING,
        index=True,
    )
    message = Column(Text, nullable=True)
    records_processed = Column(Integer, nullable=False, default=0)

    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    ended_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_sync_log_status_started", "status", "started_at"),
    )

"""
Pydantic schemas for sync results and sync log responses
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from models.base import SyncStatus


class SyncResult(BaseModel):
    """Outcome of one run_sync() call"""
    success: bool
    message: str
    records_processed: int = 0


class SyncLogResponse(BaseModel):
    """Sync log row as returned by the API"""
    id: int
    status: SyncStatus
    message: Optional[str] = None
    records_processed: int = 0
    started_at: datetime
    ended_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True


class SyncStatusResponse(BaseModel):
    """GET /api/sync"""
    is_running: bool
    last_sync: Optional[SyncLogResponse] = None


class CronRequest(BaseModel):
    """POST /api/cron body"""
    secret: Optional[str] = None


class CronResponse(BaseModel):
    """POST /api/cron"""
    success: Optional[bool] = None
    message: str
    records_processed: int = 0
    skipped: bool = False
    executed_at: datetime = Field(default_factory=datetime.utcnow)

from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class SyncStatus(str, enum.Enum):
    """Sync run status"""
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"

"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class and the SyncStatus enum
    contrato: Contracts, keyed by external contract number
    registro: Raw pendency rows owned by a contract
    sync_log: One audit row per sync attempt

Usage:
    from models import Contrato, Registro, SyncLog
    from models.base import SyncStatus

Relationships:
    - Contrato → Registro (one-to-many, cascade delete)
"""

from models.base import Base, SyncStatus
from models.contrato import Contrato
from models.registro import Registro
from models.sync_log import SyncLog

__all__ = [
    "Base",
    "SyncStatus",
    "Contrato",
    "Registro",
    "SyncLog",
]

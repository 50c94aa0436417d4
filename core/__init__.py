"""
Core utilities and configuration for the Painel Holmes backend.

Modules:
    config: Application configuration and environment variable management
    database: Database engine and session factories
    exceptions: Exception hierarchy for the sync pipeline
    logging: Logging configuration

Usage:
    from core.config import settings
    from core.database import async_session_maker
    from core.exceptions import APIExtractionError, SchemaValidationError
    from core.logging import setup_logging
"""

__all__ = [
    "settings",
    "async_session_maker",
    "build_engine",
    "build_session_factory",
    "setup_logging",
    # Exceptions
    "SyncError",
    "ExtractionError",
    "APIExtractionError",
    "UpstreamTimeoutError",
    "UpstreamStatusError",
    "AuthenticationError",
    "NetworkError",
    "TransformationError",
    "SchemaValidationError",
    "UpstreamRejectedError",
    "LoadError",
    "DatabaseError",
    "ContractLoadError",
    "RecordInsertError",
]

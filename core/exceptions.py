"""
Custom exceptions for the sync pipeline with structured error context.

Every run-level failure of a sync is one of these. The orchestrator turns
them into an ``error`` SyncLog and a failed SyncResult; per-record and
per-contract load errors are logged and skipped.

Exception Hierarchy:
    SyncError (base)
    ├── ExtractionError
    │   └── APIExtractionError
    │       ├── UpstreamTimeoutError
    │       ├── UpstreamStatusError
    │       ├── AuthenticationError
    │       └── NetworkError
    ├── TransformationError
    │   ├── SchemaValidationError
    │   └── UpstreamRejectedError
    └── LoadError
        ├── DatabaseError
        ├── ContractLoadError
        └── RecordInsertError
"""

from typing import Optional, Dict, Any
from datetime import datetime


class SyncError(Exception):
    """
    Base exception for all sync-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (contract, url, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(SyncError):
    """Base exception for upstream fetch failures."""
    pass


class APIExtractionError(ExtractionError):
    """
    Raised when the scraping API cannot be read.

    Context should include:
        - api_url: The endpoint (credentials masked)
        - status_code: HTTP status code (if applicable)
        - response_body: Response body (truncated)
    """
    pass


class UpstreamTimeoutError(APIExtractionError):
    """The upstream request exceeded the sync timeout."""
    pass


class UpstreamStatusError(APIExtractionError):
    """The upstream answered with a non-2xx status."""
    pass


class AuthenticationError(APIExtractionError):
    """The upstream rejected the credentials (HTTP 401, 403)."""
    pass


class NetworkError(APIExtractionError):
    """Connection-level failure talking to the upstream."""
    pass


# ============================================================================
# Transformation Errors
# ============================================================================

class TransformationError(SyncError):
    """Base exception for payload handling failures."""
    pass


class SchemaValidationError(TransformationError):
    """
    The upstream payload does not have the expected shape.

    Context should include:
        - errors: pydantic error list (truncated)
    """
    pass


class UpstreamRejectedError(TransformationError):
    """The payload is well-formed but reports ``success: false``."""
    pass


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(SyncError):
    """Base exception for persistence failures."""
    pass


class DatabaseError(LoadError):
    """
    Raised when sync bookkeeping cannot be written.

    Context should include:
        - operation: Type of database operation (INSERT, UPDATE, SELECT)
        - table_name: Name of the table
    """
    pass


class ContractLoadError(LoadError):
    """
    A whole contract could not be replaced; the sync skips it.

    Context should include:
        - contrato: external contract number
    """
    pass


class RecordInsertError(LoadError):
    """
    A single record was rejected by the database; the sync skips it.

    Context should include:
        - contrato: external contract number
        - record_index: position in the contract's record list
    """
    pass

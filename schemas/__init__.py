"""
Pydantic schemas for validation and serialization.

Schemas:
    upstream: Scraping API payload (validated on every sync)
    pendencias: Derived views (AutorInfo, PendenciaItem, RegistroView)
    sync: SyncResult and sync log responses
    api: HTTP response models for the dashboard endpoints

Usage:
    from schemas.upstream import UpstreamPayload
    from schemas.pendencias import AutorInfo, PendenciaItem
    from schemas.sync import SyncResult

Validation:
    Upstream text fields other than autor/data may be missing or null and
    default to an empty string. A payload of the wrong shape fails the sync.
"""

__all__ = [
    "UpstreamPayload",
    "UpstreamContrato",
    "UpstreamRegistro",
    "AutorInfo",
    "PendenciaItem",
    "RegistroView",
    "SyncResult",
    "SyncLogResponse",
    "SyncStatusResponse",
    "DataResponse",
    "HealthCheckResponse",
]

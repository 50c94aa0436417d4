"""
Sync pipeline and record parsers.

Modules:
    runner: SyncOrchestrator, the single-flight fetch/validate/persist run
    scheduler: APScheduler integration for periodic syncs

Subpackages:
    extractors: Scraping API client with payload validation
    transformers: Pure parsers for autor, extra_info and data columns
    loaders: Contract/registro replacement and SyncLog bookkeeping

Architecture:
    1. Extract - one GET against the scraping API, validated with pydantic
    2. Load - per contract: upsert, delete old registros, insert new ones
    3. Read - parsers derive structured views from stored raw text

    Loading isolates failures per record and per contract; extraction
    failures fail the whole run.

Usage:
    from core.database import async_session_maker
    from ingestion.runner import SyncOrchestrator

    orchestrator = SyncOrchestrator(async_session_maker)
    result = await orchestrator.run_sync()
    print(f"Processed {result.records_processed} records")
"""

__all__ = [
    "SyncOrchestrator",
    "SyncScheduler",
    "ScrapeAPIExtractor",
    "RegistroLoader",
    "SyncLogTracker",
    "RegistroEnricher",
    "parse_autor",
    "parse_extra_info",
    "extract_tipo",
]

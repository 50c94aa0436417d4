"""
Run one full sync from the command line
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.database import build_engine, build_session_factory
from core.logging import setup_logging
from ingestion.extractors.scrape_api_extractor import ScrapeAPIExtractor
from ingestion.runner import SyncOrchestrator

logger = logging.getLogger(__name__)


async def run_sync() -> bool:
    """Run a single sync; True on success"""
    engine = build_engine(echo=False)

    try:
        orchestrator = SyncOrchestrator(
            session_factory=build_session_factory(engine),
            extractor=ScrapeAPIExtractor()
        )
        result = await orchestrator.run_sync()

        if result.success:
            logger.info(f"Sync completed: {result.records_processed} records processed")
        else:
            logger.error(f"Sync failed: {result.message}")
        return result.success
    finally:
        await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    ok = asyncio.run(run_sync())
    sys.exit(0 if ok else 1)

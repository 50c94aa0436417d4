"""
Print the latest sync log as JSON
"""

import asyncio
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.database import build_engine, build_session_factory
from ingestion.loaders.sync_log_tracker import SyncLogTracker
from schemas.sync import SyncLogResponse


async def check_sync() -> int:
    engine = build_engine(echo=False)
    try:
        async with build_session_factory(engine)() as session:
            last = await SyncLogTracker.latest(session)
    except Exception as e:
        print(f"Error querying sync_logs: {e}", file=sys.stderr)
        return 1
    finally:
        await engine.dispose()

    print(SyncLogResponse.from_orm(last).json(indent=2) if last else "null")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(check_sync()))

"""
FastAPI dependencies
"""

from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from ingestion.runner import SyncOrchestrator


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Database session from the app's session factory"""
    async with request.app.state.session_factory() as session:
        yield session


def get_orchestrator(request: Request) -> SyncOrchestrator:
    """The process-wide orchestrator created at startup"""
    return request.app.state.orchestrator

"""
Pytest configuration and fixtures
"""

import asyncio
import os
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from core.database import build_session_factory
from ingestion.extractors.scrape_api_extractor import ScrapeAPIExtractor
from models import Base

CONTRATO_A = "4600013206"
CONTRATO_B = "4600013454"


def create_test_engine(database_url: str):
    """Async engine for tests; SQLite gets real BEGIN/SAVEPOINT handling"""
    engine = create_async_engine(database_url, echo=False, poolclass=NullPool)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _disable_driver_transactions(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _emit_begin(conn):
            conn.exec_driver_sql("BEGIN")

    return engine


@pytest.fixture
def test_database_url(tmp_path) -> str:
    return os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'holmes_test.db'}"


@pytest_asyncio.fixture(scope="function")
async def test_engine(test_database_url):
    """Create test database engine with all tables"""
    engine = create_test_engine(test_database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return build_session_factory(test_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with session_factory() as session:
        yield session
        await session.rollback()


class FakeScrapeAPI:
    """
    Stand-in for the scraping API behind httpx.MockTransport.

    Records every request. When a gate event is given, requests block until
    it is set.
    """

    def __init__(self, payload=None, status_code=200, content=None, gate=None, delay=None, error=None):
        self.payload = payload
        self.status_code = status_code
        self.content = content
        self.gate = gate
        self.delay = delay
        self.error = error
        self.requests = []
        self.entered = asyncio.Event()

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)

    def extractor(self, timeout: float = 5.0) -> ScrapeAPIExtractor:
        return ScrapeAPIExtractor(
            base_url="http://scraper.test",
            email="painel@example.com",
            password="s3cr3t&pass",
            contratos=[CONTRATO_A, CONTRATO_B],
            timeout=timeout,
            transport=httpx.MockTransport(self.handler)
        )


@pytest.fixture
def upstream_payload():
    """Scraping API response with two contracts and three records"""
    return {
        "success": True,
        "data": [
            {
                "contrato": CONTRATO_A,
                "registros": [
                    {
                        "autor": "Protocolo: 20250724145613 - Funcionário: UALAS SILVA DE ALMEIDA - Contrato: SUB 02 - 4600013206 - Polo:",
                        "data": "Abertura 0.0\n24/07/2025",
                        "extra_info": "Enviar documentação\nUALAS SILVA\n01/12/2024 10:00",
                        "numero": "123",
                        "prazo": "01/12/2024",
                        "status": "Pendente",
                        "tipo": "Cadastro"
                    },
                    {
                        "autor": "Protocolo: 20250901125507 - Funcionário: Bruno Rocha da Silva - Contrato: 4600013206 - Polo: Palmas",
                        "data": "Medição 0.0",
                        "extra_info": None,
                        "numero": None,
                        "prazo": "15/12/2024",
                        "status": "Concluído",
                        "tipo": "Medição"
                    }
                ]
            },
            {
                "contrato": CONTRATO_B,
                "registros": [
                    {
                        "autor": "Protocolo:3241159411 Contrato: 4600013454 | Escopo: Base em concreto armado",
                        "data": "Abertura 0.0",
                        "extra_info": "Aprovar projeto\nEquipe técnica\nhá 28d 01h\nSep 12, 14:07",
                        "prazo": "12/09/2024",
                        "status": "Pendente",
                        "tipo": "Cadastro"
                    }
                ]
            }
        ]
    }


@pytest.fixture
def fake_api(upstream_payload):
    return FakeScrapeAPI(payload=upstream_payload)

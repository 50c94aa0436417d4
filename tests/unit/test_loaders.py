"""
Unit tests for the registro loader and the sync log tracker
"""

import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError
from core.exceptions import ContractLoadError
from ingestion.loaders.registro_loader import RegistroLoader
from ingestion.loaders.sync_log_tracker import SyncLogTracker
from models.base import SyncStatus
from models.contrato import Contrato
from models.registro import Registro
from models.sync_log import SyncLog
from schemas.upstream import UpstreamContrato, UpstreamRegistro
from conftest import CONTRATO_A


def make_registro(index: int, **overrides) -> UpstreamRegistro:
    fields = {
        "autor": f"Protocolo: 2025072414561{index} - Funcionário: FULANO {index} - Contrato: {CONTRATO_A} - Polo:",
        "data": f"Abertura 0.0\n0{index}/07/2025",
        "extra_info": "",
        "numero": str(index),
        "prazo": f"0{index}/12/2024",
        "status": "Pendente",
        "tipo": "Cadastro",
    }
    fields.update(overrides)
    return UpstreamRegistro(**fields)


async def count_registros(db_session, contrato_id=None) -> int:
    query = select(func.count(Registro.id))
    if contrato_id is not None:
        query = query.where(Registro.contrato_id == contrato_id)
    return (await db_session.execute(query)).scalar()


class TestRegistroLoader:
    """Contract upsert and record replacement"""

    @pytest.mark.asyncio
    async def test_upsert_creates_contract(self, db_session):
        loader = RegistroLoader(db_session)

        contrato = await loader.upsert_contrato(CONTRATO_A)
        await db_session.commit()

        assert contrato.id is not None
        assert (await loader.get_contrato(CONTRATO_A)).id == contrato.id

    @pytest.mark.asyncio
    async def test_upsert_reuses_existing_contract(self, db_session):
        loader = RegistroLoader(db_session)

        first = await loader.upsert_contrato(CONTRATO_A)
        created_updated_at = first.updated_at
        second = await loader.upsert_contrato(CONTRATO_A)
        await db_session.commit()

        total = (await db_session.execute(select(func.count(Contrato.id)))).scalar()
        assert total == 1
        assert second.id == first.id
        assert second.updated_at >= created_updated_at

    @pytest.mark.asyncio
    async def test_replace_inserts_all_records(self, db_session):
        loader = RegistroLoader(db_session)
        entry = UpstreamContrato(contrato=CONTRATO_A, registros=[make_registro(1), make_registro(2)])

        inserted = await loader.replace_contrato(entry)

        contrato = await loader.get_contrato(CONTRATO_A)
        assert inserted == 2
        assert await count_registros(db_session, contrato.id) == 2

    @pytest.mark.asyncio
    async def test_replace_drops_previous_records(self, db_session):
        loader = RegistroLoader(db_session)
        await loader.replace_contrato(
            UpstreamContrato(contrato=CONTRATO_A, registros=[make_registro(1), make_registro(2), make_registro(3)])
        )

        inserted = await loader.replace_contrato(
            UpstreamContrato(contrato=CONTRATO_A, registros=[make_registro(4, status="Concluído")])
        )

        rows = (await db_session.execute(select(Registro))).scalars().all()
        assert inserted == 1
        assert len(rows) == 1
        assert rows[0].numero == "4"
        assert rows[0].status == "Concluído"

    @pytest.mark.asyncio
    async def test_replace_with_empty_list_clears_contract(self, db_session):
        loader = RegistroLoader(db_session)
        await loader.replace_contrato(UpstreamContrato(contrato=CONTRATO_A, registros=[make_registro(1)]))

        inserted = await loader.replace_contrato(UpstreamContrato(contrato=CONTRATO_A, registros=[]))

        assert inserted == 0
        assert await count_registros(db_session) == 0
        assert await loader.get_contrato(CONTRATO_A) is not None

    @pytest.mark.asyncio
    async def test_rejected_record_is_skipped(self, db_session):
        loader = RegistroLoader(db_session)
        # autor is NOT NULL in the database
        broken = UpstreamRegistro.construct(
            autor=None, data="Abertura", extra_info="", numero="2",
            prazo="", status="", tipo=""
        )
        entry = UpstreamContrato.construct(
            contrato=CONTRATO_A,
            registros=[make_registro(1), broken, make_registro(3)]
        )

        inserted = await loader.replace_contrato(entry)

        rows = (await db_session.execute(select(Registro).order_by(Registro.id))).scalars().all()
        assert inserted == 2
        assert [r.numero for r in rows] == ["1", "3"]

    @pytest.mark.asyncio
    async def test_contract_failure_raises_contract_load_error(self, db_session, monkeypatch):
        loader = RegistroLoader(db_session)
        await loader.replace_contrato(UpstreamContrato(contrato=CONTRATO_A, registros=[make_registro(1)]))

        async def broken_delete(contrato_id):
            raise OperationalError("DELETE FROM registros", {}, Exception("database is locked"))

        monkeypatch.setattr(loader, "delete_registros", broken_delete)

        with pytest.raises(ContractLoadError) as exc_info:
            await loader.replace_contrato(UpstreamContrato(contrato=CONTRATO_A, registros=[make_registro(2)]))

        assert exc_info.value.context["contrato"] == CONTRATO_A
        # Previously committed records survive
        assert await count_registros(db_session) == 1

    def test_build_registro_normalizes_empty_fields(self):
        row = RegistroLoader.build_registro(
            5,
            UpstreamRegistro(autor="a", data="d", extra_info=None, prazo=None, status=None, tipo=None)
        )

        assert row.contrato_id == 5
        assert row.extra_info == ""
        assert row.prazo == ""
        assert row.status == ""
        assert row.tipo == ""


class TestSyncLogTracker:
    """Sync log lifecycle"""

    @pytest.mark.asyncio
    async def test_start_creates_running_row(self, db_session):
        tracker = SyncLogTracker(db_session)

        sync_log = await tracker.start()

        assert tracker.sync_log_id == sync_log.id
        assert sync_log.status == SyncStatus.RUNNING
        assert sync_log.records_processed == 0
        assert sync_log.ended_at is None

    @pytest.mark.asyncio
    async def test_complete_sets_terminal_state(self, db_session):
        tracker = SyncLogTracker(db_session)
        await tracker.start()

        await tracker.complete(SyncStatus.SUCCESS, "done", records_processed=12)

        sync_log = (await db_session.execute(select(SyncLog))).scalar_one()
        assert sync_log.status == SyncStatus.SUCCESS
        assert sync_log.message == "done"
        assert sync_log.records_processed == 12
        assert sync_log.ended_at is not None
        assert sync_log.ended_at >= sync_log.started_at

    @pytest.mark.asyncio
    async def test_complete_without_start_is_noop(self, db_session):
        assert await SyncLogTracker(db_session).complete(SyncStatus.ERROR, "x") is None

    @pytest.mark.asyncio
    async def test_latest(self, db_session):
        assert await SyncLogTracker.latest(db_session) is None

        first = SyncLogTracker(db_session)
        await first.start()
        await first.complete(SyncStatus.ERROR, "Error: boom")
        second = SyncLogTracker(db_session)
        await second.start()

        latest = await SyncLogTracker.latest(db_session)
        assert latest.id == second.sync_log_id
        assert latest.status == SyncStatus.RUNNING

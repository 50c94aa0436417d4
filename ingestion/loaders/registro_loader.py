"""
Replace a contract's registros with a fresh upstream snapshot
"""

from typing import List, Optional
from datetime import datetime
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from models.contrato import Contrato
from models.registro import Registro
from schemas.upstream import UpstreamContrato, UpstreamRegistro
from core.exceptions import ContractLoadError, RecordInsertError
import logging

logger = logging.getLogger(__name__)


class RegistroLoader:
    """
    Load one contract at a time.

    Ensures:
    - The contract row exists (upsert by external number)
    - Old registros are deleted and the incoming ones inserted
    - A rejected registro is skipped (SAVEPOINT per insert)
    - Each contract commits on its own; a failed contract is rolled back
      without touching the others
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_contrato(self, numero: str) -> Optional[Contrato]:
        result = await self.db.execute(
            select(Contrato).where(Contrato.numero == numero)
        )
        return result.scalar_one_or_none()

    async def upsert_contrato(self, numero: str) -> Contrato:
        """Create the contract, or bump updated_at when it already exists"""
        contrato = await self.get_contrato(numero)

        if contrato is None:
            contrato = Contrato(numero=numero)
            self.db.add(contrato)
        else:
            contrato.updated_at = datetime.utcnow()

        await self.db.flush()
        return contrato

    async def delete_registros(self, contrato_id: int) -> int:
        result = await self.db.execute(
            delete(Registro).where(Registro.contrato_id == contrato_id)
        )
        return result.rowcount or 0

    @staticmethod
    def build_registro(contrato_id: int, registro: UpstreamRegistro) -> Registro:
        return Registro(
            contrato_id=contrato_id,
            autor=registro.autor,
            data=registro.data,
            extra_info=registro.extra_info or "",
            numero=registro.numero or "",
            prazo=registro.prazo or "",
            status=registro.status or "",
            tipo=registro.tipo or "",
        )

    async def insert_registro(self, contrato_id: int, registro: UpstreamRegistro) -> Registro:
        """
        Insert one registro inside a SAVEPOINT.

        Raises:
            SQLAlchemyError: The database rejected the row; only the
                savepoint is rolled back
        """
        row = self.build_registro(contrato_id, registro)
        async with self.db.begin_nested():
            self.db.add(row)
        return row

    async def replace_contrato(self, entry: UpstreamContrato) -> int:
        """
        Upsert the contract and replace all its registros.

        Args:
            entry: Contract snapshot from the upstream payload

        Returns:
            Number of registros inserted

        Raises:
            ContractLoadError: The contract could not be written; nothing
                from this contract is committed
        """
        inserted = 0
        failed: List[int] = []

        try:
            contrato = await self.upsert_contrato(entry.contrato)
            removed = await self.delete_registros(contrato.id)
            logger.debug(f"Contract {entry.contrato}: removed {removed} old records")

            for index, registro in enumerate(entry.registros):
                try:
                    await self.insert_registro(contrato.id, registro)
                    inserted += 1
                except (SQLAlchemyError, ValueError, TypeError) as e:
                    failed.append(index)
                    error = RecordInsertError(
                        "Failed to insert record",
                        context={"contrato": entry.contrato, "record_index": index},
                        original_exception=e
                    )
                    logger.error(
                        f"Skipping record {index} of contract {entry.contrato}: {e}",
                        extra={"error_context": error.to_dict()}
                    )

            await self.db.commit()

        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ContractLoadError(
                "Failed to replace contract records",
                context={
                    "contrato": entry.contrato,
                    "records_submitted": len(entry.registros),
                    "operation": "UPSERT",
                    "table_name": "contratos",
                },
                original_exception=e
            )

        logger.info(
            f"Contract {entry.contrato}: {inserted}/{len(entry.registros)} records inserted"
            + (f", skipped indexes {failed}" if failed else "")
        )
        return inserted

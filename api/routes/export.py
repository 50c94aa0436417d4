"""
CSV/JSON export of every registro
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from api.dependencies import get_db
from models.contrato import Contrato
from models.registro import Registro
from datetime import date
from typing import Any, Dict, List
import pandas as pd
import json
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Export"])

EXPORT_COLUMNS = [
    "Contrato",
    "Autor",
    "Data",
    "Número",
    "Prazo",
    "Status",
    "Tipo",
    "Informações Extras",
    "Criado em",
    "Atualizado em",
]


def export_row(registro: Registro, contrato_numero: str) -> Dict[str, Any]:
    return {
        "Contrato": contrato_numero,
        "Autor": registro.autor,
        "Data": registro.data,
        "Número": registro.numero or "",
        "Prazo": registro.prazo,
        "Status": registro.status,
        "Tipo": registro.tipo,
        "Informações Extras": (registro.extra_info or "").replace("\n", " "),
        "Criado em": registro.created_at.isoformat(),
        "Atualizado em": registro.updated_at.isoformat(),
    }


def render_csv(rows: List[Dict[str, Any]]) -> str:
    """Semicolon-separated CSV with a UTF-8 BOM so spreadsheets pick the encoding"""
    frame = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    return "\ufeff" + frame.to_csv(sep=";", index=False)


@router.get("/export")
async def export_data(
    format: str = Query("csv", pattern="^(csv|json)$", description="csv or json"),
    db: AsyncSession = Depends(get_db)
):
    """Download all registros, newest deadline first"""
    result = await db.execute(
        select(Registro, Contrato.numero)
        .join(Contrato, Registro.contrato_id == Contrato.id)
        .order_by(Registro.prazo.desc())
    )
    rows = [export_row(registro, numero) for registro, numero in result.all()]
    filename = f"painel-holmes-{date.today().isoformat()}"

    logger.info(f"Exporting {len(rows)} registros as {format}")

    if format == "json":
        return Response(
            content=json.dumps(rows, indent=2, ensure_ascii=False),
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{filename}.json"'}
        )

    return Response(
        content=render_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}.csv"'}
    )

"""
Data retrieval endpoint with pagination, filtering and derived views
"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_, or_
from api.dependencies import get_db
from schemas.api import (
    DataResponse,
    PaginationMetadata,
    ContratoSummary,
    TipoSummary,
    SORTABLE_COLUMNS,
)
from models.contrato import Contrato
from models.registro import Registro
from ingestion.transformers.enricher import RegistroEnricher
from typing import Optional
import time
import uuid
import math
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Data"])


def escape_like(value: str) -> str:
    """Make %, _ and the escape character match literally in LIKE patterns"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@router.get("/data", response_model=DataResponse)
async def get_data(
    request: Request,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=1000, description="Items per page"),
    search: Optional[str] = Query(None, description="Search in autor, data, extra_info and numero"),
    status: Optional[str] = Query(None, description="Filter by status"),
    tipo: Optional[str] = Query(None, description="Filter by tipo"),
    contrato: Optional[str] = Query(None, description="Filter by contract number"),
    sort_by: str = Query("prazo", description="prazo, created_at, updated_at, status or autor"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$", description="asc or desc"),
    db: AsyncSession = Depends(get_db)
):
    """
    Retrieve paginated registros for the dashboard.

    Each item carries its derived views (autor_info, pendencias,
    tipo_label), computed on this request. The response also includes
    per-status counts, every contract with its record count and per-tipo
    counts for the filter widgets.
    """
    start_time = time.time()
    request_id = getattr(request.state, "request_id", f"req_{uuid.uuid4().hex[:12]}")

    logger.info(
        f"[{request_id}] GET /api/data - page={page}, page_size={page_size}, "
        f"filters: status={status}, tipo={tipo}, contrato={contrato}, search={search}"
    )

    # Build filters
    filters = []

    if search:
        pattern = f"%{escape_like(search)}%"
        filters.append(or_(
            Registro.autor.ilike(pattern, escape="\\"),
            Registro.data.ilike(pattern, escape="\\"),
            Registro.extra_info.ilike(pattern, escape="\\"),
            Registro.numero.ilike(pattern, escape="\\")
        ))

    if status:
        filters.append(Registro.status == status)

    if tipo:
        filters.append(Registro.tipo == tipo)

    if contrato:
        filters.append(Contrato.numero == contrato)

    # Get total count
    count_query = select(func.count(Registro.id)).join(Contrato, Registro.contrato_id == Contrato.id)
    if filters:
        count_query = count_query.where(and_(*filters))
    total = (await db.execute(count_query)).scalar() or 0

    total_pages = math.ceil(total / page_size) if total > 0 else 0
    offset = (page - 1) * page_size

    # Unknown sort columns fall back to prazo
    sort_column = getattr(Registro, sort_by if sort_by in SORTABLE_COLUMNS else "prazo")
    order = sort_column.asc() if sort_order == "asc" else sort_column.desc()

    query = (
        select(Registro, Contrato.numero)
        .join(Contrato, Registro.contrato_id == Contrato.id)
        .order_by(order, Registro.id)
        .offset(offset)
        .limit(page_size)
    )
    if filters:
        query = query.where(and_(*filters))

    rows = (await db.execute(query)).all()

    enricher = RegistroEnricher()
    data = [enricher.enrich(registro, contrato_numero=numero) for registro, numero in rows]

    # Facets over the whole table
    stats_result = await db.execute(
        select(Registro.status, func.count(Registro.id)).group_by(Registro.status)
    )
    stats = {row_status: count for row_status, count in stats_result.all()}

    contratos_result = await db.execute(
        select(Contrato.numero, func.count(Registro.id))
        .outerjoin(Registro, Registro.contrato_id == Contrato.id)
        .group_by(Contrato.numero)
        .order_by(Contrato.numero)
    )
    contratos = [ContratoSummary(numero=numero, total=count) for numero, count in contratos_result.all()]

    tipos_result = await db.execute(
        select(Registro.tipo, func.count(Registro.id)).group_by(Registro.tipo).order_by(Registro.tipo)
    )
    tipos = [TipoSummary(tipo=row_tipo, total=count) for row_tipo, count in tipos_result.all()]

    api_latency_ms = (time.time() - start_time) * 1000
    logger.info(f"[{request_id}] Returned {len(data)} of {total} registros ({api_latency_ms:.2f}ms)")

    return DataResponse(
        data=data,
        pagination=PaginationMetadata(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1
        ),
        stats=stats,
        contratos=contratos,
        tipos=tipos
    )

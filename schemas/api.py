"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime
from schemas.pendencias import RegistroView
from schemas.sync import SyncLogResponse


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="Overall system status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    database_connected: bool
    sync_running: bool = False
    last_sync: Optional[SyncLogResponse] = None


# ============================================================================
# Data Query Schemas
# ============================================================================

SORTABLE_COLUMNS = ("prazo", "created_at", "updated_at", "status", "autor")


class PaginationMetadata(BaseModel):
    """Pagination metadata"""
    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool


class ContratoSummary(BaseModel):
    numero: str
    total: int


class TipoSummary(BaseModel):
    tipo: str
    total: int


class DataResponse(BaseModel):
    """Paginated registros with dashboard filter facets"""
    data: List[RegistroView]
    pagination: PaginationMetadata
    stats: Dict[str, int] = Field(default_factory=dict, description="Record count per status")
    contratos: List[ContratoSummary] = Field(default_factory=list)
    tipos: List[TipoSummary] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "data": [
                    {
                        "id": 1,
                        "contrato": "4600013206",
                        "autor": "Protocolo: 20250724145613 - Funcionário: UALAS SILVA DE ALMEIDA - Contrato: SUB 02 - 4600013206 - Polo:",
                        "data": "Abertura 0.0\n...",
                        "status": "Pendente",
                        "tipo": "Cadastro",
                        "autor_info": {
                            "protocolo": "20250724145613",
                            "funcionario": "UALAS SILVA DE ALMEIDA",
                            "contrato_filho": "SUB 02"
                        },
                        "tipo_label": "Abertura"
                    }
                ],
                "pagination": {
                    "page": 1,
                    "page_size": 50,
                    "total": 1,
                    "total_pages": 1,
                    "has_next": False,
                    "has_previous": False
                },
                "stats": {"Pendente": 1},
                "contratos": [{"numero": "4600013206", "total": 1}],
                "tipos": [{"tipo": "Cadastro", "total": 1}]
            }
        }


# ============================================================================
# Error Response Schema
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    detail: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)

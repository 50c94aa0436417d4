"""
Derived, non-persisted views over raw registro text
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class AutorInfo(BaseModel):
    """Fields pulled out of the free-text autor line; each is absent when not matched"""
    protocolo: Optional[str] = None
    funcionario: Optional[str] = None
    escopo: Optional[str] = None
    contrato_filho: Optional[str] = None


class PendenciaItem(BaseModel):
    """
    One pending action found in an extra_info block.

    delta_dias is positive when the deadline is in the past (overdue),
    negative when it is in the future and zero for today.
    """
    acao: str
    responsavel: str = ""
    prazo_text: Optional[str] = None
    prazo_date: Optional[datetime] = None
    delta_dias: Optional[int] = None


class RegistroView(BaseModel):
    """A registro with its derived views, as served to the dashboard"""
    id: int
    contrato: str
    autor: str
    data: str
    extra_info: str
    numero: Optional[str] = None
    prazo: str
    status: str
    tipo: str
    created_at: datetime
    updated_at: datetime

    autor_info: AutorInfo = Field(default_factory=AutorInfo)
    pendencias: List[PendenciaItem] = Field(default_factory=list)
    tipo_label: str = ""
    has_participante_externo: bool = False

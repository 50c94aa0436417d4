"""
Pydantic schemas for the scraping API payload
"""

from pydantic import BaseModel, validator
from typing import List, Optional


class UpstreamRegistro(BaseModel):
    """
    One record as sent by the scraping API.

    autor and data are required; the remaining fields may be missing or
    null and default to an empty string.
    """

    autor: str
    data: str
    extra_info: Optional[str] = ""
    numero: Optional[str] = ""
    prazo: Optional[str] = ""
    status: Optional[str] = ""
    tipo: Optional[str] = ""

    @validator("extra_info", "numero", "prazo", "status", "tipo", pre=True, always=True)
    def default_empty(cls, v):
        """Missing or null text becomes an empty string"""
        return "" if v is None else v


class UpstreamContrato(BaseModel):
    """A contract and its full record list"""
    contrato: str
    registros: List[UpstreamRegistro]


class UpstreamPayload(BaseModel):
    """Top-level response of GET /api/scrape"""
    success: bool
    data: List[UpstreamContrato]

    @property
    def total_registros(self) -> int:
        return sum(len(c.registros) for c in self.data)

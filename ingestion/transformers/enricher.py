"""
Build the dashboard view of a registro from its raw text columns
"""

from typing import Optional
from datetime import datetime
from models.registro import Registro
from schemas.pendencias import RegistroView
from ingestion.transformers.autor_parser import parse_autor
from ingestion.transformers.extra_info_parser import parse_extra_info
from ingestion.transformers.tipo_parser import extract_tipo
import logging
import re

logger = logging.getLogger(__name__)

RE_PARTICIPANTE_EXTERNO = re.compile(r"com participante externo", re.IGNORECASE)


def has_participante_externo(*fields: Optional[str]) -> bool:
    """True when any of the text fields mentions an external participant"""
    text = " ".join(f for f in fields if isinstance(f, str))
    return RE_PARTICIPANTE_EXTERNO.search(text) is not None


class RegistroEnricher:
    """
    Derive structured views for stored registros.

    Views are recomputed on every read and never written back, so a parser
    change applies to all existing rows immediately.

    Handles:
    - autor line → AutorInfo
    - extra_info block → list of PendenciaItem
    - data field → tipo label
    - extra_info, data and autor → external participant flag
    """

    def __init__(self, now: Optional[datetime] = None):
        self.now = now

    def enrich(self, registro: Registro, contrato_numero: Optional[str] = None) -> RegistroView:
        """
        Combine raw columns with their derived views.

        Args:
            registro: Stored registro row
            contrato_numero: External contract number; read from the
                relationship when not given

        Returns:
            RegistroView ready for serialization
        """
        if contrato_numero is None:
            contrato_numero = registro.contrato.numero if registro.contrato else ""

        return RegistroView(
            id=registro.id,
            contrato=contrato_numero,
            autor=registro.autor,
            data=registro.data,
            extra_info=registro.extra_info or "",
            numero=registro.numero,
            prazo=registro.prazo or "",
            status=registro.status or "",
            tipo=registro.tipo or "",
            created_at=registro.created_at,
            updated_at=registro.updated_at,
            autor_info=parse_autor(registro.autor),
            pendencias=parse_extra_info(registro.extra_info or "", now=self.now or datetime.now()),
            tipo_label=extract_tipo(registro.data),
            has_participante_externo=has_participante_externo(
                registro.extra_info, registro.data, registro.autor
            ),
        )

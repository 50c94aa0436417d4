"""
Pure text parsers for registro columns and the per-record view builder.
"""

from ingestion.transformers.autor_parser import parse_autor
from ingestion.transformers.extra_info_parser import parse_extra_info
from ingestion.transformers.tipo_parser import extract_tipo
from ingestion.transformers.enricher import RegistroEnricher

__all__ = [
    "parse_autor",
    "parse_extra_info",
    "extract_tipo",
    "RegistroEnricher",
]

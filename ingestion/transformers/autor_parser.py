"""
Extract structured fields from the free-text autor line.

Typical inputs:

    Protocolo: 20250724145613 - Funcionário: UALAS SILVA - Contrato: SUB 02 - 4600013206 - Polo:
    Protocolo:3241159411 Contrato: 4600013454 | Escopo: Elaboração do projeto ...

Each field has its own pattern and is matched independently, so a miss on
one never hides the others.
"""

import re
import logging

from schemas.pendencias import AutorInfo

logger = logging.getLogger(__name__)

RE_PROTOCOLO = re.compile(r"Protocolo:\s*([0-9]{8,})", re.IGNORECASE)

# Names may contain hyphens; only " - Contrato:" or a pipe ends the name
RE_FUNCIONARIO = re.compile(
    r"Funcion[áa]rio:\s*([^\n|]+?)(?=\s+-\s+Contrato:|\s*\||$)",
    re.IGNORECASE,
)

# "Contrato: SUB 01 4600013206" or "Contrato: SUB 02 - 4600013206"
RE_CONTRATO_SUB = re.compile(
    r"Contrato:\s*(SUB\s*[0-9]{1,2})(?:\s*-\s*|\s+)?([0-9]{6,})",
    re.IGNORECASE,
)

RE_ESCOPO_PIPE = re.compile(r"\|\s*Escopo:\s*(.+)$", re.IGNORECASE)
RE_ESCOPO = re.compile(r"Escopo:\s*(.+)$", re.IGNORECASE)

RE_TRAILING_HYPHEN = re.compile(r"\s*-\s*$")


def _protocolo(autor: str):
    match = RE_PROTOCOLO.search(autor)
    return match.group(1).strip() if match else None


def _funcionario(autor: str):
    match = RE_FUNCIONARIO.search(autor)
    if not match:
        return None
    return match.group(1).strip() or None


def _contrato_filho(autor: str):
    # A bare contract number is the parent contract, not a child
    match = RE_CONTRATO_SUB.search(autor)
    if not match:
        return None
    sub = RE_TRAILING_HYPHEN.sub("", match.group(1).strip())
    return sub or None


def _escopo(autor: str):
    match = RE_ESCOPO_PIPE.search(autor) or RE_ESCOPO.search(autor)
    if not match:
        return None
    return match.group(1).strip() or None


def parse_autor(autor: str) -> AutorInfo:
    """
    Parse an autor line into AutorInfo.

    Never raises: anything that does not match is left as None.
    """
    if not isinstance(autor, str) or not autor:
        return AutorInfo()

    return AutorInfo(
        protocolo=_protocolo(autor),
        funcionario=_funcionario(autor),
        escopo=_escopo(autor),
        contrato_filho=_contrato_filho(autor),
    )

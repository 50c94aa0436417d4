"""
Split a multi-line extra_info block into pending-action items.

The block is an unlabeled stream of lines. Items are groups of three or
four lines:

    <acao>
    <responsavel>
    <prazo>                  "01/12/2024 10:00", "há 28d 01h", "Sep 12, 14:07", ...
    [<created at>]           only when it starts with an English month abbreviation

Deadline lines are interpreted by an ordered list of parsers; the first one
that recognises the line wins. Unparseable deadlines keep their text and
get no date.
"""

import math
import re
import logging
from datetime import datetime
from typing import Callable, Iterator, List, NamedTuple, Optional

from schemas.pendencias import PendenciaItem

logger = logging.getLogger(__name__)

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

BR_DATE_FORMATS = ("%d/%m/%Y", "%d/%m/%Y %H:%M")

RE_LINE_BREAK = re.compile(r"\r?\n")
RE_RELATIVE_AGE = re.compile(r"^h[áa]\s+[0-9]+d", re.IGNORECASE)
RE_EN_SHORT = re.compile(
    r"^(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\s+([0-9]{1,2}),\s*([0-9]{1,2}):([0-9]{1,2})$",
    re.IGNORECASE,
)
RE_CREATED_AT = re.compile(r"^(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)", re.IGNORECASE)

SECONDS_PER_DAY = 24 * 60 * 60


class Prazo(NamedTuple):
    text: str
    date: Optional[datetime]


def parse_br_date(value: str) -> Optional[datetime]:
    """dd/MM/yyyy with an optional HH:mm"""
    for fmt in BR_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_en_short(value: str, now: datetime) -> Optional[datetime]:
    """"Sep 12, 14:07" in the current year"""
    match = RE_EN_SHORT.match(value.strip())
    if not match:
        return None
    month, day, hour, minute = match.groups()
    try:
        return datetime(now.year, MONTHS[month.lower()], int(day), int(hour), int(minute))
    except ValueError:
        return None


def _absolute(line: str, next_line: Optional[str], now: datetime) -> Optional[Prazo]:
    parsed = parse_br_date(line)
    return Prazo(line, parsed) if parsed else None


def _relative_age(line: str, next_line: Optional[str], now: datetime) -> Optional[Prazo]:
    # "há 28d 01h" has no date of its own; the next line may carry one
    if not RE_RELATIVE_AGE.match(line):
        return None
    parsed = parse_en_short(next_line, now) if next_line else None
    return Prazo(line, parsed)


def _en_short(line: str, next_line: Optional[str], now: datetime) -> Optional[Prazo]:
    parsed = parse_en_short(line, now)
    return Prazo(line, parsed) if parsed else None


PRAZO_PARSERS: List[Callable[[str, Optional[str], datetime], Optional[Prazo]]] = [
    _absolute,
    _relative_age,
    _en_short,
]


def parse_prazo(line: str, next_line: Optional[str] = None, now: Optional[datetime] = None) -> Prazo:
    """Interpret a deadline line; falls back to the raw text with no date"""
    now = now or datetime.now()
    trimmed = line.strip()
    for parser in PRAZO_PARSERS:
        result = parser(trimmed, next_line, now)
        if result is not None:
            return result
    return Prazo(trimmed, None)


def delta_dias(prazo_date: Optional[datetime], now: datetime) -> Optional[int]:
    """Whole days from the deadline to now, rounded half up"""
    if prazo_date is None:
        return None
    days = (now - prazo_date).total_seconds() / SECONDS_PER_DAY
    return math.floor(days + 0.5)


def _is_created_at(line: Optional[str]) -> bool:
    return bool(line) and RE_CREATED_AT.match(line) is not None


def iter_pendencias(extra_info: str, now: Optional[datetime] = None) -> Iterator[PendenciaItem]:
    """Yield one PendenciaItem per detected action, in order"""
    if not isinstance(extra_info, str):
        return
    now = now or datetime.now()

    lines = [s.strip() for s in RE_LINE_BREAK.split(extra_info)]
    lines = [s for s in lines if s]

    i = 0
    while i < len(lines):
        acao = lines[i]
        responsavel = lines[i + 1] if i + 1 < len(lines) else ""
        prazo_line = lines[i + 2] if i + 2 < len(lines) else None
        maybe_created = lines[i + 3] if i + 3 < len(lines) else None

        if not acao:
            i += 1
            continue

        prazo = parse_prazo(prazo_line, maybe_created, now) if prazo_line else None

        yield PendenciaItem(
            acao=acao,
            responsavel=responsavel,
            prazo_text=prazo.text if prazo else None,
            prazo_date=prazo.date if prazo else None,
            delta_dias=delta_dias(prazo.date if prazo else None, now),
        )

        # A trailing month-prefixed line is this item's creation timestamp
        if prazo_line and _is_created_at(maybe_created):
            i += 4
        else:
            i += 3


def parse_extra_info(extra_info: str, now: Optional[datetime] = None) -> List[PendenciaItem]:
    """
    Parse an extra_info block into a list of PendenciaItem.

    Empty or whitespace-only input gives an empty list. Never raises on
    malformed text.
    """
    return list(iter_pendencias(extra_info, now=now))

# core/utils/dates.py
import re
from datetime import date, datetime

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


def parse_calendar_date(value) -> date:
    """
    ``date`` ou texto ``YYYY-MM-DD`` (sufixo de hora ignorado) -> ``date``.
    Um ``datetime`` é reduzido à sua parte de calendário, sem conversão de fuso.
    """
    if isinstance(value, datetime):
        return date(value.year, value.month, value.day)
    if isinstance(value, date):
        return value
    m = _ISO_DATE_RE.match((value or "").strip()) if isinstance(value, str) else None
    if not m:
        raise ValueError(f"Data inválida: {value!r}")
    year, month, day = (int(g) for g in m.groups())
    return date(year, month, day)

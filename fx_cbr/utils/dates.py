"""Date formats used by the CBR XML service."""

from __future__ import annotations

import re
from datetime import date, datetime

REQUEST_DATE_FORMAT = "%d/%m/%Y"
REPORT_DATE_FORMAT = "%d.%m.%Y"

_REPORT_DATE_RE = re.compile(r"^\d{2}\.\d{2}\.\d{4}$")


def format_request_date(value: date) -> str:
    """Render ``value`` as the ``DD/MM/YYYY`` string expected by ``date_req``."""

    return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"


def parse_report_date(value: str) -> date:
    """Parse a ``DD.MM.YYYY`` report date.

    Only the zero-padded form is accepted; :func:`datetime.strptime` alone
    would also take ``1.8.2015``.
    """

    if not _REPORT_DATE_RE.match(value):
        raise ValueError(f"Report date {value!r} does not match DD.MM.YYYY")
    return datetime.strptime(value, REPORT_DATE_FORMAT).date()


__all__ = [
    "REQUEST_DATE_FORMAT",
    "REPORT_DATE_FORMAT",
    "format_request_date",
    "parse_report_date",
]

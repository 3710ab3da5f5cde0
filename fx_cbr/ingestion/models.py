"""Data models decoded from CBR XML documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from fx_cbr.ingestion.fields import (
    parse_decimal,
    parse_int,
    parse_trimmed,
    xml_attribute,
    xml_child,
)


@dataclass(frozen=True, slots=True)
class Currency:
    """Catalog entry from ``XML_valFull.asp``.

    ``iso_num_code`` is ``0`` and ``iso_char_code`` is empty for entries
    without ISO codes (historical or grouping codes).
    """

    id: str = xml_attribute("ID")
    name: str = xml_child("Name")
    eng_name: str = xml_child("EngName")
    nominal: int = xml_child("Nominal", parse_int, default=0)
    parent_code: str = xml_child("ParentCode", parse_trimmed)
    iso_num_code: int = xml_child("ISO_Num_Code", parse_int, default=0)
    iso_char_code: str = xml_child("ISO_Char_Code")


@dataclass(frozen=True, slots=True)
class Rate:
    """Exchange rate of one currency: ``value`` roubles per ``nominal`` units."""

    id: str = xml_attribute("ID")
    num_code: int = xml_child("NumCode", parse_int, default=0)
    char_code: str = xml_child("CharCode")
    nominal: int = xml_child("Nominal", parse_int, default=0)
    name: str = xml_child("Name")
    value: float = xml_child("Value", parse_decimal, default=0.0)


@dataclass(frozen=True, slots=True)
class Report:
    """Rates published for a single date, in document order."""

    date: date
    rates: tuple[Rate, ...] = field(default_factory=tuple)


__all__ = ["Currency", "Rate", "Report"]

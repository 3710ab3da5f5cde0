"""Map decoded CBR XML trees onto :mod:`fx_cbr.ingestion.models`."""

from __future__ import annotations

from dataclasses import fields
from typing import Any, TypeVar

from bs4 import Tag

from fx_cbr.errors import DecodeError
from fx_cbr.ingestion.fields import XML_METADATA_KEY, XmlBinding
from fx_cbr.ingestion.models import Currency, Rate, Report
from fx_cbr.utils.dates import parse_report_date

CATALOG_ROOT = "Valuta"
CATALOG_ITEM = "Item"
REPORT_ROOT = "ValCurs"
REPORT_ITEM = "Valute"
REPORT_DATE_ATTRIBUTE = "Date"

T = TypeVar("T")


def _raw_value(element: Tag, binding: XmlBinding) -> str | None:
    if binding.attribute:
        return element.get(binding.name)
    child = element.find(binding.name, recursive=False)
    if child is None:
        return None
    return child.get_text()


def decode_element(element: Tag, model: type[T]) -> T:
    """Build ``model`` from ``element`` using the bindings on its fields.

    Fields whose attribute or child element is missing keep their defaults.
    A converter failure aborts the whole element.
    """

    values: dict[str, Any] = {}
    for model_field in fields(model):  # type: ignore[arg-type]
        binding = model_field.metadata.get(XML_METADATA_KEY)
        if binding is None:
            continue
        raw = _raw_value(element, binding)
        if raw is None:
            continue
        try:
            values[model_field.name] = binding.convert(raw)
        except (TypeError, ValueError) as exc:
            raise DecodeError(
                f"Invalid {model.__name__}.{model_field.name} value {raw!r} "
                f"in <{element.name}>: {exc}"
            ) from exc
    return model(**values)


def _require_root(root: Tag, expected: str) -> None:
    if root.name != expected:
        raise DecodeError(f"Expected <{expected}> document, got <{root.name}>")


def map_currencies(root: Tag) -> list[Currency]:
    """Decode every ``Item`` of a currency catalog document."""

    _require_root(root, CATALOG_ROOT)
    return [
        decode_element(item, Currency)
        for item in root.find_all(CATALOG_ITEM, recursive=False)
    ]


def map_report(root: Tag) -> Report:
    """Decode a daily report: every ``Valute`` plus the shared ``Date``."""

    _require_root(root, REPORT_ROOT)
    rates = tuple(
        decode_element(item, Rate)
        for item in root.find_all(REPORT_ITEM, recursive=False)
    )
    raw_date = root.get(REPORT_DATE_ATTRIBUTE)
    if raw_date is None:
        raise DecodeError(f"<{REPORT_ROOT}> is missing the {REPORT_DATE_ATTRIBUTE} attribute")
    try:
        report_date = parse_report_date(raw_date)
    except ValueError as exc:
        raise DecodeError(str(exc)) from exc
    return Report(date=report_date, rates=rates)


__all__ = ["decode_element", "map_currencies", "map_report"]

"""Field-level XML bindings and scalar coercions for the CBR models.

Each dataclass field that maps onto the document carries an
:class:`XmlBinding` in its metadata. The binding names the attribute or
child element to read and the converter applied to its raw text, which is
how locale-formatted values (``49,9059``) are coerced while the generic
decoder walks an element.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from typing import Any, Callable

XML_METADATA_KEY = "fx_cbr.xml"

Converter = Callable[[str], Any]

_INT_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass(frozen=True, slots=True)
class XmlBinding:
    """Where a model field lives in the XML element and how to coerce it."""

    name: str
    attribute: bool = False
    convert: Converter = str


def parse_int(value: str) -> int:
    """Parse an integer element; blank text means the field is absent (0)."""

    cleaned = value.strip()
    if not cleaned:
        return 0
    if not _INT_RE.fullmatch(cleaned):
        raise ValueError(f"invalid integer literal {value!r}")
    return int(cleaned, 10)


def parse_decimal(value: str) -> float:
    """Parse a decimal that uses a comma as the fractional separator."""

    normalised = value.replace(",", ".", 1)
    if not _DECIMAL_RE.fullmatch(normalised):
        raise ValueError(f"invalid decimal literal {value!r}")
    return float(normalised)


def parse_trimmed(value: str) -> str:
    return value.strip()


def xml_attribute(name: str, convert: Converter = str, *, default: Any = "") -> Any:
    """Bind a dataclass field to an attribute of the element."""

    return dataclasses.field(
        default=default,
        metadata={XML_METADATA_KEY: XmlBinding(name=name, attribute=True, convert=convert)},
    )


def xml_child(name: str, convert: Converter = str, *, default: Any = "") -> Any:
    """Bind a dataclass field to the text of a direct child element."""

    return dataclasses.field(
        default=default,
        metadata={XML_METADATA_KEY: XmlBinding(name=name, convert=convert)},
    )


__all__ = [
    "XML_METADATA_KEY",
    "XmlBinding",
    "parse_int",
    "parse_decimal",
    "parse_trimmed",
    "xml_attribute",
    "xml_child",
]

"""Turn raw CBR response bodies into parsed XML trees.

The service declares its charset in the XML prologue (``windows-1251`` in
practice). The label is read once per document and resolved through a
:class:`CharsetRegistry`, so decoding does not depend on what the XML parser
would guess on its own.
"""

from __future__ import annotations

import codecs
import re
from typing import BinaryIO

from bs4 import BeautifulSoup, Tag
from bs4.dammit import EncodingDetector
from lxml import etree

from fx_cbr.errors import DecodeError

DEFAULT_CHARSET = "utf-8"
DEFAULT_ALIASES = {"windows-1251": "cp1251", "cp-1251": "cp1251"}

_XML_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")


def _is_text_encoding(info: codecs.CodecInfo) -> bool:
    # bytes-to-bytes codecs (hex, base64, zlib) are registered alongside charsets
    return getattr(info, "_is_text_encoding", True)


class CharsetRegistry:
    """Resolve charset labels to Python codecs.

    Explicit registrations win over the interpreter's codec registry, which
    already understands the common labels (``windows-1251``, ``koi8-r``).
    Only text encodings are accepted.
    """

    def __init__(self, aliases: dict[str, str] | None = None) -> None:
        self._aliases: dict[str, str] = {}
        for label, codec in (aliases or {}).items():
            self.register(label, codec)

    def register(self, label: str, codec: str) -> None:
        try:
            info = codecs.lookup(codec)
        except LookupError as exc:
            raise ValueError(f"Unknown codec {codec!r} for charset {label!r}") from exc
        if not _is_text_encoding(info):
            raise ValueError(f"Codec {codec!r} for charset {label!r} is not a text encoding")
        self._aliases[label.strip().lower()] = codec

    def lookup(self, label: str) -> codecs.CodecInfo:
        normalised = label.strip().lower()
        codec = self._aliases.get(normalised, normalised)
        try:
            info = codecs.lookup(codec)
        except LookupError as exc:
            raise DecodeError(f"Unsupported document charset: {label!r}") from exc
        if not _is_text_encoding(info):
            raise DecodeError(f"Unsupported document charset: {label!r}")
        return info


def default_charsets() -> CharsetRegistry:
    """Return a fresh registry with the aliases the CBR service needs."""

    return CharsetRegistry(DEFAULT_ALIASES)


def detect_declared_charset(raw: bytes) -> str:
    """Return the charset label from the XML prologue, defaulting to UTF-8."""

    if raw.startswith(codecs.BOM_UTF8):
        return DEFAULT_CHARSET
    declared = EncodingDetector.find_declared_encoding(raw, is_html=False)
    return declared or DEFAULT_CHARSET


def _check_well_formed(text: str) -> None:
    # BeautifulSoup drives lxml in recover mode, which silently repairs
    # truncated or mismatched markup.
    parser = etree.XMLParser(recover=False, resolve_entities=False, no_network=True)
    try:
        etree.fromstring(text.encode("utf-8"), parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise DecodeError(f"Malformed XML document: {exc}") from exc


def decode_document(
    source: bytes | BinaryIO,
    *,
    charsets: CharsetRegistry | None = None,
) -> Tag:
    """Decode ``source`` and return the root element of the document."""

    raw = source if isinstance(source, (bytes, bytearray)) else source.read()
    raw = bytes(raw)
    codec = (charsets or default_charsets()).lookup(detect_declared_charset(raw))
    try:
        text = raw.decode(codec.name)
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Document is not valid {codec.name}: {exc}") from exc

    # The declaration still names the source charset, which no longer applies.
    text = _XML_DECLARATION_RE.sub("", text.lstrip("\ufeff"), count=1)
    _check_well_formed(text)
    soup = BeautifulSoup(text, "xml")
    root = next((child for child in soup.children if isinstance(child, Tag)), None)
    if root is None:
        raise DecodeError("Document does not contain a root element")
    return root


__all__ = [
    "CharsetRegistry",
    "DEFAULT_ALIASES",
    "DEFAULT_CHARSET",
    "decode_document",
    "default_charsets",
    "detect_declared_charset",
]

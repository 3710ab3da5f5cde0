"""Public interface for the fx_cbr package."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from importlib import metadata as importlib_metadata
from typing import Callable
from urllib.parse import urlencode

import requests
from bs4 import Tag

from fx_cbr.errors import (
    CancelledError,
    CbrError,
    ConfigurationError,
    DeadlineExceededError,
    DecodeError,
    TransportError,
)
from fx_cbr.ingestion.decoder import CharsetRegistry, decode_document, default_charsets
from fx_cbr.ingestion.mapper import map_currencies, map_report
from fx_cbr.ingestion.models import Currency, Rate, Report
from fx_cbr.ingestion.transport import RequestsTransport, Transport
from fx_cbr.utils.context import FetchContext
from fx_cbr.utils.dates import format_request_date
from fx_cbr.utils.logger import get_logger

__all__ = [
    "__version__",
    "CBR_CURRENCIES_URL",
    "CBR_DAILY_URL",
    "DATE_QUERY_PARAM",
    "CbrClient",
    "ClientConfig",
    "Option",
    "with_transport",
    "with_session",
    "with_charsets",
    "FetchContext",
    "Currency",
    "Rate",
    "Report",
    "CbrError",
    "ConfigurationError",
    "TransportError",
    "CancelledError",
    "DeadlineExceededError",
    "DecodeError",
]

try:
    __version__ = importlib_metadata.version("fx-cbr")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"

LOGGER = get_logger(__name__)

CBR_CURRENCIES_URL = "https://www.cbr.ru/scripts/XML_valFull.asp"
CBR_DAILY_URL = "https://www.cbr.ru/scripts/XML_daily.asp"
DATE_QUERY_PARAM = "date_req"


@dataclass(slots=True)
class ClientConfig:
    """Settings collected from the options passed to :class:`CbrClient`."""

    transport: Transport | None = None
    charsets: CharsetRegistry = field(default_factory=default_charsets)


Option = Callable[[ClientConfig], None]


def with_transport(transport: Transport | None) -> Option:
    """Use ``transport`` for every request instead of the requests default."""

    def apply(config: ClientConfig) -> None:
        if transport is None:
            raise ConfigurationError("transport must not be None")
        config.transport = transport

    return apply


def with_session(session: requests.Session | None) -> Option:
    """Send requests through a caller-managed :class:`requests.Session`."""

    def apply(config: ClientConfig) -> None:
        if session is None:
            raise ConfigurationError("session must not be None")
        config.transport = RequestsTransport(session)

    return apply


def with_charsets(charsets: CharsetRegistry | None) -> Option:
    """Resolve document charset labels through ``charsets``."""

    def apply(config: ClientConfig) -> None:
        if charsets is None:
            raise ConfigurationError("charsets must not be None")
        config.charsets = charsets

    return apply


class CbrClient:
    """Client for the Central Bank of Russia currency XML service.

    Options are applied in order and the first invalid one aborts
    construction. Without a transport option the client talks to the
    service through a fresh :class:`RequestsTransport`. The configuration is
    never mutated after construction, so one client can serve several
    threads.
    """

    __slots__ = ("config", "_transport")

    # Provide direct access to the package version as a class attribute.
    __version__ = __version__

    def __init__(self, *options: Option) -> None:
        config = ClientConfig()
        for option in options:
            option(config)
        if config.transport is None:
            config.transport = RequestsTransport()
        self.config = config
        self._transport: Transport = config.transport

    @property
    def transport(self) -> Transport:
        return self._transport

    def get_currencies(self, context: FetchContext | None = None) -> list[Currency]:
        """Fetch the full currency catalog."""

        root = self._fetch_document(CBR_CURRENCIES_URL, context or FetchContext())
        currencies = map_currencies(root)
        LOGGER.info("Decoded %s currencies from %s", len(currencies), CBR_CURRENCIES_URL)
        return currencies

    def get_rates_report(
        self,
        context: FetchContext | None = None,
        rate_date: date | None = None,
    ) -> Report:
        """Fetch the rate report for ``rate_date``, or the latest one when omitted."""

        url = self.build_report_url(rate_date)
        report = map_report(self._fetch_document(url, context or FetchContext()))
        LOGGER.info("Decoded %s rates for %s", len(report.rates), report.date.isoformat())
        return report

    @staticmethod
    def build_report_url(rate_date: date | None = None) -> str:
        if rate_date is None:
            return CBR_DAILY_URL
        query = urlencode({DATE_QUERY_PARAM: format_request_date(rate_date)})
        return f"{CBR_DAILY_URL}?{query}"

    def _fetch_document(self, url: str, context: FetchContext) -> Tag:
        context.raise_if_cancelled()
        LOGGER.debug("GET %s", url)
        body = self.transport.get(url, context)
        context.raise_if_cancelled()
        return decode_document(body, charsets=self.config.charsets)

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "CbrClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

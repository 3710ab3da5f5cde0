"""HTTP transports used by :class:`fx_cbr.CbrClient`."""

from __future__ import annotations

from typing import BinaryIO, Protocol

import requests

from fx_cbr.errors import DeadlineExceededError, TransportError
from fx_cbr.utils.context import FetchContext
from fx_cbr.utils.logger import get_logger

LOGGER = get_logger(__name__)
DEFAULT_USER_AGENT = "fx-cbr/1.0"


class Transport(Protocol):
    """Contract for performing a single GET.

    Implementations return the response body, either as bytes or as a
    readable binary stream, and raise :class:`TransportError` (or
    :class:`CancelledError`) on failure.
    """

    def get(self, url: str, context: FetchContext) -> bytes | BinaryIO:
        ...  # pragma: no cover - protocol definition


class RequestsTransport:
    """Blocking GET over a :class:`requests.Session`.

    The body is streamed so that a cancelled context stops the download
    between chunks. The context deadline, when set, becomes the requests
    timeout; otherwise the request may block indefinitely.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        chunk_size: int = 8192,
        check_status: bool = True,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = DEFAULT_USER_AGENT
        else:
            session.headers.setdefault("User-Agent", DEFAULT_USER_AGENT)
        self.session = session
        self.chunk_size = chunk_size
        self.check_status = check_status

    def get(self, url: str, context: FetchContext) -> bytes:
        context.raise_if_cancelled()
        try:
            response = self.session.get(url, stream=True, timeout=context.remaining())
        except requests.Timeout as exc:
            if context.expired:
                raise DeadlineExceededError(f"Deadline exceeded while requesting {url}") from exc
            raise TransportError(f"Timed out requesting {url}: {exc}") from exc
        except requests.RequestException as exc:
            LOGGER.warning("GET %s failed: %s", url, exc)
            raise TransportError(f"GET {url} failed: {exc}") from exc

        with response:
            if self.check_status:
                self._raise_with_context(response, url)
            chunks: list[bytes] = []
            try:
                for chunk in response.iter_content(chunk_size=self.chunk_size):
                    context.raise_if_cancelled()
                    chunks.append(chunk)
            except requests.RequestException as exc:
                LOGGER.warning("Reading body of %s failed: %s", url, exc)
                raise TransportError(f"Reading body of {url} failed: {exc}") from exc
        return b"".join(chunks)

    @staticmethod
    def _raise_with_context(response: requests.Response, url: str) -> None:
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = response.status_code
            LOGGER.warning("CBR responded with HTTP %s for %s", status, url)
            raise TransportError(
                f"CBR responded with HTTP {status} for {url}", status_code=status
            ) from exc

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["Transport", "RequestsTransport", "DEFAULT_USER_AGENT"]

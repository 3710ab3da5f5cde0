from __future__ import annotations

import pytest
import requests

from fx_cbr.errors import CancelledError, DeadlineExceededError, TransportError
from fx_cbr.ingestion.transport import DEFAULT_USER_AGENT, RequestsTransport
from fx_cbr.utils.context import FetchContext

URL = "https://www.cbr.ru/scripts/XML_daily.asp"


class _DummyResponse:
    def __init__(self, *, status_code: int = 200, chunks=(b"<ValCurs/>",)) -> None:
        self.status_code = status_code
        self.chunks = chunks
        self.closed = False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def iter_content(self, chunk_size: int = 1):
        yield from self.chunks

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "_DummyResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class _DummySession:
    def __init__(self, response: _DummyResponse | None = None, exc: Exception | None = None) -> None:
        self.response = response or _DummyResponse()
        self.exc = exc
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, dict]] = []
        self.closed = False

    def get(self, url: str, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response

    def close(self) -> None:
        self.closed = True


def test_get_streams_and_joins_body() -> None:
    response = _DummyResponse(chunks=(b"<ValCurs ", b'Date="22.08.2015"/>'))
    session = _DummySession(response)
    transport = RequestsTransport(session)

    body = transport.get(URL, FetchContext())

    assert body == b'<ValCurs Date="22.08.2015"/>'
    assert session.calls == [(URL, {"stream": True, "timeout": None})]
    assert session.headers["User-Agent"] == DEFAULT_USER_AGENT
    assert response.closed


def test_get_passes_context_deadline_as_timeout() -> None:
    session = _DummySession()

    RequestsTransport(session).get(URL, FetchContext(timeout=20))

    timeout = session.calls[0][1]["timeout"]
    assert 0 < timeout <= 20


def test_get_with_cancelled_context_skips_request() -> None:
    session = _DummySession()
    ctx = FetchContext()
    ctx.cancel()

    with pytest.raises(CancelledError):
        RequestsTransport(session).get(URL, ctx)
    assert session.calls == []


def test_get_aborts_when_cancelled_mid_stream() -> None:
    ctx = FetchContext()

    def chunks():
        yield b"<ValCurs>"
        ctx.cancel()
        yield b"</ValCurs>"

    session = _DummySession(_DummyResponse(chunks=chunks()))

    with pytest.raises(CancelledError):
        RequestsTransport(session).get(URL, ctx)


def test_get_raises_transport_error_for_http_status() -> None:
    session = _DummySession(_DummyResponse(status_code=503))

    with pytest.raises(TransportError) as excinfo:
        RequestsTransport(session).get(URL, FetchContext())
    assert excinfo.value.status_code == 503
    assert not isinstance(excinfo.value, CancelledError)


def test_get_can_skip_status_check() -> None:
    session = _DummySession(_DummyResponse(status_code=500, chunks=(b"<html/>",)))

    body = RequestsTransport(session, check_status=False).get(URL, FetchContext())

    assert body == b"<html/>"


def test_get_wraps_connection_errors() -> None:
    session = _DummySession(exc=requests.ConnectionError("connection refused"))

    with pytest.raises(TransportError, match="connection refused") as excinfo:
        RequestsTransport(session).get(URL, FetchContext())
    assert not isinstance(excinfo.value, CancelledError)


def test_get_timeout_without_deadline_is_plain_transport_error() -> None:
    session = _DummySession(exc=requests.ReadTimeout("read timed out"))

    with pytest.raises(TransportError) as excinfo:
        RequestsTransport(session).get(URL, FetchContext())
    assert not isinstance(excinfo.value, DeadlineExceededError)


def test_get_timeout_after_deadline_is_deadline_exceeded(monkeypatch) -> None:
    ctx = FetchContext(timeout=5)
    session = _DummySession(exc=requests.ReadTimeout("read timed out"))
    monkeypatch.setattr(FetchContext, "expired", property(lambda self: True))
    monkeypatch.setattr(FetchContext, "raise_if_cancelled", lambda self: None)

    with pytest.raises(DeadlineExceededError):
        RequestsTransport(session).get(URL, ctx)


def test_close_leaves_caller_session_open() -> None:
    session = _DummySession()

    with RequestsTransport(session):
        pass

    assert not session.closed


def test_chunk_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        RequestsTransport(_DummySession(), chunk_size=0)

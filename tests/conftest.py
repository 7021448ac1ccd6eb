"""
Pytest configuration for minihttp tests.

This file contains shared fixtures and configuration
for all tests in the project.
"""

import socket
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, ContextManager, Iterator, List, Optional, Tuple

import h11
import pytest

from minihttp.network.mock import MockNetworkStream


@dataclass
class ParsedRequest:
    """A request as understood by h11, used as the reference parser."""
    method: bytes
    target: bytes
    headers: List[Tuple[bytes, bytes]]
    body: bytes = b""


def parse_with_h11(data: bytes) -> ParsedRequest:
    """Parse raw request bytes with h11 acting as a server."""
    connection = h11.Connection(h11.SERVER)
    connection.receive_data(data)

    parsed: Optional[ParsedRequest] = None
    body = b""
    while True:
        event = connection.next_event()
        if isinstance(event, h11.Request):
            parsed = ParsedRequest(
                method=event.method,
                target=event.target,
                headers=list(event.headers),
            )
        elif isinstance(event, h11.Data):
            body += event.data
        elif isinstance(event, h11.EndOfMessage):
            break
        else:
            raise AssertionError(f"unexpected h11 event {event!r}")

    assert parsed is not None
    parsed.body = body
    return parsed


@dataclass
class LoopbackServer:
    """Details of a one-shot server started by the ``http_server`` fixture."""
    host: str = "127.0.0.1"
    port: int = 0
    requests: List[ParsedRequest] = field(default_factory=list)

    @property
    def url(self) -> str:
        return f"{self.host}:{self.port}"


def _read_request(sock: socket.socket) -> ParsedRequest:
    connection = h11.Connection(h11.SERVER)
    parsed: Optional[ParsedRequest] = None
    body = b""
    while True:
        event = connection.next_event()
        if event is h11.NEED_DATA:
            connection.receive_data(sock.recv(65536))
            continue
        if isinstance(event, h11.Request):
            parsed = ParsedRequest(event.method, event.target, list(event.headers))
        elif isinstance(event, h11.Data):
            body += event.data
        elif isinstance(event, (h11.EndOfMessage, h11.ConnectionClosed)):
            break

    assert parsed is not None
    parsed.body = body
    return parsed


@pytest.fixture
def http_server() -> Callable[..., ContextManager[LoopbackServer]]:
    """
    Start a loopback server that answers one request with raw bytes.

    ``response`` is written verbatim after the request has been read; the
    connection is then closed, which is what EOF-framed bodies rely on.
    """
    @contextmanager
    def _factory(response: bytes, chunks: Optional[List[bytes]] = None) -> Iterator[LoopbackServer]:
        details = LoopbackServer()
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        listener.settimeout(5.0)
        details.host, details.port = listener.getsockname()

        def serve() -> None:
            try:
                client, _ = listener.accept()
            except OSError:
                return
            with client:
                client.settimeout(5.0)
                details.requests.append(_read_request(client))
                for chunk in chunks or [response]:
                    client.sendall(chunk)

        thread = threading.Thread(target=serve, daemon=True)
        thread.start()
        try:
            yield details
        finally:
            thread.join(timeout=5.0)
            listener.close()

    return _factory


@pytest.fixture
def mock_stream():
    """Create a mock network stream loaded with response bytes."""
    def _create_stream(data: bytes = b"", **kwargs) -> MockNetworkStream:
        return MockNetworkStream(data, **kwargs)
    return _create_stream


@pytest.fixture
def sample_headers():
    """Sample headers for testing."""
    return [
        (b"Content-Type", b"application/json"),
        (b"Authorization", b"Bearer token123"),
        (b"User-Agent", b"minihttp/0.1.0"),
        (b"Accept", b"*/*"),
    ]


@pytest.fixture
def ok_response() -> bytes:
    """A 200 response with an 11-byte Content-Length body."""
    return (
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Length: 11\r\n"
        b"Server: loopback\r\n"
        b"\r\n"
        b"Hello World"
    )


@pytest.fixture
def reference_parser() -> Callable[[bytes], ParsedRequest]:
    """h11-backed request parser for checking serialized requests."""
    return parse_with_h11

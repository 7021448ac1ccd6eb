"""
Convenience entry points for minihttp.

``send`` opens a fresh connection for a single request, hands it to an
HTTP11Connection and returns the parsed response. Nothing is pooled,
redirected or retried.
"""

import logging
import socket
import ssl
from typing import Optional, Union

from .exceptions import InvalidRequestError, TimeoutError, TransportError
from .http11 import HTTP11Connection
from .http_primitives import Body, HeaderInput, Method, Request, Response
from .network.backend import NetworkBackend
from .network.stream import NetworkStream
from .network.sync import SyncNetworkBackend

logger = logging.getLogger(__name__)


def send(
    request: Request,
    backend: Optional[NetworkBackend] = None,
    timeout: Optional[float] = None,
    ssl_context: Optional[ssl.SSLContext] = None,
) -> Response:
    """
    Send a request over a new connection and read the full response.

    Args:
        request: The request to send; it is consumed
        backend: Connection factory, blocking sockets by default
        timeout: Socket timeout in seconds for connect, write and each read
        ssl_context: Context for ``https`` requests

    Returns:
        The parsed response

    Raises:
        InvalidRequestError: Before any I/O, if the request cannot be sent
        TransportError: If connecting, writing or reading fails
        MalformedResponseError: If the response cannot be parsed
    """
    # Surface request defects before touching the network
    request.to_bytes()
    if request.is_consumed:
        raise InvalidRequestError("request has already been sent")

    hostname = request.hostname.decode()
    port = request.connect_port
    backend = backend or SyncNetworkBackend()

    stream = _open_stream(backend, request, hostname, port, timeout, ssl_context)
    connection = HTTP11Connection(stream)
    return connection.handle_request(request)


def _open_stream(
    backend: NetworkBackend,
    request: Request,
    hostname: str,
    port: int,
    timeout: Optional[float],
    ssl_context: Optional[ssl.SSLContext],
) -> NetworkStream:
    logger.debug(f"Connecting to {hostname}:{port} ({request.scheme.decode()})")

    try:
        stream = backend.connect_tcp(hostname, port, timeout=timeout)
    except socket.timeout as e:
        raise TimeoutError(f"connect to {hostname}:{port}", timeout=timeout, cause=e) from e
    except OSError as e:
        raise TransportError(f"connect to {hostname}:{port} failed: {e}", cause=e) from e

    if request.scheme != b"https":
        return stream

    try:
        return backend.connect_tls(stream, hostname, ssl_context)
    except OSError as e:
        stream.close()
        raise TransportError(f"TLS handshake with {hostname} failed: {e}", cause=e) from e


def request(
    method: Union[Method, str, bytes],
    url: Union[str, bytes],
    headers: Optional[HeaderInput] = None,
    body: Optional[Body] = None,
    backend: Optional[NetworkBackend] = None,
    timeout: Optional[float] = None,
    ssl_context: Optional[ssl.SSLContext] = None,
) -> Response:
    """Build and send a request in one call."""
    return send(
        Request.create(method, url, headers=headers, body=body),
        backend=backend,
        timeout=timeout,
        ssl_context=ssl_context,
    )


def get(url: Union[str, bytes], headers: Optional[HeaderInput] = None, **kwargs) -> Response:
    return request(Method.GET, url, headers=headers, **kwargs)


def head(url: Union[str, bytes], headers: Optional[HeaderInput] = None, **kwargs) -> Response:
    return request(Method.HEAD, url, headers=headers, **kwargs)


def delete(url: Union[str, bytes], headers: Optional[HeaderInput] = None, **kwargs) -> Response:
    return request(Method.DELETE, url, headers=headers, **kwargs)


def post(
    url: Union[str, bytes],
    body: Body,
    headers: Optional[HeaderInput] = None,
    **kwargs,
) -> Response:
    return request(Method.POST, url, headers=headers, body=body, **kwargs)


def put(
    url: Union[str, bytes],
    body: Body,
    headers: Optional[HeaderInput] = None,
    **kwargs,
) -> Response:
    return request(Method.PUT, url, headers=headers, body=body, **kwargs)


def patch(
    url: Union[str, bytes],
    body: Body,
    headers: Optional[HeaderInput] = None,
    **kwargs,
) -> Response:
    return request(Method.PATCH, url, headers=headers, body=body, **kwargs)

"""
HTTP/1.1 request serialization for minihttp.

The builder is a faithful transcription layer, not a validator: header
names and values are written exactly as given, in the order given, with
no case normalization and no deduplication. The only headers it adds are
``Host`` (always, first) and ``Content-Length`` (last, when a body is
present). A caller-supplied ``Content-Length`` is therefore emitted in
addition to the computed one.
"""

from typing import Iterable, Optional, Tuple, Union

from .exceptions import InvalidRequestError

CRLF = b"\r\n"
HTTP_VERSION = b"HTTP/1.1"


def as_bytes(value: Union[str, bytes]) -> bytes:
    """Encode str values as UTF-8, pass bytes through."""
    if isinstance(value, str):
        return value.encode()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"expected str or bytes, got {type(value).__name__}")


def normalize_path(path: Union[str, bytes, None]) -> bytes:
    """Default an empty path to ``/`` and enforce a leading slash."""
    if path is None:
        return b"/"
    path = as_bytes(path)
    if not path:
        return b"/"
    if not path.startswith(b"/"):
        path = b"/" + path
    return path


def build_request(
    method: Union[str, bytes],
    host: Union[str, bytes],
    path: Union[str, bytes, None] = None,
    headers: Optional[Iterable[Tuple[Union[str, bytes], Union[str, bytes]]]] = None,
    body: Optional[Union[str, bytes]] = None,
) -> bytes:
    """
    Serialize a request to HTTP/1.1 wire bytes.

    Args:
        method: Request method token, sent verbatim
        host: Value of the Host header, port included if any
        path: Request target; ``/`` when empty, leading ``/`` enforced
        headers: Ordered (name, value) pairs
        body: Optional body, framed with Content-Length

    Returns:
        The complete request message

    Raises:
        InvalidRequestError: If host is empty
    """
    host = as_bytes(host)
    if not host:
        raise InvalidRequestError("host must not be empty")

    lines = [
        b" ".join((as_bytes(method), normalize_path(path), HTTP_VERSION)),
        b"Host: " + host,
    ]
    for name, value in headers or ():
        lines.append(as_bytes(name) + b": " + as_bytes(value))

    payload = b""
    if body is not None:
        payload = as_bytes(body)
        lines.append(b"Content-Length: " + str(len(payload)).encode())

    return CRLF.join(lines) + CRLF + CRLF + payload

"""
HTTP primitives for minihttp.

This module defines the core data structures for HTTP requests and responses.
A Request is a builder that accumulates headers until it is sent; a Response
is an immutable value produced only by the response parser.
"""

import re
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Iterable,
    List,
    NamedTuple,
    Optional,
    Tuple,
    Union,
)
from dataclasses import dataclass, field

from .builder import as_bytes, build_request, normalize_path
from .exceptions import InvalidRequestError
from .network.utils import validate_port

if TYPE_CHECKING:
    import ssl

    from .network.backend import NetworkBackend


# Type aliases for better readability
Headers = List[Tuple[bytes, bytes]]
HeaderInput = Iterable[Tuple[Union[str, bytes], Union[str, bytes]]]
StatusCode = int
Body = Union[str, bytes]

DEFAULT_PORTS = {b"http": 80, b"https": 443}

_URL_PATTERN = re.compile(
    r"^(?:(?P<scheme>[A-Za-z][A-Za-z0-9+.\-]*)://)?"
    r"(?P<authority>(?P<hostname>\[[^\]]*\]|[^/:?#\[\]]*)(?::(?P<port>[^/?#]*))?)"
    r"(?P<path>[/?#].*)?$",
    re.DOTALL,
)


class Method(str, Enum):
    """Well-known HTTP methods. Any other token is accepted verbatim."""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"


class URLComponents(NamedTuple):
    """
    Immutable representation of URL components.

    ``host`` is the authority as written (hostname plus optional port) and
    is what goes into the Host header; ``hostname`` and ``port`` are what
    the transport connects to.
    """
    scheme: bytes
    host: bytes
    hostname: bytes
    port: int
    path: bytes

    @classmethod
    def from_url(cls, url: Union[str, bytes]) -> "URLComponents":
        """Create URLComponents from a ``[scheme://]host[:port][/path]`` string."""
        if isinstance(url, bytes):
            try:
                url = url.decode()
            except UnicodeDecodeError as e:
                raise InvalidRequestError(f"cannot decode URL {url!r}", cause=e) from e

        match = _URL_PATTERN.match(url.strip())
        if match is None or not match.group("hostname"):
            raise InvalidRequestError(f"cannot parse host from {url!r}")

        scheme = (match.group("scheme") or "http").lower().encode()
        if scheme not in DEFAULT_PORTS:
            raise InvalidRequestError(f"unsupported scheme {scheme.decode()!r}")

        hostname = match.group("hostname")
        if hostname.startswith("["):
            hostname = hostname[1:-1]

        port_text = match.group("port")
        if port_text is None:
            port = DEFAULT_PORTS[scheme]
        else:
            try:
                port = validate_port(port_text)
            except ValueError as e:
                raise InvalidRequestError(str(e), cause=e) from e

        path = match.group("path") or ""
        path = path.split("#", 1)[0]

        return cls(
            scheme=scheme,
            host=match.group("authority").encode(),
            hostname=hostname.encode(),
            port=port,
            path=normalize_path(path),
        )


@dataclass
class Request:
    """
    HTTP request builder.

    Headers are kept as an append-only ordered list of (name, value) pairs:
    duplicates are permitted and nothing is normalized. Once the request has
    been handed to ``send`` it is consumed: attribute assignment and the
    fluent setters raise InvalidRequestError. The wire bytes are produced
    before consumption, so in-place edits of the headers list afterwards
    never reach the network.
    """

    method: bytes
    host: bytes
    path: bytes = b"/"
    headers: Headers = field(default_factory=list)
    body: Optional[bytes] = None
    scheme: bytes = b"http"
    port: Optional[int] = None
    _consumed: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Coerce str inputs to bytes."""
        self.method = as_bytes(self.method)
        self.host = as_bytes(self.host)
        self.path = normalize_path(self.path)
        self.headers = [(as_bytes(name), as_bytes(value)) for name, value in self.headers]
        if self.body is not None:
            self.body = as_bytes(self.body)
        self.scheme = as_bytes(self.scheme).lower()

    def __setattr__(self, name: str, value) -> None:
        if getattr(self, "_consumed", False):
            raise InvalidRequestError("request has already been sent")
        super().__setattr__(name, value)

    @classmethod
    def new(cls, url: Union[str, bytes], method: Union[Method, str, bytes]) -> "Request":
        """Create a request for a URL-style target such as ``localhost:8000/x``."""
        components = URLComponents.from_url(url)
        return cls(
            method=as_bytes(method),
            host=components.host,
            path=components.path,
            scheme=components.scheme,
            port=components.port,
        )

    @classmethod
    def create(
        cls,
        method: Union[Method, str, bytes],
        url: Union[str, bytes, URLComponents],
        headers: Optional[HeaderInput] = None,
        body: Optional[Body] = None,
    ) -> "Request":
        """
        Create a Request with proper type conversion.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: URL string or URLComponents
            headers: Optional iterable of (name, value) header tuples
            body: Optional request body

        Returns:
            New Request instance
        """
        if not isinstance(url, URLComponents):
            url = URLComponents.from_url(url)

        return cls(
            method=as_bytes(method),
            host=url.host,
            path=url.path,
            headers=list(headers or []),
            body=body,
            scheme=url.scheme,
            port=url.port,
        )

    @classmethod
    def get(cls, url: Union[str, bytes]) -> "Request":
        return cls.new(url, Method.GET)

    @classmethod
    def head(cls, url: Union[str, bytes]) -> "Request":
        return cls.new(url, Method.HEAD)

    @classmethod
    def delete(cls, url: Union[str, bytes]) -> "Request":
        return cls.new(url, Method.DELETE)

    @classmethod
    def options(cls, url: Union[str, bytes]) -> "Request":
        return cls.new(url, Method.OPTIONS)

    @classmethod
    def trace(cls, url: Union[str, bytes]) -> "Request":
        return cls.new(url, Method.TRACE)

    @classmethod
    def connect(cls, url: Union[str, bytes]) -> "Request":
        return cls.new(url, Method.CONNECT)

    @classmethod
    def post(cls, url: Union[str, bytes], body: Body) -> "Request":
        return cls.new(url, Method.POST).set_body(body)

    @classmethod
    def put(cls, url: Union[str, bytes], body: Body) -> "Request":
        return cls.new(url, Method.PUT).set_body(body)

    @classmethod
    def patch(cls, url: Union[str, bytes], body: Body) -> "Request":
        return cls.new(url, Method.PATCH).set_body(body)

    def header(self, name: Union[str, bytes], value: Union[str, bytes]) -> "Request":
        """Append a header. Values are not validated."""
        self._ensure_not_consumed()
        self.headers.append((as_bytes(name), as_bytes(value)))
        return self

    def set_body(self, body: Optional[Body]) -> "Request":
        """Replace the request body; ``None`` removes it."""
        self._ensure_not_consumed()
        self.body = None if body is None else as_bytes(body)
        return self

    def to_bytes(self) -> bytes:
        """Serialize the request to its HTTP/1.1 wire representation."""
        return build_request(self.method, self.host, self.path, self.headers, self.body)

    def send(
        self,
        backend: Optional["NetworkBackend"] = None,
        timeout: Optional[float] = None,
        ssl_context: Optional["ssl.SSLContext"] = None,
    ) -> "Response":
        """Send the request over a fresh connection and return the response."""
        from .client import send

        return send(self, backend=backend, timeout=timeout, ssl_context=ssl_context)

    def consume(self) -> None:
        """Mark the request as handed to the transport."""
        self._ensure_not_consumed()
        self._consumed = True

    @property
    def is_consumed(self) -> bool:
        return self._consumed

    @property
    def hostname(self) -> bytes:
        """The host without any port, brackets stripped from IPv6 literals."""
        return URLComponents.from_url(self.host).hostname

    @property
    def connect_port(self) -> int:
        """The port to connect to: explicit, from the host, or the scheme default."""
        if self.port is not None:
            return self.port
        return URLComponents.from_url(self.scheme + b"://" + self.host).port

    def _ensure_not_consumed(self) -> None:
        if self._consumed:
            raise InvalidRequestError("request has already been sent")


@dataclass(frozen=True)
class Response:
    """
    Immutable HTTP response representation.

    Only the response parser constructs these; the body has already been
    read in full according to the message framing.
    """

    status: StatusCode
    headers: Headers = field(default_factory=list)
    body: bytes = b""
    reason: bytes = b""
    version: bytes = b"HTTP/1.1"

    def __post_init__(self) -> None:
        """Validate response data after initialization."""
        if not isinstance(self.status, int):
            raise ValueError("status must be int")

        if not isinstance(self.headers, list):
            raise ValueError("headers must be a list")

        for name, value in self.headers:
            if not isinstance(name, bytes) or not isinstance(value, bytes):
                raise ValueError("header names and values must be bytes")

        if not isinstance(self.body, bytes):
            raise ValueError("body must be bytes")

    def get_header(self, name: Union[str, bytes]) -> Optional[bytes]:
        """Get the first header value by name (case-insensitive)."""
        values = self.get_headers(name)
        return values[0] if values else None

    def get_headers(self, name: Union[str, bytes]) -> List[bytes]:
        """Get every value for a header name, in the order received."""
        name_lower = as_bytes(name).lower()
        return [
            header_value
            for header_name, header_value in self.headers
            if header_name.lower() == name_lower
        ]

    def has_header(self, name: Union[str, bytes]) -> bool:
        """Check if a header exists (case-insensitive)."""
        return self.get_header(name) is not None

    def text(self, encoding: str = "utf-8") -> str:
        """Decode the body."""
        return self.body.decode(encoding)

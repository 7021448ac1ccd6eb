"""
minihttp - a minimal blocking HTTP/1.1 client

Builds requests into exact HTTP/1.1 wire bytes, sends them over a
byte-stream transport, and parses the reply with an incremental,
all-or-nothing response parser. One request, one connection.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

# Import main components for easy access
from .http_primitives import Method, Request, Response, URLComponents
from .builder import build_request
from .parser import BodyFraming, ParserState, ResponseParser, parse_response
from .http11 import HTTP11Connection, ConnectionState
from .client import send, request, get, head, delete, post, put, patch
from .exceptions import (
    HTTPCoreError,
    InvalidRequestError,
    MalformedResponseError,
    TimeoutError,
    TransportError,
)

__all__ = [
    "Method",
    "Request",
    "Response",
    "URLComponents",
    "build_request",
    "BodyFraming",
    "ParserState",
    "ResponseParser",
    "parse_response",
    "HTTP11Connection",
    "ConnectionState",
    "send",
    "request",
    "get",
    "head",
    "delete",
    "post",
    "put",
    "patch",
    "HTTPCoreError",
    "InvalidRequestError",
    "MalformedResponseError",
    "TimeoutError",
    "TransportError",
]

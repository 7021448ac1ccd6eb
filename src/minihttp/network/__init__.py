"""
Network backend components for minihttp.

This module provides the byte-stream transport abstractions the HTTP/1.1
core reads from and writes to, plus blocking socket and in-memory
implementations.
"""

from .backend import NetworkBackend
from .stream import NetworkStream
from .mock import MockNetworkBackend, MockNetworkStream
from .sync import SocketStream, SyncNetworkBackend
from .utils import (
    create_socket,
    create_ssl_context,
    set_socket_timeout,
    validate_port,
)

__all__ = [
    "NetworkBackend", 
    "NetworkStream",
    "MockNetworkBackend", 
    "MockNetworkStream",
    "SocketStream",
    "SyncNetworkBackend",
    "create_socket",
    "create_ssl_context",
    "set_socket_timeout",
    "validate_port",
]

"""
Blocking socket implementation of the network interfaces.

This is the default transport used by ``minihttp.client.send``. All calls
block the calling thread; the socket timeout is the only timer involved.
"""

import logging
import socket
import ssl
from typing import Any, Optional

from .backend import NetworkBackend
from .stream import NetworkStream
from .utils import create_socket, create_ssl_context, set_socket_timeout

logger = logging.getLogger(__name__)


class SocketStream(NetworkStream):
    """NetworkStream over a connected (optionally TLS-wrapped) socket."""
    
    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._closed = False
    
    def read(self, max_bytes: int) -> bytes:
        if self._closed:
            raise OSError("Stream is closed")
        return self._sock.recv(max_bytes)
    
    def write(self, data: bytes) -> None:
        if self._closed:
            raise OSError("Stream is closed")
        self._sock.sendall(data)
    
    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.close()
        except OSError as e:
            logger.debug(f"Error while closing socket: {e}")
    
    def get_extra_info(self, name: str) -> Optional[Any]:
        if name == "socket":
            return self._sock
        if name == "ssl_object":
            return self._sock if isinstance(self._sock, ssl.SSLSocket) else None
        if name == "timeout":
            return self._sock.gettimeout()
        try:
            if name == "peername":
                return self._sock.getpeername()
            if name == "sockname":
                return self._sock.getsockname()
        except OSError:
            return None
        return None
    
    @property
    def is_closed(self) -> bool:
        return self._closed


class SyncNetworkBackend(NetworkBackend):
    """
    Backend opening blocking TCP and TLS connections.
    
    Name resolution is left to the operating system resolver.
    """
    
    DEFAULT_CONNECT_TIMEOUT = 30.0
    
    def __init__(
        self,
        connect_timeout: Optional[float] = None,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        self._connect_timeout = connect_timeout or self.DEFAULT_CONNECT_TIMEOUT
        self._ssl_context = ssl_context
    
    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> SocketStream:
        connect_timeout = timeout or self._connect_timeout
        sock = create_socket(host, port, timeout=connect_timeout)
        
        # The per-request timeout (or blocking mode) governs reads and writes
        set_socket_timeout(sock, timeout)
        
        logger.debug(f"Connected to {host}:{port}")
        return SocketStream(sock)
    
    def connect_tls(
        self,
        stream: NetworkStream,
        host: str,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> SocketStream:
        context = ssl_context or self._ssl_context or create_ssl_context()
        sock = stream.get_extra_info("socket")
        if sock is None:
            raise OSError("TLS requires a socket-backed stream")
        
        tls_sock = context.wrap_socket(sock, server_hostname=host)
        logger.debug(f"TLS established with {host} ({tls_sock.version()})")
        return SocketStream(tls_sock)

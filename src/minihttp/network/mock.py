"""
Mock network implementations for testing.

This module provides in-memory implementations of NetworkStream and
NetworkBackend so the HTTP/1.1 core can be exercised without sockets.
"""

import ssl
from typing import Any, Dict, List, Optional, Tuple

from .backend import NetworkBackend
from .stream import NetworkStream


class MockNetworkStream(NetworkStream):
    """
    Mock network stream for testing.
    
    Serves canned response bytes, records everything written, and can
    fragment reads or fail with an injected error.
    """
    
    def __init__(
        self,
        data: bytes = b"",
        chunk_size: Optional[int] = None,
        read_error: Optional[OSError] = None,
        write_error: Optional[OSError] = None,
    ):
        """
        Initialize the mock stream.
        
        Args:
            data: Initial data to be available for reading.
            chunk_size: Upper bound on bytes returned per read, to
                        simulate data arriving in pieces.
            read_error: Raised by ``read`` once the data is exhausted.
            write_error: Raised by every ``write``.
        """
        self._data = data
        self._position = 0
        self._chunk_size = chunk_size
        self._read_error = read_error
        self._write_error = write_error
        self._closed = False
        self._extra_info: Dict[str, Any] = {}
        self._write_buffer: List[bytes] = []
        self.read_calls = 0
    
    def read(self, max_bytes: int) -> bytes:
        """
        Read data from the mock stream.
        
        Returns ``b""`` once all data has been served, unless a read
        error was configured.
        
        Raises:
            OSError: If the stream is closed or a read error was configured.
        """
        if self._closed:
            raise OSError("Stream is closed")
        
        self.read_calls += 1
        if self._position >= len(self._data):
            if self._read_error is not None:
                raise self._read_error
            return b""
        
        if self._chunk_size is not None:
            max_bytes = min(max_bytes, self._chunk_size)
        end = min(self._position + max_bytes, len(self._data))
        result = self._data[self._position:end]
        self._position = end
        
        return result
    
    def write(self, data: bytes) -> None:
        """
        Write data to the mock stream.
        
        Raises:
            OSError: If the stream is closed or a write error was configured.
        """
        if self._closed:
            raise OSError("Stream is closed")
        if self._write_error is not None:
            raise self._write_error
        
        self._write_buffer.append(bytes(data))
    
    def close(self) -> None:
        """Close the mock stream."""
        self._closed = True
    
    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._extra_info.get(name)
    
    @property
    def is_closed(self) -> bool:
        """Check if the mock stream is closed."""
        return self._closed
    
    @property
    def written_data(self) -> bytes:
        """Get all data that was written to the stream."""
        return b"".join(self._write_buffer)
    
    def set_extra_info(self, name: str, value: Any) -> None:
        self._extra_info[name] = value
    
    def add_data(self, data: bytes) -> None:
        """
        Add data to be available for reading.
        
        Args:
            data: The data to add.
        """
        self._data += data


class MockNetworkBackend(NetworkBackend):
    """
    Mock network backend for testing.
    
    Every connection gets a fresh MockNetworkStream pre-loaded with the
    response registered for its (host, port).
    """
    
    def __init__(self, chunk_size: Optional[int] = None):
        """Initialize the mock backend."""
        self._responses: Dict[Tuple[str, int], bytes] = {}
        self._connect_errors: Dict[Tuple[str, int], OSError] = {}
        self._chunk_size = chunk_size
        self.connections: List[MockNetworkStream] = []
        self.connect_calls: List[Tuple[str, int, Optional[float]]] = []
    
    def add_response(self, host: str, port: int, data: bytes) -> None:
        """Register the raw bytes served to connections to (host, port)."""
        self._responses[(host, port)] = data
    
    def fail_connect(self, host: str, port: int, error: OSError) -> None:
        """Make connections to (host, port) fail with ``error``."""
        self._connect_errors[(host, port)] = error
    
    def connect_tcp(
        self, 
        host: str, 
        port: int, 
        timeout: Optional[float] = None
    ) -> MockNetworkStream:
        """
        Create a mock TCP connection.
        
        Raises:
            OSError: If a connect error was registered for (host, port).
        """
        key = (host, port)
        self.connect_calls.append((host, port, timeout))
        
        if key in self._connect_errors:
            raise self._connect_errors[key]
        
        stream = MockNetworkStream(self._responses.get(key, b""), chunk_size=self._chunk_size)
        stream.set_extra_info("peername", key)
        stream.set_extra_info("sockname", ("127.0.0.1", 12345))
        self.connections.append(stream)
        
        return stream
    
    def connect_tls(
        self,
        stream: NetworkStream,
        host: str,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> NetworkStream:
        """Mark the mock stream as TLS without wrapping anything."""
        if isinstance(stream, MockNetworkStream):
            stream.set_extra_info("ssl_object", True)
            stream.set_extra_info("server_hostname", host)
            stream.set_extra_info("ssl_context", ssl_context)
        return stream
    
    @property
    def last_connection(self) -> Optional[MockNetworkStream]:
        return self.connections[-1] if self.connections else None

"""
Network stream interface for minihttp.

This module defines the NetworkStream interface: the byte-stream
transport collaborator the HTTP/1.1 core writes requests to and reads
responses from.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class NetworkStream(ABC):
    """
    Interface for blocking, ordered byte streams.
    
    Implementations must distinguish end-of-stream (``read`` returns
    ``b""``) from I/O failure (``read`` raises ``OSError``).
    """
    
    @abstractmethod
    def read(self, max_bytes: int) -> bytes:
        """
        Read data from the stream, blocking until some is available.
        
        Args:
            max_bytes: Maximum number of bytes to read.
        
        Returns:
            Up to ``max_bytes`` bytes, or ``b""`` once the peer has closed.
        
        Raises:
            OSError: If a network error occurs.
        """
        pass
    
    @abstractmethod
    def write(self, data: bytes) -> None:
        """
        Write all of ``data`` to the stream.
        
        Raises:
            OSError: If a network error occurs.
        """
        pass
    
    @abstractmethod
    def close(self) -> None:
        """Close the stream. Closing twice is a no-op."""
        pass
    
    @abstractmethod
    def get_extra_info(self, name: str) -> Optional[Any]:
        """
        Get extra information about the stream.
        
        Args:
            name: The name of the information to retrieve. Common values include:
                 - "socket": The underlying socket object
                 - "peername": The remote endpoint address
                 - "sockname": The local endpoint address
                 - "ssl_object": The SSL object for TLS streams
        
        Returns:
            The requested information or None if not available.
        """
        pass
    
    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Check if the stream is closed."""
        pass

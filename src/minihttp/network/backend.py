"""
Network backend interface for minihttp.

This module defines the NetworkBackend interface that opens the
connections a request is sent over.
"""

from abc import ABC, abstractmethod
from typing import Optional
import ssl

from .stream import NetworkStream


class NetworkBackend(ABC):
    """
    Interface for network backend implementations.
    
    A backend opens one connection per request; connections are never
    pooled or reused.
    """
    
    @abstractmethod
    def connect_tcp(
        self, 
        host: str, 
        port: int, 
        timeout: Optional[float] = None
    ) -> NetworkStream:
        """
        Connect to a TCP endpoint.
        
        Args:
            host: The hostname or IP address to connect to.
            port: The port number to connect to.
            timeout: Optional timeout in seconds, kept for later reads and writes.
        
        Returns:
            A NetworkStream representing the TCP connection.
        
        Raises:
            OSError: If name resolution or the connection fails.
        """
        pass
    
    @abstractmethod
    def connect_tls(
        self,
        stream: NetworkStream,
        host: str,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> NetworkStream:
        """
        Upgrade a TCP stream to TLS.
        
        Args:
            stream: The existing TCP NetworkStream to upgrade.
            host: The hostname for SNI and certificate verification.
            ssl_context: Context to use; a verifying default when omitted.
        
        Returns:
            A NetworkStream representing the TLS connection.
        
        Raises:
            OSError: If the TLS handshake fails.
        """
        pass

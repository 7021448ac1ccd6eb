"""
Network utilities for minihttp.

This module provides utility functions for socket creation,
SSL context setup and port validation.
"""

import socket
import ssl
from typing import Optional, Union


def create_socket(
    host: str,
    port: int,
    timeout: Optional[float] = None,
) -> socket.socket:
    """
    Open a blocking TCP connection with client-friendly options.
    
    Args:
        host: Hostname or IP address, resolved by the OS resolver
        port: Port number
        timeout: Connect timeout in seconds (None for blocking)
    
    Returns:
        Connected socket object
    
    Raises:
        OSError: If resolution or the connection fails
    """
    sock = socket.create_connection((host, port), timeout=timeout)
    
    # Requests are written in a single call; don't let Nagle hold them back
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
    
    return sock


def create_ssl_context(
    verify: bool = True,
    cert_file: Optional[str] = None,
    key_file: Optional[str] = None,
) -> ssl.SSLContext:
    """
    Create an SSL context for HTTP/1.1 client connections.
    
    Args:
        verify: Whether to verify the server certificate and hostname
        cert_file: Path to certificate file (for client auth)
        key_file: Path to private key file (for client auth)
    
    Returns:
        Configured SSL context
    
    Raises:
        ssl.SSLError: If SSL context creation fails
    """
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    
    context.set_alpn_protocols(["http/1.1"])
    context.options |= ssl.OP_NO_COMPRESSION
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    
    # Load client certificate if provided
    if cert_file and key_file:
        context.load_cert_chain(cert_file, key_file)
    
    return context


def set_socket_timeout(sock: socket.socket, timeout: Optional[float]) -> None:
    """
    Set socket timeout.
    
    Args:
        sock: Socket object
        timeout: Timeout in seconds (None for blocking)
    """
    sock.settimeout(timeout)


def validate_port(port: Union[int, str]) -> int:
    """
    Validate and convert port to integer.
    
    Args:
        port: Port number (int or string)
    
    Returns:
        Port as integer
    
    Raises:
        ValueError: If port is invalid
    """
    try:
        port_int = int(port)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid port: {port!r}")
    
    if not (1 <= port_int <= 65535):
        raise ValueError(f"Port must be between 1 and 65535, got {port_int}")
    
    return port_int

"""
Custom exceptions for minihttp.

This module defines the exception hierarchy used throughout
the library. Every failure of a send operation surfaces as exactly
one of InvalidRequestError, TransportError or MalformedResponseError.
"""

from typing import Optional


class HTTPCoreError(Exception):
    """Base exception for all minihttp errors."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class InvalidRequestError(HTTPCoreError):
    """Raised when a request cannot be built, before any I/O happens."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Invalid request: {message}", cause)


class TransportError(HTTPCoreError):
    """Raised when connecting, sending or receiving fails."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Transport error: {message}", cause)


class TimeoutError(TransportError):
    """Raised when a blocking transport operation times out."""
    
    def __init__(
        self,
        message: str,
        timeout: Optional[float] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        if timeout is not None:
            message = f"{message} (timeout: {timeout}s)"
        super().__init__(f"timed out: {message}", cause)
        self.timeout = timeout


class MalformedResponseError(HTTPCoreError):
    """Raised when the response bytes do not form a valid HTTP/1.x message."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Malformed response: {message}", cause)

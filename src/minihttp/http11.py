"""
HTTP/1.1 connection implementation for minihttp.

This module implements the HTTP11Connection class that carries exactly one
request/response exchange over a NetworkStream and then closes it.
"""

import logging
import socket
import time
from enum import Enum
from typing import Any, Dict, Optional

from .http_primitives import Request, Response
from .network.stream import NetworkStream
from .parser import ResponseParser
from .exceptions import (
    HTTPCoreError,
    InvalidRequestError,
    TimeoutError,
    TransportError,
)

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """States of an HTTP/1.1 connection."""
    NEW = "new"           # Connection created, not yet used
    ACTIVE = "active"     # Connection handling its request
    CLOSED = "closed"     # Connection closed, cannot be used again


class HTTP11Connection:
    """
    HTTP/1.1 connection manager.

    Sends one request, reads until the response parser reports a complete
    message (or the peer closes), and closes the stream on every outcome.
    All calls block; timeouts belong to the underlying stream.
    """

    # Default configuration
    DEFAULT_READ_SIZE = 65536  # 64KB reads

    def __init__(
        self,
        stream: NetworkStream,
        read_size: Optional[int] = None,
    ):
        """
        Initialize HTTP/1.1 connection.

        Args:
            stream: The NetworkStream to use for communication
            read_size: Maximum bytes requested per read call
        """
        self._stream = stream
        self._state = ConnectionState.NEW
        self._read_size = read_size or self.DEFAULT_READ_SIZE

        # Metrics
        self._bytes_sent = 0
        self._bytes_received = 0
        self._request_time: Optional[float] = None

        logger.debug("HTTP/1.1 connection initialized")

    def handle_request(self, request: Request) -> Response:
        """
        Handle a complete HTTP request/response cycle.

        The request is serialized before any I/O, then consumed.

        Args:
            request: The HTTP request to send

        Returns:
            The HTTP response received

        Raises:
            InvalidRequestError: If the request cannot be serialized
            TransportError: If writing or reading fails
            MalformedResponseError: If the response cannot be parsed
        """
        if self._state is not ConnectionState.NEW:
            self.close()
            raise TransportError(f"Connection is {self._state.value}, a new connection is required")

        try:
            payload = request.to_bytes()
            request.consume()
        except InvalidRequestError:
            self.close()
            raise

        self._state = ConnectionState.ACTIVE
        start_time = time.time()

        try:
            self._send_request(payload)
            response = self._receive_response(request.method)

            self._request_time = time.time() - start_time
            logger.debug(
                f"{request.method.decode(errors='replace')} "
                f"{request.path.decode(errors='replace')} "
                f"-> {response.status} ({self._request_time:.3f}s)"
            )

            return response

        except HTTPCoreError as e:
            duration = time.time() - start_time
            logger.error(f"Request failed: {e} ({duration:.3f}s)")
            raise

        finally:
            self.close()

    def _send_request(self, payload: bytes) -> None:
        """
        Write the serialized request to the stream.

        Args:
            payload: The request wire bytes
        """
        try:
            self._stream.write(payload)
        except socket.timeout as e:
            raise TimeoutError("write", timeout=self._timeout, cause=e) from e
        except OSError as e:
            raise TransportError(f"write failed: {e}", cause=e) from e

        self._bytes_sent += len(payload)

    def _receive_response(self, method: bytes) -> Response:
        """
        Read from the stream until the parser has a complete response.

        Args:
            method: Method of the request, needed to frame HEAD responses

        Returns:
            The parsed HTTP response
        """
        parser = ResponseParser(request_method=method)

        while not parser.is_complete:
            data = self._read()
            if not data:
                parser.receive_eof()
                break
            self._bytes_received += len(data)
            parser.receive_data(data)

        return parser.response()

    def _read(self) -> bytes:
        try:
            return self._stream.read(self._read_size)
        except socket.timeout as e:
            raise TimeoutError("read", timeout=self._timeout, cause=e) from e
        except OSError as e:
            raise TransportError(f"read failed: {e}", cause=e) from e

    @property
    def _timeout(self) -> Optional[float]:
        timeout = self._stream.get_extra_info("timeout")
        return timeout if isinstance(timeout, (int, float)) else None

    def close(self) -> None:
        """
        Close the connection and cleanup resources.
        """
        if self._state is not ConnectionState.CLOSED:
            self._state = ConnectionState.CLOSED
            self._stream.close()
            logger.debug("Connection closed")

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_closed(self) -> bool:
        """Check if connection is closed."""
        return self._state is ConnectionState.CLOSED

    @property
    def metrics(self) -> Dict[str, Any]:
        """
        Get connection metrics.

        Returns:
            Dictionary with connection metrics
        """
        return {
            "bytes_sent": self._bytes_sent,
            "bytes_received": self._bytes_received,
            "request_time": self._request_time,
            "state": self._state.value,
        }

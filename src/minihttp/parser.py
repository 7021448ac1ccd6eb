"""
HTTP/1.x response parsing for minihttp.

This module implements the ResponseParser state machine that rebuilds a
Response from bytes as they arrive from a connection:

    AWAITING_STATUS_LINE -> AWAITING_HEADERS -> DETERMINING_BODY_FRAMING
        -> READING_BODY -> COMPLETE

with MALFORMED as the terminal error state. Parsing is all-or-nothing: a
Response is only ever built once the whole message has been read, and on
failure everything accumulated so far is dropped.
"""

import logging
import re
from enum import Enum
from typing import Optional, Union

from .builder import as_bytes
from .exceptions import MalformedResponseError
from .http_primitives import Headers, Response

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS = (b"HTTP/1.1", b"HTTP/1.0")
NO_BODY_STATUSES = (204, 304)

_HEX_PATTERN = re.compile(rb"[0-9A-Fa-f]+")


class ParserState(Enum):
    """States of the response parser."""
    AWAITING_STATUS_LINE = "awaiting_status_line"
    AWAITING_HEADERS = "awaiting_headers"
    DETERMINING_BODY_FRAMING = "determining_body_framing"
    READING_BODY = "reading_body"
    COMPLETE = "complete"
    MALFORMED = "malformed"


class BodyFraming(Enum):
    """How the end of the response body is found."""
    CHUNKED = "chunked"                # length-prefixed chunks, zero-length chunk ends
    CONTENT_LENGTH = "content_length"  # exactly N bytes
    NO_BODY = "no_body"                # 1xx, 204, 304 or a HEAD request
    UNTIL_CLOSE = "until_close"        # everything up to EOF


class _ChunkPhase(Enum):
    SIZE = "size"
    DATA = "data"
    DATA_END = "data_end"
    TRAILERS = "trailers"


class ResponseParser:
    """
    Incremental HTTP/1.x response parser.

    Feed bytes with ``receive_data`` in whatever pieces they arrive, call
    ``receive_eof`` when the peer closes, and collect the result with
    ``response()`` once ``is_complete`` is true. Bytes following a complete
    message are ignored since connections are never reused.
    """

    MAX_LINE_SIZE = 65536

    def __init__(
        self,
        request_method: Union[str, bytes] = b"GET",
        max_line_size: Optional[int] = None,
    ) -> None:
        """
        Initialize the parser.

        Args:
            request_method: Method of the request being answered; a HEAD
                            response never carries a body.
            max_line_size: Longest status, header or chunk-size line accepted.
        """
        self._request_method = as_bytes(request_method).upper()
        self._max_line_size = max_line_size or self.MAX_LINE_SIZE
        self._state = ParserState.AWAITING_STATUS_LINE
        self._buffer = bytearray()
        self._eof = False
        self._reset_message()

    def _reset_message(self) -> None:
        self._version = b""
        self._status = 0
        self._reason = b""
        self._headers: Headers = []
        self._framing: Optional[BodyFraming] = None
        self._body = bytearray()
        self._remaining = 0
        self._chunk_phase = _ChunkPhase.SIZE
        self._response: Optional[Response] = None

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def framing(self) -> Optional[BodyFraming]:
        return self._framing

    @property
    def is_complete(self) -> bool:
        return self._state is ParserState.COMPLETE

    def receive_data(self, data: bytes) -> None:
        """
        Consume bytes received from the connection.

        Raises:
            MalformedResponseError: If the bytes violate the message grammar.
        """
        self._check_usable()
        if self._eof:
            raise RuntimeError("Cannot receive data after end of stream")
        if self._state is ParserState.COMPLETE:
            return

        self._buffer += data
        self._advance()

    def receive_eof(self) -> None:
        """
        Signal that the peer closed the connection.

        End of stream completes a body framed by connection close; in any
        other state before COMPLETE it means the message was truncated.

        Raises:
            MalformedResponseError: If the message is incomplete.
        """
        self._check_usable()
        if self._state is ParserState.COMPLETE:
            return

        self._eof = True
        self._advance()

        if self._state is not ParserState.COMPLETE:
            if self._state is ParserState.AWAITING_STATUS_LINE:
                self._fail("connection closed before status line")
            elif self._state is ParserState.AWAITING_HEADERS:
                self._fail("connection closed before end of headers")
            elif self._framing is BodyFraming.CONTENT_LENGTH:
                self._fail(f"connection closed with {self._remaining} body bytes missing")
            else:
                self._fail("connection closed before end of chunked body")

    def response(self) -> Response:
        """
        Return the parsed response.

        Raises:
            MalformedResponseError: If parsing failed.
            RuntimeError: If the message is not complete yet.
        """
        self._check_usable()
        if self._response is None:
            raise RuntimeError(f"Response is not complete (state: {self._state.value})")
        return self._response

    def _check_usable(self) -> None:
        if self._state is ParserState.MALFORMED:
            raise MalformedResponseError("parser is in an error state")

    def _transition(self, state: ParserState) -> None:
        logger.debug(f"Parser {self._state.value} -> {state.value}")
        self._state = state

    def _fail(self, message: str) -> None:
        """Discard all partial state and raise."""
        self._buffer.clear()
        self._reset_message()
        self._transition(ParserState.MALFORMED)
        raise MalformedResponseError(message)

    def _advance(self) -> None:
        """Run the state machine until it needs more bytes."""
        handlers = {
            ParserState.AWAITING_STATUS_LINE: self._parse_status_line,
            ParserState.AWAITING_HEADERS: self._parse_header_line,
            ParserState.DETERMINING_BODY_FRAMING: self._determine_framing,
            ParserState.READING_BODY: self._read_body,
        }
        while self._state in handlers:
            if not handlers[self._state]():
                break

    def _next_line(self) -> Optional[bytes]:
        """Pop one line off the buffer, without its CRLF (or bare LF)."""
        end = self._buffer.find(b"\n")
        if end == -1:
            if len(self._buffer.rstrip(b"\r")) > self._max_line_size:
                self._fail(f"line exceeds {self._max_line_size} bytes")
            return None

        line = bytes(self._buffer[:end])
        if line.endswith(b"\r"):
            line = line[:-1]
        if len(line) > self._max_line_size:
            self._fail(f"line exceeds {self._max_line_size} bytes")

        del self._buffer[:end + 1]
        return line

    def _parse_status_line(self) -> bool:
        line = self._next_line()
        if line is None:
            return False

        parts = line.split(b" ", 2)
        if len(parts) < 2 or parts[0] not in SUPPORTED_VERSIONS:
            self._fail(f"invalid status line {line[:100]!r}")
        if not parts[1].isdigit():
            self._fail(f"invalid status code {parts[1][:20]!r}")

        self._version = parts[0]
        self._status = int(parts[1])
        self._reason = parts[2] if len(parts) > 2 else b""
        self._transition(ParserState.AWAITING_HEADERS)
        return True

    def _parse_header_line(self) -> bool:
        line = self._next_line()
        if line is None:
            return False

        if not line:
            self._transition(ParserState.DETERMINING_BODY_FRAMING)
            return True

        # obs-fold: a continuation line extends the previous value
        if line[:1] in (b" ", b"\t"):
            if not self._headers:
                self._fail("folded header line without a preceding header")
            name, value = self._headers[-1]
            continuation = line.strip()
            self._headers[-1] = (name, value + b" " + continuation if value else continuation)
            return True

        name, separator, value = line.partition(b":")
        if not separator:
            self._fail(f"header line without ':' {line[:100]!r}")

        self._headers.append((name, value.strip()))
        return True

    def _find_header(self, name: bytes) -> Optional[bytes]:
        for header_name, header_value in self._headers:
            if header_name.lower() == name:
                return header_value
        return None

    def _is_chunked(self) -> bool:
        return any(
            name.lower() == b"transfer-encoding" and b"chunked" in value.lower()
            for name, value in self._headers
        )

    def _determine_framing(self) -> bool:
        if (
            self._status < 200
            or self._status in NO_BODY_STATUSES
            or self._request_method == b"HEAD"
        ):
            self._framing = BodyFraming.NO_BODY
        elif self._is_chunked():
            self._framing = BodyFraming.CHUNKED
        else:
            content_length = self._find_header(b"content-length")
            if content_length is None:
                self._framing = BodyFraming.UNTIL_CLOSE
            elif content_length.isdigit():
                self._framing = BodyFraming.CONTENT_LENGTH
                self._remaining = int(content_length)
            else:
                self._fail(f"invalid Content-Length {content_length[:40]!r}")

        logger.debug(f"Response {self._status}: body framing {self._framing.value}")

        if self._framing is BodyFraming.NO_BODY:
            self._complete()
        else:
            self._transition(ParserState.READING_BODY)
        return True

    def _read_body(self) -> bool:
        if self._framing is BodyFraming.CONTENT_LENGTH:
            self._take(self._remaining)
            if self._remaining == 0:
                self._complete()
            return False

        if self._framing is BodyFraming.UNTIL_CLOSE:
            self._body += self._buffer
            self._buffer.clear()
            if self._eof:
                self._complete()
            return False

        return self._read_chunk()

    def _take(self, limit: int) -> None:
        """Move up to ``limit`` buffered bytes into the body."""
        size = min(limit, len(self._buffer))
        self._body += self._buffer[:size]
        del self._buffer[:size]
        self._remaining -= size

    def _read_chunk(self) -> bool:
        if self._chunk_phase is _ChunkPhase.DATA:
            self._take(self._remaining)
            if self._remaining:
                return False
            self._chunk_phase = _ChunkPhase.DATA_END
            return True

        line = self._next_line()
        if line is None:
            return False

        if self._chunk_phase is _ChunkPhase.SIZE:
            size = line.split(b";", 1)[0].strip()
            if not _HEX_PATTERN.fullmatch(size):
                self._fail(f"invalid chunk size line {line[:40]!r}")
            self._remaining = int(size, 16)
            self._chunk_phase = _ChunkPhase.DATA if self._remaining else _ChunkPhase.TRAILERS
        elif self._chunk_phase is _ChunkPhase.DATA_END:
            if line:
                self._fail("chunk data not followed by CRLF")
            self._chunk_phase = _ChunkPhase.SIZE
        elif not line:
            # Trailer headers are read and dropped; the blank line ends the body
            self._complete()
            return False
        return True

    def _complete(self) -> None:
        self._response = Response(
            status=self._status,
            headers=self._headers,
            body=bytes(self._body),
            reason=self._reason,
            version=self._version,
        )
        self._buffer.clear()
        self._body = bytearray()
        self._transition(ParserState.COMPLETE)


def parse_response(data: bytes, request_method: Union[str, bytes] = b"GET") -> Response:
    """
    Parse a complete response: ``data`` followed by end of stream.

    Raises:
        MalformedResponseError: If the message is invalid or truncated.
    """
    parser = ResponseParser(request_method)
    parser.receive_data(data)
    parser.receive_eof()
    return parser.response()

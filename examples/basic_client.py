"""
Basic HTTP/1.1 client example using minihttp.

This example shows the request builder output and a few blocking
requests against a local server (start one with
``python -m http.server 8000``).
"""

import json
import logging

import minihttp
from minihttp import Request

# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


def show_wire_format():
    """Print the exact bytes a request serializes to."""
    payload = json.dumps({"code": 123, "message": "hello"}).encode()
    request = Request.post("example.org/api", payload).header("Content-Type", "application/json")
    logger.info(f"Serialized request:\n{request.to_bytes().decode()}")


def simple_get_request(url: str):
    """Demonstrate a simple GET request."""
    try:
        response = Request.get(url).header("Accept", "*/*").send(timeout=5.0)
    except minihttp.TransportError as e:
        logger.error(f"Could not reach {url}: {e}")
        return
    except minihttp.MalformedResponseError as e:
        logger.error(f"Server sent an invalid response: {e}")
        return

    logger.info(f"Response status: {response.status} {response.reason.decode()}")
    for name, value in response.headers:
        logger.info(f"  {name.decode()}: {value.decode()}")
    logger.info(f"Response body length: {len(response.body)} bytes")


def head_request(url: str):
    """HEAD responses never carry a body, whatever Content-Length says."""
    try:
        response = minihttp.head(url, timeout=5.0)
    except minihttp.HTTPCoreError as e:
        logger.error(f"HEAD {url} failed: {e}")
        return
    logger.info(f"HEAD {url}: {response.status}, Content-Length {response.get_header('Content-Length')}")


def main():
    show_wire_format()
    simple_get_request("localhost:8000")
    head_request("localhost:8000")


if __name__ == "__main__":
    main()

"""
HTTP Listener for the metrics endpoint.

A deliberately small TCP server: one connection at a time, one
request per connection, and a single resource at ``/metrics``.
"""

import logging
import select
import socket
import threading
from typing import Callable, Optional, Tuple

from ..core.models import BindTarget
from .renderer import CONTENT_TYPE


logger = logging.getLogger(__name__)

METRICS_PATH = "/metrics"
MAX_REQUEST_BYTES = 1023
LISTEN_BACKLOG = 5

NOT_FOUND_RESPONSE = (
    b"HTTP/1.1 404 Not Found\r\n"
    b"Content-Length: 0\r\n"
    b"Connection: close\r\n"
    b"\r\n"
)


def parse_request_line(data: bytes) -> Optional[Tuple[str, str]]:
    """Extract (method, path) from the first line of a raw request."""
    line = data.split(b"\n", 1)[0].rstrip(b"\r")
    parts = line.decode("latin-1").split()
    if len(parts) < 2:
        return None
    method, target = parts[0], parts[1]
    return method, target.split("?", 1)[0]


def is_metrics_request(data: bytes) -> bool:
    """Check whether a raw request is ``GET /metrics``."""
    request = parse_request_line(data)
    return request is not None and request == ("GET", METRICS_PATH)


def build_metrics_response(body: str) -> bytes:
    """Build a complete 200 response carrying ``body``."""
    payload = body.encode("utf-8")
    headers = (
        "HTTP/1.1 200 OK\r\n"
        f"Content-Type: {CONTENT_TYPE}\r\n"
        f"Content-Length: {len(payload)}\r\n"
        "Connection: close\r\n"
        "\r\n"
    )
    return headers.encode("ascii") + payload


class MetricsHTTPListener:
    """
    Serves rendered metrics over plain HTTP.

    The accept loop waits on ``select`` with a bounded timeout so the
    stop token is seen at least once per ``poll_timeout`` seconds.
    """

    def __init__(
        self,
        target: BindTarget,
        render: Callable[[], str],
        stop_event: threading.Event,
        poll_timeout: float = 1.0,
        client_timeout: float = 1.0,
    ):
        self.target = target
        self._render = render
        self._stop = stop_event
        self.poll_timeout = poll_timeout
        self.client_timeout = client_timeout
        self._socket: Optional[socket.socket] = None
        self._socket_lock = threading.Lock()
        self.serving = threading.Event()
        self.server_address: Optional[Tuple[str, int]] = None
        self.requests_served = 0

    @property
    def is_open(self) -> bool:
        """Check if the listening socket is open."""
        return self._socket is not None

    def open(self) -> bool:
        """
        Create, bind and listen on the server socket.

        Failures are logged and leave the listener closed.
        """
        host = "127.0.0.1" if self.target.address == "localhost" else self.target.address
        try:
            socket.inet_pton(socket.AF_INET, host)
        except OSError:
            logger.error(f"Invalid bind address for metrics exporter: {self.target.address}")
            return False

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as e:
            logger.error(f"Failed to create socket for metrics exporter: {e}")
            return False

        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        except OSError as e:
            logger.warning(f"Failed to set SO_REUSEADDR: {e}")

        try:
            sock.bind((host, self.target.port))
        except OSError as e:
            logger.error(f"Failed to bind metrics exporter to {self.target}: {e}")
            sock.close()
            return False

        try:
            sock.listen(LISTEN_BACKLOG)
        except OSError as e:
            logger.error(f"Failed to listen on metrics exporter socket: {e}")
            sock.close()
            return False

        with self._socket_lock:
            if self._stop.is_set():
                sock.close()
                return False
            self._socket = sock
        self.server_address = sock.getsockname()
        logger.info(f"Metrics exporter listening on {self.target}")
        return True

    def close(self):
        """Close the listening socket. Safe to call repeatedly."""
        with self._socket_lock:
            sock, self._socket = self._socket, None
        if sock is not None:
            sock.close()
            logger.debug("Metrics exporter socket closed")
        self.serving.clear()

    def run(self):
        """Open the socket and serve until the stop token is set."""
        if not self.open():
            return
        try:
            self.serve_forever()
        finally:
            self.close()

    def serve_forever(self):
        """Accept and answer connections one at a time."""
        self.serving.set()
        while not self._stop.is_set():
            sock = self._socket
            if sock is None:
                break
            try:
                readable, _, _ = select.select([sock], [], [], self.poll_timeout)
            except InterruptedError:
                continue
            except (OSError, ValueError) as e:
                if not self._stop.is_set():
                    logger.error(f"Select failed on metrics exporter socket: {e}")
                break

            if not readable or self._stop.is_set():
                continue

            try:
                client, addr = sock.accept()
            except OSError as e:
                if not self._stop.is_set():
                    logger.debug(f"Accept failed on metrics exporter socket: {e}")
                continue

            with client:
                try:
                    self.handle_client(client)
                except Exception as e:
                    logger.error(f"Error answering metrics request from {addr}: {e}")

    def handle_client(self, client: socket.socket):
        """Read one request from ``client`` and send the response."""
        client.settimeout(self.client_timeout)
        try:
            data = client.recv(MAX_REQUEST_BYTES)
        except OSError as e:
            logger.debug(f"Failed to read metrics request: {e}")
            data = b""

        if data and is_metrics_request(data):
            response = build_metrics_response(self._render())
            self.requests_served += 1
        else:
            response = NOT_FOUND_RESPONSE

        try:
            client.sendall(response)
        except OSError as e:
            logger.debug(f"Failed to send metrics response: {e}")

"""Shared fixtures for the exporter tests."""

import socket

import pytest


def _parse_response(data: bytes):
    head, _, body = data.partition(b"\r\n\r\n")
    lines = head.decode("ascii").split("\r\n")
    status = int(lines[0].split()[1])
    headers = dict(line.split(": ", 1) for line in lines[1:])
    return status, headers, body


@pytest.fixture
def free_port():
    """A TCP port that nothing was listening on a moment ago."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def send_request():
    """Send raw request bytes and return (status, headers, body)."""

    def _send(port: int, raw: bytes, timeout: float = 5.0):
        with socket.create_connection(("127.0.0.1", port), timeout=timeout) as s:
            s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return _parse_response(b"".join(chunks))

    return _send


@pytest.fixture
def identity():
    return lambda: ("game", 1234)

"""
Bind address resolution for the metrics listener.

Accepts ``host:port`` or a bare ``port`` and always produces a usable
target, falling back to the default port on malformed input.
"""

import logging

from .models import BindTarget


logger = logging.getLogger(__name__)

DEFAULT_BIND_HOST = "0.0.0.0"
DEFAULT_PORT = 16969

_KNOWN_HOSTS = ("0.0.0.0", "127.0.0.1", "localhost")


def _parse_port(port_str: str) -> int:
    """Parse a port string, substituting the default on bad input."""
    try:
        port = int(port_str.strip())
    except ValueError:
        logger.error(
            f"Failed to parse port for metrics exporter: {port_str!r}. "
            f"Using default {DEFAULT_PORT}"
        )
        return DEFAULT_PORT

    if port < 1 or port > 65535:
        logger.error(
            f"Invalid port number for metrics exporter: {port}. "
            f"Using default {DEFAULT_PORT}"
        )
        return DEFAULT_PORT
    return port


def resolve_bind_address(value: str) -> BindTarget:
    """
    Resolve a ``host:port`` or bare port string into a bind target.

    Never raises; an unusable port is replaced by ``DEFAULT_PORT``.
    """
    value = value or ""
    if ":" in value:
        address, port_str = value.split(":", 1)
    else:
        address, port_str = DEFAULT_BIND_HOST, value

    port = _parse_port(port_str)

    # Basic sanity check only, the listener reports the real failure
    if address not in _KNOWN_HOSTS and any(c not in "0123456789." for c in address):
        logger.warning(f"IP address format might be invalid for metrics exporter: {address}")

    return BindTarget(address=address, port=port)

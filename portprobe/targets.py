from __future__ import annotations

import ipaddress
import logging
import socket

from .errors import InvalidHostError

logger = logging.getLogger(__name__)


def resolve_host(host: str) -> str:
    """
    Supports:
      - IPv4/IPv6 literal: "172.20.0.10", "::1"
      - Hostname: "localhost" (resolved once, before scanning)
    """
    host = host.strip()
    if not host:
        raise InvalidHostError(host, "empty host")

    try:
        return str(ipaddress.ip_address(host))
    except ValueError:
        pass

    try:
        resolved = socket.gethostbyname(host)
    except (socket.gaierror, UnicodeError) as e:
        raise InvalidHostError(host, f"could not resolve host ({e})") from e

    logger.debug("Resolved %s -> %s", host, resolved)
    return resolved

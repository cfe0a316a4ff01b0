from __future__ import annotations

import socket
from typing import Optional

BANNER_READ_BYTES = 4096


def _try_recv(sock: socket.socket, n: int, timeout: float) -> bytes:
    sock.settimeout(timeout)
    try:
        return sock.recv(n)
    except OSError:
        return b""


def read_banner(sock: socket.socket, timeout: float, n: int = BANNER_READ_BYTES) -> Optional[str]:
    """
    Called only after connect() succeeds.
    Passive grab: nothing is written, we only wait for whatever the
    service volunteers (SSH, SMTP, FTP greetings...).
    """
    data = _try_recv(sock, n, timeout)
    if not data:
        return None
    text = data.decode(errors="replace").strip()
    return text or None

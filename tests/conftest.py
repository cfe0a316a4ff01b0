import socket
import threading

import pytest


@pytest.fixture
def closed_port():
    """A loopback port that nothing is listening on."""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


@pytest.fixture
def tcp_listener():
    """Listening TCP socket that accepts and stays silent."""
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    srv.bind(("127.0.0.1", 0))
    srv.listen(16)
    yield srv.getsockname()[1]
    srv.close()


def _serve_banner(srv, greeting, stop):
    conns = []
    srv.settimeout(0.1)
    while not stop.is_set():
        try:
            conn, _ = srv.accept()
        except OSError:
            continue
        conn.sendall(greeting)
        conns.append(conn)
    for c in conns:
        c.close()


@pytest.fixture
def banner_server():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    srv.bind(("127.0.0.1", 0))
    srv.listen(16)
    stop = threading.Event()
    t = threading.Thread(
        target=_serve_banner,
        args=(srv, b"  SSH-2.0-OpenSSH_9.6 test\r\n", stop),
        daemon=True,
    )
    t.start()
    yield srv.getsockname()[1]
    stop.set()
    t.join(timeout=2)
    srv.close()


def _serve_echo(srv, stop):
    srv.settimeout(0.1)
    while not stop.is_set():
        try:
            data, addr = srv.recvfrom(1024)
        except OSError:
            continue
        srv.sendto(b"pong:" + data, addr)


@pytest.fixture
def udp_echo():
    srv = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    srv.bind(("127.0.0.1", 0))
    stop = threading.Event()
    t = threading.Thread(target=_serve_echo, args=(srv, stop), daemon=True)
    t.start()
    yield srv.getsockname()[1]
    stop.set()
    t.join(timeout=2)
    srv.close()


@pytest.fixture
def udp_silent():
    """Bound UDP socket that reads nothing and never answers."""
    srv = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    srv.bind(("127.0.0.1", 0))
    yield srv.getsockname()[1]
    srv.close()

from __future__ import annotations

import ipaddress
import logging
import socket
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, Iterable, Iterator, Optional, Set

from .banner import read_banner
from .models import ProbeResult, Protocol, ScanConfig, ScanStats, ScanTarget

logger = logging.getLogger(__name__)

UDP_PAYLOAD = b"ping"
UDP_READ_BYTES = 1024

Probe = Callable[[ScanTarget, ScanConfig], ProbeResult]
Sink = Callable[[ProbeResult], None]


def _family(host: str) -> int:
    try:
        if ipaddress.ip_address(host).version == 6:
            return socket.AF_INET6
    except ValueError:
        pass
    return socket.AF_INET


def _close(sock: Optional[socket.socket]) -> None:
    if sock is None:
        return
    try:
        sock.close()
    except OSError:
        pass


def probe_tcp(target: ScanTarget, config: ScanConfig) -> ProbeResult:
    sock: Optional[socket.socket] = None
    try:
        sock = socket.socket(_family(target.host), socket.SOCK_STREAM)
        sock.settimeout(config.connect_timeout)
        sock.connect((target.host, target.port))
    except OSError as e:
        # timeout, refused, unreachable, or no socket to be had
        logger.debug("TCP %s:%d not open (%s)", target.host, target.port, e)
        _close(sock)
        return ProbeResult(port=target.port, protocol=Protocol.TCP, open=False)

    try:
        banner = None
        if config.capture_banner:
            banner = read_banner(sock, config.effective_read_timeout)
        return ProbeResult(port=target.port, protocol=Protocol.TCP, open=True, banner=banner)
    finally:
        _close(sock)


def probe_udp(target: ScanTarget, config: ScanConfig) -> ProbeResult:
    """
    Any datagram coming back counts as "open or responding".

    Silence can mean closed, filtered, or an open service that simply does
    not answer "ping"; those cases all come out as not open.
    """
    sock: Optional[socket.socket] = None
    try:
        sock = socket.socket(_family(target.host), socket.SOCK_DGRAM)
        sock.settimeout(config.connect_timeout)
        sock.connect((target.host, target.port))
        sock.send(UDP_PAYLOAD)

        sock.settimeout(config.effective_read_timeout)
        sock.recv(UDP_READ_BYTES)
    except OSError as e:
        # ConnectionRefusedError here is the ICMP port-unreachable of an earlier send
        logger.debug("UDP %s:%d no response (%s)", target.host, target.port, e)
        return ProbeResult(port=target.port, protocol=Protocol.UDP, open=False)
    finally:
        _close(sock)

    return ProbeResult(port=target.port, protocol=Protocol.UDP, open=True)


def probe(target: ScanTarget, config: ScanConfig) -> ProbeResult:
    if config.protocol is Protocol.UDP:
        return probe_udp(target, config)
    return probe_tcp(target, config)


def iter_targets(host: str, ports: Iterable[int]) -> Iterator[ScanTarget]:
    for p in ports:
        yield ScanTarget(host=host, port=p)


def scan(
    host: str,
    ports: Iterable[int],
    config: ScanConfig,
    probe: Probe = probe,
) -> Iterator[ProbeResult]:
    """
    Bounded-futures scanner: yields one ProbeResult per port, in completion order.

    At most config.concurrency_limit probes run at once (one per pool worker),
    and at most four times that many futures are queued, so a 1-65535 scan
    costs the same memory and sockets as a small one.
    """
    jobs = iter_targets(host, ports)
    max_pending = config.concurrency_limit * 4

    with ThreadPoolExecutor(
        max_workers=config.concurrency_limit,
        thread_name_prefix="portprobe",
    ) as pool:
        pending: Set[Future] = set()

        def submit_next() -> bool:
            try:
                target = next(jobs)
            except StopIteration:
                return False
            pending.add(pool.submit(probe, target, config))
            return True

        def refill() -> None:
            while len(pending) < max_pending and submit_next():
                pass

        try:
            refill()
            while pending:
                done, not_done = wait(pending, return_when=FIRST_COMPLETED)
                pending.clear()
                pending.update(not_done)
                refill()
                for fut in done:
                    yield fut.result()
        finally:
            # consumer stopped early: drop whatever has not started yet
            for fut in pending:
                fut.cancel()


def run_scan(
    host: str,
    ports: Iterable[int],
    config: ScanConfig,
    sink: Sink,
    probe: Probe = probe,
) -> ScanStats:
    ports = tuple(ports)
    total = len(ports)
    scanned = 0
    open_count = 0
    start_all = time.perf_counter()

    logger.info(
        "Scanning %s: %d %s ports, %d workers",
        host, total, config.protocol.value, config.concurrency_limit,
    )

    for r in scan(host, ports, config, probe=probe):
        scanned += 1
        if r.open:
            open_count += 1
        sink(r)

        every = config.progress_every
        if every > 0 and (scanned % every == 0 or scanned == total):
            elapsed = time.perf_counter() - start_all
            rate = scanned / elapsed if elapsed > 0 else 0.0
            logger.info("Scanned %d/%d | open=%d | %.0f probes/s", scanned, total, open_count, rate)

    elapsed = time.perf_counter() - start_all
    logger.info("Scan finished: %d/%d open in %.2fs", open_count, total, elapsed)
    return ScanStats(total=scanned, open_count=open_count, elapsed_s=round(elapsed, 4))

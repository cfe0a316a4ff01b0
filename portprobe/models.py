from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import ConfigError

DEFAULT_THREADS = 100
DEFAULT_CONNECT_TIMEOUT = 0.5
DEFAULT_TCP_READ_TIMEOUT = 2.0
DEFAULT_UDP_READ_TIMEOUT = 1.0

PortRange = Tuple[int, ...]


class Protocol(str, enum.Enum):
    TCP = "TCP"
    UDP = "UDP"


@dataclass(frozen=True)
class ScanTarget:
    host: str
    port: int


@dataclass(frozen=True)
class ScanConfig:
    protocol: Protocol = Protocol.TCP
    concurrency_limit: int = DEFAULT_THREADS
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    # None picks the protocol default
    read_timeout: Optional[float] = None
    capture_banner: bool = False
    progress_every: int = 0

    def __post_init__(self) -> None:
        if self.concurrency_limit < 1:
            raise ConfigError(f"concurrency limit must be >= 1 (got {self.concurrency_limit})")
        if self.connect_timeout <= 0:
            raise ConfigError(f"connect timeout must be > 0 (got {self.connect_timeout})")
        if self.read_timeout is not None and self.read_timeout <= 0:
            raise ConfigError(f"read timeout must be > 0 (got {self.read_timeout})")
        if self.progress_every < 0:
            raise ConfigError(f"progress interval must be >= 0 (got {self.progress_every})")

    @property
    def effective_read_timeout(self) -> float:
        if self.read_timeout is not None:
            return self.read_timeout
        if self.protocol is Protocol.UDP:
            return DEFAULT_UDP_READ_TIMEOUT
        return DEFAULT_TCP_READ_TIMEOUT


@dataclass(frozen=True)
class ProbeResult:
    port: int
    protocol: Protocol
    open: bool
    banner: Optional[str] = None


@dataclass(frozen=True)
class ScanStats:
    total: int
    open_count: int
    elapsed_s: float

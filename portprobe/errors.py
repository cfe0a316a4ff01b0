from __future__ import annotations


class PortprobeError(Exception):
    """Base class for everything portprobe raises on purpose."""


class ConfigError(PortprobeError, ValueError):
    """Bad input detected before any probe is sent."""


class InvalidRangeError(ConfigError):
    def __init__(self, spec: str, reason: str = "invalid port range"):
        self.spec = spec
        self.reason = reason
        super().__init__(f"{reason}: {spec!r}")


class InvalidHostError(ConfigError):
    def __init__(self, host: str, reason: str = "invalid host"):
        self.host = host
        self.reason = reason
        super().__init__(f"{reason}: {host!r}")

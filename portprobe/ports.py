from __future__ import annotations

import re

from .errors import InvalidRangeError
from .models import PortRange

MIN_PORT = 1
MAX_PORT = 65535

# Optional sign so "-5-10" reaches the bounds check instead of a split error.
_RANGE = re.compile(r"^([+-]?[0-9]+)-([+-]?[0-9]+)$")


def resolve(spec: str) -> PortRange:
    """
    Turns a "start-end" spec into the inclusive, ascending port sequence.

    Both ends are required, even for a single port ("22-22").
    Raises InvalidRangeError with the original string on any violation.
    """
    m = _RANGE.match(spec.strip())
    if not m:
        raise InvalidRangeError(spec, "invalid port range")

    start = int(m.group(1))
    end = int(m.group(2))
    if start < MIN_PORT:
        raise InvalidRangeError(spec, f"start port must be >= {MIN_PORT}")
    if end > MAX_PORT:
        raise InvalidRangeError(spec, f"end port must be <= {MAX_PORT}")
    if start > end:
        raise InvalidRangeError(spec, "start port is greater than end port")

    return tuple(range(start, end + 1))

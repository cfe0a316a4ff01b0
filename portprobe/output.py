from __future__ import annotations

import sys
import threading
from typing import List, Optional, TextIO

from .models import ProbeResult, Protocol

GREEN = "\033[32m"
RESET = "\033[0m"


def format_result(r: ProbeResult) -> List[str]:
    """Lines to print for one result; closed ports print nothing."""
    if not r.open:
        return []
    if r.protocol is Protocol.UDP:
        lines = [f"UDP {r.port} is open or responding"]
    else:
        lines = [f"TCP {r.port} is open"]
    if r.banner:
        lines.append(f"[Banner {r.port}] {r.banner}")
    return lines


class ConsoleSink:
    """
    Line-oriented result writer.

    Safe to call from several worker threads: each result's lines are
    written and flushed under one lock.
    """

    def __init__(self, stream: Optional[TextIO] = None, color: bool = True):
        self.stream = stream if stream is not None else sys.stdout
        self.color = color
        self._lock = threading.Lock()

    def _paint(self, line: str) -> str:
        return f"{GREEN}{line}{RESET}" if self.color else line

    def __call__(self, r: ProbeResult) -> None:
        lines = format_result(r)
        if not lines:
            return
        # only the status line is colored, banners stay plain
        text = self._paint(lines[0]) + "\n" + "".join(line + "\n" for line in lines[1:])
        with self._lock:
            self.stream.write(text)
            self.stream.flush()

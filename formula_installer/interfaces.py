"""
Interfaces for the collaborators the pipeline talks to.
"""

from __future__ import annotations

import subprocess
import threading
from typing import Optional, Protocol, Sequence


class Transport(Protocol):
    """Fetch the complete body behind a URL."""

    def fetch(
        self,
        url: str,
        timeout: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> bytes:
        ...


class CommandRunner(Protocol):
    """Run an installed executable and capture its output."""

    def run(self, args: Sequence[str], timeout: float) -> subprocess.CompletedProcess:
        ...

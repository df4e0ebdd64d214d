"""
Fetch artifacts and check them against their recorded SHA-256 digests.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import threading
from typing import Optional

from .errors import IntegrityMismatch
from .interfaces import Transport
from .models import VersionEntry


logger = logging.getLogger(__name__)


def sha256_hex(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def download_url(entry: VersionEntry) -> str:
    """URL the bytes for ``entry`` are fetched from.

    Head entries point at a git repository; they are fetched as the branch
    archive (``<repo>/archive/refs/heads/<branch>.tar.gz``).
    """
    if not entry.is_head:
        return entry.url
    repo = entry.url[:-len(".git")] if entry.url.endswith(".git") else entry.url
    return f"{repo.rstrip('/')}/archive/refs/heads/{entry.branch}.tar.gz"


class IntegrityVerifier:
    """Gate between download and installation."""

    def __init__(self, transport: Transport, timeout: float = 60.0) -> None:
        self.transport = transport
        self.timeout = timeout

    def fetch_and_verify(
        self,
        entry: VersionEntry,
        cancel_event: Optional[threading.Event] = None,
    ) -> bytes:
        """Fetch the bytes for ``entry`` and verify them.

        Raises:
            FetchFailed: If the transport cannot deliver the complete body
            IntegrityMismatch: If the digest does not match
        """
        content = self.transport.fetch(download_url(entry), self.timeout, cancel_event)
        return self.verify(entry, content)

    def verify(self, entry: VersionEntry, content: bytes) -> bytes:
        if entry.sha256 is None:
            logger.warning(
                "Integrity of %s (%s) is UNVERIFIED: head builds carry no digest",
                entry.url,
                entry.branch,
            )
            return content

        actual = sha256_hex(content)
        expected = entry.sha256.lower()
        if not hmac.compare_digest(actual, expected):
            logger.error("SHA-256 mismatch for %s", entry.url)
            raise IntegrityMismatch(entry.url, expected, actual)

        logger.info("Verified SHA-256 %s", actual)
        return content

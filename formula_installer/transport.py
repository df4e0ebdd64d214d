"""
HTTP transport for artifact downloads.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

import requests
from tqdm import tqdm

from .errors import FetchFailed


logger = logging.getLogger(__name__)

_clock = time.monotonic


class RequestsTransport:
    """Stream artifacts over HTTP(S) with a shared requests session."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        chunk_size: int = 8192,
        show_progress: bool = True,
    ) -> None:
        self.session = session or requests.Session()
        self.chunk_size = chunk_size
        self.show_progress = show_progress

    def fetch(
        self,
        url: str,
        timeout: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> bytes:
        """Download ``url`` completely.

        Args:
            url: Location of the artifact
            timeout: Seconds the whole download may take; also the per-read timeout
            cancel_event: When set, the download aborts before the next chunk

        Returns:
            The full response body

        Raises:
            FetchFailed: On transport errors, HTTP errors, cancellation, or a
                body shorter than the advertised Content-Length
        """
        if cancel_event is not None and cancel_event.is_set():
            raise FetchFailed(url, "download cancelled")

        logger.info("Downloading %s", url)
        deadline = _clock() + timeout
        try:
            with self.session.get(url, stream=True, timeout=timeout) as response:
                response.raise_for_status()
                total_size = int(response.headers.get("content-length", 0))
                buffer = bytearray()

                with tqdm(
                    total=total_size or None,
                    unit="B",
                    unit_scale=True,
                    disable=not self.show_progress,
                ) as pbar:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if cancel_event is not None and cancel_event.is_set():
                            raise FetchFailed(url, "download cancelled")
                        if _clock() > deadline:
                            raise FetchFailed(url, f"timed out after {timeout}s")
                        buffer.extend(chunk)
                        pbar.update(len(chunk))
        except requests.Timeout as e:
            raise FetchFailed(url, f"timed out after {timeout}s") from e
        except requests.RequestException as e:
            raise FetchFailed(url, str(e)) from e

        # Content-Length counts encoded bytes; only plain bodies can be checked.
        if total_size and len(buffer) < total_size and not response.headers.get("content-encoding"):
            raise FetchFailed(url, f"truncated body ({len(buffer)} of {total_size} bytes)")

        logger.debug("Downloaded %d bytes from %s", len(buffer), url)
        return bytes(buffer)

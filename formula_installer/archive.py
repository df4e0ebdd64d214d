"""
Pick the installable file out of a downloaded source archive.
"""

from __future__ import annotations

import io
import logging
import tarfile
import zlib
from pathlib import PurePosixPath

from .errors import FetchFailed


logger = logging.getLogger(__name__)


def is_tar_archive(content: bytes) -> bool:
    # gzip magic, or the ustar marker of an uncompressed tarball
    return content[:2] == b"\x1f\x8b" or content[257:262] == b"ustar"


def extract_member(content: bytes, source: str, url: str = "") -> bytes:
    """Return the bytes of ``source`` from a tar archive.

    Release tarballs wrap everything in a single top-level directory
    (``Project-1.0/``), which is ignored when matching ``source``. Content
    that is not an archive is the artifact itself and is returned unchanged.
    """
    if not is_tar_archive(content):
        return content

    wanted = PurePosixPath(source).parts
    try:
        with tarfile.open(fileobj=io.BytesIO(content), mode="r:*") as tar:
            for member in tar.getmembers():
                if not member.isfile():
                    continue
                parts = PurePosixPath(member.name).parts
                if parts == wanted or parts[1:] == wanted:
                    logger.debug("Extracting %s from archive", member.name)
                    extracted = tar.extractfile(member)
                    return extracted.read()
    except (tarfile.TarError, EOFError, OSError, zlib.error) as e:
        raise FetchFailed(url or source, f"unreadable archive ({e})") from e

    raise FetchFailed(url or source, f"archive does not contain {source}")

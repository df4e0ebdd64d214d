"""
Place verified artifacts into the binary directory.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .errors import WriteFailed
from .models import InstalledArtifact, VersionEntry


logger = logging.getLogger(__name__)

EXECUTABLE_MODE = (
    stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
)


class Installer:
    """Write artifacts into a fixed ``bin`` directory.

    The directory must already exist. Each install replaces the destination
    atomically, so a failed write leaves any previous artifact in place.
    """

    def __init__(self, bin_dir: Path):
        self.bin_dir = Path(bin_dir)

    def installed_path(self, destination_name: str) -> Path:
        name = destination_name.strip()
        if not name or name in (".", "..") or "/" in name or os.sep in name:
            raise WriteFailed(str(self.bin_dir / name), "invalid destination name")
        return self.bin_dir / name

    def install(
        self,
        content: bytes,
        destination_name: str,
        entry: Optional[VersionEntry] = None,
    ) -> InstalledArtifact:
        """Install ``content`` as ``destination_name``.

        Args:
            content: Verified artifact bytes
            destination_name: Final filename inside the bin directory
            entry: The version entry the bytes came from

        Returns:
            The InstalledArtifact describing the result

        Raises:
            WriteFailed: On any filesystem error
        """
        target = self.installed_path(destination_name)
        if not self.bin_dir.is_dir():
            raise WriteFailed(str(target), f"directory {self.bin_dir} does not exist")

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=self.bin_dir)
            with os.fdopen(fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, EXECUTABLE_MODE)
            os.replace(tmp_name, target)
            tmp_name = None
        except OSError as e:
            raise WriteFailed(str(target), e.strerror or str(e)) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info("Installed %s (%d bytes)", target, len(content))
        return InstalledArtifact(
            path=target,
            entry=entry,
            installed_at=datetime.now(timezone.utc),
        )

    def uninstall(self, destination_name: str) -> bool:
        """Remove an installed artifact. Returns False if nothing was there."""
        target = self.installed_path(destination_name)
        try:
            target.unlink()
        except FileNotFoundError:
            logger.info("%s is not installed", target)
            return False
        except OSError as e:
            raise WriteFailed(str(target), e.strerror or str(e)) from e
        logger.info("Removed %s", target)
        return True

"""
Map a requested version of a formula to its source artifact.
"""

from __future__ import annotations

import logging
from typing import List

from .errors import UnknownVersion
from .models import HEAD, PackageSpec, VersionEntry


logger = logging.getLogger(__name__)


class ArtifactResolver:
    """Resolve versions against a formula's recorded entries.

    The resolver holds no state of its own; the formula passed to each call is
    the complete registry it consults.
    """

    def resolve(self, spec: PackageSpec, requested_version: str) -> VersionEntry:
        """Return the entry for ``requested_version``.

        Args:
            spec: The formula to resolve against
            requested_version: A recorded version string, or ``"head"``

        Returns:
            The matching VersionEntry, unchanged

        Raises:
            UnknownVersion: If no entry matches
        """
        requested = requested_version.strip()
        if requested.lower() == HEAD:
            if spec.head is None:
                raise UnknownVersion(spec.name, requested, self.available_versions(spec))
            logger.debug("Resolved %s to head of branch %s", spec.name, spec.head.branch)
            return spec.head

        # Later revisions of the same nominal version supersede earlier ones.
        for entry in reversed(spec.versions):
            if entry.version == requested:
                logger.debug("Resolved %s %s to %s", spec.name, requested, entry.url)
                return entry

        raise UnknownVersion(spec.name, requested, self.available_versions(spec))

    def latest(self, spec: PackageSpec) -> VersionEntry:
        """Latest listed pinned entry; advisory only."""
        if not spec.versions:
            raise UnknownVersion(spec.name, "latest", self.available_versions(spec))
        return spec.versions[-1]

    def available_versions(self, spec: PackageSpec) -> List[str]:
        seen: List[str] = []
        for entry in spec.versions:
            if entry.version not in seen:
                seen.append(entry.version)
        if spec.head is not None:
            seen.append(HEAD)
        return seen

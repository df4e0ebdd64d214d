"""
Core data models for formula installation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple


HEAD = "head"


@dataclass(frozen=True)
class VersionEntry:
    """A single installable revision of a package."""

    version: str
    url: str
    sha256: Optional[str] = None
    branch: Optional[str] = None

    @property
    def is_head(self) -> bool:
        return self.version == HEAD


@dataclass(frozen=True)
class InstallMapping:
    """Which archive member is installed, and under what name."""

    source: str
    destination: str


@dataclass(frozen=True)
class PackageSpec:
    """A formula: package identity plus its ordered version entries."""

    name: str
    homepage: str
    license: str
    description: str
    install: InstallMapping
    usage_prefix: str
    versions: Tuple[VersionEntry, ...] = ()
    head: Optional[VersionEntry] = None


@dataclass(frozen=True)
class InstalledArtifact:
    """An artifact placed in the binary directory."""

    path: Path
    entry: Optional[VersionEntry]
    installed_at: datetime


@dataclass(frozen=True)
class TestResult:
    """Outcome of the post-install smoke test."""

    __test__ = False

    passed: bool
    details: str


class PipelineStage:
    """Stages an install passes through, in order."""

    RESOLVED = "resolved"
    FETCHED = "fetched"
    VERIFIED = "verified"
    INSTALLED = "installed"
    TESTED = "tested"


class PipelineStatus:
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class PipelineResult:
    """Terminal state of one install invocation."""

    package: str
    requested_version: str
    stage: Optional[str] = None
    status: str = PipelineStatus.FAILED
    entry: Optional[VersionEntry] = None
    artifact: Optional[InstalledArtifact] = None
    test_result: Optional[TestResult] = None
    integrity_verified: bool = False
    error: Optional[Exception] = field(default=None, repr=False)

    @property
    def succeeded(self) -> bool:
        return self.status == PipelineStatus.SUCCESS

    @property
    def error_kind(self) -> Optional[str]:
        if self.error is None:
            return None
        return getattr(self.error, "kind", type(self.error).__name__)

"""
Error kinds raised by the install pipeline.
"""

from __future__ import annotations

from typing import Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import TestResult


class InstallerError(Exception):
    """Base class for pipeline failures; ``kind`` names the failure."""

    kind = "InstallerError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class ManifestError(ValueError):
    """A formula manifest is malformed."""


class UnknownVersion(InstallerError):
    kind = "UnknownVersion"

    def __init__(self, package: str, requested: str, known: Iterable[str] = ()) -> None:
        self.package = package
        self.requested = requested
        self.known = tuple(known)
        known_text = ", ".join(self.known) or "none"
        super().__init__(
            f"{package} has no version {requested!r} (known: {known_text})"
        )


class FetchFailed(InstallerError):
    kind = "FetchFailed"

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"could not fetch {url}: {reason}")


class IntegrityMismatch(InstallerError):
    """Downloaded content does not match the recorded digest."""

    kind = "IntegrityMismatch"

    def __init__(self, url: str, expected: str, actual: str) -> None:
        self.url = url
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"SHA-256 mismatch for {url}\n"
            f"  expected: {expected}\n"
            f"    actual: {actual}"
        )


class WriteFailed(InstallerError):
    kind = "WriteFailed"

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"could not write {path}: {reason}")


class ExecutionError(InstallerError):
    kind = "ExecutionError"

    def __init__(self, command: str, reason: str, output: Optional[str] = None) -> None:
        self.command = command
        self.reason = reason
        self.output = output
        super().__init__(f"could not run {command}: {reason}")


class SmokeTestFailed(InstallerError):
    """Installed artifact ran but did not report the expected identity."""

    kind = "SmokeTestFailed"

    def __init__(self, name: str, result: "TestResult") -> None:
        self.name = name
        self.result = result
        super().__init__(f"smoke test for {name} failed: {result.details}")

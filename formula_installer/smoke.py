"""
Post-install acceptance checks.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from .errors import ExecutionError, SmokeTestFailed
from .interfaces import CommandRunner
from .models import TestResult


logger = logging.getLogger(__name__)


class SubprocessRunner:
    """Run commands with :func:`subprocess.run`."""

    def run(self, args: Sequence[str], timeout: float) -> subprocess.CompletedProcess:
        return subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )


class SmokeTester:
    """Invoke an installed artifact with --help and --version."""

    def __init__(
        self,
        bin_dir: Path,
        usage_prefix: str,
        runner: Optional[CommandRunner] = None,
        timeout: float = 30.0,
    ) -> None:
        self.bin_dir = Path(bin_dir)
        self.usage_prefix = usage_prefix
        self.runner = runner or SubprocessRunner()
        self.timeout = timeout

    def verify(self, destination_name: str, expected_version: Optional[str]) -> TestResult:
        """Check usage text and version output of the installed artifact.

        ``expected_version`` of None (head builds) only requires the version
        invocation to succeed.

        Raises:
            ExecutionError: If the artifact cannot be run or exits non-zero
            SmokeTestFailed: If either output does not match
        """
        path = self.bin_dir / destination_name
        help_output = self._invoke(path, "--help")
        version_output = self._invoke(path, "--version")

        problems = []
        if self.usage_prefix not in help_output:
            problems.append(f"--help output lacks {self.usage_prefix!r}")
        if expected_version is not None and expected_version not in version_output:
            problems.append(
                f"--version output {version_output.strip()!r} does not contain {expected_version!r}"
            )

        if problems:
            result = TestResult(passed=False, details="; ".join(problems))
            logger.warning("Smoke test failed for %s: %s", destination_name, result.details)
            raise SmokeTestFailed(destination_name, result)

        details = f"usage ok; version {version_output.strip()}"
        logger.info("Smoke test passed for %s", destination_name)
        return TestResult(passed=True, details=details)

    def _invoke(self, path: Path, flag: str) -> str:
        command = f"{path} {flag}"
        try:
            result = self.runner.run([str(path), flag], self.timeout)
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(command, f"timed out after {self.timeout}s") from e
        except OSError as e:
            raise ExecutionError(command, e.strerror or str(e)) from e
        except UnicodeDecodeError as e:
            raise ExecutionError(command, f"output is not valid text ({e.reason})") from e

        output = (result.stdout or "") + (result.stderr or "")
        if result.returncode != 0:
            raise ExecutionError(command, f"exit status {result.returncode}", output)
        return output

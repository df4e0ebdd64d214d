"""
Resolve, fetch, verify, install and smoke-test one formula version.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .archive import extract_member
from .config import InstallerConfig
from .errors import InstallerError, SmokeTestFailed
from .installer import Installer
from .interfaces import CommandRunner, Transport
from .models import PackageSpec, PipelineResult, PipelineStage, PipelineStatus
from .resolver import ArtifactResolver
from .smoke import SmokeTester
from .transport import RequestsTransport
from .verifier import IntegrityVerifier, download_url


logger = logging.getLogger(__name__)


class InstallPipeline:
    """Run the install stages in order, stopping at the first failure.

    An integrity failure stops before anything is written. A failed smoke
    test leaves the installed artifact in place.
    """

    def __init__(
        self,
        config: InstallerConfig,
        transport: Optional[Transport] = None,
        runner: Optional[CommandRunner] = None,
        resolver: Optional[ArtifactResolver] = None,
    ) -> None:
        self.config = config
        self.transport = transport or RequestsTransport(
            chunk_size=config.chunk_size,
            show_progress=config.show_progress,
        )
        self.runner = runner
        self.resolver = resolver or ArtifactResolver()
        self.verifier = IntegrityVerifier(self.transport, timeout=config.timeout)
        self.installer = Installer(config.bin_dir)

    def run(
        self,
        spec: PackageSpec,
        requested_version: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> PipelineResult:
        """Install ``requested_version`` of ``spec``.

        Failures are recorded on the returned result rather than raised.
        """
        result = PipelineResult(package=spec.name, requested_version=requested_version)
        try:
            self._run_stages(spec, requested_version, result, cancel_event)
        except SmokeTestFailed as e:
            logger.warning("%s installed but failed its smoke test: %s", spec.name, e.result.details)
            result.test_result = e.result
            result.error = e
        except InstallerError as e:
            logger.error("%s failed after stage %s: %s", spec.name, result.stage, e)
            result.error = e
        else:
            result.status = PipelineStatus.SUCCESS
        return result

    def _run_stages(
        self,
        spec: PackageSpec,
        requested_version: str,
        result: PipelineResult,
        cancel_event: Optional[threading.Event],
    ) -> None:
        entry = self.resolver.resolve(spec, requested_version)
        result.entry = entry
        result.stage = PipelineStage.RESOLVED
        logger.info("Installing %s %s from %s", spec.name, entry.version, entry.url)

        content = self.transport.fetch(
            download_url(entry), self.config.timeout, cancel_event
        )
        result.stage = PipelineStage.FETCHED

        content = self.verifier.verify(entry, content)
        result.integrity_verified = entry.sha256 is not None
        result.stage = PipelineStage.VERIFIED

        payload = extract_member(content, spec.install.source, entry.url)
        result.artifact = self.installer.install(payload, spec.install.destination, entry)
        result.stage = PipelineStage.INSTALLED

        if not self.config.run_smoke_test:
            logger.info("Skipping smoke test for %s", spec.name)
            return

        tester = SmokeTester(
            self.config.bin_dir,
            spec.usage_prefix,
            runner=self.runner,
            timeout=self.config.test_timeout,
        )
        expected = None if entry.is_head else entry.version
        result.test_result = tester.verify(spec.install.destination, expected)
        result.stage = PipelineStage.TESTED

    def uninstall(self, spec: PackageSpec) -> bool:
        return self.installer.uninstall(spec.install.destination)

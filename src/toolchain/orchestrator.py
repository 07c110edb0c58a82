"""Two-phase install orchestration.

Steps per invocation: check-idempotent, acquire-package, acquire-payload,
verify. Nothing is retried here; each failure is raised as its own error
type so the caller can re-run ``install``, which re-derives its starting
point from the install directory.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from errors import AcquisitionError, InstallVerificationError, PayloadDownloadError
from versioning.models import InstalledVersion, InstallResult, ScanResult, VersionId

from .acquisition import AcquisitionMechanism
from .scanner import scan

logger = logging.getLogger(__name__)

STEP_ACQUIRE_PACKAGE = "acquire-package"
STEP_ACQUIRE_PAYLOAD = "acquire-payload"


class InstallOrchestrator:
    """Drives a requested version through the acquisition mechanism."""

    def __init__(
        self,
        install_dir: str,
        mechanism: AcquisitionMechanism,
        scanner: Callable[[str], ScanResult] = scan,
    ):
        self.install_dir = os.path.abspath(install_dir)
        self.mechanism = mechanism
        self._scan = scanner

    def _trace(self, action: str, version_id: VersionId, outcome: str) -> None:
        if is_debug_enabled(logger):
            logger.debug(
                "Install step",
                extra=extra_context(
                    event="install_step",
                    component="orchestrator",
                    action=action,
                    outcome=outcome,
                    version=str(version_id)
                )
            )

    def _check_idempotent(self, version_id: VersionId) -> Optional[InstalledVersion]:
        return self._scan(self.install_dir).find(version_id)

    def install(self, version_id: VersionId) -> InstallResult:
        """Install ``version_id``; a no-op when it is already fully installed.

        Raises:
            AcquisitionError: The package fetch step failed.
            PayloadDownloadError: The payload download step failed.
            InstallVerificationError: Both steps succeeded but the version is missing.
        """
        version = str(version_id)
        steps: List[str] = []

        existing = self._check_idempotent(version_id)
        if existing is not None and self.mechanism.payload_ready(existing):
            self._trace("check_idempotent", version_id, "already_installed")
            logger.info("Version %s is already installed at %s", version, existing.binary_path)
            return InstallResult(installed=existing, steps_run=())

        if existing is None:
            logger.info("Step 1/2: fetching package for %s", version)
            result = self.mechanism.fetch_package(version_id)
            steps.append(STEP_ACQUIRE_PACKAGE)
            if not result.ok:
                self._trace(STEP_ACQUIRE_PACKAGE, version_id, "failed")
                raise AcquisitionError(
                    f"Fetching the package failed: {result.detail or 'unknown error'}",
                    version=version,
                )
            self._trace(STEP_ACQUIRE_PACKAGE, version_id, "success")
        else:
            self._trace("check_idempotent", version_id, "payload_missing")
            logger.info("Package for %s already present; resuming at payload download", version)

        logger.info("Step 2/2: downloading payload for %s", version)
        result = self.mechanism.download_payload(version_id)
        steps.append(STEP_ACQUIRE_PAYLOAD)
        if not result.ok:
            self._trace(STEP_ACQUIRE_PAYLOAD, version_id, "failed")
            raise PayloadDownloadError(
                f"Downloading the payload failed: {result.detail or 'unknown error'}",
                version=version,
            )
        self._trace(STEP_ACQUIRE_PAYLOAD, version_id, "success")

        installed = self._scan(self.install_dir).find(version_id)
        if installed is None:
            raise InstallVerificationError(
                "Acquisition reported success but no matching binary was found in "
                f"{self.install_dir}",
                version=version,
            )
        if not self.mechanism.payload_ready(installed):
            raise InstallVerificationError(
                "Acquisition reported success but the payload is not in place",
                version=version,
            )
        logger.info("Version %s installed at %s", version, installed.binary_path)
        return InstallResult(installed=installed, steps_run=tuple(steps))

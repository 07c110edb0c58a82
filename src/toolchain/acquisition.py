"""Capability interface over the vendor's two-step acquisition mechanism.

For Go the mechanism is ``go install golang.org/dl/goX.Y.Z@latest``, which
places a small wrapper binary named ``goX.Y.Z`` in the install directory,
followed by ``goX.Y.Z download``, which fetches the SDK payload into
``~/sdk/goX.Y.Z`` and drops a ``.unpacked-success`` marker when complete.
"""

from __future__ import annotations

import abc
import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, Timer
from versioning.models import InstalledVersion, VersionId
from versioning.parser import format_binary_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcquisitionResult:
    """Completion report of a single acquisition step."""
    ok: bool
    returncode: Optional[int] = None
    detail: str = ""


class AcquisitionMechanism(abc.ABC):
    """Two discrete external steps that materialize a toolchain version."""

    @abc.abstractmethod
    def fetch_package(self, version_id: VersionId) -> AcquisitionResult:
        """Fetch the package (metadata/wrapper) for ``version_id``."""

    @abc.abstractmethod
    def download_payload(self, version_id: VersionId) -> AcquisitionResult:
        """Download the payload of an already fetched package."""

    def payload_ready(self, installed: InstalledVersion) -> bool:  # pylint: disable=unused-argument
        """Whether ``installed`` has its payload in place. Defaults to True."""
        return True


class GoDlAcquisition(AcquisitionMechanism):
    """Acquisition through the ``golang.org/dl`` wrapper commands."""

    def __init__(
        self,
        install_dir: str,
        go_executable: Optional[str] = None,
        sdk_dir: Optional[str] = None,
        dl_module: Optional[str] = None,
    ):
        self.install_dir = os.path.abspath(install_dir)
        self.go_executable = go_executable or Constants.GO_EXECUTABLE
        self.sdk_dir = sdk_dir or Constants.SDK_DIR
        self.dl_module = dl_module or Constants.DL_MODULE

    def _run(self, step: str, cmd: List[str], env: Optional[Dict[str, str]] = None) -> AcquisitionResult:
        if is_debug_enabled(logger):
            logger.debug(
                "Running acquisition step",
                extra=extra_context(
                    event="subprocess",
                    component="acquisition",
                    action=step,
                    target=" ".join(cmd)
                )
            )
        with Timer() as t:
            try:
                proc = subprocess.run(cmd, env=env, check=False)
            except OSError as exc:
                logger.error("Failed to run %s: %s", cmd[0], exc)
                return AcquisitionResult(ok=False, detail=f"failed to run {cmd[0]}: {exc}")
        logger.debug("%s exited with %s after %d ms", cmd[0], proc.returncode, t.duration_ms())
        if proc.returncode != 0:
            return AcquisitionResult(
                ok=False,
                returncode=proc.returncode,
                detail=f"{' '.join(cmd)} exited with code {proc.returncode}",
            )
        return AcquisitionResult(ok=True, returncode=0)

    def fetch_package(self, version_id: VersionId) -> AcquisitionResult:
        env = dict(os.environ)
        env["GOBIN"] = self.install_dir
        return self._run(
            "fetch_package",
            [self.go_executable, "install", f"{self.dl_module}/{Constants.BINARY_PREFIX}{version_id}@latest"],
            env=env,
        )

    def download_payload(self, version_id: VersionId) -> AcquisitionResult:
        wrapper = os.path.join(self.install_dir, format_binary_name(version_id))
        if not os.path.exists(wrapper):
            return AcquisitionResult(ok=False, detail=f"wrapper not found at {wrapper}")
        return self._run("download_payload", [wrapper, "download"])

    def sdk_path(self, version_id: VersionId) -> str:
        return os.path.join(self.sdk_dir, f"{Constants.BINARY_PREFIX}{version_id}")

    def payload_ready(self, installed: InstalledVersion) -> bool:
        return os.path.isfile(os.path.join(self.sdk_path(installed.id), Constants.SDK_READY_MARKER))

"""LifecycleEngine: the four user operations composed from scanner, catalog,
orchestrator and switcher.

Every call re-reads the filesystem or network; nothing is cached between
operations.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Tuple, Union

from constants import Constants
from registry.catalog import CatalogFetcher
from toolchain.acquisition import AcquisitionMechanism, GoDlAcquisition
from toolchain.orchestrator import InstallOrchestrator
from toolchain.scanner import scan
from toolchain.switcher import ActiveVersionSwitcher
from versioning.models import CatalogEntry, InstallResult, ScanResult, UseResult, VersionId
from versioning.parser import normalize_version_token

logger = logging.getLogger(__name__)

VersionArg = Union[VersionId, str]


def _as_version(version: VersionArg) -> VersionId:
    if isinstance(version, VersionId):
        return version
    return normalize_version_token(version)


class LifecycleEngine:
    """Facade for list, list-all, install and use."""

    def __init__(
        self,
        install_dir: Optional[str] = None,
        fetcher: Optional[CatalogFetcher] = None,
        mechanism: Optional[AcquisitionMechanism] = None,
    ):
        self.install_dir = os.path.abspath(install_dir or Constants.INSTALL_DIR)
        self.fetcher = fetcher or CatalogFetcher()
        self.mechanism = mechanism or GoDlAcquisition(self.install_dir)
        self.orchestrator = InstallOrchestrator(self.install_dir, self.mechanism)
        self.switcher = ActiveVersionSwitcher(self.install_dir)

    def list_installed(self) -> ScanResult:
        """Installed versions ascending plus the active pointer, if any."""
        return scan(self.install_dir)

    def list_all(self) -> Tuple[CatalogEntry, ...]:
        """Versions announced upstream, ascending."""
        return self.fetcher.fetch_all()

    def install(self, version: VersionArg) -> InstallResult:
        return self.orchestrator.install(_as_version(version))

    def use(self, version: VersionArg) -> UseResult:
        """Switch the active version and report the re-read pointer."""
        switched = self.switcher.switch_to(_as_version(version))
        after = scan(self.install_dir)
        return UseResult(installed=switched.installed, changed=switched.changed, active=after.active)

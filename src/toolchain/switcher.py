"""Atomic replacement of the active-version pointer."""

from __future__ import annotations

import logging
import os
import uuid
from typing import Callable

from errors import PointerPermissionError, SwitchError, VersionNotInstalled
from versioning.models import ScanResult, SwitchResult, VersionId
from versioning.parser import format_binary_name, pointer_name

from .scanner import scan

logger = logging.getLogger(__name__)


class ActiveVersionSwitcher:
    """Points the pointer entry of ``install_dir`` at an installed binary.

    The new link is created under a unique temporary name and renamed over
    the pointer, so readers always see either the old or the new target.
    """

    def __init__(self, install_dir: str, scanner: Callable[[str], ScanResult] = scan):
        self.install_dir = os.path.abspath(install_dir)
        self._scan = scanner

    @property
    def link_path(self) -> str:
        return os.path.join(self.install_dir, pointer_name())

    def _temp_path(self) -> str:
        return os.path.join(self.install_dir, f".{pointer_name()}.{os.getpid()}.{uuid.uuid4().hex[:8]}.tmp")

    def switch_to(self, version_id: VersionId) -> SwitchResult:
        """Make ``version_id`` the active version.

        Raises:
            VersionNotInstalled: ``version_id`` is not in the install directory.
            PointerPermissionError: The pointer location is not writable.
            SwitchError: Any other filesystem failure during the replace.
        """
        version = str(version_id)
        state = self._scan(self.install_dir)
        installed = state.find(version_id)
        if installed is None:
            raise VersionNotInstalled(
                f"Version {version} is not installed; run 'gvm install {version}' first",
                version=version,
            )

        active = state.active_version
        if active is not None and active.id == version_id:
            logger.info("Version %s is already active", version)
            return SwitchResult(installed=installed, changed=False)

        temp = self._temp_path()
        try:
            os.symlink(installed.binary_path, temp)
            os.replace(temp, self.link_path)
        except PermissionError as exc:
            self._discard(temp)
            raise PointerPermissionError(
                f"Cannot write pointer {self.link_path}: {exc.strerror or exc}",
                version=version,
            ) from exc
        except OSError as exc:
            self._discard(temp)
            raise SwitchError(
                f"Failed to replace pointer {self.link_path}: {exc.strerror or exc}",
                version=version,
            ) from exc

        logger.info("Pointer %s -> %s", self.link_path, format_binary_name(version_id))
        return SwitchResult(installed=installed, changed=True)

    @staticmethod
    def _discard(path: str) -> None:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove temporary link %s: %s", path, exc)

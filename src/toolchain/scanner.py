"""Read-only discovery of installed toolchain versions and the active pointer."""
from __future__ import annotations

import logging
import os
from typing import List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from errors import ScanError
from versioning.models import ActivePointer, InstalledVersion, ScanResult
from versioning.parser import parse_binary_name, pointer_name, sort_versions

logger = logging.getLogger(__name__)


def _same_path(a: str, b: str) -> bool:
    return os.path.normcase(os.path.abspath(a)) == os.path.normcase(os.path.abspath(b))


def _list_installed(install_dir: str) -> List[InstalledVersion]:
    found: List[InstalledVersion] = []
    skip = pointer_name()
    try:
        with os.scandir(install_dir) as it:
            entries = list(it)
    except FileNotFoundError:
        return found
    except OSError as exc:
        raise ScanError(f"Cannot read install directory {install_dir}: {exc.strerror or exc}") from exc
    for entry in entries:
        if entry.name == skip:
            continue
        version_id = parse_binary_name(entry.name)
        if version_id is None:
            if is_debug_enabled(logger):
                logger.debug(
                    "Skipping non-toolchain entry",
                    extra=extra_context(
                        event="decision",
                        component="scanner",
                        action="filter",
                        outcome="skipped",
                        target=entry.name
                    )
                )
            continue
        found.append(InstalledVersion(id=version_id, binary_path=os.path.join(install_dir, entry.name)))
    return sort_versions(found, key=lambda item: item.id)


def _resolve_pointer(install_dir: str, installed: List[InstalledVersion]) -> Optional[ActivePointer]:
    link_path = os.path.join(install_dir, pointer_name())
    if not os.path.islink(link_path):
        return None
    try:
        raw_target = os.readlink(link_path)
    except OSError as exc:
        # Replaced by a concurrent switch between islink and readlink.
        logger.debug("Could not read pointer %s: %s", link_path, exc)
        return None
    target = raw_target if os.path.isabs(raw_target) else os.path.join(install_dir, raw_target)
    for item in installed:
        if _same_path(item.binary_path, target):
            return ActivePointer(link_path=link_path, target_path=target, version=item.id, resolved=True)
    return ActivePointer(
        link_path=link_path,
        target_path=target,
        version=parse_binary_name(os.path.basename(target)),
        resolved=False,
    )


def scan(install_dir: str) -> ScanResult:
    """Enumerate ``install_dir`` for toolchain binaries and resolve the pointer.

    Entries whose names do not follow the binary naming convention are
    skipped. A missing directory yields an empty result. A pointer whose
    target matches no scanned version is reported with ``resolved=False``.
    """
    installed = _list_installed(install_dir)
    active = _resolve_pointer(install_dir, installed)
    if active is not None and not active.resolved:
        logger.debug("Active pointer %s -> %s matches no installed version", active.link_path, active.target_path)
    return ScanResult(installed=tuple(installed), active=active)

"""Data models for toolchain versions, installations and the remote catalog."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import semantic_version


@functools.total_ordering
@dataclass(frozen=True)
class VersionId:
    """Parsed toolchain version: MAJOR.MINOR.PATCH with an optional prerelease label.

    Ordering is by (major, minor, patch); for equal triples a release without
    a label sorts after any labelled one, and labels compare as plain strings.
    """
    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None

    def sort_key(self) -> Tuple[int, int, int, int, str]:
        """Tuple whose natural ordering is the version ordering."""
        if self.prerelease is None:
            return (self.major, self.minor, self.patch, 1, "")
        return (self.major, self.minor, self.patch, 0, self.prerelease)

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionId):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease is not None:
            return f"{base}-{self.prerelease}"
        return base

    def to_semver(self) -> semantic_version.Version:
        """Convert to a ``semantic_version.Version`` for range matching.

        Raises:
            ValueError: If the label is not a valid semver identifier (e.g. "01").
        """
        return semantic_version.Version(str(self))


class ReleaseKind(Enum):
    """Release classification announced by the catalog."""
    STABLE = "stable"
    UNSTABLE = "unstable"


@dataclass(frozen=True)
class InstalledVersion:
    """A toolchain binary present in the install directory."""
    id: VersionId
    binary_path: str


@dataclass(frozen=True)
class ActivePointer:
    """Where the active-version pointer currently leads.

    ``resolved`` is False when the target matches none of the scanned
    installations; ``version`` is still filled in when the target's file
    name follows the binary naming convention.
    """
    link_path: str
    target_path: str
    version: Optional[VersionId]
    resolved: bool


@dataclass(frozen=True)
class ScanResult:
    """Snapshot of the install directory, installed versions ascending."""
    installed: Tuple[InstalledVersion, ...]
    active: Optional[ActivePointer]

    def find(self, version_id: VersionId) -> Optional[InstalledVersion]:
        for item in self.installed:
            if item.id == version_id:
                return item
        return None

    @property
    def active_version(self) -> Optional[InstalledVersion]:
        """The installed version the pointer resolves to, if any."""
        if self.active is None or not self.active.resolved or self.active.version is None:
            return None
        return self.find(self.active.version)


@dataclass(frozen=True)
class CatalogEntry:
    """A version announced by the upstream index."""
    id: VersionId
    release_kind: ReleaseKind

    @property
    def stable(self) -> bool:
        return self.release_kind is ReleaseKind.STABLE


@dataclass(frozen=True)
class InstallResult:
    """Outcome of an install; ``steps_run`` is empty for an idempotent no-op."""
    installed: InstalledVersion
    steps_run: Tuple[str, ...]

    @property
    def already_installed(self) -> bool:
        return not self.steps_run


@dataclass(frozen=True)
class SwitchResult:
    """Outcome of a switch; ``changed`` is False when the version was already active."""
    installed: InstalledVersion
    changed: bool


@dataclass(frozen=True)
class UseResult:
    """Outcome of ``use`` with the freshly re-read pointer for the sanity echo."""
    installed: InstalledVersion
    changed: bool
    active: Optional[ActivePointer]

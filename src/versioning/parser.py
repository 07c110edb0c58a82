"""Version string parsing, ordering and binary-name utilities."""

import logging
import os
import re
from typing import Iterable, List, Optional, TypeVar

import semantic_version

from constants import Constants
from errors import MalformedVersion

from .models import VersionId

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)(?:-([a-zA-Z0-9]+))?", re.ASCII)

T = TypeVar("T")


def parse_version(text: str) -> VersionId:
    """Parse ``MAJOR.MINOR.PATCH[-LABEL]`` into a VersionId.

    Raises:
        MalformedVersion: If ``text`` does not match the grammar exactly.
    """
    if not isinstance(text, str):
        raise MalformedVersion(f"Version must be a string, got {type(text).__name__}")
    m = _VERSION_RE.fullmatch(text)
    if not m:
        raise MalformedVersion(f"Malformed version '{text}'", version=text)
    major, minor, patch, label = m.groups()
    return VersionId(int(major), int(minor), int(patch), label)


def compare_versions(a: VersionId, b: VersionId) -> int:
    """Three-way comparison: -1, 0 or 1."""
    ka, kb = a.sort_key(), b.sort_key()
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


def strip_prefix(token: str) -> str:
    """Drop surrounding whitespace and a leading toolchain prefix ("go1.22.1" -> "1.22.1")."""
    s = token.strip()
    prefix = Constants.BINARY_PREFIX
    if prefix and s.startswith(prefix):
        return s[len(prefix):]
    return s


def normalize_version_token(token: str) -> VersionId:
    """Parse a user- or catalog-supplied version, accepting the optional prefix.

    Raises:
        MalformedVersion: If what remains after the prefix is not a valid version.
    """
    if not isinstance(token, str):
        raise MalformedVersion(f"Version must be a string, got {type(token).__name__}")
    try:
        return parse_version(strip_prefix(token))
    except MalformedVersion as exc:
        raise MalformedVersion(f"Malformed version '{token}'", version=token) from exc


def _binary_suffix() -> str:
    return Constants.WINDOWS_SUFFIX if os.name == "nt" else ""


def pointer_name() -> str:
    """File name of the active-version pointer on this platform."""
    return Constants.POINTER_NAME + _binary_suffix()


def format_binary_name(version_id: VersionId) -> str:
    """Per-platform binary name for ``version_id``, e.g. ``go1.22.11``."""
    return f"{Constants.BINARY_PREFIX}{version_id}{_binary_suffix()}"


def parse_binary_name(name: str) -> Optional[VersionId]:
    """Inverse of ``format_binary_name``; None if ``name`` is not a toolchain binary."""
    suffix = _binary_suffix()
    if suffix:
        if not name.lower().endswith(suffix):
            return None
        name = name[: -len(suffix)]
    prefix = Constants.BINARY_PREFIX
    if not name.startswith(prefix) or name == Constants.POINTER_NAME:
        return None
    try:
        return parse_version(name[len(prefix):])
    except MalformedVersion:
        return None


def sort_versions(items: Iterable[T], key=lambda item: item) -> List[T]:
    """Return ``items`` in ascending version order; ``key`` maps an item to its VersionId."""
    return sorted(items, key=lambda item: key(item).sort_key())


def filter_by_constraint(items: Iterable[T], constraint: str, key=lambda item: item) -> List[T]:
    """Keep the items whose version satisfies a semver range such as ``>=1.21.0,<1.23.0``.

    Prerelease matching follows ``semantic_version.SimpleSpec``. Labels that
    are not valid semver identifiers never match.

    Raises:
        MalformedVersion: If ``constraint`` is not a valid range expression.
    """
    try:
        spec = semantic_version.SimpleSpec(constraint)
    except ValueError as exc:
        raise MalformedVersion(f"Invalid version constraint '{constraint}'", step="constraint") from exc
    matched = []
    for item in items:
        try:
            semver = key(item).to_semver()
        except ValueError:
            logger.debug("Skipping %s: not representable as semver", key(item))
            continue
        if semver in spec:
            matched.append(item)
    return matched

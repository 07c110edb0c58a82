"""Remote catalog client: fetch and parse the versions announced upstream."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from constants import Constants
from common.http_client import safe_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from errors import CatalogParseError, MalformedVersion, NetworkError
from versioning.models import CatalogEntry, ReleaseKind, VersionId
from versioning.parser import normalize_version_token, sort_versions

logger = logging.getLogger(__name__)


def _iter_json_records(data: Any) -> Iterable[Tuple[str, Optional[bool]]]:
    """Yield (version, stable flag) pairs from the structured listing."""
    if not isinstance(data, list):
        return
    for item in data:
        if isinstance(item, dict):
            version = item.get("version")
            stable = item.get("stable")
            if isinstance(version, str):
                yield version, stable if isinstance(stable, bool) else None
        elif isinstance(item, str):
            yield item, None


def _iter_line_records(text: str) -> Iterable[Tuple[str, Optional[bool]]]:
    """Yield (version, None) pairs from a one-version-per-line listing."""
    for line in text.splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            yield line.split()[0], None


def parse_catalog(text: str) -> List[CatalogEntry]:
    """Parse a catalog body into ascending, de-duplicated entries.

    The body is either a JSON array of ``{"version": ..., "stable": ...}``
    objects or a plain listing with one version per line. Names outside the
    version grammar are dropped. An entry is unstable when it carries a
    prerelease label or is explicitly marked ``"stable": false``.

    Raises:
        CatalogParseError: If the body is empty or contains no valid version.
    """
    if not text or not text.strip():
        raise CatalogParseError("Catalog response body is empty")
    try:
        records = list(_iter_json_records(json.loads(text)))
    except json.JSONDecodeError:
        records = list(_iter_line_records(text))

    seen: Dict[VersionId, CatalogEntry] = {}
    dropped = 0
    for raw, stable in records:
        try:
            version_id = normalize_version_token(raw)
        except MalformedVersion:
            dropped += 1
            continue
        if version_id in seen:
            continue
        unstable = version_id.is_prerelease or stable is False
        seen[version_id] = CatalogEntry(
            id=version_id,
            release_kind=ReleaseKind.UNSTABLE if unstable else ReleaseKind.STABLE,
        )

    if is_debug_enabled(logger):
        logger.debug(
            "Parsed catalog",
            extra=extra_context(
                event="parse",
                component="catalog",
                action="parse_catalog",
                outcome="success" if seen else "empty",
                count=len(seen),
                dropped=dropped
            )
        )
    if not seen:
        raise CatalogParseError(f"Catalog contained no valid versions ({dropped} entries rejected)")
    return sort_versions(seen.values(), key=lambda entry: entry.id)


class CatalogFetcher:
    """Queries the upstream index; every call goes to the network."""

    def __init__(self, url: Optional[str] = None):
        self.url = url or Constants.CATALOG_URL

    def fetch_all(self) -> Tuple[CatalogEntry, ...]:
        """Fetch and parse the catalog, ascending.

        Raises:
            NetworkError: On transport failure, timeout or a non-200 status.
            CatalogParseError: If the body yields no valid versions.
        """
        logger.info("Fetching available versions from %s", safe_url(self.url))
        res = safe_get(self.url, context="catalog", headers={"Accept": "application/json"})
        if res.status_code != 200:
            logger.warning(
                "HTTP non-200 from catalog",
                extra=extra_context(
                    event="http_response",
                    outcome="handled_non_2xx",
                    status_code=res.status_code,
                    target=safe_url(self.url)
                )
            )
            raise NetworkError(
                f"Catalog request failed with HTTP {res.status_code}",
                status_code=res.status_code,
            )
        return tuple(parse_catalog(res.text))

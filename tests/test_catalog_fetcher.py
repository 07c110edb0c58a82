"""Tests for the remote catalog client and the shared HTTP helper."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from constants import Constants
from common.http_client import safe_get
from errors import CatalogParseError, NetworkError
from registry.catalog import CatalogFetcher, parse_catalog
from versioning.models import ReleaseKind
from versioning.parser import parse_version

GO_DEV_SAMPLE = [
    {"version": "go1.23.0", "stable": True, "files": []},
    {"version": "go1.22.6", "stable": True, "files": []},
    {"version": "go1.23rc2", "stable": False, "files": []},
    {"version": "go1.21.13", "stable": True, "files": []},
    {"version": "go1.22.6", "stable": True, "files": []},
    {"version": "go1.24.0-rc1", "stable": False, "files": []},
    {"version": "go1.20", "stable": True, "files": []},
    {"version": "go1.22.7", "stable": False, "files": []},
]


def _response(status_code=200, body=None, text=None):
    res = MagicMock()
    res.status_code = status_code
    res.text = text if text is not None else json.dumps(body)
    return res


class TestParseCatalog:
    """Parsing and classification of catalog bodies."""

    def test_structured_listing(self):
        entries = parse_catalog(json.dumps(GO_DEV_SAMPLE))
        assert [str(e.id) for e in entries] == ["1.21.13", "1.22.6", "1.22.7", "1.23.0", "1.24.0-rc1"]

    def test_classification(self):
        kinds = {str(e.id): e.release_kind for e in parse_catalog(json.dumps(GO_DEV_SAMPLE))}
        assert kinds["1.23.0"] is ReleaseKind.STABLE
        assert kinds["1.24.0-rc1"] is ReleaseKind.UNSTABLE
        assert kinds["1.22.7"] is ReleaseKind.UNSTABLE

    def test_prerelease_is_unstable_even_if_marked_stable(self):
        entries = parse_catalog(json.dumps([{"version": "1.22.0-rc1", "stable": True}]))
        assert entries[0].stable is False

    def test_duplicates_collapse(self):
        entries = parse_catalog(json.dumps(["go1.22.6", "1.22.6", "go1.22.6"]))
        assert len(entries) == 1

    def test_line_listing(self):
        body = "# announced versions\ngo1.22.1\n1.21.0  2023-08-08\n\ngarbage\ngo1.22.0-rc1\n"
        entries = parse_catalog(body)
        assert [str(e.id) for e in entries] == ["1.21.0", "1.22.0-rc1", "1.22.1"]
        assert [e.stable for e in entries] == [True, False, True]

    @pytest.mark.parametrize("body", ["", "   \n", "[]", json.dumps([{"version": "go1.21rc2"}]), "{}"])
    def test_no_valid_entries_is_a_parse_error(self, body):
        with pytest.raises(CatalogParseError):
            parse_catalog(body)


class TestCatalogFetcher:
    """Network behavior of fetch_all."""

    @patch("registry.catalog.safe_get")
    def test_fetch_all(self, mock_safe_get):
        mock_safe_get.return_value = _response(body=GO_DEV_SAMPLE)
        entries = CatalogFetcher("https://example.test/dl/?mode=json").fetch_all()
        assert isinstance(entries, tuple)
        assert entries[0].id == parse_version("1.21.13")
        assert mock_safe_get.call_args[0][0] == "https://example.test/dl/?mode=json"

    @patch("registry.catalog.safe_get")
    def test_default_url(self, mock_safe_get):
        mock_safe_get.return_value = _response(body=GO_DEV_SAMPLE)
        CatalogFetcher().fetch_all()
        assert mock_safe_get.call_args[0][0] == Constants.CATALOG_URL

    @patch("registry.catalog.safe_get")
    def test_non_200_is_network_error(self, mock_safe_get):
        mock_safe_get.return_value = _response(status_code=503, text="unavailable")
        with pytest.raises(NetworkError) as exc:
            CatalogFetcher().fetch_all()
        assert exc.value.status_code == 503
        assert "503" in str(exc.value)

    @patch("registry.catalog.safe_get")
    def test_empty_body_is_parse_error(self, mock_safe_get):
        mock_safe_get.return_value = _response(text="")
        with pytest.raises(CatalogParseError):
            CatalogFetcher().fetch_all()

    @patch("registry.catalog.safe_get")
    def test_every_call_hits_the_network(self, mock_safe_get):
        mock_safe_get.return_value = _response(body=GO_DEV_SAMPLE)
        fetcher = CatalogFetcher()
        fetcher.fetch_all()
        fetcher.fetch_all()
        assert mock_safe_get.call_count == 2


class TestSafeGet:
    """Transport errors become NetworkError."""

    @patch("common.http_client.requests.get")
    def test_passes_timeout_and_user_agent(self, mock_get):
        mock_get.return_value = _response(body=[])
        safe_get("https://example.test/", context="catalog")
        kwargs = mock_get.call_args[1]
        assert kwargs["timeout"] == Constants.REQUEST_TIMEOUT
        assert kwargs["headers"]["User-Agent"] == Constants.USER_AGENT

    @patch("common.http_client.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")
        with pytest.raises(NetworkError) as exc:
            safe_get("https://example.test/", context="catalog")
        assert "timed out" in str(exc.value)

    @patch("common.http_client.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(NetworkError) as exc:
            safe_get("https://example.test/", context="catalog")
        assert exc.value.step == "fetch-catalog"

    @patch("common.http_client.requests.get")
    def test_non_200_is_returned(self, mock_get):
        mock_get.return_value = _response(status_code=404, text="")
        assert safe_get("https://example.test/", context="catalog").status_code == 404

"""Shared fixtures: isolated install directories and a scriptable acquisition fake."""

import os

import pytest

from constants import Constants
from toolchain.acquisition import AcquisitionMechanism, AcquisitionResult
from versioning.parser import format_binary_name, parse_version


def make_binary(install_dir, version):
    """Create an executable placeholder named after ``version`` and return its path."""
    os.makedirs(install_dir, exist_ok=True)
    path = os.path.join(install_dir, format_binary_name(parse_version(str(version))))
    with open(path, "w", encoding="utf-8") as fh:
        fh.write("#!/bin/sh\necho go version\n")
    os.chmod(path, 0o755)
    return path


class FakeAcquisition(AcquisitionMechanism):
    """Records every step and fails on demand.

    By default only ``download_payload`` places the binary, so a failed
    payload step leaves nothing behind. ``fetch_places_binary`` mimics
    golang.org/dl, where the package step already creates the wrapper and
    the payload is tracked separately.
    """

    def __init__(self, install_dir, fail_fetch=False, fail_download=False,
                 fetch_places_binary=False, download_places_binary=True):
        self.install_dir = str(install_dir)
        self.fail_fetch = fail_fetch
        self.fail_download = fail_download
        self.fetch_places_binary = fetch_places_binary
        self.download_places_binary = download_places_binary
        self.calls = []
        self.ready = set()

    def fetch_package(self, version_id):
        self.calls.append(("fetch_package", str(version_id)))
        if self.fail_fetch:
            return AcquisitionResult(ok=False, returncode=1, detail="module not found")
        if self.fetch_places_binary:
            make_binary(self.install_dir, version_id)
        return AcquisitionResult(ok=True, returncode=0)

    def download_payload(self, version_id):
        self.calls.append(("download_payload", str(version_id)))
        if self.fail_download:
            return AcquisitionResult(ok=False, returncode=1, detail="connection reset")
        if self.download_places_binary:
            make_binary(self.install_dir, version_id)
        self.ready.add(version_id)
        return AcquisitionResult(ok=True, returncode=0)

    def payload_ready(self, installed):
        if not self.fetch_places_binary:
            return True
        return installed.id in self.ready


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo any configuration applied onto Constants during a test."""
    saved = {k: v for k, v in vars(Constants).items() if k.isupper()}
    yield
    for key, value in saved.items():
        setattr(Constants, key, value)


@pytest.fixture
def install_dir(tmp_path):
    path = tmp_path / "bin"
    path.mkdir()
    return str(path)

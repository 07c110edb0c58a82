"""Error taxonomy for the version lifecycle operations.

Every error names the requested version (when one is known) and the step
that failed, so the CLI can report both without inspecting the message.
"""

from __future__ import annotations

from typing import Optional


class LifecycleError(Exception):
    """Base class for all errors raised by list, list-all, install and use."""

    step = "unknown"

    def __init__(self, message: str, *, version: Optional[str] = None, step: Optional[str] = None):
        super().__init__(message)
        self.version = version
        if step is not None:
            self.step = step

    def describe(self) -> str:
        """One-line rendering used by the CLI."""
        where = f" [step: {self.step}]"
        if self.version:
            return f"{self} (version {self.version}){where}"
        return f"{self}{where}"


class ScanError(LifecycleError):
    """The install directory exists but cannot be listed."""

    step = "scan"


class MalformedVersion(LifecycleError, ValueError):
    """Raised when a string does not follow the MAJOR.MINOR.PATCH[-LABEL] grammar."""

    step = "parse"


class NetworkError(LifecycleError):
    """Raised on transport failure, timeout or a non-success catalog response."""

    step = "fetch-catalog"

    def __init__(self, message: str, *, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.status_code = status_code


class CatalogParseError(LifecycleError):
    """Raised when the catalog body is empty or yields no valid versions."""

    step = "parse-catalog"


class InstallError(LifecycleError):
    """Base class for install failures."""

    step = "install"


class AcquisitionError(InstallError):
    """The acquisition mechanism failed to fetch the version's package."""

    step = "acquire-package"


class PayloadDownloadError(InstallError):
    """The package is present but downloading its payload failed."""

    step = "acquire-payload"


class InstallVerificationError(InstallError):
    """Both acquisition steps reported success yet the version is not installed."""

    step = "verify"


class SwitchError(LifecycleError):
    """Raised when the active-version pointer could not be replaced."""

    step = "switch"


class VersionNotInstalled(SwitchError):
    """The requested version is absent from the install directory."""

    step = "check-installed"


class PointerPermissionError(SwitchError, PermissionError):
    """The pointer location is not writable."""

    step = "switch"

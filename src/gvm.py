"""gvm - Go toolchain version manager

    Lists installed and available Go versions, installs new ones through
    golang.org/dl, and switches the active ``go`` binary.

    Returns:
        int: Exit code
"""
import logging
import os
import subprocess
import sys
from typing import Iterable, List, Optional, Sequence

from constants import Commands, Constants, ExitCodes
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import configure
from errors import (
    CatalogParseError,
    InstallError,
    LifecycleError,
    MalformedVersion,
    NetworkError,
    ScanError,
    SwitchError,
)
from lifecycle import LifecycleEngine
from registry.catalog import CatalogFetcher
from versioning.models import ActivePointer, CatalogEntry, ScanResult
from versioning.parser import filter_by_constraint

logger = logging.getLogger(__name__)

_VERSION_ECHO_TIMEOUT = 10  # seconds


def exit_code_for(exc: LifecycleError) -> int:
    """Map an error to the process exit code."""
    if isinstance(exc, ScanError):
        return ExitCodes.FILE_ERROR.value
    if isinstance(exc, MalformedVersion):
        return ExitCodes.INVALID_VERSION.value
    if isinstance(exc, (NetworkError, CatalogParseError)):
        return ExitCodes.CONNECTION_ERROR.value
    if isinstance(exc, InstallError):
        return ExitCodes.INSTALL_ERROR.value
    if isinstance(exc, SwitchError):
        return ExitCodes.SWITCH_ERROR.value
    return ExitCodes.FILE_ERROR.value


def render_installed(state: ScanResult, match: Optional[str] = None) -> List[str]:
    """Lines for ``gvm list``: ascending, the active one marked with ``->``."""
    installed = list(state.installed)
    if match:
        installed = filter_by_constraint(installed, match, key=lambda item: item.id)
    current = state.active_version
    lines: List[str] = []
    if not installed:
        lines.append("No Go versions installed.")
        lines.append("Use gvm install <version> to install a version.")
    else:
        lines.append("Installed Go versions:")
        for item in installed:
            if current is not None and item.id == current.id:
                lines.append(f"  -> {item.id} (current)")
            else:
                lines.append(f"     {item.id}")
    active = state.active
    if active is not None and not active.resolved:
        label = str(active.version) if active.version is not None else active.target_path
        lines.append(f"  -> {label} (current, not among installed versions: {active.target_path})")
    return lines


def render_catalog(
    entries: Sequence[CatalogEntry],
    installed: Iterable = (),
    limit: Optional[int] = None,
    stable_only: bool = False,
    match: Optional[str] = None,
) -> List[str]:
    """Lines for ``gvm list-all``: ascending tail of the catalog with markers."""
    shown = [e for e in entries if e.stable] if stable_only else list(entries)
    if match:
        shown = filter_by_constraint(shown, match, key=lambda entry: entry.id)
    total = len(shown)
    limit = limit or Constants.LIST_ALL_LIMIT
    shown = shown[-limit:]
    installed_ids = set(installed)

    lines = [
        "Available Go versions:",
        "(stable versions marked with *, installed versions marked with ✓)",
        "",
    ]
    for entry in shown:
        install_marker = "✓" if entry.id in installed_ids else " "
        stable_marker = "*" if entry.stable else " "
        lines.append(f"  {install_marker} {stable_marker} {entry.id}")
    lines.append("")
    lines.append(f"Showing latest {len(shown)} of {total} versions.")
    return lines


def report_active_version(active: Optional[ActivePointer]) -> Optional[str]:
    """Run ``<pointer> version`` for the sanity echo; None when it cannot be run."""
    if active is None:
        return None
    try:
        proc = subprocess.run(
            [active.link_path, "version"],
            capture_output=True,
            text=True,
            timeout=_VERSION_ECHO_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Could not run %s version: %s", active.link_path, exc)
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def _emit(lines: Iterable[str], quiet: bool) -> None:
    if quiet:
        return
    for line in lines:
        print(line)


def run_command(args, engine: LifecycleEngine) -> int:
    """Dispatch one parsed command; errors propagate to ``main``."""
    quiet = getattr(args, "QUIET", False)
    action = args.action

    if action == Commands.LIST.value:
        _emit(render_installed(engine.list_installed(), getattr(args, "MATCH", None)), quiet)

    elif action == Commands.LIST_ALL.value:
        entries = engine.list_all()
        installed = [item.id for item in engine.list_installed().installed]
        _emit(
            render_catalog(
                entries,
                installed,
                limit=getattr(args, "LIMIT", None),
                stable_only=getattr(args, "STABLE_ONLY", False),
                match=getattr(args, "MATCH", None),
            ),
            quiet,
        )

    elif action == Commands.INSTALL.value:
        result = engine.install(args.version)
        version = result.installed.id
        if result.already_installed:
            _emit([f"Go {version} is already installed."], quiet)
        else:
            _emit([f"Go {version} installed successfully!"], quiet)
        _emit([f"Use 'gvm use {version}' to switch to this version."], quiet)

    elif action == Commands.USE.value:
        result = engine.use(args.version)
        version = result.installed.id
        if result.changed:
            _emit([f"Now using Go {version}"], quiet)
        else:
            _emit([f"Already using Go {version}"], quiet)
        echo = report_active_version(result.active)
        if echo:
            _emit([echo], quiet)

    else:
        logger.error("Unknown command: %s", action)
        return ExitCodes.USAGE_ERROR.value

    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()
    if getattr(args, "LOG_FILE", None):
        add_file_handler(args.LOG_FILE)

    configure(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action=args.action,
                target=Constants.INSTALL_DIR
            )
        )

    engine = LifecycleEngine(
        install_dir=Constants.INSTALL_DIR,
        fetcher=CatalogFetcher(Constants.CATALOG_URL),
    )
    try:
        code = run_command(args, engine)
    except LifecycleError as exc:
        logger.error("Error: %s", exc.describe())
        code = exit_code_for(exc)
    sys.exit(code)


if __name__ == "__main__":
    main()

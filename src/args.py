"""Argument parsing functionality for gvm."""

import argparse

from constants import Commands


def _add_common(parser):
    parser.add_argument("--install-dir",
                        dest="INSTALL_DIR",
                        help="Directory holding the toolchain binaries and the active pointer (default: ~/go/bin)",
                        action="store",
                        type=str)
    parser.add_argument("--catalog-url",
                        dest="CATALOG_URL",
                        help="Upstream index listing available versions",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")


def _positive_int(text):
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {text}")
    return value


def build_parser():
    """Build the top-level parser with one subparser per command."""
    parser = argparse.ArgumentParser(
        prog="gvm",
        description="gvm - manage multiple Go toolchain versions",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", metavar="command")
    subparsers.required = True

    p_list = subparsers.add_parser(Commands.LIST.value, help="List installed Go versions")
    p_list.add_argument("--match",
                        dest="MATCH",
                        help="Only show versions satisfying a range, e.g. '>=1.21.0,<1.23.0'",
                        action="store",
                        type=str)

    p_all = subparsers.add_parser(Commands.LIST_ALL.value, help="List Go versions available upstream")
    p_all.add_argument("--match",
                       dest="MATCH",
                       help="Only show versions satisfying a range, e.g. '>=1.21.0'",
                       action="store",
                       type=str)
    p_all.add_argument("--limit",
                       dest="LIMIT",
                       help="Show only the latest N versions (default from config, 30)",
                       action="store",
                       type=_positive_int)
    p_all.add_argument("--stable-only",
                       dest="STABLE_ONLY",
                       help="Hide unstable releases",
                       action="store_true")

    p_install = subparsers.add_parser(Commands.INSTALL.value, help="Install a specific Go version")
    p_install.add_argument("version",
                           help="Version to install (e.g., 1.22.11 or go1.22.11)")

    p_use = subparsers.add_parser(Commands.USE.value, help="Use a specific Go version")
    p_use.add_argument("version",
                       help="Version to use (e.g., 1.22.11 or go1.22.11)")

    for sub in (p_list, p_all, p_install, p_use):
        _add_common(sub)

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)

"""Constants used in the project."""

import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    INVALID_VERSION = 3
    INSTALL_ERROR = 4
    SWITCH_ERROR = 5
    USAGE_ERROR = 64


class Commands(Enum):
    """Subcommands supported by the program.

    Args:
        Enum (string): Subcommand names as typed on the command line.
    """

    LIST = "list"
    LIST_ALL = "list-all"
    INSTALL = "install"
    USE = "use"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    INSTALL_DIR = os.path.join(os.path.expanduser("~"), "go", "bin")
    BINARY_PREFIX = "go"
    POINTER_NAME = "go"
    WINDOWS_SUFFIX = ".exe"
    CATALOG_URL = "https://go.dev/dl/?mode=json&include=all"
    DL_MODULE = "golang.org/dl"
    GO_EXECUTABLE = "go"
    SDK_DIR = os.path.join(os.path.expanduser("~"), "sdk")
    SDK_READY_MARKER = ".unpacked-success"
    LIST_ALL_LIMIT = 30
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    USER_AGENT = "gvm/0.1"

    ENV_CONFIG = "GVM_CONFIG"
    ENV_LOG_LEVEL = "GVM_LOG_LEVEL"
    ENV_INSTALL_DIR = "GVM_INSTALL_DIR"
    ENV_CATALOG_URL = "GVM_CATALOG_URL"
    ENV_GO_BIN = "GVM_GO_BIN"
    CONFIG_LOCATIONS = [
        os.path.join(os.path.expanduser("~"), ".config", "gvm", "gvm.yml"),
        "gvm.yml",
    ]

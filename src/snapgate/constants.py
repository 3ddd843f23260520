"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    OPERATION_FAILED = 3


class ChangeAction(Enum):
    """Actions accepted by the daemon's ``POST /v2/snaps`` endpoint.

    Args:
        Enum (string): Change actions understood by snapd.
    """

    INSTALL = "install"
    REFRESH = "refresh"
    REMOVE = "remove"
    REVERT = "revert"
    ENABLE = "enable"
    DISABLE = "disable"
    SWITCH = "switch"


class ChangeStatus(Enum):
    """Status strings reported by snapd for a change."""

    DO = "Do"
    DOING = "Doing"
    UNDO = "Undo"
    UNDOING = "Undoing"
    DONE = "Done"
    ABORT = "Abort"
    HOLD = "Hold"
    ERROR = "Error"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    SNAPD_SOCKET = "/run/snapd.socket"
    SNAPD_API_PREFIX = "/v2"
    SNAP_BINARY = "snap"
    DEFAULT_CHANNEL = "stable"
    # Channels in find results are keyed by track, only "latest" is modeled
    DEFAULT_TRACK = "latest"
    CHANNEL_ACTIONS = [
        ChangeAction.INSTALL.value,
        ChangeAction.REFRESH.value,
        ChangeAction.SWITCH.value,
    ]
    FLAG_OPTIONS = ["classic", "devmode", "jailmode", "ignore-validation"]
    PENDING_STATUSES = [
        ChangeStatus.DO.value,
        ChangeStatus.DOING.value,
        ChangeStatus.UNDO.value,
        ChangeStatus.UNDOING.value,
    ]
    FAILURE_STATUSES = [
        ChangeStatus.ABORT.value,
        ChangeStatus.HOLD.value,
        ChangeStatus.ERROR.value,
    ]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for every daemon round-trip
    CLI_TIMEOUT = 600  # Timeout in seconds for local snap CLI invocations
    READ_CHUNK_SIZE = 4096
    CHANGE_POLL_INTERVAL_SEC = 1
    CHANGE_MAX_ATTEMPTS = 300
    ENV_PREFIX = "SNAPGATE_"

"""snapgate command line entry point.

Plays the host's part for the coordinator: builds the desired package state
from argv, checks local sources exist, runs the requested action and maps
failures onto exit codes.
"""
import json
import logging
import os
import sys

from .args import parse_args
from .common.logging_utils import configure_logging, extra_context, is_debug_enabled
from .config import ConfigError, apply_cli_overrides, apply_env_overrides, load_config
from .constants import Constants, ExitCodes
from .daemon.changes import ChangeTracker
from .daemon.client import SnapdClient
from .daemon.transport import Transport
from .errors import (
    CliInvocationError,
    DaemonError,
    OperationFailed,
    OperationTimeout,
    ProtocolError,
    SnapError,
)
from .operations import OperationCoordinator
from .snap_cli import SnapCli
from .versioning.models import PackageSpec

logger = logging.getLogger(__name__)

ACTIONS = ("install", "upgrade", "remove", "purge")


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    configure_logging(getattr(args, "LOG_LEVEL", None))
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def _coerce_value(text):
    """Best-effort convert string to JSON/number/bool, else raw string."""
    s = str(text).strip()
    try:
        return json.loads(s)
    except ValueError:
        return s


def parse_conf_pairs(pairs):
    """Turn KEY=VALUE arguments into a configuration mapping."""
    values = {}
    for item in pairs:
        if "=" not in item:
            raise ValueError(f"Expected KEY=VALUE, got '{item}'")
        key, val = item.split("=", 1)
        values[key.strip()] = _coerce_value(val)
    return values


def build_spec(args):
    """Build the PackageSpec described by the parsed arguments."""
    options = {
        flag: bool(getattr(args, f"OPT_{flag.replace('-', '_').upper()}", False))
        for flag in Constants.FLAG_OPTIONS
    }
    return PackageSpec.build(
        args.names,
        version=getattr(args, "VERSIONS", None),
        channel=getattr(args, "CHANNEL", None) or Constants.DEFAULT_CHANNEL,
        options=options,
        source=getattr(args, "SOURCE", None),
    )


def build_coordinator(spec, revision=None):
    """Wire a coordinator against the configured socket and snap binary."""
    client = SnapdClient(Transport(Constants.SNAPD_SOCKET, Constants.REQUEST_TIMEOUT))
    tracker = ChangeTracker(
        client,
        poll_interval=Constants.CHANGE_POLL_INTERVAL_SEC,
        max_attempts=Constants.CHANGE_MAX_ATTEMPTS,
    )
    return OperationCoordinator(
        spec,
        client=client,
        snap_cli=SnapCli(Constants.SNAP_BINARY, Constants.CLI_TIMEOUT),
        tracker=tracker,
        revision=revision,
    )


def _print_json(data) -> None:
    sys.stdout.write(json.dumps(data, indent=2, sort_keys=True) + "\n")


def run_command(args) -> None:
    """Execute the parsed command; raises SnapError subclasses on failure."""
    command = args.COMMAND
    if command in ACTIONS or command == "versions":
        spec = build_spec(args)
        if spec.source and not os.path.exists(spec.source):
            logger.error("Package %s not found: %s", ", ".join(args.names), spec.source)
            sys.exit(ExitCodes.FILE_ERROR.value)
        coordinator = build_coordinator(spec, getattr(args, "REVISION", None))
        if command == "versions":
            installed = coordinator.load_current_versions()
            candidates = coordinator.candidate_versions()
            _print_json({
                name: {"installed": installed[i], "candidate": candidates[i]}
                for i, name in enumerate(spec.names)
            })
            return
        result = getattr(coordinator, command)()
        if result.change is not None:
            logger.info("Change %s: %s", result.change.id, result.change.summary or result.change.status)
        return

    coordinator = build_coordinator(PackageSpec(names=[]))
    if command == "list":
        _print_json([
            {"name": s.name, "version": s.version, "revision": s.revision, "channel": s.channel}
            for s in coordinator.installed_snaps()
        ])
    elif command == "conf-get":
        _print_json(coordinator.get_conf(args.name, args.keys or None))
    elif command == "conf-set":
        try:
            values = parse_conf_pairs(args.pairs)
        except ValueError as exc:
            logger.error("%s", exc)
            sys.exit(ExitCodes.FILE_ERROR.value)
        change = coordinator.set_conf(args.name, values)
        logger.info("Configuration of %s applied (change %s)", args.name, change.id)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    try:
        if getattr(args, "CONFIG", None):
            load_config(args.CONFIG)
        apply_env_overrides()
        apply_cli_overrides(args)
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND),
        )

    try:
        run_command(args)
    except ProtocolError as exc:
        logger.error("Cannot communicate with snapd: %s", exc)
        sys.exit(ExitCodes.CONNECTION_ERROR.value)
    except DaemonError as exc:
        logger.error("snapd rejected the request: %s", exc)
        sys.exit(ExitCodes.OPERATION_FAILED.value)
    except OperationFailed as exc:
        logger.error("Snap change failed with status %s: %s", exc.status, exc.detail)
        sys.exit(ExitCodes.OPERATION_FAILED.value)
    except OperationTimeout as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.OPERATION_FAILED.value)
    except CliInvocationError as exc:
        logger.error("snap command failed (%s): %s", exc.exit_status, exc.stderr.strip() or exc.stdout.strip())
        sys.exit(ExitCodes.OPERATION_FAILED.value)
    except SnapError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.OPERATION_FAILED.value)
    except ValueError as exc:
        logger.error("%s", exc)
        sys.exit(ExitCodes.FILE_ERROR.value)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()

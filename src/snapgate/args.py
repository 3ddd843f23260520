"""Argument parsing functionality for snapgate."""

import argparse

from .constants import Constants


def _add_common(parser):
    parser.add_argument("--socket",
                        dest="SOCKET",
                        help="Path to the snapd socket (default: %s)" % Constants.SNAPD_SOCKET,
                        action="store", type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store", type=str)
    parser.add_argument("--poll-interval",
                        dest="POLL_INTERVAL",
                        help="Seconds between change status polls",
                        action="store", type=float)
    parser.add_argument("--max-attempts",
                        dest="MAX_ATTEMPTS",
                        help="Pending polls tolerated before timing out",
                        action="store", type=int)
    parser.add_argument("--snap-binary",
                        dest="SNAP_BINARY",
                        help="snap command used for local source installs",
                        action="store", type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: SNAPGATE_LOG_LEVEL or INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)


def _add_package_options(parser, with_source=True):
    parser.add_argument("names", metavar="NAME", nargs="+",
                        help="Snap package name(s)")
    parser.add_argument("--channel",
                        dest="CHANNEL",
                        help="Release channel, i.e: stable, candidate, beta, edge",
                        action="store", type=str)
    parser.add_argument("--version",
                        dest="VERSIONS",
                        help="Target version, repeat once per package",
                        action="append", type=str)
    parser.add_argument("--revision",
                        dest="REVISION",
                        help="Revision to request from snapd",
                        action="store", type=str)
    for flag in Constants.FLAG_OPTIONS:
        parser.add_argument(f"--{flag}",
                            dest=f"OPT_{flag.replace('-', '_').upper()}",
                            help=f"Request {flag} for the change",
                            action="store_true")
    if with_source:
        parser.add_argument("-s", "--source",
                            dest="SOURCE",
                            help="Install from a local .snap file instead of the store",
                            action="store", type=str)


def build_parser():
    """Build the snapgate argument parser."""
    parser = argparse.ArgumentParser(
        prog="snapgate",
        description="snapgate - converge snap packages through the snapd REST API",
        add_help=True,
    )
    sub = parser.add_subparsers(dest="COMMAND", metavar="COMMAND")
    sub.required = True

    for name, helptext in (("install", "Install snaps"), ("upgrade", "Refresh snaps")):
        p = sub.add_parser(name, help=helptext)
        _add_package_options(p)
        _add_common(p)
    for name, helptext in (("remove", "Remove snaps"), ("purge", "Remove snaps (same as remove)")):
        p = sub.add_parser(name, help=helptext)
        _add_package_options(p, with_source=False)
        _add_common(p)

    p = sub.add_parser("versions", help="Show installed and candidate versions as JSON")
    _add_package_options(p)
    _add_common(p)

    p = sub.add_parser("list", help="List installed snaps as JSON")
    _add_common(p)

    p = sub.add_parser("conf-get", help="Show snap configuration as JSON")
    p.add_argument("name", metavar="NAME")
    p.add_argument("keys", metavar="KEY", nargs="*")
    _add_common(p)

    p = sub.add_parser("conf-set", help="Set snap configuration")
    p.add_argument("name", metavar="NAME")
    p.add_argument("pairs", metavar="KEY=VALUE", nargs="+")
    _add_common(p)

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)

"""Command line entry point ``check_collectd_format``."""

from __future__ import annotations

import argparse
import sys
import typing
from typing import NoReturn, Optional

from . import __version__
from .invoker import COMMAND
from .relay import FORMAT_FLAGS, VALUED_FLAGS, Options
from .runtime import Runtime, guarded


class _CustomArgumentParser(argparse.ArgumentParser):
    """
    Exit with ``Unknown`` (exit code 3) for ``--help``, ``--version`` and
    command line errors, according to the
    `Monitoring Plugin Guidelines
    <https://github.com/monitoring-plugins/monitoring-plugin-guidelines/blob/main/monitoring_plugins_interface/02.Input.md>`__.
    """

    def exit(self, status: int = 3, message: Optional[str] = None) -> NoReturn:
        if message:
            self._print_message(message, sys.stderr)
        sys.exit(status)

    def error(self, message: str) -> NoReturn:
        self._print_message(
            "UNKNOWN: {0}: {1}\n".format(self.prog, message), sys.stdout
        )
        sys.exit(3)


def setup_argparser(
    name: Optional[str],
    version: Optional[str] = None,
    description: Optional[str] = None,
    epilog: Optional[str] = None,
) -> argparse.ArgumentParser:
    """
    Set up and configure an argument parser for a monitoring plugin
    according the
    `Monitoring Plugin Guidelines
    <https://github.com/monitoring-plugins/monitoring-plugin-guidelines/blob/main/monitoring_plugins_interface/02.Input.md>`__.

    The parser has no ``-h`` option since ``-h`` belongs to the wrapped
    utility; help is available as ``--help``.

    :param name: The name of the plugin. If provided and doesn't start with
        ``check``, it will be prefixed with ``check_``.
    :param version: The version number of the plugin. Adds ``-V`` and
        ``--version``.
    :param description: A detailed description of the plugin's functionality.
    :param epilog: Additional information to display after the help message.
    """
    description_lines: list[str] = []

    if name is not None and not name.startswith("check"):
        name = f"check_{name}"

    if version is not None:
        description_lines.append(f"version {version}")

    if description is not None:
        description_lines.append("")
        description_lines.append(description)

    parser: argparse.ArgumentParser = _CustomArgumentParser(
        prog=name,
        formatter_class=lambda prog: argparse.RawDescriptionHelpFormatter(
            prog, width=80
        ),
        description="\n".join(description_lines),
        epilog=epilog,
        add_help=False,
    )

    parser.add_argument(
        "--help", action="help", help="show this help message and exit"
    )

    if version is not None:
        parser.add_argument(
            "-V",
            "--version",
            action="version",
            version=f"%(prog)s {version}",
        )

    return parser


def build_parser() -> argparse.ArgumentParser:
    parser = setup_argparser(
        "collectd_format",
        version=__version__,
        description=(
            "Run {0} and rewrite its status line with a format string.\n"
            "The label, the consolidated value and the performance data values\n"
            "are offered to the format string in this order."
        ).format(COMMAND),
        epilog="All options except -f, -F and -v are passed on to {0}.".format(
            COMMAND
        ),
    )
    own = parser.add_argument_group("formatting")
    own.add_argument(
        "-f", metavar="FORMAT", help="printf format string for OK results"
    )
    own.add_argument(
        "-F",
        metavar="FORMAT",
        help="printf format string for WARNING and CRITICAL results",
    )
    own.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase output verbosity (use up to 3 times)",
    )

    relayed = parser.add_argument_group("passed on to {0}".format(COMMAND))
    relayed.add_argument("-w", metavar="RANGE", help="warning range")
    relayed.add_argument("-c", metavar="RANGE", help="critical range")
    relayed.add_argument("-s", metavar="SOCKET", help="path to the UNIX socket")
    relayed.add_argument("-n", metavar="VALUE_SPEC", help="value specification")
    relayed.add_argument(
        "-H", metavar="HOST", help="hostname to query the values for"
    )
    relayed.add_argument(
        "-g",
        metavar="CONSOLIDATION",
        help="consolidation function: none, average, sum or percent",
    )
    relayed.add_argument("-d", metavar="DS", help="data source to use")
    relayed.add_argument(
        "-h", action="store_const", const="1", help="show help of " + COMMAND
    )
    relayed.add_argument(
        "-m", action="store_const", const="1", help="treat NaN values as critical"
    )
    return parser


def attach_values(argv: typing.Sequence[str]) -> list[str]:
    """Join each valued flag with the following word: ``-w -5`` -> ``-w=-5``.

    Like getopt, the word after ``-w`` is its value whatever it looks
    like, while argparse would take a leading ``-`` for another option.
    argparse splits ``-w=...`` at the first ``=``, so values containing
    ``=`` survive as well.
    Empty values are left separate since ``-f`` alone lacks its value.
    """
    options = ["-" + flag for flag in FORMAT_FLAGS + VALUED_FLAGS]
    attached: list[str] = []
    args = iter(argv)
    for arg in args:
        if arg == "--":
            attached.append(arg)
            attached.extend(args)
            break
        if arg in options:
            value = next(args, None)
            if value:
                attached.append(arg + "=" + value)
                continue
            attached.append(arg)
            if value is not None:
                attached.append(value)
            continue
        attached.append(arg)
    return attached


def parse_options(argv: Optional[typing.Sequence[str]] = None) -> Options:
    """Parse *argv* (default: ``sys.argv[1:]``) into :class:`~.relay.Options`.

    Exits with UNKNOWN (3) on unrecognized or malformed arguments.
    """
    if argv is None:
        argv = sys.argv[1:]
    return Options.from_namespace(build_parser().parse_args(attach_values(argv)))


@guarded
def main(argv: Optional[typing.Sequence[str]] = None) -> NoReturn:
    options = parse_options(argv)
    Runtime().execute(options, verbose=options.verbose)

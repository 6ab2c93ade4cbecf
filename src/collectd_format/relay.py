"""Separate this plugin's own options from those of the wrapped utility.

The plugin accepts the option set of ``collectd-nagios`` plus the two
format options ``-f`` and ``-F``. Everything but the format options is
handed on to the wrapped utility as an argument vector.
"""

from __future__ import annotations

import argparse
import shlex
import typing
from typing import Optional

from .state import ServiceState, critical, warn

FORMAT_FLAGS = ("f", "F")
"""Flags consumed by this plugin, never relayed."""

VALUED_FLAGS = ("w", "c", "s", "n", "H", "g", "d")
"""Relayed flags that carry an argument."""

BOOLEAN_FLAGS = ("h", "m")
"""Relayed flags without an argument."""

RELAYED_FLAGS = VALUED_FLAGS + BOOLEAN_FLAGS

FLAGS = FORMAT_FLAGS + RELAYED_FLAGS

BOOLEAN_VALUE = "1"
"""Value stored for a boolean flag that was given on the command line."""


class Options:
    """Options of one plugin run.

    :attr:`format_ok` is applied to OK results, :attr:`format_problem`
    to WARNING and CRITICAL results. :attr:`relayed` maps the single
    character flag names meant for the wrapped utility to their values.
    """

    format_ok: Optional[str]

    format_problem: Optional[str]

    relayed: dict[str, str]

    verbose: int

    def __init__(
        self,
        format_ok: Optional[str] = None,
        format_problem: Optional[str] = None,
        relayed: Optional[typing.Mapping[str, str]] = None,
        verbose: int = 0,
    ) -> None:
        self.format_ok = format_ok
        self.format_problem = format_problem
        self.relayed = {}
        for flag, value in (relayed or {}).items():
            if flag in FORMAT_FLAGS:
                raise ValueError("format flag cannot be relayed", flag)
            if flag not in RELAYED_FLAGS:
                raise ValueError("unknown flag", flag)
            self.relayed[flag] = value
        self.verbose = verbose

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> "Options":
        """Build the options from the result of :func:`~.cli.setup_argparser`."""
        relayed: dict[str, str] = {}
        for flag in RELAYED_FLAGS:
            value = getattr(namespace, flag, None)
            if value is not None:
                relayed[flag] = value
        return cls(
            format_ok=getattr(namespace, "f", None),
            format_problem=getattr(namespace, "F", None),
            relayed=relayed,
            verbose=getattr(namespace, "verbose", 0) or 0,
        )

    def format_for(self, state: ServiceState) -> Optional[str]:
        """Select the format string for the wrapped utility's *state*.

        Returns None if there is nothing to apply: for UNKNOWN, if the
        matching option was not given, or if it is blank.
        """
        if state == critical or state == warn:
            fmt = self.format_problem
        elif state.code == 0:
            fmt = self.format_ok
        else:
            fmt = None
        if fmt is None or not fmt.strip():
            return None
        return fmt

    def __repr__(self) -> str:
        return "Options(format_ok={0!r}, format_problem={1!r}, relayed={2!r})".format(
            self.format_ok, self.format_problem, self.relayed
        )


def relay_arguments(relayed: typing.Mapping[str, str]) -> list[str]:
    """Build the argument vector for the wrapped utility.

    Boolean flags become a bare ``-x``, valued flags ``-x value`` as two
    separate elements. The values are kept as they are; the vector is
    never joined into a shell command.
    """
    args: list[str] = []
    for flag in RELAYED_FLAGS:
        if flag not in relayed:
            continue
        if flag in BOOLEAN_FLAGS:
            args.append("-" + flag)
        else:
            args.extend(["-" + flag, relayed[flag]])
    return args


def command_line(argv: typing.Sequence[str]) -> str:
    """Shell-quoted rendering of *argv* for messages."""
    return shlex.join(argv)

"""Run the wrapped checking utility and capture what it reports."""

from __future__ import annotations

import logging
import shutil
import subprocess
import typing
from typing import Optional

from .error import CheckError
from .relay import command_line
from .state import ServiceState, state_from_exitcode

_log = logging.getLogger(__name__)

COMMAND = "collectd-nagios"
"""Name of the wrapped utility, looked up in ``PATH``."""


class SubprocessResult:
    """Exit code and text output of one run of the wrapped utility."""

    exitcode: int

    output: str

    def __init__(self, exitcode: int, output: str) -> None:
        self.exitcode = exitcode
        self.output = output

    @property
    def state(self) -> ServiceState:
        """Plugin API state of :attr:`exitcode`. Read-only property."""
        return state_from_exitcode(self.exitcode)

    def __eq__(self, other: typing.Any) -> bool:
        return (
            isinstance(other, SubprocessResult)
            and self.exitcode == other.exitcode
            and self.output == other.output
        )

    def __repr__(self) -> str:
        return "SubprocessResult({0!r}, {1!r})".format(self.exitcode, self.output)


def locate(command: str = COMMAND) -> str:
    """Return the full path of *command*.

    :raises CheckError: if *command* is not found in ``PATH``
    """
    path: Optional[str] = shutil.which(command)
    if path is None:
        raise CheckError("{0} not found in PATH".format(command))
    _log.debug("using %s", path)
    return path


def invoke(args: typing.Sequence[str], command: str = COMMAND) -> SubprocessResult:
    """Run *command* with the argument vector *args*.

    Standard error is merged into the captured output.

    :raises CheckError: if *command* is missing or cannot be started
    """
    argv = [locate(command)] + list(args)
    _log.info("running %s", command_line(argv))
    try:
        proc = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        raise CheckError(
            "cannot execute {0}: {1}".format(command_line(argv), exc.strerror or exc)
        ) from exc
    _log.debug("%s exited with %d", command, proc.returncode)
    return SubprocessResult(proc.returncode, proc.stdout or "")

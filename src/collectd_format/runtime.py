"""Functions and classes to interface with the system.

This module contains the :class:`Runtime` class that runs the wrapped
utility, handles exceptions and collects logging output. The plugin's
main function is decorated with :func:`guarded` so that any failure is
reported according to the plugin API.
"""

from __future__ import annotations

import functools
import io
import logging
import sys
import traceback
from typing import Any, Callable, NoReturn, Optional, ParamSpec, TypeVar

from typing_extensions import Self

from .error import CheckError
from .formatter import reformat
from .invoker import COMMAND, invoke
from .output import Output
from .relay import Options, relay_arguments

P = ParamSpec("P")
R = TypeVar("R")


def guarded(func: Callable[P, R]) -> Callable[P, R]:
    """Runs a function in collectd_format's Runtime environment.

    `guarded` makes the decorated function behave correctly with respect
    to the Nagios plugin API if it aborts with an uncaught exception. It
    exits with an *unknown* exit code. A :exc:`~.error.CheckError` is
    reported with its message only, other exceptions also print a
    traceback in verbose mode.
    """

    @functools.wraps(func)
    # pylint: disable-next=inconsistent-return-statements
    def wrapper(*args: Any, **kwds: Any):
        runtime = Runtime()
        try:
            return func(*args, **kwds)
        except CheckError as exc:
            runtime._handle_exception(  # type: ignore
                str(exc), with_traceback=False
            )
        except Exception:
            runtime._handle_exception()  # type: ignore

    return wrapper  # type: ignore


class Runtime:
    instance = None
    _verbose = 1
    logchan: logging.StreamHandler[io.StringIO]
    output: Output
    stdout = None
    exitcode: int = 70  # EX_SOFTWARE

    def __new__(cls) -> Self:
        if not cls.instance:
            cls.instance = super(Runtime, cls).__new__(cls)
        return cls.instance

    def __init__(self) -> None:
        if hasattr(self, "logchan"):
            return
        rootlogger = logging.getLogger(__name__.split(".", 1)[0])
        rootlogger.setLevel(logging.DEBUG)
        self.logchan = logging.StreamHandler(io.StringIO())
        self.logchan.setFormatter(logging.Formatter("%(message)s"))
        rootlogger.addHandler(self.logchan)
        self.output = Output(self.logchan)
        self.verbose = self._verbose

    def _handle_exception(
        self, statusline: Optional[str] = None, with_traceback: bool = True
    ) -> NoReturn:
        exc_type, value = sys.exc_info()[0:2]
        self.output.status = "UNKNOWN: {0}".format(
            statusline or traceback.format_exception_only(exc_type, value)[0].strip(),
        )
        if with_traceback and self.verbose > 0:
            self.output.add_longoutput(traceback.format_exc())
        print("{0}".format(self.output), end="", file=self.stdout)
        self.exitcode = 3
        self.sysexit()

    @property
    def verbose(self) -> int:
        return self._verbose

    @verbose.setter
    def verbose(self, verbose: Any) -> None:
        if isinstance(verbose, int):
            self._verbose = verbose
        elif isinstance(verbose, float):
            self._verbose = int(verbose)
        else:
            self._verbose = len(verbose or [])
        if self._verbose >= 3:
            self.logchan.setLevel(logging.DEBUG)
            self._verbose = 3
        elif self._verbose == 2:
            self.logchan.setLevel(logging.INFO)
        else:
            self.logchan.setLevel(logging.WARNING)

    def run(self, options: Options, command: str = COMMAND) -> None:
        result = invoke(relay_arguments(options.relayed), command)
        self.output.status, state = reformat(result, options)
        self.exitcode = int(state)

    def execute(
        self, options: Options, command: str = COMMAND, verbose: Any = None
    ) -> NoReturn:
        if verbose is not None:
            self.verbose = verbose
        self.run(options, command)
        print("{0}".format(self.output), end="", file=self.stdout)
        self.sysexit()

    def sysexit(self) -> NoReturn:
        sys.exit(self.exitcode)

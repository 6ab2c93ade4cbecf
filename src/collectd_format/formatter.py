"""Apply the user's format strings to a parsed status line.

The format strings use printf conversions as known from C and Perl,
which differ from Python's ``%`` operator in two ways: surplus
arguments are silently ignored and missing arguments render as an
empty string or zero. :func:`substitute` implements these semantics on
top of Python's ``%`` formatting, one conversion at a time.
"""

from __future__ import annotations

import logging
import re
import typing
from typing import Optional

from .error import CheckError
from .parser import ConsolidatedLine, ErrorLine, StatusLine, ThresholdLine, parse
from .relay import Options
from .state import ServiceState, unknown

if typing.TYPE_CHECKING:
    from .invoker import SubprocessResult

_log = logging.getLogger(__name__)

_CONVERSION = re.compile(
    r"%(?P<flags>[-+ #0]*)(?P<width>\d+)?(?:\.(?P<precision>\d*))?"
    r"(?:hh|h|ll|l|L|q|j|z|t)?(?P<conversion>[diouxXeEfFgGcs%])"
)

_INTEGER_CONVERSIONS = "diouxXc"
_FLOAT_CONVERSIONS = "eEfFgG"


def _integer(value: Optional[str]) -> int:
    if value is None:
        return 0
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        _log.info("%r is not an integer, using 0", value)
        return 0


def _float(value: Optional[str]) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except ValueError:
        _log.info("%r is not a number, using 0", value)
        return 0.0


def _convert(match: re.Match[str], value: Optional[str]) -> str:
    conversion = match.group("conversion")
    spec = "%" + match.group("flags") + (match.group("width") or "")
    if match.group("precision") is not None:
        spec += "." + match.group("precision")
    spec += conversion
    if conversion in _INTEGER_CONVERSIONS:
        try:
            return spec % _integer(value)
        except OverflowError as exc:
            # %c of a value outside the unicode range
            raise CheckError(
                "cannot format {0!r} with {1}: {2}".format(value, spec, exc)
            ) from exc
    if conversion in _FLOAT_CONVERSIONS:
        return spec % _float(value)
    return spec % (value if value is not None else "")


def substitute(fmt: str, arguments: typing.Sequence[str]) -> str:
    """Render the printf format string *fmt* with *arguments*.

    :raises CheckError: if *fmt* contains an unsupported conversion
    """
    pieces: list[str] = []
    position = 0
    index = 0
    for match in _CONVERSION.finditer(fmt):
        literal = fmt[position : match.start()]
        if "%" in literal:
            raise CheckError("invalid conversion in format string {0!r}".format(fmt))
        pieces.append(literal)
        if match.group("conversion") == "%":
            pieces.append("%")
        else:
            value = arguments[index] if index < len(arguments) else None
            if value is None:
                _log.debug("format string %r is missing argument %d", fmt, index + 1)
            pieces.append(_convert(match, value))
            index += 1
        position = match.end()
    tail = fmt[position:]
    if "%" in tail:
        raise CheckError("invalid conversion in format string {0!r}".format(fmt))
    pieces.append(tail)
    if index < len(arguments):
        _log.debug("ignoring %d surplus arguments", len(arguments) - index)
    return "".join(pieces)


def render(
    line: StatusLine, state: ServiceState, options: Options
) -> tuple[str, ServiceState]:
    """Produce the final status line and state for a parsed *line*.

    *state* is the state the wrapped utility exited with. Server errors
    are reported as UNKNOWN in any case. Otherwise the line is only
    rewritten if *options* provide a format string for *state* and the
    line has a recognized shape; the performance data is appended as
    printed by the wrapped utility.
    """
    if isinstance(line, ErrorLine):
        return "UNKNOWN: " + line.detail, unknown
    fmt = options.format_for(state)
    if fmt is None:
        _log.debug("no format string for state %s", state)
        return line.text, state
    if isinstance(line, (ConsolidatedLine, ThresholdLine)):
        return "{0} |{1}".format(substitute(fmt, line.arguments), line.perfdata), state
    return line.text, state


def reformat(result: "SubprocessResult", options: Options) -> tuple[str, ServiceState]:
    """Parse and render the output of a wrapped utility run."""
    return render(parse(result.output), result.state, options)

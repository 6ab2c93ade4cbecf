"""Parse the status line printed by ``collectd-nagios``.

The wrapped utility prints one of a few fixed line shapes. Each shape is
recognized by a matcher in :data:`MATCHERS`; the first matcher that
accepts a line determines which :class:`StatusLine` subclass describes
it. Lines no matcher accepts become a :class:`RawLine`.
"""

from __future__ import annotations

import logging
import re
import typing
from typing import Optional

_log = logging.getLogger(__name__)

NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?"

CONSOLIDATION_KINDS = ("average", "percent", "sum")

_CONSOLIDATED = re.compile(
    r"(?P<label>[^:|]*): (?P<value>{0}) (?P<kind>{1}) \|(?P<perfdata>.*)".format(
        NUMBER, "|".join(CONSOLIDATION_KINDS)
    )
)

_THRESHOLD = re.compile(
    r"(?P<label>[^:|]*): [^|]*critical[^|]*, [^|]*warning[^|]*, [^|]*ok[^|]* "
    r"\|(?P<perfdata>.*)"
)

_SERVER_ERROR = re.compile(r"ERROR: (?P<detail>.*Server error: No such value.*)")

# name=value followed by the four empty threshold fields
_PERFVALUE = re.compile(
    r"(?:^|(?<=\s))[^\s=]+=(?P<value>{0});;;;(?=\s|$)".format(NUMBER)
)

_OKAY = (
    (re.compile(r"\bOKAY\b"), "OK"),
    (re.compile(r"\bokay\b"), "ok"),
)


def normalize(text: str) -> str:
    """Replace the utility's ``OKAY``/``okay`` with ``OK``/``ok``."""
    for pattern, replacement in _OKAY:
        text = pattern.sub(replacement, text)
    return text


def performance_values(perfdata: str) -> list[str]:
    """Numbers of all ``name=value;;;;`` tokens in *perfdata*, in order.

    The values are returned as text so that their precision stays the
    one the wrapped utility printed.
    """
    return [match.group("value") for match in _PERFVALUE.finditer(perfdata)]


class StatusLine:
    """Base class for all recognized line shapes.

    :attr:`text` is the complete (normalized) line as printed by the
    wrapped utility.
    """

    text: str

    def __init__(self, text: str) -> None:
        self.text = text

    @property
    def arguments(self) -> list[str]:
        """Values offered to the user's format string. Read-only property."""
        return []

    def __eq__(self, other: typing.Any) -> bool:
        return type(self) is type(other) and self.__dict__ == other.__dict__

    def __repr__(self) -> str:
        return "{0}({1!r})".format(self.__class__.__name__, self.text)


class ConsolidatedLine(StatusLine):
    """``<label>: <value> <kind> |<perfdata>``, printed for ``-g`` runs."""

    label: str

    value: str

    kind: str

    perfdata: str

    def __init__(
        self, text: str, label: str, value: str, kind: str, perfdata: str
    ) -> None:
        super().__init__(text)
        self.label = label
        self.value = value
        self.kind = kind
        self.perfdata = perfdata

    @property
    def arguments(self) -> list[str]:
        return [self.label, self.value] + performance_values(self.perfdata)


class ThresholdLine(StatusLine):
    """``<label>: ... critical, ... warning, ... ok |<perfdata>``.

    The three counters are not kept; they are what the format string
    replaces.
    """

    label: str

    perfdata: str

    def __init__(self, text: str, label: str, perfdata: str) -> None:
        super().__init__(text)
        self.label = label
        self.perfdata = perfdata

    @property
    def arguments(self) -> list[str]:
        return [self.label] + performance_values(self.perfdata)


class ErrorLine(StatusLine):
    """The daemon does not know the requested value."""

    detail: str

    def __init__(self, text: str, detail: str) -> None:
        super().__init__(text)
        self.detail = detail


class RawLine(StatusLine):
    """Anything else. Used verbatim."""


def _match_consolidated(text: str) -> Optional[StatusLine]:
    match = _CONSOLIDATED.fullmatch(text)
    if not match:
        return None
    return ConsolidatedLine(
        text,
        label=match.group("label"),
        value=match.group("value"),
        kind=match.group("kind"),
        perfdata=match.group("perfdata"),
    )


def _match_threshold(text: str) -> Optional[StatusLine]:
    match = _THRESHOLD.fullmatch(text)
    if not match:
        return None
    return ThresholdLine(
        text, label=match.group("label"), perfdata=match.group("perfdata")
    )


def _match_server_error(text: str) -> Optional[StatusLine]:
    match = _SERVER_ERROR.fullmatch(text)
    if not match:
        return None
    return ErrorLine(text, detail=match.group("detail"))


MATCHERS: list[typing.Callable[[str], Optional[StatusLine]]] = [
    _match_consolidated,
    _match_threshold,
    _match_server_error,
]
"""Tried in order, the first one returning a line wins."""


def parse(output: str) -> StatusLine:
    """Classify the *output* of the wrapped utility.

    A single trailing line break is ignored. The text is normalized with
    :func:`normalize` before matching.
    """
    text = normalize(output.rstrip("\n"))
    for matcher in MATCHERS:
        line = matcher(text)
        if line is not None:
            _log.debug("parsed as %s", line.__class__.__name__)
            return line
    _log.debug("no pattern matched, passing output through")
    return RawLine(text)

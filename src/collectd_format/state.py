"""Classes to represent check outcomes.

This module defines :class:`ServiceState` which is the base class for
check outcomes. The four states defined by the :term:`Nagios plugin API`
are represented as singleton subclasses.

Note that the *warning* state is defined by the :class:`Warn` class. The
class has not been named `Warning` to avoid being confused with the
built-in Python exception of the same name.
"""

from __future__ import annotations

import logging
from typing import Any

_log = logging.getLogger(__name__)


class ServiceState:
    """Base class for all states.

    Each state has two constant attributes: :attr:`text` is the short
    text representation, :attr:`code` is the corresponding exit code.
    """

    code: int

    text: str

    def __init__(self, code: int, text: str) -> None:
        self.code = code
        self.text = text

    def __str__(self) -> str:
        """Plugin-API compliant text representation."""
        return self.text

    def __int__(self) -> int:
        """Plugin API compliant exit code."""
        return self.code

    def __eq__(self, other: Any) -> bool:
        return (
            hasattr(other, "code")
            and isinstance(other.code, int)
            and self.code == other.code
            and hasattr(other, "text")
            and isinstance(other.text, str)
            and self.text == other.text
        )

    def __hash__(self) -> int:
        return hash((self.code, self.text))

    def __repr__(self) -> str:
        return "{0}({1})".format(self.__class__.__name__, self.code)


class Ok(ServiceState):
    def __init__(self) -> None:
        super().__init__(0, "ok")


ok = Ok()


class Warn(ServiceState):
    def __init__(self) -> None:
        super().__init__(1, "warning")


# According to the Nagios development guidelines, this should be Warning,
# not Warn, but naming the class so would occlude the built-in Warning
# exception class.
warn = Warn()


class Critical(ServiceState):
    def __init__(self) -> None:
        super().__init__(2, "critical")


critical = Critical()


class Unknown(ServiceState):
    def __init__(self) -> None:
        super().__init__(3, "unknown")


unknown = Unknown()


_BY_CODE: dict[int, ServiceState] = {
    state.code: state for state in (ok, warn, critical, unknown)
}


def state_from_exitcode(code: int) -> ServiceState:
    """Map a process exit code to a :class:`ServiceState`.

    Codes outside of the plugin API's range (crashes, signals, shell
    errors like 127) are reported as :obj:`unknown`.
    """
    try:
        return _BY_CODE[code]
    except KeyError:
        _log.info("exit code %d is not a plugin API code, using unknown", code)
        return unknown

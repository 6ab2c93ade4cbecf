from importlib import metadata

__version__: str = metadata.version("collectd-format")

from .error import CheckError  # noqa: E402
from .formatter import reformat, render, substitute  # noqa: E402
from .invoker import COMMAND, SubprocessResult, invoke, locate  # noqa: E402
from .parser import (  # noqa: E402
    ConsolidatedLine,
    ErrorLine,
    RawLine,
    StatusLine,
    ThresholdLine,
    normalize,
    parse,
    performance_values,
)
from .relay import Options, relay_arguments  # noqa: E402
from .runtime import Runtime, guarded  # noqa: E402
from .state import (  # noqa: E402
    Critical,
    Ok,
    ServiceState,
    Unknown,
    Warn,
    critical,
    ok,
    state_from_exitcode,
    unknown,
    warn,
)

__all__ = [
    "CheckError",
    "COMMAND",
    "ConsolidatedLine",
    "Critical",
    "ErrorLine",
    "Ok",
    "Options",
    "RawLine",
    "Runtime",
    "ServiceState",
    "StatusLine",
    "SubprocessResult",
    "ThresholdLine",
    "Unknown",
    "Warn",
    "critical",
    "guarded",
    "invoke",
    "locate",
    "normalize",
    "ok",
    "parse",
    "performance_values",
    "reformat",
    "relay_arguments",
    "render",
    "state_from_exitcode",
    "substitute",
    "unknown",
    "warn",
]

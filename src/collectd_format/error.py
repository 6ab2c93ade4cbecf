"""Exceptions with special meanings for collectd_format."""


class CheckError(RuntimeError):
    """Abort plugin execution.

    This exception should be raised if it becomes clear that the wrapped
    utility cannot deliver a status: it is missing, it cannot be started,
    or the user's format string cannot be applied. Raising this exception
    will make the plugin display the exception's argument and exit with
    an UNKNOWN (3) status.
    """

    pass

from __future__ import annotations

import io
import logging


def filter_output(output: str, filtered: str) -> str:
    """Filters out characters from output"""
    for char in filtered:
        output = output.replace(char, "")
    return output


class Output:
    """Text printed by the plugin.

    The first line is the status line which may carry performance data,
    so it is printed as it is. Long output and captured log messages
    follow on separate lines; a ``|`` in them would be taken for the
    start of performance data and is removed.
    """

    ILLEGAL = "|"

    logchan: logging.StreamHandler[io.StringIO]
    status: str
    out: list[str]
    warnings: list[str]

    def __init__(self, logchan: logging.StreamHandler[io.StringIO]) -> None:
        self.logchan = logchan
        self.status = ""
        self.out = []
        self.warnings = []

    def add_longoutput(self, text: str) -> None:
        self.out.append(self._screen_chars(text, "long output"))

    def __str__(self) -> str:
        output = [
            elem
            for elem in [self.status.rstrip("\n")]
            + self.out
            + [self._screen_chars(self.logchan.stream.getvalue(), "logging output")]
            + self.warnings
            if elem
        ]
        return "\n".join(output) + "\n"

    def _screen_chars(self, text: str, where: str) -> str:
        text = text.rstrip("\n")
        screened = filter_output(text, self.ILLEGAL)
        if screened != text:
            self.warnings.append(
                self._illegal_chars_warning(where, set(text) - set(screened))
            )
        return screened

    @staticmethod
    def _illegal_chars_warning(where: str, removed_chars: set[str]) -> str:
        hex_chars = ", ".join("0x{0:x}".format(ord(c)) for c in removed_chars)
        return "warning: removed illegal characters ({0}) from {1}".format(
            hex_chars, where
        )

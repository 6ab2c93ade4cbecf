import os
import stat
import typing

import pytest

from collectd_format import Runtime, relay_arguments
from collectd_format.cli import attach_values, main, parse_options

LOAD = "load=0.7;;;; load=0.5;;;; load=0.3;;;;"

pytestmark = pytest.mark.skipif(os.name != "posix", reason="requires /bin/sh")


@pytest.fixture
def fake_utility(tmp_path, monkeypatch):
    """Put a ``collectd-nagios`` shell script into an otherwise empty PATH.

    The script records its arguments, one per line, in ``args``.
    """

    def create(output: str, exitcode: int = 0):
        script = tmp_path / "collectd-nagios"
        script.write_text(
            "#!/bin/sh\n"
            + "printf '%s\\n' \"$@\" > '"
            + str(tmp_path / "args")
            + "'\n"
            + "echo '"
            + output
            + "'\n"
            + "exit "
            + str(exitcode)
            + "\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR)
        return tmp_path

    monkeypatch.setenv("PATH", str(tmp_path))
    return create


def run_main(argv: list[str]) -> int:
    Runtime.instance = None
    with pytest.raises(SystemExit) as e:
        main(argv)
    return typing.cast(int, e.value.code)


class TestParseOptions:
    def test_formats_and_relayed(self) -> None:
        options = parse_options(
            ["-f", "%s: total %f", "-F", "%s!", "-w", "5", "-H", "web1", "-m", "-h"]
        )
        assert "%s: total %f" == options.format_ok
        assert "%s!" == options.format_problem
        assert {"w": "5", "H": "web1", "m": "1", "h": "1"} == options.relayed
        assert 0 == options.verbose

    def test_verbose_is_not_relayed(self) -> None:
        options = parse_options(["-vv", "-n", "load"])
        assert 2 == options.verbose
        assert {"n": "load"} == options.relayed

    def test_range_values(self) -> None:
        options = parse_options(["-w", "@10:20", "-c", "~:5"])
        assert {"w": "@10:20", "c": "~:5"} == options.relayed

    def test_dash_leading_values(self) -> None:
        options = parse_options(
            ["-w", "-10:-5", "-c", "-20:-1", "-F", "-%s-", "-n", "x"]
        )
        assert "-%s-" == options.format_problem
        assert {"w": "-10:-5", "c": "-20:-1", "n": "x"} == options.relayed
        assert ["-w", "-10:-5", "-c", "-20:-1", "-n", "x"] == relay_arguments(
            options.relayed
        )

    def test_value_looking_like_a_flag(self) -> None:
        options = parse_options(["-s", "-m", "-f", "-F"])
        assert {"s": "-m"} == options.relayed
        assert "-F" == options.format_ok
        assert options.format_problem is None

    def test_value_with_equals_sign(self) -> None:
        options = parse_options(["-F", "%s=%f", "-n", "=x"])
        assert "%s=%f" == options.format_problem
        assert {"n": "=x"} == options.relayed

    def test_empty_format(self) -> None:
        assert "" == parse_options(["-f", "", "-n", "x"]).format_ok


class TestAttachValues:
    def test_valued_flags_are_joined(self) -> None:
        assert ["-w=-5", "-m", "-F=%s: %f", "-h"] == attach_values(
            ["-w", "-5", "-m", "-F", "%s: %f", "-h"]
        )

    def test_empty_and_missing_values_stay_separate(self) -> None:
        assert ["-f", "", "-w"] == attach_values(["-f", "", "-w"])

    def test_stops_at_double_dash(self) -> None:
        assert ["-w=-5", "--", "-c", "x"] == attach_values(
            ["-w", "-5", "--", "-c", "x"]
        )


class TestMain:
    def test_threshold_line(self, fake_utility, capsys) -> None:
        path = fake_utility(
            "CRITICAL: critical 1, warning 0, okay 0 |{0}".format(LOAD), 2
        )
        exitcode = run_main(
            ["-F", "Load %s: %f, %f, %f", "-n", "load/load", "-H", "web 1", "-m"]
        )
        assert 2 == exitcode
        assert (
            "Load CRITICAL: 0.700000, 0.500000, 0.300000 |{0}\n".format(LOAD)
            == capsys.readouterr().out
        )
        assert ["-n", "load/load", "-H", "web 1", "-m"] == (
            path / "args"
        ).read_text().splitlines()

    def test_dash_leading_values(self, fake_utility, capsys) -> None:
        path = fake_utility("WARNING: 0 critical, 1 warning, 0 okay |x=-7;;;;", 1)
        assert 1 == run_main(["-w", "-10:-5", "-F", "-%s %d-", "-n", "x"])
        assert "-WARNING -7- |x=-7;;;;\n" == capsys.readouterr().out
        assert ["-w", "-10:-5", "-n", "x"] == (path / "args").read_text().splitlines()

    def test_consolidated_line(self, fake_utility, capsys) -> None:
        fake_utility("OKAY: 852 sum |shortterm=0.5;;;;", 0)
        exitcode = run_main(["-f", "%s: total %f", "-g", "sum"])
        assert 0 == exitcode
        assert "OK: total 852.000000 |shortterm=0.5;;;;\n" == capsys.readouterr().out

    def test_server_error(self, fake_utility, capsys) -> None:
        fake_utility("ERROR: Server error: No such value found", 2)
        assert 3 == run_main(["-n", "nope/nope"])
        assert "UNKNOWN: Server error: No such value found\n" == capsys.readouterr().out

    def test_passthrough_without_format(self, fake_utility, capsys) -> None:
        fake_utility("OKAY: 0 critical, 0 warning, 1 okay |{0}".format(LOAD), 0)
        assert 0 == run_main(["-F", "unused %s"])
        assert (
            "OK: 0 critical, 0 warning, 1 ok |{0}\n".format(LOAD)
            == capsys.readouterr().out
        )

    def test_utility_not_in_path(self, tmp_path, monkeypatch, capsys) -> None:
        monkeypatch.setenv("PATH", str(tmp_path))
        assert 3 == run_main(["-f", "%s"])
        assert "UNKNOWN: collectd-nagios not found in PATH\n" == capsys.readouterr().out

    def test_unrecognized_option(self, capsys) -> None:
        assert 3 == run_main(["-x", "foo"])
        out = capsys.readouterr().out
        assert out.startswith(
            "UNKNOWN: check_collectd_format: unrecognized arguments:"
        )
        assert "-x foo" in out

    def test_missing_option_value(self, capsys) -> None:
        assert 3 == run_main(["-w"])
        assert "argument -w: expected one argument" in capsys.readouterr().out

    def test_help_exits_unknown(self, capsys) -> None:
        assert 3 == run_main(["--help"])
        out = capsys.readouterr().out
        assert "usage: check_collectd_format" in out
        assert "-F FORMAT" in out

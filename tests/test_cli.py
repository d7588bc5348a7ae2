"""
Tests for the recurpipe-expand command line.
"""

import pytest

from recurpipe_cli.cli import entrance, int_list, parse_date, token_list


def run(capsys, *argv):
    status = entrance(list(argv))
    return status, capsys.readouterr().out.splitlines()


class TestArguments:
    """Tests for argument conversion."""

    def test_int_list(self):
        """Test parsing a comma separated list of integers."""
        assert int_list("1,-1, 15") == [1, -1, 15]

    def test_token_list(self):
        """Test splitting BYDAY tokens and dropping empty ones."""
        assert token_list("MO, -1FR,") == ["MO", "-1FR"]

    def test_parse_date(self):
        """Test that dates stay dates and timed values become datetimes."""
        assert parse_date("2024-01-31").isoformat() == "2024-01-31"
        assert parse_date("2024-01-31T09:30").isoformat() == "2024-01-31T09:30:00"


class TestEntrance:
    """Tests for running the command."""

    def test_all_day_rule(self, capsys):
        """Test printing the instances of an all-day rule."""
        status, lines = run(capsys, "--freq", "MONTHLY", "--start", "2024-01-01", "--byday=-1FR", "--count", "3")
        assert status == 0
        assert lines == ["2024-01-26", "2024-02-23", "2024-03-29"]

    def test_timed_rule(self, capsys):
        """Test printing the instances of a timed rule."""
        status, lines = run(
            capsys, "--freq", "DAILY", "--start", "2024-01-01T08:30:00", "--byhour", "9,17", "--count", "3"
        )
        assert status == 0
        assert lines == ["2024-01-01T09:30:00", "2024-01-01T17:30:00", "2024-01-02T09:30:00"]

    def test_limit(self, capsys):
        """Test limiting the output of an endless rule."""
        status, lines = run(capsys, "--freq", "DAILY", "--start", "2024-01-01", "--limit", "2")
        assert lines == ["2024-01-01", "2024-01-02"]

    def test_until(self, capsys):
        """Test that the until date is printed when it matches."""
        status, lines = run(capsys, "--freq", "WEEKLY", "--start", "2024-01-01", "--until", "2024-01-15")
        assert lines == ["2024-01-01", "2024-01-08", "2024-01-15"]

    def test_week_start(self, capsys):
        """Test passing the week start."""
        status, lines = run(
            capsys, "--freq", "WEEKLY", "--start", "1997-08-05", "--interval", "2",
            "--byday", "TU,SU", "--wkst", "SU", "--count", "4",
        )
        assert lines == ["1997-08-05", "1997-08-17", "1997-08-19", "1997-08-31"]

    def test_include_start(self, capsys):
        """Test printing the start first."""
        status, lines = run(
            capsys, "--freq", "MONTHLY", "--start", "2024-01-01", "--byday=-1FR", "--count", "2", "--include-start"
        )
        assert lines == ["2024-01-01", "2024-01-26"]

    def test_unproducible_rule(self, capsys):
        """Test the exit status of a rule that never matches."""
        status, lines = run(capsys, "--freq", "YEARLY", "--start", "2024-01-01", "--bymonth", "2", "--bymonthday", "30")
        assert status == 1
        assert lines == []

    @pytest.mark.parametrize("argv", [
        ["--freq", "WEEKLY", "--start", "2024-01-01", "--bymonthday", "3"],
        ["--freq", "HOURLY", "--start", "2024-01-01"],
        ["--freq", "DAILY", "--start", "not a date"],
        ["--freq", "DAILY", "--start", "2024-01-01", "--count", "2", "--until", "2024-02-01"],
        ["--freq", "DAILY", "--start", "2024-01-01", "--bymonth", "x"],
        ["--freq", "DAILY", "--start", "2024-01-01", "--wkst", "XX"],
    ])
    def test_invalid_arguments(self, argv):
        """Test that invalid arguments end with a usage error."""
        with pytest.raises(SystemExit) as e:
            entrance(argv)
        assert e.value.code == 2

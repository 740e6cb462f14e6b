"""
Smoke tests for the command line interface.
"""
from click.testing import CliRunner

from cli import cli


class TestCli:

    def test_pitches_lists_every_pitch(self):
        result = CliRunner().invoke(cli, ["pitches"])
        assert result.exit_code == 0
        assert "Green" in result.output
        assert "KCG" in result.output

    def test_unknown_format_rejected(self):
        result = CliRunner().invoke(cli, ["season", "--format", "T10"])
        assert result.exit_code != 0
        assert "T10" in result.output

    def test_help_lists_commands(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("init", "seed-league", "simulate", "season", "stats", "pitches"):
            assert command in result.output

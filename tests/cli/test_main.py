"""Tests for the bibkeys command-line interface."""

import json
import logging

import pytest

from bibkeys.cli.main import parse_assignment, setup_logging


class TestCLIEntryPoint:
    """Test the command group itself."""

    def test_help(self, cli_runner):
        """Test --help lists the commands."""
        result = cli_runner.invoke(["--help"])

        assert result.exit_code == 0
        assert "Citation key pattern tool" in result.output
        for command in ("split", "resolve", "show"):
            assert command in result.output

    def test_version(self, cli_runner):
        """Test --version output."""
        result = cli_runner.invoke(["--version"])

        assert result.exit_code == 0
        assert "bibkeys version" in result.output

    def test_invalid_config_file(self, cli_runner, tmp_path):
        """Test a broken config file stops the command."""
        bad = tmp_path / "bad.yaml"
        bad.write_text("invalid: yaml: content:")

        result = cli_runner.invoke(["--config", str(bad), "show"])

        assert result.exit_code == 1
        assert "Error loading configuration" in result.output


class TestSplitCommand:
    """Test the split command."""

    def test_json_output(self, cli_runner):
        """Test JSON output lists every token."""
        result = cli_runner.invoke(["split", "--json", "[auth][year]"])

        assert result.exit_code == 0
        assert json.loads(result.output) == [
            "[auth][year]",
            "[",
            "auth",
            "]",
            "[",
            "year",
            "]",
        ]

    def test_table_output(self, cli_runner):
        """Test the table shows the tokens."""
        result = cli_runner.invoke(["split", "[auth]_[year]"])

        assert result.exit_code == 0
        assert "Tokens" in result.output
        assert "'auth'" in result.output
        assert "'_'" in result.output

    def test_empty_pattern(self, cli_runner):
        """Test the empty pattern is accepted."""
        result = cli_runner.invoke(["split", "--json", ""])

        assert result.exit_code == 0
        assert json.loads(result.output) == [""]

    def test_unbalanced_pattern_warns(self, cli_runner, caplog):
        """Test malformed patterns are split with a warning."""
        with caplog.at_level(logging.WARNING):
            result = cli_runner.invoke(["split", "--json", "[auth"])

        assert result.exit_code == 0
        assert json.loads(result.output) == ["[auth", "[", "auth"]
        assert "unclosed '['" in caplog.text


class TestResolveCommand:
    """Test the resolve command."""

    def test_builtin_default(self, cli_runner):
        """Test an unconfigured type resolves to the global default."""
        result = cli_runner.invoke(["resolve", "article"])

        assert result.exit_code == 0
        assert "article" in result.output
        assert "auth" in result.output
        assert "from global default" in result.output

    def test_database_override(self, cli_runner):
        """Test --pattern sets a database override."""
        result = cli_runner.invoke(
            ["resolve", "inproceedings", "-p", "inproceedings=[auth][year][venue]"]
        )

        assert result.exit_code == 0
        assert "venue" in result.output
        assert "from database override" in result.output

    def test_database_default(self, cli_runner):
        """Test --default applies to types without override."""
        result = cli_runner.invoke(
            ["resolve", "book", "--default", "[title]", "-p", "article=[auth]"]
        )

        assert result.exit_code == 0
        assert "title" in result.output
        assert "from database default" in result.output

    def test_uses_config(self, cli_runner, config_file):
        """Test global overrides come from the configuration."""
        result = cli_runner.invoke(["--config", str(config_file), "resolve", "Book"])

        assert result.exit_code == 0
        assert "editors" in result.output
        assert "from global override" in result.output

    def test_bad_assignment(self, cli_runner):
        """Test malformed --pattern values are rejected."""
        result = cli_runner.invoke(["resolve", "article", "-p", "nonsense"])

        assert result.exit_code != 0
        assert "TYPE=PATTERN" in result.output


class TestShowCommand:
    """Test the show command."""

    def test_lists_standard_types(self, cli_runner):
        """Test every standard type appears."""
        result = cli_runner.invoke(["show"])

        assert result.exit_code == 0
        assert "Key patterns" in result.output
        for name in ("article", "book", "inproceedings", "misc"):
            assert name in result.output

    def test_includes_custom_types(self, cli_runner, tmp_path):
        """Test configured custom types are listed too."""
        (tmp_path / "bibkeys.yaml").write_text("patterns:\n  standard: '[number]'\n")

        result = cli_runner.invoke(["show"])

        assert result.exit_code == 0
        assert "standard" in result.output
        assert "number" in result.output


class TestHelpers:
    """Test helper functions."""

    def test_parse_assignment(self):
        """Test TYPE=PATTERN parsing."""
        assert parse_assignment("book=[editors][year]") == ("book", "[editors][year]")
        assert parse_assignment(" misc =") == ("misc", "")
        assert parse_assignment("a=b=c") == ("a", "b=c")

    @pytest.mark.parametrize("value", ["book", "=[auth]", "  =x"])
    def test_parse_assignment_rejects(self, value):
        """Test values without a type are rejected."""
        import click

        with pytest.raises(click.BadParameter):
            parse_assignment(value)

    def test_setup_logging_levels(self):
        """Test flags map to levels on the package logger."""
        assert setup_logging(quiet=True).level == logging.ERROR
        assert setup_logging(verbose=True).level == logging.DEBUG
        assert setup_logging().level == logging.WARNING

    def test_setup_logging_scoped_to_package(self):
        """Test only the bibkeys logger gets a handler, and only one."""
        root_handlers = list(logging.getLogger().handlers)

        package_logger = setup_logging()
        setup_logging(debug=True)

        names = [h.get_name() for h in package_logger.handlers]
        assert package_logger.name == "bibkeys"
        assert names.count("bibkeys-cli") == 1
        assert logging.getLogger().handlers == root_handlers


class TestErrorHandling:
    """Test how library errors surface on the command line."""

    def test_broken_chain_exit_code(self, cli_runner, tmp_path):
        """Test a chain exceeding max_depth exits with status 3."""
        (tmp_path / "bibkeys.yaml").write_text("max_depth: 1\n")

        result = cli_runner.invoke(["resolve", "article"])

        assert result.exit_code == 3
        assert "deeper than 1" in result.output
        assert "max_depth" in result.output

    def test_debug_reraises(self, cli_runner, tmp_path):
        """Test --debug lets the original exception through."""
        from bibkeys.patterns import PatternConfigurationError

        (tmp_path / "bibkeys.yaml").write_text("max_depth: 1\n")

        result = cli_runner.invoke(["--debug", "resolve", "article"])

        assert result.exit_code != 0
        assert isinstance(result.exception, PatternConfigurationError)

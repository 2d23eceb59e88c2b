"""Pytest configuration and fixtures for CLI tests."""

import logging

import pytest
import yaml
from click.testing import CliRunner

from bibkeys.cli.main import cli


class BibKeysRunner:
    """Wrapper around CliRunner bound to the ``bibkeys`` group."""

    def __init__(self):
        self.runner = CliRunner()

    def invoke(self, args, **kwargs):
        return self.runner.invoke(cli, ["--no-color", *args], **kwargs)


@pytest.fixture
def cli_runner():
    """Provide a CLI runner for the bibkeys command."""
    return BibKeysRunner()


@pytest.fixture
def config_file(tmp_path):
    """Write a configuration file and return its path."""
    path = tmp_path / "custom.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "default_pattern": "[auth:lower][year]",
                "patterns": {"book": "[editors][year]", "dataset": "[title]"},
            }
        )
    )
    return path


@pytest.fixture
def xdg_config(tmp_path):
    """Path of the user configuration file inside the isolated XDG home."""
    path = tmp_path / "xdg" / "bibkeys" / "config.yaml"
    path.parent.mkdir(parents=True)
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop the handler the CLI attaches, so it never outlives a test."""
    yield
    package_logger = logging.getLogger("bibkeys")
    for handler in list(package_logger.handlers):
        if handler.get_name() == "bibkeys-cli":
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)

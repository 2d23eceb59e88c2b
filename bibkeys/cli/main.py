"""Main CLI entry point and application setup."""

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click
from click.exceptions import Exit
from rich.console import Console

from bibkeys import __version__
from bibkeys.cli.config import KeyPatternSettings, load_settings
from bibkeys.cli.formatters import (
    format_resolution_table,
    format_token_table,
    format_tokens,
)
from bibkeys.core.fields import EntryType, parse_entry_type
from bibkeys.patterns import (
    PatternConfigurationError,
    PatternError,
    bracket_problems,
    database_patterns,
    global_patterns_from_settings,
    split,
)

logger = logging.getLogger(__name__)


@dataclass
class Context:
    """CLI context that holds shared resources."""

    settings: KeyPatternSettings
    console: Console
    debug: bool = False


_HANDLER_NAME = "bibkeys-cli"


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> logging.Logger:
    """Attach a stderr handler to the ``bibkeys`` logger.

    Only the package logger is configured; the root logger is left to the
    host application. Calling this again replaces the previous handler.
    """
    if quiet:
        level = logging.ERROR
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    package_logger = logging.getLogger("bibkeys")
    for handler in list(package_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            if debug
            else "%(levelname)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger


def create_console(no_color: bool = False) -> Console:
    """Create the Rich console used for command output."""
    return Console(
        no_color=no_color,
        width=100,
        highlight=False,
        color_system=None if no_color else "auto",
    )


def parse_assignment(value: str) -> tuple[str, str]:
    """Split a ``TYPE=PATTERN`` option value."""
    entry_type, sep, pattern = value.partition("=")
    if not sep or not entry_type.strip():
        raise click.BadParameter(f"expected TYPE=PATTERN, got {value!r}")
    return entry_type.strip(), pattern


class BibKeysGroup(click.Group):
    """Custom group that turns library errors into clean exits.

    Broken table chains exit with status 3, other invalid input with 1.
    """

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            click.echo("Interrupted", err=True)
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except (PatternError, ValueError) as e:
            if ctx.obj is not None and ctx.obj.debug:
                raise
            if isinstance(e, PatternConfigurationError):
                click.echo(f"Error: {e}", err=True)
                click.echo("Check the parent chain and max_depth setting.", err=True)
                ctx.exit(3)
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


@click.group(cls=BibKeysGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress warnings")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.version_option(
    version=__version__, prog_name="bibkeys", message="bibkeys version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
) -> None:
    """Citation key pattern tool.

    Inspect how key patterns are tokenized and which pattern applies
    to each entry type.
    """
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)

    try:
        settings = load_settings(config)
    except ValueError as e:
        if debug:
            raise
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)

    ctx.obj = Context(
        settings=settings,
        console=create_console(no_color=no_color),
        debug=debug,
    )


@cli.command("split")
@click.argument("pattern")
@click.option("--json", "as_json", is_flag=True, help="Print tokens as JSON")
@click.pass_obj
def split_command(obj: Context, pattern: str, as_json: bool) -> None:
    """Show the tokens of PATTERN."""
    tokens = split(pattern)

    for problem in bracket_problems(pattern):
        logger.warning("Pattern %r has %s", pattern, problem)

    if as_json:
        click.echo(json.dumps(list(tokens)))
        return

    obj.console.print(format_token_table(tokens, title="Tokens"))


@cli.command()
@click.argument("entry_type")
@click.option("--default", "default", help="Database default pattern")
@click.option(
    "--pattern",
    "-p",
    "assignments",
    multiple=True,
    help="Database override as TYPE=PATTERN (repeatable)",
)
@click.pass_obj
def resolve(
    obj: Context,
    entry_type: str,
    default: str | None,
    assignments: tuple[str, ...],
) -> None:
    """Resolve the key pattern for ENTRY_TYPE."""
    patterns = {}
    for assignment in assignments:
        name, pattern = parse_assignment(assignment)
        patterns[parse_entry_type(name)] = pattern

    global_table = global_patterns_from_settings(obj.settings)
    table = database_patterns(global_table, patterns=patterns, default=default)

    resolution = table.explain(parse_entry_type(entry_type))
    obj.console.print(
        f"[bold]{entry_type}[/bold]: {format_tokens(resolution.tokens)}",
        highlight=False,
    )
    obj.console.print(
        f"[dim]from {resolution.table} {resolution.level.name.lower()}[/dim]"
    )


@cli.command()
@click.pass_obj
def show(obj: Context) -> None:
    """Show the resolved pattern of every standard entry type."""
    table = global_patterns_from_settings(obj.settings)
    extra = sorted(
        (t for t in table.all_overridden_types() if not isinstance(t, EntryType)),
        key=str,
    )
    obj.console.print(
        format_resolution_table(table, [*EntryType, *extra], title="Key patterns")
    )


def main() -> None:
    """Entry point for the ``bibkeys`` script."""
    cli()


if __name__ == "__main__":
    main()

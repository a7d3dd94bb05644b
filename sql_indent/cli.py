"""
Command-line entry point: re-indents a SQL file from its keywords and
parenthesis nesting, printing the result or rewriting the file.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click
from .config import ConfigError, IndentConfig, build_config
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    ensure_file_unchanged,
    get_max_file_size,
    normalize_filepath,
    write_in_place,
)
from .indenter import IndentFileError, indent_file
from .log import get_logger, init_logging

__all__ = ["cli"]

logger = get_logger(__name__)


def _resolve_target(raw_path: str, **overrides: object) -> tuple[Path, IndentConfig]:
    """Validate the path and build its configuration, as click parameter errors."""
    try:
        filepath = normalize_filepath(raw_path, Path.cwd().resolve())
        config = build_config(filepath.parent, **overrides)
    except (ValueError, ConfigError) as error:
        raise click.BadParameter(str(error), param_hint="FILEPATH") from error
    return filepath, config


def _indent_guarded(
    filepath: Path, config: IndentConfig, line: int | None
) -> tuple[str, str, os.stat_result, os.stat_result]:
    """Indent `filepath`, refusing oversize files and files modified while read.

    Returns the original text, the indented text, and the file stats taken
    before and after reading.
    """
    try:
        limit = get_max_file_size(default=config.max_file_size)
        before = collect_file_stat(filepath)
        enforce_file_size(before, limit, filepath)
        original, indented = indent_file(filepath, config, line)
        after = collect_file_stat(filepath)
        ensure_file_unchanged(before, after, filepath)
    except (ValueError, IOError, IndentFileError) as error:
        raise click.ClickException(str(error)) from error
    return original, indented, before, after


@click.command()
@click.version_option(package_name="sql-indent")
@click.option("--indent-offset", type=int, help="Columns per nesting level")
@click.option("--tab-width", type=int, help="Column width of a tab")
@click.option(
    "--use-tabs/--no-use-tabs",
    "indent_with_tabs",
    default=None,
    help="Indent with tabs for whole tab stops",
)
@click.option(
    "--debug/--no-debug",
    "debug_logging",
    default=None,
    help="Log a diagnostic line for every indented line",
)
@click.option(
    "--line",
    "line_number",
    type=click.IntRange(min=1),
    help="Re-indent only this line (1-based)",
)
@click.option("--in-place", "-i", is_flag=True, help="Rewrite the file instead of printing it")
@click.option("--check", is_flag=True, help="Exit with status 1 if the file would change")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    indent_offset: int | None = None,
    tab_width: int | None = None,
    indent_with_tabs: bool | None = None,
    debug_logging: bool | None = None,
    line_number: int | None = None,
    in_place: bool = False,
    check: bool = False,
):
    """
    Re-indent FILEPATH, a SQL file inside the current directory.

    Options given on the command line take precedence over the
    `[tool.sql-indent]` table of the nearest pyproject.toml or .sql-indent.toml.

    Args:
        filepath: Path to the SQL file to process.
        indent_offset: Override for the number of columns per nesting level.
        tab_width: Override for the column width of a tab.
        indent_with_tabs: Override for writing tabs in indentation.
        debug_logging: Override for per-line diagnostic logging.
        line_number: Single 1-based line to re-indent.
        in_place: Rewrite the file instead of printing the result.
        check: Only report whether the file would change.

    Raises:
        click.BadParameter: If the path or the configuration is invalid.
        click.ClickException: If the file cannot be read or safely rewritten.

    Examples:
        sql-indent report.sql --indent-offset 2 --in-place
    """
    path, config = _resolve_target(
        filepath,
        indent_offset=indent_offset,
        tab_width=tab_width,
        indent_with_tabs=indent_with_tabs,
        debug_logging=debug_logging,
    )
    init_logging(verbose=config.debug_logging)

    line = None if line_number is None else line_number - 1
    original, indented, before, after = _indent_guarded(path, config, line)
    changed = indented != original
    logger.debug("%s: %s", path, "changed" if changed else "unchanged")

    if check:
        if changed:
            click.echo(f"{path} would be re-indented", err=True)
            sys.exit(1)
        return

    if not in_place:
        click.echo(indented, nl=False)
        return

    if changed:
        try:
            write_in_place(
                path, indented, after, before, warn=lambda message: click.echo(message, err=True)
            )
        except IOError as error:
            raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()

"""Command line interface for the Tagger project."""

from __future__ import annotations

import difflib
import json
import logging
from pathlib import Path
from typing import Any, NoReturn

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax

from tagger.config import (
    ConfigError,
    ConfigManager,
    TaggerConfig,
    expand_search_dirs,
    resolve_with_precedence,
)
from tagger.resolution import QueryMode, SearchReport, TagSearch

console = Console()
err_console = Console(stderr=True)

_LOG_HANDLER_NAME = "tagger-cli"


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> NoReturn:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        click.echo(json.dumps({"error": {"code": code, "message": message}}, indent=2))
        raise SystemExit(1)

    raise click.ClickException(message) from original


def _configure_logging(level: str, *, quiet: bool) -> None:
    """Attach a stderr Rich handler to the ``tagger`` logger.

    Args:
        level: Configured logging level name.
        quiet: Raise the threshold to errors only.

    Raises:
        click.ClickException: If ``level`` is not a logging level name.
    """

    logger = logging.getLogger("tagger")
    for handler in list(logger.handlers):
        if handler.get_name() == _LOG_HANDLER_NAME:
            logger.removeHandler(handler)

    try:
        logger.setLevel(logging.ERROR if quiet else level.upper())
    except ValueError as exc:
        raise click.ClickException(f"Unknown logging level {level!r}.") from exc

    handler = RichHandler(console=err_console, show_time=False, show_path=False)
    handler.set_name(_LOG_HANDLER_NAME)
    logger.addHandler(handler)


def _prompt_for_tags() -> list[str]:
    """Ask for whitespace-separated tag queries on the terminal."""

    answer = click.prompt("Search (white-space separated)", default="", show_default=False)
    return answer.split()


def _emit_report(report: SearchReport, *, json_output: bool, quiet: bool) -> None:
    """Print a search report as YAML (default) or JSON.

    Args:
        report: Report produced by :class:`TagSearch`.
        json_output: Emit the JSON payload instead of YAML.
        quiet: Suppress the stderr summary of skipped work.
    """

    if json_output:
        click.echo(json.dumps(report.to_payload(), indent=2))
        return

    click.echo(yaml.safe_dump(report.results, sort_keys=True, default_flow_style=False), nl=False)
    if report.errors and not quiet:
        err_console.print(
            f"[yellow]{len(report.errors)} query or root problem(s) were skipped.[/yellow]"
        )


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a nested value within a dictionary for a dotted path.

    Raises:
        ConfigError: If a non-mapping value is encountered along the path.
    """

    node = target
    for segment in path[:-1]:
        existing = node.setdefault(segment, {})
        if not isinstance(existing, dict):
            raise ConfigError(f"Cannot assign into '{segment}'; it is not a mapping.")
        node = existing
    node[path[-1]] = value


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="dir-tagger")
def cli() -> None:
    """Tagger finds files and directories by the tags declared in tagger.yaml sidecars."""


@cli.command()
@click.argument("tags", nargs=-1)
@click.option(
    "-d",
    "--dir",
    "dirs",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory to search (repeatable). Defaults to `dirs` from the settings file.",
)
@click.option(
    "--or",
    "or_mode",
    is_flag=True,
    help="List hits per matched tag instead of paths carrying every matched tag.",
)
@click.option("--workers", type=click.IntRange(min=1), help="Resolve up to N roots concurrently.")
@click.option("--json", "json_output", is_flag=True, help="Emit the report as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress warnings about skipped queries and roots.")
def find(
    tags: tuple[str, ...],
    dirs: tuple[Path, ...],
    or_mode: bool,
    workers: int | None,
    json_output: bool,
    quiet: bool,
) -> None:
    """Find entries whose declared tags match the TAGS regular expressions.

    Without TAGS the queries are read interactively.
    """
    overrides: dict[str, Any] = {}
    if or_mode:
        overrides["or"] = True
    if workers is not None:
        overrides["resolution.workers"] = workers

    manager = ConfigManager()
    try:
        settings = manager.load(cli_overrides=overrides, include_file=not dirs)
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)

    _configure_logging(settings.logging.level, quiet=quiet)

    roots = list(dirs) or expand_search_dirs(settings.dirs)
    if not roots:
        _handle_cli_error(
            f"No directories to search; pass --dir or set `dirs` in {manager.config_path}.",
            code="no_roots",
            json_output=json_output,
        )

    interactive = not tags
    queries = list(tags) if tags else _prompt_for_tags()
    if not queries:
        _handle_cli_error("No tag queries supplied.", code="no_queries", json_output=json_output)

    mode = QueryMode.OR if settings.or_mode else QueryMode.AND
    report = TagSearch(workers=settings.resolution.workers).run(roots, queries, mode=mode)
    _emit_report(report, json_output=json_output, quiet=quiet)

    if interactive:
        click.pause(info="\npress enter to quit")


@cli.group()
def config() -> None:
    """Manage the Tagger settings file."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective settings after applying precedence rules.

    Raises:
        click.ClickException: If settings cannot be loaded.
    """
    manager = ConfigManager()
    try:
        settings = manager.load(include_env=not no_env, ensure_file=True)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(settings.to_mapping(), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML literal to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a settings value expressed as a dotted KEY.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must be a dotted path such as 'resolution.workers'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        manager.ensure_exists()
        before = manager.read_text().splitlines()
        file_data = manager.load_file_overrides()
        _assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=TaggerConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()
    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="settings.yaml (before)",
            tofile="settings.yaml (after)",
            lineterm="",
        )
    )
    if not diff:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()

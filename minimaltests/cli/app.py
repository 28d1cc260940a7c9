from importlib.metadata import PackageNotFoundError, version as package_version
import logging
from pathlib import Path
from typing import NoReturn

import typer

from minimaltests.diff.models import GROUPING_POLICIES, GroupingPolicy
from minimaltests.log import stderr_logging
from minimaltests.plugins import (
    PluginError,
    PluginManager,
    resolve_plugin_manager,
)
from minimaltests.report import REPORT_FORMATS, ReportFormat
from minimaltests.runner import PipelineConfig, run

app = typer.Typer(
    help=(
        "Find the minimal tests from a source code using the differences "
        "between the metrics of the two JSON files passed in input."
    ),
    add_completion=False,
)


def _resolve_cli_version() -> str:
    try:
        return package_version("json-minimal-tests")
    except PackageNotFoundError:
        from minimaltests import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version())
    raise typer.Exit()


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def _exist_or_exit(path: Path, which_path: str) -> None:
    if not path.exists():
        _fail(f"The {which_path} path `{path}` is not correct")


def _normalize_policy(value: str) -> GroupingPolicy:
    normalized = value.strip().lower().replace("-", "_")
    if normalized not in GROUPING_POLICIES:
        _fail(
            f"Unsupported grouping policy `{value}`; "
            f"expected one of: {', '.join(GROUPING_POLICIES)}"
        )
    return normalized  # type: ignore[return-value]


def _normalize_format(value: str) -> ReportFormat:
    normalized = value.strip().lower()
    if normalized not in REPORT_FORMATS:
        _fail(
            f"Unsupported report format `{value}`; "
            f"expected one of: {', '.join(REPORT_FORMATS)}"
        )
    return normalized  # type: ignore[return-value]


def _load_plugins(plugin_config: Path | None) -> PluginManager:
    try:
        return resolve_plugin_manager(plugin_config)
    except FileNotFoundError as error:
        _fail(f"plugin config not found: {error.filename or plugin_config}")
    except PluginError as error:
        _fail(f"plugin config error: {error}")


@app.command()
def minimal_tests(
    first_json: Path = typer.Argument(..., help="Old json file or directory."),
    second_json: Path = typer.Argument(..., help="New json file or directory."),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output directory. Reports are printed to stdout when omitted.",
    ),
    limit: int | None = typer.Option(
        None,
        "--limit",
        "-l",
        min=1,
        help="Maximum number of file pairs to process.",
    ),
    report_format: str = typer.Option(
        "html",
        "--format",
        help="Report format: html or text.",
    ),
    jobs: int | None = typer.Option(
        None,
        "--jobs",
        "-j",
        min=1,
        help="Number of worker threads (default: CPU count - 1, at least 1).",
    ),
    policy: str = typer.Option(
        "additive",
        "--policy",
        help="Grouping of diffs sharing a line range: additive or first-seen.",
    ),
    plugin_config: Path | None = typer.Option(
        None,
        "--plugin-config",
        help="JSON tracing plugin config (overrides MINIMALTESTS_PLUGIN_CONFIG).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log skipped pairs and other debug details to stderr.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Compare two metric reports and print the minimal changed regions."""
    if output is not None:
        _exist_or_exit(output, "output")
    _exist_or_exit(first_json, "first")
    _exist_or_exit(second_json, "second")

    if first_json.is_dir() != second_json.is_dir():
        _fail("Both the paths should be a directory or a file")

    config = PipelineConfig(
        output_path=output,
        report_format=_normalize_format(report_format),
        policy=_normalize_policy(policy),
        num_workers=jobs,
        limit=limit,
    )
    manager = _load_plugins(plugin_config)

    level = logging.DEBUG if verbose else logging.WARNING
    with stderr_logging(level):
        summary = run(first_json, second_json, config=config, plugin_manager=manager)

    if not summary.ok:
        _fail(f"worker threads failed: {', '.join(summary.crashed_threads)}")


def main() -> None:
    app()

"""CLI app definition: flags, the analysis run, and output rendering."""

import json
from typing import Annotated

import typer

from gosplint.code_analysis import run_analysis
from gosplint.config import DEFAULT_TEST_FILE_PATTERN, DEFAULT_THRESHOLDS, Thresholds
from gosplint.report import Finding, Report, format_finding, format_summary
from gosplint.utils import emit, log
from gosplint.version import get_version

USAGE = "Usage: gosplint [OPTIONS] <go file>..."


def _version_callback(value: bool):
    if value:
        emit(get_version())
        raise typer.Exit()


def _print_finding(finding: Finding) -> None:
    emit(format_finding(finding))


def _print_json(report: Report) -> None:
    """Print the report document, or log why it could not be encoded."""
    try:
        data = json.dumps(report.to_dict(), indent="\t")
    except (TypeError, ValueError) as exc:
        log(f"json encode error: {exc}", style="red")
        return
    emit(data)


app = typer.Typer(
    help="Find Go functions that are too long, take too many parameters, or hide long if/else chains.",
    add_completion=False,
)


@app.command()
def main(
    ctx: typer.Context,
    files: Annotated[
        list[str] | None,
        typer.Argument(help="Go source files or directories to analyze.", show_default=False),
    ] = None,
    statements: Annotated[
        int, typer.Option("--statements", "-s", min=0, help="function statement count threshold")
    ] = DEFAULT_THRESHOLDS["statements"],
    params: Annotated[
        int, typer.Option("--params", "-p", min=0, help="parameter list length threshold")
    ] = DEFAULT_THRESHOLDS["params"],
    results: Annotated[
        int, typer.Option("--results", "-r", min=0, help="result list length threshold")
    ] = DEFAULT_THRESHOLDS["results"],
    if_chain: Annotated[
        int, typer.Option("--if-chain", "-c", min=0, help="if/else chain length threshold")
    ] = DEFAULT_THRESHOLDS["if_chain"],
    if_body: Annotated[
        int, typer.Option("--if-body", "-f", min=0, help="if body statement count threshold")
    ] = DEFAULT_THRESHOLDS["if_body"],
    skip_bool_params: Annotated[
        bool, typer.Option("--skip-bool-params", "-b", help="don't warn on bool function params")
    ] = False,
    as_json: Annotated[
        bool, typer.Option("--json", "-j", help="output results as json")
    ] = False,
    ignore_tests: Annotated[
        bool, typer.Option("--ignore-tests/--include-tests", "-i/-I", help="ignore test files")
    ] = True,
    test_pattern: Annotated[
        str, typer.Option("--test-pattern", help="file name pattern that marks a test file")
    ] = DEFAULT_TEST_FILE_PATTERN,
    summary: Annotated[
        bool, typer.Option("--summary", help="output summary; exit 1 if anything was flagged")
    ] = False,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit.", callback=_version_callback, is_eager=True),
    ] = False,
) -> None:
    """Analyze Go source files for overly complex functions.

    Each finding is printed as it is found. With --json a single report
    document is printed at the end instead. With --summary the totals per
    check follow the findings and the exit status reflects whether the
    code is clean.
    """
    if not files:
        emit(USAGE)
        typer.echo(ctx.get_help())
        raise typer.Exit(code=1)

    thresholds = Thresholds(
        statements=statements,
        params=params,
        results=results,
        if_chain=if_chain,
        if_body=if_body,
        check_bool_params=not skip_bool_params,
        ignore_test_files=ignore_tests,
        test_file_pattern=test_pattern,
    )
    report = Report(
        check_bool_params=thresholds.check_bool_params,
        on_finding=None if as_json else _print_finding,
    )
    run_analysis(files, thresholds, report)

    if as_json:
        _print_json(report)
        return

    if summary:
        emit("")
        for line in format_summary(report):
            emit(line)
        if not report.is_clean():
            raise typer.Exit(code=1)

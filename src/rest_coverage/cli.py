"""CLI entry point for rest-coverage."""

import json
import logging
from pathlib import Path

import click

from rest_coverage.coverage.builder import get_rest_api
from rest_coverage.coverage.recorder import CoverageRecorder
from rest_coverage.coverage.report import render_summary, summarize
from rest_coverage.errors import RestCoverageError
from rest_coverage.parser.base import CoverageMap

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _build(doc_path: Path, uri_filter: str) -> CoverageMap:
    try:
        return get_rest_api(doc_path, uri_filter)
    except RestCoverageError as e:
        raise click.ClickException(str(e)) from e


def _dump_map(coverage_map: CoverageMap) -> str:
    data = {
        path: {method: stats.model_dump() for method, stats in methods.items()}
        for path, methods in coverage_map.items()
    }
    return json.dumps(data, indent=2, sort_keys=True)


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    envvar="REST_COVERAGE_LOG_LEVEL",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging verbosity.",
)
def main(log_level: str):
    """REST Coverage — per-endpoint parameter coverage from Swagger/OpenAPI docs."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("doc_path", type=click.Path(path_type=Path))
@click.option("--filter", "uri_filter", default="", help="Only analyze this exact path.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the coverage map JSON here.")
def analyze(doc_path: Path, uri_filter: str, output: Path | None):
    """Build the coverage map of an API document and print it as JSON."""
    coverage_map = _build(doc_path, uri_filter)
    text = _dump_map(coverage_map)

    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    endpoints = sum(len(methods) for methods in coverage_map.values())
    click.echo(f"Coverage map for {endpoints} endpoints saved to {output}")


@main.command()
@click.argument("doc_path", type=click.Path(path_type=Path))
@click.option("--filter", "uri_filter", default="", help="Only report on this exact path.")
@click.option("--hits", "hits_path", default=None, type=click.Path(exists=True, path_type=Path), help="JSON file of recorded requests.")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON.")
def report(doc_path: Path, uri_filter: str, hits_path: Path | None, as_json: bool):
    """Print endpoint and parameter coverage for an API document."""
    coverage_map = _build(doc_path, uri_filter)

    recorder = CoverageRecorder(coverage_map)
    if hits_path is not None:
        try:
            recorder.load_hits(hits_path)
        except RestCoverageError as e:
            raise click.ClickException(str(e)) from e

    summary = summarize(coverage_map)
    if as_json:
        click.echo(summary.model_dump_json(indent=2))
    else:
        click.echo(render_summary(summary))

    if recorder.unmatched:
        click.echo(f"\n{len(recorder.unmatched)} recorded requests match no declared endpoint:", err=True)
        for endpoint in recorder.unmatched:
            click.echo(f"  {endpoint}", err=True)

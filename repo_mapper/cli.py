"""Click CLI with analyze, deps, dependents, diff and serve subcommands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from repo_mapper import __version__
from repo_mapper.analysis.analyzer import AnalysisResult, RepositoryAnalyzer
from repo_mapper.analysis.diff import diff_results
from repo_mapper.errors import NotFound, RepoMapError
from repo_mapper.models import AnalyzerConfig
from repo_mapper.render import render_repository_map
from repo_mapper.serialization import load_input, to_json

_INPUT = click.Path(exists=True, dir_okay=False, path_type=Path)


def _run_analysis(input_path: Path, config: AnalyzerConfig | None = None) -> AnalysisResult:
    try:
        document = load_input(input_path)
    except ValidationError as e:
        raise click.ClickException(f"Invalid input document {input_path}:\n{e}")

    try:
        return RepositoryAnalyzer(config).analyze(document.to_records(), document.to_facts())
    except RepoMapError as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug)")
def cli(verbose: int):
    """repo-mapper: map dependencies, cycles and processing order of a codebase."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.argument("input_path", type=_INPUT)
@click.option("--json", "json_format", is_flag=True, help="Emit the structured JSON document")
@click.option("--order", "show_order", is_flag=True, help="Show the processing order")
@click.option("--deps", "show_dependencies", is_flag=True, help="Show dependency edges")
@click.option("--focus", help="Focus on a component (id or name)")
@click.option("--top", default=10, show_default=True, type=click.IntRange(min=1), help="Length of ranked insight lists")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Write to a file")
def analyze(
    input_path: Path,
    json_format: bool,
    show_order: bool,
    show_dependencies: bool,
    focus: str | None,
    top: int,
    output: Path | None,
):
    """Analyze a symbol/reference document and print the repository map."""
    config = AnalyzerConfig(
        most_connected_limit=top,
        hotspot_limit=top,
        complex_files_limit=top,
    )
    result = _run_analysis(input_path, config)

    if json_format:
        text = to_json(result)
    else:
        text = render_repository_map(
            result,
            repository=str(input_path),
            focus=focus,
            show_order=show_order,
            show_dependencies=show_dependencies,
            config=config,
        )

    if output:
        output.write_text(text, encoding="utf-8")
        click.echo(f"Repository map saved to {output}")
    else:
        click.echo(text)


@cli.command()
@click.argument("input_path", type=_INPUT)
@click.argument("component_id")
def deps(input_path: Path, component_id: str):
    """List what a component depends on."""
    result = _run_analysis(input_path)
    _echo_ids(result.dependencies_of(component_id))


@cli.command()
@click.argument("input_path", type=_INPUT)
@click.argument("component_id")
def dependents(input_path: Path, component_id: str):
    """List the components that depend on a component."""
    result = _run_analysis(input_path)
    _echo_ids(result.dependents_of(component_id))


@cli.command()
@click.argument("old_path", type=_INPUT)
@click.argument("new_path", type=_INPUT)
def diff(old_path: Path, new_path: Path):
    """Compare two input documents: added, removed and modified components, cycle changes."""
    result = diff_results(_run_analysis(old_path), _run_analysis(new_path))
    click.echo(json.dumps(result, indent=2))


def _echo_ids(ids: tuple[str, ...] | NotFound) -> None:
    if isinstance(ids, NotFound):
        raise click.ClickException(f"Component '{ids.component_id}' not found")
    if not ids:
        click.echo("(none)")
        return
    for component_id in ids:
        click.echo(component_id)


@cli.command()
@click.option("--port", "-p", default=8430, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
def serve(port: int, host: str):
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the HTTP API. "
            "Install with: pip install 'repo-mapper[web]'"
        )

    from repo_mapper.web.app import create_app

    click.echo(f"Starting repo-mapper API at http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()

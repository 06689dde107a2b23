"""
This file is the entry point for the 'patternctl' command-line tool.
Run 'patternctl' in your shell to use the CLI.

Every command reads one file and writes the converted document to stdout:
YAML for pattern files and resources, JSON for graphs.
"""
import logging
from pathlib import Path

import typer
import yaml

from common.app_setup import print_error, setup_logging
from patternfile import (
    Descriptor,
    PatternError,
    component_for,
    components_for,
    configuration_for,
    decode,
    from_graph,
    to_graph,
    type_of,
)

app = typer.Typer(add_completion=False, help="Convert pattern files into OAM resources and graph JSON, and back.")

logger = logging.getLogger(__name__)


@app.callback()
def main(
    log_file: Path | None = typer.Option(None, "--log-file", help="Log file (default: $PATTERNKIT_LOGFILE or ~/.patternkit/log.txt)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages"),
):
    setup_logging(loglevel=logging.DEBUG if verbose else logging.INFO, logfile=str(log_file) if log_file else None)


@app.command()
def component(
    file: Path = typer.Argument(..., help="Pattern file"),
    service: str = typer.Argument(..., help="Service key"),
):
    """Print the OAM Component of one service."""
    descriptor = _load_pattern(file)
    comp = _run(component_for, descriptor, service)
    typer.echo(yaml.safe_dump(comp.manifest().to_dict(), sort_keys=False), nl=False)


@app.command()
def components(file: Path = typer.Argument(..., help="Pattern file")):
    """Print the OAM Components of all services as a multi-document stream."""
    descriptor = _load_pattern(file)
    manifests = [comp.manifest().to_dict() for comp in components_for(descriptor)]
    typer.echo(yaml.safe_dump_all(manifests, sort_keys=False), nl=False)


@app.command()
def configuration(file: Path = typer.Argument(..., help="Pattern file")):
    """Print the OAM ApplicationConfiguration holding the service traits."""
    descriptor = _load_pattern(file)
    config = configuration_for(descriptor)
    typer.echo(yaml.safe_dump(config.manifest().to_dict(), sort_keys=False), nl=False)


@app.command()
def service_type(
    file: Path = typer.Argument(..., help="Pattern file"),
    service: str = typer.Argument(..., help="Service key"),
):
    """Print the type of one service."""
    descriptor = _load_pattern(file)
    typer.echo(_run(type_of, descriptor, service))


@app.command("to-graph")
def to_graph_cmd(file: Path = typer.Argument(..., help="Pattern file")):
    """Print the Cytoscape.js graph JSON of a pattern file."""
    descriptor = _load_pattern(file)
    graph = _run(to_graph, descriptor)
    typer.echo(graph.to_json())


@app.command("from-graph")
def from_graph_cmd(file: Path = typer.Argument(..., help="Cytoscape.js graph JSON")):
    """Print the pattern file rebuilt from graph JSON."""
    descriptor = _run(from_graph, _read(file))
    typer.echo(descriptor.to_yaml(), nl=False)


def _read(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        print_error(f"Cannot read {path}: {e}")
        raise typer.Exit(1)


def _load_pattern(path: Path) -> Descriptor:
    return _run(decode, _read(path))


def _run(func, *args):
    """Call ``func`` and turn pattern errors into a message and exit code 1."""
    try:
        return func(*args)
    except PatternError as e:
        logger.debug(f"{func.__name__} failed", exc_info=True)
        print_error(f"{type(e).__name__}: {e.message}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

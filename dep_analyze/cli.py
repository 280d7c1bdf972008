"""Click CLI with analyze, references, inventory and serve subcommands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from dep_analyze.analysis import ArtifactClassInventoryCache
from dep_analyze.bytecode import ClassReferenceExtractor
from dep_analyze.errors import ConfigurationError, DependencyAnalysisError, ParseError
from dep_analyze.models import AnalysisConfig
from dep_analyze.pipeline import run_analysis
from dep_analyze.report import sorted_artifacts, write_manifest
from dep_analyze.resolver import load_graph

_SECTION_COLORS = {
    "used_declared": "green",
    "used_undeclared": "red",
    "unused_declared": "yellow",
}


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", count=True, help="-v for info, -vv for debug logging")
def cli(verbose: int):
    """dep-analyze: find used-undeclared and unused-declared JVM dependencies."""
    _configure_logging(verbose)


@cli.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", "-n", default="analyzeClassesDependencies", help="Analysis name used for report files")
@click.option("--classes", "-c", "classes_dirs", multiple=True,
              type=click.Path(exists=True, path_type=Path),
              help="Compiled classes (directory or jar); overrides the manifest")
@click.option("-o", "--output", "output_dir", type=click.Path(file_okay=False, path_type=Path),
              help="Output directory for reports [default: $DEP_ANALYZE_OUTPUT_DIR or build]")
@click.option("--just-warn/--fail", "just_warn", default=None,
              help="Only warn when violations are found")
@click.option("--log-to-files", is_flag=True, help="Write the audit trail to a log file")
@click.option("--json", "write_json", is_flag=True, help="Also write a JSON result manifest")
def analyze(
    manifest: Path,
    name: str,
    classes_dirs: tuple[Path, ...],
    output_dir: Path | None,
    just_warn: bool | None,
    log_to_files: bool,
    write_json: bool,
):
    """Classify the dependencies described by a graph MANIFEST."""
    config = AnalysisConfig(
        name=name,
        output_dir=output_dir,
        just_warn=just_warn,
        log_dependency_information_to_files=log_to_files,
    )
    cache = ArtifactClassInventoryCache()

    try:
        graph = load_graph(manifest)
        dirs = list(classes_dirs) or graph.classes_dirs
        if not dirs:
            raise click.UsageError("No compiled classes given: use --classes or set classes_dirs")
        analysis = run_analysis(config, graph.roles, dirs, cache)
    except (DependencyAnalysisError, ConfigurationError, ParseError) as e:
        raise click.ClickException(str(e))

    result = analysis.result
    for section, color in _SECTION_COLORS.items():
        artifacts = getattr(result, section)
        click.echo(click.style(f"{section} ({len(artifacts)})", fg=color))
        for artifact in sorted_artifacts(artifacts):
            click.echo(f"  {artifact}")

    for warning in analysis.ambiguities:
        click.echo(click.style(f"warning: {warning}", dim=True))

    click.echo(f"\nReport: {config.report_file}")
    if write_json:
        click.echo(f"Manifest: {write_manifest(analysis, config.output_dir)}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def references(path: Path):
    """List the classes referenced by compiled code at PATH."""
    try:
        names = ClassReferenceExtractor().referenced_classes(path)
    except ParseError as e:
        raise click.ClickException(str(e))
    for name in sorted(names):
        click.echo(name)


@cli.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def inventory(path: Path):
    """List the classes an archive or class directory at PATH provides."""
    try:
        names = ClassReferenceExtractor().defined_classes(path)
    except ParseError as e:
        raise click.ClickException(str(e))
    for name in sorted(names):
        click.echo(name)


@cli.command()
@click.option("--port", "-p", default=8421, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
def serve(port: int, host: str):
    """Start the analysis service with a process-wide inventory cache."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the service. "
            "Install with: pip install 'dependency-analyze[web]'"
        )

    from dep_analyze.web import create_app

    click.echo(f"Starting dep-analyze service at http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()

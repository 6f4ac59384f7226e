"""CLI entry point: stackscan.

Subcommands:
    stackscan detect /path/to/project            # Ecosystem detection only
    stackscan analyze /path/to/project [--json]  # Full stack report
    stackscan patterns python                    # Source extensions / ignore dirs
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from stackscan.core.logging import setup_logging
from stackscan.exceptions import StackScanError


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """stackscan: detect the frameworks and libraries a project uses."""
    load_dotenv(Path.cwd() / ".env")
    setup_logging("DEBUG" if verbose else None)


@main.command("detect")
@click.argument("project_path", type=click.Path(exists=True, file_okay=False))
def detect(project_path: str) -> None:
    """Detect the project's ecosystem from its manifest files."""
    from stackscan.ecosystem import detect_ecosystem

    try:
        detection = detect_ecosystem(project_path)
    except StackScanError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Ecosystem: {detection.ecosystem}")
    click.echo(f"Confidence: {detection.confidence}")
    click.echo(f"Reason: {detection.reason}")


@main.command("analyze")
@click.argument("project_path", type=click.Path(exists=True, file_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def analyze(project_path: str, as_json: bool) -> None:
    """Analyze a project: framework, recognized technologies, leftovers."""
    from stackscan.analyzer import analyze as run_analysis
    from stackscan.schemas import dump_report

    try:
        report = run_analysis(project_path)
    except StackScanError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(dump_report(report))
        return

    manifest = report.manifest
    click.echo(f"Project: {manifest.project_name} {manifest.project_version}")
    click.echo(f"Ecosystem: {report.detection.ecosystem} ({report.detection.confidence})")
    if manifest.package_manager:
        click.echo(f"Package manager: {manifest.package_manager}")

    fw = report.framework
    if fw is None:
        click.echo("Framework: none detected")
    else:
        variant = f" [{fw.variant}]" if fw.variant else ""
        click.echo(f"Framework: {fw.name} {fw.version}{variant}")

    # Group by category
    by_category: dict[str, list] = {}
    for tech in report.detected.recognized.values():
        by_category.setdefault(tech.category, []).append(tech)

    if by_category:
        click.echo(f"\nRecognized ({len(report.detected.recognized)}):")
        for category, techs in sorted(by_category.items()):
            names = ", ".join(f"{t.name} {t.version}" if t.version else t.name for t in techs)
            click.echo(f"  {category}: {names}")

    if report.detected.unrecognized:
        click.echo(f"\nUnrecognized ({len(report.detected.unrecognized)}):")
        for name in report.detected.unrecognized:
            click.echo(f"  {name}")


@main.command("patterns")
@click.argument("ecosystem")
def patterns(ecosystem: str) -> None:
    """Show source extensions and ignored directories for an ecosystem."""
    import stackscan.adapters  # noqa: F401
    from stackscan.registry import resolve

    try:
        file_patterns = resolve(ecosystem).file_patterns()
    except StackScanError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Manifest files: {', '.join(file_patterns.manifest_files)}")
    click.echo(f"Source extensions: {', '.join(sorted(file_patterns.source_extensions))}")
    click.echo(f"Ignored directories: {', '.join(sorted(file_patterns.ignore_dirs))}")

"""
    Main entry point for the fleet capability assessment tool
"""
from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="fleet-assess", help="Assess hosts against upgrade capability requirements")

EXIT_CONFIG_ERROR = 1
EXIT_TARGETS_SKIPPED = 2


def read_targets_file(path: Path) -> list[str]:
    """One host per line; blank lines and # comments are ignored."""
    targets = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            targets.append(line)
    return targets


def build_assessor(assessment_config, profile, on_skip):
    """Wire the WMI transport, admin-share file access and invoker together."""
    from collectors.facts import FactCollector
    from collectors.windows import WmiTransport
    from core.assessment import Assessor
    from diagnostics.invoker import DiagnosticInvoker
    from shared.files import AdminShareFiles

    diagnostics = assessment_config.diagnostics
    transport = WmiTransport()
    invoker = None
    if not profile.skip_diagnostics:
        invoker = DiagnosticInvoker(
            transport=transport,
            files=AdminShareFiles(share=diagnostics.share),
            tool=diagnostics.tool,
            timeout=diagnostics.timeout_seconds,
            poll_interval=diagnostics.poll_interval_seconds,
            remote_directory=diagnostics.remote_directory,
        )
    return Assessor(
        profile=profile,
        collector=FactCollector(transport),
        invoker=invoker,
        max_workers=assessment_config.parallel,
        on_skip=on_skip,
    )


@app.callback()
def main():
    """Assess hosts against upgrade capability requirements."""


@app.command()
def assess(
    targets: list[str] | None = typer.Argument(None, help="Hosts to assess"),
    targets_file: str | None = typer.Option(None, "--targets-file", "-f", help="File with one host per line"),
    config: str | None = typer.Option(None, "--config", "-c", help="Path to assessment YAML config"),
    skip_diagnostics: bool = typer.Option(
        False, "--skip-diagnostics", help="Do not run the diagnostic tool"
    ),
    parallel: int | None = typer.Option(
        None, "--parallel", "-p", min=1, max=256, help="Number of hosts assessed at once"
    ),
    output: str | None = typer.Option(None, "--output", "-o", help="Write records to .json or .csv"),
    log_dir: str = typer.Option("logs", help="Directory for the run log"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
):
    """Assess each host and print its readiness verdict."""
    from pydantic import ValidationError

    from core.config import AssessmentConfig, load_config
    from core.models import Target
    from core.report import write_report
    from helpers.verbose import log_file_for, setup_logger
    from reports.formatter import format_skips, format_table

    assessment_config = AssessmentConfig()
    if config:
        config_path = Path(config)
        if not config_path.exists():
            typer.echo(f"Error: config file not found: {config}", err=True)
            raise typer.Exit(EXIT_CONFIG_ERROR)
        try:
            assessment_config = load_config(config_path)
        except ValidationError as e:
            typer.echo(f"Error: invalid config {config}:\n{e}", err=True)
            raise typer.Exit(EXIT_CONFIG_ERROR)
    if parallel is not None:
        assessment_config.parallel = parallel

    names = list(targets or [])
    if targets_file:
        names.extend(read_targets_file(Path(targets_file)))
    if not names:
        names = list(assessment_config.targets)
    if not names:
        typer.echo("Error: no targets given", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR)

    profile = assessment_config.profile.to_profile(
        skip_diagnostics=True if skip_diagnostics else None
    )

    log_file = log_file_for(Path(log_dir))
    setup_logger(log_file, verbose=verbose)

    skipped = []
    assessor = build_assessor(
        assessment_config, profile, on_skip=lambda target, error: skipped.append((target, error))
    )

    typer.echo(f"Assessing {len(names)} host(s) with parallelism {assessment_config.parallel}...")
    records = list(assessor.assess_all(Target(name) for name in dict.fromkeys(names)))
    records.sort(key=lambda r: r.target.name.lower())

    if records:
        typer.echo(format_table(records))
    if skipped:
        typer.echo(format_skips(sorted(skipped, key=lambda s: s[0].name.lower())))

    if output:
        typer.echo(f"Report: {write_report(records, output)}")
    if not verbose:
        typer.echo(f"Debug log: {log_file}")

    if skipped:
        raise typer.Exit(EXIT_TARGETS_SKIPPED)


if __name__ == "__main__":
    app()

"""
Command-line resume optimizer.

Usage:
    resume-optimizer optimize resume.pdf job.txt --out result.json --pdf resume_optimized.pdf
    resume-optimizer tools
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from config import LOG_DIR
from context.documents import load_document_text
from logger import setup_logger
from orchestrator.agent import ResumeOptimizerAgent
from orchestrator.channel import CallbackSink
from orchestrator.models import OptimizationRequest
from tools.catalog import build_default_registry
from tools.exports import export_json, export_resume_pdf

app = typer.Typer(help="Optimize a resume for a target job with a tool-calling agent.")


def _print_event(event) -> None:
    if event.type == "progress":
        typer.echo(f"  [{event.step}/{event.total_steps}] {event.message}")


@app.command()
def optimize(
    resume: Annotated[Path, typer.Argument(help="Resume file (.pdf, .txt, .md)")],
    job: Annotated[Path, typer.Argument(help="Job description file (.pdf, .txt, .md)")],
    out: Annotated[Optional[Path], typer.Option("--out", "-o", help="Write the full result as JSON")] = None,
    pdf: Annotated[Optional[Path], typer.Option("--pdf", help="Render the optimized resume to PDF")] = None,
    timeout: Annotated[Optional[float], typer.Option(help="Wall-clock limit for the run in seconds")] = None,
):
    """Run one optimization and print progress as it happens."""
    setup_logger(LOG_DIR, level="WARNING")

    try:
        resume_text = load_document_text(resume)
        job_text = load_document_text(job)
    except (OSError, ValueError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    agent = ResumeOptimizerAgent(timeout_s=timeout)
    typer.echo(f"Optimizing {resume.name} for {job.name}")
    outcome = agent.optimize(
        OptimizationRequest(source_text=resume_text, target_description=job_text),
        sink=CallbackSink(_print_event),
    )

    if not outcome.success:
        typer.echo(f"ERROR: {outcome.error}", err=True)
        raise typer.Exit(1)

    typer.echo(f"\nDone in {outcome.execution_time_ms / 1000:.1f}s, tools: {', '.join(outcome.tools_used) or '(none)'}")
    result = outcome.result

    if result.resume_data is None:
        typer.echo("WARNING: no structured resume found in the model's answer", err=True)

    if out:
        export_json(outcome.model_dump(mode="json"), out)
        typer.echo(f"Result: {out}")

    if pdf and result.resume_data is not None:
        try:
            export_resume_pdf(result.resume_data, pdf)
            typer.echo(f"PDF: {pdf}")
        except ValueError as e:
            typer.echo(f"WARNING: PDF export skipped: {e}", err=True)

    if result.cover_letter:
        typer.echo("\n=== Cover Letter ===")
        typer.echo(result.cover_letter)


@app.command("tools")
def list_tools():
    """List the tools offered to the model."""
    registry = build_default_registry()
    typer.echo(f"Total tools: {len(registry)}")
    for name in registry.names():
        typer.echo(f"  {name}: {registry[name].description}")


if __name__ == "__main__":
    app()

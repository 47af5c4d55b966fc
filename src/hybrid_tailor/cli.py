"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from hybrid_tailor.analysis.company import CachedCompanyLookup
from hybrid_tailor.cache.company_cache import CompanyCache
from hybrid_tailor.clients.llm_client import LLMClient
from hybrid_tailor.config import AppConfig, load_config
from hybrid_tailor.errors import InvalidInputError, TailorError, http_status
from hybrid_tailor.models.job import JobData
from hybrid_tailor.models.result import RecruiterReadinessScore
from hybrid_tailor.models.resume import ResumeContent
from hybrid_tailor.pipeline.orchestrator import PipelineOrchestrator
from hybrid_tailor.pipeline.rule_engine import list_rules

app = typer.Typer(
    name="hybrid-tailor",
    help="Tailor a resume to a job: deterministic analysis and rules, one guided AI rewrite.",
    no_args_is_help=True,
)
company_app = typer.Typer(help="Manage the company recognition cache.", no_args_is_help=True)
app.add_typer(company_app, name="company")
console = Console()

LABEL_COLORS = {"weak": "red", "moderate": "yellow", "strong": "green", "exceptional": "bold green"}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_inputs(resume_path: Path, job_path: Path) -> tuple[ResumeContent, JobData]:
    for path in (resume_path, job_path):
        if not path.exists():
            console.print(f"[red]File not found: {path}[/red]")
            raise typer.Exit(2)
    try:
        resume = ResumeContent.model_validate_json(resume_path.read_text(encoding="utf-8"))
        job = JobData.model_validate_json(job_path.read_text(encoding="utf-8"))
    except ValidationError as e:
        console.print(f"[red]Invalid input record:[/red]\n{e}")
        raise typer.Exit(2)
    return resume, job


def _company_cache(config: AppConfig) -> CompanyCache:
    return CompanyCache(db_path=config.cache.resolved_db_path, ttl_days=config.cache.ttl_days)


def _build_orchestrator(config: AppConfig) -> PipelineOrchestrator:
    llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    lookup = CachedCompanyLookup(_company_cache(config))
    return PipelineOrchestrator.from_config(config, llm, company_lookup=lookup)


def _fail(error: TailorError) -> None:
    console.print(
        Panel(
            json.dumps(error.to_response(), indent=2),
            title=f"Failed (HTTP {http_status(error.code)})",
            border_style="red",
        )
    )
    raise typer.Exit(2 if isinstance(error, InvalidInputError) else 1)


def _score_table(score: RecruiterReadinessScore) -> Table:
    table = Table(title=f"Recruiter readiness: {score.overall} ({score.label})")
    table.add_column("Criterion")
    table.add_column("Weight", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Detail")
    for c in score.criteria:
        color = LABEL_COLORS[c.label]
        table.add_row(c.name, str(c.weight), f"[{color}]{c.score}[/{color}]", c.detail)
    return table


@app.command()
def tailor(
    resume: Path = typer.Argument(help="Resume content JSON file"),
    job: Path = typer.Argument(help="Job posting JSON file"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the full response JSON here"),
    resume_id: str = typer.Option("", "--resume-id", help="Identifier echoed into the analysis"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Tailor a resume to a job posting."""
    _setup_logging(verbose)
    config = load_config()
    resume_content, job_data = _load_inputs(resume, job)
    orchestrator = _build_orchestrator(config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Tailoring...", total=None)

        def on_phase(phase: str, detail: str) -> None:
            progress.update(task, description=detail or phase)

        try:
            result = asyncio.run(
                orchestrator.run(resume_content, job_data, resume_id=resume_id, on_phase=on_phase)
            )
        except TailorError as e:
            progress.stop()
            _fail(e)

    response = result.to_response()
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(response, indent=2, ensure_ascii=False), encoding="utf-8")
        console.print(f"[green]Saved: {output}[/green]")

    console.print(_score_table(result.quality_score))
    if result.applied_rules:
        console.print(
            Panel(
                "\n".join(f"[bold]{r.rule_name}[/bold]: {r.edit}" for r in result.applied_rules),
                title="Applied rules",
            )
        )
    usage = result.token_usage
    console.print(
        f"[dim]Modified {result.changes.bullets_modified} bullets"
        f"{', summary' if result.changes.summary_modified else ''}"
        f"{f', why-fit section ({result.changes.why_fit_bullet_count})' if result.changes.why_fit_section_added else ''} | "
        f"tokens {usage.total} (saved ~{usage.saved_vs_pure_ai}) | "
        f"${usage.estimated_cost_usd:.4f} | {result.processing_time_ms} ms[/dim]"
    )
    for suggestion in result.quality_score.top_suggestions:
        console.print(f"  - {suggestion}")


@app.command()
def analyze(
    resume: Path = typer.Argument(help="Resume content JSON file"),
    job: Path = typer.Argument(help="Job posting JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Preview what tailoring would change, without calling the model."""
    _setup_logging(verbose)
    config = load_config()
    resume_content, job_data = _load_inputs(resume, job)
    orchestrator = _build_orchestrator(config)

    try:
        preview = asyncio.run(orchestrator.preview(resume_content, job_data))
    except TailorError as e:
        _fail(e)

    summary = preview.pre_analysis.summarize()
    est = preview.estimated_changes
    console.print(
        Panel(
            f"Impact: {summary['impact']['score']} ({summary['impact']['scoreLabel']}) | "
            f"Uniqueness: {summary['uniqueness']['score']} ({summary['uniqueness']['scoreLabel']}) | "
            f"Context: {summary['context']['score']} ({summary['context']['scoreLabel']})\n"
            f"Bullets to improve: {est.bullets_to_improve} | Missing keywords: {est.missing_keywords} | "
            f"Unevidenced soft skills: {est.soft_skills_detected}\n"
            f"Company context needed: {'yes' if summary['companyContextNeeded'] else 'no'}",
            title="Pre-analysis",
        )
    )
    if summary["uniqueness"]["differentiators"]:
        console.print("[bold]Differentiators:[/bold]")
        for d in summary["uniqueness"]["differentiators"]:
            console.print(f"  - {d}")
    console.print(_score_table(preview.quality_score))
    console.print(f"[dim]Rules that would fire: {', '.join(est.rules_that_would_fire) or 'none'}[/dim]")


@app.command()
def rules() -> None:
    """List the rule catalog in the order rules are applied."""
    table = Table(title="Rules")
    table.add_column("#", justify="right")
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Recruiter issue")
    for i, rule in enumerate(list_rules(), 1):
        table.add_row(str(i), rule.id, rule.name, rule.recruiter_issue)
    console.print(table)


@company_app.command("mark")
def company_mark(
    name: str = typer.Argument(help="Company name"),
    known: bool = typer.Option(True, "--known/--unknown", help="Whether recruiters recognize the company"),
    context: str = typer.Option("", "--context", help="One-line description for unknown companies"),
) -> None:
    """Record whether a company needs introducing."""
    lookup = CachedCompanyLookup(_company_cache(load_config()))
    entry = lookup.remember(name, known, context)
    state = "well known" if entry.is_well_known else "needs context"
    console.print(f"[green]Cached {name}: {state}[/green]")


@company_app.command("clear")
def company_clear() -> None:
    """Delete every cached company entry."""
    count = _company_cache(load_config()).clear()
    console.print(f"[green]Removed {count} cached entries.[/green]")


@company_app.command("stats")
def company_stats() -> None:
    """Show cache statistics."""
    stats = _company_cache(load_config()).stats()
    console.print(f"Total: {stats['total']} | Active: {stats['active']} | Expired: {stats['expired']}")


if __name__ == "__main__":
    app()

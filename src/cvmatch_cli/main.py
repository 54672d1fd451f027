"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

import structlog
import typer
from rich.console import Console
from rich.table import Table

from cvmatch_agents.observability import configure_logging
from cvmatch_core.config.settings import Settings
from cvmatch_core.exceptions import CVMatchError
from cvmatch_core.models.run import MatchConfig, MatchResult

if TYPE_CHECKING:
    from cvmatch_agents.workspace import WorkspaceService
    from cvmatch_core.models.scoring import AdvancedScoring, ATSReport, HybridScoreResult

app = typer.Typer(
    name="cvmatch",
    help="CV / job matching and workspace tools for the French market",
)
console = Console()
logger = structlog.get_logger()

T = TypeVar("T")

VERSION = "0.1.0"


def _settings(verbose: bool = False) -> Settings:
    """Load settings and configure logging."""
    settings = Settings()  # type: ignore[call-arg]
    if verbose:
        settings.log_level = "DEBUG"
    configure_logging(settings)
    return settings


def _read_document(path: Path) -> str:
    """Read a PDF or text document."""
    from cvmatch_agents.tools.pdf_parser import load_document_text

    return asyncio.run(load_document_text(path))


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {message}", style="bold")
    return typer.Exit(code=1)


@app.command()
def match(
    cv: Path = typer.Argument(..., help="CV file (.pdf or text)", exists=True),
    job: Path = typer.Argument(..., help="Job posting file (.pdf or text)", exists=True),
    optimize: bool = typer.Option(False, "--optimize", help="Also rewrite the CV to fit the job"),
    linkedin: bool = typer.Option(False, "--linkedin", help="CV file is a LinkedIn profile export"),
    sector: str | None = typer.Option(None, "--sector", help="Rewrite sector: tech or finance"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Score a CV against a job posting."""
    settings = _settings(verbose)
    try:
        job_text = _read_document(job)
    except CVMatchError as e:
        raise _fail(str(e)) from e

    config = MatchConfig(
        cv_path=cv,
        cv_source="linkedin" if linkedin else "upload",
        job_text=job_text,
        optimize=optimize,
        sector=sector,
    )
    console.print(f"[bold green]Starting run:[/bold green] {config.run_id}")
    result = asyncio.run(_run_pipeline(settings, config))
    _print_result(result)

    if result.status != "success":
        raise typer.Exit(code=1)


@app.command(name="optimize")
def optimize_cv(
    cv: Path = typer.Argument(..., help="CV file (.pdf or text)", exists=True),
    job: Path = typer.Argument(..., help="Job posting file (.pdf or text)", exists=True),
    sector: str | None = typer.Option(None, "--sector", help="Rewrite sector: tech or finance"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the best CV here"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Rewrite a CV iteratively and keep the best-scoring version."""
    settings = _settings(verbose)
    try:
        job_text = _read_document(job)
    except CVMatchError as e:
        raise _fail(str(e)) from e

    config = MatchConfig(cv_path=cv, job_text=job_text, optimize=True, sector=sector)
    result = asyncio.run(_run_pipeline(settings, config))
    _print_result(result)

    if result.optimization is None:
        raise _fail("optimization did not complete")

    if output:
        output.write_text(result.optimization.best_text, encoding="utf-8")
        console.print(f"\n[bold]Best CV written to:[/bold] {output}")
    else:
        console.print("\n[bold]Best CV:[/bold]")
        console.print(result.optimization.best_text, markup=False)


@app.command()
def extract(
    file: Path = typer.Argument(..., help="CV or job file (.pdf or text)", exists=True),
    kind: str = typer.Option("cv", "--kind", help="What the file contains: cv or job"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Extract French contextual data (skills, education, culture) as JSON."""
    if kind not in ("cv", "job"):
        raise _fail("--kind must be 'cv' or 'job'")
    settings = _settings(verbose)

    from cvmatch_agents.agents.context_extractor import ContextExtractorAgent

    try:
        text = _read_document(file)
    except CVMatchError as e:
        raise _fail(str(e)) from e

    data = asyncio.run(ContextExtractorAgent(settings).extract(text, kind))  # type: ignore[arg-type]
    console.print_json(data.model_dump_json())


@app.command()
def ats(
    cv: Path = typer.Argument(..., help="CV file (.pdf or text)", exists=True),
    job: Path = typer.Argument(..., help="Job posting file (.pdf or text)", exists=True),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Check how well a CV would pass an applicant tracking system."""
    settings = _settings(verbose)
    try:
        report = asyncio.run(_ats_report(settings, cv, job))
    except CVMatchError as e:
        raise _fail(str(e)) from e
    _print_ats(report)


@app.command()
def hybrid(
    cv: Path = typer.Argument(..., help="CV file (.pdf or text)", exists=True),
    job: Path = typer.Argument(..., help="Job posting file (.pdf or text)", exists=True),
    mode: str = typer.Option(
        "balanced", "--mode", "-m", help="Scoring mode: fast, balanced or comprehensive"
    ),
    general: bool = typer.Option(
        False, "--general", help="Disable the banking/insurance calibration"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Score a CV with the hybrid TF-IDF, keyword, embedding and domain scorer."""
    if mode not in ("fast", "balanced", "comprehensive"):
        raise _fail(f"Unknown mode: {mode}")
    settings = _settings(verbose)
    try:
        result = asyncio.run(_hybrid_score(settings, cv, job, mode, not general))
    except CVMatchError as e:
        raise _fail(str(e)) from e
    _print_hybrid(result)


@app.command(name="init-db")
def init_database(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Create the workspace tables."""
    settings = _settings(verbose)

    from cvmatch_infra.db.engine import create_engine
    from cvmatch_infra.db.session import init_db

    async def _init() -> None:
        engine = create_engine(settings)
        try:
            await init_db(engine)
        finally:
            await engine.dispose()

    asyncio.run(_init())
    console.print(f"[green]Database ready:[/green] {settings.database_url}")


@app.command()
def dashboard(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Show workspace statistics and alerts."""
    settings = _settings(verbose)
    stats = asyncio.run(_with_workspace(settings, lambda service: service.dashboard_stats()))

    table = Table(title="Tableau de bord")
    table.add_column("Indicateur")
    table.add_column("Valeur", justify="right")
    table.add_row("Dossiers", str(stats.total_dossiers))
    table.add_row("Dossiers ce mois", str(stats.dossiers_this_month))
    table.add_row("Dossiers gagnés", str(stats.completed_dossiers))
    table.add_row("Dossiers en cours", str(stats.in_progress_dossiers))
    table.add_row("Candidats", str(stats.total_candidates))
    table.add_row("Nouveaux candidats ce mois", str(stats.new_candidates_this_month))
    table.add_row("Clients actifs", f"{stats.active_clients}/{stats.total_clients}")
    table.add_row("Invitations en attente", str(stats.pending_invitations))
    table.add_row("Notifications non lues", str(stats.unread_notifications))
    table.add_row("Complétion moyenne", f"{stats.avg_completion_rate}%")
    table.add_row("Temps moyen de création", f"{stats.avg_creation_time_minutes} min")
    console.print(table)

    if stats.alerts:
        console.print("\n[bold yellow]Alertes[/bold yellow]")
        for alert in stats.alerts:
            console.print(f"  - {alert.title} [dim]({alert.description})[/dim]")


@app.command()
def invite(
    email: str = typer.Argument(..., help="Candidate email address"),
    name: str | None = typer.Option(None, "--name", help="Candidate full name"),
    dossier: str | None = typer.Option(None, "--dossier", help="Dossier ID to invite for"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Invite a candidate to complete their profile."""
    settings = _settings(verbose)
    try:
        invitation = asyncio.run(
            _with_workspace(
                settings,
                lambda service: service.invite_candidate(email, name=name, dossier_id=dossier),
            )
        )
    except CVMatchError as e:
        raise _fail(str(e)) from e

    console.print(f"[green]Invitation sent to[/green] {invitation.email}")
    console.print(f"  Token: {invitation.token}")
    console.print(f"  Expires: {invitation.expires_at:%Y-%m-%d %H:%M}")


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"cvmatch v{VERSION}")


async def _run_pipeline(settings: Settings, config: MatchConfig) -> MatchResult:
    """Run the matching pipeline."""
    from cvmatch_agents.orchestrator.pipeline import MatchingPipeline

    return await MatchingPipeline(settings).run(config)


async def _ats_report(settings: Settings, cv_path: Path, job_path: Path) -> ATSReport:
    """Parse both documents and run the ATS checks."""
    from cvmatch_agents.agents.job_parser import JobParserAgent
    from cvmatch_agents.agents.resume_parser import ResumeParserAgent
    from cvmatch_agents.scoring.ats import ATSAnalyzer
    from cvmatch_agents.tools.pdf_parser import load_document_text

    cv_text = await load_document_text(cv_path)
    job_text = await load_document_text(job_path)
    cv = await ResumeParserAgent(settings).parse_text(cv_text, source="upload", name=cv_path.stem)
    job = await JobParserAgent(settings).parse_text(job_text)
    return ATSAnalyzer().analyze(cv, job)


async def _hybrid_score(
    settings: Settings, cv_path: Path, job_path: Path, mode: str, focus: bool
) -> HybridScoreResult:
    """Read both documents and run the hybrid scorer; no LLM call is made."""
    from cvmatch_agents.scoring.factory import create_hybrid_scorer
    from cvmatch_agents.tools.pdf_parser import load_document_text

    cv_text = await load_document_text(cv_path)
    job_text = await load_document_text(job_path)
    scorer = create_hybrid_scorer(settings, banking_insurance_focus=focus)
    return await scorer.score(job_text, cv_text, mode)  # type: ignore[arg-type]


async def _with_workspace(
    settings: Settings,
    operation: Callable[[WorkspaceService], Awaitable[T]],
) -> T:
    """Run one workspace operation in its own committed session."""
    from cvmatch_agents.workspace import WorkspaceService
    from cvmatch_infra.db.engine import create_engine
    from cvmatch_infra.db.session import create_session_factory, init_db

    engine = create_engine(settings)
    try:
        await init_db(engine)
        session_factory = create_session_factory(engine)
        async with session_factory() as session:
            result = await operation(WorkspaceService(session, settings))
            await session.commit()
            return result
    finally:
        await engine.dispose()


def _print_result(result: MatchResult) -> None:
    """Print a matching run summary."""
    console.print(f"\n[bold]Run complete:[/bold] {result.status}")
    if result.cv:
        console.print(f"  CV: {result.cv.name or result.cv.id}")
    if result.job:
        company = f" ({result.job.company})" if result.job.company else ""
        console.print(f"  Job: {result.job.title}{company}")

    if result.scoring:
        _print_scoring(result.scoring)

    if result.match:
        console.print(
            f"\n[bold]Multi-dimensional match:[/bold] {result.match.overall:.0%} "
            f"[dim](profile {result.match.sector})[/dim]"
        )
        for rec in result.match.recommendations:
            console.print(f"  - [{rec.priority}] {rec.suggestion}")

    if result.authenticity:
        console.print(f"  Authenticity: {result.authenticity.global_score:.0%}")

    if result.optimization:
        opt = result.optimization
        console.print(
            f"\n[bold]Optimization ({opt.sector}):[/bold] "
            f"{opt.original_score:.0%} -> {opt.best_score:.0%} "
            f"in {len(opt.attempts)} attempt(s)"
        )

    console.print(f"\n  Cost: ${result.estimated_cost_usd:.4f}")
    console.print(f"  Duration: {result.duration_seconds:.1f}s")
    if result.errors:
        console.print(f"\n[yellow]Warnings/Errors: {len(result.errors)}[/yellow]")
        for error in result.errors:
            console.print(f"  - {error.agent_name}: {error.error_message}")


def _print_scoring(scoring: AdvancedScoring) -> None:
    table = Table(title="Score de correspondance")
    table.add_column("Critère")
    table.add_column("Score", justify="right")
    table.add_row("Similarité sémantique", f"{scoring.semantic_similarity:.0%}")
    table.add_row("Mots-clés", f"{scoring.keyword_match:.0%}")
    table.add_row("Expérience", f"{scoring.experience_relevance:.0%}")
    table.add_row("Compétences", f"{scoring.skills_level:.0%}")
    table.add_row("Secteur", f"{scoring.sector_alignment:.0%}")
    table.add_row("[bold]Global[/bold]", f"[bold]{scoring.overall:.0%}[/bold]")
    console.print(table)
    if scoring.missing_keywords:
        console.print(f"  Missing keywords: {', '.join(scoring.missing_keywords)}")


def _print_ats(report: ATSReport) -> None:
    table = Table(title=f"ATS: {report.score}/100 (match {report.match_rate}%)")
    table.add_column("Critère")
    table.add_column("Points", justify="right")
    table.add_column("Statut")
    table.add_column("Détail")
    colors = {"success": "green", "warning": "yellow", "error": "red"}
    for check in report.criteria:
        color = colors[check.status]
        table.add_row(
            check.name,
            f"{check.points:g}/{check.max_points:g}",
            f"[{color}]{check.status}[/{color}]",
            check.suggestion or check.message,
        )
    console.print(table)

    if report.missing_keywords:
        console.print(f"  Missing keywords: {', '.join(report.missing_keywords)}")
    for tip in report.tips:
        console.print(f"  - {tip.message}")


def _print_hybrid(result: HybridScoreResult) -> None:
    table = Table(
        title=f"Score hybride: {result.final_score}% (confiance {result.confidence}%)"
    )
    table.add_column("Composant")
    table.add_column("Score", justify="right")
    table.add_column("Poids", justify="right")
    breakdown, weights = result.breakdown, result.weights
    table.add_row("Vectoriel (TF-IDF)", f"{breakdown.vector_score:.0f}%", f"{weights.vector:.0%}")
    table.add_row("Mots-clés", f"{breakdown.keyword_score:.0f}%", f"{weights.keyword:.0%}")
    table.add_row("Embeddings", f"{breakdown.embedding_score:.0f}%", f"{weights.embedding:.0%}")
    table.add_row("Domaines", f"{breakdown.semantic_score:.0f}%", f"{weights.semantic:.0%}")
    console.print(table)
    console.print(
        f"  Profil: {result.profile.context} ({result.profile.experience_level}),"
        f" secteur: {result.sector_detected}"
    )
    console.print(f"  {result.detailed_justification}")
    for recommendation in result.recommendations:
        console.print(f"  - {recommendation}")


if __name__ == "__main__":
    app()

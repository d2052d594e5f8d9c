"""
Command-line interface for artisan-rank.

Provides commands to initialize the record store, score ad-hoc inputs,
recompute stored factors, and print within-domain rankings.

Usage:
    artisan-rank init-db                        # Create tables
    artisan-rank health                         # Check the record store
    artisan-rank elite 29 30                    # Score one (elite, total) pair
    artisan-rank provenance "Maeda Family:3"    # Score owner:count pairs
    artisan-rank recompute --all                # Full sweep (Ctrl-C to checkpoint)
    artisan-rank recompute --code MAS590        # Targeted recompute
    artisan-rank rank --domain smith --top 20   # Ranked listing
"""

import asyncio
import signal
import sys
import uuid

import click
import structlog

from artisan_rank.artisans.schemas import ArtisanDomain, ScoreFactor
from artisan_rank.errors import InvariantViolationError
from artisan_rank.observability.logging import bind_context, clear_context, setup_logging

logger = structlog.get_logger(__name__)

DOMAIN_CHOICES = click.Choice([d.value for d in ArtisanDomain])
FACTOR_CHOICES = click.Choice([f.value for f in ScoreFactor])


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Artisan Rank - uncertainty-aware elite and provenance factors."""
    setup_logging("DEBUG" if debug else None)


@main.command("init-db")
def init_db() -> None:
    """Initialize the database schema."""
    from artisan_rank.artisans.repository import ArtisanRepository
    from artisan_rank.storage.database import Database

    async def run():
        async with Database() as db:
            await ArtisanRepository(db).create_tables()
        click.echo("Database initialized successfully")

    asyncio.run(run())


@main.command()
def health() -> None:
    """Check the record store is reachable."""
    from artisan_rank.storage.database import Database

    async def check() -> bool:
        db = Database()
        try:
            await db.connect()
            return await db.health_check()
        except Exception as e:
            logger.error("Postgres health check failed", error=str(e))
            return False
        finally:
            await db.close()

    healthy = asyncio.run(check())
    icon, color = ("✓", "green") if healthy else ("✗", "red")
    click.echo(click.style(f"  {icon} postgres: {healthy}", fg=color))
    if not healthy:
        sys.exit(1)


@main.command()
@click.argument("elite_count", type=int)
@click.argument("total_count", type=int)
def elite(elite_count: int, total_count: int) -> None:
    """Score ELITE_COUNT elite works out of TOTAL_COUNT designated works."""
    from artisan_rank.elite.service import EliteFactorEstimator

    estimator = EliteFactorEstimator()
    try:
        posterior = estimator.posterior(elite_count, total_count)
    except InvariantViolationError as e:
        raise click.BadParameter(str(e)) from e

    click.echo(f"Posterior:    Beta({posterior.alpha:g}, {posterior.beta:g})")
    click.echo(f"Mean:         {posterior.mean:.4f}")
    click.echo(f"Std:          {posterior.std:.4f}")
    click.echo(f"Elite factor: {round(posterior.lower_bound, estimator.config.precision)}")


@main.command()
@click.argument("owners", nargs=-1, required=False)
def provenance(owners: tuple[str, ...]) -> None:
    """Score OWNER[:COUNT] pairs (count defaults to 1)."""
    from artisan_rank.provenance.service import ProvenanceFactorEstimator

    pairs: list[tuple[str, int]] = []
    for item in owners:
        # A trailing ":<digits>" is a count; any other colon belongs to the name
        owner, sep, count = item.rpartition(":")
        if sep and count.strip().isdigit():
            pairs.append((owner.strip(), int(count)))
        else:
            pairs.append((item.strip(), 1))

    estimator = ProvenanceFactorEstimator()
    try:
        summary = estimator.summarize(estimator.observe(pairs))
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    click.echo(f"Observations:      {summary.n}")
    if summary.n:
        click.echo(f"Mean prestige:     {summary.mean_score:.2f}")
        click.echo(f"Apex:              {summary.apex:g} ({summary.apex_tier.value})")
    click.echo(f"Provenance factor: {summary.provenance_factor}")


@main.command()
@click.option("--all", "sweep_all", is_flag=True, help="Recompute every artisan")
@click.option("--code", "codes", multiple=True, help="Artisan code (repeatable)")
@click.option("--domain", type=DOMAIN_CHOICES, default=None, help="Restrict --all to a domain")
@click.option("--resume-after", default=None, help="Checkpoint from an interrupted --all run")
@click.option("--metrics/--no-metrics", default=False, help="Expose Prometheus metrics")
def recompute(
    sweep_all: bool,
    codes: tuple[str, ...],
    domain: str | None,
    resume_after: str | None,
    metrics: bool,
) -> None:
    """Recompute stored elite and provenance factors."""
    if sweep_all == bool(codes):
        raise click.UsageError("Pass either --all or at least one --code")

    from artisan_rank.artisans.repository import ArtisanRepository
    from artisan_rank.observability.metrics import get_metrics
    from artisan_rank.recompute.service import RecomputeService
    from artisan_rank.storage.database import Database
    bind_context(run_id=uuid.uuid4().hex[:12], scope="all" if sweep_all else "codes")

    async def run():
        if metrics:
            get_metrics().start_server()

        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, stop.set)

        async with Database() as db:
            service = RecomputeService(ArtisanRepository(db))
            if sweep_all:
                return await service.recompute_all(
                    domain=domain, resume_after=resume_after, stop_event=stop
                )
            return await service.recompute_codes(codes)

    try:
        result = asyncio.run(run())
    finally:
        clear_context()

    logger.info(
        "Recompute finished",
        updated=result.updated,
        not_found=result.not_found,
        failed=len(result.failed),
        elapsed_seconds=round(result.elapsed_seconds, 2),
    )
    click.echo(f"Updated: {result.updated}  Not found: {result.not_found}  Failed: {len(result.failed)}")
    for error in result.errors:
        click.echo(click.style(f"  ✗ {error}", fg="red"))
    if not result.completed:
        click.echo(f"Stopped early. Resume with --resume-after {result.checkpoint}")
    if not result.ok:
        sys.exit(1)


@main.command()
@click.option("--domain", type=DOMAIN_CHOICES, required=True, help="Population to rank")
@click.option("--factor", type=FACTOR_CHOICES, default=ScoreFactor.ELITE.value, help="Factor to rank by")
@click.option("--top", default=20, show_default=True, help="Rows to print")
def rank(domain: str, factor: str, top: int) -> None:
    """Print the top of a domain's ranking."""
    from artisan_rank.artisans.repository import ArtisanRepository
    from artisan_rank.ranking.service import PercentileService
    from artisan_rank.storage.database import Database

    async def run():
        async with Database() as db:
            service = PercentileService(repository=ArtisanRepository(db))
            return await service.snapshot(domain, factor)

    snap = asyncio.run(run())
    click.echo(f"{snap.domain} by {snap.factor} factor ({snap.population} ranked)")
    click.echo("-" * 48)
    for entry in snap.top(top):
        click.echo(
            f"{entry.rank:>5}  {entry.artisan_id:<12} {entry.score:>8.4f}  "
            f"{entry.percentile:6.2f}%  {entry.grade.value}"
        )


if __name__ == "__main__":
    main()

"""
Command-line interface for Intel Briefing.

Uses Typer to expose the news pipeline and the dashboard widgets. Supports
loading .env files for API key configuration.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
import typer

from .aggregator import Aggregator
from .bias import load_bias_table, reliability_label
from .clustering import cluster_articles
from .config import AppConfig, load_config
from .core.identity import extract_domain
from .core.types import CATEGORIES
from .logging_utils import setup_logging
from .widgets import LocalNewsService, MarketsService, ScoresService, WeatherService

app = typer.Typer(add_completion=False, help="Multi-source news briefing with media-bias ratings.")
console = Console()


def _prepare(config: Path | None, log_level: str | None) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    setup_logging(cfg.logging, Path("logs"))
    return cfg


def _check_category(category: str) -> None:
    if category not in CATEGORIES:
        console.print(f"[red]Invalid category: {category}[/red] (choose from {', '.join(CATEGORIES)})")
        raise typer.Exit(code=2)


def _bias_cell(bias: str | None) -> str:
    return bias or "-"


@app.command()
def headlines(
    category: str = typer.Option("general", "--category"),
    region: str = typer.Option("us", "--region"),
    limit: int = typer.Option(20, "--limit", min=1),
    stats: bool = typer.Option(False, "--stats/--no-stats", help="Print provider call counts."),
    as_json: bool = typer.Option(False, "--json", help="Print articles as JSON."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Fetch enriched headlines for a category, newest first."""
    _check_category(category)
    cfg = _prepare(config, log_level)
    aggregator = Aggregator.from_config(cfg)
    result = asyncio.run(aggregator.fetch_result(category, region))

    if as_json:
        typer.echo(json.dumps([article.to_dict() for article in result.articles[:limit]], indent=2))
    else:
        table = Table(title=f"{category} ({', '.join(result.providers_used)})")
        table.add_column("Published")
        table.add_column("Source")
        table.add_column("Bias")
        table.add_column("Title")
        for article in result.articles[:limit]:
            table.add_row(
                article.published_at.strftime("%Y-%m-%d %H:%M"),
                article.source_name,
                _bias_cell(article.bias),
                article.title,
            )
        console.print(table)
        if result.degraded:
            console.print("[yellow]All providers failed; showing sample articles.[/yellow]")

    if stats:
        for name, counter in aggregator.provider_call_stats().items():
            console.print(f"{name}: {counter['count']} calls today")


@app.command()
def stories(
    category: str = typer.Option("general", "--category"),
    region: str = typer.Option("us", "--region"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Group a category's headlines into stories covered by several outlets."""
    _check_category(category)
    cfg = _prepare(config, log_level)
    articles = asyncio.run(Aggregator.from_config(cfg).fetch_articles(category, region))
    clusters = cluster_articles(
        articles,
        threshold=cfg.clustering.similarity_threshold,
        max_keywords=cfg.clustering.max_keywords,
    )

    table = Table(title=f"{category} stories")
    table.add_column("Outlets", justify="right")
    table.add_column("Lead")
    table.add_column("Keywords")
    for cluster in clusters:
        table.add_row(str(len(cluster.articles)), cluster.lead.title, ", ".join(cluster.keywords))
    console.print(table)


@app.command()
def bias(
    domain: str = typer.Argument(..., help="Outlet domain or article URL."),
    name: str | None = typer.Option(None, "--name", help="Outlet display name."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Look up an outlet's bias rating and reliability score."""
    cfg = _prepare(config, log_level)
    record = load_bias_table(cfg.bias.dataset_path).lookup(domain, name)
    if record is None:
        console.print(f"No rating for {extract_domain(domain) or domain}")
        raise typer.Exit(code=1)
    console.print(
        f"{record.name} ({record.domain}): {record.bias}, "
        f"reliability {record.reliability} ({reliability_label(record.reliability)})"
    )


@app.command()
def markets(
    range_: str = typer.Option("1d", "--range", help="Chart range: 1d, 5d or 1mo."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Show index, commodity and crypto quotes."""
    cfg = _prepare(config, log_level)
    quotes = asyncio.run(MarketsService.from_config(cfg).quotes(range_))
    table = Table(title="Markets")
    table.add_column("Symbol")
    table.add_column("Price", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("%", justify="right")
    for quote in quotes:
        table.add_row(quote.label, f"{quote.price:,.2f}", f"{quote.change:+.2f}", f"{quote.change_percent:+.2f}")
    console.print(table)


@app.command()
def scores(
    league: str = typer.Option("all", "--league"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Show live and recent scores."""
    cfg = _prepare(config, log_level)
    try:
        games = asyncio.run(ScoresService.from_config(cfg).scores(league))
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)

    table = Table(title="Scores")
    table.add_column("League")
    table.add_column("Away")
    table.add_column("Home")
    table.add_column("Status")
    for game in games:
        away = f"{game.away_team.abbr or game.away_team.name} {game.away_team.score}" if game.away_team.name else ""
        home = f"{game.home_team.abbr or game.home_team.name} {game.home_team.score}"
        table.add_row(game.league.upper(), away, home, game.detail or game.status)
    console.print(table)


@app.command()
def weather(
    zip_code: str | None = typer.Option(None, "--zip"),
    lat: float | None = typer.Option(None, "--lat"),
    lon: float | None = typer.Option(None, "--lon"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Show current conditions for a zip code or coordinates."""
    cfg = _prepare(config, log_level)
    try:
        data = asyncio.run(WeatherService.from_config(cfg).current(lat=lat, lon=lon, zip_code=zip_code))
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2)
    if data is None:
        console.print("[yellow]Weather unavailable (is the API key set?)[/yellow]")
        raise typer.Exit(code=1)
    console.print(
        f"{data.city}: {data.temp}°F (feels {data.feels_like}°F), "
        f"H {data.high} / L {data.low}, {data.description}"
    )


@app.command()
def local(
    city: str = typer.Argument(...),
    state: str = typer.Argument(..., help="Full state name, e.g. Ohio."),
    limit: int = typer.Option(20, "--limit", min=1),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, help="YAML config file."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Show recent local news for a city."""
    cfg = _prepare(config, log_level)
    result = asyncio.run(LocalNewsService.from_config(cfg).fetch(city, state))
    title = f"{city}, {state}"
    if result.fallback_city:
        title += f" (via {result.fallback_city})"
    table = Table(title=title)
    table.add_column("Published")
    table.add_column("Source")
    table.add_column("Title")
    for article in result.articles[:limit]:
        table.add_row(article.published_at.strftime("%Y-%m-%d %H:%M"), article.source_name, article.title)
    console.print(table)


if __name__ == "__main__":
    app()

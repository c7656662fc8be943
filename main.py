#!/usr/bin/env python3
"""
PodCheck - Podcast Feed Health Checker
======================================

Command line interface for checking podcast feeds.

Usage:
    python main.py --help                        # Show all commands
    python main.py check-config                  # Show effective configuration
    python main.py check https://example.com/feed.xml
    python main.py check https://example.com/feed.xml --json
    python main.py check-file ./feed.xml --no-probes
"""

import sys
import json
import asyncio
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from podcheck.config.settings import PodCheckSettings, get_settings
from podcheck.services.report_service import FeedReport, FeedReportService
from podcheck.utils.logging import configure_application_logging
from podcheck.utils.exceptions import (
    ConfigurationError,
    FeedFetchError,
    PodCheckError,
    get_user_friendly_message,
    is_retryable_error,
)

console = Console()

STATUS_STYLES = {
    "pass": "[green]✅ pass[/green]",
    "warn": "[yellow]⚠️  warn[/yellow]",
    "fail": "[red]❌ fail[/red]",
}


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, debug):
    """PodCheck - podcast RSS/Atom feed health checker."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        # Show help if no subcommand provided
        click.echo(ctx.get_help())


def _load_settings(ctx, no_probes: bool = False) -> PodCheckSettings:
    """Load settings, configure logging and apply command line overrides."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        console.print(f"[bold red]❌ Configuration error: {escape(e.user_message)}[/bold red]")
        sys.exit(1)

    configure_application_logging(
        log_level="DEBUG" if ctx.obj.get('debug') else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )

    if no_probes:
        validation = settings.validation.model_copy(
            update={"probe_artwork": False, "probe_enclosures": False}
        )
        settings = settings.model_copy(update={"validation": validation})

    return settings


@cli.command()
@click.pass_context
def check_config(ctx):
    """Show the effective configuration."""
    settings = _load_settings(ctx)
    console.print("[bold blue]🔧 PodCheck Configuration[/bold blue]")

    table = Table(title="Effective Settings")
    table.add_column("Section", style="cyan")
    table.add_column("Setting")
    table.add_column("Value", style="green")

    table.add_row("App", "version", settings.version)
    table.add_row("App", "debug", str(settings.debug))
    table.add_row("Logging", "level", settings.get_effective_log_level())
    table.add_row("Logging", "file", settings.logging.file_path or "(disabled)")
    table.add_row("Fetch", "timeout", f"{settings.fetch.timeout_seconds}s")
    table.add_row("Fetch", "max redirects", str(settings.fetch.max_redirects))
    table.add_row("Fetch", "max feed size", f"{settings.fetch.max_feed_bytes} bytes")
    table.add_row("Fetch", "user agent", settings.fetch.user_agent)
    table.add_row("Validation", "max episodes", str(settings.validation.max_episodes))
    table.add_row("Validation", "probe timeout", f"{settings.validation.probe_timeout_seconds}s")
    table.add_row("Validation", "probe artwork", str(settings.validation.probe_artwork))
    table.add_row("Validation", "probe enclosures", str(settings.validation.probe_enclosures))

    console.print(table)


@cli.command()
@click.argument('url')
@click.option('--json', 'as_json', is_flag=True, help='Print the report payload as JSON')
@click.option('--no-probes', is_flag=True, help='Skip artwork and enclosure network probes')
@click.pass_context
def check(ctx, url, as_json, no_probes):
    """Fetch a feed URL and print its health report."""
    settings = _load_settings(ctx, no_probes)
    service = FeedReportService(settings)

    if not as_json:
        console.print(f"[bold blue]🎧 Checking feed: {url}[/bold blue]")

    try:
        report = asyncio.run(service.check_url(url))
    except FeedFetchError as e:
        console.print(f"[bold red]❌ {escape(e.user_message)}[/bold red] [dim]({e.error_type})[/dim]")
        if is_retryable_error(e):
            console.print("[yellow]💡 This may be temporary. Try again in a few minutes.[/yellow]")
        sys.exit(1)
    except PodCheckError as e:
        console.print(f"[bold red]❌ {escape(e.user_message)}[/bold red]")
        sys.exit(1)

    _output_report(report, as_json)


@cli.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print the report payload as JSON')
@click.option('--no-probes', is_flag=True, help='Skip artwork and enclosure network probes')
@click.pass_context
def check_file(ctx, path, as_json, no_probes):
    """Check a feed stored in a local XML file."""
    settings = _load_settings(ctx, no_probes)
    service = FeedReportService(settings)

    try:
        report = service.check_file(path)
    except FeedFetchError as e:
        console.print(f"[bold red]❌ {escape(e.user_message)}[/bold red] [dim]({e.error_type})[/dim]")
        sys.exit(1)
    except PodCheckError as e:
        console.print(f"[bold red]❌ {escape(e.user_message)}[/bold red]")
        sys.exit(1)

    _output_report(report, as_json)


def _output_report(report: FeedReport, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(report.to_payload(), indent=2, ensure_ascii=False))
    else:
        _print_report(report)


def _print_report(report: FeedReport) -> None:
    """Render a report as rich tables."""
    title = escape(report.feed_title or "(untitled feed)")
    console.print(f"\n[bold]{title}[/bold] [dim]{report.feed_format}, {report.total_episodes} episodes[/dim]")

    summary = report.summary
    console.print(
        f"Health score: [bold]{report.overall_score}[/bold]/100  "
        f"SEO score: [bold]{report.seo_score.overall}[/bold]/100  "
        f"({summary.pass_} passed, {summary.warn} warnings, {summary.fail} failures)"
    )

    categories = Table(title="Health Categories")
    categories.add_column("Category", style="cyan")
    categories.add_column("Score", justify="right")
    categories.add_column("Pass", justify="right")
    categories.add_column("Warn", justify="right")
    categories.add_column("Fail", justify="right")
    for name, category in report.health_score.categories.items():
        categories.add_row(
            name.replace("_", " ").title(),
            str(category.score),
            str(category.pass_),
            str(category.warn),
            str(category.fail),
        )
    console.print(categories)

    channel = Table(title="Channel Checks")
    channel.add_column("Check", style="cyan")
    channel.add_column("Status")
    channel.add_column("Details")
    for result in report.channel:
        channel.add_row(result.name, STATUS_STYLES[result.status.value], _details(result.message, result.suggestion))
    console.print(channel)

    for episode in report.episodes:
        table = Table(title=f"Episode: {escape(episode.title)}")
        table.add_column("Check", style="cyan")
        table.add_column("Status")
        table.add_column("Details")
        for result in episode.results:
            table.add_row(result.name, STATUS_STYLES[result.status.value], _details(result.message, result.suggestion))
        console.print(table)

    seo = Table(title="SEO")
    seo.add_column("Area", style="cyan")
    seo.add_column("Score", justify="right")
    seo.add_column("Status")
    seo.add_column("Details")
    for name, detail in report.seo_score.details.items():
        seo.add_row(
            name.replace("_", " ").capitalize(),
            str(detail.score),
            STATUS_STYLES[detail.status.value],
            _details(detail.message, detail.suggestion),
        )
    console.print(seo)


def _details(message: str, suggestion: Optional[str]) -> str:
    if suggestion:
        return f"{escape(message)}\n[dim]{escape(suggestion)}[/dim]"
    return escape(message)


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 PodCheck interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n[bold red]❌ {escape(get_user_friendly_message(e))}[/bold red]")
        sys.exit(1)

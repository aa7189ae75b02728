#!/usr/bin/env python3
"""
BlogChecker - Technical Entry Filter for Blog Feeds
===================================================

Command line interface for checking configuration and running the filter
locally.

Usage:
    python main.py --help                         # Show all commands
    python main.py check-config                   # Validate configuration
    python main.py resolve URL --kind hatenablog  # Show the feed URL for a site
    python main.py run URL --kind other --json    # Run the filter pipeline
    python main.py score "text to score"          # Explain a techword score
    python main.py invoke URL                     # Call the request handler
"""

import sys
import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from blogchecker.config.settings import get_settings
from blogchecker.api.handler import get_pattern_provider, handler, reset_pattern_provider
from blogchecker.ingestion.resolver import FeedURLResolver
from blogchecker.ingestion.wordlist import load_word_list
from blogchecker.models import SiteDescriptor, SiteKind
from blogchecker.processing.pipeline import FeedFilterPipeline
from blogchecker.processing.techwords import TechwordPatternProvider, find_techwords
from blogchecker.utils.logging import configure_application_logging
from blogchecker.utils.exceptions import BlogCheckerError

console = Console()
logger = logging.getLogger(__name__)

KIND_CHOICES = click.Choice([kind.value for kind in SiteKind], case_sensitive=False)


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.option('--techwords', 'techwords_path', help='Techword list location (overrides TECHWORDS_PATH)')
@click.pass_context
def cli(ctx, debug, techwords_path):
    """BlogChecker - keep only the technical entries of a site's feed."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if techwords_path:
        reset_pattern_provider(TechwordPatternProvider(lambda: load_word_list(techwords_path)))

    if ctx.invoked_subcommand is None:
        # Show help if no subcommand provided
        click.echo(ctx.get_help())
    elif ctx.invoked_subcommand != 'check-config':
        _configure_logging(debug)


def _configure_logging(debug: bool) -> None:
    settings = get_settings()
    configure_application_logging(
        log_level="DEBUG" if debug else settings.get_effective_log_level(),
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging
    )


@cli.command()
def check_config():
    """Validate environment configuration."""
    console.print("[bold blue]🔧 Checking BlogChecker Configuration[/bold blue]")

    try:
        settings = get_settings()
    except BlogCheckerError as e:
        console.print(f"[bold red]❌ Configuration error: {e}[/bold red]")
        sys.exit(1)

    table = Table(title="Configuration Status")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Details")

    checks = [
        ("Fetching", _check_fetch_config),
        ("Filtering", _check_filtering_config),
        ("Techwords", _check_techwords_config),
        ("Logging", _check_logging_config),
    ]

    all_passed = True
    for name, check_func in checks:
        status, details = check_func(settings)
        table.add_row(name, "✅ Valid" if status else "❌ Invalid", details)
        if not status:
            all_passed = False

    console.print(table)

    if all_passed:
        console.print("[bold green]✅ All configuration checks passed![/bold green]")
        sys.exit(0)
    else:
        console.print("[bold red]❌ Configuration validation failed[/bold red]")
        sys.exit(1)


@cli.command()
@click.argument('url')
@click.option('--kind', type=KIND_CHOICES, default='other', help='Site platform (default: other)')
def resolve(url, kind):
    """Show the feed URL a site resolves to."""
    site = SiteDescriptor(kind=kind, url=url)
    resolver = FeedURLResolver()
    try:
        feed_url = resolver.resolve(site)
    except BlogCheckerError as e:
        console.print(f"[bold red]❌ {e.user_message}: {e}[/bold red]")
        sys.exit(1)
    finally:
        resolver.close()

    if not feed_url:
        console.print(f"[yellow]⚠️ No feed found for {url}[/yellow]")
        sys.exit(1)

    console.print(f"[green]📡 {feed_url}[/green]")


@cli.command()
@click.argument('url')
@click.option('--kind', type=KIND_CHOICES, default='other', help='Site platform (default: other)')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
def run(url, kind, as_json):
    """Run the filter pipeline for a site."""
    site = SiteDescriptor(kind=kind, url=url)

    pipeline = FeedFilterPipeline(pattern_provider=get_pattern_provider())
    try:
        entries = pipeline.run(site)
    except BlogCheckerError as e:
        console.print(f"[bold red]❌ {e.user_message}: {e}[/bold red]")
        sys.exit(1)
    finally:
        pipeline.close()

    if as_json:
        click.echo(json.dumps([entry.model_dump() for entry in entries], ensure_ascii=False, indent=2))
        return

    table = Table(title=f"Technical entries for {url}")
    table.add_column("#", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("URL")

    for index, entry in enumerate(entries, 1):
        table.add_row(str(index), entry.title, entry.url)

    console.print(table)
    console.print(f"[bold green]✅ {len(entries)} technical entries[/bold green]")


@cli.command()
@click.argument('text')
def score(text):
    """Count techword matches in a text and list them."""
    try:
        pattern = get_pattern_provider().get()
    except BlogCheckerError as e:
        console.print(f"[bold red]❌ {e.user_message}: {e}[/bold red]")
        sys.exit(1)

    matches = find_techwords(pattern, text)
    threshold = get_settings().filtering.techword_threshold

    console.print(f"[bold blue]🔍 {len(matches)} techword match(es), threshold {threshold}[/bold blue]")
    for match in matches:
        console.print(f"  • {match}")

    if len(matches) >= threshold:
        console.print("[bold green]✅ Technical[/bold green]")
    else:
        console.print("[yellow]➖ Not technical[/yellow]")


@cli.command()
@click.argument('url')
@click.option('--kind', type=KIND_CHOICES, default='other', help='Site platform (default: other)')
def invoke(url, kind):
    """Call the request handler with a synthetic event."""
    event = {"queryStringParameters": {"url": url, "kind": kind}}
    response = handler(event, None)

    status = response["statusCode"]
    style = "green" if status == 200 else "red"
    console.print(f"[bold {style}]HTTP {status}[/bold {style}]")
    click.echo(json.dumps(json.loads(response["body"]), ensure_ascii=False, indent=2))

    if status != 200:
        sys.exit(1)


def _check_fetch_config(settings) -> tuple[bool, str]:
    """Check fetching configuration."""
    fetch = settings.fetch
    return True, (
        f"Max redirects: {fetch.max_redirects}, Timeout: {fetch.request_timeout}s, "
        f"Delay: {fetch.pre_fetch_delay}s"
    )


def _check_filtering_config(settings) -> tuple[bool, str]:
    """Check filtering configuration."""
    return True, f"Threshold: {settings.filtering.techword_threshold}"


def _check_techwords_config(settings) -> tuple[bool, str]:
    """Check that the techword list can be loaded."""
    try:
        words = load_word_list(settings.require_techwords_path())
    except BlogCheckerError as e:
        return False, str(e)
    if not words:
        return False, "Techword list is empty"
    return True, f"{len(words)} words from {settings.techwords_path}"


def _check_logging_config(settings) -> tuple[bool, str]:
    """Check logging configuration."""
    if not settings.logging.console_logging:
        return True, f"Level: {settings.logging.level.value}, Output disabled"
    output = "JSON" if settings.logging.structured_logging else "Console"
    return True, f"Level: {settings.logging.level.value}, {output}"


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 BlogChecker interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n[bold red]❌ Unexpected error: {e}[/bold red]")
        sys.exit(1)

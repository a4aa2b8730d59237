"""Command-line interface for batch email triage."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import replace

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from email_triage.batch.cost import RateConfig
from email_triage.batch.runner import BatchState
from email_triage.classifier.categories import category_style
from email_triage.config import TriageConfig
from email_triage.session import TriageSession

console = Console()

_RICH_COLORS = {"blue": "blue", "green": "green", "yellow": "yellow", "default": "white"}


def _load_config(api_base, timeout, classify_rate, generate_rate, discard_partial) -> TriageConfig:
    config = TriageConfig.from_env()
    if api_base is not None:
        config = replace(config, api_base=api_base)
    if timeout is not None:
        config.timeout = timeout
    if classify_rate is not None or generate_rate is not None:
        config.rates = RateConfig.coerce(
            config.rates.classify_per_email if classify_rate is None else classify_rate,
            config.rates.generate_per_email if generate_rate is None else generate_rate,
        )
    if discard_partial:
        config.keep_partial_results = False
    return config


def _category_cell(category: str) -> str:
    style = category_style(category)
    color = _RICH_COLORS.get(style.color, "white")
    prefix = f"{style.icon} " if style.icon else ""
    return f"[{color}]{escape(prefix + style.label)}[/]"


def _results_table(session: TriageSession) -> Table:
    table = Table(title="Results")
    table.add_column("Category", no_wrap=True)
    table.add_column("Auto Response", style="white", ratio=2)
    table.add_column("Email", style="dim", ratio=1)
    for result in session.results:
        table.add_row(_category_cell(result.category), escape(result.auto_response), escape(result.email))
    if not session.results:
        table.add_row("", "[dim]No results yet.[/]", "")
    return table


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Classify pasted emails with a remote service and estimate the cost."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


_common_options = [
    click.option("--api-base", default=None, help="Classification service URL (overrides EMAIL_TRIAGE_API_BASE)"),
    click.option("--timeout", type=float, default=None, help="Per-request timeout in seconds"),
    click.option("--classify-rate", default=None, help="Classify $/email"),
    click.option("--generate-rate", default=None, help="Generate $/email"),
]


def common_options(func):
    for option in reversed(_common_options):
        func = option(func)
    return func


@cli.command()
@common_options
def ping(api_base, timeout, classify_rate, generate_rate):
    """Check that the classification service is reachable."""
    config = _load_config(api_base, timeout, classify_rate, generate_rate, False)
    session = TriageSession.from_config(config, raw_text="")
    message = asyncio.run(session.ping())
    if message.startswith("OK"):
        console.print(f"[green]{escape(message)}[/]")
    else:
        console.print(f"[red]{escape(message)}[/]")
        sys.exit(1)


@cli.command()
@click.argument("source", type=click.File("r"), default="-")
@common_options
def split(source, api_base, timeout, classify_rate, generate_rate):
    """Show the email units parsed from SOURCE without calling the service."""
    config = _load_config(api_base, timeout, classify_rate, generate_rate, False)
    session = TriageSession.from_config(config, raw_text=source.read())
    emails = session.emails
    for index, email in enumerate(emails, 1):
        console.print(f"[cyan]{index:>3}[/] {escape(email)}")
    console.print(f"\n{len(emails)} email(s), projected cost ${session.projected_cost}")


@cli.command()
@click.argument("source", type=click.File("r"), default="-")
@common_options
@click.option("--discard-partial", is_flag=True, help="Drop earlier results when a batch fails")
def classify(source, api_base, timeout, classify_rate, generate_rate, discard_partial):
    """Classify every email in SOURCE (a file, or - for stdin)."""
    config = _load_config(api_base, timeout, classify_rate, generate_rate, discard_partial)
    session = TriageSession.from_config(config, raw_text=source.read())

    console.print(f"API: {escape(config.api_base) or '(not set)'}")
    with console.status(f"Classifying {len(session.emails)} email(s)..."):
        outcome = asyncio.run(session.classify_all())

    console.print(_results_table(session))
    console.print(f"Est. total: ${session.total_cost}")

    if outcome.state is not BatchState.COMPLETED:
        console.print(f"[red]Error:[/] {escape(outcome.message or '')}")
        sys.exit(1)


def main():
    cli()


if __name__ == "__main__":
    main()

# src/cli/runner.py

"""Headless CLI runner: fetch or read a page, print the link card."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.filters.url_normalizer import validate
from src.models.errors import ErrorKind, LinkCardError
from src.models.metadata import ProductMetadata
from src.scrapers.dom_extractor import DomExtractor
from src.services.card_renderer import render_card
from src.services.metadata_fetcher import MetadataFetcher
from src.storage.credential_store import CredentialStore

logger = logging.getLogger("link_card.cli")

# Stderr console for status messages so stdout stays clean for the markup
_err = Console(stderr=True)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_COOKIE_REQUIRED = 2


def _print_summary(metadata: ProductMetadata) -> None:
    """Render a Rich table of the extracted fields to stderr."""
    table = Table(
        title="Product Metadata",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    table.add_row("title", metadata.title)
    table.add_row("description", metadata.description)
    table.add_row("image", metadata.image)
    table.add_row("price", metadata.price or "[dim]none[/dim]")
    table.add_row("url", metadata.url)
    _err.print(table)


def _emit(metadata: ProductMetadata, output_format: str) -> None:
    """Write the result to stdout in the requested format."""
    if output_format == "json":
        json.dump(metadata.to_dict(), sys.stdout, ensure_ascii=False, indent=2)
    else:
        sys.stdout.write(render_card(metadata))
    sys.stdout.write("\n")


def _report_failure(exc: LinkCardError) -> int:
    logger.error("Link card failed: %s (%s)", exc.kind.value, exc)
    _err.print(f"[red]{exc.user_message}[/red]")
    if exc.kind is ErrorKind.CREDENTIAL_REQUIRED:
        _err.print(
            "[dim]Save a cookie with --save-cookie '<cookie>' "
            "or pass --cookie and retry.[/dim]"
        )
        return EXIT_COOKIE_REQUIRED
    return EXIT_FAILED


def cli_fetch(
    url: str,
    cookie: str | None,
    affiliate_tag: str | None,
    output_format: str,
    store: CredentialStore | None = None,
    fetcher: MetadataFetcher | None = None,
) -> int:
    """Fetch *url* remotely and print its card; return an exit code."""
    check = validate(url)
    if not check.valid:
        _err.print(f"[red]{check.reason}: {url}[/red]")
        return EXIT_FAILED

    credential = cookie or (store or CredentialStore()).load()
    fetcher = fetcher or MetadataFetcher(affiliate_tag=affiliate_tag)

    _err.print(f"[bold]Fetching:[/bold] {url}")
    try:
        metadata = fetcher.fetch_and_extract(url, credential)
    except LinkCardError as exc:
        return _report_failure(exc)

    _print_summary(metadata)
    _emit(metadata, output_format)
    return EXIT_OK


def cli_extract_file(
    path: Path,
    url: str,
    affiliate_tag: str | None,
    output_format: str,
) -> int:
    """Extract a saved product page with the DOM extractor."""
    try:
        markup = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Cannot read %s: %s", path, exc)
        _err.print(f"[red]Cannot read {path}: {exc}[/red]")
        return EXIT_FAILED

    try:
        metadata = DomExtractor.from_markup(markup).extract(url, affiliate_tag)
    except LinkCardError as exc:
        return _report_failure(exc)

    _print_summary(metadata)
    _emit(metadata, output_format)
    return EXIT_OK


def run_save_cookie(
    value: str, expiry_days: int, store: CredentialStore | None = None
) -> int:
    """Persist a session cookie for later fetches."""
    if not value.strip():
        _err.print("[red]Cookie value must not be empty.[/red]")
        return EXIT_FAILED
    record = (store or CredentialStore()).save(value.strip(), expiry_days)
    _err.print(
        f"[green]✓ Cookie saved (valid for {expiry_days} days, "
        f"until {record.expires_at:.0f})[/green]"
    )
    return EXIT_OK


def run_forget_cookie(store: CredentialStore | None = None) -> int:
    """Delete the stored session cookie."""
    (store or CredentialStore()).delete()
    _err.print("[green]✓ Cookie deleted[/green]")
    return EXIT_OK


def run_server(host: str, port: int) -> int:
    """Serve the metadata endpoint with uvicorn."""
    import uvicorn

    from src.api.app import create_app

    _err.print(f"[bold]Serving metadata API on http://{host}:{port}[/bold]")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")
    return EXIT_OK

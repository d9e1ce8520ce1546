# fran_scrapers/cli.py
import asyncio
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from fran_scrapers.scraper import check_output_path, scrape_export, scrape_urls
from fran_scrapers.utils.logging import configure_logging

app = typer.Typer(help="Frankfurt exchange scrapers - collect equity links and export master data")
console = Console(stderr=True)


class OutputFormat(str, Enum):
    csv = "csv"
    json = "json"


def _fail(e: BaseException) -> None:
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    raise typer.Exit(1)


@app.command("urls")
def urls(
    search_urls: List[str] = typer.Argument(..., help="Search result URLs to collect detail links from"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output file, standard output if omitted"),
    force: bool = typer.Option(False, "--force", help="Overwrite the output file if it already exists"),
):
    """Collect detail page URLs from search results.

    Example:

        fran urls --out eu.txt --force "https://www.boerse-frankfurt.de/equities/search?REGIONS=Europe&TYPE=1002&FORM=2&MARKET=REGULATED&ORDER_BY=NAME&ORDER_DIRECTION=ASC"
    """
    try:
        check_output_path(out, force)
        count = asyncio.run(scrape_urls(search_urls, out=out, force=force))
    except KeyboardInterrupt:
        console.print("\n[yellow]Scraping interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        _fail(e)

    console.print(f"[green]✓[/green] Collected {count} links")


@app.command("export")
def export(
    link_files: List[Path] = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Link list files"
    ),
    fmt: OutputFormat = typer.Option(OutputFormat.csv, "--format", "-f", help="Output format"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Output file, standard output if omitted"),
    force: bool = typer.Option(False, "--force", help="Overwrite the output file if it already exists"),
    database: Optional[Path] = typer.Option(
        None, "--database", "-d", help="Directory where downloaded records are cached [default: frandb]"
    ),
):
    """Download master data of the linked pages and export it.

    Pages already in the database are not downloaded again.

    Example:

        fran export --format csv --out eu.csv --force eu.txt
    """
    try:
        check_output_path(out, force)
        count = asyncio.run(
            scrape_export(link_files, out=out, force=force, fmt=fmt.value, database=database)
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Export interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        _fail(e)

    console.print(f"[green]✓[/green] Exported {count} records")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override FRAN_LOG_LEVEL"),
):
    """
    Frankfurt exchange scrapers.

    Use 'fran urls --help' or 'fran export --help' for more information.
    """
    configure_logging(level=log_level.upper() if log_level else None)


if __name__ == "__main__":
    app()

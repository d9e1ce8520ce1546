# fran_scrapers/scraper.py
"""Runs the `urls` and `export` commands end to end."""

import sys
from contextlib import AsyncExitStack, contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO

from .browser import open_session
from .cache import RecordCache
from .config import Settings, get_settings
from .exporter import export
from .extractor import extract
from .links import read_link_files, write_links
from .models import Security
from .paginator import collect_links
from .utils.logging import get_logger

logger = get_logger(__name__)


def check_output_path(out: Optional[Path], force: bool) -> None:
    """Refuse to clobber an existing output file unless forced.

    Raises:
        ValueError: If ``out`` is not a regular file, or exists without ``force``
    """
    if out is None or not out.exists():
        return
    if not out.is_file():
        raise ValueError(f"not a regular file: {out}")
    if not force:
        raise ValueError(f"file already exists: {out}, use the --force option to overwrite it")


@contextmanager
def open_output(out: Optional[Path], force: bool = False) -> Iterator[TextIO]:
    """Open ``out`` for writing, or stdout when no path is given.

    Without ``force`` the file is created exclusively.
    """
    if out is None:
        yield sys.stdout
        sys.stdout.flush()
        return

    with open(out, "w" if force else "x", encoding="utf-8", newline="") as f:
        yield f


async def scrape_urls(
    search_urls: Iterable[str],
    out: Optional[Path] = None,
    force: bool = False,
    settings: Optional[Settings] = None,
    session_factory=None,
) -> int:
    """Collect detail links from ``search_urls`` and write them as a link list.

    Returns:
        Number of links written
    """
    settings = settings or get_settings()
    session_factory = session_factory or open_session
    search_urls = list(search_urls)
    logger.info("scrape_urls_started", searches=len(search_urls))

    async with session_factory(settings) as session:
        links = await collect_links(session, search_urls, settings)

    with open_output(out, force) as f:
        count = write_links(links, f)

    logger.info("scrape_urls_finished", links=count, out=str(out) if out else "-")
    return count


async def load_securities(
    urls: Iterable[str],
    cache: RecordCache,
    settings: Optional[Settings] = None,
    session_factory=None,
) -> List[Security]:
    """Load every URL from the cache, scraping the ones not cached yet.

    The browser is only started on the first cache miss.
    """
    settings = settings or get_settings()
    session_factory = session_factory or open_session
    securities: List[Security] = []

    async with AsyncExitStack() as stack:
        session = None

        async def fetch(url: str) -> Security:
            nonlocal session
            if session is None:
                session = await stack.enter_async_context(session_factory(settings))
            return await extract(session, url, settings)

        for url in urls:
            path = await cache.ensure_fetched(url, fetch)
            securities.append(cache.load(path))

    return securities


async def scrape_export(
    link_files: Iterable[Path],
    out: Optional[Path] = None,
    force: bool = False,
    fmt: str = "csv",
    database: Optional[Path] = None,
    settings: Optional[Settings] = None,
    session_factory=None,
) -> int:
    """Fetch (or reuse) the records of the linked pages and export them.

    Returns:
        Number of exported records
    """
    settings = settings or get_settings()
    cache = RecordCache.from_settings(database, settings)

    urls = read_link_files(link_files)
    logger.info("scrape_export_started", urls=len(urls), database=str(cache.cache_dir))

    securities = await load_securities(urls, cache, settings, session_factory)

    with open_output(out, force) as f:
        count = export(securities, f, fmt)

    logger.info("scrape_export_finished", records=count, format=fmt, out=str(out) if out else "-")
    return count

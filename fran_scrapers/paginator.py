# fran_scrapers/paginator.py
"""Collects detail-page links from Frankfurt exchange search results."""

from typing import Iterable, Optional, Set

from .config import Settings, get_settings
from .links import normalize_link, site_root
from .utils.logging import get_logger

logger = get_logger(__name__)

RESULTS_TABLE = "xpath=//app-equity-search-result-table//div[contains(@class, 'table-responsive')]"
RESULT_ANCHORS = RESULTS_TABLE + "//tbody//tr//td[1]//a"
LOADING_SPINNER = "xpath=//app-loading-spinner"
NEXT_PAGE_BUTTON = (
    "xpath=//app-page-bar[1]"
    "//button[contains(@class, 'active') and contains(@class, 'page-bar-type-button-width-auto')]"
    "/following-sibling::button[contains(@class, 'page-bar-type-button-width-auto')][1]"
)


def page_size_button(page_size: str) -> str:
    return f"xpath=//app-page-bar//button[contains(text(), '{page_size}')]"


async def wait_reload(session) -> None:
    """Wait for the loading spinner to appear and then go away."""
    await session.wait_visible(LOADING_SPINNER)
    await session.wait_detached(LOADING_SPINNER)


async def open_search(session, search_url: str, settings: Settings) -> None:
    """Load a search page and switch it to the largest page size.

    A search without results may render no page bar, so the page-size
    button is probed with the next-page timeout before clicking it.
    """
    await session.goto(search_url)
    await session.wait_visible(RESULTS_TABLE)
    await session.wait_detached(LOADING_SPINNER)

    button = page_size_button(settings.page_size)
    if not await session.probe(button, settings.next_page_timeout_ms):
        logger.info("page_size_unavailable", search_url=search_url, page_size=settings.page_size)
        return

    await session.click(button)
    await wait_reload(session)


async def read_page_links(session, search_url: str) -> Set[str]:
    """Absolute links of the result rows currently shown."""
    hrefs = await session.attributes(RESULT_ANCHORS, "href")
    return {normalize_link(href, search_url) for href in hrefs if href}


async def goto_next_page(session, timeout_ms: float) -> bool:
    """Click the page button after the active one.

    Returns False when no such button turns up within ``timeout_ms``; this
    is how the last page is recognised.
    """
    if not await session.probe(NEXT_PAGE_BUTTON, timeout_ms):
        return False

    await session.click(NEXT_PAGE_BUTTON)
    await wait_reload(session)
    return True


async def collect_search_links(session, search_url: str, settings: Settings) -> Set[str]:
    """Walk every result page of one search URL."""
    site_root(search_url)  # rejects relative URLs before touching the browser
    await open_search(session, search_url, settings)

    links: Set[str] = set()
    page_num = 1
    while True:
        found = await read_page_links(session, search_url)
        links |= found
        logger.debug("page_links_read", search_url=search_url, page=page_num, found=len(found))

        if not await goto_next_page(session, settings.next_page_timeout_ms):
            break
        page_num += 1

    logger.info("search_completed", search_url=search_url, pages=page_num, links=len(links))
    return links


async def collect_links(
    session,
    search_urls: Iterable[str],
    settings: Optional[Settings] = None,
) -> Set[str]:
    """Collect the deduplicated detail links of all ``search_urls``.

    The same session is reused for every search so cookies and the chosen
    page size carry over. Any failure aborts the whole collection.

    Args:
        session: PageSession (or anything with the same coroutines)
        search_urls: Absolute search-result URLs, visited in order
        settings: Settings override

    Returns:
        Set of absolute detail-page URLs
    """
    settings = settings or get_settings()

    links: Set[str] = set()
    for search_url in search_urls:
        links |= await collect_search_links(session, search_url, settings)

    logger.info("links_collected", total=len(links))
    return links

# fran_scrapers/browser.py
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    TimeoutError as PlaywrightTimeout,
    async_playwright,
)

from .config import Settings, get_settings
from .exceptions import NavigationTimeoutError
from .utils.logging import get_logger

logger = get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)


class PageSession:
    """A single browser tab that can navigate, wait, click and read elements.

    All required operations use ``wait_timeout_ms`` (0 means wait forever)
    and raise ``NavigationTimeoutError`` when the browser does not comply.
    Only :meth:`probe` is allowed to time out quietly.
    """

    def __init__(self, page: Page, wait_timeout_ms: float = 0):
        self.page = page
        self.wait_timeout_ms = wait_timeout_ms

    async def goto(self, url: str) -> None:
        logger.debug("navigating_to_url", url=url)
        try:
            await self.page.goto(url, timeout=self.wait_timeout_ms)
        except PlaywrightError as e:
            raise NavigationTimeoutError(f"navigation to {url} failed: {e}", url=url) from e

    async def wait_visible(self, selector: str) -> None:
        await self._wait(selector, "visible")

    async def wait_detached(self, selector: str) -> None:
        await self._wait(selector, "detached")

    async def _wait(self, selector: str, state: str) -> None:
        try:
            await self.page.wait_for_selector(selector, state=state, timeout=self.wait_timeout_ms)
        except PlaywrightError as e:
            raise NavigationTimeoutError(
                f"waiting for {selector} to be {state} failed: {e}", selector=selector
            ) from e

    async def click(self, selector: str) -> None:
        try:
            await self.page.click(selector, timeout=self.wait_timeout_ms)
        except PlaywrightError as e:
            raise NavigationTimeoutError(f"click on {selector} failed: {e}", selector=selector) from e
        logger.debug("element_clicked", selector=selector)

    async def probe(self, selector: str, timeout_ms: float) -> bool:
        """Return whether ``selector`` shows up within ``timeout_ms``.

        Expiry of the timeout is a normal "not found" answer.
        """
        try:
            element = await self.page.wait_for_selector(selector, state="attached", timeout=timeout_ms)
        except PlaywrightTimeout:
            return False
        except PlaywrightError as e:
            raise NavigationTimeoutError(f"probing {selector} failed: {e}", selector=selector) from e
        return element is not None

    async def texts(self, selector: str) -> List[str]:
        try:
            return await self.page.locator(selector).all_text_contents()
        except PlaywrightError as e:
            raise NavigationTimeoutError(f"reading text of {selector} failed: {e}", selector=selector) from e

    async def attributes(self, selector: str, name: str) -> List[Optional[str]]:
        try:
            return await self.page.locator(selector).evaluate_all(
                "(elements, name) => elements.map(e => e.getAttribute(name))", name
            )
        except PlaywrightError as e:
            raise NavigationTimeoutError(
                f"reading attribute {name} of {selector} failed: {e}", selector=selector
            ) from e


async def get_browser(playwright, settings: Optional[Settings] = None) -> Browser:
    """Launch a configured Chromium instance.

    Args:
        playwright: Started Playwright driver
        settings: Settings override, defaults to the cached settings

    Returns:
        Browser: Configured Playwright browser instance
    """
    settings = settings or get_settings()
    return await playwright.chromium.launch(headless=settings.headless)


async def get_context(browser: Browser, settings: Optional[Settings] = None) -> BrowserContext:
    """Create a browser context with the scraper's timeouts.

    Args:
        browser: Browser instance from get_browser()
        settings: Settings override, defaults to the cached settings

    Returns:
        BrowserContext: Configured browser context
    """
    settings = settings or get_settings()
    context = await browser.new_context(
        viewport={'width': 1280, 'height': 720},
        user_agent=USER_AGENT,
    )

    context.set_default_timeout(settings.wait_timeout_ms)
    context.set_default_navigation_timeout(settings.wait_timeout_ms)

    return context


@asynccontextmanager
async def open_session(settings: Optional[Settings] = None) -> AsyncIterator[PageSession]:
    """Launch a browser and yield a single-tab :class:`PageSession`.

    Everything is closed on exit, including when the body raises.
    """
    settings = settings or get_settings()
    playwright = await async_playwright().start()
    try:
        browser = await get_browser(playwright, settings)
        try:
            context = await get_context(browser, settings)
            page = await context.new_page()
            logger.info("browser_session_opened", headless=settings.headless)
            yield PageSession(page, wait_timeout_ms=settings.wait_timeout_ms)
        finally:
            await browser.close()
    finally:
        await playwright.stop()
        logger.info("browser_session_closed")

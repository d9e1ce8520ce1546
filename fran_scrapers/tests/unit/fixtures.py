"""Shared test fixtures for fran_scrapers unit tests."""

import asyncio
from contextlib import asynccontextmanager
from typing import Dict, Iterable, List, Optional

import pytest

from fran_scrapers import extractor, paginator
from fran_scrapers.config import Settings
from fran_scrapers.exceptions import NavigationTimeoutError
from fran_scrapers.models import Security

BASE = "https://www.boerse-frankfurt.de"
SEARCH_URL = BASE + "/equities/search?REGIONS=Europe&TYPE=1002&ORDER_BY=NAME"


class FakeSession:
    """Scripted stand-in for PageSession.

    ``searches`` maps a search URL to its result pages (a list of href lists);
    ``details`` maps a detail URL to the texts each extractor selector yields.
    Selectors in ``missing`` never match: waits and clicks on them block
    forever and probes answer False, as Playwright does with no timeout.
    Selectors in ``late`` read as empty until something waits for them.
    Every call is recorded in ``calls``.
    """

    def __init__(
        self,
        searches: Optional[Dict[str, List[List[Optional[str]]]]] = None,
        details: Optional[Dict[str, Dict[str, List[str]]]] = None,
        fail_on: Optional[str] = None,
        missing: Iterable[str] = (),
        late: Iterable[str] = (),
    ):
        self.searches = searches or {}
        self.details = details or {}
        self.fail_on = fail_on
        self.missing = set(missing)
        self.late = set(late)
        self.calls: List[tuple] = []
        self.url: Optional[str] = None
        self.page_index = 0

    def _record(self, *call):
        self.calls.append(call)
        if self.fail_on is not None and self.fail_on in call:
            raise NavigationTimeoutError(f"scripted failure on {call}")

    async def _block_if_missing(self, selector):
        if selector in self.missing:
            await asyncio.Event().wait()

    @property
    def pages(self) -> List[List[Optional[str]]]:
        return self.searches.get(self.url, [])

    async def goto(self, url):
        self._record("goto", url)
        self.url = url
        self.page_index = 0

    async def wait_visible(self, selector):
        self._record("wait_visible", selector)
        await self._block_if_missing(selector)

    async def wait_detached(self, selector):
        self._record("wait_detached", selector)

    async def click(self, selector):
        self._record("click", selector)
        await self._block_if_missing(selector)
        if selector == paginator.NEXT_PAGE_BUTTON:
            self.page_index += 1

    async def probe(self, selector, timeout_ms):
        self._record("probe", selector, timeout_ms)
        if selector in self.missing:
            return False
        self.late.discard(selector)
        if selector == paginator.NEXT_PAGE_BUTTON:
            return self.page_index < len(self.pages) - 1
        if self.url in self.details:
            return bool(self.details[self.url].get(selector))
        return True

    async def attributes(self, selector, name):
        self._record("attributes", selector, name)
        if not self.pages:
            return []
        return list(self.pages[self.page_index])

    async def texts(self, selector):
        self._record("texts", selector)
        if selector in self.late:
            return []
        return list(self.details.get(self.url, {}).get(selector, []))

    @property
    def navigations(self) -> List[str]:
        return [call[1] for call in self.calls if call[0] == "goto"]


def detail_page(
    name="Siemens AG",
    isin="ISIN: DE0007236101",
    symbol="| Symbol: SIE",
    typ="| Type: Share",
    labels=("Sector", "Subsector", "Industry", "Market", "Form"),
    values=("Industrials", "Electrical Equipment", "Industry", "Regulated Market", "Registered Shares"),
) -> Dict[str, List[str]]:
    """Selector -> texts mapping of a typical equity detail page."""
    page = {
        extractor.ISIN_LABEL: [isin] if isin is not None else [],
        extractor.SYMBOL_LABEL: [symbol] if symbol is not None else [],
        extractor.TYPE_LABEL: [typ] if typ is not None else [],
        extractor.MASTER_LABELS: list(labels),
        extractor.MASTER_VALUES: list(values),
    }
    if name is not None:
        page[extractor.INSTRUMENT_NAME] = [name]
    return page


def session_factory_for(session: FakeSession, opened: Optional[list] = None):
    """Build a session factory compatible with ``open_session``."""

    @asynccontextmanager
    async def factory(settings):
        if opened is not None:
            opened.append(settings)
        yield session

    return factory


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, database_dir=tmp_path / "frandb")


@pytest.fixture
def sample_security():
    return Security(
        url=BASE + "/equity/siemens-ag",
        isin="DE0007236101",
        symbol="SIE",
        type="Share",
        name="Siemens AG",
        master={
            "sector": "Industrials",
            "subsector": "Electrical Equipment",
            "industry": "Industry",
            "market": "Regulated Market",
            "form": "Registered Shares",
        },
    )

# fran_scrapers/extractor.py
"""Master-data extraction from a single equity detail page."""

from typing import Dict, List, Optional, Sequence

from .config import Settings, get_settings
from .exceptions import ExtractionError
from .models import Security
from .utils.logging import get_logger

logger = get_logger(__name__)

PAGE_READY = "xpath=//app-widget-performance//div[contains(@class, 'table-responsive')]"
INSTRUMENT_NAME = "xpath=//h1[contains(@class, 'instrument-name')]"
ISIN_LABEL = "xpath=//span[contains(text(), 'ISIN:')]"
SYMBOL_LABEL = "xpath=//span[contains(text(), 'Symbol:')]"
TYPE_LABEL = "xpath=//span[contains(text(), 'Type:')]"
MASTER_TABLE_ROWS = (
    "xpath=//app-widget-equity-master-data"
    "//div[contains(@class, 'table-responsive')]//tbody//tr"
)
MASTER_LABELS = MASTER_TABLE_ROWS + "/td[1]"
MASTER_VALUES = MASTER_TABLE_ROWS + "/td[2]"


def strip_label(text: str, label: str = "") -> str:
    """Strip whitespace, a leading '|' separator and a label prefix.

    >>> strip_label(" | Symbol: SIE ", "Symbol:")
    'SIE'
    """
    text = text.strip()
    if text.startswith("|"):
        text = text[1:].strip()
    if label and text.startswith(label):
        text = text[len(label):].strip()
    return text


def build_master(labels: Sequence[str], values: Sequence[str], url: str = "") -> Dict[str, str]:
    """Pair master-data labels and values by row.

    Labels are trimmed and lower-cased; a repeated label keeps its last value.

    Raises:
        ExtractionError: If the two columns differ in length
    """
    if len(labels) != len(values):
        raise ExtractionError(
            f"master data of {url} has {len(labels)} labels but {len(values)} values",
            url=url,
        )

    master: Dict[str, str] = {}
    for label, value in zip(labels, values):
        master[label.strip().lower()] = value.strip()
    return master


def _first(texts: List[str]) -> str:
    return texts[0] if texts else ""


async def wait_for_field(session, selector: str, url: str, timeout_ms: float) -> None:
    """Wait until ``selector`` is attached, failing after ``timeout_ms``."""
    if not await session.probe(selector, timeout_ms):
        raise ExtractionError(f"{selector} did not appear on {url} within {timeout_ms:.0f} ms", url=url)


async def extract(session, url: str, settings: Optional[Settings] = None) -> Security:
    """Visit ``url`` and scrape its master data into a :class:`Security`.

    The name and the master-data table render independently of the
    readiness widget, so both are waited for before anything is read.
    A page where either never shows up fails instead of yielding a
    partial record.

    Args:
        session: PageSession (or anything with the same coroutines)
        url: Absolute detail-page URL
        settings: Settings override

    Returns:
        Security populated from the page

    Raises:
        ExtractionError: If the name or master table is missing or malformed
        NavigationTimeoutError: If the page never becomes ready
    """
    settings = settings or get_settings()

    await session.goto(url)
    # the page is filled in asynchronously after navigation
    await session.wait_visible(PAGE_READY)
    await wait_for_field(session, INSTRUMENT_NAME, url, settings.detail_timeout_ms)
    await wait_for_field(session, MASTER_LABELS, url, settings.detail_timeout_ms)

    names = await session.texts(INSTRUMENT_NAME)
    if not names:
        raise ExtractionError(f"instrument name not found on {url}", url=url)

    isin = await session.texts(ISIN_LABEL)
    symbol = await session.texts(SYMBOL_LABEL)
    typ = await session.texts(TYPE_LABEL)

    labels = await session.texts(MASTER_LABELS)
    values = await session.texts(MASTER_VALUES)

    security = Security(
        url=url,
        name=strip_label(names[0]),
        isin=strip_label(_first(isin), "ISIN:"),
        symbol=strip_label(_first(symbol), "Symbol:"),
        type=strip_label(_first(typ), "Type:"),
        master=build_master(labels, values, url),
    )
    logger.info("record_extracted", url=url, isin=security.isin, fields=len(security.master))
    return security

# fran_scrapers/models.py
from typing import Dict

from pydantic import BaseModel, Field


class Security(BaseModel):
    """Master data of one listed security, as scraped from its detail page."""

    url: str = Field(..., frozen=True, description="Source detail page, primary key of the cache.")
    isin: str = Field("", description="ISIN shown next to the instrument name.")
    symbol: str = Field("", description="Exchange symbol.")
    type: str = Field("", description="Instrument type label, e.g. 'Share'.")
    name: str = Field("", description="Instrument name from the page header.")
    master: Dict[str, str] = Field(
        default_factory=dict,
        description="Master-data table, lower-cased label -> value.",
    )

    def master_value(self, key: str) -> str:
        """Master-data value for ``key``; absent keys read as an empty string."""
        return self.master.get(key, "")

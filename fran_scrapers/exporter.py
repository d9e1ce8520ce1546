# fran_scrapers/exporter.py
"""Tabular export of cached securities."""

import csv
import json
from typing import Iterable, List, TextIO

from .models import Security

FORMATS = ("csv", "json")

HEADERS = [
    "Name",
    "ISIN",
    "Symbol",
    "Type",
    "Form",
    "Market",
    "Subsector",
    "Sector",
    "Industry",
]


def sort_key(security: Security):
    return (
        security.master_value("sector"),
        security.master_value("subsector"),
        security.name,
    )


def sort_securities(securities: Iterable[Security]) -> List[Security]:
    """Order by sector, subsector, then name (plain string comparison)."""
    return sorted(securities, key=sort_key)


def to_row(security: Security) -> List[str]:
    return [
        security.name,
        security.isin,
        security.symbol,
        security.type,
        security.master_value("form"),
        security.master_value("market"),
        security.master_value("subsector"),
        security.master_value("sector"),
        security.master_value("industry"),
    ]


def export_csv(securities: Iterable[Security], out: TextIO) -> int:
    """Write a `;`-separated header plus one row per security.

    Returns:
        Number of data rows written
    """
    writer = csv.writer(out, delimiter=";", lineterminator="\n")
    writer.writerow(HEADERS)

    count = 0
    for security in securities:
        writer.writerow(to_row(security))
        count += 1
    return count


def export_json(securities: Iterable[Security], out: TextIO) -> int:
    data = [security.model_dump() for security in securities]
    json.dump(data, out, ensure_ascii=False, indent=2)
    out.write("\n")
    return len(data)


def export(securities: Iterable[Security], out: TextIO, fmt: str = "csv") -> int:
    """Sort ``securities`` and render them in ``fmt``."""
    ordered = sort_securities(securities)
    if fmt == "csv":
        return export_csv(ordered, out)
    if fmt == "json":
        return export_json(ordered, out)
    raise ValueError(f"unknown format: {fmt}")

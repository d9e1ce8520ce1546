# fran_scrapers/links.py
"""Link normalization and newline-delimited link lists."""

from pathlib import Path
from typing import Iterable, Iterator, List, TextIO, Union
from urllib.parse import urljoin, urlparse


def site_root(url: str) -> str:
    """Return ``scheme://host`` of an absolute URL.

    Raises:
        ValueError: If the URL is not absolute
    """
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"not an absolute URL: {url!r}")
    return f"{parsed.scheme}://{parsed.netloc}"


def normalize_link(href: str, base_url: str) -> str:
    """Resolve an anchor ``href`` against the ``scheme://host`` of ``base_url``.

    Absolute hrefs are kept as they are; fragments are dropped.
    """
    href = href.strip()
    absolute = urljoin(site_root(base_url) + "/", href)
    return absolute.split("#", 1)[0]


def iter_links(lines: Iterable[str]) -> Iterator[str]:
    """Yield URLs from link-list lines, skipping blanks and `#` comments."""
    for line in lines:
        url = line.strip()
        if not url or url.startswith("#"):
            continue
        yield url


def read_link_files(paths: Iterable[Union[str, Path]]) -> List[str]:
    """Read the URLs of several link-list files, in file order."""
    urls: List[str] = []
    for path in paths:
        with open(path, encoding="utf-8") as f:
            urls.extend(iter_links(f))
    return urls


def write_links(links: Iterable[str], out: TextIO) -> int:
    """Write links sorted, one per line. Returns the number written."""
    count = 0
    for link in sorted(links):
        out.write(link + "\n")
        count += 1
    return count

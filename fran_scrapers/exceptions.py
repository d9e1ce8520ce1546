"""Custom exceptions for the Frankfurt scrapers."""

from pathlib import Path
from typing import Optional, Union


class ScraperError(Exception):
    """Base exception for all scraper errors."""
    pass


class NavigationTimeoutError(ScraperError):
    """Raised when a required navigation or page-ready wait fails."""

    def __init__(self, message: str, selector: Optional[str] = None, url: Optional[str] = None):
        super().__init__(message)
        self.selector = selector
        self.url = url


class ExtractionError(ScraperError):
    """Raised when a detail page lacks a required node."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class CacheError(ScraperError):
    """Raised when cache operations fail."""

    def __init__(self, message: str, path: Union[str, Path, None] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class AlreadyExistsError(CacheError, FileExistsError):
    """Raised when a cache file appears while it is being created exclusively."""
    pass

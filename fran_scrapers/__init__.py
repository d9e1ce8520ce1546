"""Frankfurt exchange master-data scrapers."""

__version__ = "0.1.0"

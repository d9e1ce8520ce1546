# fran_scrapers/cache.py
"""Write-once on-disk cache of scraped securities."""

import hashlib
import json
import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Awaitable, Callable, Optional
from urllib.parse import urlparse

from pydantic import ValidationError

from .config import Settings, get_settings
from .exceptions import AlreadyExistsError, CacheError
from .models import Security
from .utils.logging import get_logger

logger = get_logger(__name__)

Fetcher = Callable[[str], Awaitable[Security]]


def serialize(security: Security) -> str:
    """Cache-file text of a security: two-space indented JSON plus newline."""
    return json.dumps(security.model_dump(), ensure_ascii=False, indent=2) + "\n"


class RecordCache:
    """Maps detail-page URLs to JSON record files.

    A file is written at most once per URL and never rewritten; an existing
    file is a cache hit regardless of age. Removing a file forces a re-fetch
    on the next run.
    """

    SUFFIX = ".json"

    def __init__(self, cache_dir: Path, key: str = "basename"):
        if key not in ("basename", "sha256"):
            raise ValueError(f"unknown cache key strategy: {key}")
        self.cache_dir = Path(cache_dir)
        self.key = key
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheError(f"cannot create cache directory {self.cache_dir}: {e}", self.cache_dir) from e

    @classmethod
    def from_settings(cls, cache_dir: Optional[Path] = None, settings: Optional[Settings] = None) -> "RecordCache":
        settings = settings or get_settings()
        return cls(cache_dir or settings.database_dir, key=settings.cache_key)

    def cache_key(self, url: str) -> str:
        if self.key == "sha256":
            return hashlib.sha256(url.encode("utf-8")).hexdigest()

        name = PurePosixPath(urlparse(url).path.rstrip("/")).name
        if not name:
            raise CacheError(f"cannot derive a cache key from {url}")
        return name

    def path_for(self, url: str) -> Path:
        """Deterministic cache file path of ``url``."""
        return self.cache_dir / f"{self.cache_key(url)}{self.SUFFIX}"

    def exists(self, url: str) -> bool:
        return self.path_for(url).exists()

    async def ensure_fetched(self, url: str, fetch: Fetcher) -> Path:
        """Return the cache file of ``url``, calling ``fetch`` only on a miss.

        Raises:
            AlreadyExistsError: If the file was created by someone else meanwhile
            CacheError: If the record cannot be written
        """
        path = self.path_for(url)
        if self.exists(url):
            logger.debug("cache_hit", url=url, path=str(path))
            return path

        logger.info("cache_miss", url=url, path=str(path))
        security = await fetch(url)
        self._publish(path, serialize(security))
        logger.info("record_cached", url=url, path=str(path))
        return path

    def _publish(self, path: Path, text: str) -> None:
        """Write ``text`` to a temp file and link it to ``path`` exclusively.

        Readers never observe a partially written cache file.
        """
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=f".{path.name}.", suffix=".tmp")
        except OSError as e:
            raise CacheError(f"cannot create temp file in {self.cache_dir}: {e}", self.cache_dir) from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.link(tmp_name, path)
        except FileExistsError as e:
            raise AlreadyExistsError(f"cache file already exists: {path}", path) from e
        except OSError as e:
            raise CacheError(f"cannot write cache file {path}: {e}", path) from e
        finally:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass

    def load(self, path: Path) -> Security:
        """Read a cached security back.

        Raises:
            CacheError: If the file is unreadable or not a valid record
        """
        path = Path(path)
        try:
            return Security.model_validate_json(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise CacheError(f"cannot read cache file {path}: {e}", path) from e
        except ValidationError as e:
            raise CacheError(f"invalid cache file {path}: {e}", path) from e

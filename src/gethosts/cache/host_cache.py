"""Host List Cache Module - TTL cache for the downloaded host list.

Philosophy:
- File-based caching for persistence across CLI invocations
- File modification time is the cache timestamp
- Stale or unreadable cache means refetch, never failure
- Persisting is best effort: fresh data is returned even if saving fails

Public API (the "studs"):
    HostListCache: Cache-or-refresh decision for the host list
    CacheEntry: Data model for the cached file

Cache file: ~/.gethosts/hostslist.txt (plain text, one host per line)

Security:
- Cache directory permissions: 0700
- Cache file permissions: 0600
- Atomic writes using temporary file
"""

import contextlib
import logging
import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from gethosts.config_manager import HostsConfig
from gethosts.exceptions import CacheDirCreateError, CacheWriteError, HostCacheError
from gethosts.fetcher import HostFetcher
from gethosts.parser import format_hosts, parse_hosts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Cached host list file.

    Attributes:
        path: Cache file location
        modified: Unix timestamp of the last write (file mtime)
        content: Cached text, one host per line
    """

    path: Path
    modified: float
    content: str

    def expires_at(self, duration: float) -> float:
        """Unix timestamp after which the entry is stale."""
        return self.modified + duration

    def is_expired(self, duration: float, now: float) -> bool:
        """Check if the entry is stale at ``now``.

        The expiry instant itself still counts as fresh.

        Example:
            >>> entry = CacheEntry(Path("hosts.txt"), 1000.0, "")
            >>> entry.is_expired(60, now=1060.0)
            False
            >>> entry.is_expired(60, now=1060.5)
            True
        """
        return now > self.expires_at(duration)


class HostListCache:
    """Serve the host list from cache, refreshing it when stale.

    Holds everything one lookup needs (config, fetcher, clock, logger), so
    nothing is read from process-wide state.

    Thread-safety: Not thread-safe. One lookup per process run.

    Example:
        >>> cache = HostListCache(config)
        >>> hosts = cache.get_hosts()  # cached text, or freshly downloaded
    """

    def __init__(
        self,
        config: HostsConfig,
        fetcher: HostFetcher | None = None,
        clock: Callable[[], float] = time.time,
        log: logging.Logger | None = None,
    ):
        """Initialize host list cache.

        Args:
            config: Download and cache settings
            fetcher: Fetcher to use on a miss (default: built from config)
            clock: Returns the current Unix time (default: time.time)
            log: Logger for progress messages (default: module logger)
        """
        self.config = config
        self.fetcher = fetcher or HostFetcher(
            verify_tls=config.verify_tls, timeout=config.timeout, log=log
        )
        self._clock = clock
        self._log = log or logger

    @property
    def cache_path(self) -> Path:
        """Full path of the cache file."""
        return self.config.cache_path

    def read_entry(self) -> CacheEntry | None:
        """Read the cache file.

        Returns:
            CacheEntry, or None if the file is missing or unreadable
        """
        try:
            modified = self.cache_path.stat().st_mtime
        except OSError as e:
            self._log.info(f"no file in cache, downloading {self.cache_path} ({e})")
            return None

        try:
            content = self.cache_path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self._log.info(f"corrupt file in cache, downloading {self.cache_path} ({e})")
            return None

        return CacheEntry(path=self.cache_path, modified=modified, content=content)

    def get_hosts(self, force_refresh: bool = False) -> str:
        """Get the host list, from cache if fresh, otherwise downloaded.

        Args:
            force_refresh: Ignore the cache and always download

        Returns:
            Host list text, one host per line

        Raises:
            FetchError: If the cache is not usable and the download fails
            ParseError: If the cache is not usable and the payload is malformed
        """
        if force_refresh:
            self._log.info("refresh requested, skipping cache")
        else:
            hosts = self._get_cached()
            if hosts is not None:
                return hosts

        hosts = self.refresh()

        self._log.info("downloaded and parsed - trying to save to cache")
        try:
            self._save(hosts)
        except HostCacheError as e:
            self._log.warning(f"downloaded and parsed ok, could not save to cache: {e}")
        else:
            self._log.info("saved hosts in cache")

        return hosts

    def refresh(self) -> str:
        """Download and format the host list without touching the cache.

        Raises:
            FetchError: If the download fails
            ParseError: If the payload is malformed
        """
        data = self.fetcher.fetch(self.config.url, self.config.user, self.config.password)
        return format_hosts(parse_hosts(data))

    def _get_cached(self) -> str | None:
        """Return cached text if the cache file is fresh and readable."""
        try:
            modified = self.cache_path.stat().st_mtime
        except OSError as e:
            self._log.info(f"no file in cache, downloading {self.cache_path} ({e})")
            return None

        stamp = CacheEntry(path=self.cache_path, modified=modified, content="")
        if stamp.is_expired(self.config.cache_duration, now=self._clock()):
            self._log.info(f"cache expired, downloading {self.cache_path}")
            return None

        self._log.info("found file in cache")
        entry = self.read_entry()
        if entry is None:
            return None
        return entry.content

    def _ensure_cache_dir(self) -> None:
        """Ensure cache directory exists with secure permissions.

        Raises:
            CacheDirCreateError: If directory creation fails
        """
        cache_dir = self.cache_path.parent
        try:
            # New directories are owner only: rwx------
            cache_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
            self._log.debug(f"Cache directory ready: {cache_dir}")
        except OSError as e:
            raise CacheDirCreateError(f"could not create cache dir {cache_dir}: {e}") from e

    def _save(self, hosts: str) -> None:
        """Write the host list to the cache file.

        Raises:
            CacheDirCreateError: If the cache directory cannot be created
            CacheWriteError: If the file cannot be written
        """
        self._ensure_cache_dir()

        temp_path = self.cache_path.with_name(self.cache_path.name + ".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8", newline="") as f:
                f.write(hosts)

            # Set secure permissions before moving
            os.chmod(temp_path, 0o600)

            # Atomic rename
            temp_path.replace(self.cache_path)

            self._log.debug(f"Saved {len(hosts)} bytes to {self.cache_path}")

        except OSError as e:
            # Cleanup temp file on error
            with contextlib.suppress(OSError):
                temp_path.unlink(missing_ok=True)
            raise CacheWriteError(f"could not write {self.cache_path}: {e}") from e

#!/usr/bin/env python3
"""
Resource Fetcher
================
Resolves named data resources (e.g. ``nsi_generics``) and loads them on a
background worker.

A resource is declared under ``fetcher.resources`` in app.yaml and is read
from one of:

- ``url``: HTTPS endpoint returning JSON (cached on disk with a TTL)
- ``url_env``: environment variable holding such a URL
- ``file``: local JSON file (bundled data)

Usage:
    fetcher = FileFetcher()
    future = fetcher.get("nsi_generics")
    data = future.result()
"""

import os
import json
import time
import hashlib
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, Future
from pathlib import Path
from typing import Optional, Callable, Any, Dict
from urllib.parse import urlsplit
import http.client
import ssl

from namelint.settings import get_setting, resolve_path

logger = logging.getLogger(__name__)


class ResourceError(LookupError):
    """A named resource could not be resolved, fetched or decoded."""


# =============================================================================
# Retry Logic
# =============================================================================

class RetryHandler:
    """
    Handles retry logic with exponential backoff.

    Usage:
        retry = RetryHandler(max_retries=3, base_delay=1.0)

        result = retry.execute(
            func=fetch,
            args=(url,),
            retryable_exceptions=(ConnectionError, TimeoutError)
        )
    """

    def __init__(self,
                 max_retries: Optional[int] = None,
                 base_delay: Optional[float] = None,
                 max_delay: Optional[float] = None,
                 exponential_base: Optional[float] = None,
                 sleep: Callable[[float], None] = time.sleep):
        cfg = get_setting("fetcher", {}) or {}
        if max_retries is None:
            max_retries = cfg.get("max_retries")
        if base_delay is None:
            base_delay = cfg.get("retry_base_delay")
        if max_delay is None:
            max_delay = cfg.get("retry_max_delay")
        if exponential_base is None:
            exponential_base = cfg.get("retry_exponential_base")
        if max_retries is None or base_delay is None or max_delay is None or exponential_base is None:
            raise ValueError("fetcher retry settings must be set in app.yaml")

        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self._sleep = sleep

    def execute(self,
                func: Callable,
                args: tuple = (),
                kwargs: dict = None,
                retryable_exceptions: tuple = (Exception,)) -> Any:
        """
        Execute function with retry logic.

        Raises:
            Last exception if all retries fail
        """
        kwargs = kwargs or {}
        last_exception = None

        for attempt in range(self.max_retries + 1):
            try:
                return func(*args, **kwargs)
            except retryable_exceptions as e:
                last_exception = e

                if attempt < self.max_retries:
                    delay = min(
                        self.base_delay * (self.exponential_base ** attempt),
                        self.max_delay
                    )
                    logger.debug(f"Retry {attempt + 1}/{self.max_retries} after {delay:.2f}s: {e}")
                    self._sleep(delay)

        raise last_exception


# =============================================================================
# Fetcher
# =============================================================================

class FileFetcher:
    """
    Fetches named JSON resources asynchronously.

    ``get()`` never blocks: it returns a Future that resolves to the decoded
    JSON document or fails with ResourceError.
    """

    def __init__(self,
                 resources: Optional[Dict[str, dict]] = None,
                 cache_dir: Optional[str] = None,
                 max_workers: Optional[int] = None,
                 request_timeout_seconds: Optional[float] = None,
                 retry_handler: Optional[RetryHandler] = None):
        cfg = get_setting("fetcher", {}) or {}
        if resources is None:
            resources = cfg.get("resources")
        if resources is None:
            raise ValueError("fetcher.resources must be set in app.yaml")
        self.resources = dict(resources)

        if max_workers is None:
            max_workers = cfg.get("max_workers")
        if max_workers is None:
            raise ValueError("fetcher.max_workers must be set in app.yaml")
        self.max_workers = max_workers

        if request_timeout_seconds is None:
            request_timeout_seconds = cfg.get("request_timeout_seconds")
        if request_timeout_seconds is None:
            raise ValueError("fetcher.request_timeout_seconds must be set in app.yaml")
        self.request_timeout_seconds = request_timeout_seconds

        self.cache_ttl_seconds = cfg.get("cache_ttl_seconds")
        self.cache_hash_length = cfg.get("cache_hash_length")
        if self.cache_ttl_seconds is None:
            raise ValueError("fetcher.cache_ttl_seconds must be set in app.yaml")
        if self.cache_hash_length is None:
            raise ValueError("fetcher.cache_hash_length must be set in app.yaml")

        # Cache directory is created lazily, only remote fetches need it
        self.cache_dir = resolve_path(cache_dir or cfg.get("cache_dir"))

        self.retry_handler = retry_handler or RetryHandler()
        self._executor = None
        self._lock = threading.Lock()

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix="namelint-fetch",
                )
            return self._executor

    def get(self, name: str) -> Future:
        """Fetch a named resource in the background."""
        return self._get_executor().submit(self.fetch, name)

    def fetch(self, name: str, use_cache: bool = True) -> Any:
        """Fetch a named resource synchronously."""
        entry = self.resources.get(name)
        if not entry:
            raise ResourceError(f"Unknown resource '{name}'")

        url = entry.get("url")
        if entry.get("url_env"):
            url = os.environ.get(entry["url_env"]) or url

        if url:
            return self._fetch_url(url, use_cache=use_cache)
        if entry.get("file"):
            return self._read_file(resolve_path(entry["file"]))
        raise ResourceError(f"Resource '{name}' has no url or file")

    def close(self):
        """Shut down the background worker."""
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    # -------------------------------------------------------------------------
    # Local files
    # -------------------------------------------------------------------------

    def _read_file(self, path: Path) -> Any:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ResourceError(f"Cannot read {path}: {e}") from e
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ResourceError(f"Malformed JSON in {path}: {e}") from e

    # -------------------------------------------------------------------------
    # Remote resources
    # -------------------------------------------------------------------------

    def _get_cache_path(self, url: str) -> Path:
        """Get cache file path for a URL"""
        url_hash = hashlib.md5(url.encode()).hexdigest()[:self.cache_hash_length]
        return self.cache_dir / f"{url_hash}.json"

    def _load_from_cache(self, url: str) -> Optional[Any]:
        """Load cached document if available and fresh"""
        cache_path = self._get_cache_path(url)
        if not cache_path.exists():
            return None

        try:
            data = json.loads(cache_path.read_text(encoding="utf-8"))
            if time.time() - data.get('timestamp', 0) > self.cache_ttl_seconds:
                return None
            if data.get('url') != url:
                return None
            return data['data']
        except (json.JSONDecodeError, KeyError, AttributeError):
            return None

    def _save_to_cache(self, url: str, document: Any):
        """Save document to cache"""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        cache_path = self._get_cache_path(url)
        data = {
            'url': url,
            'data': document,
            'timestamp': time.time()
        }
        cache_path.write_text(json.dumps(data), encoding="utf-8")

    def _fetch_url(self, url: str, use_cache: bool = True) -> Any:
        if use_cache:
            cached = self._load_from_cache(url)
            if cached is not None:
                logger.debug(f"Cache hit for {url}")
                return cached

        try:
            body = self.retry_handler.execute(
                self._request,
                args=(url,),
                retryable_exceptions=(ConnectionError, TimeoutError, OSError)
            )
        except (OSError, http.client.HTTPException, UnicodeDecodeError) as e:
            raise ResourceError(f"Request to {url} failed: {e}") from e

        try:
            document = json.loads(body)
        except json.JSONDecodeError as e:
            raise ResourceError(f"Malformed JSON from {url}: {e}") from e

        if use_cache:
            try:
                self._save_to_cache(url, document)
            except OSError as e:
                logger.warning(f"Could not cache {url}: {e}")

        return document

    def _request(self, url: str) -> str:
        """GET a URL and return the decoded body"""
        parts = urlsplit(url)
        if parts.scheme == "https":
            conn = http.client.HTTPSConnection(
                parts.netloc,
                context=ssl.create_default_context(),
                timeout=self.request_timeout_seconds
            )
        elif parts.scheme == "http":
            conn = http.client.HTTPConnection(parts.netloc, timeout=self.request_timeout_seconds)
        else:
            raise ResourceError(f"Unsupported URL scheme: {url}")

        path = parts.path or "/"
        if parts.query:
            path += f"?{parts.query}"

        try:
            conn.request("GET", path, headers={'Accept': 'application/json'})
            response = conn.getresponse()
            body = response.read().decode("utf-8")
        finally:
            conn.close()

        if response.status != 200:
            raise ResourceError(f"HTTP {response.status} from {url}")
        return body


# Singleton fetcher
_fetcher = None

def get_fetcher() -> FileFetcher:
    """Get the shared fetcher instance."""
    global _fetcher
    if _fetcher is None:
        _fetcher = FileFetcher()
    return _fetcher

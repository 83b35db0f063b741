#!/usr/bin/env python3
"""
Generic Word Registry
=====================
Holds the compiled list of known generic names (e.g. "bar", "restaurant")
loaded once, in the background, from the ``nsi_generics`` resource.

Lifecycle:
    UNINITIALIZED -> LOADING -> LOADED | UNAVAILABLE

Lookups never wait for the load. Until the registry reaches a terminal state
it simply knows no generic words, and callers mark their results as
provisional via ``is_ready()``.
"""

import re
import logging
import threading
from concurrent.futures import Future
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from namelint.settings import get_setting

logger = logging.getLogger(__name__)


class RegistryState(Enum):
    """Load state of the generic word registry."""
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    LOADED = "loaded"
    UNAVAILABLE = "unavailable"


TERMINAL_STATES = (RegistryState.LOADED, RegistryState.UNAVAILABLE)


def compile_patterns(words: Iterable[str]) -> List[re.Pattern]:
    """Compile pattern strings into case-insensitive regexes, skipping bad ones."""
    compiled = []
    for pattern in words:
        if not isinstance(pattern, str) or not pattern:
            continue
        try:
            compiled.append(re.compile(pattern, re.IGNORECASE))
        except re.error as e:
            logger.debug(f"Skipping invalid generic word pattern {pattern!r}: {e}")
    return compiled


class GenericWordRegistry:
    """
    Known generic names, loaded asynchronously.

    Usage:
        registry = GenericWordRegistry()
        registry.load()
        registry.is_known_generic("restaurant")   # False until loaded
        registry.wait(5)
        registry.is_known_generic("restaurant")   # True
    """

    def __init__(self, fetcher=None, resource: Optional[str] = None, field: Optional[str] = None):
        """
        Args:
            fetcher: Object with ``get(name) -> Future`` (default: shared FileFetcher)
            resource: Resource name to fetch (default: generics.resource)
            field: Dataset field holding the pattern list (default: generics.field)
        """
        cfg = get_setting("generics", {}) or {}
        if resource is None:
            resource = cfg.get("resource")
        if not resource:
            raise ValueError("generics.resource must be set in app.yaml")
        if field is None:
            field = cfg.get("field")
        if not field:
            raise ValueError("generics.field must be set in app.yaml")

        self.resource = resource
        self.field = field
        self._fetcher = fetcher
        self._state = RegistryState.UNINITIALIZED
        self._patterns: Tuple[re.Pattern, ...] = ()
        self._future: Optional[Future] = None
        self._lock = threading.Lock()
        self._settled = threading.Event()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def patterns(self) -> Tuple[re.Pattern, ...]:
        return self._patterns

    def is_ready(self) -> bool:
        """True once loading has finished, successfully or not."""
        return self._state in TERMINAL_STATES

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self) -> Optional[Future]:
        """
        Start the one-time background fetch of the generic words.

        Safe to call repeatedly: only the first call issues a fetch.
        Returns the pending fetch, or None if the registry was seeded directly.
        """
        with self._lock:
            if self._state is not RegistryState.UNINITIALIZED:
                return self._future
            self._state = RegistryState.LOADING

        if self._fetcher is None:
            from namelint.fetcher import get_fetcher
            self._fetcher = get_fetcher()

        logger.debug(f"Loading generic words from '{self.resource}'")
        try:
            future = self._fetcher.get(self.resource)
        except Exception as e:
            logger.warning(f"Generic words unavailable ({self.resource}): {e}")
            self._settle(RegistryState.UNAVAILABLE, ())
            return None

        self._future = future
        # May run immediately when the future is already done
        future.add_done_callback(self._on_fetched)
        return future

    def load_patterns(self, words: Iterable[str]) -> None:
        """Seed the registry with pattern strings, skipping the fetch."""
        with self._lock:
            if self._state in TERMINAL_STATES:
                return
            self._state = RegistryState.LOADING
        patterns = tuple(compile_patterns(words))
        self._settle(RegistryState.LOADED if patterns else RegistryState.UNAVAILABLE, patterns)

    def _on_fetched(self, future: Future) -> None:
        try:
            data = future.result()
            words = data[self.field]
            if not isinstance(words, list):
                raise TypeError(f"'{self.field}' is not a list")
        except Exception as e:
            logger.warning(f"Generic words unavailable ({self.resource}): {e}")
            self._settle(RegistryState.UNAVAILABLE, ())
            return

        patterns = tuple(compile_patterns(words))
        if not patterns:
            logger.warning(f"Generic words unavailable ({self.resource}): no usable patterns")
            self._settle(RegistryState.UNAVAILABLE, ())
            return

        logger.debug(f"Loaded {len(patterns)} generic word patterns")
        self._settle(RegistryState.LOADED, patterns)

    def _settle(self, state: RegistryState, patterns: Tuple[re.Pattern, ...]) -> None:
        with self._lock:
            if self._state in TERMINAL_STATES:
                return
            self._patterns = patterns
            self._state = state
        self._settled.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until loading has finished. Returns is_ready()."""
        if self._state is RegistryState.UNINITIALIZED:
            return False
        self._settled.wait(timeout)
        return self.is_ready()

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def is_known_generic(self, text: str) -> bool:
        """True if any known generic pattern matches the text."""
        return any(regex.search(text) for regex in self._patterns)

"""Cached source parser adapter.

Decorator pattern: wraps SourceParserPort with content-hash based caching.
"""

from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass, field

from layerguard.domain.model.syntax_tree import SyntaxTree
from layerguard.domain.ports.source_parser import SourceParserPort


@dataclass
class CachedSourceParser(SourceParserPort):
    """Parser with content-hash based caching.

    Uses SHA-256 of the file content for invalidation, so repeated runs
    in one process (watch mode, pytest sessions) only reparse edited
    files. Parse failures are not cached.

    Cache is in-memory only - no persistence between runs.

    Attributes:
        _inner: Wrapped parser implementation
        _cache: Path -> (content_hash, SyntaxTree) mapping
    """

    _inner: SourceParserPort
    _cache: dict[str, tuple[str, SyntaxTree]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self._inner is None:
            raise TypeError("_inner parser must not be None")

    def parse(self, path: str, content: str) -> SyntaxTree:
        """Parse with cache lookup.

        Raises:
            SourceParseError: If the inner parser rejects content
        """
        content_hash = hashlib.sha256(content.encode()).hexdigest()
        with self._lock:
            cached = self._cache.get(path)
        if cached is not None and cached[0] == content_hash:
            return cached[1]

        tree = self._inner.parse(path, content)
        with self._lock:
            self._cache[path] = (content_hash, tree)
        return tree

    def clear(self) -> None:
        """Drop all cached trees."""
        with self._lock:
            self._cache.clear()

    @property
    def cache_size(self) -> int:
        """Number of cached files."""
        return len(self._cache)

#!/usr/bin/env python3
"""
Bounded path resolution cache.

Maps canonical absolute path strings to nodes. Eviction is strictly FIFO by
insertion order; lookups do not refresh an entry. Keys are path strings,
so anything that changes where a node lives must invalidate the old path.
"""

import logging
from collections import OrderedDict
from typing import Iterator, Optional

from .errors import InvalidArgument
from .node import Node

logger = logging.getLogger(__name__)


def ancestor_paths(path: str) -> Iterator[str]:
    """Yield the proper ancestors of a canonical path, nearest first."""
    while path != '/':
        path = path.rsplit('/', 1)[0] or '/'
        yield path


class PathCache:
    """FIFO-bounded mapping of canonical path -> Node."""

    def __init__(self, capacity: int = 1000):
        if capacity < 1:
            raise InvalidArgument("Cache capacity must be at least 1")
        self.capacity = capacity
        self._entries: 'OrderedDict[str, Node]' = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: str) -> bool:
        return path in self._entries

    def keys(self):
        return list(self._entries)

    def get(self, path: str) -> Optional[Node]:
        node = self._entries.get(path)
        if node is None:
            self.misses += 1
        else:
            self.hits += 1
        return node

    def put(self, path: str, node: Node) -> None:
        if path in self._entries:
            self._entries[path] = node
            return
        while len(self._entries) >= self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Path cache full, evicted %s", evicted)
        self._entries[path] = node

    def invalidate(self, path: str) -> int:
        """Drop ``path``, its ancestors and any cached descendants.

        Returns the number of entries removed.
        """
        doomed = [path]
        doomed.extend(ancestor_paths(path))
        prefix = path.rstrip('/') + '/'
        doomed.extend(key for key in self._entries if key.startswith(prefix))

        removed = 0
        for key in doomed:
            if self._entries.pop(key, None) is not None:
                removed += 1
        if removed:
            logger.debug("Invalidated %d cache entries under %s", removed, path)
        return removed

    def clear(self) -> None:
        self._entries.clear()
        self.hits = self.misses = 0

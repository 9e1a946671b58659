#!/usr/bin/env python3
"""
Tree - owner of a single root node.

Provides structural insert/delete, pattern search, traversal, statistics
and whole-tree record import/export on top of Node.
"""

import logging
from collections import deque
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .errors import InvalidArgument, ParentNotFound, PathNotFound
from .node import Node

logger = logging.getLogger(__name__)

ParentSpec = Union[Node, str, Sequence[Node], None]
Visitor = Callable[[Node], Any]


@dataclass
class TreeStats:
    """Shape summary produced by a single traversal."""
    node_count: int = 0
    max_depth: int = 0
    leaf_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class Tree:
    """A tree that is either empty or has exactly one root."""

    def __init__(self, root: Optional[Node] = None):
        if root is not None and root.parent is not None:
            raise InvalidArgument("Tree root cannot have a parent")
        self.root = root

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def clear(self) -> None:
        self.root = None

    def insert(self, name: str, parent: ParentSpec = None,
               properties: Optional[Mapping[str, Any]] = None) -> Node:
        """Create a node named ``name`` and attach it.

        Args:
            name: Name of the new node.
            parent: None to create the root of an empty tree, a Node, a search
                pattern (the first match is used) or a list of candidate nodes
                (the first one is used).
            properties: Keyword arguments forwarded to Node (kind, payload,
                mime, permissions, modified, owner, group, uid).

        Raises:
            ParentNotFound: if no parent candidate resolves.
        """
        if not name:
            raise InvalidArgument("Missing argument: name")
        return self.attach(Node(name, **dict(properties or {})), parent)

    def attach(self, node: Node, parent: ParentSpec = None) -> Node:
        """Attach an existing detached node (and its subtree), see insert()."""
        if parent is None:
            if self.root is not None:
                raise ParentNotFound("Tree already has a root; specify the node's parent")
            if node.parent is not None:
                raise InvalidArgument(f"Node '{node.name}' is already attached")
            self.root = node
            return node

        if isinstance(parent, Node):
            candidates = [parent]
        elif isinstance(parent, str):
            candidates = self.search(parent)
        elif isinstance(parent, (list, tuple)):
            candidates = list(parent)
        else:
            raise InvalidArgument(f"Invalid parent specification: {parent!r}")

        if not candidates:
            raise ParentNotFound(f"Parent node not found: {parent!r}")
        candidates[0].insert(node)
        return node

    def delete(self, target: Union[Node, str]) -> int:
        """Detach every node matching ``target`` and return how many were removed.

        Deleting the root empties the tree.
        """
        if not target:
            raise InvalidArgument("Missing argument: node")

        if isinstance(target, Node):
            targets = [target]
        elif isinstance(target, str):
            targets = self.search(target)
        else:
            raise InvalidArgument(f"Invalid node specification: {target!r}")
        if not targets:
            raise PathNotFound(str(target), f"Target node not found: {target}")

        deleted = 0
        for node in targets:
            if node is self.root:
                self.root = None
                deleted += 1
            elif node.parent is not None and node.parent.remove(node):
                deleted += 1
        logger.debug("Deleted %d node(s) matching %r", deleted, target)
        return deleted

    def search(self, pattern: str) -> List[Node]:
        if not pattern:
            raise InvalidArgument("Missing argument: pattern")
        if self.root is None:
            return []
        return self.root.search(pattern)

    def find_first(self, pattern: str) -> Optional[Node]:
        """First pre-order match for ``pattern`` or None."""
        matches = self.search(pattern)
        return matches[0] if matches else None

    # Traversal

    def traverse_bfs(self, visitor: Visitor) -> None:
        """Visit nodes level by level."""
        if self.root is None:
            return
        queue = deque([self.root])
        while queue:
            node = queue.popleft()
            visitor(node)
            queue.extend(node.children)

    def traverse_dfs(self, visitor: Visitor) -> None:
        """Visit nodes in pre-order, children left to right."""
        if self.root is None:
            return
        stack = [self.root]
        while stack:
            node = stack.pop()
            visitor(node)
            # reversed so the stack pops children in their original order
            stack.extend(reversed(node.children))

    def levels(self) -> List[List[Node]]:
        """Nodes grouped by depth, breadth-first."""
        if self.root is None:
            return []
        levels: List[List[Node]] = []
        queue = deque([(self.root, 0)])
        while queue:
            node, level = queue.popleft()
            if level == len(levels):
                levels.append([])
            levels[level].append(node)
            queue.extend((child, level + 1) for child in node.children)
        return levels

    def stats(self) -> TreeStats:
        stats = TreeStats()
        if self.root is None:
            return stats
        stack = [(self.root, 0)]
        while stack:
            node, depth = stack.pop()
            stats.node_count += 1
            stats.max_depth = max(stats.max_depth, depth)
            if node.is_leaf:
                stats.leaf_count += 1
            stack.extend((child, depth + 1) for child in node.children)
        return stats

    # Serialization

    def to_record(self) -> Optional[Dict[str, Any]]:
        return self.root.to_record() if self.root is not None else None

    @classmethod
    def from_record(cls, record: Optional[Mapping[str, Any]]) -> 'Tree':
        if not record:
            return cls()
        return cls(Node.from_record(record))

    def __str__(self) -> str:
        if self.root is None:
            return "Empty Tree"
        stats = self.stats()
        return f"Tree(root: {self.root.name}, nodes: {stats.node_count}, depth: {stats.max_depth})"

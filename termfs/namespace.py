#!/usr/bin/env python3
"""
Namespace - the path-addressable layer over a Tree.

A Namespace owns one Tree, a current-directory pointer and a bounded
path -> node cache. Every operation a shell needs (cd, ls, cat, mkdir, rmdir,
rm, mv, cp, rename, search) is exposed here in terms of path strings; callers
never touch Node or Tree directly.

Operations run synchronously to completion and validate before mutating, so
a failed call leaves the tree and the cached paths exactly as they were.

The engine holds no locks. Sharing one instance between sessions would need
a readers-writer lock around mutations, cache invalidation ordered with the
write it follows, and a per-session current directory.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .cache import PathCache
from .config import NamespaceConfig
from .errors import (
    CannotModifyRoot, CyclicMove, DuplicateName, InvalidArgument,
    NonEmptyDirectory, NotADirectory, NotAFile, PathNotFound,
)
from .layout import DEFAULT_LAYOUT
from .node import Kind, Node, Payload, check_name, record_children, record_fields, timestamp
from .tree import Tree

logger = logging.getLogger(__name__)

READ, OVERWRITE, APPEND = '', '>', '>>'


@dataclass
class ListOptions:
    """Filters and ordering for Namespace.list()."""
    show_hidden: bool = False
    files_only: bool = False
    dirs_only: bool = False
    sort: bool = False


def split_path(canonical: str) -> Tuple[str, str]:
    """Split a canonical path into (parent path, base name)."""
    parent, _, name = canonical.rpartition('/')
    return parent or '/', name


class Namespace:
    """Virtual hierarchical namespace with Unix-like path semantics."""

    def __init__(self, config: Optional[NamespaceConfig] = None,
                 record: Optional[Mapping[str, Any]] = None):
        self.config = config or NamespaceConfig()
        self.tree = Tree()
        self.cwd: Optional[Node] = None
        self._cache = PathCache(self.config.cache_size)
        if record is not None:
            self.init_structure(record)

    @classmethod
    def with_default_layout(cls, config: Optional[NamespaceConfig] = None) -> 'Namespace':
        """A namespace pre-populated with the starter directory layout."""
        return cls(config, record=DEFAULT_LAYOUT)

    # Node construction

    def _now(self) -> str:
        return timestamp(self.config.date_format)

    def _defaults(self, kind: str) -> Dict[str, Any]:
        """Metadata for a node created by this namespace."""
        cfg = self.config
        is_dir = kind == Kind.DIR.value
        return {
            'kind': kind,
            'mime': cfg.dir_mime if is_dir else cfg.default_mime,
            'permissions': cfg.dir_permissions if is_dir else cfg.file_permissions,
            'modified': self._now(),
            'owner': cfg.user,
            'group': cfg.owner_group,
        }

    def _new_node(self, name: str, kind: str, **overrides) -> Node:
        properties = self._defaults(kind)
        properties.update(overrides)
        return Node(name, **properties)

    def _materialize(self, record: Mapping[str, Any]) -> Node:
        """Build a detached subtree from a record, filling namespace defaults."""
        fields = record_fields(record)
        name = fields.pop('name')
        node = self._new_node(name, **fields)
        for child_record in record_children(record):
            node.insert(self._materialize(child_record))
        return node

    def init_structure(self, record: Mapping[str, Any], parent: Optional[Node] = None) -> Node:
        """Materialize a declarative record tree into live nodes.

        Args:
            record: Node record (name, kind, permissions, modified, mime,
                payload, children...). Unknown fields are dropped.
            parent: Node to attach under. None creates the tree root, which
                also becomes the current directory.

        Returns:
            The node created for ``record``.
        """
        node = self._materialize(record)
        self.tree.attach(node, parent)
        if parent is None and self.cwd is None:
            self.cwd = node
        if parent is not None:
            self._cache.invalidate(node.absolute_path())
        logger.debug("Materialized %d node(s) at %s", node.subtree_size(), node.absolute_path())
        return node

    # Path resolution

    def current_path(self) -> str:
        """Absolute path of the current directory."""
        return self.cwd.absolute_path() if self.cwd is not None else '/'

    def normalize(self, path: Optional[str]) -> str:
        """Canonical absolute form of ``path`` with ``.`` and ``..`` resolved."""
        if not path or path == '.':
            return self.current_path()
        if path == '/':
            return '/'

        base = '/' if path.startswith('/') else self.current_path()
        resolved = [segment for segment in base.split('/') if segment]
        for segment in path.split('/'):
            if not segment or segment == '.':
                continue
            if segment == '..':
                if resolved:
                    resolved.pop()
            else:
                resolved.append(segment)
        return '/' + '/'.join(resolved)

    def resolve(self, path: Optional[str]) -> Node:
        """Resolve a path to its node, using the cache when possible.

        Raises:
            PathNotFound: with the partial path up to the first missing segment.
        """
        canonical = self.normalize(path)
        node = self._lookup(canonical)
        self._remember(canonical, node)
        return node

    def _lookup(self, canonical: str) -> Node:
        """Find the node at a canonical path without adding to the cache.

        Mutating operations look their operands up this way so that a call
        failing validation leaves the cache untouched.
        """
        root = self.tree.root
        if root is None:
            raise PathNotFound(canonical)
        if canonical == '/':
            return root

        node = self._cache.get(canonical)
        if node is not None:
            return node

        node = root
        segments = canonical.split('/')[1:]
        for i, segment in enumerate(segments):
            child = node.find_by_name(segment)
            if child is None:
                raise PathNotFound('/' + '/'.join(segments[:i + 1]))
            node = child
        return node

    def _remember(self, canonical: str, node: Node) -> None:
        if canonical != '/' and canonical not in self._cache:
            self._cache.put(canonical, node)

    def exists(self, path: str) -> bool:
        try:
            self.resolve(path)
        except PathNotFound:
            return False
        return True

    def _invalidate(self, *paths: str) -> None:
        for path in paths:
            self._cache.invalidate(path)

    def clear_cache(self) -> None:
        self._cache.clear()

    # Navigation and listing

    def change_directory(self, path: str) -> Node:
        """Make ``path`` the current directory."""
        if not path:
            raise InvalidArgument("Missing argument: path")
        canonical = self.normalize(path)
        node = self._lookup(canonical)
        if not node.is_dir:
            raise NotADirectory(f"Not a directory: {path}")
        self._remember(canonical, node)
        self.cwd = node
        return node

    def list(self, path: Optional[str] = None,
             options: Optional[ListOptions] = None, **kwargs) -> List[Node]:
        """List the children of a directory.

        Args:
            path: Directory to list (defaults to the current directory).
            options: ListOptions. Keyword arguments build one instead; giving
                both is an error.

        Returns:
            Child nodes, in insertion order unless ``sort`` is set.
        """
        if options is None:
            try:
                options = ListOptions(**kwargs)
            except TypeError as e:
                raise InvalidArgument(f"Invalid list option: {e}") from e
        elif kwargs:
            raise InvalidArgument("Pass either options or keyword arguments, not both")

        if path:
            canonical = self.normalize(path)
            node = self._lookup(canonical)
        else:
            canonical, node = None, self.cwd
        if node is None:
            raise PathNotFound('/')
        if not node.is_dir:
            raise NotADirectory(f"Not a directory: {path or 'current directory'}")
        if canonical is not None:
            self._remember(canonical, node)

        children = list(node.children)
        if not options.show_hidden:
            prefix = self.config.hidden_prefix
            children = [child for child in children if not child.name.startswith(prefix)]
        if options.files_only:
            children = [child for child in children if child.is_file]
        if options.dirs_only:
            children = [child for child in children if child.is_dir]
        if options.sort:
            children.sort(key=lambda child: child.name)
        return children

    def ls(self, path: Optional[str] = None, **kwargs) -> List[str]:
        """Names of the entries list() would return."""
        return [child.name for child in self.list(path, **kwargs)]

    # File contents

    def cat(self, mode: str, path: str, content: Optional[Payload] = None) -> Optional[Payload]:
        """Read (mode ``''``), overwrite (``'>'``) or append (``'>>'``) a file.

        Writing creates the file if it does not exist. Returns the payload
        when reading, None when writing.
        """
        if not path:
            raise InvalidArgument("Missing argument: path")
        if mode == READ:
            canonical = self.normalize(path)
            node = self._lookup(canonical)
            if not node.is_file:
                raise NotAFile(f"Not a file: {path}")
            self._remember(canonical, node)
            return node.payload if node.payload is not None else ''
        if mode not in (OVERWRITE, APPEND):
            raise InvalidArgument(f"Invalid cat mode: {mode!r}")
        self._write(path, '' if content is None else content, append=(mode == APPEND))
        return None

    def read_file(self, path: str) -> Payload:
        return self.cat(READ, path)

    def write_file(self, path: str, content: Payload, append: bool = False) -> Node:
        """Write ``content`` to ``path`` and return the file node."""
        if not path:
            raise InvalidArgument("Missing argument: path")
        return self._write(path, content, append)

    def _write(self, path: str, content: Payload, append: bool) -> Node:
        canonical = self.normalize(path)
        if canonical == '/':
            raise NotAFile(f"Not a file: {path}")
        parent_path, name = split_path(canonical)
        parent = self._lookup(parent_path)
        if not parent.is_dir:
            raise NotADirectory(f"Not a directory: {parent_path}")

        node = parent.find_by_name(name)
        if node is None:
            node = self._new_node(name, Kind.FILE.value, payload='')
            node.write(content, modified=self._now())
            parent.insert(node)
            logger.debug("Created file %s (%d bytes)", canonical, node.size)
        elif not node.is_file:
            raise NotAFile(f"Not a file: {path}")
        else:
            node.write(content, append=append, modified=self._now())
            logger.debug("%s %s (%d bytes)", "Appended to" if append else "Wrote", canonical, node.size)

        self._invalidate(canonical)
        return node

    def touch(self, path: str) -> Node:
        """Create an empty file, or refresh the modification time of an existing node."""
        if not path:
            raise InvalidArgument("Missing argument: path")
        try:
            node = self.resolve(path)
        except PathNotFound:
            return self._write(path, '', append=True)
        node.touch(self._now())
        return node

    # Structural mutation

    def mkdir(self, path: str) -> Node:
        """Create ``path`` and any missing parent directories.

        Raises:
            NotADirectory: if an existing non-directory occupies a segment.
        """
        if not path:
            raise InvalidArgument("Missing argument: path")
        if self.tree.root is None:
            raise PathNotFound('/')
        canonical = self.normalize(path)

        current = self.tree.root
        created = 0
        for segment in [s for s in canonical.split('/') if s]:
            existing = current.find_by_name(segment)
            if existing is None:
                new_dir = self._new_node(segment, Kind.DIR.value)
                current.insert(new_dir)
                current = new_dir
                created += 1
            elif existing.is_dir:
                current = existing
            else:
                raise NotADirectory(f"Cannot create directory '{segment}': File exists")

        if created:
            logger.debug("mkdir %s (%d new)", canonical, created)
            self._invalidate(canonical)
        return current

    make_directory = mkdir

    def rmdir(self, path: str) -> None:
        """Remove an empty directory.

        If the current directory was inside it, the current directory moves to
        the removed directory's former parent.
        """
        if not path:
            raise InvalidArgument("Missing argument: path")
        node = self._lookup(self.normalize(path))
        if node is self.tree.root:
            raise CannotModifyRoot("Cannot delete the root directory")
        if not node.is_dir:
            raise NotADirectory(f"Not a directory: {node.name}")
        if node.children:
            raise NonEmptyDirectory(f"Directory not empty: {node.name}")

        old_path = node.absolute_path()
        former_parent = node.parent
        cwd_inside = self.cwd is node or (self.cwd is not None and node.is_ancestor_of(self.cwd))
        self.tree.delete(node)
        if cwd_inside:
            self.cwd = former_parent or self.tree.root
        self._invalidate(old_path)
        logger.debug("rmdir %s", old_path)

    remove_directory = rmdir

    def rm(self, path: str) -> None:
        """Remove a file. Directories are rejected."""
        if not path:
            raise InvalidArgument("Missing argument: path")
        node = self._lookup(self.normalize(path))
        if not node.is_file:
            raise NotAFile(f"Not a file: {node.name}")
        old_path = node.absolute_path()
        self.tree.delete(node)
        self._invalidate(old_path)
        logger.debug("rm %s", old_path)

    remove_file = rm

    def rename(self, path: str, new_name: str) -> Node:
        """Rename a node in place, keeping its identity and children."""
        if not path:
            raise InvalidArgument("Missing argument: oldPath")
        if not new_name:
            raise InvalidArgument("Missing argument: newName")
        check_name(new_name, root=False)

        node = self._lookup(self.normalize(path))
        if node is self.tree.root:
            raise CannotModifyRoot("Cannot rename the root directory")
        old_path = node.absolute_path()
        node.rename(new_name)
        # Keys are path strings: the old path must go, not just the new one.
        self._invalidate(old_path, node.absolute_path())
        logger.debug("rename %s -> %s", old_path, new_name)
        return node

    def copy(self, source: str, destination: str) -> Node:
        """Deep-copy ``source`` into the directory ``destination``.

        Every copied node gets a fresh identity; modification time and
        ownership are refreshed across the whole copy.
        """
        if not source:
            raise InvalidArgument("Missing argument: source")
        if not destination:
            raise InvalidArgument("Missing argument: destination")

        source_node = self._lookup(self.normalize(source))
        dest_node = self._lookup(self.normalize(destination))
        if not dest_node.is_dir:
            raise NotADirectory("Destination must be a directory")
        if source_node is self.tree.root:
            raise CannotModifyRoot("Cannot copy the root directory")
        if dest_node.has_name(source_node.name):
            raise DuplicateName(source_node.name)

        copy = source_node.clone(deep=True)
        stamp = self._now()
        for node in copy.walk():
            node.modified = stamp
            node.owner = self.config.user
            node.group = self.config.owner_group
        dest_node.insert(copy)

        self._invalidate(copy.absolute_path())
        logger.debug("copy %s -> %s (%d nodes)", source_node.absolute_path(),
                     copy.absolute_path(), copy.subtree_size())
        return copy

    def move(self, source: str, destination: str) -> Node:
        """Move ``source`` (same node, same identity) into directory ``destination``.

        Raises:
            CyclicMove: if ``destination`` is ``source`` or lies beneath it.
        """
        if not source:
            raise InvalidArgument("Missing argument: source")
        if not destination:
            raise InvalidArgument("Missing argument: destination")

        source_node = self._lookup(self.normalize(source))
        dest_node = self._lookup(self.normalize(destination))
        if not dest_node.is_dir:
            raise NotADirectory("Destination must be a directory")
        if source_node is dest_node or source_node.is_ancestor_of(dest_node):
            raise CyclicMove("Cannot move directory into itself")
        if dest_node.has_name(source_node.name):
            raise DuplicateName(source_node.name)

        old_path = source_node.absolute_path()
        source_node.parent.remove(source_node)
        dest_node.insert(source_node)

        self._invalidate(old_path, source_node.absolute_path())
        logger.debug("move %s -> %s", old_path, source_node.absolute_path())
        return source_node

    # Queries

    def search(self, pattern: str) -> List[Node]:
        """All nodes whose names match ``pattern``, in pre-order."""
        if not pattern:
            raise InvalidArgument("Missing argument: query")
        return self.tree.search(pattern)

    def find(self, pattern: str, path: Optional[str] = None) -> List[Node]:
        """Pattern search restricted to the subtree at ``path``."""
        if not pattern:
            raise InvalidArgument("Missing argument: query")
        start = self.resolve(path) if path else self.cwd
        if start is None:
            return []
        return start.search(pattern)

    def stat(self, path: str) -> Dict[str, Any]:
        node = self.resolve(path)
        return {
            'uid': node.uid,
            'name': node.name,
            'kind': node.kind,
            'size': node.size,
            'mime': node.mime,
            'permissions': node.permissions,
            'modified': node.modified,
            'owner': node.owner,
            'group': node.group,
            'children': len(node.children),
            'path': node.absolute_path(),
        }

    def stats(self) -> Dict[str, int]:
        """Tree shape plus file/directory totals and the current cache size."""
        stats = self.tree.stats().to_dict()
        total_size = file_count = dir_count = 0
        if self.tree.root is not None:
            for node in self.tree.root.walk():
                if node.is_dir:
                    dir_count += 1
                else:
                    file_count += 1
                    total_size += node.size
        stats.update(total_size=total_size, file_count=file_count,
                     dir_count=dir_count, cache_size=len(self._cache))
        return stats

    # Serialization

    def to_record(self) -> Optional[Dict[str, Any]]:
        return self.tree.to_record()

    def from_record(self, record: Optional[Mapping[str, Any]]) -> None:
        """Replace the whole tree with one built from ``record``."""
        tree = Tree()
        if record:
            tree.attach(self._materialize(record))
        self.tree = tree
        self.cwd = tree.root
        self.clear_cache()
        logger.debug("Imported tree: %s", tree)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_record(), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> None:
        try:
            record = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidArgument(f"Invalid JSON: {e}") from e
        self.from_record(record)

    def __repr__(self) -> str:
        return f"Namespace(cwd={self.current_path()!r}, tree={self.tree})"

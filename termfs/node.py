#!/usr/bin/env python3
"""
Namespace nodes.

A Node is one entry in the namespace: a directory owning an ordered set of
uniquely named children, or a leaf (file, executable, config, ...) carrying
an opaque text or byte payload.

Ownership runs downward. A node owns its children; the parent back-reference
is only used for upward walks (paths, depth, ancestor checks). Detaching a
node clears that reference but leaves the node's own children in place, so
a detached subtree stays coherent and can be spliced elsewhere.
"""

import base64
import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import CyclicMove, DuplicateName, InvalidArgument, NotADirectory, NotAFile
from .pattern import compile_pattern

logger = logging.getLogger(__name__)

Payload = Union[str, bytes]

DEFAULT_DATE_FORMAT = "%d.%m.%Y %H:%M"
DIR_PERMISSIONS = "rwxr-xr-x"
FILE_PERMISSIONS = "rw-r--r--"
DIR_MIME = "inode/directory"
FILE_MIME = "text/plain"
ROOT_NAME = "/"

# Keys understood in a node record; anything else is dropped on import.
RECORD_FIELDS = (
    'name', 'kind', 'permissions', 'modified', 'owner', 'group',
    'mime', 'payload', 'encoding', 'children',
)


class Kind(str, Enum):
    """Well-known node kinds. Any other string is accepted as a leaf kind."""
    DIR = "dir"
    FILE = "file"
    EXEC = "exec"
    CONFIG = "config"


def check_name(name: Any, root: bool = True) -> str:
    """Validate a node name so that some path can always reach the node.

    Names may not contain a slash or be ``.`` or ``..``. The bare ``/`` is
    only allowed when ``root`` is true.
    """
    if not name or not isinstance(name, str):
        raise InvalidArgument("Missing argument: name")
    if name == ROOT_NAME and root:
        return name
    if "/" in name or name in (".", ".."):
        raise InvalidArgument(f"Invalid name: {name!r}")
    return name


def new_uid() -> str:
    """Generate an opaque unique node identity."""
    return str(uuid.uuid4()).upper()


def kind_value(kind: Any) -> str:
    """Normalize a Kind member or arbitrary string to its plain string value."""
    if isinstance(kind, Kind):
        return kind.value
    return str(kind) if kind else Kind.FILE.value


def timestamp(date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Current local time in the namespace display format."""
    return datetime.now().strftime(date_format)


def payload_size(payload: Optional[Payload]) -> int:
    """Byte length of a payload (text is measured as UTF-8)."""
    if payload is None:
        return 0
    if isinstance(payload, str):
        return len(payload.encode('utf-8'))
    return len(payload)


def join_payload(current: Optional[Payload], extra: Payload) -> Payload:
    """Append ``extra`` to ``current``, promoting to bytes if either is bytes."""
    if current is None:
        return extra
    if isinstance(current, str) and isinstance(extra, str):
        return current + extra
    if isinstance(current, str):
        current = current.encode('utf-8')
    if isinstance(extra, str):
        extra = extra.encode('utf-8')
    return current + extra


class Node:
    """A single namespace entry."""

    def __init__(self, name: str, kind: str = Kind.FILE.value,
                 payload: Optional[Payload] = None, mime: Optional[str] = None,
                 permissions: Optional[str] = None, modified: Optional[str] = None,
                 owner: Optional[str] = None, group: Optional[str] = None,
                 uid: Optional[str] = None):
        check_name(name)
        if not isinstance(payload, (str, bytes, type(None))):
            raise InvalidArgument(f"Payload must be str or bytes, not {type(payload).__name__}")

        kind = kind_value(kind)
        is_dir = kind == Kind.DIR.value

        self.uid = uid or new_uid()
        self._name = name
        self._kind = kind
        self._payload: Optional[Payload] = None if is_dir else (payload if payload is not None else "")
        self.mime = mime or (DIR_MIME if is_dir else FILE_MIME)
        self.permissions = permissions or (DIR_PERMISSIONS if is_dir else FILE_PERMISSIONS)
        self.modified = modified or timestamp()
        self.owner = owner
        self.group = group

        self._parent: Optional['Node'] = None
        self._children: List['Node'] = []
        self._index: Dict[str, 'Node'] = {}

    # Identity and metadata

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def payload(self) -> Optional[Payload]:
        return self._payload

    @property
    def size(self) -> int:
        return payload_size(self._payload)

    @property
    def parent(self) -> Optional['Node']:
        return self._parent

    @property
    def children(self) -> Tuple['Node', ...]:
        """Children in insertion order (read-only view)."""
        return tuple(self._children)

    @property
    def is_dir(self) -> bool:
        return self._kind == Kind.DIR.value

    @property
    def is_file(self) -> bool:
        """True for every non-directory kind."""
        return not self.is_dir

    @property
    def is_leaf(self) -> bool:
        return not self._children

    def rename(self, new_name: str) -> None:
        """Change the name in place, keeping the parent's name index in sync."""
        check_name(new_name, root=self.parent is None)
        if new_name == self._name:
            return
        parent = self.parent
        if parent is not None:
            if new_name in parent._index:
                raise DuplicateName(new_name)
            del parent._index[self._name]
            parent._index[new_name] = self
        self._name = new_name

    def write(self, content: Payload, append: bool = False,
              modified: Optional[str] = None) -> None:
        """Replace or extend the payload and refresh the modification time."""
        if self.is_dir:
            raise NotAFile(f"Cannot write to directory: {self._name}")
        if not isinstance(content, (str, bytes)):
            raise InvalidArgument(f"Content must be str or bytes, not {type(content).__name__}")
        self._payload = join_payload(self._payload, content) if append else content
        self.touch(modified)

    def touch(self, modified: Optional[str] = None) -> None:
        self.modified = modified or timestamp()

    # Structure

    def insert(self, child: 'Node') -> None:
        """Append a child and index it by name."""
        if not isinstance(child, Node):
            raise InvalidArgument("Child must be a Node instance")
        if not self.is_dir:
            raise NotADirectory(f"Not a directory: {self._name}")
        if child.parent is not None:
            raise InvalidArgument(f"Node '{child.name}' is already attached")
        if child is self or child.is_ancestor_of(self):
            raise CyclicMove(f"Cannot insert '{child.name}' into itself")
        if child.name == ROOT_NAME:
            raise InvalidArgument(f"Invalid name: {child.name!r}")
        if child.name in self._index:
            raise DuplicateName(child.name)

        self._children.append(child)
        self._index[child.name] = child
        child._parent = self

    def remove(self, child: 'Node') -> bool:
        """Detach a child by identity. Returns False if it is not ours."""
        if not isinstance(child, Node) or self._index.get(child.name) is not child:
            return False
        self._children.remove(child)
        del self._index[child.name]
        child._parent = None
        return True

    def find_by_name(self, name: str) -> Optional['Node']:
        return self._index.get(name)

    def has_name(self, name: str) -> bool:
        return name in self._index

    def child_names(self) -> List[str]:
        return [child.name for child in self._children]

    def find(self, pattern: str) -> List['Node']:
        """Direct children whose names match ``pattern``."""
        matcher = compile_pattern(pattern)
        if matcher.literal:
            child = self._index.get(pattern)
            return [child] if child is not None else []
        return [child for child in self._children if matcher(child.name)]

    def search(self, pattern: str) -> List['Node']:
        """All nodes of this subtree matching ``pattern``, in pre-order."""
        matcher = compile_pattern(pattern)
        return [node for node in self.walk() if matcher(node.name)]

    def walk(self) -> Iterator['Node']:
        """Pre-order iteration over this subtree, children left to right."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def descendants(self) -> List['Node']:
        it = self.walk()
        next(it)
        return list(it)

    def subtree_size(self) -> int:
        return sum(1 for _ in self.walk())

    # Ancestry and paths

    def ancestors(self) -> Iterator['Node']:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def is_ancestor_of(self, other: 'Node') -> bool:
        return any(ancestor is self for ancestor in other.ancestors())

    def is_descendant_of(self, other: 'Node') -> bool:
        return other.is_ancestor_of(self)

    def depth(self) -> int:
        return sum(1 for _ in self.ancestors())

    def path_segments(self) -> List[str]:
        """Names from the root down to this node, root included."""
        segments = [self._name]
        segments.extend(ancestor.name for ancestor in self.ancestors())
        segments.reverse()
        return segments

    def absolute_path(self, separator: str = '/') -> str:
        """Absolute path of this node; the root itself is ``separator``."""
        return separator + separator.join(self.path_segments()[1:])

    # Copying and serialization

    def clone(self, deep: bool = True) -> 'Node':
        """Copy this node with a fresh identity; ``deep`` copies the subtree."""
        copy = Node(self._name, self._kind, payload=self._payload, mime=self.mime,
                    permissions=self.permissions, modified=self.modified,
                    owner=self.owner, group=self.group)
        if deep:
            for child in self._children:
                copy.insert(child.clone(deep=True))
        return copy

    def to_record(self) -> Dict[str, Any]:
        """Declarative record of this subtree."""
        record: Dict[str, Any] = {
            'name': self._name,
            'kind': self._kind,
            'permissions': self.permissions,
            'modified': self.modified,
        }
        if self.owner is not None:
            record['owner'] = self.owner
        if self.group is not None:
            record['group'] = self.group
        if self.is_dir:
            record['children'] = [child.to_record() for child in self._children]
        else:
            record['mime'] = self.mime
            if isinstance(self._payload, bytes):
                record['payload'] = base64.b64encode(self._payload).decode('ascii')
                record['encoding'] = 'base64'
            else:
                record['payload'] = self._payload
        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'Node':
        """Rebuild a subtree from a record, inserting children in document order."""
        node = cls(**record_fields(record))
        for child_record in record_children(record):
            node.insert(cls.from_record(child_record))
        return node

    def __repr__(self) -> str:
        return f"Node(name={self._name!r}, kind={self._kind!r}, children={len(self._children)})"


def record_fields(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Extract validated Node keyword arguments from a record.

    Unrecognized keys are dropped. Metadata left unset here is filled with
    defaults by the caller (or by Node itself).
    """
    if not isinstance(record, Mapping):
        raise InvalidArgument(f"Record must be a mapping, not {type(record).__name__}")
    name = record.get('name')
    if not name or not isinstance(name, str):
        raise InvalidArgument("Invalid record: missing name")
    check_name(name)

    kind = kind_value(record.get('kind'))
    fields: Dict[str, Any] = {'name': name, 'kind': kind}
    for key in ('permissions', 'modified', 'owner', 'group'):
        if record.get(key) is not None:
            fields[key] = str(record[key])

    if fields['kind'] != Kind.DIR.value:
        if record.get('mime') is not None:
            fields['mime'] = str(record['mime'])
        payload = record.get('payload')
        if payload is not None:
            if record.get('encoding') == 'base64':
                payload = base64.b64decode(payload)
            elif not isinstance(payload, (str, bytes)):
                raise InvalidArgument(f"Invalid payload for '{name}'")
            fields['payload'] = payload

    dropped = set(record) - set(RECORD_FIELDS)
    if dropped:
        logger.debug("Dropping unknown record fields for %s: %s", name, sorted(dropped))
    return fields


def record_children(record: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    """Child records of a directory record; leaves never have children."""
    if kind_value(record.get('kind')) != Kind.DIR.value:
        return []
    children = record.get('children') or []
    if not isinstance(children, list):
        raise InvalidArgument(f"Invalid children for '{record.get('name')}'")
    return children

"""
termfs - An in-memory hierarchical namespace for terminal-style shells.

This package provides a tree of named file and directory nodes with
Unix-like path resolution, creation, mutation, copy/move and JSON
serialization, fronted by a cached path-addressable Namespace.
"""

__version__ = "0.1.0"

from .errors import (
    NamespaceError,
    PathNotFound,
    NotADirectory,
    NotAFile,
    DuplicateName,
    NonEmptyDirectory,
    CannotModifyRoot,
    CyclicMove,
    ParentNotFound,
    InvalidArgument,
)

from .node import (
    Node,
    Kind,
)

from .tree import (
    Tree,
    TreeStats,
)

from .cache import PathCache

from .config import NamespaceConfig

from .namespace import (
    Namespace,
    ListOptions,
)

from .layout import (
    DEFAULT_LAYOUT,
    format_tree,
)

__all__ = [
    # Errors
    "NamespaceError",
    "PathNotFound",
    "NotADirectory",
    "NotAFile",
    "DuplicateName",
    "NonEmptyDirectory",
    "CannotModifyRoot",
    "CyclicMove",
    "ParentNotFound",
    "InvalidArgument",

    # Core structure
    "Node",
    "Kind",
    "Tree",
    "TreeStats",
    "PathCache",

    # Path layer
    "Namespace",
    "NamespaceConfig",
    "ListOptions",

    # Layout
    "DEFAULT_LAYOUT",
    "format_tree",

    # Version info
    "__version__",
]

#!/usr/bin/env python3
"""
Exception types raised by the termfs namespace engine.

Each error derives from NamespaceError and from the closest builtin, so
code written against os/pathlib error handling (FileNotFoundError,
IsADirectoryError, ...) keeps working.
"""

from typing import Optional


class NamespaceError(Exception):
    """Base class for every namespace failure."""


class PathNotFound(NamespaceError, FileNotFoundError):
    """A path segment does not exist.

    ``path`` holds the partial path up to and including the missing segment.
    """

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"Path not found: {path}")


class NotADirectory(NamespaceError, NotADirectoryError):
    """A directory was required but something else was found."""


class NotAFile(NamespaceError, IsADirectoryError):
    """A file was required but a directory was found."""


class DuplicateName(NamespaceError, FileExistsError):
    """A sibling with the same name already exists."""

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        super().__init__(message or f"Name already exists: {name}")


class NonEmptyDirectory(NamespaceError, OSError):
    """Directory still has children."""


class CannotModifyRoot(NamespaceError, PermissionError):
    """The root directory cannot be removed, renamed or copied."""


class CyclicMove(NamespaceError, ValueError):
    """A node cannot be moved into itself or one of its descendants."""


class ParentNotFound(NamespaceError, LookupError):
    """No parent candidate resolved during a tree insert."""


class InvalidArgument(NamespaceError, ValueError):
    """A required argument was missing or malformed."""

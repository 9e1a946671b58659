#!/usr/bin/env python3
"""Configuration for a namespace instance."""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from .errors import InvalidArgument
from .node import DEFAULT_DATE_FORMAT, DIR_MIME, DIR_PERMISSIONS, FILE_MIME, FILE_PERMISSIONS


@dataclass
class NamespaceConfig:
    """Defaults applied to nodes created through a Namespace."""
    user: str = 'root'
    group: Optional[str] = None  # falls back to user
    cache_size: int = 1000
    date_format: str = DEFAULT_DATE_FORMAT
    dir_permissions: str = DIR_PERMISSIONS
    file_permissions: str = FILE_PERMISSIONS
    default_mime: str = FILE_MIME
    dir_mime: str = DIR_MIME
    hidden_prefix: str = '.'

    def __post_init__(self):
        if not isinstance(self.cache_size, int) or self.cache_size < 1:
            raise InvalidArgument(f"cache_size must be a positive integer, got {self.cache_size!r}")
        if not self.user:
            raise InvalidArgument("user must not be empty")

    @property
    def owner_group(self) -> str:
        return self.group or self.user

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'NamespaceConfig':
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

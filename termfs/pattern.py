#!/usr/bin/env python3
"""
Mini-glob pattern compiler used by node search.

Pattern rules:
- A pattern containing neither ``*`` nor ``.`` is literal and is compared
  by plain string equality.
- Otherwise ``*`` matches zero or more arbitrary characters. Every other
  character, ``.`` included, matches only itself.

The ``.`` rule is kept as observed in the shell this engine was built for:
a dot routes the pattern through the wildcard matcher but still matches a
literal dot, so ``a.txt`` behaves exactly like a literal pattern.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


WILDCARD_TRIGGERS = ('*', '.')


def is_literal(pattern: str) -> bool:
    """Check whether a pattern takes the exact-match fast path."""
    return not any(ch in pattern for ch in WILDCARD_TRIGGERS)


@dataclass(frozen=True)
class Matcher:
    """A compiled pattern."""
    pattern: str
    regex: Optional[re.Pattern] = None

    @property
    def literal(self) -> bool:
        return self.regex is None

    def __call__(self, name: str) -> bool:
        if self.regex is None:
            return name == self.pattern
        return self.regex.fullmatch(name) is not None


def _translate(pattern: str) -> str:
    parts = []
    for ch in pattern:
        if ch == '*':
            parts.append('.*')
        else:
            parts.append(re.escape(ch))
    return ''.join(parts)


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> Matcher:
    """Compile a search pattern into a Matcher."""
    if is_literal(pattern):
        return Matcher(pattern)
    return Matcher(pattern, re.compile(_translate(pattern), re.DOTALL))

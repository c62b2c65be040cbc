"""Variable table builder.

Collects every ``name = { ... }`` block of a document into a read-only
mapping of raw, unexpanded bodies.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

_ASSIGNMENT_RE = re.compile(r"(\w+)\s*=\s*\{")


def find_closing_brace(text: str, start: int) -> int | None:
    """Return the index of the brace closing the block opened just before *start*.

    Depth starts at 1. Returns ``None`` when the braces never balance.
    """
    depth = 1
    for pos in range(start, len(text)):
        ch = text[pos]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return pos
    return None


def extract_variables(source: str) -> Mapping[str, str]:
    """Build the variable table of *source*.

    Bodies are trimmed and kept verbatim, inner braces included. A block whose
    braces never balance is dropped. When a name is defined twice the later
    definition wins.

    Examples
    --------
    >>> dict(extract_variables("foo = { c { d } e }"))
    {'foo': 'c { d } e'}
    """
    variables: dict[str, str] = {}
    for m in _ASSIGNMENT_RE.finditer(source):
        end = find_closing_brace(source, m.end())
        if end is None:
            continue
        variables[m.group(1)] = source[m.end():end].strip()
    return MappingProxyType(variables)

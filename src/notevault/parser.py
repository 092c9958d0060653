"""Reference-marker parser.

Notes point at each other with ``[[<id>]]`` markers, where ``<id>`` is the
target note's identifier: hex digits and hyphens only, which covers the
UUID4 strings the store hands out.
"""

from __future__ import annotations

import re

# [[3f2c9a1e-...]]; anything else between double brackets is plain text
_REFERENCE_RE = re.compile(r"\[\[([a-fA-F0-9-]+)\]\]")


def parse_references(content: str | None) -> list[str]:
    """Return all ``[[id]]`` targets found in *content* (de-duped, ordered).

    Existence of the targets is not checked; dangling ids pass through.
    """
    if not content:
        return []
    seen: set[str] = set()
    result: list[str] = []
    for m in _REFERENCE_RE.finditer(content):
        target = m.group(1)
        if target not in seen:
            seen.add(target)
            result.append(target)
    return result

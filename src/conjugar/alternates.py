"""Split a dataset answer field into its acceptable variants.

The verb dataset sometimes lists several correct forms in one cell, e.g.
``"hablo / hablás"`` or ``"fuera o fuese"``.
"""

from __future__ import annotations

import re
from typing import List

# Separators: ; / , and the connectors "o", "u", "or", "ou" between spaces.
_SEPARATOR_RE = re.compile(r"\s*(?:;|/|,|\so\s|\su\s|\sor\s|\sou\s)\s*", re.IGNORECASE)


def split_alternates(answer: str) -> List[str]:
    """Return the distinct variants in ``answer``, in first-occurrence order.

    Parenthetical notes are kept as part of their token.
    """
    if not answer or not answer.strip():
        return []
    seen = set()
    variants: List[str] = []
    for token in _SEPARATOR_RE.split(answer):
        token = token.strip()
        if token and token not in seen:
            seen.add(token)
            variants.append(token)
    return variants

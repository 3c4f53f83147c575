"""Unicode normalization for answer comparison.

Policy:
- Apply NFC early in both modes, so a learner typing e + combining acute
  matches a precomposed é even when accents count. NFC never drops a mark.
- For matching: lowercase and trim; optionally strip accents (combining marks)
  and collapse whitespace.
"""

from __future__ import annotations

import re
import unicodedata as ud

_WS_RE = re.compile(r"\s+")


def normalize_text_nfc(text: str) -> str:
    """Apply Unicode NFC to input text (safe for None-like inputs)."""
    if text is None:
        return ""
    return ud.normalize("NFC", str(text))


def strip_accents(text: str) -> str:
    """Remove combining marks by NFD decomposition then recompose without marks."""
    decomposed = ud.normalize("NFD", normalize_text_nfc(text))
    stripped = "".join(ch for ch in decomposed if ud.category(ch) != "Mn")
    return ud.normalize("NFC", stripped)


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text or "")


def normalize_answer(text: str, ignore_accents: bool = True) -> str:
    """Normalize an answer (learner's or reference) for exact comparison.

    Steps: NFC -> lowercase -> trim. With ``ignore_accents`` also strip accents
    and collapse whitespace runs (trimming again, since a removed mark can
    leave a trailing space behind).
    """
    if not text:
        return ""
    t = normalize_text_nfc(text).lower().strip()
    if ignore_accents:
        t = strip_accents(t)
        t = collapse_whitespace(t).strip()
    return t

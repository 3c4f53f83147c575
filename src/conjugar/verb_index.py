"""Verb index builder: infinitive -> mood -> tense -> conjugation record.

Built once per dataset load in a single forward pass, followed by a derivation
pass that sorts moods and tenses. The result is treated as read-only.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .ingest import ConjugationRecord

# Conventional mood order for display; any other moods follow alphabetically.
DISPLAY_MOOD_ORDER = ("Indicativo", "Subjuntivo", "Imperativo Afirmativo", "Imperativo Negativo")


@dataclass
class VerbIndexEntry:
    verb_english: str
    verb_by_mood_and_tense: Dict[str, Dict[str, ConjugationRecord]] = field(default_factory=dict)
    moods: List[str] = field(default_factory=list)
    tenses_by_mood: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class VerbIndex:
    entries: Dict[str, VerbIndexEntry] = field(default_factory=dict)
    verbs: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, verb: object) -> bool:
        return verb in self.entries

    def get(self, verb: str) -> Optional[VerbIndexEntry]:
        return self.entries.get(verb)

    def moods(self, verb: str) -> List[str]:
        entry = self.entries.get(verb)
        return list(entry.moods) if entry else []

    def tenses(self, verb: str, mood: str) -> List[str]:
        entry = self.entries.get(verb)
        if not entry:
            return []
        return list(entry.tenses_by_mood.get(mood, []))

    def record(self, verb: str, mood: str, tense: str) -> Optional[ConjugationRecord]:
        entry = self.entries.get(verb)
        if not entry:
            return None
        return entry.verb_by_mood_and_tense.get(mood, {}).get(tense)


def build_index(records: Iterable[ConjugationRecord]) -> VerbIndex:
    """Group records by infinitive, mood and tense.

    Records with a blank infinitive are dropped. When the same
    infinitive/mood/tense appears more than once, the first record wins.
    """
    entries: Dict[str, VerbIndexEntry] = {}
    for r in records:
        inf = (r.infinitive or "").strip()
        if not inf:
            continue
        entry = entries.get(inf)
        if entry is None:
            entry = VerbIndexEntry(verb_english=r.verb_english)
            entries[inf] = entry
        by_tense = entry.verb_by_mood_and_tense.setdefault(r.mood, {})
        if r.tense not in by_tense:
            by_tense[r.tense] = r

    for entry in entries.values():
        entry.moods = sorted(entry.verb_by_mood_and_tense)
        entry.tenses_by_mood = {
            m: sorted(entry.verb_by_mood_and_tense[m]) for m in entry.moods
        }

    return VerbIndex(entries=entries, verbs=sorted(entries))


def display_moods(entry: Optional[VerbIndexEntry]) -> List[str]:
    """Moods of ``entry`` in conventional order, then the rest alphabetically."""
    if entry is None:
        return []
    preferred = [m for m in DISPLAY_MOOD_ORDER if m in entry.verb_by_mood_and_tense]
    return preferred + [m for m in entry.moods if m not in DISPLAY_MOOD_ORDER]


# --- Navigation over the sorted infinitive list ---

def first_verb(index: VerbIndex) -> Optional[str]:
    return index.verbs[0] if index.verbs else None


def last_verb(index: VerbIndex) -> Optional[str]:
    return index.verbs[-1] if index.verbs else None


def _position(index: VerbIndex, verb: Optional[str]) -> int:
    if not verb or verb not in index.entries:
        return -1
    return index.verbs.index(verb)


def next_verb(index: VerbIndex, verb: Optional[str]) -> Optional[str]:
    """Following infinitive, wrapping from last to first."""
    idx = _position(index, verb)
    if idx < 0:
        return None
    return index.verbs[(idx + 1) % len(index.verbs)]


def previous_verb(index: VerbIndex, verb: Optional[str]) -> Optional[str]:
    """Preceding infinitive, wrapping from first to last."""
    idx = _position(index, verb)
    if idx < 0:
        return None
    return index.verbs[(idx - 1) % len(index.verbs)]


def has_next_verb(index: VerbIndex, verb: Optional[str]) -> bool:
    idx = _position(index, verb)
    return 0 <= idx < len(index.verbs) - 1


def has_previous_verb(index: VerbIndex, verb: Optional[str]) -> bool:
    return _position(index, verb) > 0


def random_verb(index: VerbIndex, rng: Optional[random.Random] = None) -> Optional[str]:
    if not index.verbs:
        return None
    return (rng or random).choice(index.verbs)

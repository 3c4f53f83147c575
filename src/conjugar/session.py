"""Drill session: owns the loaded verb index and the learner's current selection.

The index is an ordinary value held here: absent before the first load,
created on a successful load and replaced wholesale on reload.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Optional

from . import verb_index as vi
from .grader import GradeResult, Score, grade, score
from .ingest import PERSON_KEYS, ConjugationRecord
from .verb_index import VerbIndex, build_index

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


def _blank_answers() -> Dict[str, str]:
    return {k: "" for k in PERSON_KEYS}


@dataclass
class DrillSession:
    ignore_accents: bool = True
    index: Optional[VerbIndex] = None
    state: LoadState = LoadState.PENDING
    error: Optional[str] = None
    verb: str = ""
    mood: str = ""
    tense: str = ""
    answers: Dict[str, str] = field(default_factory=_blank_answers)
    result: Optional[GradeResult] = None
    show_answers: bool = False

    def load(self, loader: Callable[[], Iterable[ConjugationRecord]]) -> bool:
        """Load records via ``loader`` and rebuild the index.

        On failure the session enters the FAILED state and keeps whatever index
        it had; the error message is kept in ``error``.
        """
        try:
            records = loader()
            index = build_index(records)
        except Exception as e:
            logger.error("Failed to load verb dataset: %s", e)
            self.state = LoadState.FAILED
            self.error = str(e) or type(e).__name__
            return False
        self.index = index
        self.state = LoadState.READY
        self.error = None
        self.verb = self.mood = self.tense = ""
        self.start_over()
        logger.info("Loaded %d verbs", len(index))
        return True

    @property
    def ready(self) -> bool:
        return self.index is not None and self.state is LoadState.READY

    @property
    def current_record(self) -> Optional[ConjugationRecord]:
        if self.index is None:
            return None
        return self.index.record(self.verb, self.mood, self.tense)

    # --- Selection ---

    def select_verb(self, verb: str) -> bool:
        """Switch verb, keeping mood/tense when the new verb has them."""
        if self.index is None:
            return False
        verb = (verb or "").strip()
        entry = self.index.get(verb)
        if entry is None:
            return False
        mood = self.mood if self.mood in entry.verb_by_mood_and_tense else ""
        if not mood:
            moods = vi.display_moods(entry)
            mood = moods[0] if moods else ""
        tenses = entry.tenses_by_mood.get(mood, [])
        tense = self.tense if self.tense in tenses else (tenses[0] if tenses else "")
        self.verb, self.mood, self.tense = verb, mood, tense
        self.answers = _blank_answers()
        self.result = None
        return True

    def select_mood(self, mood: str) -> bool:
        if self.index is None:
            return False
        tenses = self.index.tenses(self.verb, mood)
        if not tenses:
            return False
        self.mood = mood
        if self.tense not in tenses:
            self.tense = tenses[0]
        self.result = None
        return True

    def select_tense(self, tense: str) -> bool:
        if self.index is None or tense not in self.index.tenses(self.verb, self.mood):
            return False
        self.tense = tense
        self.result = None
        return True

    # --- Navigation ---

    def _go(self, verb: Optional[str]) -> bool:
        return bool(verb) and self.select_verb(verb)

    def first_verb(self) -> bool:
        return self.index is not None and self._go(vi.first_verb(self.index))

    def last_verb(self) -> bool:
        return self.index is not None and self._go(vi.last_verb(self.index))

    def next_verb(self) -> bool:
        return self.index is not None and self._go(vi.next_verb(self.index, self.verb))

    def previous_verb(self) -> bool:
        return self.index is not None and self._go(vi.previous_verb(self.index, self.verb))

    @property
    def has_next_verb(self) -> bool:
        return self.index is not None and vi.has_next_verb(self.index, self.verb)

    @property
    def has_previous_verb(self) -> bool:
        return self.index is not None and vi.has_previous_verb(self.index, self.verb)

    def random_verb(self, rng: Optional[random.Random] = None) -> bool:
        return self.index is not None and self._go(vi.random_verb(self.index, rng))

    # --- Answering ---

    def set_answer(self, person_key: str, text: str) -> None:
        if person_key not in PERSON_KEYS:
            raise KeyError(f"Unknown person key: {person_key}")
        self.answers[person_key] = text or ""

    def check(self) -> Optional[GradeResult]:
        record = self.current_record
        if record is None:
            return None
        self.result = grade(record, self.answers, self.ignore_accents)
        return self.result

    @property
    def score(self) -> Optional[Score]:
        if self.result is None:
            return None
        return score(self.result)

    def start_over(self) -> None:
        self.answers = _blank_answers()
        self.result = None
        self.show_answers = False

    def toggle_answers(self) -> bool:
        self.show_answers = not self.show_answers
        return self.show_answers

    def toggle_accents(self) -> bool:
        """Flip accent sensitivity; a graded result is re-graded under the new rule."""
        self.ignore_accents = not self.ignore_accents
        if self.result is not None:
            self.check()
        return self.ignore_accents

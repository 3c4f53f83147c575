"""Grade a learner's conjugation answers against one dataset record.

Each of the six persons gets a verdict:
- not-applicable: the reference form is empty for this mood/tense;
- correct: the normalized answer is one of the normalized reference variants;
- incorrect: anything else, including a blank answer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .alternates import split_alternates
from .ingest import PERSON_KEYS, ConjugationRecord
from .normalize import normalize_answer


class Verdict(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    NOT_APPLICABLE = "not-applicable"


@dataclass
class GradeResult:
    """Per-person verdicts, keyed by person key (form_1s ... form_3p)."""
    verdicts: Dict[str, Verdict] = field(default_factory=dict)

    def __getitem__(self, person_key: str) -> Verdict:
        return self.verdicts[person_key]

    def __iter__(self) -> Iterator[Tuple[str, Verdict]]:
        for key in PERSON_KEYS:
            if key in self.verdicts:
                yield key, self.verdicts[key]


@dataclass
class Score:
    correct: int
    total: int


def _reference(record: ConjugationRecord, person_key: str) -> str:
    return (record.form(person_key) or "").strip()


def accepted_answers(record: ConjugationRecord, person_key: str) -> List[str]:
    """Acceptable variants for one person, as written in the dataset."""
    return split_alternates(_reference(record, person_key))


def grade(
    record: ConjugationRecord,
    answers: Optional[Mapping[str, Optional[str]]],
    ignore_accents: bool = True,
) -> GradeResult:
    answers = answers or {}
    verdicts: Dict[str, Verdict] = {}
    for key in PERSON_KEYS:
        reference = _reference(record, key)
        if not reference:
            # No form in this mood/tense; skip grading.
            verdicts[key] = Verdict.NOT_APPLICABLE
            continue
        accepted = {normalize_answer(a, ignore_accents) for a in split_alternates(reference)}
        answer = normalize_answer(answers.get(key) or "", ignore_accents)
        verdicts[key] = Verdict.CORRECT if answer and answer in accepted else Verdict.INCORRECT
    return GradeResult(verdicts=verdicts)


def score(result: GradeResult) -> Score:
    """Correct count over gradable persons; not-applicable persons are excluded."""
    total = sum(1 for _, v in result if v is not Verdict.NOT_APPLICABLE)
    correct = sum(1 for _, v in result if v is Verdict.CORRECT)
    return Score(correct=correct, total=total)

"""Reporting utilities for graded drills."""

from __future__ import annotations

from typing import List, Mapping, Optional

from .grader import GradeResult, Verdict, accepted_answers, score
from .ingest import PERSONS, ConjugationRecord, write_csv

_MARKS = {
    Verdict.CORRECT: "✓",
    Verdict.INCORRECT: "✗",
    Verdict.NOT_APPLICABLE: "-",
}
_MASK = "·····"
_NA = "N/A"

RESULT_FIELDS = ["person", "label", "expected", "answer", "verdict"]


def result_rows(
    record: ConjugationRecord,
    result: GradeResult,
    answers: Optional[Mapping[str, str]] = None,
) -> List[dict]:
    answers = answers or {}
    rows = []
    for key, label in PERSONS:
        rows.append(
            {
                "person": key,
                "label": label,
                "expected": (record.form(key) or "").strip(),
                "answer": answers.get(key) or "",
                "verdict": result[key].value,
            }
        )
    return rows


def write_results_csv(
    path: str,
    record: ConjugationRecord,
    result: GradeResult,
    answers: Optional[Mapping[str, str]] = None,
) -> None:
    """Write one row per person (person, label, expected, answer, verdict)."""
    write_csv(path, result_rows(record, result, answers), fieldnames=RESULT_FIELDS)


def format_header(record: ConjugationRecord) -> str:
    english = record.verb_english or record.infinitive_english
    head = f"{record.infinitive.strip()} • {english}" if english else record.infinitive.strip()
    return f"{head}\n{record.mood} / {record.tense}"


def format_table(record: ConjugationRecord, show_answers: bool = False) -> List[str]:
    """One line per person: label and the reference forms, masked unless shown."""
    width = max(len(label) for _, label in PERSONS)
    lines = []
    for key, label in PERSONS:
        variants = accepted_answers(record, key)
        if not variants:
            text = _NA
        elif show_answers:
            text = "  ·  ".join(variants)
        else:
            text = _MASK
        lines.append(f"  {label:<{width}}  {text}")
    return lines


def print_summary(
    record: ConjugationRecord,
    result: GradeResult,
    answers: Optional[Mapping[str, str]] = None,
    show_answers: bool = True,
) -> None:
    """Print per-person marks and the aggregate score."""
    answers = answers or {}
    width = max(len(label) for _, label in PERSONS)
    print(format_header(record))
    for key, label in PERSONS:
        verdict = result[key]
        if verdict is Verdict.NOT_APPLICABLE:
            print(f"  {_MARKS[verdict]} {label:<{width}}  {_NA}")
            continue
        line = f"  {_MARKS[verdict]} {label:<{width}}  {answers.get(key) or ''}"
        if show_answers and verdict is Verdict.INCORRECT:
            line += f"  (expected: {'  ·  '.join(accepted_answers(record, key))})"
        print(line)
    s = score(result)
    print(f"Score: {s.correct} / {s.total}")

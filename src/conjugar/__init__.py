"""Conjugar: Spanish verb conjugation drills.

Core: verb index building and answer grading over Fred Jehle's verb database.
"""

__all__ = [
    "ingest",
    "normalize",
    "alternates",
    "verb_index",
    "grader",
    "session",
    "config",
    "report",
]

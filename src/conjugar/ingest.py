"""Dataset ingest for the verb conjugation table and common types.

Schema: Fred Jehle's Spanish verb database (UTF-8 CSV with a header row),
one row per infinitive/mood/tense. Form columns may be empty when a person has
no form in that mood/tense (e.g. "yo" in the affirmative imperative).
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import requests

logger = logging.getLogger(__name__)

PRIMARY_CSV_URL = (
    "https://raw.githubusercontent.com/ghidinelli/fred-jehle-spanish-verbs/"
    "refs/heads/master/jehle_verb_database.csv"
)
FALLBACK_CSV_URL = (
    "https://raw.githubusercontent.com/ghidinelli/fred-jehle-spanish-verbs/"
    "master/jehle_verb_database.csv"
)
DEFAULT_CSV_URLS: Tuple[str, ...] = (PRIMARY_CSV_URL, FALLBACK_CSV_URL)

REQUIRED_COLUMNS = {"infinitive", "mood", "tense"}

PERSON_KEYS: Tuple[str, ...] = ("form_1s", "form_2s", "form_3s", "form_1p", "form_2p", "form_3p")

PERSONS: Tuple[Tuple[str, str], ...] = (
    ("form_1s", "yo"),
    ("form_2s", "tú"),
    ("form_3s", "él / ella / Usted"),
    ("form_1p", "nosotros"),
    ("form_2p", "vosotros"),
    ("form_3p", "ellos / ellas / Ustedes"),
)


class DatasetLoadError(RuntimeError):
    """The verb dataset could not be retrieved or parsed."""


@dataclass(frozen=True)
class ConjugationRecord:
    infinitive: str = ""
    infinitive_english: str = ""
    mood: str = ""
    mood_english: str = ""
    tense: str = ""
    tense_english: str = ""
    verb_english: str = ""
    form_1s: str = ""
    form_2s: str = ""
    form_3s: str = ""
    form_1p: str = ""
    form_2p: str = ""
    form_3p: str = ""
    gerund: str = ""
    gerund_english: str = ""
    pastparticiple: str = ""
    pastparticiple_english: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Optional[str]]) -> "ConjugationRecord":
        """Build a record from a CSV row; missing or None columns become ''."""
        values = {}
        for f in fields(cls):
            v = row.get(f.name)
            values[f.name] = "" if v is None else str(v)
        return cls(**values)

    def form(self, person_key: str) -> str:
        if person_key not in PERSON_KEYS:
            raise KeyError(f"Unknown person key: {person_key}")
        return getattr(self, person_key)


def _check_columns(fieldnames: Optional[Sequence[str]], source: str) -> None:
    missing = REQUIRED_COLUMNS - set(h.strip().lower() for h in fieldnames or [])
    if missing:
        raise ValueError(f"Missing required columns in {source}: {sorted(missing)}")


def _read_rows(f: Iterable[str], source: str) -> List[ConjugationRecord]:
    reader = csv.DictReader(f)
    _check_columns(reader.fieldnames, source)
    # Header lookups are case-insensitive; the dataset uses lowercase names.
    reader.fieldnames = [h.strip().lower() for h in reader.fieldnames]
    rows: List[ConjugationRecord] = []
    for r in reader:
        if not any((v or "").strip() for v in r.values() if isinstance(v, str)):
            continue
        rows.append(ConjugationRecord.from_row(r))
    return rows


def parse_verbs_csv(text: str, source: str = "<text>") -> List[ConjugationRecord]:
    """Parse CSV text into records, preserving input order."""
    return _read_rows(io.StringIO(text.lstrip("\ufeff")), source)


def read_verbs_csv(path: str | Path) -> List[ConjugationRecord]:
    path = Path(path)
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        return _read_rows(f, str(path))


def fetch_verbs_csv(
    urls: Sequence[str] = DEFAULT_CSV_URLS,
    timeout: float = 60,
    http: Optional[requests.Session] = None,
) -> str:
    """Download the dataset CSV, trying each URL in order.

    Raises:
        DatasetLoadError: If every URL fails.
    """
    if not urls:
        raise DatasetLoadError("No dataset URLs configured")
    getter = http or requests
    last_error = ""
    for url in urls:
        try:
            logger.info("Fetching dataset: %s", url)
            resp = getter.get(url, timeout=timeout)
            resp.raise_for_status()
            resp.encoding = resp.encoding or "utf-8"
            return resp.text
        except requests.exceptions.RequestException as e:
            last_error = f"{url}: {e}"
            logger.warning("Failed to fetch dataset from %s: %s", url, e)
    raise DatasetLoadError(f"Failed to fetch CSV ({last_error})")


def load_dataset(
    dataset_path: str | Path | None,
    urls: Sequence[str] = DEFAULT_CSV_URLS,
    timeout: float = 60,
    refresh: bool = False,
) -> List[ConjugationRecord]:
    """Load records from the local cache, downloading it first if needed.

    Raises:
        DatasetLoadError: If the dataset can't be fetched, read or parsed.
    """
    path = Path(dataset_path) if dataset_path else None
    if path and path.exists() and path.stat().st_size > 0 and not refresh:
        logger.info("Reading cached dataset: %s", path)
        try:
            return read_verbs_csv(path)
        except (OSError, UnicodeDecodeError, ValueError, csv.Error) as e:
            raise DatasetLoadError(f"Could not read dataset {path}: {e}") from e

    text = fetch_verbs_csv(urls, timeout=timeout)
    try:
        records = parse_verbs_csv(text, source=urls[0] if urls else "<download>")
    except (ValueError, csv.Error) as e:
        raise DatasetLoadError(f"Malformed dataset payload: {e}") from e

    if path:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
            logger.info("Cached dataset to %s", path)
        except OSError as e:
            logger.warning("Could not cache dataset to %s: %s", path, e)
    return records


def write_csv(path: str | Path, rows: Iterable[dict], fieldnames: Optional[Sequence[str]] = None) -> None:
    """Write dict rows as CSV.

    Columns default to the first row's keys. With explicit ``fieldnames`` the
    header is written even when there are no rows; without them and without
    rows the file is left empty.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = list(rows)
    columns = list(fieldnames) if fieldnames else (list(rows[0].keys()) if rows else [])
    with path.open("w", encoding="utf-8", newline="") as f:
        if not columns:
            return
        writer = csv.DictWriter(f, fieldnames=columns)
        writer.writeheader()
        writer.writerows(rows)

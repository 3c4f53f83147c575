"""CLI entrypoint for conjugar.

Usage:
  python -m conjugar.cli fetch
  python -m conjugar.cli show hablar --mood Indicativo --tense Presente
  python -m conjugar.cli check hablar --mood Indicativo --tense Presente --answer form_1s=hablo
  python -m conjugar.cli drill --random
"""

from __future__ import annotations

import argparse
import logging
from typing import Callable, List, Optional

from .config import Preferences, load_config, load_preferences, save_preferences
from .ingest import PERSON_KEYS, PERSONS, DatasetLoadError, load_dataset
from .report import format_header, format_table, print_summary, write_results_csv
from .session import DrillSession, LoadState
from .verb_index import display_moods

DRILL_HELP = "Commands: :first  :prev  :next  :last  :random  :show  :accents  :quit"


def _dataset_loader(cfg: dict, refresh: bool = False) -> Callable[[], list]:
    def _load() -> list:
        return load_dataset(
            cfg.get("dataset_path"),
            urls=cfg.get("dataset_urls") or [],
            timeout=cfg.get("timeout", 60),
            refresh=refresh,
        )
    return _load


def open_session(cfg: dict, ignore_accents: bool = True, refresh: bool = False) -> Optional[DrillSession]:
    """Load the dataset into a new session; print the error and return None on failure."""
    session = DrillSession(ignore_accents=ignore_accents)
    session.load(_dataset_loader(cfg, refresh=refresh))
    if session.state is LoadState.FAILED:
        print(f"Error: failed to load dataset: {session.error}")
        return None
    if not session.index:
        print("No verbs found in dataset.")
    return session


def _parse_answers(items: List[str]) -> dict:
    answers = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or key not in PERSON_KEYS:
            raise ValueError(f"Invalid --answer '{item}' (expected one of {', '.join(PERSON_KEYS)}=TEXT)")
        answers[key] = value
    return answers


def _select(session: DrillSession, verb: str, mood: Optional[str], tense: Optional[str]) -> bool:
    if not session.select_verb(verb):
        print(f"Error: unknown verb: {verb}")
        return False
    if mood and not session.select_mood(mood):
        print(f"Error: '{verb}' has no mood '{mood}'. Moods: {', '.join(display_moods(session.index.get(session.verb)))}")
        return False
    if tense and not session.select_tense(tense):
        tenses = session.index.tenses(session.verb, session.mood)
        print(f"Error: '{session.mood}' has no tense '{tense}'. Tenses: {', '.join(tenses)}")
        return False
    return True


def cmd_fetch(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    try:
        records = load_dataset(
            cfg.get("dataset_path"),
            urls=cfg.get("dataset_urls") or [],
            timeout=cfg.get("timeout", 60),
            refresh=args.refresh,
        )
    except DatasetLoadError as e:
        print(f"Error: failed to load dataset: {e}")
        return 1
    print(f"Loaded {len(records)} rows into: {cfg.get('dataset_path')}")
    return 0


def cmd_verbs(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    session = open_session(cfg)
    if session is None:
        return 1
    verbs = session.index.verbs
    if args.limit:
        verbs = verbs[: args.limit]
    for v in verbs:
        print(f"{v}\t{session.index.get(v).verb_english}")
    print(f"{len(session.index)} verbs")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    session = open_session(cfg)
    if session is None:
        return 1
    if not _select(session, args.verb, args.mood, args.tense):
        return 1
    entry = session.index.get(session.verb)
    if not args.mood and not args.tense:
        print(f"{session.verb} • {entry.verb_english}")
        for m in display_moods(entry):
            print(f"  {m}: {', '.join(entry.tenses_by_mood.get(m, []))}")
        return 0
    record = session.current_record
    print(format_header(record))
    for line in format_table(record, show_answers=True):
        print(line)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    try:
        answers = _parse_answers(args.answer)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    ignore_accents = _resolve_ignore_accents(args, cfg)
    session = open_session(cfg, ignore_accents=ignore_accents)
    if session is None:
        return 1
    if not _select(session, args.verb, args.mood, args.tense):
        return 1
    for key, value in answers.items():
        session.set_answer(key, value)
    result = session.check()
    if result is None:
        print(f"Error: no conjugation for {session.verb} / {session.mood} / {session.tense}")
        return 1
    print_summary(session.current_record, result, session.answers, show_answers=args.show_answers)
    if args.out:
        write_results_csv(args.out, session.current_record, result, session.answers)
        print(f"Wrote report: {args.out}")
    return 0


def _drill_round(session: DrillSession, ask: Callable[[str], str]) -> Optional[str]:
    """Prompt for every gradable person; return a ':command' if one was entered."""
    record = session.current_record
    print()
    print(format_header(record))
    for line in format_table(record, show_answers=session.show_answers):
        print(line)
    for key, label in PERSONS:
        if not (record.form(key) or "").strip():
            continue
        text = ask(f"{label}: ").strip()
        if text.startswith(":"):
            return text.lower()
        session.set_answer(key, text)
    result = session.check()
    print_summary(record, result, session.answers)
    return None


def _resolve_ignore_accents(args: argparse.Namespace, cfg: dict, saved: Optional[bool] = None) -> bool:
    """Command-line flag first, then the saved preference, then the config."""
    if args.ignore_accents is not None:
        return args.ignore_accents
    if saved is not None:
        return saved
    return bool(cfg.get("ignore_accents", True))


def _drill_prompt(session: DrillSession) -> str:
    moves = []
    if session.has_previous_verb:
        moves += [":first", ":prev"]
    if session.has_next_verb:
        moves += [":next", ":last"]
    accents = "ignored" if session.ignore_accents else "required"
    return f"[Enter] next verb ({' '.join(moves + [':random', ':accents', ':quit'])}; accents {accents}): "


def cmd_drill(args: argparse.Namespace, ask: Optional[Callable[[str], str]] = None) -> int:
    ask = ask or input
    cfg = load_config(args.config)
    prefs_path = cfg.get("preferences_path")
    prefs = load_preferences(prefs_path)
    ignore_accents = _resolve_ignore_accents(args, cfg, prefs.ignore_accents)
    session = open_session(cfg, ignore_accents=ignore_accents)
    if session is None:
        return 1
    if not session.index:
        return 0

    if args.verb:
        if not _select(session, args.verb, args.mood, args.tense):
            return 1
    elif args.random or not session.select_verb(prefs.last_verb or ""):
        session.random_verb()
        if args.mood:
            session.select_mood(args.mood)
        if args.tense:
            session.select_tense(args.tense)
    else:
        session.select_mood(args.mood or prefs.last_mood or "")
        session.select_tense(args.tense or prefs.last_tense or "")

    print(DRILL_HELP)
    try:
        while True:
            if session.current_record is None:
                print(f"No conjugation for {session.verb}; moving on.")
                session.next_verb()
                continue
            command = _drill_round(session, ask)
            if command is None:
                session.show_answers = False
                command = ask(_drill_prompt(session)).strip().lower()
            if command == ":quit":
                break
            elif command == ":show":
                session.toggle_answers()
            elif command == ":accents":
                state = "ignored" if session.toggle_accents() else "required"
                print(f"Accents are now {state}.")
            elif command in (":first", ":prev"):
                if not session.has_previous_verb:
                    print("Already at the first verb.")
                elif command == ":first":
                    session.first_verb()
                else:
                    session.previous_verb()
            elif command == ":last":
                if session.has_next_verb:
                    session.last_verb()
                else:
                    print("Already at the last verb.")
            elif command == ":random":
                session.random_verb()
            elif command in ("", ":next"):
                # Enter past the last verb wraps to the first.
                session.next_verb()
            else:
                print(DRILL_HELP)
    except (EOFError, KeyboardInterrupt):
        print()

    save_preferences(
        prefs_path,
        Preferences(
            ignore_accents=session.ignore_accents,
            last_verb=session.verb or None,
            last_mood=session.mood or None,
            last_tense=session.tense or None,
        ),
    )
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--config",
        default="resources/config.json",
        help="Path to config.json (optional; defaults will be used if missing)",
    )
    p.add_argument("--verbose", action="store_true", help="Log dataset loading progress")


def _add_accent_flags(p: argparse.ArgumentParser) -> None:
    group = p.add_mutually_exclusive_group()
    group.add_argument(
        "--keep-accents",
        dest="ignore_accents",
        action="store_false",
        default=None,
        help="Require accents to match (remembered by drill)",
    )
    group.add_argument(
        "--ignore-accents",
        dest="ignore_accents",
        action="store_true",
        default=None,
        help="Accept answers without accents (remembered by drill)",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="conjugar", description="Spanish verb conjugation drills")
    sub = p.add_subparsers(dest="cmd", required=True)

    fetch = sub.add_parser("fetch", help="Download the verb dataset to the local cache")
    _add_common(fetch)
    fetch.add_argument("--refresh", action="store_true", help="Re-download even if cached")
    fetch.set_defaults(func=cmd_fetch)

    verbs = sub.add_parser("verbs", help="List infinitives in the dataset")
    _add_common(verbs)
    verbs.add_argument("--limit", type=int, default=0, help="Show at most N verbs")
    verbs.set_defaults(func=cmd_verbs)

    show = sub.add_parser("show", help="Show moods/tenses of a verb, or one conjugation")
    _add_common(show)
    show.add_argument("verb", help="Infinitive, e.g. hablar")
    show.add_argument("--mood", help="Mood, e.g. Indicativo")
    show.add_argument("--tense", help="Tense, e.g. Presente (requires --mood)")
    show.set_defaults(func=cmd_show)

    check = sub.add_parser("check", help="Grade answers for one verb/mood/tense")
    _add_common(check)
    check.add_argument("verb", help="Infinitive, e.g. hablar")
    check.add_argument("--mood", required=True, help="Mood, e.g. Indicativo")
    check.add_argument("--tense", required=True, help="Tense, e.g. Presente")
    check.add_argument(
        "--answer",
        action="append",
        default=[],
        help="Answer as PERSON=TEXT, e.g. form_1s=hablo (repeatable)",
    )
    _add_accent_flags(check)
    check.add_argument("--show-answers", action="store_true", help="Show expected forms for wrong answers")
    check.add_argument("--out", help="Optional path to output CSV report")
    check.set_defaults(func=cmd_check)

    drill = sub.add_parser("drill", help="Interactive conjugation drill")
    _add_common(drill)
    drill.add_argument("--verb", help="Start with this infinitive")
    drill.add_argument("--mood", help="Start with this mood")
    drill.add_argument("--tense", help="Start with this tense")
    drill.add_argument("--random", action="store_true", help="Start with a random verb")
    _add_accent_flags(drill)
    drill.set_defaults(func=cmd_drill)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO if args.verbose else logging.WARNING,
    )
    try:
        return args.func(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

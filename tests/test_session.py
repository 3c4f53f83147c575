"""Tests for the drill session lifecycle and selection rules."""

import random

import pytest

from conjugar.grader import Score, Verdict
from conjugar.ingest import DatasetLoadError, parse_verbs_csv
from conjugar.session import DrillSession, LoadState


@pytest.fixture
def records(sample_csv_text):
    return parse_verbs_csv(sample_csv_text)


@pytest.fixture
def session(records):
    s = DrillSession()
    assert s.load(lambda: records)
    return s


class TestLoad:
    def test_pending_before_load(self):
        s = DrillSession()
        assert s.state is LoadState.PENDING
        assert s.index is None
        assert not s.ready
        assert s.current_record is None
        assert not s.select_verb("hablar")
        assert not s.next_verb()

    def test_successful_load(self, session):
        assert session.state is LoadState.READY
        assert session.ready
        assert session.index.verbs == ["abrir", "comer", "hablar"]
        assert session.error is None

    def test_failed_load(self):
        def boom():
            raise DatasetLoadError("Failed to fetch CSV: 503")

        s = DrillSession()
        assert not s.load(boom)
        assert s.state is LoadState.FAILED
        assert s.error == "Failed to fetch CSV: 503"
        assert s.index is None

    def test_failed_reload_keeps_previous_index(self, session):
        previous = session.index
        session.load(lambda: (_ for _ in ()).throw(OSError("offline")))
        assert session.state is LoadState.FAILED
        assert session.index is previous
        assert not session.ready

    def test_reload_replaces_index_wholesale(self, session, record_factory):
        session.select_verb("hablar")
        assert session.load(lambda: [record_factory(infinitive="ser")])
        assert session.index.verbs == ["ser"]
        assert session.verb == ""
        assert session.current_record is None

    def test_empty_dataset_is_ready(self):
        s = DrillSession()
        assert s.load(lambda: [])
        assert s.state is LoadState.READY
        assert len(s.index) == 0
        assert not s.first_verb()


class TestSelection:
    def test_select_verb_defaults(self, session):
        assert session.select_verb("hablar")
        assert session.mood == "Indicativo"
        assert session.tense == "Presente"
        assert session.current_record.form_1s == "hablo"

    def test_select_verb_keeps_valid_mood_and_tense(self, session):
        session.select_verb("hablar")
        session.select_tense("Pretérito")
        session.select_verb("comer")
        assert session.mood == "Indicativo"
        assert session.tense == "Presente"
        session.select_verb("hablar")
        session.select_mood("Subjuntivo")
        session.select_verb("comer")
        assert session.mood == "Indicativo"

    def test_select_verb_unknown(self, session):
        session.select_verb("hablar")
        assert not session.select_verb("ser")
        assert session.verb == "hablar"

    def test_select_verb_trims(self, session):
        assert session.select_verb("  comer ")
        assert session.verb == "comer"

    def test_select_verb_resets_answers(self, session):
        session.select_verb("hablar")
        session.set_answer("form_1s", "hablo")
        session.check()
        session.select_verb("comer")
        assert session.answers["form_1s"] == ""
        assert session.result is None

    def test_select_mood_fixes_tense(self, session):
        session.select_verb("hablar")
        assert session.select_mood("Subjuntivo")
        assert session.tense == "Imperfecto"
        assert not session.select_mood("Condicional")
        assert session.mood == "Subjuntivo"

    def test_select_mood_clears_result_keeps_answers(self, session):
        session.select_verb("hablar")
        session.set_answer("form_1s", "hablo")
        session.check()
        session.select_mood("Subjuntivo")
        assert session.result is None
        assert session.answers["form_1s"] == "hablo"

    def test_select_tense(self, session):
        session.select_verb("hablar")
        assert session.select_tense("Pretérito")
        assert session.current_record.form_1s == "hablé"
        assert not session.select_tense("Futuro")
        assert session.tense == "Pretérito"


class TestNavigation:
    def test_next_previous(self, session):
        session.first_verb()
        assert session.verb == "abrir"
        session.next_verb()
        assert session.verb == "comer"
        session.previous_verb()
        session.previous_verb()
        assert session.verb == "hablar"
        session.last_verb()
        assert session.verb == "hablar"

    def test_random(self, session):
        assert session.random_verb(random.Random(1))
        assert session.verb in session.index.verbs


class TestChecking:
    def test_check_and_score(self, session):
        session.select_verb("hablar")
        session.set_answer("form_1s", "Hablo")
        session.set_answer("form_2p", "hablais")
        result = session.check()
        assert result["form_1s"] is Verdict.CORRECT
        assert result["form_2p"] is Verdict.CORRECT
        assert result["form_3p"] is Verdict.INCORRECT
        assert session.score == Score(correct=2, total=6)

    def test_keep_accents(self, records):
        s = DrillSession(ignore_accents=False)
        s.load(lambda: records)
        s.select_verb("hablar")
        s.set_answer("form_2p", "hablais")
        assert s.check()["form_2p"] is Verdict.INCORRECT

    def test_imperative_yo_not_applicable(self, session):
        session.select_verb("hablar")
        session.select_mood("Imperativo Afirmativo")
        session.set_answer("form_1s", "hablo")
        session.set_answer("form_2s", "habla")
        result = session.check()
        assert result["form_1s"] is Verdict.NOT_APPLICABLE
        assert session.score == Score(correct=1, total=5)

    def test_check_without_record(self, session):
        assert session.check() is None
        assert session.score is None

    def test_set_answer_unknown_key(self, session):
        with pytest.raises(KeyError):
            session.set_answer("form_4s", "x")

    def test_start_over(self, session):
        session.select_verb("hablar")
        session.set_answer("form_1s", "hablo")
        session.toggle_answers()
        session.check()
        session.start_over()
        assert session.answers["form_1s"] == ""
        assert session.result is None
        assert session.score is None
        assert not session.show_answers

    def test_toggle_answers(self, session):
        assert session.toggle_answers() is True
        assert session.toggle_answers() is False


class TestBoundaries:
    def test_has_next_previous(self, session):
        assert not session.has_next_verb
        assert not session.has_previous_verb
        session.first_verb()
        assert session.has_next_verb
        assert not session.has_previous_verb
        session.last_verb()
        assert session.has_previous_verb
        assert not session.has_next_verb

    def test_toggle_accents_regrades(self, session):
        session.select_verb("hablar")
        session.set_answer("form_2p", "hablais")
        assert session.check()["form_2p"] is Verdict.CORRECT
        assert session.toggle_accents() is False
        assert session.result["form_2p"] is Verdict.INCORRECT
        assert session.toggle_accents() is True
        assert session.result["form_2p"] is Verdict.CORRECT

    def test_toggle_accents_before_check(self, session):
        session.toggle_accents()
        assert session.result is None
        assert not session.ignore_accents

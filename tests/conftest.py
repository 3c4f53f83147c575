"""Shared fixtures: a small slice of the Jehle verb database."""

import pytest

from conjugar.ingest import ConjugationRecord

HEADER = (
    "infinitive,infinitive_english,mood,mood_english,tense,tense_english,verb_english,"
    "form_1s,form_2s,form_3s,form_1p,form_2p,form_3p,"
    "gerund,gerund_english,pastparticiple,pastparticiple_english"
)

SAMPLE_CSV = "\n".join(
    [
        HEADER,
        'hablar,to speak,Indicativo,Indicative,Presente,Present,"I speak, am speaking",'
        "hablo,hablas,habla,hablamos,habláis,hablan,hablando,speaking,hablado,spoken",
        'hablar,to speak,Indicativo,Indicative,Pretérito,Preterite,"I spoke, did speak",'
        "hablé,hablaste,habló,hablamos,hablasteis,hablaron,hablando,speaking,hablado,spoken",
        'hablar,to speak,Subjuntivo,Subjunctive,Imperfecto,Past,"(that) I spoke",'
        "hablara o hablase,hablaras o hablases,hablara o hablase,"
        "habláramos o hablásemos,hablarais o hablaseis,hablaran o hablasen,"
        "hablando,speaking,hablado,spoken",
        "hablar,to speak,Imperativo Afirmativo,Imperative Affirmative,Presente,Present,Speak!,"
        ",habla,hable,hablemos,hablad,hablen,hablando,speaking,hablado,spoken",
        'comer,to eat,Indicativo,Indicative,Presente,Present,"I eat, am eating",'
        "como,comes,come,comemos,coméis,comen,comiendo,eating,comido,eaten",
        'abrir,to open,Indicativo,Indicative,Presente,Present,"I open, am opening",'
        "abro,abres,abre,abrimos,abrís,abren,abriendo,opening,abierto,opened",
        "",
    ]
)


def make_record(**overrides) -> ConjugationRecord:
    """hablar / Indicativo / Presente, with any field overridden."""
    base = dict(
        infinitive="hablar",
        infinitive_english="to speak",
        mood="Indicativo",
        mood_english="Indicative",
        tense="Presente",
        tense_english="Present",
        verb_english="I speak, am speaking",
        form_1s="hablo",
        form_2s="hablas",
        form_3s="habla",
        form_1p="hablamos",
        form_2p="habláis",
        form_3p="hablan",
        gerund="hablando",
        gerund_english="speaking",
        pastparticiple="hablado",
        pastparticiple_english="spoken",
    )
    base.update(overrides)
    return ConjugationRecord(**base)


@pytest.fixture
def sample_csv_text():
    return SAMPLE_CSV


@pytest.fixture
def sample_csv(tmp_path):
    path = tmp_path / "verbs.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def record_factory():
    return make_record

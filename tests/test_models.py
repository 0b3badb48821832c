"""Tests for shared data structures and character helpers."""

import json

import pytest

from goi_enrich.characters import count_kanji, is_kanji, kanji_in, romanize, split_morae, to_hiragana
from goi_enrich.models import (
    ConjugationForm,
    EnrichmentRecord,
    KanjiInfo,
    ProficiencyLevel,
    Sense,
    VerbClass,
    WordTags,
    level_rank,
)


class TestProficiencyLevel:

    @pytest.mark.parametrize("value,expected", [
        ('N5', ProficiencyLevel.N5),
        ('n3', ProficiencyLevel.N3),
        (' N1 ', ProficiencyLevel.N1),
        (4, ProficiencyLevel.N4),
        ('2', ProficiencyLevel.N2),
        (ProficiencyLevel.N5, ProficiencyLevel.N5),
        (None, None),
        ('', None),
        ('N6', None),
        (7, None),
    ])
    def test_parse(self, value, expected):
        assert ProficiencyLevel.parse(value) is expected

    def test_rank(self):
        assert ProficiencyLevel.N5.rank == 5
        assert level_rank(ProficiencyLevel.N1) == 1
        assert level_rank(None) == 0


class TestCharacters:

    def test_is_kanji(self):
        assert is_kanji('食')
        assert is_kanji('㐂')
        assert not is_kanji('た')
        assert not is_kanji('タ')
        assert not is_kanji('a')

    def test_kanji_in(self):
        assert kanji_in('食べ物') == ['食', '物']
        assert count_kanji('手前味噌') == 4

    def test_kana(self):
        assert to_hiragana('タベル') == 'たべる'
        assert romanize('たべる') == 'taberu'
        assert romanize('') == ''

    def test_long_vowel_mark(self):
        assert romanize('コーヒー') == 'koohii'
        assert romanize('ラーメン') == 'raamen'
        assert '-' not in romanize('スーパー')

    def test_split_morae(self):
        assert split_morae('しゃしん') == ['しゃ', 'し', 'ん']
        assert split_morae('きょうと') == ['きょ', 'う', 'と']
        assert split_morae('がっこう') == ['が', 'っ', 'こ', 'う']


def test_record_to_dict_is_json_ready():
    record = EnrichmentRecord(
        word='来る',
        reading='くる',
        romaji='kuru',
        level=ProficiencyLevel.N5,
        frequency=5000,
        senses=[Sense(pos_tags=('Kuru verb - special class',), glosses=('to come',),
                      misc_tags=frozenset({'b', 'a'}))],
        kanji=[KanjiInfo(character='来', grade=2, level=ProficiencyLevel.N5)],
        conjugation=ConjugationForm(VerbClass.KURU, '来る', '来ます', '来ない', '来た', '来て',
                                    '来られる', '来られる', '来させる'),
        tags=WordTags('basic', 'verb', 'neutral', True),
    )

    data = record.to_dict()
    json.dumps(data, ensure_ascii=False)

    assert data['level'] == 'N5'
    assert data['senses'][0]['pos_tags'] == ['Kuru verb - special class']
    assert data['senses'][0]['misc_tags'] == ['a', 'b']
    assert data['kanji'][0]['level'] == 'N5'
    assert data['conjugation']['verb_class'] == 'kuru'
    assert data['pitch'] is None
    assert data['tags']['is_irregular'] is True

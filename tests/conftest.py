# tests/conftest.py
"""
Shared fixtures: a small dictionary, kanji table and level map built
around 食べる (related words) and 手 (idioms).
"""

import pytest

from goi_enrich.dictionary import build_index
from goi_enrich.models import KanjiInfo, ProficiencyLevel, SentencePair
from goi_enrich.pipeline import Enricher
from goi_enrich.pitch import PitchDictionary

N5 = ProficiencyLevel.N5
N4 = ProficiencyLevel.N4
N3 = ProficiencyLevel.N3
N2 = ProficiencyLevel.N2
N1 = ProficiencyLevel.N1


def record(seq, spellings=(), readings=(), priority=(), senses=()):
    """Raw JMdict-shaped record with priority markers on the first spelling."""
    k_ele = [{'keb': k, 'ke_pri': list(priority) if i == 0 else []} for i, k in enumerate(spellings)]
    r_ele = [{'reb': r, 're_pri': []} for r in readings]
    return {'seq': seq, 'k_ele': k_ele, 'r_ele': r_ele, 'sense': list(senses)}


def sense(*glosses, pos=(), misc=()):
    return {'pos': list(pos), 'gloss': list(glosses), 'misc': list(misc), 'field': []}


RAW_RECORDS = [
    # Source word and a homograph sharing its spelling
    record(1358280, ['食べる'], ['たべる'], ['ichi1', 'news1', 'nf02'], [sense('to eat', pos=['v1', 'vt'])]),
    record(1358281, ['食べる'], ['たべる'], [], [sense('to live on', pos=['v1'])]),

    # Related candidates for 食べる
    record(1358300, ['食事'], ['しょくじ'], ['ichi1', 'nf03'], [sense('meal', pos=['n', 'vs'])]),
    record(1358400, ['食物'], ['しょくもつ'], ['news2', 'nf20'], [sense('food', pos=['n'])]),
    record(1358500, ['食堂'], ['しょくどう'], ['ichi1', 'nf05'], [sense('cafeteria', pos=['n'])]),
    record(1358600, ['食べ物'], ['たべもの'], ['ichi1', 'nf04'], [sense('food', pos=['n'])]),
    record(1358700, ['食べ過ぎる'], ['たべすぎる'], [], [sense('to overeat', pos=['v1'])]),
    record(1358800, ['食餌'], ['しょくじ'], ['news2'], [sense('diet', pos=['v1'])]),
    record(1358900, ['食す'], ['しょくす'], [], [sense('to eat', pos=['v5s'], misc=['arch'])]),
    record(1359000, ['食料品店'], ['しょくりょうひんてん'], [], [sense('grocery store', pos=['v1'])]),
    record(1359100, ['食べられないもの'], ['たべられないもの'], [], [sense('inedible thing', pos=['v1'])]),
    record(1359200, ['食い止める'], ['くいとめる'], [], [sense('to check', pos=['v1'])]),
    record(1359300, ['食べ付ける'], ['たべつける'], [], [sense('to be used to eating', pos=['v1'])]),

    # Idioms around 手
    record(1327180, ['手'], ['て'], ['ichi1', 'nf01'], [sense('hand', pos=['n'])]),
    record(1327181, ['手'], ['しゅ'], [], [sense('hand (suffix)', pos=['suf'], misc=['id'])]),
    record(1600010, ['手を貸す'], ['てをかす'], [], [sense('to lend a hand', pos=['exp', 'v5s'], misc=['id'])]),
    record(1600020, ['手も足も出ない'], ['てもあしもでない'], [], [sense('to be helpless', pos=['exp'], misc=['idiomatic expression'])]),
    record(1600030, ['猫の手も借りたい'], ['ねこのてもかりたい'], ['spec1'], [sense('very busy', pos=['exp'], misc=['proverb'])]),
    record(1600040, ['手前味噌'], ['てまえみそ'], [], [sense('self-praise', pos=['n'], misc=['yoji'])]),
    record(1600050, ['手紙'], ['てがみ'], ['ichi1'], [sense('letter', pos=['n'])]),
    record(1600070, ['手が早い'], ['てがはやい'], [], [sense('quick to act', pos=['exp'], misc=['expression'])]),

    # Kana-only idiom only reachable by the full scan
    record(1467640, ['猫'], ['ねこ'], ['ichi1'], [sense('cat', pos=['n'])]),
    record(1600080, [], ['ねこにこばん'], [], [sense('pearls before swine', pos=['exp'], misc=['proverb'])]),

    # Reading-only resolution: rare entry inserted first
    record(1340460, ['出切る'], ['できる'], [], [sense('to run out', pos=['v5r'])]),
    record(1340450, ['出来る'], ['できる'], ['ichi1'], [sense('to be able to', pos=['v1'])]),

    # Every sense filtered out
    record(1600090, [], ['くそ'], [], [sense('shit', pos=['int'], misc=['vulg'])]),

    # Irregular verbs
    record(1547720, ['来る'], ['くる'], ['ichi1'], [sense('to come', pos=['vk'])]),
    record(1223615, ['勉強'], ['べんきょう'], ['ichi1'], [sense('study', pos=['n', 'vs'])]),

    # Dropped: neither spelling nor reading
    {'seq': 9999999, 'k_ele': [], 'r_ele': [], 'sense': [sense('nothing')]},
]


def kanji_info(char, grade=None, level=None):
    return KanjiInfo(character=char, meanings=[], grade=grade, level=level)


KANJI = {
    '食': kanji_info('食', 2, N5),
    '事': kanji_info('事', 3, N4),
    '物': kanji_info('物', 3, N4),
    '堂': kanji_info('堂', 5),
    '過': kanji_info('過', 5, N3),
    '餌': kanji_info('餌'),
    '料': kanji_info('料', 4, N4),
    '品': kanji_info('品', 3, N4),
    '店': kanji_info('店', 2, N5),
    '止': kanji_info('止', 2, N4),
    '付': kanji_info('付', 4, N3),
    '手': kanji_info('手', 1, N5),
    '紙': kanji_info('紙', 2, N4),
    '肉': kanji_info('肉', 2, N4),
    '水': kanji_info('水', 1, N5),
    '飲': kanji_info('飲', 3, N5),
    '簡': kanji_info('簡', 6, N2),
    '来': kanji_info('来', 2, N5),
}

LEVELS = {
    '食べる': N5,
    '食事': N5,
    '食物': N4,
    '食堂': N5,
    '食べ物': N5,
    '食べ過ぎる': N4,
    '食餌': N5,
    '食す': N5,
    '食料品店': N5,
    '食べられないもの': N5,
    '食い止める': N1,
    '手': N5,
    '手紙': N5,
}

CORPUS = [
    SentencePair('肉を食べる。', 'I eat meat.'),
    SentencePair('水を飲みながら食べる。', 'I eat while drinking water.'),
    SentencePair('手を洗ってから食べるのが良い習慣だと母はいつも子供たちに言っていました。', 'Long sentence.'),
    SentencePair('食べるのが好きです。', 'I like eating.'),
    SentencePair('手が冷たい。', 'My hands are cold.'),
]


@pytest.fixture
def index():
    return build_index(RAW_RECORDS)


@pytest.fixture
def kanji():
    return dict(KANJI)


@pytest.fixture
def levels():
    return dict(LEVELS)


@pytest.fixture
def pitch():
    return PitchDictionary.from_mapping({
        '_source': 'test',
        'たべる': {'pattern': 2, 'type': 'nakadaka'},
        'て': 1,
    })


@pytest.fixture
def enricher(index, kanji, levels, pitch):
    return Enricher(index=index, kanji=kanji, levels=levels, pitch=pitch, corpus=list(CORPUS))

"""Tests for normalization, the lookup index and its persistence."""

import pytest

from goi_enrich.characters import is_kanji
from goi_enrich.constants import MISC_ENTITIES
from goi_enrich.dictionary import (
    IndexBuilder,
    build_index,
    expand_tag,
    frequency_rank,
    load_index,
    normalize_record,
    normalize_senses,
    save_index,
)
from goi_enrich.exceptions import IndexBuildError

from conftest import RAW_RECORDS, record, sense


class TestFrequencyRank:

    def test_best_nf_bucket_wins(self):
        assert frequency_rank(['nf10', 'nf02', 'ichi1']) == 750

    def test_first_bucket_midpoint(self):
        assert frequency_rank(['nf01']) == 250

    def test_fallback_lists(self):
        assert frequency_rank(['ichi1', 'news1']) == 5000
        assert frequency_rank(['news1']) == 12000
        assert frequency_rank(['spec2']) == 30000

    def test_unknown(self):
        assert frequency_rank([]) is None
        assert frequency_rank(['gai1']) is None


class TestNormalization:

    def test_expand_tag(self):
        assert expand_tag('arch', MISC_ENTITIES) == 'archaic'
        assert expand_tag('&arch;', MISC_ENTITIES) == 'archaic'
        assert expand_tag('archaic', MISC_ENTITIES) == 'archaic'

    def test_pos_inherited_from_previous_sense(self):
        senses = normalize_senses([
            sense('to eat', pos=['v1', 'vt']),
            sense('to live on'),
            sense('to bite', pos=['v5r']),
        ])
        assert senses[1].pos_tags == ('Ichidan verb', 'transitive verb')
        assert senses[2].pos_tags == ("Godan verb with 'ru' ending",)

    def test_record_without_forms_is_dropped(self):
        assert normalize_record({'seq': 1, 'k_ele': [], 'r_ele': [], 'sense': []}) is None

    def test_record_without_id_is_dropped(self):
        assert normalize_record({'seq': 'abc', 'r_ele': [{'reb': 'て'}]}) is None

    def test_malformed_priority_markers_skipped(self):
        raw = record(1, ['手'], ['て'], ['ichi1', '', None, 'nf01'], [sense('hand', pos=['n'])])
        entry = normalize_record(raw)
        assert entry.priority_tags == frozenset({'ichi1', 'nf01'})

    def test_kana_only_headword(self):
        entry = normalize_record(record(2, [], ['くそ'], [], [sense('shit')]))
        assert entry.headword == 'くそ'
        assert entry.spellings == ()


class TestIndex:

    def test_dropped_record_not_indexed(self, index):
        assert len(index) == len(RAW_RECORDS) - 1
        assert index.get(9999999) is None

    def test_char_index_invariant(self, index):
        for entry in index:
            for spelling in entry.spellings:
                for char in spelling:
                    if is_kanji(char):
                        assert entry.id in index.char_lookup[char]

        for char, ids in index.char_lookup.items():
            assert is_kanji(char)
            for entry_id in ids:
                assert any(char in s for s in index.entries[entry_id].spellings)

    def test_kana_never_indexed_by_char(self, index):
        assert 'べ' not in index.char_lookup
        assert 'る' not in index.char_lookup

    def test_lookup_order_follows_insertion(self, index):
        assert index.spelling_lookup['食べる'] == (1358280, 1358281)
        assert index.reading_lookup['できる'] == (1340460, 1340450)

    def test_resolve_prefers_spelling(self, index):
        assert index.resolve('手').matched_ids == (1327180, 1327181)
        assert index.resolve('ねこ').matched_ids == (1467640,)
        assert not index.resolve('ねこ').by_spelling

    def test_resolve_spelling_takes_first(self, index):
        resolution = index.resolve('食べる')
        assert resolution.by_spelling
        assert resolution.primary.id == 1358280
        assert resolution.excluded == frozenset({1358280, 1358281})

    def test_resolve_reading_takes_most_frequent(self, index):
        resolution = index.resolve('できる')
        assert not resolution.by_spelling
        assert resolution.primary.headword == '出来る'

    def test_resolve_unknown(self, index):
        assert index.resolve('存在しない') is None

    def test_most_frequent(self, index):
        # nf buckets first, then ichi1 (5000) in insertion order
        assert index.most_frequent(7) == ['手', '食べる', '食事', '食べ物', '食堂', '手紙', '猫']

    def test_most_frequent_needs_priority(self, index):
        words = index.most_frequent(100)
        assert len(words) == 13
        assert words[-1] == '猫の手も借りたい'
        assert '食べ過ぎる' not in words

    def test_entries_with_kanji_excludes(self, index):
        ids = index.entries_with_kanji('手', exclude=(1327180, 1327181))
        assert 1327180 not in ids
        assert 1600050 in ids
        assert ids == list(dict.fromkeys(ids))

    def test_duplicate_id_keeps_first(self):
        builder = IndexBuilder()
        builder.add(record(1, ['手'], ['て'], [], [sense('hand')]))
        builder.add(record(1, ['足'], ['あし'], [], [sense('foot')]))
        index = builder.build()
        assert len(index) == 1
        assert index.get(1).headword == '手'
        assert '足' not in index.spelling_lookup

    def test_empty_input_fails(self):
        with pytest.raises(IndexBuildError):
            build_index([])
        with pytest.raises(IndexBuildError):
            build_index([{'seq': 1, 'k_ele': [], 'r_ele': []}])


class TestPersistence:

    def test_save_and_load(self, index, tmp_path):
        save_index(index, tmp_path)
        loaded = load_index(tmp_path)

        assert loaded.entries == index.entries
        assert loaded.spelling_lookup == index.spelling_lookup
        assert loaded.reading_lookup == index.reading_lookup
        assert loaded.char_lookup == index.char_lookup

    def test_loaded_index_resolves(self, index, tmp_path):
        save_index(index, tmp_path)
        loaded = load_index(tmp_path)
        assert loaded.resolve('できる').primary.headword == '出来る'
        assert loaded.get(1358900).senses[0].misc_tags == frozenset({'archaic'})

    def test_missing_index(self, tmp_path):
        with pytest.raises(IndexBuildError, match="goi-enrich build"):
            load_index(tmp_path / 'nowhere')

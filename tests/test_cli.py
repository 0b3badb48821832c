"""End-to-end tests for the command line."""

import json

import pytest

from goi_enrich.cli import build_parser, main, write_records
from goi_enrich.models import ProficiencyLevel, TargetWord

from test_sources import JMDICT_XML, KANJIDIC_XML


@pytest.fixture
def built_index(tmp_path):
    jmdict = tmp_path / 'JMdict_e.xml'
    kanjidic = tmp_path / 'kanjidic2.xml'
    jmdict.write_text(JMDICT_XML, encoding='utf-8')
    kanjidic.write_text(KANJIDIC_XML, encoding='utf-8')
    index_dir = tmp_path / 'index'

    with pytest.raises(SystemExit) as exc:
        main(['--index-dir', str(index_dir), 'build',
              '--jmdict', str(jmdict), '--kanjidic', str(kanjidic), '--skip-tatoeba'])
    assert exc.value.code == 0
    return index_dir


def enrich_args(index_dir, tmp_path, *extra):
    return ['--index-dir', str(index_dir), 'enrich',
            '--word-lists', str(tmp_path / 'jlpt'),
            '--pitch', str(tmp_path / 'pitch.json'),
            *extra]


def test_parser_defaults():
    args = build_parser().parse_args(['enrich', '食べる'])
    assert args.words == ['食べる']
    assert not args.json
    assert args.workers == 4
    assert args.top is None


def test_enrich_json(built_index, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(enrich_args(built_index, tmp_path, '--json', '--level', 'N5', '食べる'))
    assert exc.value.code == 0

    data = json.loads(capsys.readouterr().out)
    assert data['word'] == '食べる'
    assert data['level'] == 'N5'
    assert data['conjugation']['past'] == '食べた'
    assert [s['glosses'] for s in data['senses']] == [['to eat']]
    assert data['examples'] == []


def test_enrich_writes_files(built_index, tmp_path):
    output = tmp_path / 'dist'
    with pytest.raises(SystemExit) as exc:
        main(enrich_args(built_index, tmp_path, '--output', str(output), '手', '存在しない'))
    assert exc.value.code == 0

    data = json.loads((output / '手.json').read_text(encoding='utf-8'))
    assert data['reading'] == 'て'
    assert not (output / '存在しない.json').exists()


def test_enrich_nothing_found(built_index, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(enrich_args(built_index, tmp_path, '存在しない'))
    assert exc.value.code == 1
    assert '存在しない' in capsys.readouterr().err


def test_missing_index(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(enrich_args(tmp_path / 'nowhere', tmp_path, '食べる'))
    assert exc.value.code == 1
    assert 'Error:' in capsys.readouterr().err


def test_enrich_top_by_frequency(built_index, tmp_path):
    output = tmp_path / 'dist'
    with pytest.raises(SystemExit) as exc:
        main(enrich_args(built_index, tmp_path, '--top', '1', '--output', str(output)))
    assert exc.value.code == 0

    # 食べる (nf02) outranks 手 (ichi1 only)
    assert [p.name for p in output.iterdir()] == ['食べる.json']


def test_enrich_top_with_list_meaning(built_index, tmp_path, capsys):
    word_lists = tmp_path / 'jlpt'
    word_lists.mkdir()
    (word_lists / 'n5.json').write_text(json.dumps([
        {'word': '手', 'reading': 'て', 'meaning': 'tangan'},
    ], ensure_ascii=False), encoding='utf-8')

    with pytest.raises(SystemExit) as exc:
        main(enrich_args(built_index, tmp_path, '--json', '--top', '2'))
    assert exc.value.code == 0

    out = capsys.readouterr().out
    assert '"list_gloss": "tangan"' in out
    assert '"word": "食べる"' in out


def test_files_named_after_target_word(enricher, tmp_path):
    targets = [TargetWord('できる', ProficiencyLevel.N5), TargetWord('出来る', ProficiencyLevel.N5)]
    result = enricher.enrich_batch(targets, workers=1)
    write_records(result.records, tmp_path / 'dist')

    names = sorted(p.name for p in (tmp_path / 'dist').iterdir())
    assert names == ['できる.json', '出来る.json']
    for name in names:
        data = json.loads((tmp_path / 'dist' / name).read_text(encoding='utf-8'))
        assert data['word'] == '出来る'

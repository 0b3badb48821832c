"""
Readers for the raw data sources.

- JMdict XML -> raw records for IndexBuilder
- KANJIDIC2 XML -> KanjiInfo by character
- Tatoeba sentences + links -> SentencePair list
- JLPT word lists -> TargetWord list

Downloading and decompressing the archives is done elsewhere; these
readers expect the extracted files.
"""

import csv
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

from lxml import etree

from goi_enrich.constants import KANJIDIC_JLPT_TO_RANK
from goi_enrich.exceptions import IndexBuildError
from goi_enrich.models import KanjiInfo, ProficiencyLevel, SentencePair, TargetWord

logger = logging.getLogger(__name__)

# Tatoeba rows can be long
csv.field_size_limit(min(sys.maxsize, 2**31 - 1))


def node_text(elem) -> str:
    """Get all text from element."""
    return ''.join(elem.itertext())


def _require(path: Path) -> Path:
    path = Path(path)
    if not path.exists():
        raise IndexBuildError(f"Required input not found: {path}")
    return path


def _iterparse(path: Path, tag: str):
    return etree.iterparse(
        str(path),
        events=('end',),
        tag=tag,
        recover=True,
        load_dtd=True,
        no_network=True,
        resolve_entities=True,
        huge_tree=True,
    )


def _release(elem) -> None:
    elem.clear()
    while elem.getprevious() is not None:
        del elem.getparent()[0]


# ============================================================================
# JMdict
# ============================================================================

def _element_record(elem) -> Dict[str, Any]:
    def texts(parent, name):
        return [node_text(e) for e in parent.findall(name)]

    return {
        'seq': node_text(elem.find('ent_seq')) if elem.find('ent_seq') is not None else None,
        'k_ele': [
            {'keb': node_text(k.find('keb')), 'ke_pri': texts(k, 'ke_pri')}
            for k in elem.findall('k_ele') if k.find('keb') is not None
        ],
        'r_ele': [
            {'reb': node_text(r.find('reb')), 're_pri': texts(r, 're_pri')}
            for r in elem.findall('r_ele') if r.find('reb') is not None
        ],
        'sense': [
            {
                'pos': texts(s, 'pos'),
                'gloss': texts(s, 'gloss'),
                'misc': texts(s, 'misc'),
                'field': texts(s, 'field'),
            }
            for s in elem.findall('sense')
        ],
    }


def parse_jmdict(xml_path: Path) -> Iterator[Dict[str, Any]]:
    """
    Stream raw records out of JMdict XML.

    Entities declared in the DTD (&v1;, &arch;, ...) are expanded to their
    text by the parser.

    Raises:
        IndexBuildError: If the file does not exist
    """
    xml_path = _require(xml_path)
    logger.info(f"Parsing JMdict entries from {xml_path}...")

    count = 0
    for _, elem in _iterparse(xml_path, 'entry'):
        yield _element_record(elem)
        count += 1
        if count % 10000 == 0:
            logger.info(f"  Parsed {count} entries...")
        _release(elem)

    logger.info(f"Parsed {count} JMdict entries")


# ============================================================================
# KANJIDIC2
# ============================================================================

def _int_or_none(text: Optional[str]) -> Optional[int]:
    try:
        return int(text) if text else None
    except ValueError:
        return None


def _kanji_from_element(elem) -> KanjiInfo:
    literal = node_text(elem.find('literal'))
    info = KanjiInfo(character=literal)

    misc = elem.find('misc')
    if misc is not None:
        strokes = misc.findall('stroke_count')
        if strokes:
            info.stroke_count = _int_or_none(node_text(strokes[0]))
        grade = misc.find('grade')
        info.grade = _int_or_none(node_text(grade)) if grade is not None else None
        jlpt = misc.find('jlpt')
        old_level = _int_or_none(node_text(jlpt)) if jlpt is not None else None
        info.level = ProficiencyLevel.parse(KANJIDIC_JLPT_TO_RANK.get(old_level))
        freq = misc.find('freq')
        info.frequency = _int_or_none(node_text(freq)) if freq is not None else None

    for group in elem.iterfind('reading_meaning/rmgroup'):
        for reading in group.findall('reading'):
            r_type = reading.get('r_type')
            if r_type == 'ja_on':
                info.on_readings.append(node_text(reading))
            elif r_type == 'ja_kun':
                info.kun_readings.append(node_text(reading))
        for meaning in group.findall('meaning'):
            if meaning.get('m_lang') in (None, 'en'):
                info.meanings.append(node_text(meaning))

    return info


def parse_kanjidic2(xml_path: Path) -> Dict[str, KanjiInfo]:
    """
    Parse KANJIDIC2 into KanjiInfo keyed by character.

    Old JLPT levels (1-4) are mapped to N-levels: 4->N5, 3->N4, 2->N2, 1->N1.

    Raises:
        IndexBuildError: If the file does not exist
    """
    xml_path = _require(xml_path)
    logger.info(f"Parsing KANJIDIC2 from {xml_path}...")

    kanji: Dict[str, KanjiInfo] = {}
    for _, elem in _iterparse(xml_path, 'character'):
        info = _kanji_from_element(elem)
        if info.character:
            kanji[info.character] = info
        _release(elem)

    logger.info(f"Parsed {len(kanji)} kanji")
    return kanji


def _kanji_to_json(info: KanjiInfo) -> Dict[str, Any]:
    return {
        'character': info.character,
        'meanings': info.meanings,
        'onyomi': info.on_readings,
        'kunyomi': info.kun_readings,
        'strokeCount': info.stroke_count,
        'grade': info.grade,
        'jlpt': info.level.name if info.level else None,
        'frequency': info.frequency,
    }


def kanji_from_mapping(data: Mapping[str, Any]) -> KanjiInfo:
    return KanjiInfo(
        character=data['character'],
        meanings=list(data.get('meanings') or []),
        on_readings=list(data.get('onyomi') or []),
        kun_readings=list(data.get('kunyomi') or []),
        stroke_count=data.get('strokeCount'),
        grade=data.get('grade'),
        level=ProficiencyLevel.parse(data.get('jlpt')),
        frequency=data.get('frequency'),
    )


def save_kanji_table(kanji: Mapping[str, KanjiInfo], path: Path) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump({c: _kanji_to_json(k) for c, k in kanji.items()}, f, ensure_ascii=False)
    logger.info(f"Saved {len(kanji)} kanji to {path}")


def load_kanji_table(path: Path) -> Dict[str, KanjiInfo]:
    """
    Load the kanji table written by save_kanji_table.

    Raises:
        IndexBuildError: If the file is missing or unreadable
    """
    path = _require(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return {c: kanji_from_mapping(d) for c, d in json.load(f).items()}
    except (OSError, ValueError, KeyError) as e:
        raise IndexBuildError(f"Could not read kanji table {path}: {e}") from e


# ============================================================================
# Tatoeba
# ============================================================================

def _read_sentences(path: Path) -> Dict[str, str]:
    sentences = {}
    with open(path, 'r', encoding='utf-8', newline='') as f:
        reader = csv.reader(f, delimiter='\t', quoting=csv.QUOTE_NONE)
        for row in reader:
            if len(row) >= 3 and row[0] and row[2]:
                sentences[row[0]] = row[2]
    return sentences


def link_tatoeba(directory: Path) -> Optional[List[SentencePair]]:
    """
    Build Japanese-English pairs from a Tatoeba export.

    Expects jpn_sentences.tsv, eng_sentences.tsv and links.csv in the
    directory.

    Returns:
        Sentence pairs in link order, or None if the export is absent
        (examples are then disabled for the run)
    """
    directory = Path(directory)
    jpn_path = directory / 'jpn_sentences.tsv'
    eng_path = directory / 'eng_sentences.tsv'
    links_path = directory / 'links.csv'

    if not (jpn_path.exists() and eng_path.exists() and links_path.exists()):
        logger.info(f"Tatoeba data not found in {directory}; examples disabled")
        return None

    jpn = _read_sentences(jpn_path)
    eng = _read_sentences(eng_path)
    logger.info(f"  {len(jpn)} Japanese and {len(eng)} English sentences")

    pairs = []
    # Tatoeba lists every link in both directions
    seen = set()
    with open(links_path, 'r', encoding='utf-8', newline='') as f:
        for row in csv.reader(f, delimiter='\t', quoting=csv.QUOTE_NONE):
            if len(row) < 2:
                continue
            first, second = row[0], row[1]
            if first in jpn and second in eng:
                key = (first, second)
            elif second in jpn and first in eng:
                key = (second, first)
            else:
                continue
            if key not in seen:
                seen.add(key)
                pairs.append(SentencePair(jpn[key[0]], eng[key[1]]))

    logger.info(f"  {len(pairs)} Japanese-English pairs")
    return pairs


def save_sentence_pairs(pairs: List[SentencePair], path: Path) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump([{'japanese': p.source, 'english': p.target} for p in pairs], f, ensure_ascii=False)


def load_sentence_pairs(path: Path) -> Optional[List[SentencePair]]:
    """Load saved pairs, or None if the file is absent."""
    path = Path(path)
    if not path.exists():
        logger.info(f"Sentence corpus not found at {path}; examples disabled")
        return None
    with open(path, 'r', encoding='utf-8') as f:
        pairs = [SentencePair(d['japanese'], d['english']) for d in json.load(f)]
    logger.info(f"Sentence corpus: {len(pairs)} pairs")
    return pairs


# ============================================================================
# JLPT Word Lists
# ============================================================================

def load_word_lists(directory: Path) -> List[TargetWord]:
    """
    Load n5.json .. n1.json word lists, easiest level first.

    Each file is a JSON array of {"word", "reading", "meaning"} objects.
    Missing level files are skipped.
    """
    directory = Path(directory)
    words = []
    for level in ProficiencyLevel:
        path = directory / f"{level.name.lower()}.json"
        if not path.exists():
            continue
        with open(path, 'r', encoding='utf-8') as f:
            for item in json.load(f):
                if not item.get('word'):
                    continue
                words.append(TargetWord(
                    word=item['word'],
                    level=level,
                    reading=item.get('reading', ''),
                    meaning=item.get('meaning', ''),
                ))
    logger.info(f"Loaded {len(words)} words from {directory}")
    return words


def level_map(words: List[TargetWord]) -> Dict[str, ProficiencyLevel]:
    """word -> level; the first (easiest) listing wins."""
    levels: Dict[str, ProficiencyLevel] = {}
    for target in words:
        if target.level is not None:
            levels.setdefault(target.word, target.level)
    return levels

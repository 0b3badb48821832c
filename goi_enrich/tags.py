"""
Learning tags for goi-enrich.

Deterministic tags from JLPT level, kanji grades and POS:
difficulty band, broad word type, register and an irregular-verb flag.
"""

import re
from typing import Dict, Iterable, List, Optional

from goi_enrich.models import KanjiInfo, ProficiencyLevel, Sense, WordTags
from goi_enrich.senses import tag_matches

LITERARY_MISC = ('archaic', 'obsolete', 'literary', 'poetical')

LEVEL_DIFFICULTY: Dict[ProficiencyLevel, str] = {
    ProficiencyLevel.N5: 'basic',
    ProficiencyLevel.N4: 'basic',
    ProficiencyLevel.N3: 'intermediate',
    ProficiencyLevel.N2: 'advanced',
    ProficiencyLevel.N1: 'advanced',
}

# (word type, needles) in order; adverb comes before verb since
# "adverb" contains "verb"
WORD_TYPES = (
    ('adverb', ('adverb',)),
    ('verb', ('verb',)),
    ('adjective', ('i-adjective', 'adjective (keiyoushi)', 'adjectival noun', 'keiyodoshi')),
    ('interjection', ('interjection',)),
    ('particle', ('particle',)),
    ('noun', ('noun',)),
)

# (register, needles) in order
REGISTERS = (
    ('formal', ('formal', 'polite')),
    ('literary', ('literary', 'poetical')),
    ('slang', ('slang', 'colloquial', 'familiar')),
)

IRREGULAR_POS = re.compile(r'suru verb|Kuru verb|Iku/Yuku special class', re.IGNORECASE)


def difficulty_band(
    level: Optional[ProficiencyLevel],
    kanji: List[KanjiInfo],
    senses: Iterable[Sense],
) -> str:
    """
    'literary' for archaic or literary senses, or for words with no level
    whose kanji are all ungraded; otherwise mapped from the JLPT level.
    """
    for sense in senses:
        if tag_matches(sense.misc_tags, LITERARY_MISC):
            return 'literary'

    if kanji and level is None and all(not k.grade for k in kanji):
        return 'literary'

    return LEVEL_DIFFICULTY.get(level, 'advanced')


def word_type(pos_tags: Iterable[str]) -> str:
    for tag in pos_tags:
        for name, needles in WORD_TYPES:
            if tag_matches((tag,), needles):
                return name
    return 'other'


def register(senses: Iterable[Sense]) -> str:
    for sense in senses:
        for name, needles in REGISTERS:
            if tag_matches(sense.misc_tags, needles):
                return name
    return 'neutral'


def is_irregular(pos_tags: Iterable[str]) -> bool:
    return any(IRREGULAR_POS.search(tag) for tag in pos_tags)


def build_tags(
    pos_tags: List[str],
    level: Optional[ProficiencyLevel],
    kanji: List[KanjiInfo],
    senses: List[Sense],
) -> WordTags:
    """
    Generate learning tags for a word.

    Args:
        pos_tags: POS tags of the filtered senses
        level: JLPT level of the word
        kanji: Kanji metadata for the word's kanji
        senses: Filtered senses
    """
    return WordTags(
        difficulty_band=difficulty_band(level, kanji, senses),
        word_type=word_type(pos_tags),
        register=register(senses),
        is_irregular=is_irregular(pos_tags),
    )

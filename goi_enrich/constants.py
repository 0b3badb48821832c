"""
Constants for goi-enrich.

Thresholds used by the derivation pipeline and the JMdict entity tables
used to expand short tag codes into the text JMdict ships in its DTD.
"""

import re
from typing import Dict, List, Pattern, Tuple


# ============================================================================
# JMdict Entity Expansion
# ============================================================================
# When JMdict is parsed with its DTD, entities such as &v1; arrive expanded
# ("Ichidan verb"). Hand-made records and some converted dumps carry the short
# codes instead. The index stores the expanded text so every matcher below
# only deals with one spelling of a tag.

POS_ENTITIES: Dict[str, str] = {
    'n': 'noun (common) (futsuumeishi)',
    'n-adv': 'adverbial noun (fukushitekimeishi)',
    'n-pref': 'noun, used as a prefix',
    'n-suf': 'noun, used as a suffix',
    'n-t': 'noun (temporal) (jisoumeishi)',
    'pn': 'pronoun',
    'adj-i': 'adjective (keiyoushi)',
    'adj-ix': 'adjective (keiyoushi) - yoi/ii class',
    'adj-na': 'adjectival nouns or quasi-adjectives (keiyodoshi)',
    'adj-no': "nouns which may take the genitive case particle 'no'",
    'adj-pn': 'pre-noun adjectival (rentaishi)',
    'adj-t': "'taru' adjective",
    'adj-f': 'noun or verb acting prenominally',
    'adv': 'adverb (fukushi)',
    'adv-to': "adverb taking the 'to' particle",
    'aux': 'auxiliary',
    'aux-v': 'auxiliary verb',
    'aux-adj': 'auxiliary adjective',
    'conj': 'conjunction',
    'cop': 'copula',
    'ctr': 'counter',
    'exp': 'expressions (phrases, clauses, etc.)',
    'int': 'interjection (kandoushi)',
    'pref': 'prefix',
    'prt': 'particle',
    'suf': 'suffix',
    'unc': 'unclassified',
    'v1': 'Ichidan verb',
    'v1-s': 'Ichidan verb - kureru special class',
    'v5aru': 'Godan verb - -aru special class',
    'v5b': "Godan verb with 'bu' ending",
    'v5g': "Godan verb with 'gu' ending",
    'v5k': "Godan verb with 'ku' ending",
    'v5k-s': 'Godan verb - Iku/Yuku special class',
    'v5m': "Godan verb with 'mu' ending",
    'v5n': "Godan verb with 'nu' ending",
    'v5r': "Godan verb with 'ru' ending",
    'v5r-i': "Godan verb with 'ru' ending (irregular verb)",
    'v5s': "Godan verb with 'su' ending",
    'v5t': "Godan verb with 'tsu' ending",
    'v5u': "Godan verb with 'u' ending",
    'v5u-s': "Godan verb with 'u' ending (special class)",
    'vi': 'intransitive verb',
    'vt': 'transitive verb',
    'vk': 'Kuru verb - special class',
    'vs': 'noun or participle which takes the aux. verb suru',
    'vs-i': 'suru verb - included',
    'vs-s': 'suru verb - special class',
    'vz': 'Ichidan verb - zuru verb (alternative form of -jiru verbs)',
}

MISC_ENTITIES: Dict[str, str] = {
    'arch': 'archaic',
    'obs': 'obsolete term',
    'rare': 'rare term',
    'vulg': 'vulgar expression or word',
    'X': 'rude or X-rated term (not displayed in educational software)',
    'derog': 'derogatory',
    'sens': 'sensitive',
    'id': 'idiomatic expression',
    'proverb': 'proverb',
    'yoji': 'yojijukugo',
    'uk': 'word usually written using kana alone',
    'col': 'colloquial',
    'sl': 'slang',
    'fam': 'familiar language',
    'hon': 'honorific or respectful (sonkeigo) language',
    'hum': 'humble (kenjougo) language',
    'pol': 'polite (teineigo) language',
    'form': 'formal or literary term',
    'poet': 'poetical term',
    'abbr': 'abbreviation',
    'on-mim': 'onomatopoeic or mimetic word',
}


# ============================================================================
# Proficiency Levels
# ============================================================================

BEGINNER_MIN_RANK = 4           # ranks 5 and 4 (N5, N4)
INTERMEDIATE_RANK = 3           # N3

# Old KANJIDIC2 JLPT levels (1-4) to modern N-level ranks.
# There is no old level for N3.
KANJIDIC_JLPT_TO_RANK: Dict[int, int] = {4: 5, 3: 4, 2: 2, 1: 1}


# ============================================================================
# Sense Filtering
# ============================================================================

INAPPROPRIATE_MISC: Tuple[str, ...] = (
    'vulgar',
    'crude',
    'obscene',
    'derogatory',
    'archaic',
    'obsolete',
)

INAPPROPRIATE_MEANINGS: List[Pattern[str]] = [
    re.compile(r'\borgasm\b', re.IGNORECASE),
    re.compile(r'\bsexual(ly)?\b', re.IGNORECASE),
    re.compile(r'\berotic\b', re.IGNORECASE),
    re.compile(r'drug[- ]induced', re.IGNORECASE),
    re.compile(r'\bhallucination\b', re.IGNORECASE),
    re.compile(r'\bget pregnant\b', re.IGNORECASE),
    re.compile(r'\bintercourse\b', re.IGNORECASE),
    re.compile(r'\bcum\b', re.IGNORECASE),
    re.compile(r'\bget high\b', re.IGNORECASE),
]

MAX_SENSES_BEGINNER = 5
MAX_SENSES_INTERMEDIATE = 8
MAX_SENSES_ADVANCED = 12


# ============================================================================
# Frequency Ranks
# ============================================================================

NF_BUCKET_SIZE = 500
FALLBACK_PRIORITY_RANKS: Tuple[Tuple[str, int], ...] = (
    ('ichi1', 5000),
    ('ichi2', 10000),
    ('news1', 12000),
    ('news2', 20000),
    ('spec1', 25000),
    ('spec2', 30000),
)
UNKNOWN_FREQUENCY_RANK = 99999


# ============================================================================
# Related Vocabulary
# ============================================================================

NOISE_MAX_KANJI = 3             # 4+ ideographs is noise
NOISE_MAX_LENGTH = 6
NOISE_MISC: Tuple[str, ...] = ('archai', 'obsolete')

SCORE_SHARED_KANJI = 1
SCORE_SAME_LEVEL = 2
SCORE_FREQUENCY_PROXIMITY = 1
FREQUENCY_PROXIMITY = 3000
SCORE_SHARED_POS = 2
PENALTY_NO_SHARED_POS = -1

RELATED_PRE_FILTER_LIMIT = 20
RELATED_LIMIT = 8
LEVEL_BAND = 1


# ============================================================================
# Idioms
# ============================================================================

IDIOM_MISC: Tuple[str, ...] = (
    'idiom',
    'proverb',
    'expression',
    'yojijukugo',
    'four-character idiom',
    'four-character-idiom',
)

# (type, needles) checked in order for each tag
IDIOM_TYPES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ('proverb', ('proverb',)),
    ('yojijukugo', ('yojijukugo', 'four-character idiom', 'four-character-idiom')),
    ('idiom', ('idiom',)),
)
DEFAULT_IDIOM_TYPE = 'expression'

SCORE_IDIOM_CONTAINS = 10
SCORE_IDIOM_SHORT = 2           # length <= 6
SCORE_IDIOM_MEDIUM = 1          # length <= 10
SCORE_IDIOM_PRIORITY = 5
IDIOM_LIMIT = 10


# ============================================================================
# Example Sentences
# ============================================================================

EXAMPLE_CANDIDATE_CAP = 6
EXAMPLE_MAX_LENGTH = 30
EXAMPLE_LIMIT = 3

# rank -> highest school grade allowed; ranks not listed are unrestricted
EXAMPLE_GRADE_CEILING: Dict[int, int] = {5: 2, 4: 2, 3: 4, 2: 6}

"""
Idiom and proverb extraction for goi-enrich.

Finds dictionary entries that contain the target word and are tagged as
idioms, proverbs, yojijukugo or set expressions.
"""

from typing import Iterable, List

from goi_enrich.constants import (
    DEFAULT_IDIOM_TYPE,
    IDIOM_LIMIT,
    IDIOM_MISC,
    IDIOM_TYPES,
    INAPPROPRIATE_MISC,
    SCORE_IDIOM_CONTAINS,
    SCORE_IDIOM_MEDIUM,
    SCORE_IDIOM_PRIORITY,
    SCORE_IDIOM_SHORT,
)
from goi_enrich.dictionary import Index
from goi_enrich.models import Entry, Idiom
from goi_enrich.senses import tag_matches


def is_idiomatic(entry: Entry) -> bool:
    """True if any sense carries an idiom-like misc tag."""
    return any(tag_matches(sense.misc_tags, IDIOM_MISC) for sense in entry.senses)


def is_unsuitable(entry: Entry) -> bool:
    """
    True if any sense is vulgar, derogatory, archaic or obsolete.

    JMdict spells the vulg tag "vulgar expression or word", which would
    otherwise pass as an expression.
    """
    return any(tag_matches(sense.misc_tags, INAPPROPRIATE_MISC) for sense in entry.senses)


def classify_idiom(entry: Entry) -> str:
    """
    Pick the idiom type from the first sense that classifies it.

    Within a sense the tags are checked against proverb, yojijukugo and
    idiom in that order. Entries matched only through the generic
    "expression" tag stay "expression".
    """
    for sense in entry.senses:
        for idiom_type, needles in IDIOM_TYPES:
            if tag_matches(sense.misc_tags, needles):
                return idiom_type
    return DEFAULT_IDIOM_TYPE


def score_idiom(entry: Entry, word: str) -> int:
    """Containment, brevity and commonness bonuses."""
    score = 0
    headword = entry.headword

    if word in headword:
        score += SCORE_IDIOM_CONTAINS

    if len(headword) <= 6:
        score += SCORE_IDIOM_SHORT
    elif len(headword) <= 10:
        score += SCORE_IDIOM_MEDIUM

    if entry.priority_tags:
        score += SCORE_IDIOM_PRIORITY

    return score


def idiom_candidates(index: Index, word: str, exclude: Iterable[int]) -> List[int]:
    """
    Candidate ids: the reverse kanji index over the word's characters plus
    a scan of every headword containing the word. Deduplicated, first-seen
    order, matched ids removed.
    """
    excluded = set(exclude)
    candidates = dict.fromkeys(index.entries_with_kanji(word, exclude=excluded))
    for entry in index:
        if entry.id not in excluded and word in entry.headword:
            candidates.setdefault(entry.id, None)
    return list(candidates)


def extract_idioms(index: Index, word: str, exclude: Iterable[int]) -> List[Idiom]:
    """
    Extract idioms containing a word.

    Args:
        index: Dictionary index
        word: Target word (e.g. 手)
        exclude: Entry ids matched by the target word itself

    Returns:
        Up to 10 idioms, best first
    """
    if not word:
        return []

    scored = []
    for entry_id in idiom_candidates(index, word, exclude):
        entry = index.get(entry_id)
        if entry is None:
            continue
        if word not in entry.headword or not is_idiomatic(entry):
            continue
        if is_unsuitable(entry):
            continue
        scored.append((score_idiom(entry, word), entry))

    scored.sort(key=lambda item: -item[0])

    return [
        Idiom(
            word=entry.headword,
            reading=entry.primary_reading,
            gloss=entry.primary_gloss,
            type=classify_idiom(entry),
        )
        for _, entry in scored[:IDIOM_LIMIT]
    ]

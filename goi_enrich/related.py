"""
Related vocabulary for goi-enrich.

Finds entries that share a kanji with the source word through the reverse
character index, drops structurally noisy candidates, scores the rest and
keeps only words within one JLPT band of the source.
"""

from typing import Iterable, List, Mapping, Optional, Set

from goi_enrich.characters import count_kanji, is_kanji, kanji_in
from goi_enrich.constants import (
    FREQUENCY_PROXIMITY,
    LEVEL_BAND,
    NOISE_MAX_KANJI,
    NOISE_MAX_LENGTH,
    NOISE_MISC,
    PENALTY_NO_SHARED_POS,
    RELATED_LIMIT,
    RELATED_PRE_FILTER_LIMIT,
    SCORE_FREQUENCY_PROXIMITY,
    SCORE_SAME_LEVEL,
    SCORE_SHARED_KANJI,
    SCORE_SHARED_POS,
)
from goi_enrich.dictionary import Index, frequency_rank, sort_rank
from goi_enrich.models import Entry, KanjiInfo, ProficiencyLevel, RelatedWord
from goi_enrich.senses import tag_matches


def is_noise(entry: Entry, kanji: Mapping[str, KanjiInfo]) -> bool:
    """
    Check if a candidate is too obscure to suggest.

    Noise is anything with 4+ kanji, an archaic or obsolete sense, a
    headword longer than 6 characters, or a kanji that is unknown or has
    neither a school grade nor a JLPT level.
    """
    word = entry.headword

    if count_kanji(word) > NOISE_MAX_KANJI:
        return True

    for sense in entry.senses:
        if tag_matches(sense.misc_tags, NOISE_MISC):
            return True

    if len(word) > NOISE_MAX_LENGTH:
        return True

    for char in word:
        if is_kanji(char):
            info = kanji.get(char)
            if info is None or not info.is_graded:
                return True

    return False


def score_candidate(
    candidate: Entry,
    source_kanji: Set[str],
    source_level: Optional[ProficiencyLevel],
    source_frequency: Optional[int],
    source_pos: Set[str],
    levels: Mapping[str, ProficiencyLevel],
) -> int:
    """
    Score a related-word candidate; higher is better.

    +1 per candidate kanji found in the source word, +2 for the same JLPT
    level, +1 when both frequency ranks are known and close, and a flat +2
    once any POS tag is shared (-1 when none is).
    """
    score = 0
    word = candidate.headword

    for char in word:
        if char in source_kanji:
            score += SCORE_SHARED_KANJI

    candidate_level = levels.get(word)
    if candidate_level is not None and source_level is not None and candidate_level == source_level:
        score += SCORE_SAME_LEVEL

    candidate_frequency = frequency_rank(candidate.priority_tags)
    if (
        candidate_frequency is not None
        and source_frequency is not None
        and abs(candidate_frequency - source_frequency) < FREQUENCY_PROXIMITY
    ):
        score += SCORE_FREQUENCY_PROXIMITY

    for pos in candidate.pos_tags:
        if pos in source_pos:
            score += SCORE_SHARED_POS
            break
    else:
        score += PENALTY_NO_SHARED_POS

    return score


def within_band(
    word: str,
    source_level: Optional[ProficiencyLevel],
    levels: Mapping[str, ProficiencyLevel],
) -> bool:
    """True if word has a known level at most one band from the source."""
    level = levels.get(word)
    if level is None or source_level is None:
        return False
    return abs(level.rank - source_level.rank) <= LEVEL_BAND


def find_related(
    index: Index,
    source: Entry,
    exclude: Iterable[int],
    kanji: Mapping[str, KanjiInfo],
    levels: Mapping[str, ProficiencyLevel],
    source_level: Optional[ProficiencyLevel],
) -> List[RelatedWord]:
    """
    Find related vocabulary for a source entry.

    Args:
        index: Dictionary index
        source: Primary entry of the target word
        exclude: Entry ids matched by the target word itself
        kanji: Kanji metadata by character
        levels: JLPT level by word
        source_level: Level of the target word

    Returns:
        Up to 8 related words, best first
    """
    source_kanji = set(kanji_in(source.headword))
    if not source_kanji:
        return []

    excluded = set(exclude)
    excluded.add(source.id)
    source_frequency = frequency_rank(source.priority_tags)
    source_pos = set(source.pos_tags)

    scored = []
    for entry_id in index.entries_with_kanji(kanji_in(source.headword), exclude=excluded):
        candidate = index.get(entry_id)
        if candidate is None or is_noise(candidate, kanji):
            continue
        score = score_candidate(candidate, source_kanji, source_level, source_frequency, source_pos, levels)
        if score > 0:
            scored.append((score, candidate))

    scored.sort(key=lambda item: (-item[0], sort_rank(item[1])))

    related = []
    for _, candidate in scored[:RELATED_PRE_FILTER_LIMIT]:
        if not within_band(candidate.headword, source_level, levels):
            continue
        related.append(RelatedWord(
            word=candidate.headword,
            reading=candidate.primary_reading,
            gloss=candidate.primary_gloss,
        ))
        if len(related) >= RELATED_LIMIT:
            break

    return related

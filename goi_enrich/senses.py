"""
Sense filtering for goi-enrich.

Removes vulgar, archaic and level-inappropriate senses and caps how many
senses a word keeps. Filtering is pure and keeps dictionary order.
"""

from typing import Iterable, List, Optional

from goi_enrich.constants import (
    BEGINNER_MIN_RANK,
    INAPPROPRIATE_MEANINGS,
    INAPPROPRIATE_MISC,
    INTERMEDIATE_RANK,
    MAX_SENSES_ADVANCED,
    MAX_SENSES_BEGINNER,
    MAX_SENSES_INTERMEDIATE,
)
from goi_enrich.models import ProficiencyLevel, Sense, level_rank


def tag_matches(tags: Iterable[str], needles: Iterable[str]) -> bool:
    """Case-insensitive substring match of any needle in any tag."""
    needles = tuple(needles)
    for tag in tags:
        lower = tag.lower()
        if any(needle in lower for needle in needles):
            return True
    return False


def max_senses(level: Optional[ProficiencyLevel]) -> int:
    """Sense cap for a level: 5 for N5/N4, 8 for N3, 12 otherwise."""
    rank = level_rank(level)
    if rank >= BEGINNER_MIN_RANK:
        return MAX_SENSES_BEGINNER
    if rank == INTERMEDIATE_RANK:
        return MAX_SENSES_INTERMEDIATE
    return MAX_SENSES_ADVANCED


def is_inappropriate(sense: Sense, level: Optional[ProficiencyLevel]) -> bool:
    if tag_matches(sense.misc_tags, INAPPROPRIATE_MISC):
        return True
    if level_rank(level) >= BEGINNER_MIN_RANK:
        meanings = ' '.join(sense.glosses)
        if any(pattern.search(meanings) for pattern in INAPPROPRIATE_MEANINGS):
            return True
    return False


def filter_senses(senses: Iterable[Sense], level: Optional[ProficiencyLevel]) -> List[Sense]:
    """
    Filter senses for a proficiency level.

    Args:
        senses: Senses in dictionary order
        level: Level of the target word, or None if unknown

    Returns:
        Surviving senses, order preserved. Empty means the word is
        unusable at this level.
    """
    kept = [s for s in senses if not is_inappropriate(s, level)]
    return kept[:max_senses(level)]

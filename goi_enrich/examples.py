"""
Example sentence selection for goi-enrich.

A single pass over the corpus collects a few candidate sentences for each
target word; a per-word filter then keeps short sentences whose kanji a
learner at the word's level can read.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from goi_enrich.characters import is_kanji
from goi_enrich.constants import (
    EXAMPLE_CANDIDATE_CAP,
    EXAMPLE_GRADE_CEILING,
    EXAMPLE_LIMIT,
    EXAMPLE_MAX_LENGTH,
)
from goi_enrich.models import KanjiInfo, ProficiencyLevel, SentencePair, level_rank

logger = logging.getLogger(__name__)


def build_example_index(
    corpus: Iterable[SentencePair],
    words: Iterable[str],
    cap: int = EXAMPLE_CANDIDATE_CAP,
) -> Dict[str, List[SentencePair]]:
    """
    Collect candidate sentences for many words in one pass.

    A word stops being searched once it holds `cap` candidates, so the cost
    is bounded by the corpus size rather than corpus x words. Not
    re-entrant: run it once for the whole word set before filtering.

    Args:
        corpus: Sentence pairs in corpus order
        words: Target words
        cap: Candidates kept per word

    Returns:
        word -> candidate sentences in corpus order; words without a hit
        are absent
    """
    index: Dict[str, List[SentencePair]] = {}
    remaining = set(w for w in words if w)

    for pair in corpus:
        if not remaining:
            break

        retired = []
        for word in remaining:
            if word in pair.source:
                hits = index.setdefault(word, [])
                hits.append(pair)
                if len(hits) >= cap:
                    retired.append(word)
        remaining.difference_update(retired)

    logger.info(f"Examples found for {len(index)} words")
    return index


def grade_ceiling(level: Optional[ProficiencyLevel]) -> Optional[int]:
    """Highest school grade allowed in examples, None if unrestricted."""
    return EXAMPLE_GRADE_CEILING.get(level_rank(level))


def is_readable(
    sentence: str,
    level: Optional[ProficiencyLevel],
    kanji: Mapping[str, KanjiInfo],
) -> bool:
    """Check the length budget and the kanji grade ceiling."""
    if len(sentence) > EXAMPLE_MAX_LENGTH:
        return False

    ceiling = grade_ceiling(level)
    if ceiling is None:
        return True

    for char in sentence:
        if not is_kanji(char):
            continue
        info = kanji.get(char)
        # Ungraded or unknown kanji are not held against the sentence
        if info is not None and info.grade and info.grade > ceiling:
            return False
    return True


def filter_examples(
    candidates: Iterable[SentencePair],
    level: Optional[ProficiencyLevel],
    kanji: Mapping[str, KanjiInfo],
    limit: int = EXAMPLE_LIMIT,
) -> List[SentencePair]:
    """
    Keep the first few candidates readable at a level.

    Returns:
        At most `limit` sentences in corpus order
    """
    kept = []
    for pair in candidates:
        if is_readable(pair.source, level, kanji):
            kept.append(pair)
            if len(kept) >= limit:
                break
    return kept

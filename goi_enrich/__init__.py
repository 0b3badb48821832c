"""
goi-enrich: Japanese vocabulary enrichment

Builds reverse-lookup indices over JMdict once, then derives per-word
learning material: filtered definitions, related vocabulary, idioms,
verb conjugations, pitch accent and level-appropriate example sentences.

Basic Usage:
    import goi_enrich

    enricher = goi_enrich.load_enricher()
    record = enricher.enrich("食べる", goi_enrich.ProficiencyLevel.N5)
    print(record.conjugation.past)
"""

import logging
import time
from pathlib import Path
from typing import Optional

__version__ = "0.1.0"

from goi_enrich.conjugation import conjugate, detect_verb_class
from goi_enrich.dictionary import Index, IndexBuilder, build_index, load_index, save_index
from goi_enrich.exceptions import (
    EnrichmentError,
    IndexBuildError,
    UnusableWordError,
    WordNotFoundError,
)
from goi_enrich.models import (
    ConjugationForm,
    EnrichmentRecord,
    Entry,
    KanjiInfo,
    ProficiencyLevel,
    Sense,
    SentencePair,
    TargetWord,
    VerbClass,
)
from goi_enrich.pipeline import BatchResult, Enricher
from goi_enrich.pitch import PitchDictionary

logger = logging.getLogger(__name__)


def load_enricher(
    index_dir: Optional[Path] = None,
    pitch_path: Optional[Path] = None,
    word_list_dir: Optional[Path] = None,
    with_examples: bool = True,
) -> Enricher:
    """
    Load every saved index and return a ready Enricher.

    Args:
        index_dir: Directory written by build_indices (default settings.INDEX_DIR)
        pitch_path: pitch-accents.json (default settings.PITCH_PATH)
        word_list_dir: Directory of JLPT word lists (default settings.WORD_LIST_DIR)
        with_examples: Load the sentence corpus if it was built

    Raises:
        IndexBuildError: If the dictionary or kanji index is missing
    """
    from goi_enrich import settings
    from goi_enrich.build import KANJI_FILE, SENTENCES_FILE
    from goi_enrich.sources import level_map, load_kanji_table, load_sentence_pairs, load_word_lists

    index_dir = Path(index_dir or settings.INDEX_DIR)
    word_list_dir = Path(word_list_dir or settings.WORD_LIST_DIR)

    start = time.perf_counter()
    index = load_index(index_dir)
    kanji = load_kanji_table(index_dir / KANJI_FILE)
    words = load_word_lists(word_list_dir) if word_list_dir.exists() else []
    corpus = load_sentence_pairs(index_dir / SENTENCES_FILE) if with_examples else None
    pitch = PitchDictionary.from_file(pitch_path or settings.PITCH_PATH)
    logger.info(f"Indices loaded in {(time.perf_counter() - start) * 1000:.0f}ms")

    return Enricher(index=index, kanji=kanji, levels=level_map(words), pitch=pitch, corpus=corpus)


def get_version() -> str:
    """Get the library version."""
    return __version__


__all__ = [
    # Data classes
    "ConjugationForm",
    "EnrichmentRecord",
    "Entry",
    "KanjiInfo",
    "ProficiencyLevel",
    "Sense",
    "SentencePair",
    "TargetWord",
    "VerbClass",
    # Index
    "Index",
    "IndexBuilder",
    "build_index",
    "load_index",
    "save_index",
    # Enrichment
    "BatchResult",
    "Enricher",
    "PitchDictionary",
    "conjugate",
    "detect_verb_class",
    "load_enricher",
    "get_version",
    # Exceptions
    "EnrichmentError",
    "IndexBuildError",
    "UnusableWordError",
    "WordNotFoundError",
    # Version
    "__version__",
]

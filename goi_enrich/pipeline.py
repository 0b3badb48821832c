"""
Per-word enrichment pipeline.

An Enricher holds the read-only inputs (index, kanji table, level map,
pitch dictionary, sentence corpus) and derives one EnrichmentRecord per
target word. Nothing is mutated after construction, so words can be
enriched concurrently.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from goi_enrich.characters import is_kanji, romanize
from goi_enrich.conjugation import conjugate, detect_verb_class
from goi_enrich.dictionary import Index, Resolution, frequency_rank
from goi_enrich.examples import build_example_index, filter_examples
from goi_enrich.exceptions import EnrichmentError, UnusableWordError, WordNotFoundError
from goi_enrich.idioms import extract_idioms
from goi_enrich.models import (
    EnrichmentRecord,
    KanjiInfo,
    ProficiencyLevel,
    SentencePair,
    Sense,
    TargetWord,
)
from goi_enrich.pitch import PitchDictionary
from goi_enrich.related import find_related
from goi_enrich.senses import filter_senses
from goi_enrich.settings import DEFAULT_WORKERS
from goi_enrich.tags import build_tags

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """
    Records keyed by target word in input order, plus the words that were
    skipped and why. Two target words may share a headword (できる and
    出来る); each keeps its own record.
    """
    records: Dict[str, EnrichmentRecord] = field(default_factory=dict)
    skipped: Dict[str, str] = field(default_factory=dict)


class Enricher:
    """
    Derives enrichment records from shared, read-only inputs.

    Args:
        index: Dictionary index (required)
        kanji: Kanji metadata by character (required)
        levels: JLPT level by word, used for related-word scoring
        pitch: Pitch dictionary; empty or None disables pitch
        corpus: Sentence pairs; None disables examples
    """

    def __init__(
        self,
        index: Index,
        kanji: Mapping[str, KanjiInfo],
        levels: Optional[Mapping[str, ProficiencyLevel]] = None,
        pitch: Optional[PitchDictionary] = None,
        corpus: Optional[Sequence[SentencePair]] = None,
    ):
        self.index = index
        self.kanji = kanji
        self.levels = levels or {}
        self.pitch = pitch or PitchDictionary()
        self.corpus = corpus

    # ------------------------------------------------------------------
    # Single word
    # ------------------------------------------------------------------

    def _senses_for(self, resolution: Resolution) -> List[Sense]:
        """
        Senses shown for a word: every matched entry on a spelling match,
        only the primary entry on a reading-only match.
        """
        if not resolution.by_spelling:
            return list(resolution.primary.senses)
        senses = []
        for entry_id in resolution.matched_ids:
            entry = self.index.get(entry_id)
            if entry is not None:
                senses.extend(entry.senses)
        return senses

    def _kanji_for(self, word: str) -> List[KanjiInfo]:
        return [self.kanji[ch] for ch in word if is_kanji(ch) and ch in self.kanji]

    def enrich(
        self,
        word: str,
        level: Optional[ProficiencyLevel] = None,
        reading: str = '',
        meaning: str = '',
        example_candidates: Optional[Sequence[SentencePair]] = None,
    ) -> EnrichmentRecord:
        """
        Build the enrichment record for one word.

        Args:
            word: Target word as it appears in the word list
            level: Level of the word; looked up in the level map if omitted
            reading: Reading from the word list, used if the entry has none
            meaning: Meaning from the word list, kept as the record's list_gloss
            example_candidates: Pre-collected example candidates; when
                omitted and a corpus is loaded, the corpus is scanned for
                this word alone

        Raises:
            WordNotFoundError: If the word is not in the dictionary
            UnusableWordError: If every sense is filtered out
        """
        if level is None:
            level = self.levels.get(word)

        resolution = self.index.resolve(word)
        if resolution is None:
            raise WordNotFoundError(f"{word!r} not found in dictionary")

        senses = filter_senses(self._senses_for(resolution), level)
        if not senses:
            raise UnusableWordError(f"{word!r} has no senses suitable for {level.name if level else 'unknown level'}")

        primary = resolution.primary
        headword = primary.headword
        word_reading = primary.primary_reading or reading
        pos_tags = list(dict.fromkeys(p for s in senses for p in s.pos_tags))
        kanji = self._kanji_for(headword)

        verb_class = detect_verb_class(primary.pos_tags)
        conjugation = conjugate(headword, verb_class)
        reading_conjugation = None
        if verb_class is not None and word_reading and word_reading != headword:
            reading_conjugation = conjugate(word_reading, verb_class)

        if example_candidates is None and self.corpus is not None:
            example_candidates = build_example_index(self.corpus, [word]).get(word, [])

        return EnrichmentRecord(
            word=headword,
            reading=word_reading,
            romaji=romanize(word_reading),
            level=level,
            frequency=frequency_rank(primary.priority_tags),
            senses=senses,
            kanji=kanji,
            conjugation=conjugation,
            reading_conjugation=reading_conjugation,
            pitch=self.pitch.lookup(word_reading),
            related=find_related(self.index, primary, resolution.excluded, self.kanji, self.levels, level),
            idioms=extract_idioms(self.index, word, resolution.excluded),
            examples=filter_examples(example_candidates or [], level, self.kanji),
            tags=build_tags(pos_tags, level, kanji, senses),
            list_gloss=meaning,
        )

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def _enrich_target(
        self,
        target: TargetWord,
        examples: Optional[Dict[str, List[SentencePair]]],
    ) -> Tuple[TargetWord, Optional[EnrichmentRecord], Optional[str]]:
        candidates = examples.get(target.word, []) if examples is not None else None
        try:
            record = self.enrich(
                target.word, target.level, target.reading, target.meaning, example_candidates=candidates)
        except EnrichmentError as e:
            logger.info(f"Skipped {target.word}: {e}")
            return target, None, str(e)
        return target, record, None

    def enrich_batch(self, targets: Iterable[TargetWord], workers: int = DEFAULT_WORKERS) -> BatchResult:
        """
        Enrich many words.

        The example index is built first, in one single-threaded pass over
        the corpus; words are then enriched on a thread pool. Words that
        cannot be enriched are reported in BatchResult.skipped.
        """
        targets = list(targets)
        examples = None
        if self.corpus is not None:
            logger.info("Building examples index (one pass)...")
            examples = build_example_index(self.corpus, [t.word for t in targets])

        result = BatchResult()
        with ThreadPoolExecutor(max_workers=max(1, workers), thread_name_prefix="goi-enrich") as executor:
            for target, record, reason in executor.map(lambda t: self._enrich_target(t, examples), targets):
                if record is not None:
                    result.records[target.word] = record
                else:
                    result.skipped[target.word] = reason

        logger.info(f"Done. {len(result.records)} enriched, {len(result.skipped)} skipped")
        return result

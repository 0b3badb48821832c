"""
Index builder for goi-enrich.

Parses JMdict and KANJIDIC2 (and Tatoeba when present), builds the lookup
index and saves everything under one directory:

    spellings.trie, readings.trie, kanji_chars.trie, entries.json
    kanji.json
    tatoeba.json (optional)
"""

import logging
import time
from pathlib import Path
from typing import Optional

from goi_enrich.dictionary import Index, build_index, save_index
from goi_enrich.sources import link_tatoeba, parse_jmdict, parse_kanjidic2, save_kanji_table, save_sentence_pairs

logger = logging.getLogger(__name__)

KANJI_FILE = "kanji.json"
SENTENCES_FILE = "tatoeba.json"


def build_indices(
    jmdict_path: Path,
    kanjidic_path: Path,
    output_dir: Path,
    tatoeba_dir: Optional[Path] = None,
) -> Index:
    """
    Build and save every index.

    Raises:
        IndexBuildError: If JMdict or KANJIDIC2 is missing, or JMdict
            yields no entries
    """
    start = time.time()
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    index = build_index(parse_jmdict(jmdict_path))
    save_index(index, output_dir)

    kanji = parse_kanjidic2(kanjidic_path)
    save_kanji_table(kanji, output_dir / KANJI_FILE)

    if tatoeba_dir is not None:
        pairs = link_tatoeba(tatoeba_dir)
        if pairs is not None:
            save_sentence_pairs(pairs, output_dir / SENTENCES_FILE)

    logger.info(f"Build completed in {time.time() - start:.1f} seconds")
    return index

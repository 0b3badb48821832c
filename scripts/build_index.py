#!/usr/bin/env python3
"""
Index Builder for goi-enrich.

This script builds every index the enrichment pipeline reads: the
dictionary lookups (marisa_trie.RecordTrie files plus entries.json), the
kanji table and, when the Tatoeba export is present, the sentence corpus.

Usage:
    python scripts/build_index.py [--jmdict PATH] [--kanjidic PATH] [--tatoeba DIR] [--output DIR]

Same as `goi-enrich build`, without installing the console script.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from goi_enrich import settings
from goi_enrich.build import build_indices
from goi_enrich.exceptions import IndexBuildError

logging.basicConfig(level=logging.INFO, format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Build goi-enrich indices from JMdict, KANJIDIC2 and Tatoeba"
    )
    parser.add_argument(
        '--jmdict', '-j',
        type=Path,
        default=settings.JMDICT_PATH,
        help=f"Path to JMdict XML file (default: {settings.JMDICT_PATH})"
    )
    parser.add_argument(
        '--kanjidic', '-k',
        type=Path,
        default=settings.KANJIDIC_PATH,
        help=f"Path to KANJIDIC2 XML file (default: {settings.KANJIDIC_PATH})"
    )
    parser.add_argument(
        '--tatoeba', '-t',
        type=Path,
        default=settings.TATOEBA_DIR,
        help=f"Directory of the Tatoeba export (default: {settings.TATOEBA_DIR})"
    )
    parser.add_argument(
        '--output', '-o',
        type=Path,
        default=settings.INDEX_DIR,
        help=f"Output index directory (default: {settings.INDEX_DIR})"
    )

    args = parser.parse_args()

    try:
        build_indices(args.jmdict, args.kanjidic, args.output, args.tatoeba)
    except IndexBuildError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == '__main__':
    main()

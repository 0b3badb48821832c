"""
CLI interface for goi-enrich.

Usage:
    goi-enrich build [--jmdict PATH] [--kanjidic PATH] [--tatoeba DIR]
    goi-enrich enrich 食べる 飲む --level N5
    goi-enrich enrich --level N4 --output dist/
    goi-enrich enrich --json 手
    goi-enrich enrich --top 100 --output dist/
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Mapping

from goi_enrich import __version__, settings
from goi_enrich.build import KANJI_FILE, SENTENCES_FILE, build_indices
from goi_enrich.dictionary import Index, load_index
from goi_enrich.exceptions import IndexBuildError
from goi_enrich.models import EnrichmentRecord, ProficiencyLevel, TargetWord
from goi_enrich.pipeline import Enricher
from goi_enrich.pitch import PitchDictionary
from goi_enrich.sources import level_map, load_kanji_table, load_sentence_pairs, load_word_lists

logger = logging.getLogger(__name__)


# ============================================================================
# Output Formatting
# ============================================================================

def format_json(record: EnrichmentRecord) -> str:
    return json.dumps(record.to_dict(), ensure_ascii=False, indent=2)


def format_detailed(record: EnrichmentRecord) -> str:
    """Compact human-readable summary of a record."""
    level = record.level.name if record.level else '-'
    lines = [f"{record.word}【{record.reading}】 {record.romaji} ({level})"]
    lines.append("─" * 40)
    if record.list_gloss:
        lines.append(f"  list: {record.list_gloss}")

    for i, sense in enumerate(record.senses, 1):
        lines.append(f"{i}. {'; '.join(sense.glosses)}")

    if record.conjugation:
        c = record.conjugation
        lines.append(f"  └─ {c.verb_class.value}: {c.polite_non_past} / {c.negative} / {c.past} / {c.conjunctive}")
    if record.pitch:
        lines.append(f"  pitch: {record.pitch.type} [{record.pitch.pattern}]")
    if record.related:
        lines.append("  related: " + ", ".join(r.word for r in record.related))
    if record.idioms:
        lines.append("  idioms: " + ", ".join(f"{i.word} ({i.type})" for i in record.idioms))
    for example in record.examples:
        lines.append(f"  ・{example.source} - {example.target}")

    return "\n".join(lines)


def write_records(records: Mapping[str, EnrichmentRecord], output_dir: Path) -> None:
    """Write one <target word>.json per record."""
    output_dir.mkdir(parents=True, exist_ok=True)
    for word, record in records.items():
        (output_dir / f"{word}.json").write_text(format_json(record), encoding='utf-8')
    logger.info(f"Wrote {len(records)} files to {output_dir}")


# ============================================================================
# Commands
# ============================================================================

def cmd_build(args) -> int:
    build_indices(
        jmdict_path=args.jmdict,
        kanjidic_path=args.kanjidic,
        output_dir=args.index_dir,
        tatoeba_dir=None if args.skip_tatoeba else args.tatoeba,
    )
    return 0


def _targets(args, index: Index, words_from_lists: List[TargetWord]) -> List[TargetWord]:
    level = ProficiencyLevel.parse(args.level)
    words = args.words
    if not words and args.top:
        logger.info(f"Selecting top {args.top} words by frequency...")
        words = index.most_frequent(args.top)
    if words or args.top:
        listed = {t.word: t for t in words_from_lists}
        return [listed.get(w) or TargetWord(word=w, level=level) for w in words]

    seen = set()
    targets = []
    for target in words_from_lists:
        if target.word in seen:
            continue
        seen.add(target.word)
        if level is None or target.level == level:
            targets.append(target)
    return targets


def cmd_enrich(args) -> int:
    index = load_index(args.index_dir)
    kanji = load_kanji_table(args.index_dir / KANJI_FILE)
    word_lists = load_word_lists(args.word_lists) if args.word_lists.exists() else []
    corpus = None if args.no_examples else load_sentence_pairs(args.index_dir / SENTENCES_FILE)

    enricher = Enricher(
        index=index,
        kanji=kanji,
        levels=level_map(word_lists),
        pitch=PitchDictionary.from_file(args.pitch),
        corpus=corpus,
    )

    targets = _targets(args, index, word_lists)
    if not targets:
        print("No words to process.", file=sys.stderr)
        return 1

    result = enricher.enrich_batch(targets, workers=args.workers)

    if args.output:
        write_records(result.records, args.output)
    else:
        for record in result.records.values():
            print(format_json(record) if args.json else format_detailed(record))

    for word, reason in result.skipped.items():
        print(f"skipped: {word} ({reason})", file=sys.stderr)

    return 0 if result.records else 1


# ============================================================================
# Main
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="goi-enrich",
        description="Vocabulary enrichment from JMdict, KANJIDIC2 and Tatoeba",
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"goi-enrich {__version__}",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )
    parser.add_argument(
        "--index-dir",
        type=Path,
        default=settings.INDEX_DIR,
        help="Directory holding the built index",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build the index from raw sources")
    build.add_argument("--jmdict", type=Path, default=settings.JMDICT_PATH, help="Path to JMdict_e.xml")
    build.add_argument("--kanjidic", type=Path, default=settings.KANJIDIC_PATH, help="Path to kanjidic2.xml")
    build.add_argument("--tatoeba", type=Path, default=settings.TATOEBA_DIR, help="Directory of the Tatoeba export")
    build.add_argument("--skip-tatoeba", action="store_true", help="Do not link Tatoeba sentences")
    build.set_defaults(func=cmd_build)

    enrich = subparsers.add_parser("enrich", help="Enrich words")
    enrich.add_argument("words", nargs="*", help="Words to enrich (default: every listed word)")
    enrich.add_argument("--level", "-l", help="JLPT level (N5..N1) for unlisted words, or level filter")
    enrich.add_argument("--top", type=int, metavar="N", help="Enrich the N most frequent dictionary words")
    enrich.add_argument("--word-lists", type=Path, default=settings.WORD_LIST_DIR, help="Directory with n5.json..n1.json")
    enrich.add_argument("--pitch", type=Path, default=settings.PITCH_PATH, help="Path to pitch-accents.json")
    enrich.add_argument("--no-examples", action="store_true", help="Skip example sentences")
    enrich.add_argument("--workers", type=int, default=settings.DEFAULT_WORKERS, help="Worker threads")
    enrich.add_argument("--output", "-o", type=Path, help="Write one JSON file per word here")
    enrich.add_argument("--json", "-j", action="store_true", help="Print records as JSON")
    enrich.set_defaults(func=cmd_enrich)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=settings.LOG_FORMAT,
    )

    try:
        sys.exit(args.func(args))
    except IndexBuildError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

"""
Dictionary Index for goi-enrich.

This module turns raw JMdict records into normalized entries and builds the
lookup structures every other component reads:
- spelling -> entry ids
- reading -> entry ids
- kanji character -> entry ids (reverse index over every spelling)

The index is built once per run and never mutated afterwards, so it can be
shared across threads. It is persisted as marisa_trie.RecordTrie files
(memory-mapped on load) plus a JSON file of entries.
"""

import json
import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple

import marisa_trie

from goi_enrich.characters import is_kanji
from goi_enrich.constants import (
    FALLBACK_PRIORITY_RANKS,
    MISC_ENTITIES,
    NF_BUCKET_SIZE,
    POS_ENTITIES,
    UNKNOWN_FREQUENCY_RANK,
)
from goi_enrich.exceptions import IndexBuildError
from goi_enrich.models import Entry, Sense

logger = logging.getLogger(__name__)


# ============================================================================
# Binary Record Schema
# ============================================================================
# Each lookup key maps to records of:
#   - ordinal: uint32 - insertion position, restores list order on load
#   - entry_id: uint32 - JMdict sequence number
#
# marisa-trie does not keep insertion order for repeated keys, so the
# ordinal is stored alongside the id.

RECORD_FORMAT = "<II"

SPELLINGS_FILE = "spellings.trie"
READINGS_FILE = "readings.trie"
KANJI_CHARS_FILE = "kanji_chars.trie"
ENTRIES_FILE = "entries.json"

INDEX_FILES = (SPELLINGS_FILE, READINGS_FILE, KANJI_CHARS_FILE, ENTRIES_FILE)

_NF_PATTERN = re.compile(r'^nf(\d+)$')


# ============================================================================
# Frequency Rank
# ============================================================================

def frequency_rank(priority_tags: Iterable[str]) -> Optional[int]:
    """
    Derive an approximate frequency rank from JMdict priority markers.

    nfXX is a frequency bucket of 500 words (nf01 = top 500), mapped to the
    bucket midpoint. Without nf markers the coarser lists are used.

    Args:
        priority_tags: Priority markers of an entry

    Returns:
        Approximate rank (lower = more common), or None if unknown
    """
    tags = set(priority_tags)
    best_bucket = None
    for tag in tags:
        match = _NF_PATTERN.match(tag)
        if match:
            bucket = int(match.group(1))
            if best_bucket is None or bucket < best_bucket:
                best_bucket = bucket
    if best_bucket is not None:
        return (best_bucket - 1) * NF_BUCKET_SIZE + NF_BUCKET_SIZE // 2

    for tag, rank in FALLBACK_PRIORITY_RANKS:
        if tag in tags:
            return rank
    return None


def sort_rank(entry: Entry) -> int:
    """Frequency rank for sorting; unknown ranks sort last."""
    rank = frequency_rank(entry.priority_tags)
    return rank if rank is not None else UNKNOWN_FREQUENCY_RANK


# ============================================================================
# Normalization
# ============================================================================

def expand_tag(tag: str, table: Mapping[str, str]) -> str:
    """Expand a short JMdict entity code ("v1", "&arch;") to its text."""
    name = tag.strip()
    if name.startswith('&') and name.endswith(';'):
        name = name[1:-1]
    return table.get(name, name)


def _texts(elements: Iterable[Any], key: str) -> List[str]:
    """Pull element text from k_ele/r_ele style lists, first-seen unique."""
    seen: Dict[str, None] = {}
    for element in elements or []:
        text = element.get(key) if isinstance(element, Mapping) else element
        if isinstance(text, str) and text:
            seen.setdefault(text, None)
    return list(seen)


def _priorities(elements: Iterable[Any], key: str) -> List[str]:
    tags = []
    for element in elements or []:
        if not isinstance(element, Mapping):
            continue
        for tag in element.get(key) or []:
            # Malformed markers are skipped, not fatal
            if isinstance(tag, str) and tag.strip():
                tags.append(tag.strip())
    return tags


def _gloss_text(gloss: Any) -> Optional[str]:
    if isinstance(gloss, Mapping):
        gloss = gloss.get('text')
    if gloss is None:
        return None
    text = str(gloss).strip()
    return text or None


def normalize_senses(raw_senses: Iterable[Mapping[str, Any]]) -> Tuple[Sense, ...]:
    """
    Normalize raw sense blocks.

    JMdict states POS on the first sense of a run and omits it on the
    following senses, so a sense without POS inherits the previous one.
    """
    senses = []
    last_pos: Tuple[str, ...] = ()
    for raw in raw_senses or []:
        pos = tuple(expand_tag(p, POS_ENTITIES) for p in raw.get('pos') or [])
        if not pos:
            pos = last_pos
        last_pos = pos
        glosses = tuple(g for g in (_gloss_text(x) for x in raw.get('gloss') or []) if g)
        senses.append(Sense(
            pos_tags=pos,
            glosses=glosses,
            misc_tags=frozenset(expand_tag(m, MISC_ENTITIES) for m in raw.get('misc') or []),
            field_tags=frozenset(str(f).strip('&;') for f in raw.get('field') or []),
        ))
    return tuple(senses)


def normalize_record(raw: Mapping[str, Any]) -> Optional[Entry]:
    """
    Convert one raw JMdict record into an Entry.

    The raw shape mirrors the XML: {'seq', 'k_ele': [{'keb', 'ke_pri'}],
    'r_ele': [{'reb', 're_pri'}], 'sense': [{'pos', 'gloss', 'misc', 'field'}]}.

    Returns:
        The Entry, or None if the record has no usable id or neither
        spellings nor readings
    """
    try:
        seq = int(raw.get('seq'))
    except (TypeError, ValueError):
        return None

    spellings = _texts(raw.get('k_ele'), 'keb')
    readings = _texts(raw.get('r_ele'), 'reb')
    if not spellings and not readings:
        return None

    priority = frozenset(_priorities(raw.get('k_ele'), 'ke_pri') + _priorities(raw.get('r_ele'), 're_pri'))

    return Entry(
        id=seq,
        spellings=tuple(spellings),
        readings=tuple(readings),
        priority_tags=priority,
        senses=normalize_senses(raw.get('sense')),
    )


# ============================================================================
# Index
# ============================================================================

@dataclass(frozen=True)
class Resolution:
    """
    Result of resolving a target word against the index.

    Attributes:
        word: The word as requested
        primary: Entry chosen to represent the word
        matched_ids: Every entry id the lookup matched, in lookup order
        by_spelling: True if the word matched a spelling, False if a reading
    """
    word: str
    primary: Entry
    matched_ids: Tuple[int, ...]
    by_spelling: bool

    @property
    def excluded(self) -> FrozenSet[int]:
        return frozenset(self.matched_ids)


class Index:
    """
    Read-only lookup structures over the dictionary.

    Invariants:
        - id in char_lookup[c] iff c is a kanji in some spelling of entries[id]
        - every id in a lookup table exists in entries
    """

    def __init__(
        self,
        entries: Dict[int, Entry],
        spelling_lookup: Dict[str, Tuple[int, ...]],
        reading_lookup: Dict[str, Tuple[int, ...]],
        char_lookup: Dict[str, Tuple[int, ...]],
    ):
        self.entries = entries
        self.spelling_lookup = spelling_lookup
        self.reading_lookup = reading_lookup
        self.char_lookup = char_lookup

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries.values())

    def get(self, entry_id: int) -> Optional[Entry]:
        return self.entries.get(entry_id)

    def resolve(self, word: str) -> Optional[Resolution]:
        """
        Resolve a word to its primary entry.

        A spelling match takes the first matched entry. A reading-only match
        with several candidates takes the most frequent one, so できる
        resolves to 出来る rather than the rare 出切る.

        Returns:
            Resolution, or None if the word is not in the dictionary
        """
        ids = self.spelling_lookup.get(word)
        by_spelling = bool(ids)
        if not ids:
            ids = self.reading_lookup.get(word)
        if not ids:
            return None

        entries = [self.entries[i] for i in ids if i in self.entries]
        if not entries:
            return None

        primary = entries[0]
        if not by_spelling and len(entries) > 1:
            primary = min(entries, key=sort_rank)

        return Resolution(word=word, primary=primary, matched_ids=tuple(ids), by_spelling=by_spelling)

    def most_frequent(self, n: int) -> List[str]:
        """
        Headwords of the n most frequent entries that carry priority tags.

        Entries are ordered by frequency rank with unknown ranks last; ties
        keep insertion order. A headword shared by homographs is listed once.
        """
        ranked = sorted((e for e in self.entries.values() if e.priority_tags), key=sort_rank)
        return list(dict.fromkeys(e.headword for e in ranked))[:n]

    def entries_with_kanji(self, chars: Iterable[str], exclude: Iterable[int] = ()) -> List[int]:
        """
        Union of the reverse index over chars, in first-seen order.

        Args:
            chars: Characters to look up; non-kanji simply have no bucket
            exclude: Ids left out of the result
        """
        excluded = set(exclude)
        found: Dict[int, None] = {}
        for char in chars:
            for entry_id in self.char_lookup.get(char, ()):
                if entry_id not in excluded:
                    found.setdefault(entry_id, None)
        return list(found)


# ============================================================================
# Index Building
# ============================================================================

class IndexBuilder:
    """
    Accumulates raw records and produces an Index.

    Example:
        >>> builder = IndexBuilder()
        >>> builder.add_all(parse_jmdict(path))
        >>> index = builder.build()
    """

    def __init__(self):
        self._entries: Dict[int, Entry] = {}
        self._spellings: Dict[str, List[int]] = defaultdict(list)
        self._readings: Dict[str, List[int]] = defaultdict(list)
        self._chars: Dict[str, Dict[int, None]] = defaultdict(dict)
        self.dropped = 0

    def add(self, raw: Mapping[str, Any]) -> Optional[Entry]:
        entry = normalize_record(raw)
        if entry is None:
            self.dropped += 1
            logger.debug(f"Dropped record without spellings or readings: {raw.get('seq')!r}")
            return None
        return self.add_entry(entry)

    def add_entry(self, entry: Entry) -> Entry:
        if entry.id in self._entries:
            logger.warning(f"Duplicate entry id {entry.id}; keeping the first")
            return self._entries[entry.id]

        self._entries[entry.id] = entry
        for spelling in entry.spellings:
            self._spellings[spelling].append(entry.id)
            for char in spelling:
                if is_kanji(char):
                    self._chars[char].setdefault(entry.id, None)
        for reading in entry.readings:
            self._readings[reading].append(entry.id)
        return entry

    def add_all(self, records: Iterable[Mapping[str, Any]]) -> 'IndexBuilder':
        count = 0
        for raw in records:
            self.add(raw)
            count += 1
            if count % 50000 == 0:
                logger.info(f"  Indexed {count} records...")
        return self

    def build(self) -> Index:
        if self.dropped:
            logger.warning(f"Dropped {self.dropped} records without spellings or readings")
        logger.info(
            f"Index built: {len(self._entries)} entries, {len(self._spellings)} spellings, "
            f"{len(self._readings)} readings, {len(self._chars)} kanji"
        )
        return Index(
            entries=dict(self._entries),
            spelling_lookup={k: tuple(v) for k, v in self._spellings.items()},
            reading_lookup={k: tuple(v) for k, v in self._readings.items()},
            char_lookup={k: tuple(v) for k, v in self._chars.items()},
        )


def build_index(records: Iterable[Mapping[str, Any]]) -> Index:
    """
    Build an Index from raw JMdict records.

    Raises:
        IndexBuildError: If no record produced an entry
    """
    index = IndexBuilder().add_all(records).build()
    if not len(index):
        raise IndexBuildError("No dictionary entries could be built from the input records")
    return index


# ============================================================================
# Persistence
# ============================================================================

def _lookup_trie(table: Mapping[str, Tuple[int, ...]]) -> marisa_trie.RecordTrie:
    def generate_items():
        for key, ids in table.items():
            for ordinal, entry_id in enumerate(ids):
                yield key, (ordinal, entry_id)

    return marisa_trie.RecordTrie(RECORD_FORMAT, generate_items())


def _read_lookup_trie(path: Path) -> Dict[str, Tuple[int, ...]]:
    trie = marisa_trie.RecordTrie(RECORD_FORMAT)
    trie.mmap(str(path))

    grouped: Dict[str, List[Tuple[int, int]]] = defaultdict(list)
    for key, record in trie.items():
        grouped[key].append(record)
    return {key: tuple(entry_id for _, entry_id in sorted(records)) for key, records in grouped.items()}


def _entry_to_json(entry: Entry) -> Dict[str, Any]:
    return {
        'id': entry.id,
        'spellings': list(entry.spellings),
        'readings': list(entry.readings),
        'priority': sorted(entry.priority_tags),
        'senses': [
            {
                'pos': list(s.pos_tags),
                'glosses': list(s.glosses),
                'misc': sorted(s.misc_tags),
                'field': sorted(s.field_tags),
            }
            for s in entry.senses
        ],
    }


def _entry_from_json(data: Mapping[str, Any]) -> Entry:
    return Entry(
        id=int(data['id']),
        spellings=tuple(data.get('spellings', ())),
        readings=tuple(data.get('readings', ())),
        priority_tags=frozenset(data.get('priority', ())),
        senses=tuple(
            Sense(
                pos_tags=tuple(s.get('pos', ())),
                glosses=tuple(s.get('glosses', ())),
                misc_tags=frozenset(s.get('misc', ())),
                field_tags=frozenset(s.get('field', ())),
            )
            for s in data.get('senses', ())
        ),
    )


def save_index(index: Index, directory: Path) -> None:
    """
    Save the index to a directory.

    Lookup tables become RecordTrie files; entries go to entries.json.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    for filename, table in (
        (SPELLINGS_FILE, index.spelling_lookup),
        (READINGS_FILE, index.reading_lookup),
        (KANJI_CHARS_FILE, index.char_lookup),
    ):
        _lookup_trie(table).save(str(directory / filename))

    with open(directory / ENTRIES_FILE, 'w', encoding='utf-8') as f:
        json.dump([_entry_to_json(e) for e in index.entries.values()], f, ensure_ascii=False)

    logger.info(f"Saved index with {len(index)} entries to {directory}")


def load_index(directory: Path) -> Index:
    """
    Load an index saved by save_index.

    Raises:
        IndexBuildError: If any index file is missing or unreadable
    """
    directory = Path(directory)
    missing = [name for name in INDEX_FILES if not (directory / name).exists()]
    if missing:
        raise IndexBuildError(
            f"Index files missing in {directory}: {', '.join(missing)}. "
            "Run 'goi-enrich build' to build them."
        )

    try:
        with open(directory / ENTRIES_FILE, 'r', encoding='utf-8') as f:
            entries = {e.id: e for e in (_entry_from_json(d) for d in json.load(f))}
        index = Index(
            entries=entries,
            spelling_lookup=_read_lookup_trie(directory / SPELLINGS_FILE),
            reading_lookup=_read_lookup_trie(directory / READINGS_FILE),
            char_lookup=_read_lookup_trie(directory / KANJI_CHARS_FILE),
        )
    except (OSError, ValueError, KeyError) as e:
        raise IndexBuildError(f"Could not read index from {directory}: {e}") from e

    logger.info(f"Loaded index with {len(index)} entries from {directory}")
    return index

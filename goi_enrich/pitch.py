"""
Pitch accent lookup for goi-enrich.

Loads a reading -> accent dictionary once and answers lookups in O(1).

Pitch types:
    heiban    (0)       - flat, no downstep
    atamadaka (1)       - downstep after the first mora
    nakadaka  (2..N-1)  - downstep after mora N
    odaka     (N)       - downstep after the last mora
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from goi_enrich.characters import split_morae, to_hiragana
from goi_enrich.models import PitchAccent

logger = logging.getLogger(__name__)

HEIBAN = 'heiban'
ATAMADAKA = 'atamadaka'
NAKADAKA = 'nakadaka'
ODAKA = 'odaka'

PITCH_TYPES = (HEIBAN, ATAMADAKA, NAKADAKA, ODAKA)

# Keys starting with this are metadata, not readings
METADATA_PREFIX = '_'


def classify_pattern(pattern: int, mora_count: int) -> Optional[str]:
    """
    Name the accent type of a downstep position.

    Returns:
        One of PITCH_TYPES, or None if the pattern does not fit the word
    """
    if pattern == 0:
        return HEIBAN
    if pattern == 1:
        return ATAMADAKA
    if mora_count and pattern == mora_count:
        return ODAKA
    if 1 < pattern < mora_count:
        return NAKADAKA
    return None


def parse_accent(reading: str, value: Any) -> Optional[PitchAccent]:
    """
    Parse one dictionary value: {"pattern": 2, "type": "nakadaka"} or 2.

    A missing type is derived from the pattern and the reading's morae.
    """
    if isinstance(value, Mapping):
        pattern = value.get('pattern')
        pitch_type = value.get('type')
    else:
        pattern, pitch_type = value, None

    if isinstance(pattern, bool) or not isinstance(pattern, int):
        return None
    if pitch_type not in PITCH_TYPES:
        pitch_type = classify_pattern(pattern, len(split_morae(reading)))
    if pitch_type is None:
        return None
    return PitchAccent(pattern=pattern, type=pitch_type)


class PitchDictionary:
    """
    Immutable reading -> PitchAccent map.

    Built once before any per-word work and passed to each derivation.
    An empty dictionary disables pitch for the run.
    """

    def __init__(self, accents: Optional[Mapping[str, PitchAccent]] = None):
        self._accents = MappingProxyType(dict(accents or {}))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> 'PitchDictionary':
        accents: Dict[str, PitchAccent] = {}
        skipped = 0
        for key, value in raw.items():
            if key.startswith(METADATA_PREFIX):
                continue
            accent = parse_accent(key, value)
            if accent is None:
                skipped += 1
                continue
            accents[to_hiragana(key)] = accent
        if skipped:
            logger.warning(f"Skipped {skipped} malformed pitch entries")
        return cls(accents)

    @classmethod
    def from_file(cls, path: Path) -> 'PitchDictionary':
        """
        Load pitch-accents.json.

        A missing file is not an error: pitch is disabled for the run.
        """
        path = Path(path)
        if not path.exists():
            logger.info(f"Pitch data not found at {path}; pitch disabled")
            return cls()
        with open(path, 'r', encoding='utf-8') as f:
            dictionary = cls.from_mapping(json.load(f))
        logger.info(f"Pitch data: {len(dictionary)} entries")
        return dictionary

    def __len__(self) -> int:
        return len(self._accents)

    def __bool__(self) -> bool:
        return bool(self._accents)

    def __contains__(self, reading: str) -> bool:
        return to_hiragana(reading) in self._accents

    def lookup(self, reading: str) -> Optional[PitchAccent]:
        """Accent for a reading, or None if the reading is unknown."""
        if not reading:
            return None
        return self._accents.get(to_hiragana(reading))

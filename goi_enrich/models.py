"""
Data structures shared across goi-enrich.

Entries and senses are immutable once the index is built. Everything else
here is created per target word and thrown away after its record is written.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union


# ============================================================================
# Levels and Classes
# ============================================================================

class ProficiencyLevel(Enum):
    """JLPT levels. The value is the rank: 5 is easiest, 1 is hardest."""
    N5 = 5
    N4 = 4
    N3 = 3
    N2 = 2
    N1 = 1

    @property
    def rank(self) -> int:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, int, 'ProficiencyLevel', None]) -> Optional['ProficiencyLevel']:
        """
        Parse "N5", "n5" or a rank such as 5 into a level.

        Returns None for empty or unrecognized values.
        """
        if value is None or isinstance(value, ProficiencyLevel):
            return value
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return None
        text = str(value).strip().upper()
        if text in cls.__members__:
            return cls[text]
        if text.isdigit():
            return cls.parse(int(text))
        return None


def level_rank(level: Optional[ProficiencyLevel]) -> int:
    """Rank of a level, 0 when the level is unknown."""
    return level.rank if level is not None else 0


class VerbClass(Enum):
    """Inflection classes the conjugation generator knows."""
    ICHIDAN = 'ichidan'
    GODAN = 'godan'
    GODAN_SPECIAL = 'godan-special'
    SURU = 'suru'
    KURU = 'kuru'


# ============================================================================
# Dictionary Data
# ============================================================================

@dataclass(frozen=True, slots=True)
class Sense:
    """
    One meaning group of an entry.

    Attributes:
        pos_tags: Part-of-speech tags in JMdict order
        glosses: Translations, first is the most representative
        misc_tags: Usage annotations (archaic, idiomatic expression, ...)
        field_tags: Domain annotations (medicine, computing, ...)
    """
    pos_tags: Tuple[str, ...]
    glosses: Tuple[str, ...]
    misc_tags: FrozenSet[str] = frozenset()
    field_tags: FrozenSet[str] = frozenset()


@dataclass(frozen=True, slots=True)
class Entry:
    """
    A normalized dictionary entry.

    Attributes:
        id: JMdict sequence number
        spellings: Kanji spellings, first is primary
        readings: Kana readings, first is primary
        priority_tags: Union of spelling and reading priority markers
        senses: Senses in dictionary order
    """
    id: int
    spellings: Tuple[str, ...]
    readings: Tuple[str, ...]
    priority_tags: FrozenSet[str]
    senses: Tuple[Sense, ...]

    @property
    def headword(self) -> str:
        """Primary spelling, falling back to the primary reading."""
        if self.spellings:
            return self.spellings[0]
        return self.readings[0] if self.readings else ''

    @property
    def primary_reading(self) -> str:
        return self.readings[0] if self.readings else ''

    @property
    def primary_gloss(self) -> str:
        if self.senses and self.senses[0].glosses:
            return self.senses[0].glosses[0]
        return ''

    @property
    def pos_tags(self) -> List[str]:
        """All POS tags across senses, first occurrence order."""
        return list(dict.fromkeys(p for s in self.senses for p in s.pos_tags))


@dataclass(slots=True)
class KanjiInfo:
    """
    Metadata for one kanji from KANJIDIC2.

    A missing grade or level means the character is ungraded.
    """
    character: str
    meanings: List[str] = field(default_factory=list)
    on_readings: List[str] = field(default_factory=list)
    kun_readings: List[str] = field(default_factory=list)
    stroke_count: Optional[int] = None
    grade: Optional[int] = None
    level: Optional[ProficiencyLevel] = None
    frequency: Optional[int] = None

    @property
    def is_graded(self) -> bool:
        return bool(self.grade) or self.level is not None


@dataclass(frozen=True, slots=True)
class SentencePair:
    """A Japanese sentence and its translation."""
    source: str
    target: str


@dataclass(slots=True)
class TargetWord:
    """A word from a JLPT word list."""
    word: str
    level: Optional[ProficiencyLevel] = None
    reading: str = ''
    meaning: str = ''


# ============================================================================
# Derived Blocks
# ============================================================================

@dataclass(frozen=True, slots=True)
class ConjugationForm:
    """Standard inflected forms of a verb."""
    verb_class: VerbClass
    dictionary: str
    polite_non_past: str
    negative: str
    past: str
    conjunctive: str
    potential: str
    passive: str
    causative: str


@dataclass(frozen=True, slots=True)
class PitchAccent:
    """
    Pitch accent of a reading.

    Attributes:
        pattern: Mora index of the downstep (0 = no downstep)
        type: heiban, atamadaka, nakadaka or odaka
    """
    pattern: int
    type: str


@dataclass(frozen=True, slots=True)
class RelatedWord:
    word: str
    reading: str
    gloss: str


@dataclass(frozen=True, slots=True)
class Idiom:
    word: str
    reading: str
    gloss: str
    type: str


@dataclass(frozen=True, slots=True)
class WordTags:
    """Learning-oriented tags for a word."""
    difficulty_band: str
    word_type: str
    register: str
    is_irregular: bool


@dataclass(slots=True)
class EnrichmentRecord:
    """
    Everything derived for one target word.

    list_gloss carries the meaning given by the word list, if any.
    """
    word: str
    reading: str
    romaji: str
    level: Optional[ProficiencyLevel]
    frequency: Optional[int]
    senses: List[Sense]
    kanji: List[KanjiInfo] = field(default_factory=list)
    conjugation: Optional[ConjugationForm] = None
    reading_conjugation: Optional[ConjugationForm] = None
    pitch: Optional[PitchAccent] = None
    related: List[RelatedWord] = field(default_factory=list)
    idioms: List[Idiom] = field(default_factory=list)
    examples: List[SentencePair] = field(default_factory=list)
    tags: Optional[WordTags] = None
    list_gloss: str = ''

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested data, ready for json.dumps."""
        return asdict(self, dict_factory=_plain_dict)


def _plain(value: Any) -> Any:
    if isinstance(value, ProficiencyLevel):
        return value.name
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, tuple):
        return list(value)
    return value


def _plain_dict(items: List[Tuple[str, Any]]) -> Dict[str, Any]:
    return {key: _plain(value) for key, value in items}

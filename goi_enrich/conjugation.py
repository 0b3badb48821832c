"""
Rule-based verb conjugation for goi-enrich.

Detects the inflection class from JMdict POS tags and builds the standard
forms from static tables. Adding a class or a godan row is a table change.

Supports: ichidan, godan (all nine endings), godan Iku/Yuku special class,
suru (including noun + する compounds) and kuru (kanji and kana spellings).
"""

import logging
import re
from typing import Dict, Iterable, NamedTuple, Optional, Pattern, Tuple

from goi_enrich.models import ConjugationForm, VerbClass

logger = logging.getLogger(__name__)


# ============================================================================
# Class Detection
# ============================================================================
# Checked in this order for every tag; the first hit wins. Each pattern
# accepts the expanded JMdict text as well as the short entity code.

VERB_CLASS_PATTERNS: Tuple[Tuple[VerbClass, Pattern[str]], ...] = (
    (VerbClass.KURU, re.compile(r'Kuru verb|^vk$', re.IGNORECASE)),
    (VerbClass.SURU, re.compile(r'suru verb|^vs-[is]$', re.IGNORECASE)),
    (VerbClass.GODAN_SPECIAL, re.compile(r'Iku/Yuku special class|^v5k-s$', re.IGNORECASE)),
    (VerbClass.GODAN, re.compile(r'Godan verb|^v5', re.IGNORECASE)),
    (VerbClass.ICHIDAN, re.compile(r'Ichidan verb|^v1(-s)?$|^vz$', re.IGNORECASE)),
)


def detect_verb_class(pos_tags: Iterable[str]) -> Optional[VerbClass]:
    """
    Detect the verb class from POS tags.

    Args:
        pos_tags: POS tags in dictionary order

    Returns:
        The VerbClass, or None if the tags describe no verb
    """
    for tag in pos_tags:
        for verb_class, pattern in VERB_CLASS_PATTERNS:
            if pattern.search(tag):
                return verb_class
    return None


# ============================================================================
# Tables
# ============================================================================

class GodanRow(NamedTuple):
    """Sound alternations for one godan ending."""
    a: str
    i: str
    e: str
    te: str
    ta: str


GODAN_ROWS: Dict[str, GodanRow] = {
    'う': GodanRow('わ', 'い', 'え', 'って', 'った'),
    'く': GodanRow('か', 'き', 'け', 'いて', 'いた'),
    'ぐ': GodanRow('が', 'ぎ', 'げ', 'いで', 'いだ'),
    'す': GodanRow('さ', 'し', 'せ', 'して', 'した'),
    'つ': GodanRow('た', 'ち', 'て', 'って', 'った'),
    'ぬ': GodanRow('な', 'に', 'ね', 'んで', 'んだ'),
    'ぶ': GodanRow('ば', 'び', 'べ', 'んで', 'んだ'),
    'む': GodanRow('ま', 'み', 'め', 'んで', 'んだ'),
    'る': GodanRow('ら', 'り', 'れ', 'って', 'った'),
}

# 行く and friends: regular row, but always って/った
GODAN_SPECIAL_TE = 'って'
GODAN_SPECIAL_TA = 'った'


class FormSuffixes(NamedTuple):
    """Endings appended to a stem, one per derived form."""
    polite_non_past: str
    negative: str
    past: str
    conjunctive: str
    potential: str
    passive: str
    causative: str


ICHIDAN_SUFFIXES = FormSuffixes('ます', 'ない', 'た', 'て', 'られる', 'られる', 'させる')

SURU_ENDING = 'する'
SURU_FORMS = FormSuffixes('します', 'しない', 'した', 'して', 'できる', 'される', 'させる')

KURU_KANJI_ENDING = '来る'
KURU_KANJI_FORMS = FormSuffixes('来ます', '来ない', '来た', '来て', '来られる', '来られる', '来させる')

KURU_KANA_ENDING = 'くる'
KURU_KANA_FORMS = FormSuffixes('きます', 'こない', 'きた', 'きて', 'こられる', 'こられる', 'こさせる')


# ============================================================================
# Generation
# ============================================================================

def _from_suffixes(verb_class: VerbClass, word: str, stem: str, suffixes: FormSuffixes) -> ConjugationForm:
    return ConjugationForm(
        verb_class=verb_class,
        dictionary=word,
        polite_non_past=stem + suffixes.polite_non_past,
        negative=stem + suffixes.negative,
        past=stem + suffixes.past,
        conjunctive=stem + suffixes.conjunctive,
        potential=stem + suffixes.potential,
        passive=stem + suffixes.passive,
        causative=stem + suffixes.causative,
    )


def _godan(word: str, verb_class: VerbClass) -> Optional[ConjugationForm]:
    row = GODAN_ROWS.get(word[-1:])
    if row is None:
        return None
    stem = word[:-1]
    special = verb_class is VerbClass.GODAN_SPECIAL
    return ConjugationForm(
        verb_class=verb_class,
        dictionary=word,
        polite_non_past=stem + row.i + 'ます',
        negative=stem + row.a + 'ない',
        past=stem + (GODAN_SPECIAL_TA if special else row.ta),
        conjunctive=stem + (GODAN_SPECIAL_TE if special else row.te),
        potential=stem + row.e + 'る',
        passive=stem + row.a + 'れる',
        causative=stem + row.a + 'せる',
    )


def _kuru(word: str) -> ConjugationForm:
    if word.endswith(KURU_KANJI_ENDING):
        return _from_suffixes(VerbClass.KURU, word, word[:-len(KURU_KANJI_ENDING)], KURU_KANJI_FORMS)
    prefix = word[:-len(KURU_KANA_ENDING)] if word.endswith(KURU_KANA_ENDING) else ''
    return _from_suffixes(VerbClass.KURU, word, prefix, KURU_KANA_FORMS)


def conjugate(word: str, verb_class: Optional[VerbClass]) -> Optional[ConjugationForm]:
    """
    Generate the standard forms of a verb.

    Args:
        word: Dictionary form, kanji or kana (e.g. 食べる, たべる)
        verb_class: Class from detect_verb_class

    Returns:
        ConjugationForm, or None if there is no class or the godan
        ending is unknown

    Example:
        >>> conjugate("食べる", VerbClass.ICHIDAN).past
        '食べた'
    """
    if verb_class is None or not word:
        return None

    if verb_class is VerbClass.ICHIDAN:
        return _from_suffixes(verb_class, word, word[:-1], ICHIDAN_SUFFIXES)

    if verb_class in (VerbClass.GODAN, VerbClass.GODAN_SPECIAL):
        form = _godan(word, verb_class)
        if form is None:
            logger.debug(f"No godan row for {word!r}; skipping conjugation")
        return form

    if verb_class is VerbClass.SURU:
        prefix = word[:-len(SURU_ENDING)] if word.endswith(SURU_ENDING) else ''
        return _from_suffixes(verb_class, word, prefix, SURU_FORMS)

    if verb_class is VerbClass.KURU:
        return _kuru(word)

    return None

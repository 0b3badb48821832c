"""
Character classification helpers for goi-enrich.

Kanji detection by code point range, kana normalization and romanization.
"""

import re
from typing import List

import jaconv


# ============================================================================
# Code Point Ranges
# ============================================================================

KANJI_RANGES = (
    (0x4E00, 0x9FFF),    # CJK Unified Ideographs
    (0x3400, 0x4DBF),    # Extension A
    (0x20000, 0x2A6DF),  # Extension B
    (0xF900, 0xFAFF),    # Compatibility Ideographs
)

# Small kana that merge with the preceding mora
SMALL_KANA = set('ゃゅょゎャュョヮァィゥェォぁぃぅぇぉ')

# jaconv spells the long-vowel mark ー as a hyphen
LONG_VOWEL = re.compile(r"([aeiou])-")


def is_kanji(char: str) -> bool:
    """Check if a single character is a CJK ideograph."""
    code = ord(char)
    for low, high in KANJI_RANGES:
        if low <= code <= high:
            return True
    return False


def kanji_in(text: str) -> List[str]:
    """Return the ideographs of text in order, duplicates included."""
    return [ch for ch in text if is_kanji(ch)]


def count_kanji(text: str) -> int:
    return sum(1 for ch in text if is_kanji(ch))


def to_hiragana(text: str) -> str:
    """Normalize katakana to hiragana, leaving everything else alone."""
    return jaconv.kata2hira(text)


def romanize(text: str) -> str:
    """
    Convert kana text to romaji.

    Example:
        >>> romanize("たべる")
        'taberu'
        >>> romanize("コーヒー")
        'koohii'
    """
    if not text:
        return ''
    romaji = jaconv.kana2alphabet(jaconv.kata2hira(text))
    return LONG_VOWEL.sub(r"\1\1", romaji)


def split_morae(text: str) -> List[str]:
    """
    Split kana into morae.

    Small kana (ゃゅょ etc.) combine with the previous character;
    っ and ー count as morae of their own.
    """
    morae: List[str] = []
    for char in text:
        if char in SMALL_KANA and morae:
            morae[-1] += char
        else:
            morae.append(char)
    return morae

import unicodedata

from .core import DISPLAY_NUMBER_PREFIX

# ぁ (U+3041) .. ゖ (U+3096) sit exactly 0x60 below their katakana counterparts
_HIRAGANA_START = 0x3041
_HIRAGANA_END = 0x3096
_KANA_OFFSET = 0x60


def hiragana_to_katakana(s: str) -> str:
    return ''.join(
        chr(ord(ch) + _KANA_OFFSET) if _HIRAGANA_START <= ord(ch) <= _HIRAGANA_END else ch
        for ch in s
    )


def normalize_search_term(s) -> str:
    """Normalize a search term or indexed name so either kana script matches.
    Applies NFKC (folds half-width katakana), lower-cases and maps hiragana to katakana.
    """
    if not isinstance(s, str):
        s = str(s or '')
    s = unicodedata.normalize('NFKC', s.strip())
    return hiragana_to_katakana(s.lower())


def format_display_number(entity_id) -> str:
    """'7' -> 'No.007', '1024' -> 'No.1024' (3 digits is a floor, never truncated)."""
    return f"{DISPLAY_NUMBER_PREFIX}{str(entity_id).zfill(3)}"

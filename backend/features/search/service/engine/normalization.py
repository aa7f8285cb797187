import re
from typing import List, Optional, Tuple

# Latin letters that render like Cyrillic ones; users mix them in by accident
LATIN_LOOKALIKES = {
    'a': 'а', 'e': 'е', 'o': 'о', 'p': 'р', 'c': 'с', 'x': 'х',
    'y': 'у', 'k': 'к', 'm': 'м', 't': 'т', 'b': 'в', 'h': 'н',
}
_LATIN_TABLE = str.maketrans(LATIN_LOOKALIKES)

_SEPARATORS = re.compile(r'[-—_/.,:;()\[\]{}\'"!?]')
# \w also covers '_', which is already a separator by this point
_NON_WORD = re.compile(r'[^\w\s]')
_MULTIPLE_SPACES = re.compile(r'\s+')
_DIGITS = re.compile(r'^\d+$')


def normalize_ru(text: Optional[str]) -> str:
    """
    Normalize Russian text for indexing and matching.

    - lowercase + trim
    - "ё" -> "е"
    - Latin look-alike letters -> Cyrillic
    - separators -> spaces, other punctuation dropped
    - collapse whitespace
    """
    if not text:
        return ""

    normalized = text.lower().strip()
    normalized = normalized.replace('ё', 'е')
    normalized = normalized.translate(_LATIN_TABLE)
    normalized = _SEPARATORS.sub(' ', normalized)
    normalized = _NON_WORD.sub('', normalized)
    normalized = _MULTIPLE_SPACES.sub(' ', normalized)
    return normalized.strip()


def tokenize_ru(text: Optional[str]) -> List[str]:
    """
    Split text into search tokens, preserving order and duplicates.

    Tokens shorter than 2 characters are dropped unless they are digits.
    """
    normalized = normalize_ru(text)
    if not normalized:
        return []
    return [
        token for token in normalized.split(' ')
        if len(token) >= 2 or _DIGITS.match(token)
    ]


def normalize_and_tokenize(text: Optional[str]) -> Tuple[str, List[str]]:
    """Return (normalized_text, tokens) in one pass."""
    normalized = normalize_ru(text)
    return normalized, tokenize_ru(normalized)

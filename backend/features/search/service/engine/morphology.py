"""
Conservative Russian stemming for menu search.

Only long tokens are stemmed and only a handful of endings are stripped, so
"куриный", "куриная", "куриное" and "куриные" all meet at "курин" while
short words like "суп" or "вок" are left alone. Stems are used for matching
only and never shown to users.
"""

from typing import List, Tuple

MIN_STEM_TOKEN_LENGTH = 5
MIN_STEM_LENGTH = 3

# (ending, characters to strip). Adjective endings are anchored on the "н"
# of the adjective suffix, which stays in the stem.
ADJECTIVE_ENDINGS: Tuple[Tuple[str, int], ...] = (
    ('ный', 2),
    ('ная', 2),
    ('ное', 2),
    ('ные', 2),
    ('нным', 2),
    ('нными', 3),
    ('нном', 2),
    ('нной', 2),
    ('нную', 2),
)

NOUN_ENDINGS: Tuple[Tuple[str, int], ...] = (
    ('ов', 2),
    ('ами', 3),
    ('ах', 2),
    ('ей', 2),
    ('ям', 2),
    ('ях', 2),
)


def stem_ru(token: str) -> str:
    """Return the stem of token, or token itself when no ending applies."""
    if len(token) < MIN_STEM_TOKEN_LENGTH:
        return token

    lower = token.lower()
    for ending, strip in ADJECTIVE_ENDINGS + NOUN_ENDINGS:
        if lower.endswith(ending):
            stem = lower[:-strip]
            if len(stem) >= MIN_STEM_LENGTH:
                return stem

    return token


def get_stem_variants(token: str) -> List[str]:
    """Original token first, then its stem when it differs."""
    stem = stem_ru(token)
    if stem == token:
        return [token]
    return [token, stem]

"""Swap text between the EN (QWERTY) and RU (ЙЦУКЕН) keyboard layouts.

Catches queries typed with the wrong layout active, e.g. "gbwwf" -> "пицца".
"""

from typing import Dict, List

EN_KEYS = "`qwertyuiop[]asdfghjkl;'zxcvbnm,./"
RU_KEYS = "ёйцукенгшщзхъфывапролджэячсмитьбю."


def _build_map(source: str, target: str) -> Dict[str, str]:
    mapping: Dict[str, str] = {}
    for a, b in zip(source, target):
        mapping[a] = b
        mapping[a.upper()] = b.upper()
    return mapping


EN_TO_RU = _build_map(EN_KEYS, RU_KEYS)
RU_TO_EN = _build_map(RU_KEYS, EN_KEYS)


def swap_layout_en_to_ru(text: str) -> str:
    return "".join(EN_TO_RU.get(ch, ch) for ch in text)


def swap_layout_ru_to_en(text: str) -> str:
    return "".join(RU_TO_EN.get(ch, ch) for ch in text)


def build_query_variants(query: str) -> List[str]:
    """The query and its two layout swaps, trimmed, blanks and repeats removed."""
    variants: List[str] = []
    for candidate in (query, swap_layout_en_to_ru(query), swap_layout_ru_to_en(query)):
        trimmed = candidate.strip()
        if trimmed and trimmed not in variants:
            variants.append(trimmed)
    return variants

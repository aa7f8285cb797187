from typing import Set

import Levenshtein


METRIC_DAMERAU = "damerau"
METRIC_LEVENSHTEIN = "levenshtein"
SUPPORTED_METRICS = (METRIC_DAMERAU, METRIC_LEVENSHTEIN)

# Query-token length gates for typo tolerance
TYPO_MIN_TOKEN_LENGTH = 4
TYPO_SHORT_TOKEN_MAX_LENGTH = 8

TRIGRAM_SIZE = 3


def damerau_levenshtein_distance(a: str, b: str) -> int:
    """
    Edit distance with insert, delete, substitute and adjacent transpose,
    all at unit cost (optimal string alignment variant).
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    len_a, len_b = len(a), len(b)
    matrix = [[0] * (len_b + 1) for _ in range(len_a + 1)]
    for i in range(len_a + 1):
        matrix[i][0] = i
    for j in range(len_b + 1):
        matrix[0][j] = j

    for i in range(1, len_a + 1):
        for j in range(1, len_b + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j] + 1,         # deletion
                matrix[i][j - 1] + 1,         # insertion
                matrix[i - 1][j - 1] + cost,  # substitution
            )
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                matrix[i][j] = min(matrix[i][j], matrix[i - 2][j - 2] + cost)

    return matrix[len_a][len_b]


def levenshtein_distance(a: str, b: str) -> int:
    """Plain Levenshtein distance (no transpositions)."""
    return Levenshtein.distance(a, b)


def edit_distance(a: str, b: str, metric: str = METRIC_DAMERAU) -> int:
    if metric == METRIC_DAMERAU:
        return damerau_levenshtein_distance(a, b)
    if metric == METRIC_LEVENSHTEIN:
        return levenshtein_distance(a, b)
    raise ValueError(f"Unknown edit distance metric: {metric}")


def is_similar(a: str, b: str, max_distance: int, metric: str = METRIC_DAMERAU) -> bool:
    return edit_distance(a, b, metric) <= max_distance


def max_typo_distance(token: str) -> int:
    """
    Allowed edit distance for a query token.

    0 for tokens shorter than 4 (typo matching disabled), 1 up to length 8,
    2 beyond that.
    """
    length = len(token)
    if length < TYPO_MIN_TOKEN_LENGTH:
        return 0
    if length <= TYPO_SHORT_TOKEN_MAX_LENGTH:
        return 1
    return 2


def _trigrams(text: str) -> Set[str]:
    return {text[i:i + TRIGRAM_SIZE] for i in range(len(text) - TRIGRAM_SIZE + 1)}


def trigram_similarity(a: str, b: str) -> float:
    """Jaccard similarity of the character trigram sets, in [0, 1]."""
    if len(a) < TRIGRAM_SIZE or len(b) < TRIGRAM_SIZE:
        return 0.0
    if a == b:
        return 1.0

    trigrams_a = _trigrams(a)
    trigrams_b = _trigrams(b)
    intersection = len(trigrams_a & trigrams_b)
    union = len(trigrams_a | trigrams_b)
    return intersection / union if union else 0.0

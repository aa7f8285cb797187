from typing import Iterable, List, Tuple

from .models import MatchType, ScoredMatch

DEFAULT_MAX_RESULTS = 10

AUTO_NAVIGATE_MIN_SCORE = 8.0
AUTO_NAVIGATE_MIN_QUERY_LENGTH = 4

# Lower ranks first when scores tie
RANK_PRIORITY = {
    MatchType.EXACT: 0,
    MatchType.PREFIX: 1,
    MatchType.TYPO: 2,
    MatchType.SUBSTRING: 3,
    MatchType.MIXED: 4,
    MatchType.TRIGRAM: 5,
}


def _collation_key(name: str) -> str:
    # Case-insensitive, and "ё" sorts with "е" as in Russian dictionaries
    return name.casefold().replace("ё", "е")


def rank_key(match: ScoredMatch) -> Tuple:
    return (
        -match.score,
        RANK_PRIORITY[match.match_type],
        match.title_length,
        match.token_count,
        _collation_key(match.item.name),
        match.item.id,
    )


def rank_matches(matches: Iterable[ScoredMatch], max_results: int = DEFAULT_MAX_RESULTS) -> List[ScoredMatch]:
    """
    Order candidates deterministically and keep the top max_results.

    Score descending, then match type, shorter title, fewer title tokens,
    name, and finally id so that no two candidates compare equal.
    """
    ranked = sorted(matches, key=rank_key)
    return ranked[:max(max_results, 0)]


def should_auto_navigate(matches: List[ScoredMatch], query: str) -> bool:
    """
    True when the caller may open the single result directly instead of
    showing a list: exactly one match, a query of at least 4 characters,
    a score of at least 8 and a match that is not substring-only.
    """
    if len(matches) != 1:
        return False

    match = matches[0]
    if len(query or "") < AUTO_NAVIGATE_MIN_QUERY_LENGTH:
        return False
    if match.score < AUTO_NAVIGATE_MIN_SCORE:
        return False
    if match.match_type == MatchType.SUBSTRING:
        return False
    return True

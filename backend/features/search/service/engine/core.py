from typing import List, Optional, Sequence

from backend.services.system.logger_service import get_logger
from .models import IndexedItem, ScoredMatch, SearchOptions
from .normalization import normalize_and_tokenize
from .ranking import rank_matches
from .scorer import MenuScorer
from .similarity import METRIC_DAMERAU, SUPPORTED_METRICS
from .synonyms import SynonymExpander, get_default_expander

logger = get_logger(__name__)

MIN_QUERY_LENGTH = 2
# Typo and trigram matching need at least this many normalized characters
FUZZY_MIN_QUERY_LENGTH = 4


def search_menu(
    index: Sequence[IndexedItem],
    query: Optional[str],
    options: Optional[SearchOptions] = None,
    *,
    expander: Optional[SynonymExpander] = None,
    typo_metric: Optional[str] = None,
) -> List[ScoredMatch]:
    """
    Rank menu items for a free-text query.

    Degenerate queries (empty, shorter than 2 normalized characters, no
    tokens) return an empty list.
    """
    typo_metric = typo_metric or METRIC_DAMERAU
    if typo_metric not in SUPPORTED_METRICS:
        raise ValueError(f"Unknown typo metric: {typo_metric}")

    options = options or SearchOptions()
    normalized_query, query_tokens = normalize_and_tokenize(query)
    if not query_tokens or len(normalized_query) < MIN_QUERY_LENGTH:
        return []

    fuzzy_default = len(normalized_query) >= FUZZY_MIN_QUERY_LENGTH
    scorer = MenuScorer(
        expander=expander or get_default_expander(),
        allow_typo=fuzzy_default if options.allow_typo is None else options.allow_typo,
        allow_fuzzy=fuzzy_default if options.allow_fuzzy is None else options.allow_fuzzy,
        min_score=options.min_score,
        typo_metric=typo_metric,
    )

    candidates = []
    for item in index:
        match = scorer.score_item(item, query_tokens)
        if match is not None:
            candidates.append(match)

    logger.debug(
        "Menu search scored",
        extra={
            "normalized_query": normalized_query,
            "tokens": query_tokens,
            "indexed_items": len(index),
            "candidates": len(candidates),
        }
    )
    return rank_matches(candidates, options.max_results)

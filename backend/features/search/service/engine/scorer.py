"""
Per-item scoring for menu search.

Every query token is scored independently against an item:

1. Direct stage: the token and its stem against title, category and
   description tokens (in that order), soft expansions excluded. Stops
   descending into lower-weight fields once an exact or prefix hit is found.
2. Expansion stage: only when stage 1 found no exact/prefix hit. The
   token's synonyms and soft expansions are matched against every field;
   soft matches score at 30%.
3. Fallbacks for tokens that are still unmatched: substring of the whole
   normalized title, then trigram similarity against it (fuzzy mode only).

The item score is the sum of the best score of each matched token.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import IndexedItem, MatchType, ScoredMatch
from .morphology import get_stem_variants
from .similarity import METRIC_DAMERAU, edit_distance, max_typo_distance, trigram_similarity
from .synonyms import SynonymExpander

# Base scores per match type
SCORE_EXACT_TOKEN = 10.0
SCORE_PREFIX_MATCH = 6.0
SCORE_SUBSTRING_MATCH = 3.0
SCORE_TYPO_MATCH = 4.0
SCORE_TRIGRAM_BASE = 4.0

# Field weights
WEIGHT_TITLE = 1.0
WEIGHT_CATEGORY = 0.6
WEIGHT_DESCRIPTION = 0.3

SOFT_EXPANSION_MULTIPLIER = 0.3
TRIGRAM_MIN_SIMILARITY = 0.3
MIN_SCORE = 6.0

# Lower is better; used to pick an item's overall match type
TOKEN_MATCH_PRIORITY = {
    MatchType.EXACT: 0,
    MatchType.PREFIX: 1,
    MatchType.SUBSTRING: 2,
    MatchType.TYPO: 3,
    MatchType.TRIGRAM: 4,
}

_BASE_SCORES = {
    MatchType.EXACT: SCORE_EXACT_TOKEN,
    MatchType.PREFIX: SCORE_PREFIX_MATCH,
    MatchType.SUBSTRING: SCORE_SUBSTRING_MATCH,
    MatchType.TYPO: SCORE_TYPO_MATCH,
}


@dataclass
class TokenMatch:
    score: float
    match_type: MatchType

    @property
    def is_exact_or_prefix(self) -> bool:
        return self.match_type in (MatchType.EXACT, MatchType.PREFIX)


@lru_cache(maxsize=65536)
def _variants(token: str) -> Tuple[str, ...]:
    return tuple(get_stem_variants(token))


def classify_match(query_token: str, target_token: str, allow_typo: bool,
                   metric: str = METRIC_DAMERAU) -> Optional[MatchType]:
    """How target_token matches query_token, or None."""
    if target_token == query_token:
        return MatchType.EXACT
    if target_token.startswith(query_token):
        return MatchType.PREFIX
    if query_token in target_token:
        return MatchType.SUBSTRING

    if allow_typo:
        max_distance = max_typo_distance(query_token)
        if max_distance and abs(len(query_token) - len(target_token)) <= max_distance:
            if edit_distance(query_token, target_token, metric) <= max_distance:
                return MatchType.TYPO

    return None


def _better(current: Optional[TokenMatch], candidate: TokenMatch) -> TokenMatch:
    """Higher score wins; equal scores keep the stronger match type."""
    if current is None or candidate.score > current.score:
        return candidate
    if candidate.score == current.score and \
            TOKEN_MATCH_PRIORITY[candidate.match_type] < TOKEN_MATCH_PRIORITY[current.match_type]:
        return candidate
    return current


class MenuScorer:
    """Scores indexed items against one tokenized query."""

    def __init__(self, expander: SynonymExpander, allow_typo: bool, allow_fuzzy: bool,
                 min_score: float = MIN_SCORE, typo_metric: str = METRIC_DAMERAU):
        self.expander = expander
        self.allow_typo = allow_typo
        self.allow_fuzzy = allow_fuzzy
        self.min_score = min_score
        self.typo_metric = typo_metric

    @staticmethod
    def _fields(item: IndexedItem) -> Tuple[Tuple[Sequence[str], float], ...]:
        return (
            (item.title_tokens, WEIGHT_TITLE),
            (item.category_tokens + item.subcategory_tokens, WEIGHT_CATEGORY),
            (item.description_tokens, WEIGHT_DESCRIPTION),
        )

    def _match_field(self, tokens: Sequence[str], weight: float, query_variants: Iterable[str],
                     original: str, soft_query: bool, direct: bool) -> Optional[TokenMatch]:
        best: Optional[TokenMatch] = None
        for query_variant in query_variants:
            for target in tokens:
                for target_variant in _variants(target):
                    soft = soft_query or self.expander.is_soft_expansion(original, target_variant)
                    if direct and soft:
                        continue
                    match_type = classify_match(query_variant, target_variant, self.allow_typo, self.typo_metric)
                    if match_type is None:
                        continue
                    score = _BASE_SCORES[match_type] * weight
                    if soft:
                        score *= SOFT_EXPANSION_MULTIPLIER
                    best = _better(best, TokenMatch(score, match_type))
        return best

    def match_direct(self, item: IndexedItem, token: str) -> Tuple[Optional[TokenMatch], bool]:
        """Stage 1: the token and its stem, no synonyms. Also reports an exact/prefix hit."""
        best: Optional[TokenMatch] = None
        found_exact_or_prefix = False
        for tokens, weight in self._fields(item):
            if found_exact_or_prefix:
                break
            match = self._match_field(tokens, weight, _variants(token), token, soft_query=False, direct=True)
            if match is not None:
                best = _better(best, match)
                found_exact_or_prefix = found_exact_or_prefix or match.is_exact_or_prefix
        return best, found_exact_or_prefix

    def match_expanded(self, item: IndexedItem, token: str) -> Optional[TokenMatch]:
        """Stage 2: synonyms and soft expansions of the token."""
        best: Optional[TokenMatch] = None
        for expanded in self.expander.expand([token], include_soft=True):
            if expanded == token:
                continue
            soft_query = self.expander.is_soft_expansion(token, expanded)
            for tokens, weight in self._fields(item):
                match = self._match_field(tokens, weight, _variants(expanded), token, soft_query, direct=False)
                if match is not None:
                    best = _better(best, match)
        return best

    def match_fallback(self, item: IndexedItem, token: str) -> Optional[TokenMatch]:
        variants = _variants(token)
        for variant in variants:
            if variant in item.normalized_title:
                return TokenMatch(SCORE_SUBSTRING_MATCH * WEIGHT_TITLE, MatchType.SUBSTRING)

        if self.allow_fuzzy:
            for variant in variants:
                similarity = trigram_similarity(variant, item.normalized_title)
                if similarity > TRIGRAM_MIN_SIMILARITY:
                    return TokenMatch(similarity * SCORE_TRIGRAM_BASE * WEIGHT_TITLE, MatchType.TRIGRAM)
        return None

    def match_token(self, item: IndexedItem, token: str) -> Optional[TokenMatch]:
        best, found_exact_or_prefix = self.match_direct(item, token)
        if not found_exact_or_prefix:
            expanded = self.match_expanded(item, token)
            if expanded is not None:
                best = _better(best, expanded)
        if best is None:
            best = self.match_fallback(item, token)
        return best

    def score_item(self, item: IndexedItem, query_tokens: Sequence[str]) -> Optional[ScoredMatch]:
        """ScoredMatch for the item, or None below the minimum score."""
        total = 0.0
        matched_tokens: List[str] = []
        best_type: Optional[MatchType] = None

        for token in query_tokens:
            match = self.match_token(item, token)
            if match is None:
                continue
            total += match.score
            matched_tokens.append(token)
            if best_type is None or TOKEN_MATCH_PRIORITY[match.match_type] < TOKEN_MATCH_PRIORITY[best_type]:
                best_type = match.match_type

        if not matched_tokens or total < self.min_score:
            return None

        return ScoredMatch(
            item=item,
            score=total,
            match_type=best_type,
            matched_tokens=matched_tokens,
            title_length=len(item.name),
            token_count=len(item.title_tokens),
        )

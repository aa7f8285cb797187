"""Menu search service: catalog snapshot -> cached index -> ranked matches."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from backend.common.base.base_service import BaseService
from backend.config.env_config import SearchConfig
from backend.features.search.repository.catalog_repository import CatalogRepository
from backend.services.system.logger_service import get_logger, log_search_operation
from .engine import (
    IndexCache,
    ScoredMatch,
    SearchOptions,
    SynonymExpander,
    get_default_expander,
    normalize_ru,
    search_menu,
    should_auto_navigate,
)
from .engine.keyboard_layout import build_query_variants

logger = get_logger(__name__)


class MenuSearchService(BaseService):
    """Runs menu searches against the cached index of the active catalog."""

    MIN_QUERY_LENGTH_FOR_RESULTS = 3
    HINT_TOO_SHORT = "Введите хотя бы 2 символа"
    HINT_MIN_LENGTH = "Введите минимум 3 символа для поиска"

    def __init__(
        self,
        repository: CatalogRepository,
        *,
        config: Optional[SearchConfig] = None,
        cache: Optional[IndexCache] = None,
        expander: Optional[SynonymExpander] = None,
    ) -> None:
        self.repository = repository
        self.config = config or SearchConfig()
        self.cache = cache or IndexCache(ttl_seconds=self.config.index_ttl_seconds)
        self.expander = expander or get_default_expander(self.config.synonyms_path)

    def search(self, query: Optional[str], limit: Optional[int] = None, debug: bool = False) -> Dict[str, Any]:
        """Return the response payload for a search request."""
        query_text = query or ""
        normalized_query = normalize_ru(query_text)

        if len(normalized_query) < self.MIN_QUERY_LENGTH_FOR_RESULTS:
            return {
                "results": [],
                "count": 0,
                "query": query_text,
                "shouldAutoNavigate": False,
                "hint": self.HINT_TOO_SHORT if len(normalized_query) < 2 else self.HINT_MIN_LENGTH,
            }

        request_started = self.timer()

        fetch_started = self.timer()
        records = self.repository.list_active_items()
        fetch_ms = self.elapsed_ms(fetch_started)

        index_started = self.timer()
        cached = self.cache.get(records)
        index_ms = self.elapsed_ms(index_started)

        options = SearchOptions(max_results=self._clamp_limit(limit), min_score=self.config.min_score)

        search_started = self.timer()
        matches, matched_query = self._search_with_layout_fallback(cached.index, query_text, options)
        search_ms = self.elapsed_ms(search_started)

        auto_navigate = should_auto_navigate(matches, matched_query)
        total_ms = self.elapsed_ms(request_started)

        performance = {
            "fetchMs": fetch_ms,
            "indexBuildMs": index_ms,
            "indexFromCache": cached.from_cache,
            "searchMs": search_ms,
            "totalMs": total_ms,
        }
        log_search_operation(
            logger,
            query=query_text,
            result_count=len(matches),
            from_cache=cached.from_cache,
            normalized_query=normalized_query,
            auto_navigate=auto_navigate,
            **performance,
        )

        payload: Dict[str, Any] = {
            "results": [match.to_dict(include_tokens=debug) for match in matches],
            "count": len(matches),
            "query": query_text,
            "shouldAutoNavigate": auto_navigate,
        }
        if matched_query != query_text:
            payload["correctedQuery"] = matched_query
        if debug:
            payload["debug"] = self._debug_block(normalized_query, matches, performance)
        return payload

    def invalidate_index(self) -> None:
        """Drop the cached index; call after the catalog changes."""
        self.cache.invalidate()

    def get_index_stats(self) -> Dict[str, Any]:
        return self.cache.stats()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _clamp_limit(self, limit: Optional[int]) -> int:
        ceiling = self.config.max_results
        if limit is None:
            return ceiling
        return min(max(int(limit), 1), ceiling)

    def _search_with_layout_fallback(self, index, query_text: str, options: SearchOptions):
        """Search the query; if nothing matches, retry it typed in the other keyboard layout."""
        matches = search_menu(index, query_text, options, expander=self.expander,
                              typo_metric=self.config.typo_metric)
        if matches or not self.config.layout_fallback:
            return matches, query_text

        for variant in build_query_variants(query_text)[1:]:
            matches = search_menu(index, variant, options, expander=self.expander,
                                  typo_metric=self.config.typo_metric)
            if matches:
                logger.info("Query matched after keyboard layout swap",
                            extra={"query": query_text, "corrected_query": variant})
                return matches, variant
        return [], query_text

    @staticmethod
    def _debug_block(normalized_query: str, matches: List[ScoredMatch], performance: Dict[str, Any]) -> Dict[str, Any]:
        top = matches[:3]
        return {
            "normalizedQuery": normalized_query,
            "topScores": [round(m.score, 3) for m in top],
            "matches": [
                {
                    "name": m.item.name,
                    "score": round(m.score, 3),
                    "matchType": m.match_type.value,
                    "matchedTokens": list(m.matched_tokens),
                }
                for m in top
            ],
            "performance": performance,
        }

"""
Synonym expansion for menu search queries.

The dictionary is hand-curated data (data/synonyms.json) with two tables:

- true_synonyms: variants, transliterations and common misspellings that are
  as good as the original word (шаверма -> шаурма). Full score weight.
- soft_expansions: category-level neighbours (капучино -> кофе). They score
  at 30% and are only tried when the original word found no exact or prefix
  hit.

Reverse lookups apply to true synonyms only: if a word is listed as the
alternative of some entry, that entry is added back.
"""

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from backend.services.system.logger_service import get_logger
from .normalization import normalize_ru, tokenize_ru

logger = get_logger(__name__)

DEFAULT_SYNONYMS_PATH = Path(__file__).resolve().parent / "data" / "synonyms.json"


class SynonymConfigError(ValueError):
    """Raised when the synonym dictionary is malformed or contradictory."""


def _normalize_table(raw: object, table_name: str) -> Dict[str, List[str]]:
    if not isinstance(raw, dict):
        raise SynonymConfigError(f"'{table_name}' must be an object of word -> [words]")

    table: Dict[str, List[str]] = {}
    for key, values in raw.items():
        if not isinstance(key, str) or not isinstance(values, list):
            raise SynonymConfigError(f"Invalid entry in '{table_name}': {key!r}")
        if not all(isinstance(value, str) for value in values):
            raise SynonymConfigError(f"Non-string alternative in '{table_name}' for {key!r}")

        normalized_key = normalize_ru(key)
        if not normalized_key:
            continue

        # Phrases are split into tokens; a word never expands to itself
        alternatives = table.setdefault(normalized_key, [])
        for value in values:
            for token in tokenize_ru(value):
                if token != normalized_key and token not in alternatives:
                    alternatives.append(token)
    return table


class SynonymExpander:
    """Expands query tokens with true synonyms and soft expansions."""

    def __init__(self, true_synonyms: Mapping[str, Sequence[str]],
                 soft_expansions: Mapping[str, Sequence[str]]):
        self.true_synonyms = _normalize_table(dict(true_synonyms), "true_synonyms")
        self.soft_expansions = _normalize_table(dict(soft_expansions), "soft_expansions")

        overlap = [
            (key, value)
            for key, values in self.soft_expansions.items()
            for value in values
            if value in self.true_synonyms.get(key, [])
        ]
        if overlap:
            raise SynonymConfigError(f"Pairs listed as both true synonym and soft expansion: {overlap}")

        self._soft_sets: Dict[str, FrozenSet[str]] = {
            key: frozenset(values) for key, values in self.soft_expansions.items()
        }
        # alternative -> canonical entries that list it
        self._reverse: Dict[str, List[str]] = {}
        for canonical, alternatives in self.true_synonyms.items():
            for alternative in alternatives:
                self._reverse.setdefault(alternative, []).append(canonical)

    @classmethod
    def from_file(cls, path: os.PathLike) -> "SynonymExpander":
        try:
            with open(path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise SynonymConfigError(f"Synonym dictionary {path} is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise SynonymConfigError(f"Synonym dictionary {path} must be a JSON object")

        expander = cls(payload.get("true_synonyms", {}), payload.get("soft_expansions", {}))
        logger.debug(
            "Synonym dictionary loaded",
            extra={
                "path": str(path),
                "true_synonyms": len(expander.true_synonyms),
                "soft_expansions": len(expander.soft_expansions),
            }
        )
        return expander

    def expand(self, tokens: Iterable[str], include_soft: bool = True) -> List[str]:
        """
        Return every token variant, original tokens first, without duplicates.
        """
        expanded: List[str] = []
        seen = set()

        def _add(token: str) -> None:
            if token not in seen:
                seen.add(token)
                expanded.append(token)

        for token in tokens:
            key = token.lower()
            _add(token)
            for synonym in self.true_synonyms.get(key, ()):
                _add(synonym)
            for canonical in self._reverse.get(key, ()):
                _add(canonical)
            if include_soft:
                for expansion in self.soft_expansions.get(key, ()):
                    _add(expansion)

        return expanded

    def is_soft_expansion(self, query_token: str, matched_token: str) -> bool:
        soft = self._soft_sets.get(query_token.lower())
        return soft is not None and matched_token.lower() in soft

    def get_synonyms(self, token: str) -> List[str]:
        """The token itself, its true synonyms, then its soft expansions."""
        key = token.lower()
        return [key, *self.true_synonyms.get(key, ()), *self.soft_expansions.get(key, ())]

    def are_synonyms(self, token_a: str, token_b: str) -> bool:
        a, b = token_a.lower(), token_b.lower()
        if a == b:
            return True
        return b in self.true_synonyms.get(a, ()) or a in self.true_synonyms.get(b, ())


@lru_cache(maxsize=4)
def _load_expander(path: str) -> SynonymExpander:
    return SynonymExpander.from_file(path)


def get_default_expander(path: Optional[str] = None) -> SynonymExpander:
    """Shared expander for the configured dictionary (SEARCH_SYNONYMS_PATH)."""
    resolved = path or os.getenv("SEARCH_SYNONYMS_PATH") or str(DEFAULT_SYNONYMS_PATH)
    return _load_expander(resolved)

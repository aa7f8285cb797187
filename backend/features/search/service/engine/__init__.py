from .core import search_menu
from .models import CatalogRecord, IndexedItem, ScoredMatch, SearchOptions, MatchType, CachedIndexResult
from .normalization import normalize_ru, tokenize_ru, normalize_and_tokenize
from .morphology import stem_ru, get_stem_variants
from .synonyms import SynonymExpander, SynonymConfigError, get_default_expander
from .similarity import damerau_levenshtein_distance, levenshtein_distance, is_similar, trigram_similarity
from .index_builder import build_search_index
from .index_cache import IndexCache, get_cached_index, invalidate_cache
from .ranking import rank_matches, should_auto_navigate

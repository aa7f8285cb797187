"""
Environment configuration loader for the menu search backend
Loads settings from the process environment and an optional .env file
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


@dataclass
class SearchConfig:
    max_results: int = 10
    min_score: float = 6.0
    index_ttl_seconds: float = 300.0
    typo_metric: str = "damerau"
    layout_fallback: bool = True
    synonyms_path: Optional[str] = None
    catalog_path: Optional[str] = None


def load_env_file(env_path: Optional[str] = None) -> bool:
    """
    Load a .env file into os.environ without overriding variables that are
    already set.

    Args:
        env_path: Path to .env file (default: .env in project root)

    Returns:
        True if a file was found and loaded
    """
    path = Path(env_path) if env_path else PROJECT_ROOT / '.env'
    if not path.exists():
        logger.debug("No .env file found", extra={"path": str(path)})
        return False
    return load_dotenv(path, override=False)


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("Invalid numeric setting - using default", extra={"key": name, "value": raw, "default": default})
        return default
    if value <= 0:
        logger.warning("Non-positive setting - using default", extra={"key": name, "value": raw, "default": default})
        return default
    return value


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def get_search_config() -> SearchConfig:
    """
    Build the search configuration from the environment.

    Variables:
        SEARCH_MAX_RESULTS, SEARCH_MIN_SCORE, SEARCH_INDEX_TTL_SECONDS,
        SEARCH_TYPO_METRIC (damerau|levenshtein), SEARCH_LAYOUT_FALLBACK,
        SEARCH_SYNONYMS_PATH, CATALOG_PATH
    """
    load_env_file()

    typo_metric = os.getenv('SEARCH_TYPO_METRIC', 'damerau').strip().lower()
    if typo_metric not in ('damerau', 'levenshtein'):
        logger.warning("Unknown typo metric - using damerau", extra={"value": typo_metric})
        typo_metric = 'damerau'

    config = SearchConfig(
        max_results=_env_number('SEARCH_MAX_RESULTS', 10, int),
        min_score=_env_number('SEARCH_MIN_SCORE', 6.0, float),
        index_ttl_seconds=_env_number('SEARCH_INDEX_TTL_SECONDS', 300.0, float),
        typo_metric=typo_metric,
        layout_fallback=_env_flag('SEARCH_LAYOUT_FALLBACK', True),
        synonyms_path=os.getenv('SEARCH_SYNONYMS_PATH') or None,
        catalog_path=os.getenv('CATALOG_PATH') or None,
    )
    logger.debug("Search configuration loaded", extra={"config": config.__dict__})
    return config

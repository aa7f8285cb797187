"""
Search Feature Module.
Wires together Repository, Service, and Controller.
Exports the Blueprint for the application.
"""
from flask import Blueprint

from backend.config.env_config import get_search_config
from backend.features.search.controller.search_controller import SearchController
from backend.features.search.repository.catalog_repository import (
    CatalogRepository,
    InMemoryCatalogRepository,
    JsonCatalogRepository,
)
from backend.features.search.service.menu_search_service import MenuSearchService
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)


def _build_repository(catalog_path) -> CatalogRepository:
    if catalog_path:
        return JsonCatalogRepository(catalog_path)
    logger.warning("CATALOG_PATH is not set - search will run against an empty catalog")
    return InMemoryCatalogRepository()


def create_search_blueprint(search_service: MenuSearchService) -> Blueprint:
    search_controller = SearchController(search_service)

    bp = Blueprint('search', __name__)

    bp.add_url_rule(
        '/api/search',
        view_func=search_controller.search,
        methods=['GET']
    )

    bp.add_url_rule(
        '/api/search/cache/invalidate',
        view_func=search_controller.invalidate_cache,
        methods=['POST']
    )

    bp.add_url_rule(
        '/api/search/cache/stats',
        view_func=search_controller.get_cache_stats,
        methods=['GET']
    )

    return bp


def create_search_service(config=None) -> MenuSearchService:
    config = config or get_search_config()
    return MenuSearchService(_build_repository(config.catalog_path), config=config)

"""
Search Controller.
Handles HTTP requests for menu search and index cache management.
"""
from flask import request
from pydantic import ValidationError

from backend.common.base.base_controller import BaseController
from backend.features.search.service.menu_search_service import MenuSearchService
from backend.schemas.search_schemas import SearchRequest
from backend.services.system.logger_service import get_logger, log_error

logger = get_logger(__name__)


class SearchController(BaseController):
    def __init__(self, search_service: MenuSearchService):
        self.search_service = search_service

    def search(self):
        """Search the menu: GET /api/search?q=&limit=&debug="""
        try:
            params = SearchRequest(
                q=request.args.get('q'),
                limit=request.args.get('limit'),
                debug=request.args.get('debug', False),
            )
        except ValidationError as e:
            return self.handle_error(e.errors(include_url=False, include_context=False), 400)

        try:
            result = self.search_service.search(params.q, limit=params.limit, debug=params.debug)
            return self.handle_response(result)
        except Exception as e:
            log_error(logger, e, {'query': params.q, 'operation': 'search'})
            return self.handle_response({'error': str(e), 'results': [], 'count': 0}, 500)

    def invalidate_cache(self):
        """Drop the cached search index"""
        try:
            self.search_service.invalidate_index()
            return self.handle_response({'success': True, 'message': 'Search index cache invalidated'})
        except Exception as e:
            log_error(logger, e, {'operation': 'invalidate_cache'})
            return self.handle_error(str(e), 500)

    def get_cache_stats(self):
        """Report index cache counters"""
        try:
            return self.handle_response({'success': True, 'stats': self.search_service.get_index_stats()})
        except Exception as e:
            log_error(logger, e, {'operation': 'cache_stats'})
            return self.handle_error(str(e), 500)

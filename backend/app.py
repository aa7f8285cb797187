"""
Main Flask application for the storefront menu search backend.
Organized with modular route blueprints for better maintainability.
"""
import os
import time
import uuid
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, request, g
from flask_cors import CORS
from flask_compress import Compress

# Load environment variables from .env file
load_dotenv()

# Initialize logging service FIRST (before other imports)
from backend.services.system.logger_service import get_logger, log_request
logger = get_logger(__name__)

from backend.features.search.index import create_search_blueprint, create_search_service
from backend.features.search.service.menu_search_service import MenuSearchService


def _resolve_service(path: str) -> str:
    parts = [segment for segment in (path or '').split('/') if segment]
    if not parts:
        return 'root'
    if parts[0] == 'api':
        return parts[1] if len(parts) > 1 else 'api'
    return parts[0]


def _resolve_allowed_origins():
    raw_origins = os.getenv('FRONTEND_ORIGIN')
    if not raw_origins or raw_origins.strip() == '*':
        return '*'

    origins = [origin.strip() for origin in raw_origins.split(',') if origin.strip()]
    return origins or '*'


def create_app(search_service: Optional[MenuSearchService] = None) -> Flask:
    app = Flask(__name__)
    # Cyrillic stays readable in responses
    app.json.ensure_ascii = False

    @app.before_request
    def _log_request_start():
        g.request_start = time.time()
        g.request_id = uuid.uuid4().hex
        g.request_service = _resolve_service(request.path)

    @app.after_request
    def _log_request_end(response):
        duration_ms = None
        if hasattr(g, 'request_start'):
            duration_ms = round((time.time() - g.request_start) * 1000, 2)

        log_request(
            logger,
            request.method,
            request.path,
            request_id=getattr(g, 'request_id', None),
            request_query=request.query_string.decode('utf-8', errors='ignore') if request.query_string else '',
            request_service=getattr(g, 'request_service', None) or _resolve_service(request.path),
            request_status=response.status_code,
            request_duration_ms=duration_ms,
            remote_addr=request.headers.get('X-Forwarded-For', request.remote_addr),
        )
        return response

    # Enable Gzip compression for all responses
    Compress(app)

    CORS(
        app,
        resources={r"/*": {"origins": _resolve_allowed_origins()}},
        expose_headers='*',
        allow_headers='*',
        methods=['GET', 'POST', 'OPTIONS']
    )

    app.register_blueprint(create_search_blueprint(search_service or create_search_service()))
    return app


if __name__ == '__main__':
    host = os.getenv('FLASK_RUN_HOST', os.getenv('HOST', '0.0.0.0'))
    port = int(os.getenv('FLASK_RUN_PORT', os.getenv('PORT', '5000')))

    logger.info(
        "Starting Flask server",
        extra={
            'host': host,
            'port': port,
            'environment': os.getenv('ENVIRONMENT', 'development'),
            'frontend_origin': os.getenv('FRONTEND_ORIGIN', '*')
        }
    )

    create_app().run(debug=False, host=host, port=port, threaded=True)

"""
Centralized Logging Service for the storefront search backend

Provides one logging setup for every module:
- Structured JSON log file (rotating)
- Human-readable log file (rotating)
- Colored console output in development
- Context passed through extra={} (query, result_count, ...)

Usage:
    from backend.services.system.logger_service import get_logger

    logger = get_logger(__name__)
    logger.info("Search served", extra={"query": "ланч", "result_count": 1})
    logger.error("Catalog fetch failed", extra={"error": str(e)}, exc_info=True)
"""

import logging
import json
import sys
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Dict, Any, Optional
from pathlib import Path


# Attributes every LogRecord carries; anything else arrived via extra={}
_RESERVED_ATTRS = frozenset({
    'name', 'msg', 'args', 'asctime', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName',
    'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'extra_fields', 'taskName',
})


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    One object per line so log shippers can parse it directly.
    """

    def format(self, record: logging.LogRecord) -> str:
        def _infer_feature(logger_name: str) -> str:
            parts = logger_name.split('.') if logger_name else []
            for anchor in ('features', 'services'):
                if anchor in parts:
                    idx = parts.index(anchor)
                    if idx + 1 < len(parts):
                        return parts[idx + 1]
            return parts[0] if parts else 'unknown'

        log_data: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'component': 'backend',
            'feature': _infer_feature(record.name),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        for key, value in _extra_fields(record).items():
            try:
                json.dumps(value, ensure_ascii=False)
                log_data[key] = value
            except (TypeError, ValueError):
                log_data[key] = str(value)

        return json.dumps(log_data, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Colored one-line formatter for local development."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m',
    }

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        colored_level = f"{level_color}{record.levelname:8s}{self.COLORS['RESET']}"
        timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')

        message = record.getMessage()
        extra_parts = [f"{key}={value}" for key, value in _extra_fields(record).items()]
        if extra_parts:
            message += f" | {' '.join(extra_parts)}"

        # [2024-11-16 10:30:45] INFO     [backend.features.search...] Search served | query=ланч
        log_line = f"[{timestamp}] {colored_level} [{record.name}] {message}"
        if record.exc_info:
            log_line += '\n' + self.formatException(record.exc_info)
        return log_line


class LoggerService:
    """
    Logger service singleton.
    Configures the root logger the first time it is constructed.
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(LoggerService, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._initialize_logging()
            LoggerService._initialized = True

    @staticmethod
    def _resolve_log_dir() -> Path:
        configured = os.getenv('LOG_DIR')
        if configured:
            return Path(configured)
        return Path(__file__).resolve().parent.parent.parent.parent / 'logs'

    def _initialize_logging(self):
        log_dir = self._resolve_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)

        log_level_str = os.getenv('LOG_LEVEL', 'INFO').upper()
        log_level = getattr(logging, log_level_str, logging.INFO)
        environment = os.getenv('ENVIRONMENT', 'development').lower()

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        root_logger.handlers.clear()

        json_handler = RotatingFileHandler(
            log_dir / 'storefront_search.json.log',
            maxBytes=20 * 1024 * 1024,  # 20MB per file
            backupCount=5,
            encoding='utf-8'
        )
        json_handler.setLevel(log_level)
        json_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(json_handler)

        text_handler = RotatingFileHandler(
            log_dir / 'storefront_search.log',
            maxBytes=20 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        text_handler.setLevel(log_level)
        text_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root_logger.addHandler(text_handler)

        if environment == 'development':
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(ConsoleFormatter())
            root_logger.addHandler(console_handler)

        # Werkzeug's per-request lines duplicate our own request log
        logging.getLogger('werkzeug').setLevel(logging.ERROR)

        logging.getLogger(__name__).info(
            "Logging initialized",
            extra={
                'environment': environment,
                'log_level': log_level_str,
                'log_dir': str(log_dir),
            }
        )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Configured logger instance
    """
    LoggerService()
    return logging.getLogger(name)


def log_request(logger: logging.Logger, method: str, path: str,
                request_id: Optional[str] = None, **kwargs):
    """Log an HTTP request with the standard field names."""
    logger.info(
        f"{method} {path}",
        extra={
            'request_method': method,
            'request_path': path,
            'request_id': request_id,
            **kwargs
        }
    )


def log_search_operation(logger: logging.Logger, query: str, result_count: int,
                         from_cache: Optional[bool] = None, **kwargs):
    """
    Log a served search with the standard field names.

    Args:
        logger: Logger instance
        query: Raw query string as received
        result_count: Number of ranked matches returned
        from_cache: Whether the search index came from the cache
        **kwargs: Timings and other context
    """
    logger.info(
        "Search served",
        extra={
            'operation': 'SEARCH',
            'query': query,
            'result_count': result_count,
            'index_from_cache': from_cache,
            'resource_type': 'menu_item',
            **kwargs
        }
    )


def log_error(logger: logging.Logger, error: Exception, context: Optional[Dict[str, Any]] = None):
    """Log an exception with its type, message, context and traceback."""
    logger.error(
        f"Error: {str(error)}",
        extra={
            'error_type': type(error).__name__,
            'error_message': str(error),
            **(context or {})
        },
        exc_info=True
    )


_logger_service = LoggerService()

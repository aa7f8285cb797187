"""
Catalog Repository.
Read-only access to the active menu items the search index is built from.
"""
import json
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from backend.common.base.base_repository import BaseRepository
from backend.features.search.service.engine.models import CatalogRecord
from backend.services.system.logger_service import get_logger

logger = get_logger(__name__)


_INACTIVE_FLAGS = frozenset({'0', 'f', 'false', 'n', 'no', 'off'})


def _is_active(flag) -> bool:
    """Read an is_active column as dumped by the store (bool, 0/1, 't'/'f')."""
    if isinstance(flag, str):
        return flag.strip().lower() not in _INACTIVE_FLAGS
    return flag is None or bool(flag)


class CatalogUnavailableError(RuntimeError):
    """The catalog snapshot could not be read."""


class CatalogRepository(BaseRepository[CatalogRecord]):
    """Source of catalog records; implementations never mutate the store."""

    def list_active_items(self) -> List[CatalogRecord]:
        return self.find_all()

    def find_by_id(self, id: int) -> Optional[CatalogRecord]:
        for record in self.find_all():
            if record.id == id:
                return record
        return None


class InMemoryCatalogRepository(CatalogRepository):
    def __init__(self, records: Iterable[CatalogRecord] = ()):
        self._records: List[CatalogRecord] = list(records)

    def find_all(self) -> List[CatalogRecord]:
        return list(self._records)


class JsonCatalogRepository(CatalogRepository):
    """
    Catalog snapshot stored as a JSON array of menu item rows.

    Rows use the store's column names (id, name, composition/description,
    price, discount_percent, image_url, category_name, subcategory_name).
    Rows whose is_active is false, 0 or "f" are skipped. The file is re-read when its
    modification time changes.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._records: List[CatalogRecord] = []
        self._loaded_mtime: Optional[float] = None

    def _read_rows(self) -> List[Dict[str, Any]]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                rows = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogUnavailableError(f"Cannot read catalog {self.path}: {e}") from e
        if not isinstance(rows, list):
            raise CatalogUnavailableError(f"Catalog {self.path} must contain a JSON array")
        return rows

    def find_all(self) -> List[CatalogRecord]:
        with self._lock:
            try:
                mtime = self.path.stat().st_mtime
            except OSError as e:
                raise CatalogUnavailableError(f"Cannot read catalog {self.path}: {e}") from e

            if self._loaded_mtime != mtime:
                records = []
                for row in self._read_rows():
                    if not isinstance(row, dict) or not _is_active(row.get('is_active', True)):
                        continue
                    try:
                        records.append(CatalogRecord.from_row(row))
                    except (KeyError, TypeError, ValueError) as e:
                        logger.warning("Skipping malformed catalog row", extra={"row_id": row.get('id'), "error": str(e)})
                self._records = records
                self._loaded_mtime = mtime
                logger.info("Catalog snapshot loaded", extra={"path": str(self.path), "count": len(records)})

            return list(self._records)

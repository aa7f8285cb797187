from typing import Iterable, List

from .models import CatalogRecord, IndexedItem
from .normalization import normalize_and_tokenize, tokenize_ru


def build_indexed_item(record: CatalogRecord) -> IndexedItem:
    """Pre-compute the normalized text and tokens of one record."""
    normalized_title, title_tokens = normalize_and_tokenize(record.name)
    normalized_description, description_tokens = normalize_and_tokenize(record.description)

    return IndexedItem(
        id=record.id,
        name=record.name,
        normalized_title=normalized_title,
        title_tokens=tuple(title_tokens),
        description=record.description,
        normalized_description=normalized_description,
        description_tokens=tuple(description_tokens),
        category_name=record.category_name,
        category_tokens=tuple(tokenize_ru(record.category_name)),
        subcategory_name=record.subcategory_name,
        subcategory_tokens=tuple(tokenize_ru(record.subcategory_name)),
        price=record.price,
        discount_percent=record.discount_percent,
        image_url=record.image_url,
    )


def build_search_index(records: Iterable[CatalogRecord]) -> List[IndexedItem]:
    """One IndexedItem per record, in input order."""
    return [build_indexed_item(record) for record in records]

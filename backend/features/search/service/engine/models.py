from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class MatchType(str, Enum):
    """How a query token matched an item."""
    EXACT = "exact"
    PREFIX = "prefix"
    SUBSTRING = "substring"
    TYPO = "typo"
    TRIGRAM = "trigram"
    MIXED = "mixed"


def _first_present(row: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return None


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass(frozen=True)
class CatalogRecord:
    """
    A menu item as supplied by the catalog store.

    Attributes:
        id (int): Menu item identifier
        name (str): Display title
        description (Optional[str]): Composition / description text
        category_name (Optional[str]): Top-level category name
        subcategory_name (Optional[str]): Subcategory name
        price (float): Current price
        discount_percent (Optional[float]): Discount, if any
        image_url (Optional[str]): Image location
    """
    id: int
    name: str
    description: Optional[str] = None
    category_name: Optional[str] = None
    subcategory_name: Optional[str] = None
    price: float = 0.0
    discount_percent: Optional[float] = None
    image_url: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "CatalogRecord":
        """Build a record from a store row (snake_case columns or camelCase keys)."""
        return cls(
            id=int(row["id"]),
            name=row.get("name") or "",
            description=_first_present(row, "description", "composition"),
            category_name=_first_present(row, "category_name", "categoryName"),
            subcategory_name=_first_present(row, "subcategory_name", "subcategoryName"),
            price=float(_first_present(row, "price") or 0),
            discount_percent=_optional_float(_first_present(row, "discount_percent", "discountPercent")),
            image_url=_first_present(row, "image_url", "imageUrl"),
        )


@dataclass(frozen=True)
class IndexedItem:
    """
    Pre-computed search fields for one catalog record.

    Token sequences are tuples so an index can be shared between requests
    without copying.
    """
    id: int
    name: str
    normalized_title: str
    title_tokens: Tuple[str, ...]
    description: Optional[str]
    normalized_description: str
    description_tokens: Tuple[str, ...]
    category_name: Optional[str]
    category_tokens: Tuple[str, ...]
    subcategory_name: Optional[str]
    subcategory_tokens: Tuple[str, ...]
    price: float
    discount_percent: Optional[float]
    image_url: Optional[str]


@dataclass
class ScoredMatch:
    """
    A candidate that passed the score threshold for one query.

    Attributes:
        item (IndexedItem): The matched item
        score (float): Accumulated weighted score
        match_type (MatchType): Best single-token match type
        matched_tokens (List[str]): Query tokens that matched, in query order
        title_length (int): Character length of the title (tie-break)
        token_count (int): Number of title tokens (tie-break)
    """
    item: IndexedItem
    score: float
    match_type: MatchType
    matched_tokens: List[str] = field(default_factory=list)
    title_length: int = 0
    token_count: int = 0

    def to_dict(self, include_tokens: bool = False) -> Dict[str, Any]:
        row = {
            "id": self.item.id,
            "name": self.item.name,
            "description": self.item.description,
            "price": self.item.price,
            "discount_percent": self.item.discount_percent,
            "image_url": self.item.image_url,
            "category_name": self.item.category_name,
            "subcategory_name": self.item.subcategory_name,
            "score": round(self.score, 3),
            "match_type": self.match_type.value,
        }
        if include_tokens:
            row["matched_tokens"] = list(self.matched_tokens)
        return row


@dataclass
class SearchOptions:
    """Per-query knobs. None means "derive from the query length"."""
    max_results: int = 10
    min_score: float = 6.0
    allow_typo: Optional[bool] = None
    allow_fuzzy: Optional[bool] = None


@dataclass
class CachedIndexResult:
    index: List[IndexedItem]
    from_cache: bool
    build_time_ms: float

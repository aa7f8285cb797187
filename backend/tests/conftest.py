import os
import tempfile

# Keep test runs from writing into the repository log directory
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="search-test-logs-"))
os.environ.setdefault("ENVIRONMENT", "test")

import pytest

from backend.features.search.service.engine import CatalogRecord, SynonymExpander, build_search_index
from backend.features.search.service.engine.synonyms import DEFAULT_SYNONYMS_PATH

MENU = [
    CatalogRecord(id=1, name="Бизнес-ланч", description="Суп, салат и горячее",
                  category_name="Ланчи", price=450.0),
    CatalogRecord(id=2, name="Капучино", description="Эспрессо с молочной пенкой",
                  category_name="Напитки", subcategory_name="Кофе", price=220.0),
    CatalogRecord(id=3, name="Латте", description="Кофе с молоком",
                  category_name="Напитки", subcategory_name="Кофе", price=240.0),
    CatalogRecord(id=4, name="Эспрессо", category_name="Напитки",
                  subcategory_name="Кофе", price=150.0),
    CatalogRecord(id=5, name="Чай черный", description="Листовой чай",
                  category_name="Напитки", subcategory_name="Чай", price=120.0),
    CatalogRecord(id=6, name="Куриный суп", description="Бульон, курица, лапша",
                  category_name="Супы", price=280.0, discount_percent=10.0),
    CatalogRecord(id=7, name="Шаурма с курицей", description="Лаваш, курица, овощи",
                  category_name="Шаурма", price=320.0),
    CatalogRecord(id=8, name="Пицца Маргарита", description="Томаты, моцарелла, базилик",
                  category_name="Пицца", price=590.0, image_url="https://cdn.example.com/margherita.jpg"),
    CatalogRecord(id=9, name="Картофель фри", category_name="Закуски", price=160.0),
]


@pytest.fixture
def menu_records():
    return list(MENU)


@pytest.fixture
def menu_index(menu_records):
    return build_search_index(menu_records)


@pytest.fixture(scope="session")
def expander():
    return SynonymExpander.from_file(DEFAULT_SYNONYMS_PATH)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()

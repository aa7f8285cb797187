import threading

import pytest

from backend.features.search.service.engine import CatalogRecord, get_cached_index, invalidate_cache
from backend.features.search.service.engine.index_builder import build_indexed_item, build_search_index
from backend.features.search.service.engine.index_cache import IndexCache


def test_indexed_item_fields():
    item = build_indexed_item(CatalogRecord(
        id=1, name="Бизнес-ланч", description="Суп, салат и горячее",
        category_name="Ланчи", subcategory_name="Обеды",
    ))

    assert item.normalized_title == "бизнес ланч"
    assert item.title_tokens == ("бизнес", "ланч")
    assert item.description_tokens == ("суп", "салат", "горячее")
    assert item.category_tokens == ("ланчи",)
    assert item.subcategory_tokens == ("обеды",)
    assert item.name == "Бизнес-ланч"


def test_missing_optional_fields_give_empty_tokens():
    item = build_indexed_item(CatalogRecord(id=2, name="Эспрессо"))

    assert item.normalized_description == ""
    assert item.description_tokens == ()
    assert item.category_tokens == ()
    assert item.subcategory_tokens == ()


def test_index_keeps_input_order(menu_records):
    index = build_search_index(menu_records)
    assert [item.id for item in index] == [record.id for record in menu_records]


def test_record_from_row_accepts_store_columns_and_camel_case():
    snake = CatalogRecord.from_row({
        "id": 5, "name": "Латте", "composition": "Кофе с молоком", "price": "240",
        "category_name": "Напитки", "subcategory_name": "Кофе", "discount_percent": 15,
        "image_url": "latte.jpg",
    })
    camel = CatalogRecord.from_row({
        "id": 5, "name": "Латте", "description": "Кофе с молоком", "price": 240,
        "categoryName": "Напитки", "subcategoryName": "Кофе", "discountPercent": "15",
        "imageUrl": "latte.jpg",
    })

    assert snake == camel
    assert snake.price == 240.0
    assert snake.discount_percent == 15.0


class TestIndexCache:
    def test_second_call_is_served_from_cache(self, menu_records, clock):
        cache = IndexCache(ttl_seconds=60, clock=clock)

        first = cache.get(menu_records)
        second = cache.get(menu_records)

        assert not first.from_cache
        assert second.from_cache
        assert second.index is first.index

    def test_expired_entry_is_rebuilt(self, menu_records, clock):
        cache = IndexCache(ttl_seconds=60, clock=clock)
        first = cache.get(menu_records)

        clock.advance(59)
        assert cache.get(menu_records).from_cache

        clock.advance(1)
        rebuilt = cache.get(menu_records)
        assert not rebuilt.from_cache
        assert rebuilt.index is not first.index

    def test_item_count_change_triggers_rebuild(self, menu_records, clock):
        cache = IndexCache(ttl_seconds=60, clock=clock)
        cache.get(menu_records)

        result = cache.get(menu_records[:-1])

        assert not result.from_cache
        assert len(result.index) == len(menu_records) - 1

    def test_same_count_serves_stale_index_until_ttl(self, menu_records, clock):
        cache = IndexCache(ttl_seconds=60, clock=clock)
        cache.get(menu_records)

        renamed = [CatalogRecord(id=1, name="Обед дня")] + menu_records[1:]
        result = cache.get(renamed)

        assert result.from_cache
        assert result.index[0].name == "Бизнес-ланч"

    def test_force_rebuild(self, menu_records, clock):
        cache = IndexCache(ttl_seconds=60, clock=clock)
        cache.get(menu_records)

        assert not cache.get(menu_records, force_rebuild=True).from_cache

    def test_invalidate(self, menu_records, clock):
        cache = IndexCache(ttl_seconds=60, clock=clock)
        cache.get(menu_records)

        cache.invalidate()

        assert cache.stats()["cached"] is False
        assert not cache.get(menu_records).from_cache

    def test_stats(self, menu_records, clock):
        cache = IndexCache(ttl_seconds=60, clock=clock)
        cache.get(menu_records)
        clock.advance(5)
        cache.get(menu_records)
        cache.invalidate()
        cache.get(menu_records)

        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 2
        assert stats["rebuilds"] == 2
        assert stats["invalidations"] == 1
        assert stats["item_count"] == len(menu_records)
        assert stats["age_seconds"] == 0
        assert stats["ttl_seconds"] == 60

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_ttl_must_be_positive(self, ttl):
        with pytest.raises(ValueError):
            IndexCache(ttl_seconds=ttl)


def test_concurrent_gets_and_invalidations_never_expose_a_mixed_index(menu_records):
    cache = IndexCache(ttl_seconds=60)
    full, short = menu_records, menu_records[:-2]
    workers, rounds = 8, 50
    barrier = threading.Barrier(workers)
    mismatches = []
    invalidations = []

    def worker(n):
        barrier.wait()
        for i in range(rounds):
            records = full if (n + i) % 2 else short
            result = cache.get(records)
            if [item.id for item in result.index] != [record.id for record in records]:
                mismatches.append((n, i, len(result.index), len(records)))
            if i % 10 == n:
                cache.invalidate()
                invalidations.append(n)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert not any(thread.is_alive() for thread in threads)
    assert mismatches == []
    stats = cache.stats()
    assert stats["hits"] + stats["misses"] == workers * rounds
    assert stats["rebuilds"] == stats["misses"]
    assert stats["invalidations"] == len(invalidations) == workers * rounds // 10


def test_module_level_cache(menu_records):
    invalidate_cache()
    try:
        assert not get_cached_index(menu_records).from_cache
        assert get_cached_index(menu_records).from_cache
    finally:
        invalidate_cache()

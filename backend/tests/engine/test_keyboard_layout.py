from backend.features.search.service.engine.keyboard_layout import (
    build_query_variants,
    swap_layout_en_to_ru,
    swap_layout_ru_to_en,
)


def test_en_to_ru():
    assert swap_layout_en_to_ru("gbwwf") == "пицца"
    assert swap_layout_en_to_ru("rjat") == "кофе"


def test_ru_to_en():
    assert swap_layout_ru_to_en("пицца") == "gbwwf"


def test_case_is_kept():
    assert swap_layout_en_to_ru("Gbwwf") == "Пицца"


def test_unmapped_characters_pass_through():
    assert swap_layout_en_to_ru("123 ") == "123 "


def test_query_variants_original_first():
    assert build_query_variants("gbwwf") == ["gbwwf", "пицца"]
    assert build_query_variants("пицца") == ["пицца", "gbwwf"]


def test_query_variants_drop_blanks_and_repeats():
    assert build_query_variants("   ") == []
    assert build_query_variants("123") == ["123"]

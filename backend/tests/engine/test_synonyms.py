import json

import pytest

from backend.features.search.service.engine.normalization import tokenize_ru
from backend.features.search.service.engine.synonyms import (
    DEFAULT_SYNONYMS_PATH,
    SynonymConfigError,
    SynonymExpander,
    get_default_expander,
)


def test_true_synonyms_expand(expander):
    assert expander.expand(["шаверма"]) == ["шаверма", "шаурма"]
    assert expander.expand(["гамбургер"]) == ["гамбургер", "бургер"]


def test_original_tokens_come_first(expander):
    expanded = expander.expand(["питца", "шавурма"])
    assert expanded[:2] == ["питца", "пицца"]
    assert expanded.index("шавурма") < expanded.index("шаурма")


def test_soft_expansions_can_be_excluded(expander):
    assert expander.expand(["капучино"]) == ["капучино", "кофе"]
    assert expander.expand(["капучино"], include_soft=False) == ["капучино"]


def test_unknown_token_expands_to_itself(expander):
    assert expander.expand(["борщ"]) == ["борщ"]


def test_dictionary_keys_are_normalized(expander):
    # "wok" is stored under its normalized form
    assert expander.expand(tokenize_ru("WOK")) == ["wок", "вок"]


def test_reverse_lookup_adds_canonical_entry():
    expander = SynonymExpander({"комбо": ["набор"]}, {})
    assert expander.expand(["набор"]) == ["набор", "комбо"]


def test_soft_expansions_are_one_directional():
    expander = SynonymExpander({}, {"латте": ["кофе"]})
    assert expander.expand(["кофе"]) == ["кофе"]


def test_is_soft_expansion(expander):
    assert expander.is_soft_expansion("капучино", "кофе")
    assert not expander.is_soft_expansion("кофе", "капучино")
    assert not expander.is_soft_expansion("шаверма", "шаурма")


def test_are_synonyms(expander):
    assert expander.are_synonyms("бургер", "гамбургер")
    assert expander.are_synonyms("суп", "супчик")
    assert expander.are_synonyms("чай", "чай")
    assert not expander.are_synonyms("капучино", "кофе")


def test_get_synonyms(expander):
    assert expander.get_synonyms("фри") == ["фри", "картошка", "картофель"]


def test_phrases_are_split_and_self_references_dropped():
    expander = SynonymExpander({}, {"картошка": ["картошка фри"]})
    assert expander.soft_expansions == {"картошка": ["фри"]}


def test_pair_in_both_tables_is_rejected():
    with pytest.raises(SynonymConfigError):
        SynonymExpander({"фри": ["картошка"]}, {"фри": ["картошка"]})


def test_malformed_table_is_rejected():
    with pytest.raises(SynonymConfigError):
        SynonymExpander({"фри": "картошка"}, {})


def test_from_file(tmp_path):
    path = tmp_path / "synonyms.json"
    path.write_text(json.dumps({
        "true_synonyms": {"питса": ["пицца"]},
        "soft_expansions": {"морс": ["напитки"]},
    }, ensure_ascii=False), encoding="utf-8")

    expander = SynonymExpander.from_file(path)

    assert expander.expand(["питса"]) == ["питса", "пицца"]
    assert expander.is_soft_expansion("морс", "напитки")


def test_invalid_json_is_a_config_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SynonymConfigError) as excinfo:
        SynonymExpander.from_file(path)
    assert isinstance(excinfo.value, ValueError)


def test_default_expander_is_shared():
    assert get_default_expander(str(DEFAULT_SYNONYMS_PATH)) is get_default_expander(str(DEFAULT_SYNONYMS_PATH))

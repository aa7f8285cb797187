from backend.features.search.service.engine import CatalogRecord, MatchType, ScoredMatch
from backend.features.search.service.engine.index_builder import build_indexed_item
from backend.features.search.service.engine.ranking import rank_matches, should_auto_navigate


def _match(item_id, name, score=10.0, match_type=MatchType.EXACT):
    item = build_indexed_item(CatalogRecord(id=item_id, name=name))
    return ScoredMatch(
        item=item,
        score=score,
        match_type=match_type,
        title_length=len(name),
        token_count=len(item.title_tokens),
    )


def _ids(matches):
    return [match.item.id for match in matches]


class TestRankMatches:
    def test_higher_score_first(self):
        ranked = rank_matches([_match(1, "Суп", 6), _match(2, "Суп", 12), _match(3, "Суп", 9)])
        assert _ids(ranked) == [2, 3, 1]

    def test_match_type_breaks_score_ties(self):
        matches = [
            _match(1, "Ролл", match_type=MatchType.TRIGRAM),
            _match(2, "Ролл", match_type=MatchType.MIXED),
            _match(3, "Ролл", match_type=MatchType.SUBSTRING),
            _match(4, "Ролл", match_type=MatchType.TYPO),
            _match(5, "Ролл", match_type=MatchType.PREFIX),
            _match(6, "Ролл", match_type=MatchType.EXACT),
        ]
        assert _ids(rank_matches(matches)) == [6, 5, 4, 3, 2, 1]

    def test_shorter_title_first(self):
        ranked = rank_matches([_match(1, "Капучино большой"), _match(2, "Капучино")])
        assert _ids(ranked) == [2, 1]

    def test_fewer_tokens_first(self):
        ranked = rank_matches([_match(1, "Суп дня"), _match(2, "Суповой")])
        assert _ids(ranked) == [2, 1]

    def test_name_then_id(self):
        ranked = rank_matches([
            _match(3, "Морс"),
            _match(2, "Елки"),
            _match(1, "Ёлка"),
            _match(4, "Морс"),
        ])
        assert _ids(ranked) == [1, 2, 3, 4]

    def test_truncates_to_max_results(self):
        matches = [_match(i, "Суп", score=i) for i in range(1, 15)]

        assert len(rank_matches(matches)) == 10
        assert _ids(rank_matches(matches, max_results=3)) == [14, 13, 12]

    def test_ranking_is_stable_under_shuffling(self):
        matches = [_match(i, name) for i, name in enumerate(["Чай", "Морс", "Сок", "Квас"], start=1)]
        assert _ids(rank_matches(matches)) == _ids(rank_matches(list(reversed(matches))))


class TestShouldAutoNavigate:
    def test_single_strong_match(self):
        assert should_auto_navigate([_match(1, "Бизнес-ланч", 10)], "ланч")

    def test_needs_exactly_one_match(self):
        assert not should_auto_navigate([], "ланч")
        assert not should_auto_navigate([_match(1, "Ланч", 10), _match(2, "Ланч", 10)], "ланч")

    def test_needs_four_character_query(self):
        assert not should_auto_navigate([_match(1, "Суп", 10)], "суп")

    def test_needs_score_of_eight(self):
        assert not should_auto_navigate([_match(1, "Ланч", 7)], "ланч")
        assert should_auto_navigate([_match(1, "Ланч", 8)], "ланч")

    def test_substring_only_never_navigates(self):
        assert not should_auto_navigate([_match(1, "Ланч", 10, MatchType.SUBSTRING)], "ланч")

    def test_typo_match_can_navigate(self):
        assert should_auto_navigate([_match(1, "Бизнес-ланч", 14, MatchType.TYPO)], "бизес ланч")

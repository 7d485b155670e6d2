import random
import pytest
from datetime import datetime, timedelta, timezone

from sitemedic.core.enums import QuoteStatus, SortMode, StaffingRole
from sitemedic.schemas.quote import Quote, QuoteFilters
from sitemedic.services.scoring import (
    calculate_price_score,
    calculate_rating_score,
    filter_quotes,
    rank_quotes_by_best_value,
    sort_quotes,
)

BASE = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)


def make_quote(qid, price, rating=None, minutes=0, status=QuoteStatus.SUBMITTED, quals=None):
    return Quote(
        id=qid,
        total_price=price,
        company_rating=rating,
        submitted_at=BASE + timedelta(minutes=minutes),
        status=status,
        qualifications=quals or [],
    )


class TestBestValueRanking:
    """Blend of price and rating scores with deterministic ordering"""

    def test_three_quote_scenario(self):
        quotes = [
            make_quote("q1", 1000, 5, minutes=0),
            make_quote("q2", 1500, 3, minutes=60),
            make_quote("q3", 2000, 4, minutes=120),
        ]
        ranked = rank_quotes_by_best_value(quotes)

        assert [r.quote.id for r in ranked] == ["q1", "q2", "q3"]
        assert [r.rank for r in ranked] == [1, 2, 3]
        # q1: 0.6*100 + 0.4*100, q2: 0.6*50 + 0.4*60, q3: 0.6*0 + 0.4*80
        assert ranked[0].best_value_score == pytest.approx(100.0)
        assert ranked[1].best_value_score == pytest.approx(54.0)
        assert ranked[2].best_value_score == pytest.approx(32.0)

    def test_price_dominates_rating(self):
        quotes = [
            make_quote("cheap_unrated", 1000, None),
            make_quote("dear_top_rated", 2000, 5),
        ]
        ranked = rank_quotes_by_best_value(quotes)

        # 60 for the cheapest price beats 40 for a perfect rating
        assert ranked[0].quote.id == "cheap_unrated"
        assert ranked[0].best_value_score == pytest.approx(60.0)
        assert ranked[1].best_value_score == pytest.approx(40.0)

    def test_single_quote_scores_100(self):
        for rating in (None, 0, 2.5, 5):
            ranked = rank_quotes_by_best_value([make_quote("only", 750, rating)])
            assert len(ranked) == 1
            assert ranked[0].best_value_score == 100.0
            assert ranked[0].rank == 1

    def test_identical_prices_give_neutral_price_score(self):
        quotes = [make_quote(f"q{i}", 1200, rating, minutes=i) for i, rating in enumerate([5, 4, None])]
        ranked = rank_quotes_by_best_value(quotes)

        assert all(r.price_score == 50.0 for r in ranked)
        assert [r.quote.id for r in ranked] == ["q0", "q1", "q2"]

    def test_null_rating_still_ranked(self):
        quotes = [make_quote("rated", 1000, 4), make_quote("unrated", 1000, None)]
        ranked = rank_quotes_by_best_value(quotes)

        assert len(ranked) == 2
        unrated = next(r for r in ranked if r.quote.id == "unrated")
        assert unrated.rating_score == 0.0

    def test_only_submitted_and_revised_are_ranked(self):
        quotes = [
            make_quote("submitted", 1000, 4),
            make_quote("revised", 1100, 4, status=QuoteStatus.REVISED),
            make_quote("draft", 500, 5, status=QuoteStatus.DRAFT),
            make_quote("withdrawn", 600, 5, status=QuoteStatus.WITHDRAWN),
        ]
        ranked = rank_quotes_by_best_value(quotes)

        assert {r.quote.id for r in ranked} == {"submitted", "revised"}

    def test_empty_input(self):
        assert rank_quotes_by_best_value([]) == []

    def test_tie_break_recent_then_rating(self):
        # Same price and rating for a/b: most recent wins
        # c and d share price and submission time: higher rating wins
        quotes = [
            make_quote("a", 1000, 4, minutes=0),
            make_quote("b", 1000, 4, minutes=30),
        ]
        ranked = rank_quotes_by_best_value(quotes)
        assert [r.quote.id for r in ranked] == ["b", "a"]

        same_time = [
            make_quote("c", 1000, None, minutes=10),
            make_quote("d", 1000, 0, minutes=10),
        ]
        ranked = rank_quotes_by_best_value(same_time)
        assert ranked[0].best_value_score == ranked[1].best_value_score
        assert [r.quote.id for r in ranked] == ["d", "c"]

    def test_near_equal_scores_ordered_before_tie_break(self):
        quotes = [
            make_quote("cheap", 1000, None, minutes=0),
            make_quote("dear", 2000, None, minutes=0),
            # 0.06 * 500 + 8 * 3 = 54.000, submitted later
            make_quote("later", 1500, 3, minutes=90),
            # 0.06 * 500.05 + 8 * 3 = 54.003
            make_quote("earlier", 1499.95, 3, minutes=30),
        ]
        ranked = rank_quotes_by_best_value(quotes)

        assert ranked[1].best_value_score == ranked[2].best_value_score == 54.0
        assert [r.quote.id for r in ranked] == ["cheap", "earlier", "later", "dear"]

    def test_ranking_stable_under_reordering(self):
        quotes = [
            make_quote("a", 1000, 4, minutes=5),
            make_quote("b", 1000, 4, minutes=5),
            make_quote("c", 1500, 5, minutes=1),
            make_quote("d", 1200, None, minutes=9),
            make_quote("e", 2000, 2, minutes=3),
        ]
        expected = [r.quote.id for r in rank_quotes_by_best_value(quotes)]

        rng = random.Random(42)
        for _ in range(10):
            shuffled = quotes[:]
            rng.shuffle(shuffled)
            assert [r.quote.id for r in rank_quotes_by_best_value(shuffled)] == expected


class TestSubScores:

    @pytest.mark.parametrize("price,expected", [
        (1000.0, 100.0),
        (1500.0, 50.0),
        (2000.0, 0.0),
        (1250.0, 75.0),
    ])
    def test_price_score_linear(self, price, expected):
        assert calculate_price_score(price, 1000.0, 2000.0) == pytest.approx(expected)

    def test_price_score_tie(self):
        assert calculate_price_score(900.0, 900.0, 900.0) == 50.0

    @pytest.mark.parametrize("rating,expected", [
        (None, 0.0),
        (0, 0.0),
        (2.5, 50.0),
        (5, 100.0),
    ])
    def test_rating_score(self, rating, expected):
        assert calculate_rating_score(rating) == pytest.approx(expected)


class TestSortAndFilter:

    def setup_method(self):
        self.quotes = [
            make_quote("q1", 1000, 5, minutes=0, quals=[StaffingRole.PARAMEDIC]),
            make_quote("q2", 1500, 3, minutes=60, quals=[StaffingRole.EMT]),
            make_quote("q3", 2000, 4, minutes=120, quals=[StaffingRole.PARAMEDIC, StaffingRole.NURSE]),
            make_quote("draft", 100, 5, minutes=200, status=QuoteStatus.DRAFT),
        ]

    def test_drafts_never_listed(self):
        assert "draft" not in {q.id for q in filter_quotes(self.quotes)}

    def test_price_low(self):
        ranked = sort_quotes(filter_quotes(self.quotes), SortMode.PRICE_LOW)
        assert [r.quote.id for r in ranked] == ["q1", "q2", "q3"]
        assert all(r.best_value_score == 0.0 for r in ranked)

    def test_price_high(self):
        ranked = sort_quotes(filter_quotes(self.quotes), SortMode.PRICE_HIGH)
        assert [r.quote.id for r in ranked] == ["q3", "q2", "q1"]

    def test_rating(self):
        ranked = sort_quotes(filter_quotes(self.quotes), SortMode.RATING)
        assert [r.quote.id for r in ranked] == ["q1", "q3", "q2"]

    def test_recent(self):
        ranked = sort_quotes(filter_quotes(self.quotes), SortMode.RECENT)
        assert [r.quote.id for r in ranked] == ["q3", "q2", "q1"]

    def test_filters(self):
        filters = QuoteFilters(qualification=StaffingRole.PARAMEDIC, price_max=1800)
        assert [q.id for q in filter_quotes(self.quotes, filters)] == ["q1"]

        filters = QuoteFilters(price_min=1200, min_rating=3.5)
        assert [q.id for q in filter_quotes(self.quotes, filters)] == ["q3"]

"""Retailer Scorer unit testleri."""

from datetime import datetime, timedelta

from src.insights.retailer_scorer import NEVER_VISITED_DAYS, RetailerScorer
from src.models.sales import (
    Order,
    PotentialTier,
    Retailer,
    RetailerPriority,
    Visit,
)

NOW = datetime(2024, 6, 12, 10, 0)


def _retailer(**overrides) -> Retailer:
    fields = dict(
        retailer_id="R1",
        name="Sharma Kirana",
        beat_id="B1",
        beat_name="Andheri East",
        potential=PotentialTier.LOW,
        last_visit_date=NOW - timedelta(days=2),
    )
    fields.update(overrides)
    return Retailer(**fields)


def _order(amount: float, days_ago: int, status: str = "confirmed", retailer_id: str = "R1") -> Order:
    return Order(
        order_id=f"O-{amount}-{days_ago}",
        retailer_id=retailer_id,
        user_id="U1",
        total_amount=amount,
        created_at=NOW - timedelta(days=days_ago),
        status=status,
    )


def _visit(days_ago: int, status: str) -> Visit:
    visited = NOW - timedelta(days=days_ago)
    return Visit(
        visit_id=f"V{days_ago}",
        user_id="U1",
        retailer_id="R1",
        planned_date=visited.date(),
        status=status,
        created_at=visited,
    )


class TestScoringScenarios:
    """Skor senaryoları ve gerekçeler."""

    def test_recency_bracket(self):
        retailer = _retailer(last_visit_date=NOW - timedelta(days=40))
        result = RetailerScorer().score(retailer, [], [], NOW)
        assert result.priority_score == 80
        assert result.reasons == ["Not visited in 40 days"]
        assert result.days_since_last_visit == 40

    def test_full_stack_is_capped(self):
        retailer = _retailer(
            last_visit_date=None,
            pending_amount=12000,
            potential=PotentialTier.HIGH,
            priority=RetailerPriority.HIGH,
        )
        orders = [_order(11000, 10), _order(11000, 20)]
        result = RetailerScorer().score(retailer, orders, [], NOW)
        assert result.priority_score == 100
        assert result.days_since_last_visit == NEVER_VISITED_DAYS
        assert result.reasons == [
            f"Not visited in {NEVER_VISITED_DAYS} days",
            "High pending: ₹12,000",
            "High potential retailer",
            "High value: ₹11,000 avg",
        ]

    def test_default_reason(self):
        retailer = _retailer(potential=PotentialTier.MEDIUM)
        result = RetailerScorer().score(retailer, [], [], NOW)
        assert result.priority_score == 60
        assert result.reasons == ["Regular visit schedule"]

    def test_priority_reason_without_high_potential(self):
        retailer = _retailer(priority=RetailerPriority.HIGH)
        result = RetailerScorer().score(retailer, [], [], NOW)
        assert result.priority_score == 60
        assert result.reasons == ["Marked as high priority"]

    def test_mid_recency_reason(self):
        retailer = _retailer(last_visit_date=NOW - timedelta(days=20))
        result = RetailerScorer().score(retailer, [], [], NOW)
        assert result.priority_score == 70
        assert result.reasons == ["Last visit 20 days ago"]

    def test_short_recency_adds_points_without_reason(self):
        retailer = _retailer(last_visit_date=NOW - timedelta(days=10))
        result = RetailerScorer().score(retailer, [], [], NOW)
        assert result.priority_score == 60
        assert result.reasons == ["Regular visit schedule"]

    def test_pending_reason_formatting(self):
        retailer = _retailer(pending_amount=7500)
        result = RetailerScorer().score(retailer, [], [], NOW)
        assert result.priority_score == 65
        assert result.reasons == ["Pending: ₹7,500"]

    def test_high_value_average_rounded(self):
        orders = [_order(10000, 5), _order(11001, 6)]
        result = RetailerScorer().score(_retailer(), orders, [], NOW)
        assert "High value: ₹10,501 avg" in result.reasons


class TestScoreProperties:
    """Skor sınırları ve monotonluk."""

    def test_bounds_and_reasons(self):
        scorer = RetailerScorer()
        for tier in PotentialTier:
            for pending in (0, 3000, 6000, 50000):
                for days in (None, 1, 8, 15, 31):
                    last = NOW - timedelta(days=days) if days else None
                    r = _retailer(potential=tier, pending_amount=pending, last_visit_date=last)
                    result = scorer.score(r, [], [], NOW)
                    assert 50 <= result.priority_score <= 100
                    assert result.reasons

    def test_monotonic_in_pending(self):
        scorer = RetailerScorer()
        scores = [
            scorer.score(_retailer(pending_amount=p), [], [], NOW).priority_score
            for p in (0, 100, 5001, 10001)
        ]
        assert scores == sorted(scores)
        assert scores[0] < scores[-1]

    def test_monotonic_in_recency(self):
        scorer = RetailerScorer()
        scores = [
            scorer.score(
                _retailer(last_visit_date=NOW - timedelta(days=d)), [], [], NOW
            ).priority_score
            for d in (1, 8, 15, 31)
        ]
        assert scores == sorted(scores)

    def test_negative_pending_treated_as_zero(self):
        result = RetailerScorer().score(_retailer(pending_amount=-500), [], [], NOW)
        assert result.pending_amount == 0
        assert result.priority_score == 50


class TestScoringInputs:
    """Ziyaret ve sipariş girdilerinin kullanımı."""

    def test_recent_visit_overrides_stale_last_visit(self):
        retailer = _retailer(last_visit_date=NOW - timedelta(days=40))
        visits = [_visit(3, "productive")]
        assert RetailerScorer().days_since_last_visit(retailer, visits, NOW) == 3

    def test_cancelled_visit_ignored(self):
        retailer = _retailer(last_visit_date=NOW - timedelta(days=40))
        visits = [_visit(3, "cancelled"), _visit(5, "planned")]
        assert RetailerScorer().days_since_last_visit(retailer, visits, NOW) == 40

    def test_average_uses_confirmed_orders_in_window(self):
        orders = [
            _order(2000, 10),
            _order(4000, 20),
            _order(90000, 5, status="pending"),
            _order(90000, 120),
        ]
        avg = RetailerScorer().average_order_value(_retailer(), orders, NOW)
        assert avg == 3000

    def test_average_falls_back_to_stored_value(self):
        retailer = _retailer(order_value=6000)
        result = RetailerScorer().score(retailer, [], [], NOW)
        assert result.avg_order_value == 6000
        assert result.priority_score == 60

    def test_score_all_keeps_input_order(self):
        retailers = [_retailer(retailer_id=f"R{i}") for i in range(5)]
        orders = [_order(20000, 3, retailer_id="R3")]
        scores = RetailerScorer().score_all(retailers, orders, [], NOW)
        assert [s.retailer_id for s in scores] == ["R0", "R1", "R2", "R3", "R4"]
        assert scores[3].avg_order_value == 20000
        assert scores[0].avg_order_value == 0

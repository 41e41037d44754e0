"""Beat Trend Analyzer unit testleri."""

from datetime import datetime, timedelta

from src.insights.beat_trend_analyzer import MAX_SUGGESTIONS, BeatTrendAnalyzer
from src.models.sales import Order, OrderItem, ProductKey

NOW = datetime(2024, 6, 12, 10, 0)
ROSTER = [f"R{i}" for i in range(10)]


def _order(retailer_id: str, product_id: str, quantity: float = 5, days_ago: int = 3,
           unit: str = "KG", status: str = "confirmed") -> Order:
    order_id = f"O-{retailer_id}-{product_id}-{days_ago}"
    return Order(
        order_id=order_id,
        retailer_id=retailer_id,
        user_id="U1",
        total_amount=100.0,
        created_at=NOW - timedelta(days=days_ago),
        status=status,
        items=[OrderItem(order_id=order_id, product_id=product_id,
                         product_name=f"Product {product_id}", quantity=quantity, unit=unit)],
    )


class TestBeatTrendGating:
    """%30 yaygınlık eşiği ve hedef bayi hariç tutma."""

    def test_threshold_is_inclusive(self):
        orders = [_order(r, "X") for r in ROSTER[:3]] + [_order(r, "Y") for r in ROSTER[:2]]
        suggestions = BeatTrendAnalyzer().analyze(orders, ROSTER, [], NOW)
        assert [s.product_id for s in suggestions] == ["X"]
        x = suggestions[0]
        assert x.beat_penetration == 30
        assert x.retailer_count == 3
        assert x.total_beat_retailers == 10
        assert x.reason == "30% of retailers in this beat order this"

    def test_target_products_excluded(self):
        orders = [_order(r, "Z") for r in ROSTER[:5]]
        suggestions = BeatTrendAnalyzer().analyze(orders, ROSTER, [ProductKey("Z")], NOW)
        assert suggestions == []

    def test_variant_key_does_not_exclude_base_product(self):
        orders = [_order(r, "Z") for r in ROSTER[:5]]
        suggestions = BeatTrendAnalyzer().analyze(
            orders, ROSTER, [ProductKey("Z", "V1")], NOW
        )
        assert [s.product_id for s in suggestions] == ["Z"]

    def test_empty_roster(self):
        orders = [_order("R1", "X")]
        assert BeatTrendAnalyzer().analyze(orders, [], [], NOW) == []

    def test_outside_roster_and_window_ignored(self):
        orders = (
            [_order(f"OUT{i}", "X") for i in range(5)]
            + [_order(r, "X", days_ago=45) for r in ROSTER[:5]]
            + [_order(r, "X", status="pending") for r in ROSTER[5:9]]
        )
        assert BeatTrendAnalyzer().analyze(orders, ROSTER, [], NOW) == []

    def test_same_retailer_counted_once(self):
        orders = [_order("R1", "X", days_ago=d) for d in (1, 2, 3, 4)]
        assert BeatTrendAnalyzer().analyze(orders, ROSTER, [], NOW) == []


class TestBeatTrendOutput:
    """Önerilen miktar, birim ve sıralama."""

    def test_median_quantity_and_unit(self):
        orders = [
            _order("R0", "X", quantity=2, unit="G"),
            _order("R1", "X", quantity=8, unit="G"),
            _order("R2", "X", quantity=4, unit="KG"),
            _order("R3", "X", quantity=6, unit="G"),
        ]
        x = BeatTrendAnalyzer().analyze(orders, ROSTER, [], NOW)[0]
        assert x.suggested_quantity == 6
        assert x.unit == "G"
        assert x.beat_penetration == 40

    def test_sorted_by_penetration_and_capped(self):
        orders = []
        for idx, product in enumerate(["A", "B", "C", "D", "E", "F", "G"]):
            for r in ROSTER[: 3 + idx]:
                orders.append(_order(r, product))
        suggestions = BeatTrendAnalyzer().analyze(orders, ROSTER, [], NOW)
        assert len(suggestions) == MAX_SUGGESTIONS
        assert [s.product_id for s in suggestions] == ["G", "F", "E", "D", "C"]

"""Pack Upsell Analyzer unit testleri."""

from datetime import datetime, timedelta

from src.insights.pack_upsell_analyzer import MAX_SUGGESTIONS, PackUpsellAnalyzer
from src.insights.repeat_order_analyzer import build_history
from src.models.sales import Order, OrderItem, Product, ProductVariant

NOW = datetime(2024, 6, 12, 10, 0)


def _product(product_id: str, sizes: list) -> Product:
    return Product(
        product_id=product_id,
        name=f"Product {product_id}",
        variants=[
            ProductVariant(
                variant_id=f"{product_id}-{name}",
                product_id=product_id,
                variant_name=name,
                price=price,
                is_active=active,
            )
            for name, price, active in sizes
        ],
    )


def _history(*lines):
    """lines: (product_id, variant_id | None, days_ago)"""
    orders = []
    for idx, (product_id, variant_id, days_ago) in enumerate(lines):
        order_id = f"O{idx}"
        orders.append(
            Order(
                order_id=order_id,
                retailer_id="R1",
                user_id="U1",
                total_amount=100.0,
                created_at=NOW - timedelta(days=days_ago),
                items=[OrderItem(order_id=order_id, product_id=product_id,
                                 product_name=f"Product {product_id}", quantity=2,
                                 variant_id=variant_id)],
            )
        )
    return build_history(orders)


class TestBaseProductUpsell:
    """Varyantsız sipariş: en küçük ve en büyük paket karşılaştırması."""

    def test_exact_ten_percent_is_emitted(self):
        product = _product("P1", [("250G", 50.0, True), ("1KG", 180.0, True)])
        suggestions = PackUpsellAnalyzer().analyze([product], _history(("P1", None, 3)))
        assert len(suggestions) == 1
        s = suggestions[0]
        assert s.savings_percent == 10
        assert s.current_size == "Base"
        assert s.suggested_size == "1KG"
        assert s.suggested_variant_id == "P1-1KG"
        assert s.current_variant_id is None
        assert s.reason == "Save 10% per unit with 1KG"

    def test_below_threshold_skipped(self):
        product = _product("P1", [("250G", 50.0, True), ("1KG", 185.0, True)])
        assert PackUpsellAnalyzer().analyze([product], _history(("P1", None, 3))) == []

    def test_unparseable_variants_excluded(self):
        product = _product("P1", [("Pouch", 50.0, True), ("Jar", 100.0, True), ("1KG", 150.0, True)])
        assert PackUpsellAnalyzer().analyze([product], _history(("P1", None, 3))) == []

    def test_inactive_variant_excluded(self):
        product = _product("P1", [("250G", 50.0, True), ("1KG", 100.0, False)])
        assert PackUpsellAnalyzer().analyze([product], _history(("P1", None, 3))) == []

    def test_variant_only_orders_are_not_seeds(self):
        product = _product("P1", [("250G", 50.0, True), ("1KG", 100.0, True)])
        history = _history(("P1", "P1-250G", 3))
        assert PackUpsellAnalyzer().analyze([product], history) == []

    def test_capped_at_limit(self):
        products = [
            _product(f"P{i}", [("100G", 30.0, True), ("1KG", 200.0, True)]) for i in range(8)
        ]
        history = _history(*[(f"P{i}", None, 3) for i in range(8)])
        assert len(PackUpsellAnalyzer().analyze(products, history)) == MAX_SUGGESTIONS


class TestCurrentVariantUpsell:
    """Bayinin aldığı varyanttan daha büyük ve gram başı daha ucuz paket."""

    def test_best_per_gram_larger_variant(self):
        product = _product(
            "P1",
            [("250G", 50.0, True), ("500G", 95.0, True), ("1KG", 160.0, True), ("100G", 15.0, True)],
        )
        history = _history(("P1", None, 10), ("P1", "P1-250G", 3), ("P1", "P1-250G", 5))
        suggestions = PackUpsellAnalyzer().analyze([product], history)
        assert len(suggestions) == 1
        s = suggestions[0]
        assert s.current_size == "250G"
        assert s.current_variant_id == "P1-250G"
        assert s.suggested_size == "1KG"
        assert s.savings_percent == 20

    def test_no_cheaper_larger_variant(self):
        product = _product("P1", [("250G", 50.0, True), ("1KG", 220.0, True)])
        history = _history(("P1", None, 10), ("P1", "P1-250G", 3))
        assert PackUpsellAnalyzer().analyze([product], history) == []

    def test_largest_variant_has_no_upgrade(self):
        product = _product("P1", [("250G", 60.0, True), ("1KG", 100.0, True)])
        history = _history(("P1", None, 10), ("P1", "P1-1KG", 3))
        assert PackUpsellAnalyzer().analyze([product], history) == []

"""Beat Trend Analyzer - Aynı beat'teki bayilerin yaygın aldığı, hedef bayinin almadığı ürünler."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Iterable, Optional

from src.insights.repeat_order_analyzer import confirmed_in_window
from src.insights.stats import most_frequent, round_half_up, typical_value
from src.models.sales import BeatTrendingSuggestion, Order, ProductKey

logger = logging.getLogger(__name__)

TREND_WINDOW_DAYS = 30
MIN_PENETRATION = 0.30
MAX_SUGGESTIONS = 5


class BeatTrendAnalyzer:

    def analyze(
        self,
        beat_orders: list[Order],
        beat_retailer_ids: Iterable[str],
        target_product_keys: Iterable[ProductKey],
        reference_time: Optional[datetime] = None,
    ) -> list[BeatTrendingSuggestion]:
        roster = set(beat_retailer_ids)
        if not roster:
            return []

        if reference_time is not None:
            beat_orders = confirmed_in_window(beat_orders, reference_time, TREND_WINDOW_DAYS)
        else:
            beat_orders = [o for o in beat_orders if o.is_confirmed]

        excluded = set(target_product_keys)
        retailers: dict[ProductKey, set[str]] = defaultdict(set)
        quantities: dict[ProductKey, list[float]] = defaultdict(list)
        units: dict[ProductKey, list[str]] = defaultdict(list)
        names: dict[ProductKey, tuple[str, Optional[str]]] = {}

        for order in beat_orders:
            if order.retailer_id not in roster:
                continue
            for item in order.items:
                key = item.key
                retailers[key].add(order.retailer_id)
                quantities[key].append(item.quantity)
                units[key].append(item.unit or "KG")
                names.setdefault(key, (item.product_name, item.variant_name))

        candidates = []
        for key, ordering in retailers.items():
            penetration = len(ordering) / len(roster)
            if penetration < MIN_PENETRATION or key in excluded:
                continue
            percent = int(round_half_up(penetration * 100))
            product_name, variant_name = names[key]
            candidates.append(
                (
                    penetration,
                    BeatTrendingSuggestion(
                        product_id=key.product_id,
                        product_name=product_name,
                        suggested_quantity=typical_value(quantities[key]),
                        unit=most_frequent(units[key]),
                        beat_penetration=percent,
                        retailer_count=len(ordering),
                        total_beat_retailers=len(roster),
                        reason=f"{percent}% of retailers in this beat order this",
                        variant_id=key.variant_id,
                        variant_name=variant_name,
                    ),
                )
            )

        candidates.sort(key=lambda c: c[0], reverse=True)
        logger.debug("Beat trendi: %d aday ürün", len(candidates))
        return [suggestion for _, suggestion in candidates[:MAX_SUGGESTIONS]]

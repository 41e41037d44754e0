"""Repeat Order Analyzer - Bayinin kendi sipariş geçmişinden tekrar sipariş önerileri.

Güven skoru = 0.5·sıklık + 0.3·yenilik + 0.2·tutarlılık
- sıklık: ürünün geçtiği sipariş sayısı / toplam sipariş sayısı
- yenilik: max(0, 1 - son_siparişten_gün / 90)
- tutarlılık: max(0, 1 - standart_sapma / ortalama)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Optional

from src.insights.stats import (
    mean,
    most_frequent,
    population_stddev,
    round_half_up,
    typical_value,
)
from src.models.sales import Order, ProductKey, RepeatOrderSuggestion

logger = logging.getLogger(__name__)

HISTORY_WINDOW_DAYS = 90
MAX_SUGGESTIONS = 15

FREQUENCY_WEIGHT = 0.5
RECENCY_WEIGHT = 0.3
CONSISTENCY_WEIGHT = 0.2


@dataclass
class ProductHistory:
    """Bir ürün/varyantın sipariş bazında özetlenmiş geçmişi."""

    key: ProductKey
    product_name: str
    variant_name: Optional[str] = None
    quantities: dict[str, float] = field(default_factory=dict)  # order_id -> miktar
    units: list[str] = field(default_factory=list)
    last_ordered: Optional[datetime] = None

    @property
    def order_count(self) -> int:
        return len(self.quantities)


def confirmed_in_window(
    orders: Iterable[Order], reference_time: datetime, window_days: int
) -> list[Order]:
    cutoff = reference_time - timedelta(days=window_days)
    return [o for o in orders if o.is_confirmed and cutoff <= o.created_at <= reference_time]


def build_history(orders: Iterable[Order]) -> dict[ProductKey, ProductHistory]:
    """Sipariş kalemlerini ProductKey bazında gruplar.

    Aynı siparişte aynı ürün birden fazla kalemde geçerse miktarlar toplanır ve
    sipariş bir kez sayılır.
    """
    history: dict[ProductKey, ProductHistory] = {}
    for order in orders:
        for item in order.items:
            entry = history.get(item.key)
            if entry is None:
                entry = ProductHistory(
                    key=item.key,
                    product_name=item.product_name,
                    variant_name=item.variant_name,
                )
                history[item.key] = entry
            entry.quantities[order.order_id] = (
                entry.quantities.get(order.order_id, 0.0) + item.quantity
            )
            entry.units.append(item.unit or "KG")
            if entry.last_ordered is None or order.created_at > entry.last_ordered:
                entry.last_ordered = order.created_at
    return history


class RepeatOrderAnalyzer:

    def confidence(
        self, entry: ProductHistory, total_orders: int, reference_time: datetime
    ) -> float:
        frequency = entry.order_count / total_orders if total_orders else 0.0

        days_since_last = max(0, (reference_time - entry.last_ordered).days)
        recency = max(0.0, 1 - days_since_last / HISTORY_WINDOW_DAYS)

        quantities = list(entry.quantities.values())
        avg = mean(quantities)
        consistency = max(0.0, 1 - population_stddev(quantities) / avg) if avg > 0 else 0.0

        raw = (
            FREQUENCY_WEIGHT * frequency
            + RECENCY_WEIGHT * recency
            + CONSISTENCY_WEIGHT * consistency
        )
        return round_half_up(min(1.0, max(0.0, raw)), 2)

    def analyze(
        self, retailer_orders: list[Order], reference_time: datetime
    ) -> list[RepeatOrderSuggestion]:
        orders = confirmed_in_window(retailer_orders, reference_time, HISTORY_WINDOW_DAYS)
        if not orders:
            return []

        history = build_history(orders)
        suggestions = []
        for key, entry in history.items():
            quantities = list(entry.quantities.values())
            suggestions.append(
                RepeatOrderSuggestion(
                    product_id=key.product_id,
                    product_name=entry.product_name,
                    quantity=typical_value(quantities),
                    unit=most_frequent(entry.units),
                    confidence=self.confidence(entry, len(orders), reference_time),
                    order_count=entry.order_count,
                    last_ordered=entry.last_ordered,
                    avg_quantity=round_half_up(mean(quantities), 1),
                    variant_id=key.variant_id,
                    variant_name=entry.variant_name,
                )
            )

        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        logger.debug(
            "%d sipariş içinde %d ürün bulundu", len(orders), len(suggestions)
        )
        return suggestions[:MAX_SUGGESTIONS]

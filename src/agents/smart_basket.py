"""Smart Basket Agent - Ziyaret sırasında sepet önerileri.

Üç öneri kaynağı:
- Tekrar sipariş: bayinin son 90 günlük onaylı siparişleri
- Beat trendi: aynı beat'teki bayilerin son 30 günde yaygın aldığı ürünler
- Paket yükseltme: gram başı daha ucuz büyük paketler
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timedelta
from typing import Any, Optional

from src.agents.base_agent import BaseAgent
from src.agents.errors import ValidationError
from src.insights.beat_trend_analyzer import TREND_WINDOW_DAYS, BeatTrendAnalyzer
from src.insights.pack_upsell_analyzer import PackUpsellAnalyzer
from src.insights.repeat_order_analyzer import (
    HISTORY_WINDOW_DAYS,
    RepeatOrderAnalyzer,
    build_history,
    confirmed_in_window,
)
from src.models.sales import SuggestionBundle

logger = logging.getLogger(__name__)


def bundle_to_dict(bundle: SuggestionBundle) -> dict:
    """JSON'a yazılabilir sözlük (datetime alanları ISO string)."""
    repeat_order = []
    for suggestion in bundle.repeat_order:
        record = asdict(suggestion)
        record["last_ordered"] = suggestion.last_ordered.isoformat()
        repeat_order.append(record)
    return {
        "repeat_order": repeat_order,
        "beat_trending": [asdict(s) for s in bundle.beat_trending],
        "upsell": [asdict(s) for s in bundle.upsell],
        "summary": bundle.summary,
    }


class SmartBasketAgent(BaseAgent):
    """Bayi bazında sepet önerisi üreten agent (salt okunur)."""

    def __init__(self, region_name: str = "us-west-2", **kwargs: Any):
        super().__init__(
            agent_name="SmartBasketAgent",
            region_name=region_name,
            **kwargs,
        )
        self.repeat_analyzer = RepeatOrderAnalyzer()
        self.trend_analyzer = BeatTrendAnalyzer()
        self.upsell_analyzer = PackUpsellAnalyzer()

    def process(
        self,
        retailer_id: str,
        beat_id: Optional[str] = None,
        reference_time: Optional[datetime] = None,
    ) -> dict:
        return bundle_to_dict(self.get_suggestions(retailer_id, beat_id, reference_time))

    def get_suggestions(
        self,
        retailer_id: str,
        beat_id: Optional[str] = None,
        reference_time: Optional[datetime] = None,
    ) -> SuggestionBundle:
        if not retailer_id:
            raise ValidationError("retailer_id zorunludur")

        now = reference_time or datetime.utcnow()
        logger.info("Sepet analizi başladı: bayi=%s beat=%s", retailer_id, beat_id)

        orders = confirmed_in_window(
            self.store.list_retailer_orders(
                retailer_id, now - timedelta(days=HISTORY_WINDOW_DAYS)
            ),
            now,
            HISTORY_WINDOW_DAYS,
        )
        history = build_history(orders)
        repeat_order = self.repeat_analyzer.analyze(orders, now)

        beat_trending = []
        if beat_id:
            roster = self.store.list_beat_retailer_ids(beat_id)
            if roster:
                beat_orders = self.store.list_beat_orders(
                    roster, now - timedelta(days=TREND_WINDOW_DAYS)
                )
                beat_trending = self.trend_analyzer.analyze(
                    beat_orders, roster, history.keys(), now
                )

        upsell = []
        base_products = sorted({k.product_id for k in history if k.variant_id is None})
        if base_products:
            products = self.store.list_products_with_variants(base_products)
            upsell = self.upsell_analyzer.analyze(products, history)

        bundle = SuggestionBundle(
            repeat_order=repeat_order,
            beat_trending=beat_trending,
            upsell=upsell,
            retailer_order_history=len(orders),
        )
        logger.info("Sepet analizi tamamlandı: %s", bundle.summary)
        return bundle

"""Pack Upsell Analyzer - Gram başı fiyatı daha düşük büyük paket önerileri.

Yalnızca bayinin varyantsız (baz ürün olarak) sipariş ettiği ürünler incelenir.
Boyutu çözülemeyen varyantlar karşılaştırmaya girmez; en az iki çözülebilir
varyant gerekir. Tasarruf %10'un altındaysa öneri üretilmez.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from src.insights.pack_size import parse_pack_size
from src.insights.repeat_order_analyzer import ProductHistory
from src.insights.stats import round_half_up
from src.models.sales import Product, ProductKey, ProductVariant, UpsellSuggestion

logger = logging.getLogger(__name__)

MIN_SAVINGS_PERCENT = 10
MAX_SUGGESTIONS = 5
BASE_SIZE_LABEL = "Base"


@dataclass
class SizedVariant:
    variant: ProductVariant
    grams: float

    @property
    def price_per_gram(self) -> float:
        return self.variant.price / self.grams


def savings_percent(current: SizedVariant, candidate: SizedVariant) -> float:
    if current.price_per_gram <= 0:
        return 0.0
    return (current.price_per_gram - candidate.price_per_gram) / current.price_per_gram * 100


def _qualifies(savings: float) -> bool:
    # 250G@50 -> 1KG@180 tam olarak %10 verir; kayan nokta hatası eşiği bozmasın
    return round(savings, 6) >= MIN_SAVINGS_PERCENT


class PackUpsellAnalyzer:

    def sized_variants(self, product: Product) -> list[SizedVariant]:
        sized = []
        for variant in product.variants:
            if not variant.is_active:
                continue
            grams = parse_pack_size(variant.variant_name)
            if grams is None:
                continue
            sized.append(SizedVariant(variant=variant, grams=grams))
        sized.sort(key=lambda s: s.grams)
        return sized

    def current_variant(
        self,
        product: Product,
        sized: list[SizedVariant],
        history: dict[ProductKey, ProductHistory],
    ) -> Optional[SizedVariant]:
        """Bayinin bu ürün için en çok sipariş ettiği (eşitlikte en yeni) boyutlu varyant."""
        best: Optional[SizedVariant] = None
        best_rank = None
        for candidate in sized:
            entry = history.get(ProductKey(product.product_id, candidate.variant.variant_id))
            if entry is None:
                continue
            rank = (entry.order_count, entry.last_ordered)
            if best_rank is None or rank > best_rank:
                best, best_rank = candidate, rank
        return best

    def _suggestion(
        self,
        product: Product,
        current: Optional[SizedVariant],
        suggested: SizedVariant,
        savings: float,
    ) -> UpsellSuggestion:
        percent = int(round_half_up(savings))
        return UpsellSuggestion(
            current_product_id=product.product_id,
            current_product_name=product.name,
            suggested_product_id=product.product_id,
            suggested_product_name=product.name,
            current_size=current.variant.variant_name if current else BASE_SIZE_LABEL,
            suggested_size=suggested.variant.variant_name,
            savings_percent=percent,
            reason=f"Save {percent}% per unit with {suggested.variant.variant_name}",
            current_variant_id=current.variant.variant_id if current else None,
            suggested_variant_id=suggested.variant.variant_id,
            suggested_variant_name=suggested.variant.variant_name,
        )

    def analyze_product(
        self, product: Product, history: dict[ProductKey, ProductHistory]
    ) -> Optional[UpsellSuggestion]:
        sized = self.sized_variants(product)
        if len(sized) < 2:
            return None

        current = self.current_variant(product, sized, history)
        if current is None:
            smallest, largest = sized[0], sized[-1]
            if largest.grams <= smallest.grams:
                return None
            savings = savings_percent(smallest, largest)
            if _qualifies(savings):
                return self._suggestion(product, None, largest, savings)
            return None

        larger = [
            s
            for s in sized
            if s.grams > current.grams and s.price_per_gram < current.price_per_gram
        ]
        if not larger:
            return None
        best = min(larger, key=lambda s: s.price_per_gram)
        savings = savings_percent(current, best)
        if _qualifies(savings):
            return self._suggestion(product, current, best, savings)
        return None

    def analyze(
        self, products: list[Product], history: dict[ProductKey, ProductHistory]
    ) -> list[UpsellSuggestion]:
        seeds = {key.product_id for key in history if key.variant_id is None}
        suggestions = []
        for product in products:
            if product.product_id not in seeds or not product.is_active:
                continue
            suggestion = self.analyze_product(product, history)
            if suggestion is not None:
                suggestions.append(suggestion)
            if len(suggestions) >= MAX_SUGGESTIONS:
                break
        logger.debug("%d paket yükseltme önerisi", len(suggestions))
        return suggestions

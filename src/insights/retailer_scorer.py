"""Retailer Scorer - Bayi ziyaret önceliği skorlaması.

Her bayi için 50 taban puan üzerine eklemeli faktörler uygulanır:
- Son ziyaretten bu yana geçen gün (0-30)
- Bekleyen tahsilat (0-25)
- Potansiyel seviyesi (0-20)
- Ortalama sipariş değeri (0-15)
- Öncelik işareti (0-10)
Toplam skor 100 ile sınırlandırılır ve her skorun en az bir gerekçesi olur.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Iterable, Optional

from src.insights.stats import mean, round_half_up
from src.models.sales import (
    VISITED_STATUSES,
    Order,
    PotentialTier,
    Retailer,
    RetailerPriority,
    RetailerScore,
    Visit,
)

logger = logging.getLogger(__name__)

BASE_SCORE = 50
MAX_SCORE = 100
HISTORY_WINDOW_DAYS = 90
NEVER_VISITED_DAYS = 999

# (alt sınır, puan) - ilk eşleşen basamak uygulanır
RECENCY_BRACKETS: list[tuple[int, int]] = [(30, 30), (14, 20), (7, 10)]
PENDING_BRACKETS: list[tuple[float, int]] = [(10000, 25), (5000, 15), (0, 5)]
ORDER_VALUE_BRACKETS: list[tuple[float, int]] = [(10000, 15), (5000, 10), (1000, 5)]
POTENTIAL_POINTS: dict[PotentialTier, int] = {
    PotentialTier.HIGH: 20,
    PotentialTier.MEDIUM: 10,
    PotentialTier.LOW: 0,
}
PRIORITY_POINTS = 10

HIGH_POTENTIAL_REASON = "High potential retailer"
DEFAULT_REASON = "Regular visit schedule"


def _bracket_points(value: float, brackets: list[tuple[float, int]]) -> int:
    for lower_bound, points in brackets:
        if value > lower_bound:
            return points
    return 0


def _format_rupees(amount: float) -> str:
    if float(amount).is_integer():
        return f"₹{int(amount):,}"
    return f"₹{amount:,.2f}"


class RetailerScorer:
    """Bayileri ziyaret önceliğine göre skorlayan saf hesaplayıcı."""

    def days_since_last_visit(
        self,
        retailer: Retailer,
        visits: Iterable[Visit],
        reference_time: datetime,
    ) -> int:
        """Kayıtlı son ziyaret ile gerçekleşmiş ziyaretlerden en yenisini kullanır."""
        last_visit: Optional[datetime] = retailer.last_visit_date
        for visit in visits:
            if visit.retailer_id != retailer.retailer_id or visit.status not in VISITED_STATUSES:
                continue
            if last_visit is None or visit.visited_at > last_visit:
                last_visit = visit.visited_at

        if last_visit is None:
            return NEVER_VISITED_DAYS
        return (reference_time - last_visit).days

    def average_order_value(
        self,
        retailer: Retailer,
        orders: Iterable[Order],
        reference_time: datetime,
    ) -> float:
        """Son 90 günün onaylı sipariş ortalaması; sipariş yoksa kayıtlı ortalama."""
        cutoff = reference_time - timedelta(days=HISTORY_WINDOW_DAYS)
        totals = [
            o.total_amount
            for o in orders
            if o.retailer_id == retailer.retailer_id
            and o.is_confirmed
            and o.created_at >= cutoff
        ]
        if totals:
            return mean(totals)
        return retailer.order_value

    def score(
        self,
        retailer: Retailer,
        recent_orders: Iterable[Order],
        recent_visits: Iterable[Visit],
        reference_time: datetime,
    ) -> RetailerScore:
        reasons: list[str] = []
        score = BASE_SCORE

        days = self.days_since_last_visit(retailer, recent_visits, reference_time)
        score += _bracket_points(days, RECENCY_BRACKETS)
        if days > 30:
            reasons.append(f"Not visited in {days} days")
        elif days > 14:
            reasons.append(f"Last visit {days} days ago")

        pending = max(0.0, retailer.pending_amount)
        score += _bracket_points(pending, PENDING_BRACKETS)
        if pending > 10000:
            reasons.append(f"High pending: {_format_rupees(pending)}")
        elif pending > 5000:
            reasons.append(f"Pending: {_format_rupees(pending)}")

        score += POTENTIAL_POINTS.get(retailer.potential, 0)
        if retailer.potential == PotentialTier.HIGH:
            reasons.append(HIGH_POTENTIAL_REASON)

        avg_order_value = self.average_order_value(retailer, recent_orders, reference_time)
        score += _bracket_points(avg_order_value, ORDER_VALUE_BRACKETS)
        if avg_order_value > 10000:
            reasons.append(
                f"High value: {_format_rupees(round_half_up(avg_order_value))} avg"
            )

        if retailer.priority == RetailerPriority.HIGH:
            score += PRIORITY_POINTS
            # Potansiyel gerekçesi varsa aynı mesajı tekrarlama
            if HIGH_POTENTIAL_REASON not in reasons:
                reasons.append("Marked as high priority")

        if not reasons:
            reasons.append(DEFAULT_REASON)

        return RetailerScore(
            retailer_id=retailer.retailer_id,
            retailer_name=retailer.name,
            beat_id=retailer.beat_id,
            beat_name=retailer.beat_name,
            priority_score=min(score, MAX_SCORE),
            reasons=reasons,
            days_since_last_visit=days,
            pending_amount=pending,
            potential=retailer.potential.value,
            avg_order_value=avg_order_value,
        )

    def score_all(
        self,
        retailers: list[Retailer],
        orders: list[Order],
        visits: list[Visit],
        reference_time: datetime,
    ) -> list[RetailerScore]:
        """Tüm bayileri girdi sırasını koruyarak skorlar."""
        orders_by_retailer: dict[str, list[Order]] = defaultdict(list)
        for order in orders:
            orders_by_retailer[order.retailer_id].append(order)
        visits_by_retailer: dict[str, list[Visit]] = defaultdict(list)
        for visit in visits:
            visits_by_retailer[visit.retailer_id].append(visit)

        scores = [
            self.score(
                r,
                orders_by_retailer.get(r.retailer_id, []),
                visits_by_retailer.get(r.retailer_id, []),
                reference_time,
            )
            for r in retailers
        ]
        logger.debug("%d bayi skorlandı", len(scores))
        return scores

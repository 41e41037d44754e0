"""Beat Day Assigner - Haftalık beat planı (Pazartesi-Cumartesi).

Açgözlü (greedy) atama: her gün için, o hafta henüz kullanılmamış beat'ler
arasından `ortalama_skor + 5 × geçmiş_gün_eşleşmesi` değeri en yüksek olan
seçilir. Geri izleme yapılmaz; optimal atama garantisi yoktur. Daha güçlü bir
garanti gerekirse gün × beat ağırlıklı iki parçalı eşleştirme ile
değiştirilebilir.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from src.models.sales import Beat, DayPlan, HistoricalPlan, RetailerScore, WeekDay

logger = logging.getLogger(__name__)

PLAN_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

MAX_RETAILERS_PER_DAY = 15
HISTORY_MATCH_BONUS = 5


@dataclass
class BeatStats:
    beat: Beat
    retailer_count: int
    total_score: float
    avg_score: float
    total_pending: float
    total_value: float


def get_next_week_start(reference: datetime | date) -> date:
    """Referans tarihten sonraki Pazartesi (Pazartesi ise bir sonraki hafta)."""
    ref_date = reference.date() if isinstance(reference, datetime) else reference
    return ref_date + timedelta(days=7 - ref_date.weekday())


def get_week_days(week_start: date) -> list[WeekDay]:
    return [
        WeekDay(day=name, date=week_start + timedelta(days=i))
        for i, name in enumerate(PLAN_DAYS)
    ]


class BeatDayAssigner:
    """Skorlanmış bayileri beat bazında gruplayıp günlere dağıtır."""

    def group_by_beat(self, scored: list[RetailerScore]) -> dict[str, list[RetailerScore]]:
        groups: dict[str, list[RetailerScore]] = defaultdict(list)
        for retailer in scored:
            groups[retailer.beat_id].append(retailer)
        # sort kararlıdır: eşit skorda girdi sırası korunur
        for members in groups.values():
            members.sort(key=lambda r: r.priority_score, reverse=True)
        return groups

    def day_preferences(self, historical_plans: list[HistoricalPlan]) -> dict[str, dict[str, int]]:
        """Beat bazında geçmişte hangi gün adının kaç kez kullanıldığını sayar."""
        preferences: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        for plan in historical_plans:
            day_name = WEEKDAY_NAMES[plan.plan_date.weekday()]
            preferences[plan.beat_id][day_name] += 1
        return preferences

    def beat_stats(
        self, beats: list[Beat], groups: dict[str, list[RetailerScore]]
    ) -> list[BeatStats]:
        stats = []
        for beat in beats:
            members = groups.get(beat.beat_id, [])
            total_score = sum(r.priority_score for r in members)
            stats.append(
                BeatStats(
                    beat=beat,
                    retailer_count=len(members),
                    total_score=total_score,
                    avg_score=total_score / len(members) if members else 0.0,
                    total_pending=sum(r.pending_amount for r in members),
                    total_value=sum(r.avg_order_value for r in members),
                )
            )
        stats.sort(key=lambda s: s.avg_score, reverse=True)
        return stats

    def assign_week(
        self,
        beats: list[Beat],
        scored_retailers: list[RetailerScore],
        week_days: list[WeekDay],
        historical_plans: list[HistoricalPlan],
    ) -> list[DayPlan]:
        groups = self.group_by_beat(scored_retailers)
        preferences = self.day_preferences(historical_plans)
        ranked = self.beat_stats(beats, groups)

        used_beats: set[str] = set()
        weekly_plan: list[DayPlan] = []

        for week_day in week_days:
            best: Optional[BeatStats] = None
            best_match = 0.0
            for candidate in ranked:
                if candidate.beat.beat_id in used_beats or candidate.retailer_count == 0:
                    continue
                match = candidate.avg_score + (
                    preferences.get(candidate.beat.beat_id, {}).get(week_day.day, 0)
                    * HISTORY_MATCH_BONUS
                )
                # Eşitlikte ilk karşılaşılan beat kalır
                if best is None or match > best_match:
                    best, best_match = candidate, match

            if best is None:
                weekly_plan.append(
                    DayPlan(day=week_day.day, date=week_day.date, beat_id="", beat_name="")
                )
                continue

            used_beats.add(best.beat.beat_id)
            top = groups[best.beat.beat_id][:MAX_RETAILERS_PER_DAY]
            weekly_plan.append(
                DayPlan(
                    day=week_day.day,
                    date=week_day.date,
                    beat_id=best.beat.beat_id,
                    beat_name=best.beat.name,
                    retailers=top,
                    estimated_value=sum(r.avg_order_value for r in top),
                )
            )

        logger.info(
            "Haftalık plan: %d günden %d tanesine beat atandı",
            len(weekly_plan),
            sum(1 for p in weekly_plan if p.beat_id),
        )
        return weekly_plan

"""Beat Plan Generator Agent - Haftalık beat planlarının otonom üretimi.

Her aktif satış temsilcisi için:
- Hedef hafta (bir sonraki Pazartesi-Cumartesi) için plan var mı kontrol eder
- Bayileri skorlar, beat'leri günlere atar
- Planları BeatPlans tablosuna yazar ve geri alınabilir otonom aksiyon kaydeder

Bir kullanıcıdaki hata diğer kullanıcıların işlenmesini durdurmaz.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Optional

from src.agents.base_agent import BaseAgent
from src.agents.errors import ActionNotFoundError, UndoWindowExpiredError, ValidationError
from src.agents.resource_lock import ResourceLock
from src.agents.sales_data_store import parse_datetime, plan_id_for
from src.insights.beat_day_assigner import BeatDayAssigner, get_next_week_start, get_week_days
from src.insights.retailer_scorer import RetailerScorer
from src.models.sales import (
    ActionStatus,
    AutonomousAction,
    DayPlan,
    PlanRunStatus,
    SalesUser,
    UserPlanResult,
)

logger = logging.getLogger(__name__)

LOOKBACK_DAYS = 90
UNDO_WINDOW_DAYS = 7
ACTION_TYPE = "auto_beat_plan"


class BeatPlanGeneratorAgent(BaseAgent):
    """Haftalık beat planı üreten otonom agent."""

    def __init__(
        self,
        region_name: str = "us-west-2",
        resource_lock: Optional[ResourceLock] = None,
        **kwargs: Any,
    ):
        super().__init__(
            agent_name="BeatPlanGeneratorAgent",
            region_name=region_name,
            **kwargs,
        )
        self.scorer = RetailerScorer()
        self.assigner = BeatDayAssigner()
        self._lock = resource_lock or ResourceLock()

    # --- Plan üretimi ---

    def process(
        self,
        user_id: Optional[str] = None,
        force_regenerate: bool = False,
        reference_time: Optional[datetime] = None,
    ) -> dict:
        """Tüm aktif kullanıcılar (ya da verilen kullanıcı) için plan üretir.

        Kullanıcı listesinin alınamaması ölümcül hatadır ve yukarı fırlatılır.
        """
        now = reference_time or datetime.utcnow()
        users = self.store.list_active_users(user_id)
        logger.info("%d kullanıcı için beat planı üretilecek", len(users))

        week_days = get_week_days(get_next_week_start(now))
        results: list[UserPlanResult] = []
        for user in users:
            key = f"beat-plan:{user.user_id}:{week_days[0].date.isoformat()}"
            try:
                with self._lock.hold(key, self.agent_name):
                    result = self.generate_for_user(user, week_days, force_regenerate, now)
            except Exception as e:
                logger.error("Kullanıcı %s için plan hatası: %s", user.user_id, e)
                result = UserPlanResult(
                    user_id=user.user_id, status=PlanRunStatus.ERROR, reason=str(e)
                )
            results.append(result)

        summary = {
            "total_users": len(users),
            "successful": sum(1 for r in results if r.status == PlanRunStatus.SUCCESS),
            "skipped": sum(1 for r in results if r.status == PlanRunStatus.SKIPPED),
            "errors": sum(1 for r in results if r.status == PlanRunStatus.ERROR),
        }
        logger.info("Beat planı üretimi tamamlandı: %s", summary)
        return {
            "success": True,
            "results": [r.to_dict() for r in results],
            "summary": summary,
        }

    def _skipped(self, user: SalesUser, reason: str) -> UserPlanResult:
        logger.info("Kullanıcı %s atlandı: %s", user.user_id, reason)
        return UserPlanResult(user_id=user.user_id, status=PlanRunStatus.SKIPPED, reason=reason)

    def generate_for_user(
        self,
        user: SalesUser,
        week_days: list,
        force_regenerate: bool,
        now: datetime,
    ) -> UserPlanResult:
        week_start, week_end = week_days[0].date, week_days[-1].date

        existing = self.store.list_plans(user.user_id, week_start, week_end)
        if existing and not force_regenerate:
            return self._skipped(user, "Plans already exist")

        beats = self.store.list_active_beats(user.user_id)
        if not beats:
            return self._skipped(user, "No active beats")

        retailers = self.store.list_active_retailers(user.user_id)
        if not retailers:
            return self._skipped(user, "No active retailers")

        since = now - timedelta(days=LOOKBACK_DAYS)
        orders = self.store.list_user_orders(user.user_id, since)
        visits = self.store.list_user_visits(user.user_id, since)
        historical = self.store.list_historical_plans(
            user.user_id, since.date(), week_start - timedelta(days=1)
        )

        scored = self.scorer.score_all(retailers, orders, visits, now)
        weekly_plan = self.assigner.assign_week(beats, scored, week_days, historical)

        day_plans = [p for p in weekly_plan if p.beat_id]
        if not day_plans:
            return self._skipped(user, "No plans generated")

        plans = [self._plan_record(user.user_id, p, now) for p in day_plans]

        if force_regenerate and existing:
            deleted = self.store.delete_plans(user.user_id, [p["plan_id"] for p in existing])
            logger.info("Kullanıcı %s için %d eski plan silindi", user.user_id, deleted)
        self.store.put_plans(plans)
        self._revoke_superseded(user.user_id, week_start.isoformat(), now)

        action = self._record_action(user, week_start.isoformat(), plans, now)
        logger.info(
            "Kullanıcı %s (%s) için %d beat planı oluşturuldu",
            user.full_name, user.user_id, len(plans),
        )
        return UserPlanResult(
            user_id=user.user_id,
            status=PlanRunStatus.SUCCESS,
            user_name=user.full_name,
            plans_created=len(plans),
            week_start=week_start.isoformat(),
            action_id=action.action_id,
        )

    def _revoke_superseded(self, user_id: str, week_start: str, now: datetime) -> int:
        """Aynı haftanın önceki aksiyonları artık geri alınamaz.

        Plan anahtarları tarih#beat olduğundan eski aksiyonun geri alınması
        yeni yazılan planları silerdi.
        """
        revoked = 0
        for action in self.store.list_actions(user_id):
            if (
                action.action_type == ACTION_TYPE
                and action.can_undo
                and action.status == ActionStatus.EXECUTED
                and action.action_data.get("week_start") == week_start
            ):
                self.store.revoke_undo(action.action_id, now.isoformat())
                revoked += 1
        if revoked:
            logger.info(
                "Kullanıcı %s, hafta %s: %d eski aksiyonun geri alınması kapatıldı",
                user_id, week_start, revoked,
            )
        return revoked

    def _plan_record(self, user_id: str, plan: DayPlan, now: datetime) -> dict:
        return {
            "user_id": user_id,
            "plan_id": plan_id_for(plan.date, plan.beat_id),
            "beat_id": plan.beat_id,
            "beat_name": plan.beat_name,
            "plan_date": plan.date.isoformat(),
            "beat_data": {
                "auto_generated": True,
                "generated_at": now.isoformat(),
                "retailers": [
                    {
                        "id": r.retailer_id,
                        "name": r.retailer_name,
                        "priority_score": r.priority_score,
                        "reasons": r.reasons,
                    }
                    for r in plan.retailers
                ],
                "estimated_value": plan.estimated_value,
            },
        }

    def _record_action(
        self, user: SalesUser, week_start: str, plans: list[dict], now: datetime
    ) -> AutonomousAction:
        total_retailers = sum(len(p["beat_data"]["retailers"]) for p in plans)
        estimated_value = sum(p["beat_data"]["estimated_value"] for p in plans)
        action = AutonomousAction(
            action_id=str(uuid.uuid4()),
            user_id=user.user_id,
            action_type=ACTION_TYPE,
            action_data={
                "week_start": week_start,
                "plans_created": len(plans),
                "total_retailers": total_retailers,
                "estimated_value": estimated_value,
                "plan_ids": [p["plan_id"] for p in plans],
            },
            reasoning=(
                f"{len(plans)} gün için {total_retailers} bayi ziyareti planlandı "
                f"(hafta başlangıcı {week_start})"
            ),
            executed_at=now.isoformat(),
            undo_until=(now + timedelta(days=UNDO_WINDOW_DAYS)).isoformat(),
        )
        return self.log_action(action)

    # --- Geri alma ---

    def list_actions(self, user_id: str) -> list[AutonomousAction]:
        """Kullanıcının otonom aksiyonları, en yeni önce."""
        return self.store.list_actions(user_id)

    def undo_action(self, action_id: str, reference_time: Optional[datetime] = None) -> dict:
        now = reference_time or datetime.utcnow()
        action = self.store.get_action(action_id)
        if action is None:
            raise ActionNotFoundError(f"Aksiyon bulunamadı: {action_id}")
        if not action.can_undo:
            raise ValidationError(f"Aksiyon geri alınamaz: {action_id}")
        if action.status == ActionStatus.UNDONE:
            raise ValidationError(f"Aksiyon zaten geri alınmış: {action_id}")

        undo_until = parse_datetime(action.undo_until)
        if undo_until is not None and now > undo_until:
            raise UndoWindowExpiredError(
                f"Geri alma süresi doldu: {action_id} ({action.undo_until})"
            )

        plan_ids = action.action_data.get("plan_ids", [])
        deleted = self.store.delete_plans(action.user_id, plan_ids)
        undone_at = now.isoformat()
        self.store.mark_action_undone(action_id, undone_at)
        logger.info("Aksiyon %s geri alındı: %d plan silindi", action_id, deleted)

        return {
            "action_id": action_id,
            "status": ActionStatus.UNDONE.value,
            "plans_deleted": deleted,
            "undone_at": undone_at,
        }

"""Saha satış veri modelleri - bayi, beat, sipariş, ziyaret ve öneri tipleri."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import NamedTuple, Optional


class PotentialTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RetailerPriority(str, Enum):
    NORMAL = "normal"
    HIGH = "high"


class OrderStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"


class VisitStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    PRODUCTIVE = "productive"
    UNPRODUCTIVE = "unproductive"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Gerçekleşmiş sayılan ziyaret durumları
VISITED_STATUSES = frozenset(
    {VisitStatus.PRODUCTIVE.value, VisitStatus.UNPRODUCTIVE.value, VisitStatus.COMPLETED.value}
)


class PlanRunStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    ERROR = "error"


class ActionStatus(str, Enum):
    EXECUTED = "executed"
    UNDONE = "undone"


class ProductKey(NamedTuple):
    """Ürün/varyant bileşik anahtarı. Varyantsız siparişte variant_id None olur."""

    product_id: str
    variant_id: Optional[str] = None


# --- Ham varlıklar (veri katmanında normalize edilmiş) ---


@dataclass
class Retailer:
    retailer_id: str
    name: str
    beat_id: str
    beat_name: str = ""
    potential: PotentialTier = PotentialTier.MEDIUM
    priority: RetailerPriority = RetailerPriority.NORMAL
    pending_amount: float = 0.0
    last_visit_date: Optional[datetime] = None
    order_value: float = 0.0
    is_active: bool = True


@dataclass
class Beat:
    beat_id: str
    name: str
    created_by: str
    is_active: bool = True


@dataclass
class OrderItem:
    order_id: str
    product_id: str
    product_name: str
    quantity: float
    unit: str = "KG"
    rate: float = 0.0
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None

    @property
    def key(self) -> ProductKey:
        return ProductKey(self.product_id, self.variant_id)


@dataclass
class Order:
    order_id: str
    retailer_id: str
    user_id: str
    total_amount: float
    created_at: datetime
    status: str = OrderStatus.CONFIRMED.value
    items: list[OrderItem] = field(default_factory=list)

    @property
    def is_confirmed(self) -> bool:
        return self.status == OrderStatus.CONFIRMED.value


@dataclass
class Visit:
    visit_id: str
    user_id: str
    retailer_id: str
    planned_date: date
    status: str
    created_at: datetime
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None

    @property
    def visited_at(self) -> datetime:
        """Ziyaretin gerçekleştiği an (check-out > check-in > oluşturulma)."""
        return self.check_out_time or self.check_in_time or self.created_at


@dataclass
class ProductVariant:
    variant_id: str
    product_id: str
    variant_name: str
    price: float
    is_active: bool = True


@dataclass
class Product:
    product_id: str
    name: str
    rate: float = 0.0
    unit: str = "KG"
    is_active: bool = True
    variants: list[ProductVariant] = field(default_factory=list)


@dataclass
class SalesUser:
    user_id: str
    full_name: str
    role: str = ""
    is_active: bool = True


@dataclass
class HistoricalPlan:
    beat_id: str
    plan_date: date


@dataclass
class WeekDay:
    day: str
    date: date


# --- Türetilmiş yapılar (kalıcı değil) ---


@dataclass
class RetailerScore:
    retailer_id: str
    retailer_name: str
    beat_id: str
    beat_name: str
    priority_score: int
    reasons: list[str]
    days_since_last_visit: int
    pending_amount: float
    potential: str
    avg_order_value: float


@dataclass
class DayPlan:
    day: str
    date: date
    beat_id: str
    beat_name: str
    retailers: list[RetailerScore] = field(default_factory=list)
    estimated_value: float = 0.0


@dataclass
class RepeatOrderSuggestion:
    product_id: str
    product_name: str
    quantity: float
    unit: str
    confidence: float
    order_count: int
    last_ordered: datetime
    avg_quantity: float
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None


@dataclass
class BeatTrendingSuggestion:
    product_id: str
    product_name: str
    suggested_quantity: float
    unit: str
    beat_penetration: int
    retailer_count: int
    total_beat_retailers: int
    reason: str
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None


@dataclass
class UpsellSuggestion:
    current_product_id: str
    current_product_name: str
    suggested_product_id: str
    suggested_product_name: str
    current_size: str
    suggested_size: str
    savings_percent: int
    reason: str
    current_variant_id: Optional[str] = None
    suggested_variant_id: Optional[str] = None
    suggested_variant_name: Optional[str] = None


@dataclass
class SuggestionBundle:
    repeat_order: list[RepeatOrderSuggestion] = field(default_factory=list)
    beat_trending: list[BeatTrendingSuggestion] = field(default_factory=list)
    upsell: list[UpsellSuggestion] = field(default_factory=list)
    retailer_order_history: int = 0

    @property
    def summary(self) -> dict:
        return {
            "repeat_order_count": len(self.repeat_order),
            "potential_cross_sell": len(self.beat_trending),
            "upsell_opportunities": len(self.upsell),
            "retailer_order_history": self.retailer_order_history,
        }


# --- Çağıran taraf kayıtları ---


@dataclass
class UserPlanResult:
    user_id: str
    status: PlanRunStatus
    reason: Optional[str] = None
    user_name: Optional[str] = None
    plans_created: int = 0
    week_start: Optional[str] = None
    action_id: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"user_id": self.user_id, "status": self.status.value}
        if self.status == PlanRunStatus.SUCCESS:
            result.update(
                user_name=self.user_name,
                plans_created=self.plans_created,
                week_start=self.week_start,
                action_id=self.action_id,
            )
        elif self.status == PlanRunStatus.SKIPPED:
            result["reason"] = self.reason
        else:
            result["error"] = self.reason
        return result


@dataclass
class AutonomousAction:
    action_id: str
    user_id: str
    action_type: str
    action_data: dict
    reasoning: str = ""
    status: ActionStatus = ActionStatus.EXECUTED
    can_undo: bool = True
    executed_at: str = field(default_factory=lambda: datetime.utcnow().isoformat())
    undo_until: Optional[str] = None
    undone_at: Optional[str] = None

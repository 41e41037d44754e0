"""Sales Data Store - DynamoDB okuma/yazma katmanı.

Ham DynamoDB kayıtları burada tipli dataclass'lara çevrilir; eksik alanlar
varsayılan değerlere normalize edilir. Analiz katmanı hiçbir zaman ham kayıt
görmez.

Tablolar:
  Profiles (user_id)
  Beats (beat_id) + UserIndex(created_by)
  Retailers (retailer_id) + UserIndex(user_id), BeatIndex(beat_id)
  Orders (order_id) + UserTimeIndex(user_id, created_at), RetailerTimeIndex(retailer_id, created_at)
  OrderItems (order_id, item_id)
  Visits (visit_id) + UserTimeIndex(user_id, created_at)
  Products (product_id)
  ProductVariants (variant_id) + ProductIndex(product_id)
  BeatPlans (user_id, plan_id="<plan_date>#<beat_id>")
  AutonomousActions (action_id) + UserTimeIndex(user_id, executed_at)
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional

from boto3.dynamodb.conditions import Attr, Key

from src.models.sales import (
    ActionStatus,
    AutonomousAction,
    Beat,
    HistoricalPlan,
    Order,
    OrderItem,
    PotentialTier,
    Product,
    ProductVariant,
    Retailer,
    RetailerPriority,
    SalesUser,
    Visit,
)

logger = logging.getLogger(__name__)

# plan_id sıralama anahtarında tarihten sonra gelen her şeyi kapsar
PLAN_ID_UPPER_SUFFIX = "#~"


def _decimal_to_native(obj):
    if isinstance(obj, Decimal):
        return int(obj) if obj == int(obj) else float(obj)
    if isinstance(obj, dict):
        return {k: _decimal_to_native(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_decimal_to_native(i) for i in obj]
    return obj


def to_dynamodb(obj):
    """float -> Decimal, tarih -> ISO string dönüşümü (DynamoDB yazımı için)."""
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {k: to_dynamodb(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_dynamodb(i) for i in obj]
    return obj


def parse_datetime(value: Any) -> Optional[datetime]:
    """ISO string'i naive UTC datetime'a çevirir; boş/bozuk değerde None."""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Geçersiz tarih değeri atlandı: %s", value)
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_date(value: Any) -> Optional[date]:
    parsed = parse_datetime(value)
    return parsed.date() if parsed else None


def _as_float(value: Any) -> float:
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def _enum_or_default(enum_cls, value, default):
    try:
        return enum_cls(str(value).lower()) if value else default
    except ValueError:
        return default


def _is_active(item: dict) -> bool:
    if "is_active" in item:
        return bool(item["is_active"])
    return item.get("status", "active") == "active"


def plan_id_for(plan_date: date | str, beat_id: str) -> str:
    plan_date = plan_date.isoformat() if isinstance(plan_date, date) else plan_date
    return f"{plan_date}#{beat_id}"


# --- Normalizasyon ---


def retailer_from_item(item: dict) -> Retailer:
    return Retailer(
        retailer_id=item["retailer_id"],
        name=item.get("name") or item["retailer_id"],
        beat_id=item.get("beat_id") or "",
        beat_name=item.get("beat_name") or "",
        potential=_enum_or_default(PotentialTier, item.get("potential"), PotentialTier.MEDIUM),
        priority=_enum_or_default(
            RetailerPriority, item.get("priority"), RetailerPriority.NORMAL
        ),
        pending_amount=max(0.0, _as_float(item.get("pending_amount"))),
        last_visit_date=parse_datetime(item.get("last_visit_date")),
        order_value=_as_float(item.get("order_value")),
        is_active=_is_active(item),
    )


def order_from_item(item: dict, items: Optional[list[OrderItem]] = None) -> Order:
    return Order(
        order_id=item["order_id"],
        retailer_id=item.get("retailer_id", ""),
        user_id=item.get("user_id", ""),
        total_amount=_as_float(item.get("total_amount")),
        created_at=parse_datetime(item.get("created_at")) or datetime.min,
        status=item.get("status") or "confirmed",
        items=items or [],
    )


def order_item_from_item(item: dict) -> OrderItem:
    return OrderItem(
        order_id=item["order_id"],
        product_id=item.get("product_id", ""),
        product_name=item.get("product_name") or "",
        quantity=_as_float(item.get("quantity")),
        unit=item.get("unit") or "KG",
        rate=_as_float(item.get("rate")),
        variant_id=item.get("variant_id") or None,
        variant_name=item.get("variant_name") or None,
    )


def visit_from_item(item: dict) -> Visit:
    created_at = parse_datetime(item.get("created_at")) or datetime.min
    return Visit(
        visit_id=item["visit_id"],
        user_id=item.get("user_id", ""),
        retailer_id=item.get("retailer_id", ""),
        planned_date=parse_date(item.get("planned_date")) or created_at.date(),
        status=item.get("status") or "planned",
        created_at=created_at,
        check_in_time=parse_datetime(item.get("check_in_time")),
        check_out_time=parse_datetime(item.get("check_out_time")),
    )


def action_from_item(item: dict) -> AutonomousAction:
    return AutonomousAction(
        action_id=item["action_id"],
        user_id=item.get("user_id", ""),
        action_type=item.get("action_type", ""),
        action_data=item.get("action_data") or {},
        reasoning=item.get("reasoning", ""),
        status=_enum_or_default(ActionStatus, item.get("status"), ActionStatus.EXECUTED),
        can_undo=bool(item.get("can_undo", False)),
        executed_at=item.get("executed_at", ""),
        undo_until=item.get("undo_until"),
        undone_at=item.get("undone_at"),
    )


class SalesDataStore:
    """DynamoDB tablolarına tipli erişim. Resource dışarıdan enjekte edilebilir."""

    def __init__(self, dynamodb_resource: Any):
        self.dynamodb = dynamodb_resource
        self.profiles_table = dynamodb_resource.Table("Profiles")
        self.beats_table = dynamodb_resource.Table("Beats")
        self.retailers_table = dynamodb_resource.Table("Retailers")
        self.orders_table = dynamodb_resource.Table("Orders")
        self.order_items_table = dynamodb_resource.Table("OrderItems")
        self.visits_table = dynamodb_resource.Table("Visits")
        self.products_table = dynamodb_resource.Table("Products")
        self.variants_table = dynamodb_resource.Table("ProductVariants")
        self.plans_table = dynamodb_resource.Table("BeatPlans")
        self.actions_table = dynamodb_resource.Table("AutonomousActions")

    # --- Sayfalama ---

    def _query_all(self, table, **kwargs) -> list[dict]:
        items: list[dict] = []
        while True:
            resp = table.query(**kwargs)
            items.extend(_decimal_to_native(i) for i in resp.get("Items", []))
            if "LastEvaluatedKey" not in resp:
                return items
            kwargs["ExclusiveStartKey"] = resp["LastEvaluatedKey"]

    def _scan_all(self, table, **kwargs) -> list[dict]:
        items: list[dict] = []
        while True:
            resp = table.scan(**kwargs)
            items.extend(_decimal_to_native(i) for i in resp.get("Items", []))
            if "LastEvaluatedKey" not in resp:
                return items
            kwargs["ExclusiveStartKey"] = resp["LastEvaluatedKey"]

    # --- Kullanıcılar, beat'ler, bayiler ---

    def list_active_users(self, user_id: Optional[str] = None) -> list[SalesUser]:
        if user_id:
            resp = self.profiles_table.get_item(Key={"user_id": user_id})
            items = [_decimal_to_native(resp["Item"])] if "Item" in resp else []
        else:
            items = self._scan_all(
                self.profiles_table, FilterExpression=Attr("is_active").eq(True)
            )
        return [
            SalesUser(
                user_id=i["user_id"],
                full_name=i.get("full_name") or "",
                role=i.get("role") or "",
                is_active=_is_active(i),
            )
            for i in items
            if _is_active(i)
        ]

    def list_active_beats(self, user_id: str) -> list[Beat]:
        items = self._query_all(
            self.beats_table,
            IndexName="UserIndex",
            KeyConditionExpression=Key("created_by").eq(user_id),
        )
        return [
            Beat(
                beat_id=i["beat_id"],
                name=i.get("name") or i["beat_id"],
                created_by=i.get("created_by", user_id),
                is_active=_is_active(i),
            )
            for i in items
            if _is_active(i)
        ]

    def list_active_retailers(self, user_id: str) -> list[Retailer]:
        items = self._query_all(
            self.retailers_table,
            IndexName="UserIndex",
            KeyConditionExpression=Key("user_id").eq(user_id),
        )
        retailers = [retailer_from_item(i) for i in items]
        return [r for r in retailers if r.is_active]

    def list_beat_retailer_ids(self, beat_id: str) -> list[str]:
        items = self._query_all(
            self.retailers_table,
            IndexName="BeatIndex",
            KeyConditionExpression=Key("beat_id").eq(beat_id),
        )
        return [i["retailer_id"] for i in items if _is_active(i)]

    # --- Siparişler ve ziyaretler ---

    def list_order_items(self, order_id: str) -> list[OrderItem]:
        items = self._query_all(
            self.order_items_table, KeyConditionExpression=Key("order_id").eq(order_id)
        )
        return [order_item_from_item(i) for i in items]

    def list_user_orders(self, user_id: str, since: datetime) -> list[Order]:
        """Skorlama için kullanıcının siparişleri (kalemsiz)."""
        items = self._query_all(
            self.orders_table,
            IndexName="UserTimeIndex",
            KeyConditionExpression=Key("user_id").eq(user_id)
            & Key("created_at").gte(since.isoformat()),
        )
        return [order_from_item(i) for i in items]

    def list_retailer_orders(
        self, retailer_id: str, since: datetime, confirmed_only: bool = True
    ) -> list[Order]:
        """Bayinin siparişlerini kalemleriyle birlikte döndürür."""
        kwargs: dict[str, Any] = {
            "IndexName": "RetailerTimeIndex",
            "KeyConditionExpression": Key("retailer_id").eq(retailer_id)
            & Key("created_at").gte(since.isoformat()),
        }
        if confirmed_only:
            kwargs["FilterExpression"] = Attr("status").eq("confirmed")
        items = self._query_all(self.orders_table, **kwargs)
        return [
            order_from_item(i, self.list_order_items(i["order_id"])) for i in items
        ]

    def list_beat_orders(self, retailer_ids: Iterable[str], since: datetime) -> list[Order]:
        orders: list[Order] = []
        for retailer_id in retailer_ids:
            orders.extend(self.list_retailer_orders(retailer_id, since))
        return orders

    def list_user_visits(self, user_id: str, since: datetime) -> list[Visit]:
        items = self._query_all(
            self.visits_table,
            IndexName="UserTimeIndex",
            KeyConditionExpression=Key("user_id").eq(user_id)
            & Key("created_at").gte(since.isoformat()),
        )
        return [visit_from_item(i) for i in items]

    # --- Ürünler ---

    def list_products_with_variants(self, product_ids: Iterable[str]) -> list[Product]:
        products = []
        for product_id in product_ids:
            resp = self.products_table.get_item(Key={"product_id": product_id})
            if "Item" not in resp:
                continue
            item = _decimal_to_native(resp["Item"])
            if not _is_active(item):
                continue
            variant_items = self._query_all(
                self.variants_table,
                IndexName="ProductIndex",
                KeyConditionExpression=Key("product_id").eq(product_id),
            )
            products.append(
                Product(
                    product_id=product_id,
                    name=item.get("name") or product_id,
                    rate=_as_float(item.get("rate")),
                    unit=item.get("unit") or "KG",
                    is_active=True,
                    variants=[
                        ProductVariant(
                            variant_id=v["variant_id"],
                            product_id=product_id,
                            variant_name=v.get("variant_name") or "",
                            price=_as_float(v.get("price")),
                            is_active=v.get("is_active", True) is not False,
                        )
                        for v in variant_items
                    ],
                )
            )
        return products

    # --- Beat planları ---

    def list_plans(self, user_id: str, start: date, end: date) -> list[dict]:
        """[start, end] aralığındaki (uçlar dahil) plan kayıtları."""
        return self._query_all(
            self.plans_table,
            KeyConditionExpression=Key("user_id").eq(user_id)
            & Key("plan_id").between(start.isoformat(), end.isoformat() + PLAN_ID_UPPER_SUFFIX),
        )

    def list_historical_plans(self, user_id: str, start: date, end: date) -> list[HistoricalPlan]:
        plans = []
        for item in self.list_plans(user_id, start, end):
            plan_date = parse_date(item.get("plan_date"))
            if plan_date and item.get("beat_id"):
                plans.append(HistoricalPlan(beat_id=item["beat_id"], plan_date=plan_date))
        return plans

    def put_plans(self, plans: list[dict]) -> None:
        with self.plans_table.batch_writer() as batch:
            for plan in plans:
                batch.put_item(Item=to_dynamodb(plan))

    def delete_plans(self, user_id: str, plan_ids: Iterable[str]) -> int:
        """Planları siler ve gerçekten var olup silinen kayıt sayısını döner."""
        deleted = 0
        for plan_id in plan_ids:
            resp = self.plans_table.delete_item(
                Key={"user_id": user_id, "plan_id": plan_id},
                ReturnValues="ALL_OLD",
            )
            if resp.get("Attributes"):
                deleted += 1
        return deleted

    # --- Otonom aksiyonlar ---

    def get_action(self, action_id: str) -> Optional[AutonomousAction]:
        resp = self.actions_table.get_item(Key={"action_id": action_id})
        if "Item" not in resp:
            return None
        return action_from_item(_decimal_to_native(resp["Item"]))

    def list_actions(self, user_id: str) -> list[AutonomousAction]:
        items = self._query_all(
            self.actions_table,
            IndexName="UserTimeIndex",
            KeyConditionExpression=Key("user_id").eq(user_id),
            ScanIndexForward=False,
        )
        return [action_from_item(i) for i in items]

    def mark_action_undone(self, action_id: str, undone_at: str) -> None:
        self.actions_table.update_item(
            Key={"action_id": action_id},
            UpdateExpression="SET #s = :s, undone_at = :u",
            ExpressionAttributeNames={"#s": "status"},
            ExpressionAttributeValues={":s": ActionStatus.UNDONE.value, ":u": undone_at},
        )

    def revoke_undo(self, action_id: str, superseded_at: str) -> None:
        """Yerine yeni plan yazılmış aksiyonun geri alınmasını kapatır."""
        self.actions_table.update_item(
            Key={"action_id": action_id},
            UpdateExpression="SET can_undo = :f, superseded_at = :t",
            ExpressionAttributeValues={":f": False, ":t": superseded_at},
        )

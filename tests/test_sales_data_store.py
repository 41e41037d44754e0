"""Sales Data Store unit testleri - normalizasyon ve sayfalama."""

from datetime import date, datetime
from decimal import Decimal

from unittest.mock import MagicMock

from src.agents.sales_data_store import (
    SalesDataStore,
    parse_datetime,
    plan_id_for,
    retailer_from_item,
    to_dynamodb,
    visit_from_item,
)
from src.models.sales import PotentialTier, RetailerPriority


class TestNormalization:
    """Ham kayıtların tipli modellere çevrilmesi."""

    def test_missing_fields_get_defaults(self):
        retailer = retailer_from_item({"retailer_id": "R1"})
        assert retailer.name == "R1"
        assert retailer.potential == PotentialTier.MEDIUM
        assert retailer.priority == RetailerPriority.NORMAL
        assert retailer.pending_amount == 0.0
        assert retailer.last_visit_date is None
        assert retailer.is_active is True

    def test_unknown_tier_falls_back_to_medium(self):
        retailer = retailer_from_item({"retailer_id": "R1", "potential": "VIP", "priority": "High"})
        assert retailer.potential == PotentialTier.MEDIUM
        assert retailer.priority == RetailerPriority.HIGH

    def test_negative_pending_clamped(self):
        retailer = retailer_from_item({"retailer_id": "R1", "pending_amount": -250})
        assert retailer.pending_amount == 0.0

    def test_inactive_status(self):
        retailer = retailer_from_item({"retailer_id": "R1", "status": "inactive"})
        assert retailer.is_active is False

    def test_timezone_aware_timestamp_converted_to_utc(self):
        assert parse_datetime("2024-06-12T10:00:00+05:30") == datetime(2024, 6, 12, 4, 30)
        assert parse_datetime("2024-06-12T10:00:00Z") == datetime(2024, 6, 12, 10, 0)
        assert parse_datetime("not-a-date") is None
        assert parse_datetime(None) is None

    def test_visit_uses_check_out_time(self):
        visit = visit_from_item({
            "visit_id": "V1",
            "retailer_id": "R1",
            "status": "productive",
            "created_at": "2024-06-10T08:00:00",
            "check_in_time": "2024-06-10T11:00:00",
            "check_out_time": "2024-06-10T11:20:00",
        })
        assert visit.visited_at == datetime(2024, 6, 10, 11, 20)
        assert visit.planned_date == date(2024, 6, 10)

    def test_to_dynamodb_converts_floats_and_dates(self):
        item = to_dynamodb({"value": 12.5, "day": date(2024, 6, 17), "tags": [1.5]})
        assert item == {"value": Decimal("12.5"), "day": "2024-06-17", "tags": [Decimal("1.5")]}

    def test_plan_id(self):
        assert plan_id_for(date(2024, 6, 17), "B1") == "2024-06-17#B1"


class TestQueries:
    """DynamoDB sorgu sayfalama ve filtreleme."""

    def test_query_follows_last_evaluated_key(self):
        dynamodb = MagicMock()
        store = SalesDataStore(dynamodb)
        table = MagicMock()
        table.query.side_effect = [
            {"Items": [{"retailer_id": "R1", "status": "active"}], "LastEvaluatedKey": {"retailer_id": "R1"}},
            {"Items": [{"retailer_id": "R2", "status": "inactive"}, {"retailer_id": "R3"}]},
        ]
        store.retailers_table = table

        retailers = store.list_active_retailers("U1")

        assert [r.retailer_id for r in retailers] == ["R1", "R3"]
        assert table.query.call_count == 2
        assert table.query.call_args_list[1][1]["ExclusiveStartKey"] == {"retailer_id": "R1"}

    def test_decimal_values_converted(self):
        store = SalesDataStore(MagicMock())
        store.order_items_table = MagicMock()
        store.order_items_table.query.return_value = {
            "Items": [{"order_id": "O1", "product_id": "P1", "quantity": Decimal("2.5"), "rate": Decimal("40")}]
        }
        items = store.list_order_items("O1")
        assert items[0].quantity == 2.5
        assert items[0].rate == 40
        assert items[0].unit == "KG"
        assert items[0].variant_id is None

    def test_single_inactive_user_filtered(self):
        store = SalesDataStore(MagicMock())
        store.profiles_table = MagicMock()
        store.profiles_table.get_item.return_value = {"Item": {"user_id": "U1", "is_active": False}}
        assert store.list_active_users("U1") == []

    def test_historical_plans_parsed(self):
        store = SalesDataStore(MagicMock())
        store.plans_table = MagicMock()
        store.plans_table.query.return_value = {
            "Items": [
                {"user_id": "U1", "plan_id": "2024-06-03#B1", "beat_id": "B1", "plan_date": "2024-06-03"},
                {"user_id": "U1", "plan_id": "broken", "plan_date": "2024-06-04"},
            ]
        }
        plans = store.list_historical_plans("U1", date(2024, 3, 14), date(2024, 6, 16))
        assert [(p.beat_id, p.plan_date) for p in plans] == [("B1", date(2024, 6, 3))]

    def test_delete_plans_counts_only_existing_rows(self):
        store = SalesDataStore(MagicMock())
        store.plans_table = MagicMock()
        store.plans_table.delete_item.side_effect = [
            {"Attributes": {"user_id": "U1", "plan_id": "2024-06-17#B1"}},
            {},
        ]
        deleted = store.delete_plans("U1", ["2024-06-17#B1", "2024-06-18#B2"])
        assert deleted == 1
        assert store.plans_table.delete_item.call_args_list[1][1] == {
            "Key": {"user_id": "U1", "plan_id": "2024-06-18#B2"},
            "ReturnValues": "ALL_OLD",
        }

    def test_revoke_undo_clears_flag(self):
        store = SalesDataStore(MagicMock())
        store.actions_table = MagicMock()
        store.revoke_undo("A1", "2024-06-12T10:00:00")
        kwargs = store.actions_table.update_item.call_args[1]
        assert kwargs["Key"] == {"action_id": "A1"}
        assert kwargs["ExpressionAttributeValues"] == {":f": False, ":t": "2024-06-12T10:00:00"}

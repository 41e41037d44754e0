"""DynamoDB tablo oluşturma ve veri yükleme.

10 tablo: Profiles, Beats, Retailers, Orders, OrderItems, Visits, Products,
ProductVariants, BeatPlans, AutonomousActions
"""
import boto3
import json
import os
import sys
from botocore.exceptions import ClientError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))
import env_loader


REGION = env_loader.REGION


def _gsi(name: str, hash_key: str, range_key: str = None) -> dict:
    key_schema = [{"AttributeName": hash_key, "KeyType": "HASH"}]
    if range_key:
        key_schema.append({"AttributeName": range_key, "KeyType": "RANGE"})
    return {"IndexName": name, "KeySchema": key_schema, "Projection": {"ProjectionType": "ALL"}}


def _attrs(*names: str) -> list:
    return [{"AttributeName": n, "AttributeType": "S"} for n in names]


TABLE_DEFINITIONS = [
    {
        "TableName": "Profiles",
        "KeySchema": [{"AttributeName": "user_id", "KeyType": "HASH"}],
        "AttributeDefinitions": _attrs("user_id"),
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "Beats",
        "KeySchema": [{"AttributeName": "beat_id", "KeyType": "HASH"}],
        "AttributeDefinitions": _attrs("beat_id", "created_by"),
        "GlobalSecondaryIndexes": [_gsi("UserIndex", "created_by")],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "Retailers",
        "KeySchema": [{"AttributeName": "retailer_id", "KeyType": "HASH"}],
        "AttributeDefinitions": _attrs("retailer_id", "user_id", "beat_id"),
        "GlobalSecondaryIndexes": [
            _gsi("UserIndex", "user_id"),
            _gsi("BeatIndex", "beat_id"),
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "Orders",
        "KeySchema": [{"AttributeName": "order_id", "KeyType": "HASH"}],
        "AttributeDefinitions": _attrs("order_id", "user_id", "retailer_id", "created_at"),
        "GlobalSecondaryIndexes": [
            _gsi("UserTimeIndex", "user_id", "created_at"),
            _gsi("RetailerTimeIndex", "retailer_id", "created_at"),
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "OrderItems",
        "KeySchema": [
            {"AttributeName": "order_id", "KeyType": "HASH"},
            {"AttributeName": "item_id", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": _attrs("order_id", "item_id"),
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "Visits",
        "KeySchema": [{"AttributeName": "visit_id", "KeyType": "HASH"}],
        "AttributeDefinitions": _attrs("visit_id", "user_id", "created_at"),
        "GlobalSecondaryIndexes": [_gsi("UserTimeIndex", "user_id", "created_at")],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "Products",
        "KeySchema": [{"AttributeName": "product_id", "KeyType": "HASH"}],
        "AttributeDefinitions": _attrs("product_id"),
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "ProductVariants",
        "KeySchema": [{"AttributeName": "variant_id", "KeyType": "HASH"}],
        "AttributeDefinitions": _attrs("variant_id", "product_id"),
        "GlobalSecondaryIndexes": [_gsi("ProductIndex", "product_id")],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        # plan_id = "<plan_date>#<beat_id>" - tarih aralığı sorgusu için
        "TableName": "BeatPlans",
        "KeySchema": [
            {"AttributeName": "user_id", "KeyType": "HASH"},
            {"AttributeName": "plan_id", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": _attrs("user_id", "plan_id"),
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "AutonomousActions",
        "KeySchema": [{"AttributeName": "action_id", "KeyType": "HASH"}],
        "AttributeDefinitions": _attrs("action_id", "user_id", "executed_at"),
        "GlobalSecondaryIndexes": [_gsi("UserTimeIndex", "user_id", "executed_at")],
        "BillingMode": "PAY_PER_REQUEST",
    },
]

# tablo adı -> seed dosyası
SEED_FILES = {
    "Profiles": "profiles.json",
    "Beats": "beats.json",
    "Retailers": "retailers.json",
    "Orders": "orders.json",
    "OrderItems": "order-items.json",
    "Visits": "visits.json",
    "Products": "products.json",
    "ProductVariants": "product-variants.json",
}


def create_tables(region: str = REGION):
    """Tüm DynamoDB tablolarını oluşturur."""
    dynamodb = boto3.client("dynamodb", region_name=region)

    for table_def in TABLE_DEFINITIONS:
        table_name = table_def["TableName"]
        try:
            dynamodb.describe_table(TableName=table_name)
            print(f"  ⏭️  {table_name} zaten mevcut, atlanıyor")
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceNotFoundException":
                print(f"  🔨 {table_name} oluşturuluyor...")
                dynamodb.create_table(**table_def)
                # Tablonun aktif olmasını bekle
                waiter = dynamodb.get_waiter("table_exists")
                waiter.wait(TableName=table_name)
                print(f"  ✓  {table_name} oluşturuldu")
            else:
                raise


def load_data_to_table(table_name: str, data: list, region: str = REGION):
    """JSON verisini DynamoDB tablosuna batch write ile yükler."""
    from src.agents.sales_data_store import to_dynamodb

    dynamodb = boto3.resource("dynamodb", region_name=region)
    table = dynamodb.Table(table_name)
    with table.batch_writer() as batch:
        for item in data:
            batch.put_item(Item=to_dynamodb(item))
    print(f"  ✓  {table_name}: {len(data)} kayıt yüklendi")


def _table_has_data(table_name: str, region: str = REGION) -> bool:
    """Tabloda veri var mı kontrol eder (hızlı scan, 1 item)."""
    dynamodb = boto3.client("dynamodb", region_name=region)
    resp = dynamodb.scan(TableName=table_name, Limit=1, Select="COUNT")
    return resp.get("Count", 0) > 0


def load_all_data(data_dir: str = "data_layer/data", region: str = REGION):
    """Tüm JSON verilerini DynamoDB'ye yükler (zaten yüklüyse atlar)."""
    print("\n📤 DynamoDB'ye veri yükleniyor...\n")

    for table_name, file_name in SEED_FILES.items():
        if _table_has_data(table_name, region):
            print(f"  ⏭️  {table_name} zaten dolu, atlanıyor")
            continue
        path = os.path.join(data_dir, file_name)
        if not os.path.exists(path):
            print(f"  ⚠️  {path} bulunamadı, atlanıyor")
            continue
        with open(path, "r", encoding="utf-8") as f:
            load_data_to_table(table_name, json.load(f), region)

    print("\n✅ Tüm veriler DynamoDB'ye yüklendi!")


def delete_tables(region: str = REGION):
    """Tüm tabloları siler (dikkatli kullan)."""
    dynamodb = boto3.client("dynamodb", region_name=region)
    for table_def in TABLE_DEFINITIONS:
        table_name = table_def["TableName"]
        try:
            dynamodb.delete_table(TableName=table_name)
            print(f"  🗑️  {table_name} silindi")
        except ClientError:
            print(f"  ⏭️  {table_name} bulunamadı, atlanıyor")


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "--delete":
        print("🗑️  Tablolar siliniyor...")
        delete_tables()
    else:
        print("🏗️  DynamoDB tabloları oluşturuluyor...\n")
        create_tables()
        load_all_data()

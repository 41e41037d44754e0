"""S3 bucket oluşturma ve veri yükleme.

Bucket yapısı:
  sales-intel-logs-{account_id}/
  ├── raw-data/
  └── agent-logs/
"""
import boto3
import os
import sys
from botocore.exceptions import ClientError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))
import env_loader
from data_layer.infrastructure.dynamodb_setup import SEED_FILES
from src.agents.base_agent import LOG_BUCKET_PREFIX


REGION = env_loader.REGION


def get_bucket_name(region: str = REGION) -> str:
    """SALES_INTEL_LOG_BUCKET yoksa account ID ile unique bucket adı oluşturur."""
    if env_loader.LOG_BUCKET:
        return env_loader.LOG_BUCKET
    sts = boto3.client("sts", region_name=region)
    account_id = sts.get_caller_identity()["Account"]
    return f"{LOG_BUCKET_PREFIX}-{account_id}"


def create_bucket(region: str = REGION) -> str:
    """S3 bucket oluşturur."""
    s3 = boto3.client("s3", region_name=region)
    bucket_name = get_bucket_name(region)

    try:
        if region == "us-east-1":
            s3.create_bucket(Bucket=bucket_name)
        else:
            s3.create_bucket(
                Bucket=bucket_name,
                CreateBucketConfiguration={"LocationConstraint": region},
            )
        print(f"  ✓ Bucket oluşturuldu: {bucket_name}")
    except ClientError as e:
        if e.response["Error"]["Code"] in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists"):
            print(f"  ⏭️  Bucket zaten mevcut: {bucket_name}")
        else:
            raise

    return bucket_name


def upload_all_data(data_dir: str = "data_layer/data", region: str = REGION):
    """Seed dosyalarını raw-data/ altına yükler."""
    s3 = boto3.client("s3", region_name=region)
    bucket_name = get_bucket_name(region)
    print(f"\n📤 S3'e veri yükleniyor ({bucket_name})...\n")

    for file_name in SEED_FILES.values():
        local_path = os.path.join(data_dir, file_name)
        if os.path.exists(local_path):
            s3.upload_file(local_path, bucket_name, f"raw-data/{file_name}")
            print(f"  ✓ raw-data/{file_name}")
        else:
            print(f"  ⚠️  {local_path} bulunamadı, atlanıyor")

    s3.put_object(Bucket=bucket_name, Key="agent-logs/", Body=b"")
    print("  ✓ agent-logs/ (klasör)")

    print(f"\n✅ Tüm veriler S3'e yüklendi! Bucket: {bucket_name}")
    return bucket_name


def delete_bucket(region: str = REGION):
    """Bucket ve içeriğini siler (dikkatli kullan)."""
    s3 = boto3.resource("s3", region_name=region)
    bucket_name = get_bucket_name(region)
    try:
        bucket = s3.Bucket(bucket_name)
        bucket.objects.all().delete()
        bucket.delete()
        print(f"  🗑️  {bucket_name} silindi")
    except ClientError:
        print(f"  ⏭️  {bucket_name} bulunamadı")


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "--delete":
        print("🗑️  S3 bucket siliniyor...")
        delete_bucket()
    else:
        print("🏗️  S3 bucket oluşturuluyor...\n")
        create_bucket()
        upload_all_data()

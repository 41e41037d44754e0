"""Tüm agentlar için temel sınıf - DynamoDB/S3 erişimi ve otonom aksiyon kaydı."""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import asdict
from datetime import datetime
from typing import Any, Optional

import boto3
from botocore.exceptions import ClientError

from src.agents.sales_data_store import SalesDataStore, to_dynamodb
from src.models.sales import AutonomousAction

logger = logging.getLogger(__name__)

LOG_BUCKET_PREFIX = "sales-intel-logs"


class BaseAgent(ABC):
    """Saha satış agentlarının temel sınıfı."""

    def __init__(
        self,
        agent_name: str,
        region_name: str = "us-west-2",
        dynamodb_resource: Optional[Any] = None,
        s3_client: Optional[Any] = None,
        data_store: Optional[SalesDataStore] = None,
        log_bucket: Optional[str] = None,
    ):
        self.agent_name = agent_name
        self.region_name = region_name

        # AWS istemcileri - dependency injection destekli
        self.dynamodb = dynamodb_resource or boto3.resource(
            "dynamodb", region_name=region_name
        )
        self.s3 = s3_client or boto3.client("s3", region_name=region_name)
        self.store = data_store or SalesDataStore(self.dynamodb)

        self.actions_table = self.dynamodb.Table("AutonomousActions")
        self._s3_bucket_name = log_bucket or os.environ.get("SALES_INTEL_LOG_BUCKET")

        self._actions: list[AutonomousAction] = []

        logger.info("Agent başlatıldı: %s", agent_name)

    def log_action(self, action: AutonomousAction) -> AutonomousAction:
        """Otonom aksiyonu DynamoDB'ye ve S3 log kopyasına yazar.

        Yazma hataları uyarı olarak loglanır; aksiyonun kendisini bozmaz.
        """
        self._actions.append(action)
        record = asdict(action)
        record["status"] = action.status.value

        try:
            self.actions_table.put_item(Item=to_dynamodb(record))
        except ClientError as e:
            logger.warning("Aksiyon loglama hatası [%s]: %s", action.action_id, e)

        try:
            self.log_to_s3(record, prefix=f"{action.action_type}-")
        except Exception as e:
            logger.warning("S3 aksiyon log hatası: %s", e)

        return action

    def log_to_s3(self, log_data: dict, prefix: str = "") -> None:
        """Agent logunu S3'e kaydeder."""
        timestamp = datetime.utcnow().strftime("%Y-%m-%dT%H-%M-%S")
        key = f"agent-logs/{self.agent_name.lower().replace(' ', '-')}/{prefix}{timestamp}.json"
        try:
            # Bucket adı verilmediyse hesap numarasından türetilir
            if not self._s3_bucket_name:
                sts = boto3.client("sts", region_name=self.region_name)
                account_id = sts.get_caller_identity()["Account"]
                self._s3_bucket_name = f"{LOG_BUCKET_PREFIX}-{account_id}"
            self.s3.put_object(
                Bucket=self._s3_bucket_name,
                Key=key,
                Body=json.dumps(log_data, default=str),
            )
        except ClientError as e:
            logger.warning("S3 log hatası: %s", e)

    @abstractmethod
    def process(self, *args: Any, **kwargs: Any) -> Any:
        """Her agent kendi iş mantığını implement eder."""
        ...

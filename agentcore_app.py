"""
AgentCore Runtime Entrypoint - Saha Satis Zekasi.

Haftalik beat plani uretimi, akilli sepet onerileri ve otonom aksiyon geri
alma islemleri BedrockAgentCoreApp ile sarmalanmistir. Veri erisimi dogrudan
DynamoDB/S3 uzerindendir.

Deploy:
    agentcore configure -e agentcore_app.py -r us-west-2
    agentcore deploy
"""

import logging

import env_loader
import boto3

from bedrock_agentcore import BedrockAgentCoreApp

from src.agents.beat_plan_generator import BeatPlanGeneratorAgent
from src.agents.errors import ValidationError
from src.agents.sales_data_store import SalesDataStore
from src.agents.smart_basket import SmartBasketAgent

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
logger = logging.getLogger("agentcore_app")

REGION = env_loader.REGION

app = BedrockAgentCoreApp()

# Global agent state - ilk invoke'da lazy init edilir
_agents = None


def init_agents():
    """Agentlari ortak DynamoDB/S3 istemcileriyle baslatir. Lazy init."""
    global _agents
    if _agents is not None:
        return _agents

    logger.info("Agentlar baslatiliyor (region=%s)...", REGION)
    dynamodb = boto3.resource("dynamodb", region_name=REGION)
    s3 = boto3.client("s3", region_name=REGION)
    store = SalesDataStore(dynamodb)

    shared = dict(
        region_name=REGION,
        dynamodb_resource=dynamodb,
        s3_client=s3,
        data_store=store,
        log_bucket=env_loader.LOG_BUCKET,
    )
    _agents = {
        "planner": BeatPlanGeneratorAgent(**shared),
        "basket": SmartBasketAgent(**shared),
    }
    logger.info("Agentlar hazir")
    return _agents


def _as_flag(value) -> bool:
    """Sadece gercek True ya da "true" metni bayrak sayilir."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


def handle(payload: dict, agents: dict) -> dict:
    """Payload'daki action'a gore ilgili agent'i cagirir."""
    action = payload.get("action", "auto_generate_beat_plan")

    if action == "auto_generate_beat_plan":
        return agents["planner"].process(
            user_id=payload.get("userId"),
            force_regenerate=_as_flag(payload.get("forceRegenerate")),
        )

    if action == "smart_basket":
        return agents["basket"].process(
            retailer_id=payload.get("retailerId"),
            beat_id=payload.get("beatId"),
        )

    if action == "undo_action":
        action_id = payload.get("actionId")
        if not action_id:
            raise ValidationError("actionId zorunludur")
        return agents["planner"].undo_action(action_id)

    if action == "list_actions":
        user_id = payload.get("userId")
        if not user_id:
            raise ValidationError("userId zorunludur")
        return {
            "actions": [
                {
                    "action_id": a.action_id,
                    "action_type": a.action_type,
                    "status": a.status.value,
                    "executed_at": a.executed_at,
                    "can_undo": a.can_undo,
                    "undo_until": a.undo_until,
                    "action_data": a.action_data,
                }
                for a in agents["planner"].list_actions(user_id)
            ]
        }

    raise ValidationError(f"Bilinmeyen action: {action}")


# ============================================================
# AgentCore Entrypoint
# ============================================================

@app.entrypoint
def invoke(payload):
    """
    AgentCore Runtime tarafindan cagrilan ana endpoint.

    Beklenen payload:
        {"action": "auto_generate_beat_plan", "userId": "...", "forceRegenerate": false}
        {"action": "smart_basket", "retailerId": "...", "beatId": "..."}
        {"action": "undo_action", "actionId": "..."}

    Hata durumunda {"error": "..."} doner.
    """
    try:
        return handle(payload or {}, init_agents())
    except ValidationError as e:
        logger.warning("Gecersiz istek: %s", e)
        return {"error": str(e)}
    except Exception as e:
        logger.error("Istek hatasi: %s", e)
        return {"error": str(e)}


if __name__ == "__main__":
    app.run()

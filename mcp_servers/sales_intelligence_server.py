"""
Sales Intelligence MCP Server

Provides tools for weekly beat plan generation, smart basket suggestions and
autonomous action management on top of DynamoDB.
"""

import json
import logging
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
import env_loader

import boto3
from typing import Dict, List, Optional
from mcp.server import Server
from mcp.types import Tool, TextContent

from src.agents.beat_plan_generator import BeatPlanGeneratorAgent
from src.agents.errors import ValidationError
from src.agents.sales_data_store import SalesDataStore
from src.agents.smart_basket import SmartBasketAgent

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
logger = logging.getLogger("sales_intelligence_server")

app = Server("sales-intelligence")

REGION = env_loader.REGION
dynamodb = boto3.resource("dynamodb", region_name=REGION)
s3 = boto3.client("s3", region_name=REGION)
store = SalesDataStore(dynamodb)

_shared = dict(
    region_name=REGION,
    dynamodb_resource=dynamodb,
    s3_client=s3,
    data_store=store,
    log_bucket=env_loader.LOG_BUCKET,
)
planner = BeatPlanGeneratorAgent(**_shared)
basket = SmartBasketAgent(**_shared)


def _result(data):
    return [TextContent(type="text", text=json.dumps(data, indent=2, ensure_ascii=False, default=str))]


@app.list_tools()
async def list_tools() -> List[Tool]:
    return [
        Tool(name="generate_beat_plan", description="Generate next week's beat plans for all active users or one user",
             inputSchema={"type": "object", "properties": {"user_id": {"type": "string"}, "force_regenerate": {"type": "boolean"}}}),
        Tool(name="get_smart_basket_suggestions", description="Get repeat order, beat trending and pack upsell suggestions for a retailer",
             inputSchema={"type": "object", "properties": {"retailer_id": {"type": "string"}, "beat_id": {"type": "string"}}, "required": ["retailer_id"]}),
        Tool(name="list_autonomous_actions", description="List autonomous actions recorded for a user (newest first)",
             inputSchema={"type": "object", "properties": {"user_id": {"type": "string"}}, "required": ["user_id"]}),
        Tool(name="undo_autonomous_action", description="Undo an autonomous beat plan action within its undo window",
             inputSchema={"type": "object", "properties": {"action_id": {"type": "string"}}, "required": ["action_id"]}),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: dict) -> List[TextContent]:
    handlers = {
        "generate_beat_plan": lambda a: generate_beat_plan(a.get("user_id"), a.get("force_regenerate", False)),
        "get_smart_basket_suggestions": lambda a: get_smart_basket_suggestions(a["retailer_id"], a.get("beat_id")),
        "list_autonomous_actions": lambda a: list_autonomous_actions(a["user_id"]),
        "undo_autonomous_action": lambda a: undo_autonomous_action(a["action_id"]),
    }
    handler = handlers.get(name)
    if not handler:
        raise ValueError(f"Unknown tool: {name}")
    return _result(handler(arguments))


# --- Implementation ---

def generate_beat_plan(user_id: Optional[str] = None, force_regenerate: bool = False) -> Dict:
    try:
        return planner.process(user_id=user_id, force_regenerate=str(force_regenerate).strip().lower() == "true")
    except Exception as e:
        logger.error("Beat plani uretim hatasi: %s", e)
        return {"success": False, "error": str(e)}


def get_smart_basket_suggestions(retailer_id: str, beat_id: Optional[str] = None) -> Dict:
    try:
        return {"success": True, "data": basket.process(retailer_id=retailer_id, beat_id=beat_id)}
    except Exception as e:
        return {"success": False, "error": str(e)}


def list_autonomous_actions(user_id: str) -> Dict:
    try:
        actions = planner.list_actions(user_id)
        data = [
            {
                "action_id": a.action_id,
                "action_type": a.action_type,
                "status": a.status.value,
                "executed_at": a.executed_at,
                "can_undo": a.can_undo,
                "undo_until": a.undo_until,
                "action_data": a.action_data,
            }
            for a in actions
        ]
        return {"success": True, "count": len(data), "data": data}
    except Exception as e:
        return {"success": False, "error": str(e)}


def undo_autonomous_action(action_id: str) -> Dict:
    try:
        return {"success": True, "data": planner.undo_action(action_id)}
    except ValidationError as e:
        return {"success": False, "error": str(e), "error_type": type(e).__name__}
    except Exception as e:
        return {"success": False, "error": str(e)}


if __name__ == "__main__":
    import asyncio
    from mcp.server.stdio import stdio_server

    async def run():
        async with stdio_server() as (read, write):
            await app.run(read, write, app.create_initialization_options())

    asyncio.run(run())

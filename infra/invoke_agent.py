"""
Deploy edilen AgentCore agent'i programatik olarak cagirmak icin script.

Kullanim:
    python infra/invoke_agent.py beat-plan [USER_ID] [--force]
    python infra/invoke_agent.py basket RETAILER_ID [BEAT_ID]
    python infra/invoke_agent.py undo ACTION_ID

Not: .bedrock_agentcore.yaml dosyasindan ARN otomatik okunur.
     Yoksa AGENT_ARN env var kullanilir.
"""

import json
import sys
import uuid
import os

import boto3
import yaml


def get_agent_arn() -> str:
    """ARN'i config dosyasindan veya env var'dan al."""
    # Once env var
    arn = os.environ.get("AGENT_ARN")
    if arn:
        return arn

    # .bedrock_agentcore.yaml'dan oku
    config_path = ".bedrock_agentcore.yaml"
    if os.path.exists(config_path):
        with open(config_path) as f:
            config = yaml.safe_load(f)
        arn = config.get("bedrock_agentcore", {}).get("agent_runtime_arn")
        if arn:
            return arn

    print("HATA: Agent ARN bulunamadi.")
    print("  Ya AGENT_ARN env var ayarlayin ya da agentcore deploy yapin.")
    sys.exit(1)


def build_payload(args: list) -> dict:
    """Komut satiri argumanlarindan runtime payload'i olusturur."""
    command = args[0] if args else "beat-plan"
    rest = [a for a in args[1:] if not a.startswith("--")]

    if command == "beat-plan":
        payload = {"action": "auto_generate_beat_plan", "forceRegenerate": "--force" in args}
        if rest:
            payload["userId"] = rest[0]
        return payload
    if command == "basket":
        if not rest:
            raise SystemExit("Kullanim: invoke_agent.py basket RETAILER_ID [BEAT_ID]")
        payload = {"action": "smart_basket", "retailerId": rest[0]}
        if len(rest) > 1:
            payload["beatId"] = rest[1]
        return payload
    if command == "undo":
        if not rest:
            raise SystemExit("Kullanim: invoke_agent.py undo ACTION_ID")
        return {"action": "undo_action", "actionId": rest[0]}
    raise SystemExit(f"Bilinmeyen komut: {command}")


def invoke(payload: dict, session_id: str = None):
    agent_arn = get_agent_arn()
    session_id = session_id or str(uuid.uuid4())

    client = boto3.client("bedrock-agentcore")

    print(f"Agent ARN: {agent_arn}")
    print(f"Session: {session_id}")
    print(f"Payload: {payload}")
    print("-" * 50)

    response = client.invoke_agent_runtime(
        agentRuntimeArn=agent_arn,
        runtimeSessionId=session_id,
        payload=json.dumps(payload).encode(),
        qualifier="DEFAULT",
    )

    content = []
    for chunk in response.get("response", []):
        content.append(chunk.decode("utf-8"))

    result = json.loads("".join(content))
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return result


if __name__ == "__main__":
    invoke(build_payload(sys.argv[1:]))

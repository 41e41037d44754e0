"""AgentCore entrypoint yönlendirme testleri."""

import pytest
from unittest.mock import MagicMock

import agentcore_app
from src.agents.errors import ValidationError


def _agents() -> dict:
    planner = MagicMock()
    planner.process.return_value = {"success": True, "results": [], "summary": {}}
    basket = MagicMock()
    basket.process.return_value = {"summary": {}}
    return {"planner": planner, "basket": basket}


class TestHandle:
    """Payload action alanına göre agent seçimi."""

    def test_beat_plan_is_default_action(self):
        agents = _agents()
        agentcore_app.handle({"userId": "U1", "forceRegenerate": True}, agents)
        agents["planner"].process.assert_called_once_with(user_id="U1", force_regenerate=True)

    @pytest.mark.parametrize("flag", ["false", "False", "0", "", None, 1])
    def test_force_flag_not_truthy_string(self, flag):
        agents = _agents()
        agentcore_app.handle({"userId": "U1", "forceRegenerate": flag}, agents)
        agents["planner"].process.assert_called_once_with(user_id="U1", force_regenerate=False)

    @pytest.mark.parametrize("flag", [True, "true", "TRUE"])
    def test_force_flag_accepted(self, flag):
        agents = _agents()
        agentcore_app.handle({"forceRegenerate": flag}, agents)
        agents["planner"].process.assert_called_once_with(user_id=None, force_regenerate=True)

    def test_smart_basket(self):
        agents = _agents()
        agentcore_app.handle({"action": "smart_basket", "retailerId": "R1", "beatId": "B1"}, agents)
        agents["basket"].process.assert_called_once_with(retailer_id="R1", beat_id="B1")

    def test_undo_requires_action_id(self):
        with pytest.raises(ValidationError):
            agentcore_app.handle({"action": "undo_action"}, _agents())

    def test_unknown_action(self):
        with pytest.raises(ValidationError):
            agentcore_app.handle({"action": "teleport"}, _agents())

    def test_entrypoint_converts_errors(self, monkeypatch):
        monkeypatch.setattr(agentcore_app, "init_agents", _agents)
        assert agentcore_app.invoke({"action": "teleport"}) == {"error": "Bilinmeyen action: teleport"}

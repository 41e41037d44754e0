from src.agents.base_agent import BaseAgent
from src.agents.beat_plan_generator import BeatPlanGeneratorAgent
from src.agents.sales_data_store import SalesDataStore
from src.agents.smart_basket import SmartBasketAgent

__all__ = [
    "BaseAgent",
    "BeatPlanGeneratorAgent",
    "SalesDataStore",
    "SmartBasketAgent",
]

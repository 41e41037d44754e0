from src.insights.beat_day_assigner import BeatDayAssigner
from src.insights.beat_trend_analyzer import BeatTrendAnalyzer
from src.insights.pack_size import parse_pack_size
from src.insights.pack_upsell_analyzer import PackUpsellAnalyzer
from src.insights.repeat_order_analyzer import RepeatOrderAnalyzer
from src.insights.retailer_scorer import RetailerScorer

__all__ = [
    "BeatDayAssigner",
    "BeatTrendAnalyzer",
    "PackUpsellAnalyzer",
    "RepeatOrderAnalyzer",
    "RetailerScorer",
    "parse_pack_size",
]

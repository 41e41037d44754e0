"""Öneri hesaplamalarında ortak kullanılan küçük istatistik yardımcıları."""

from __future__ import annotations

import math
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence


def round_half_up(value: float, digits: int = 0) -> float:
    """Yarımları yukarı yuvarlar (Python'un bankacı yuvarlamasından farklı)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def typical_value(values: Sequence[float]) -> float:
    """Sıralı listenin orta elemanı; çift uzunlukta üst ortancayı alır."""
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def population_stddev(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    avg = mean(values)
    variance = sum((v - avg) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def most_frequent(values: Sequence[str], default: str = "KG") -> str:
    """En sık görülen değer; eşitlikte ilk görülen kazanır."""
    if not values:
        return default
    return Counter(values).most_common(1)[0][0]

"""Varyant adlarından paket boyutu (gram) çözümleme."""

from __future__ import annotations

import re
from typing import Optional

# "250G", "1 KG", "500gm", "1.5 kilos", "2 Kilograms"
PACK_SIZE_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)\s*(kilograms?|kilos?|kgs?|grams?|gms?|g)",
    re.IGNORECASE,
)

KILO_UNITS = ("kg", "kilo")


def parse_pack_size(name: Optional[str]) -> Optional[float]:
    """Varyant adındaki ilk boyut ifadesini grama çevirir; bulunamazsa None."""
    if not name:
        return None
    match = PACK_SIZE_PATTERN.search(name)
    if not match:
        return None

    amount = float(match.group(1))
    unit = match.group(2).lower()
    if unit.startswith(KILO_UNITS):
        amount *= 1000
    if amount <= 0:
        return None
    return amount

"""
Formation slot tables.

Each supported formation maps starter index (roster order) to a unique slot
label. Unknown formation keys resolve to the default formation.
"""
from typing import Optional

from app.config import settings

DEFAULT_FORMATION = "4-4-2"

FORMATIONS: dict[str, list[str]] = {
    "4-4-2": ["gk", "lb", "cb1", "cb2", "rb", "lm", "cm1", "cm2", "rm", "st1", "st2"],
    "4-3-3": ["gk", "lb", "cb1", "cb2", "rb", "cm1", "cm2", "cm3", "lw", "st", "rw"],
    "3-5-2": ["gk", "cb1", "cb2", "cb3", "lm", "cm1", "cm2", "cm3", "rm", "st1", "st2"],
    "5-3-2": ["gk", "lb", "cb1", "cb2", "rb", "lm", "cm1", "cm2", "rm", "st1", "st2"],
}


def is_supported_formation(formation: Optional[str]) -> bool:
    return formation in FORMATIONS


def resolve_formation(formation: Optional[str]) -> str:
    """Return the formation key if supported, otherwise the configured default."""
    if is_supported_formation(formation):
        return formation
    if is_supported_formation(settings.DEFAULT_FORMATION):
        return settings.DEFAULT_FORMATION
    return DEFAULT_FORMATION


def formation_slots(formation: Optional[str]) -> list[str]:
    return list(FORMATIONS[resolve_formation(formation)])


def formation_position(index: int, formation: Optional[str]) -> Optional[str]:
    """Slot label for the starter at `index`, or None past the end of the table"""
    slots = FORMATIONS[resolve_formation(formation)]
    if 0 <= index < len(slots):
        return slots[index]
    return None

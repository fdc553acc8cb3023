# ============================================================================
# app/services/booking/slot_catalog.py
# ============================================================================
"""Fixed time-of-day slots offered for booking, plus grid helpers."""
import re
from typing import Iterable, List, Set

SLOT_STEP_MINUTES = 30
MAX_DURATION_MINUTES = 24 * 60
FIRST_SLOT_MINUTES = 10 * 60
LAST_SLOT_MINUTES = 18 * 60 + 30

_SLOT_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def minutes_to_slot(minutes: int) -> str:
    """870 -> '14:30'"""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def slot_to_minutes(slot: str) -> int:
    """'14:30' -> 870. Raises ValueError on anything that is not HH:MM."""
    match = _SLOT_PATTERN.match(slot or "")
    if not match:
        raise ValueError(f"Invalid time format: {slot!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


SLOT_CATALOG = tuple(
    minutes_to_slot(m)
    for m in range(FIRST_SLOT_MINUTES, LAST_SLOT_MINUTES + 1, SLOT_STEP_MINUTES)
)

_CATALOG_SET = frozenset(SLOT_CATALOG)


def is_catalog_slot(value: str) -> bool:
    return value in _CATALOG_SET


def slots_covering(start_minutes: int, duration_minutes: int) -> Set[str]:
    """
    Catalog slots overlapped by an appointment.

    The start is rounded down and the end rounded up to the slot grid, so a
    14:10 appointment of 40 minutes covers 14:00 and 14:30.
    """
    end_minutes = start_minutes + duration_minutes
    first = (start_minutes // SLOT_STEP_MINUTES) * SLOT_STEP_MINUTES
    last = -(-end_minutes // SLOT_STEP_MINUTES) * SLOT_STEP_MINUTES

    # Only walk the part of the span the catalog can contain
    first = max(first, FIRST_SLOT_MINUTES)
    last = min(last, LAST_SLOT_MINUTES + SLOT_STEP_MINUTES)

    covered = set()
    for minutes in range(first, last, SLOT_STEP_MINUTES):
        slot = minutes_to_slot(minutes)
        if slot in _CATALOG_SET:
            covered.add(slot)
    return covered


def slots_in_hours(hours: Iterable[int]) -> Set[str]:
    """Catalog slots that start inside any of the given whole hours."""
    wanted = set(hours)
    return {slot for slot in SLOT_CATALOG if int(slot[:2]) in wanted}


def ordered(slots: Iterable[str]) -> List[str]:
    """Keep only catalog slots, in catalog order, without duplicates."""
    wanted = set(slots)
    return [slot for slot in SLOT_CATALOG if slot in wanted]

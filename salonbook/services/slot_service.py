import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from salonbook.core.config import settings


@dataclass(frozen=True)
class ScheduleSlot:
    """The interval one service line-item will occupy. Instants are timezone-aware UTC."""

    start: datetime
    end: datetime

    @property
    def start_iso(self) -> str:
        return self.start.isoformat()

    @property
    def end_iso(self) -> str:
        return self.end.isoformat()


def get_field(item: Any, name: str) -> Any:
    """Read a field from a dict-like row or an object (SQLModel row, pydantic model)."""
    if item is None:
        return None
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _to_aware_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to already be UTC, matching how they are stored."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _as_minutes(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        return 0
    return minutes if math.isfinite(minutes) else 0


def is_chemical(service: Any, keywords: Sequence[str] | None = None) -> bool:
    """True if the service needs a processing gap after it.

    An explicit is_chemical flag wins; otherwise name, title and category are
    matched case-insensitively against the chemical keyword list.
    """
    if service is None:
        return False
    if get_field(service, "is_chemical"):
        return True
    parts = (get_field(service, "name"), get_field(service, "title"), get_field(service, "category"))
    text = " ".join(str(p) for p in parts if p).lower()
    words = settings.chemical_keywords if keywords is None else keywords
    return any(k in text for k in words)


def get_duration_minutes(row: Any, basket_item: Any = None) -> float:
    """Minutes a line-item takes. The row's own duration wins, then the basket's
    display_duration, then its duration. Never less than one minute."""
    for value in (
        get_field(row, "duration"),
        get_field(basket_item, "display_duration"),
        get_field(basket_item, "displayDuration"),
        get_field(basket_item, "duration"),
    ):
        if value is not None:
            return max(1, _as_minutes(value))
    return 1


def _service_for_gap(row: Any, basket_item: Any) -> Any:
    if basket_item is not None:
        return basket_item
    title = get_field(row, "title")
    return {"name": title, "title": title, "category": get_field(row, "category")}


def build_slots(
    start_date: datetime,
    ordered_rows: Sequence[Any],
    basket: Sequence[Any] | None = None,
    chemical_gap_min: int | None = None,
) -> list[ScheduleSlot]:
    """Lay the ordered line-items out back to back from start_date.

    A chemical service pushes the next item out by chemical_gap_min minutes;
    its own slot keeps its duration. One slot per row, in row order.
    """
    gap = settings.chemical_gap_minutes if chemical_gap_min is None else chemical_gap_min
    slots: list[ScheduleSlot] = []
    current_start = _to_aware_utc(start_date)
    for i, row in enumerate(ordered_rows):
        basket_item = basket[i] if basket is not None and i < len(basket) else None
        current_end = current_start + timedelta(minutes=get_duration_minutes(row, basket_item))
        slots.append(ScheduleSlot(start=current_start, end=current_end))
        if is_chemical(_service_for_gap(row, basket_item)):
            current_start = current_end + timedelta(minutes=gap)
        else:
            current_start = current_end
    return slots


def slots_end(slots: Sequence[ScheduleSlot]) -> datetime | None:
    """End of the last slot, i.e. when the rescheduled visit finishes."""
    if not slots:
        return None
    return slots[-1].end

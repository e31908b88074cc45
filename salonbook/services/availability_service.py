"""Reschedule availability: do the slots a visit would occupy collide with anything?

Two obstacle sources are checked in order: the stylist's other bookings, then
active schedule blocks (the stylist's own and salon-wide ones). Bad input and
conflicts come back as a ConflictResult; database errors propagate.
"""
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from sqlalchemy import Boolean, DateTime, String, and_, column, false, or_, select, table, true
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from salonbook.core.config import settings
from salonbook.models.booking import Booking
from salonbook.models.schedule_block import ScheduleBlock
from salonbook.services.slot_service import ScheduleSlot, build_slots, get_field

logger = logging.getLogger(__name__)

Outcome = Literal["ok", "invalid", "booking_conflict", "block_conflict"]

NO_DB_MESSAGE = "No database client."
NO_STAFF_MESSAGE = "Pick a stylist."
BAD_START_MESSAGE = "Pick a valid new date/time."
NO_ROWS_MESSAGE = "No booking rows found to reschedule."
BOOKING_CONFLICT_MESSAGE = (
    "That time isn't available for this stylist (booking conflict). Please choose a different time slot."
)
BLOCK_CONFLICT_MESSAGE = "That time is blocked (schedule block). Please choose another slot."

# Postgres SQLSTATE for undefined_column
_UNDEFINED_COLUMN = "42703"


@dataclass(frozen=True)
class BlockConflict:
    """The schedule block a check ran into, as read from schedule_blocks."""

    id: str
    start: datetime
    end: datetime
    is_active: bool
    is_locked: bool
    staff_id: str | None = None


@dataclass
class ConflictResult:
    ok: bool
    outcome: Outcome
    message: str | None = None
    conflict: Booking | BlockConflict | None = None


def _invalid(message: str) -> ConflictResult:
    return ConflictResult(ok=False, outcome="invalid", message=message)


def _to_naive_utc(dt: datetime) -> datetime:
    """Convert to naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    if dt.tzinfo is not None:
        return dt.astimezone(UTC).replace(tzinfo=None)
    return dt


def validate_check_input(
    session: AsyncSession | None,
    staff_id: str | None,
    start_date: Any,
    ordered_rows: Any,
) -> ConflictResult | None:
    """The "fix your input" result, or None when the check can go ahead."""
    if session is None:
        return _invalid(NO_DB_MESSAGE)
    if not staff_id:
        return _invalid(NO_STAFF_MESSAGE)
    if not isinstance(start_date, datetime):
        return _invalid(BAD_START_MESSAGE)
    if isinstance(ordered_rows, (str, bytes)) or not isinstance(ordered_rows, Sequence) or not ordered_rows:
        return _invalid(NO_ROWS_MESSAGE)
    return None


def _slot_bounds(slots: Sequence[ScheduleSlot]) -> list[tuple[datetime, datetime]]:
    return [(_to_naive_utc(s.start), _to_naive_utc(s.end)) for s in slots]


def is_missing_column_error(exc: BaseException) -> bool:
    """Whether a database error means a referenced column doesn't exist."""
    orig = getattr(exc, "orig", None) or exc
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == _UNDEFINED_COLUMN:
        return True
    msg = str(orig).lower()
    return "does not exist" in msg or "column" in msg


async def find_booking_conflict(
    session: AsyncSession,
    staff_id: str,
    slots: Sequence[ScheduleSlot],
    exclude_ids: Sequence[str] = (),
) -> Booking | None:
    """First booking of this stylist overlapping any slot, ignoring the rows being moved."""
    overlaps = [and_(Booking.start < end, Booking.end > start) for start, end in _slot_bounds(slots)]
    q = select(Booking).where(Booking.resource_id == staff_id, or_(false(), *overlaps))
    if exclude_ids:
        q = q.where(Booking.id.notin_(list(exclude_ids)))
    result = await session.execute(q.limit(1))
    return result.scalars().first()


def _blocks_query(staff_column: str, staff_id: str, slots: Sequence[ScheduleSlot]):
    # Lightweight table so the stylist column name can vary with the deployed schema
    blocks = table(
        ScheduleBlock.__tablename__,
        column("id", String),
        column("start", DateTime),
        column("end", DateTime),
        column("is_active", Boolean),
        column("is_locked", Boolean),
        column(staff_column, String),
    )
    staff_col = blocks.c[staff_column]
    groups = []
    for start, end in _slot_bounds(slots):
        overlap = and_(blocks.c.start < end, blocks.c.end > start)
        groups.append(and_(staff_col == staff_id, overlap))
        groups.append(and_(staff_col.is_(None), overlap))
    return (
        select(
            blocks.c.id,
            blocks.c.start,
            blocks.c.end,
            blocks.c.is_active,
            blocks.c.is_locked,
            staff_col.label("staff_id"),
        )
        .where(blocks.c.is_active == true(), or_(false(), *groups))
        .limit(1)
    )


async def _query_blocks(
    session: AsyncSession, staff_column: str, staff_id: str, slots: Sequence[ScheduleSlot]
) -> BlockConflict | None:
    # SAVEPOINT so a failed attempt doesn't abort the caller's transaction on Postgres
    async with session.begin_nested():
        result = await session.execute(_blocks_query(staff_column, staff_id, slots))
        row = result.mappings().first()
    if row is None:
        return None
    return BlockConflict(**row)


async def find_block_conflict(
    session: AsyncSession,
    staff_id: str,
    slots: Sequence[ScheduleSlot],
) -> BlockConflict | None:
    """First active block for this stylist, or salon-wide, overlapping any slot.

    Tries the configured stylist column first and retries once with the
    fallback name if the first one doesn't exist. Anything else propagates.
    """
    primary = settings.schedule_block_staff_column
    fallback = settings.schedule_block_staff_column_fallback
    try:
        return await _query_blocks(session, primary, staff_id, slots)
    except DBAPIError as e:
        if not is_missing_column_error(e) or fallback == primary:
            raise
        logger.warning(
            "schedule_blocks.%s not found (%s), retrying with %s", primary, e.orig, fallback
        )
    return await _query_blocks(session, fallback, staff_id, slots)


async def check_reschedule_availability(
    session: AsyncSession | None,
    staff_id: str | None,
    start_date: datetime | None,
    ordered_rows: Sequence[Any] | None,
    basket: Sequence[Any] | None = None,
    chemical_gap_min: int | None = None,
    include_blocks: bool = True,
) -> ConflictResult:
    """Can the rows be moved to start at start_date with this stylist?

    Returns ok, an "invalid" result for bad input (no query issued), or the
    first conflicting booking or schedule block.
    """
    invalid = validate_check_input(session, staff_id, start_date, ordered_rows)
    if invalid is not None:
        return invalid

    try:
        slots = build_slots(start_date, ordered_rows, basket, chemical_gap_min)
    except OverflowError:
        # durations or gap run past the last representable date
        return _invalid(BAD_START_MESSAGE)
    logger.debug("Checking %d slot(s) for stylist %s from %s", len(slots), staff_id, slots[0].start_iso)

    exclude_ids = [rid for rid in (get_field(r, "id") for r in ordered_rows) if rid]
    booking = await find_booking_conflict(session, staff_id, slots, exclude_ids)
    if booking is not None:
        logger.info("Booking conflict for stylist %s: booking %s", staff_id, booking.id)
        return ConflictResult(
            ok=False, outcome="booking_conflict", message=BOOKING_CONFLICT_MESSAGE, conflict=booking
        )

    if include_blocks:
        block = await find_block_conflict(session, staff_id, slots)
        if block is not None:
            logger.info("Schedule block conflict for stylist %s: block %s", staff_id, block.id)
            return ConflictResult(
                ok=False, outcome="block_conflict", message=BLOCK_CONFLICT_MESSAGE, conflict=block
            )

    return ConflictResult(ok=True, outcome="ok")


async def check_booking_availability(
    session: AsyncSession | None,
    staff_id: str | None,
    start_date: datetime | None,
    ordered_rows: Sequence[Any] | None,
    basket: Sequence[Any] | None = None,
    chemical_gap_min: int | None = None,
) -> ConflictResult:
    """Same as check_reschedule_availability but only against other bookings."""
    return await check_reschedule_availability(
        session,
        staff_id,
        start_date,
        ordered_rows,
        basket=basket,
        chemical_gap_min=chemical_gap_min,
        include_blocks=False,
    )

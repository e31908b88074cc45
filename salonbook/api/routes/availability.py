import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from salonbook.api.deps import get_session
from salonbook.api.schemas.availability import (
    ConflictInfo,
    RescheduleCheckRequest,
    RescheduleCheckResponse,
    SlotInfo,
    SlotPreviewRequest,
    SlotPreviewResponse,
)
from salonbook.models.booking import Booking
from salonbook.services.availability_service import (
    BAD_START_MESSAGE,
    ConflictResult,
    check_reschedule_availability,
    validate_check_input,
)
from salonbook.services.catalog_service import build_basket, load_booking_rows
from salonbook.services.slot_service import build_slots, slots_end

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/availability", tags=["availability"])


def _conflict_info(result: ConflictResult) -> ConflictInfo | None:
    c = result.conflict
    if c is None:
        return None
    if isinstance(c, Booking):
        return ConflictInfo(kind="booking", id=c.id, start=c.start, end=c.end, staff_id=c.resource_id)
    return ConflictInfo(
        kind="schedule_block", id=c.id, start=c.start, end=c.end, staff_id=c.staff_id, is_locked=c.is_locked
    )


@router.post("/slots", response_model=SlotPreviewResponse)
async def preview_slots(body: SlotPreviewRequest) -> SlotPreviewResponse:
    """Slots the services would occupy from `start`, with chemical processing gaps applied."""
    try:
        slots = build_slots(body.start, body.rows, body.basket, body.chemical_gap_minutes)
    except OverflowError:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=BAD_START_MESSAGE)
    return SlotPreviewResponse(
        slots=[SlotInfo(start=s.start, end=s.end) for s in slots],
        end=slots_end(slots),
    )


@router.post(
    "/reschedule-check",
    response_model=RescheduleCheckResponse,
    responses={status.HTTP_409_CONFLICT: {"model": RescheduleCheckResponse}},
)
async def reschedule_check(
    body: RescheduleCheckRequest,
    session: AsyncSession = Depends(get_session),
):
    """Check whether the given bookings can move to `start` with `staff_id`.

    422 for bad input, 409 with the conflicting booking or block, 200 when free.
    """
    # Input problems are reported before unknown ids
    invalid = validate_check_input(session, body.staff_id, body.start, body.booking_ids)
    if invalid is not None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=invalid.message)
    rows = await load_booking_rows(session, body.booking_ids)
    missing = sorted(set(body.booking_ids) - {r.id for r in rows})
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking not found: {', '.join(missing)}",
        )
    basket = None
    if body.basket_service_ids:
        basket = await build_basket(session, body.staff_id, body.basket_service_ids)
        if basket is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="One or more services not found",
            )
    result = await check_reschedule_availability(
        session,
        body.staff_id,
        body.start,
        rows,
        basket=basket,
        chemical_gap_min=body.chemical_gap_minutes,
        include_blocks=body.include_blocks,
    )
    if result.outcome == "invalid":
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=result.message)
    response = RescheduleCheckResponse(
        ok=result.ok,
        outcome=result.outcome,
        message=result.message,
        conflict=_conflict_info(result),
    )
    if not result.ok:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=response.model_dump(mode="json"))
    return response

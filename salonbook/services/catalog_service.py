from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salonbook.models.booking import Booking
from salonbook.models.service import BasketItem, Service, StaffService


async def load_booking_rows(session: AsyncSession, booking_ids: Sequence[str]) -> list[Booking]:
    """Booking rows being moved, in the order they run (by start)."""
    if not booking_ids:
        return []
    result = await session.execute(
        select(Booking).where(Booking.id.in_(list(booking_ids))).order_by(Booking.start, Booking.id)
    )
    return list(result.scalars().all())


async def build_basket(
    session: AsyncSession, staff_id: str, service_ids: Sequence[str]
) -> list[BasketItem] | None:
    """Basket items for the given services in the given order, using the stylist's
    active duration override where they have one. None if any service id is unknown."""
    ids = list(dict.fromkeys(service_ids))
    result = await session.execute(select(Service).where(Service.id.in_(ids)))
    services = {s.id: s for s in result.scalars().all()}
    if len(services) != len(ids):
        return None
    result = await session.execute(
        select(StaffService).where(
            StaffService.staff_id == staff_id,
            StaffService.service_id.in_(ids),
            StaffService.active == True,  # noqa: E712
        )
    )
    overrides = {link.service_id: link for link in result.scalars().all()}
    basket: list[BasketItem] = []
    for sid in service_ids:
        svc = services[sid]
        link = overrides.get(sid)
        duration = link.duration if link is not None and link.duration else svc.base_duration
        basket.append(
            BasketItem(
                service_id=svc.id,
                name=svc.name,
                title=svc.name,
                category=svc.category,
                duration=svc.base_duration,
                display_duration=duration,
                is_chemical=svc.is_chemical,
            )
        )
    return basket

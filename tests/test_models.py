"""
Tests for how booking and block instants are stored.
"""

from sqlalchemy import select

from conftest import ANNA, at, block, booking
from salonbook.models import Booking, ScheduleBlock


class TestNaiveUtcColumns:
    def test_columns_are_timestamp_without_time_zone(self):
        for model in (Booking, ScheduleBlock):
            for name in ("start", "end", "created_at"):
                assert model.__table__.c[name].type.timezone is False

    async def test_naive_instants_bind_and_round_trip(self, session, add):
        await add(booking("b1", ANNA, "09:00", "09:30"), block("k1", None, "12:00", "13:00"))

        found = await session.execute(select(Booking).where(Booking.start < at("09:15"), Booking.end > at("09:00")))
        blocks = await session.execute(select(ScheduleBlock).where(ScheduleBlock.start == at("12:00")))

        row = found.scalars().one()
        assert row.id == "b1"
        assert row.start == at("09:00")
        assert row.start.tzinfo is None
        assert blocks.scalars().one().id == "k1"

    def test_created_at_defaults_to_naive_utc(self):
        assert booking("b1", ANNA, "09:00", "09:30").created_at.tzinfo is None

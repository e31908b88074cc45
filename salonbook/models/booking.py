from datetime import UTC, datetime
from uuid import uuid4

from pydantic import NaiveDatetime
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return str(uuid4())


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class Booking(SQLModel, table=True):
    """One service line-item on a stylist's calendar. Rows sharing booking_id make up one visit."""

    __tablename__ = "bookings"
    id: str = Field(default_factory=_new_id, primary_key=True)
    booking_id: str | None = Field(default=None, index=True)
    client_id: str | None = Field(default=None, index=True)
    resource_id: str = Field(foreign_key="staff.id", index=True)  # the stylist
    service_id: str | None = Field(default=None, foreign_key="services.id")
    title: str | None = None
    category: str | None = None
    duration: int | None = None  # minutes
    price: float | None = None
    start: NaiveDatetime = Field(index=True, sa_type=DateTime)
    end: NaiveDatetime = Field(index=True, sa_type=DateTime)
    created_at: NaiveDatetime = Field(default_factory=_utc_naive_now, sa_type=DateTime)

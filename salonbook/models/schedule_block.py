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


class ScheduleBlock(SQLModel, table=True):
    """Time a stylist can't be booked. A block without staff_id closes the whole salon."""

    __tablename__ = "schedule_blocks"
    id: str = Field(default_factory=_new_id, primary_key=True)
    staff_id: str | None = Field(default=None, foreign_key="staff.id", index=True)
    start: NaiveDatetime = Field(index=True, sa_type=DateTime)
    end: NaiveDatetime = Field(index=True, sa_type=DateTime)
    is_active: bool = True
    is_locked: bool = False
    reason: str | None = None
    created_at: NaiveDatetime = Field(default_factory=_utc_naive_now, sa_type=DateTime)

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from salonbook.models.service import BasketItem

# A single service or processing gap never runs past a day
MAX_MINUTES = 24 * 60


class SlotRow(BaseModel):
    id: str | None = None
    title: str | None = None
    category: str | None = None
    duration: float | None = Field(default=None, le=MAX_MINUTES)  # minutes


class SlotPreviewRequest(BaseModel):
    start: datetime
    rows: list[SlotRow] = Field(min_length=1)
    basket: list[BasketItem] | None = None
    chemical_gap_minutes: int | None = Field(default=None, ge=0, le=MAX_MINUTES)


class SlotInfo(BaseModel):
    start: datetime
    end: datetime


class SlotPreviewResponse(BaseModel):
    slots: list[SlotInfo]
    end: datetime | None = None  # when the last service finishes


class RescheduleCheckRequest(BaseModel):
    # Optional so missing values get the checker's own messages
    staff_id: str | None = None
    start: datetime | None = None
    booking_ids: list[str] = Field(default_factory=list)
    basket_service_ids: list[str] | None = None
    chemical_gap_minutes: int | None = Field(default=None, ge=0, le=MAX_MINUTES)
    include_blocks: bool = True


class ConflictInfo(BaseModel):
    kind: Literal["booking", "schedule_block"]
    id: str
    start: datetime
    end: datetime
    staff_id: str | None = None
    is_locked: bool | None = None


class RescheduleCheckResponse(BaseModel):
    ok: bool
    outcome: Literal["ok", "invalid", "booking_conflict", "block_conflict"]
    message: str | None = None
    conflict: ConflictInfo | None = None

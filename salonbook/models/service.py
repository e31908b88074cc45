from uuid import uuid4

from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return str(uuid4())


class Service(SQLModel, table=True):
    __tablename__ = "services"
    id: str = Field(default_factory=_new_id, primary_key=True)
    name: str
    category: str | None = Field(default=None, index=True)
    base_duration: int = 30  # minutes
    base_price: float = 0
    # Needs a processing gap before the stylist's next service
    is_chemical: bool = False


class StaffService(SQLModel, table=True):
    """Per-stylist override of a catalog service (what they offer, how long it takes them)."""

    __tablename__ = "staff_services"
    id: str = Field(default_factory=_new_id, primary_key=True)
    staff_id: str = Field(foreign_key="staff.id", index=True)
    service_id: str = Field(foreign_key="services.id", index=True)
    duration: int | None = None
    price: float | None = None
    active: bool = True


class BasketItem(SQLModel):
    """A service as picked for a visit, with the stylist's own duration applied."""

    service_id: str | None = None
    name: str | None = None
    title: str | None = None
    category: str | None = None
    duration: int | None = None
    display_duration: int | None = None
    is_chemical: bool = False

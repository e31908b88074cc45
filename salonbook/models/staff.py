from uuid import uuid4

from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return str(uuid4())


class Staff(SQLModel, table=True):
    __tablename__ = "staff"
    id: str = Field(default_factory=_new_id, primary_key=True)
    name: str
    email: str | None = Field(default=None, index=True)
    is_active: bool = True

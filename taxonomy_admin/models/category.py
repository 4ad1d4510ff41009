from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, String
from sqlmodel import Field, SQLModel


def utc_now_naive() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class Category(SQLModel, table=True):
    __tablename__ = "categories"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(sa_column=Column(String(120), nullable=False, index=True))
    created_at: datetime = Field(
        default_factory=utc_now_naive,
        sa_column=Column(DateTime(timezone=False), nullable=False),
    )


class Subcategory(SQLModel, table=True):
    __tablename__ = "subcategories"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    category_id: UUID = Field(
        foreign_key="categories.id",
        ondelete="CASCADE",
        nullable=False,
        index=True,
    )
    name: str = Field(sa_column=Column(String(120), nullable=False, index=True))
    created_at: datetime = Field(
        default_factory=utc_now_naive,
        sa_column=Column(DateTime(timezone=False), nullable=False),
    )
